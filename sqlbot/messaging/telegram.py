"""
Telegram Message Gateway

Sends replies through the Telegram Bot API using httpx.
"""

import logging

import httpx

from sqlbot.messaging.base import BaseMessageGateway, MessagingError, ParseMode

logger = logging.getLogger(__name__)


class TelegramGateway(BaseMessageGateway):
    """
    Telegram Bot API client.

    Usage:
        gateway = TelegramGateway(bot_token="123:abc")
        await gateway.send_message(chat_id=42, text="<b>hi</b>")
        await gateway.aclose()
    """

    def __init__(
        self,
        bot_token: str,
        api_base: str = "https://api.telegram.org",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        if not bot_token:
            raise ValueError("Telegram bot token is required")
        self._api_url = f"{api_base.rstrip('/')}/bot{bot_token}"
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send_message(self, chat_id: int, text: str, parse_mode: ParseMode = "HTML") -> None:
        payload = {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
        }
        try:
            response = await self._client.post(f"{self._api_url}/sendMessage", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Telegram sendMessage failed for chat {chat_id}: {e}")
            raise MessagingError(f"Telegram API unreachable: {e}") from e

        if response.is_error:
            logger.error(
                f"Telegram API rejected message for chat {chat_id}",
                extra={"status_code": response.status_code},
            )
            raise MessagingError(f"Telegram API error: {response.text}")

        logger.debug(f"Sent message to chat {chat_id} ({len(text)} chars)")

    async def send_typing_action(self, chat_id: int) -> None:
        try:
            await self._client.post(
                f"{self._api_url}/sendChatAction",
                json={"chat_id": chat_id, "action": "typing"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Typing indicator failed for chat {chat_id}: {e}")

    async def aclose(self) -> None:
        await self._client.aclose()

    def __repr__(self) -> str:
        return "<TelegramGateway>"
