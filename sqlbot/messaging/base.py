"""
Base Message Gateway

Abstract interface for chat platforms the bot replies on.
"""

from abc import ABC, abstractmethod
from typing import Literal

ParseMode = Literal["HTML", "MarkdownV2"]


class MessagingError(Exception):
    """Delivering a message to the chat platform failed."""

    pass


class BaseMessageGateway(ABC):
    """Outbound messaging collaborator."""

    @abstractmethod
    async def send_message(self, chat_id: int, text: str, parse_mode: ParseMode = "HTML") -> None:
        """
        Send a message to a chat.

        Raises:
            MessagingError: If the platform rejects the message
        """
        pass  # pragma: no cover - abstract method

    @abstractmethod
    async def send_typing_action(self, chat_id: int) -> None:
        """Show a typing indicator. Best effort; must not raise."""
        pass  # pragma: no cover - abstract method

    async def aclose(self) -> None:
        """Release network resources."""
        return None
