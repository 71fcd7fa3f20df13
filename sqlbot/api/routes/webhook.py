"""
Telegram Webhook Route

Receives Telegram updates, answers text messages through the question
pipeline and replies in the originating chat.
"""

import hmac
import logging

from fastapi import APIRouter, Header, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from sqlbot.messaging.base import MessagingError
from sqlbot.models.api import TelegramUpdate, WebhookResponse
from sqlbot.models.query import IncomingQuestion

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/telegram/webhook", response_model=WebhookResponse)
async def telegram_webhook(
    request: Request,
    x_telegram_bot_api_secret_token: str | None = Header(default=None),
):
    """
    Handle one Telegram update.

    Returns:
        200 {"ok": true} for updates without message text
        200 {"ok": true, "result": <outcome>} once the reply is sent
        400 for an empty or malformed body
        403 when the webhook secret does not match
        500 when the reply cannot be delivered
        503 when the pipeline is not initialized
    """
    from sqlbot.api.main import app_state, get_messenger, get_pipeline

    expected_secret = app_state.get("webhook_secret")
    if expected_secret and not hmac.compare_digest(
        x_telegram_bot_api_secret_token or "", expected_secret
    ):
        logger.warning("Rejected webhook call with invalid secret token")
        return _error(status.HTTP_403_FORBIDDEN, "Invalid secret token")

    body = await request.body()
    if not body.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Empty body")

    try:
        update = TelegramUpdate.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"Malformed Telegram update: {e.error_count()} errors")
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid update")

    message = update.message
    if message is None or not message.text:
        logger.info("Ignored non-text update")
        return JSONResponse(content={"ok": True})

    chat_id = message.chat.id
    logger.info(f"Processing question from chat {chat_id}: {message.text[:100]}")

    try:
        pipeline = get_pipeline()
    except RuntimeError as e:
        logger.error(f"Webhook called before startup completed: {e}")
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))

    outcome = await pipeline.process(
        IncomingQuestion(chat_id=chat_id, question=message.text, message_id=message.message_id)
    )

    messenger = get_messenger()
    if messenger is None:
        logger.warning(f"No Telegram gateway configured; reply to chat {chat_id} not sent")
    else:
        try:
            await messenger.send_message(chat_id, outcome.formatted_response, parse_mode="HTML")
        except MessagingError as e:
            logger.error(f"Failed to deliver reply to chat {chat_id}: {e}")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return WebhookResponse(ok=True, result=outcome)
