"""Outbound chat messaging."""

from sqlbot.messaging.base import BaseMessageGateway, MessagingError
from sqlbot.messaging.telegram import TelegramGateway

__all__ = ["BaseMessageGateway", "MessagingError", "TelegramGateway"]
