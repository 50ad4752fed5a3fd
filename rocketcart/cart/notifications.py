"""
Cart notifications.

The engine decides what to report; sinks decide how it reaches the user.
"""
from typing import Optional, Protocol

from rocketcart.errors import CartErrorKind, CartOperation
from rocketcart.logging import get_logger
from rocketcart.services.telegram_messaging import send_telegram_message

logger = get_logger(__name__)

MSG_STOCK_EXCEEDED = "stock_exceeded"

_MESSAGES = {
    MSG_STOCK_EXCEEDED: {
        "en": "Requested quantity is out of stock",
        "pt": "Quantidade solicitada fora de estoque",
    },
    CartOperation.ADD: {
        "en": "Error adding product",
        "pt": "Erro na adição do produto",
    },
    CartOperation.REMOVE: {
        "en": "Error removing product",
        "pt": "Erro na remoção do produto",
    },
    CartOperation.UPDATE: {
        "en": "Error changing product quantity",
        "pt": "Erro na alteração de quantidade do produto",
    },
}


def notification_message(operation: CartOperation, kind: CartErrorKind, lang: str = "en") -> str:
    """Map a failed operation to the text shown to the user."""
    key = MSG_STOCK_EXCEEDED if kind is CartErrorKind.STOCK_EXCEEDED else operation
    texts = _MESSAGES[key]
    return texts.get(lang, texts["en"])


class NotificationSink(Protocol):
    async def report_error(self, message: str) -> None:
        ...


class LoggingNotificationSink:
    """Report failures to the application log."""

    def __init__(self, logger_name: Optional[str] = None):
        self._logger = get_logger(logger_name or __name__)

    async def report_error(self, message: str) -> None:
        self._logger.warning(f"Cart notification: {message}")


class TelegramNotificationSink:
    """Deliver failures to a Telegram chat."""

    def __init__(self, bot_token: str, chat_id: int):
        self.bot_token = bot_token
        self.chat_id = chat_id

    async def report_error(self, message: str) -> None:
        sent = await send_telegram_message(self.chat_id, message, bot_token=self.bot_token)
        if not sent:
            logger.warning(f"Cart notification not delivered to chat {self.chat_id}: {message}")
