"""Cart package: models, storage, notifications, and the cart engine."""
from .models import CartLine, dump_snapshot, parse_snapshot, summarize_cart
from .notifications import (
    LoggingNotificationSink,
    NotificationSink,
    TelegramNotificationSink,
    notification_message,
)
from .service import CartEngine, CartResult, build_cart_engine
from .storage import CartStore, MemoryCartStore, RedisCartStore, load_cart

__all__ = [
    "CartLine",
    "CartEngine",
    "CartResult",
    "CartStore",
    "MemoryCartStore",
    "RedisCartStore",
    "LoggingNotificationSink",
    "NotificationSink",
    "TelegramNotificationSink",
    "build_cart_engine",
    "dump_snapshot",
    "load_cart",
    "notification_message",
    "parse_snapshot",
    "summarize_cart",
]
