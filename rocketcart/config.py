"""Environment-driven settings for the cart engine and its collaborators."""
import os
from dataclasses import dataclass
from typing import Optional

from rocketcart.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SHOP_API_URL = "http://localhost:3333"
DEFAULT_CART_STORAGE_KEY = "@RocketShoes:cart"
STORAGE_BACKENDS = ("redis", "memory")
NOTIFY_LANGUAGES = ("en", "pt")


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Build with ``load_settings()``."""
    shop_api_url: str = DEFAULT_SHOP_API_URL
    shop_api_timeout: float = 10.0
    storage_backend: str = "redis"
    storage_key: str = DEFAULT_CART_STORAGE_KEY
    cart_ttl_seconds: Optional[int] = None
    redis_url: str = ""
    redis_token: str = ""
    notify_language: str = "en"
    telegram_token: str = ""
    telegram_chat_id: Optional[int] = None

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.telegram_token) and self.telegram_chat_id is not None


def _parse_float(name: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def _parse_optional_int(name: str, raw: str) -> Optional[int]:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_settings(environ: Optional[dict] = None) -> Settings:
    """
    Read settings from the environment.

    Args:
        environ: Mapping to read instead of ``os.environ`` (tests)

    Returns:
        Settings instance

    Raises:
        ValueError: If a variable holds an invalid value
    """
    env = os.environ if environ is None else environ

    backend = env.get("CART_STORAGE_BACKEND", "redis").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ValueError(f"CART_STORAGE_BACKEND must be one of {STORAGE_BACKENDS}, got {backend!r}")

    language = env.get("NOTIFY_LANGUAGE", "en").split("-")[0].lower()
    if language not in NOTIFY_LANGUAGES:
        logger.warning(f"Unsupported NOTIFY_LANGUAGE {language!r}, falling back to en")
        language = "en"

    ttl = _parse_optional_int("CART_TTL_SECONDS", env.get("CART_TTL_SECONDS", "").strip())
    if ttl is not None and ttl <= 0:
        raise ValueError("CART_TTL_SECONDS must be positive")

    return Settings(
        shop_api_url=env.get("SHOP_API_URL", DEFAULT_SHOP_API_URL).rstrip("/"),
        shop_api_timeout=_parse_float("SHOP_API_TIMEOUT", env.get("SHOP_API_TIMEOUT", "10")),
        storage_backend=backend,
        storage_key=env.get("CART_STORAGE_KEY", DEFAULT_CART_STORAGE_KEY),
        cart_ttl_seconds=ttl,
        redis_url=env.get("UPSTASH_REDIS_REST_URL", ""),
        redis_token=env.get("UPSTASH_REDIS_REST_TOKEN", ""),
        notify_language=language,
        telegram_token=env.get("TELEGRAM_TOKEN", ""),
        telegram_chat_id=_parse_optional_int(
            "TELEGRAM_NOTIFY_CHAT_ID", env.get("TELEGRAM_NOTIFY_CHAT_ID", "").strip()
        ),
    )
