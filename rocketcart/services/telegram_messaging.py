"""
Telegram message sending used by the Telegram notification sink.

Sends plain text through the Bot API with a short retry on transient errors.
"""

import asyncio

import httpx

from rocketcart.logging import get_logger

logger = get_logger(__name__)

NO_RESPONSE_BODY = "No response body"
PERMANENT_ERROR_CODES = {400, 401, 403, 404}
TELEGRAM_MAX_LENGTH = 4096


def _is_permanent_error(status_code: int) -> bool:
    """Check if error is permanent (no retry needed)."""
    return status_code in PERMANENT_ERROR_CODES


def _calculate_backoff_delay(attempt: int) -> float:
    """Calculate exponential backoff delay."""
    return float(0.5 * (2 ** attempt))


def _truncate_message(text: str, max_length: int = TELEGRAM_MAX_LENGTH) -> str:
    """Truncate message to Telegram's limit."""
    if len(text) <= max_length:
        return text

    logger.warning(f"Truncating message from {len(text)} to {max_length - 3} characters")
    return text[:max_length - 3] + "..."


async def send_telegram_message(
    chat_id: int,
    text: str,
    bot_token: str,
    retries: int = 2,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """
    Send a Telegram message.

    Args:
        chat_id: Telegram chat ID (user or group)
        text: Message text
        bot_token: Bot token
        retries: Number of retry attempts after the first one
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests)

    Returns:
        True if sent successfully, False otherwise
    """
    if not bot_token:
        logger.warning(f"No bot token configured for sending message to {chat_id}")
        return False

    url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
    payload = {"chat_id": chat_id, "text": _truncate_message(text)}
    last_error = None

    for attempt in range(retries + 1):
        try:
            async with httpx.AsyncClient(transport=transport) as client:
                response = await client.post(url, json=payload, timeout=timeout)

            if response.status_code == 200:
                logger.debug(f"Message sent successfully to {chat_id}")
                return True

            error_text = response.text[:200] if response.text else NO_RESPONSE_BODY
            logger.warning(
                f"Telegram API error for {chat_id}: status={response.status_code}, response={error_text}"
            )
            if _is_permanent_error(response.status_code):
                return False
            last_error = f"HTTP {response.status_code}"

        except httpx.TimeoutException:
            last_error = "Timeout"
            logger.warning(f"Timeout sending message to {chat_id} (attempt {attempt + 1}/{retries + 1})")
        except httpx.RequestError as e:
            last_error = f"Connection error: {e}"
            logger.warning(f"Connection error sending to {chat_id}: {e}")

        if attempt < retries:
            await asyncio.sleep(_calculate_backoff_delay(attempt))

    logger.error(f"Failed to send message to {chat_id} after {retries + 1} attempts: {last_error}")
    return False
