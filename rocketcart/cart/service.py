"""Cart engine: stock-checked cart mutations with snapshot persistence."""
import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from rocketcart.config import DEFAULT_CART_STORAGE_KEY, Settings, load_settings
from rocketcart.db import get_redis
from rocketcart.errors import CartErrorKind, CartOperation
from rocketcart.logging import get_logger, sanitize_id_for_logging
from rocketcart.services.api import ShopApiClient
from rocketcart.services.models import Product, ProductId, Stock
from .models import CartLine, CartLines, dump_snapshot, find_line, summarize_cart
from .notifications import (
    LoggingNotificationSink,
    NotificationSink,
    TelegramNotificationSink,
    notification_message,
)
from .storage import CartStore, MemoryCartStore, RedisCartStore, load_cart

logger = get_logger(__name__)

T = TypeVar("T")


class StockLookup(Protocol):
    async def get_stock(self, product_id: ProductId) -> Stock:
        ...


class ProductCatalog(Protocol):
    async def get_product(self, product_id: ProductId) -> Product:
        ...


@dataclass(frozen=True)
class CartResult:
    """Outcome of a cart operation. ``lines`` is the cart after the call."""
    operation: CartOperation
    lines: CartLines
    error: Optional[CartErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _check_stock(requested: int, stock: Stock) -> Optional[CartErrorKind]:
    if requested > stock.amount:
        return CartErrorKind.STOCK_EXCEEDED
    return None


def _with_amount(lines: CartLines, product_id: ProductId, amount: int) -> CartLines:
    return tuple(
        line.with_amount(amount) if line.product_id == product_id else line
        for line in lines
    )


class CartEngine:
    """
    Owns the cart and is the only writer of its snapshot.

    Every mutation runs read -> validate -> commit under one lock, so concurrent
    calls are applied one after another. A commit writes the snapshot first and
    only then swaps the in-memory cart; if the write fails the cart is left as it
    was. Operations never raise: failures are returned in ``CartResult.error``
    and reported to the notification sink once the lock has been released.
    """

    def __init__(
        self,
        stock: StockLookup,
        catalog: ProductCatalog,
        store: CartStore,
        notifier: NotificationSink,
        *,
        storage_key: str = DEFAULT_CART_STORAGE_KEY,
        language: str = "en",
        lines: CartLines = (),
    ):
        self._stock = stock
        self._catalog = catalog
        self._store = store
        self._notifier = notifier
        self.storage_key = storage_key
        self.language = language
        self._lines: CartLines = tuple(lines)
        self._lock = asyncio.Lock()

    @classmethod
    async def create(
        cls,
        stock: StockLookup,
        catalog: ProductCatalog,
        store: CartStore,
        notifier: NotificationSink,
        *,
        storage_key: str = DEFAULT_CART_STORAGE_KEY,
        language: str = "en",
    ) -> "CartEngine":
        """Build an engine with the cart restored from the store."""
        lines = await load_cart(store, storage_key)
        logger.info(f"Cart restored from {storage_key!r} with {len(lines)} line(s)")
        return cls(
            stock,
            catalog,
            store,
            notifier,
            storage_key=storage_key,
            language=language,
            lines=lines,
        )

    def get_cart(self) -> CartLines:
        """Current committed cart, in insertion order."""
        return self._lines

    def summary(self) -> dict:
        return summarize_cart(self._lines)

    async def add_product(self, product_id: ProductId) -> CartResult:
        """Add one unit, creating the line from the catalog if needed."""
        async with self._lock:
            result = await self._add(product_id)
        await self._report(result)
        return result

    async def remove_product(self, product_id: ProductId) -> CartResult:
        """Remove the product's line. Removing a product not in the cart is an error."""
        async with self._lock:
            result = await self._remove(product_id)
        await self._report(result)
        return result

    async def update_product_amount(self, product_id: ProductId, amount: int) -> CartResult:
        """
        Set the product's amount.

        ``amount <= 0`` is ignored without notification (a decrement past one).
        The amount is still checked against stock when the product is not in the
        cart; if it passes, nothing changes and no line is created.
        """
        if amount <= 0:
            return CartResult(CartOperation.UPDATE, self._lines)

        async with self._lock:
            result = await self._update(product_id, amount)
        await self._report(result)
        return result

    async def _add(self, product_id: ProductId) -> CartResult:
        op = CartOperation.ADD
        current = self._lines
        existing = find_line(current, product_id)
        requested = existing.amount + 1 if existing else 1

        stock = await self._lookup(self._stock.get_stock, product_id, "Stock")
        if stock is None:
            return self._fail(op, CartErrorKind.LOOKUP_FAILURE, product_id)

        error = _check_stock(requested, stock)
        if error:
            return self._fail(op, error, product_id)

        if existing:
            next_lines = _with_amount(current, product_id, requested)
        else:
            product = await self._lookup(self._catalog.get_product, product_id, "Catalog")
            if product is None:
                return self._fail(op, CartErrorKind.LOOKUP_FAILURE, product_id)
            next_lines = current + (CartLine.from_product(product, requested, product_id=product_id),)

        return await self._commit(op, next_lines, product_id)

    async def _remove(self, product_id: ProductId) -> CartResult:
        op = CartOperation.REMOVE
        current = self._lines
        if find_line(current, product_id) is None:
            return self._fail(op, CartErrorKind.NOT_FOUND, product_id)

        next_lines = tuple(line for line in current if line.product_id != product_id)
        return await self._commit(op, next_lines, product_id)

    async def _update(self, product_id: ProductId, amount: int) -> CartResult:
        op = CartOperation.UPDATE
        stock = await self._lookup(self._stock.get_stock, product_id, "Stock")
        if stock is None:
            return self._fail(op, CartErrorKind.LOOKUP_FAILURE, product_id)

        error = _check_stock(amount, stock)
        if error:
            return self._fail(op, error, product_id)

        current = self._lines
        if find_line(current, product_id) is None:
            logger.debug(f"Update ignored, product {sanitize_id_for_logging(product_id)} not in cart")
            return CartResult(op, current)

        return await self._commit(op, _with_amount(current, product_id, amount), product_id)

    async def _lookup(
        self,
        fetch: Callable[[ProductId], Awaitable[T]],
        product_id: ProductId,
        source: str,
    ) -> Optional[T]:
        try:
            return await fetch(product_id)
        except Exception:
            logger.exception(f"{source} lookup failed for product {sanitize_id_for_logging(product_id)}")
            return None

    async def _commit(self, op: CartOperation, next_lines: CartLines, product_id: ProductId) -> CartResult:
        snapshot = dump_snapshot(next_lines)
        try:
            await self._store.set(self.storage_key, snapshot)
        except Exception:
            logger.exception(f"Cart snapshot write failed during {op.value}, keeping previous cart")
            return self._fail(op, CartErrorKind.PERSISTENCE_FAILURE, product_id)

        self._lines = next_lines
        logger.info(
            f"Cart {op.value} committed for product {sanitize_id_for_logging(product_id)}: "
            f"{len(next_lines)} line(s)"
        )
        return CartResult(op, next_lines)

    def _fail(self, op: CartOperation, kind: CartErrorKind, product_id: ProductId) -> CartResult:
        logger.warning(
            f"Cart {op.value} aborted for product {sanitize_id_for_logging(product_id)}: {kind.value}"
        )
        return CartResult(op, self._lines, kind)

    async def _report(self, result: CartResult) -> None:
        # Called with the cart lock released
        if result.ok:
            return
        message = notification_message(result.operation, result.error, self.language)
        try:
            await self._notifier.report_error(message)
        except Exception:
            logger.exception("Notification sink failed")


def build_notifier(settings: Settings) -> NotificationSink:
    if settings.telegram_enabled:
        return TelegramNotificationSink(settings.telegram_token, settings.telegram_chat_id)
    return LoggingNotificationSink()


def build_store(settings: Settings) -> CartStore:
    if settings.storage_backend == "memory":
        return MemoryCartStore()
    return RedisCartStore(get_redis(settings), ttl_seconds=settings.cart_ttl_seconds)


async def build_cart_engine(
    settings: Optional[Settings] = None,
    api: Optional[ShopApiClient] = None,
) -> CartEngine:
    """
    Wire a CartEngine from settings.

    The caller owns ``api`` and closes it; when omitted a new client is created.
    """
    settings = settings or load_settings()
    api = api or ShopApiClient.from_settings(settings)
    return await CartEngine.create(
        api,
        api,
        build_store(settings),
        build_notifier(settings),
        storage_key=settings.storage_key,
        language=settings.notify_language,
    )
