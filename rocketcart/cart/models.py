"""Cart line model and snapshot (de)serialization."""
import json
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, Sequence, Tuple

from rocketcart.services.models import Product, ProductId
from rocketcart.services.money import multiply, parse_decimal, round_money, to_decimal

# Keys written for every line; anything else in a snapshot line goes to ``extra``
_LINE_KEYS = ("id", "title", "price", "image", "amount")

CartLines = Tuple["CartLine", ...]


@dataclass(frozen=True)
class CartLine:
    """
    One product in the cart.

    Catalog fields are a snapshot taken when the line was created and are not
    refreshed afterwards. ``amount`` is always at least 1.
    """
    product_id: ProductId
    amount: int
    title: str = ""
    price: Decimal = Decimal("0")
    image: str = ""
    extra: dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "price", to_decimal(self.price))

    @classmethod
    def from_product(cls, product: Product, amount: int = 1, product_id: ProductId | None = None) -> "CartLine":
        """Snapshot catalog fields. ``product_id`` overrides the id echoed by the catalog."""
        return cls(
            product_id=product.id if product_id is None else product_id,
            amount=amount,
            title=product.title,
            price=product.price,
            image=product.image,
            extra=product.extra_fields,
        )

    @property
    def subtotal(self) -> Decimal:
        """Total price for all units."""
        return round_money(multiply(self.price, self.amount))

    def with_amount(self, amount: int) -> "CartLine":
        return replace(self, amount=amount)

    def to_dict(self) -> dict:
        """Convert to the snapshot shape (flat product fields plus ``amount``)."""
        data = dict(self.extra)
        data.update({
            "id": self.product_id,
            "title": self.title,
            "price": str(self.price),
            "image": self.image,
            "amount": self.amount,
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from a snapshot entry.

        Raises:
            KeyError, TypeError, ValueError: If the entry is malformed
        """
        product_id = data["id"]
        if isinstance(product_id, bool) or not isinstance(product_id, (int, str)):
            raise TypeError(f"Invalid product id {product_id!r}")
        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise TypeError(f"Invalid amount {amount!r}")
        return cls(
            product_id=product_id,
            amount=amount,
            title=str(data.get("title", "")),
            price=parse_decimal(data.get("price", 0)),
            image=str(data.get("image", "")),
            extra={k: v for k, v in data.items() if k not in _LINE_KEYS},
        )


def find_line(lines: Sequence[CartLine], product_id: ProductId) -> CartLine | None:
    return next((line for line in lines if line.product_id == product_id), None)


def dump_snapshot(lines: Iterable[CartLine]) -> str:
    """Serialize lines into the stored snapshot. Same lines always give the same string."""
    return json.dumps([line.to_dict() for line in lines], ensure_ascii=False, separators=(",", ":"))


def parse_snapshot(raw: str | bytes) -> list[CartLine]:
    """
    Parse a stored snapshot.

    Raises:
        ValueError, KeyError, TypeError: If the snapshot is not a list of valid lines
            (undecodable bytes raise UnicodeDecodeError, a ValueError)
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    data = json.loads(raw)
    if not isinstance(data, list):
        raise TypeError("Cart snapshot must be a JSON list")
    return [CartLine.from_dict(item) for item in data]


def summarize_cart(lines: Sequence[CartLine]) -> dict:
    """Cart totals for display."""
    return {
        "is_empty": not lines,
        "line_count": len(lines),
        "total_items": sum(line.amount for line in lines),
        "total": round_money(sum((line.subtotal for line in lines), Decimal("0"))),
    }
