"""
Tests for cart models and snapshots
"""

import json
from decimal import Decimal

import pytest

from rocketcart.cart import CartLine, dump_snapshot, parse_snapshot, summarize_cart
from rocketcart.services.models import Product


class TestCartLine:
    """Tests for CartLine dataclass."""

    def test_create_cart_line(self):
        """Test creating a cart line."""
        item = CartLine(product_id=1, amount=2, title="Tênis", price=179.9)

        assert item.product_id == 1
        assert item.amount == 2
        assert item.price == Decimal("179.9")

    def test_subtotal_calculation(self):
        """Test subtotal for amount."""
        item = CartLine(product_id=1, amount=3, title="Test", price="139.90")

        assert item.subtotal == Decimal("419.70")

    def test_with_amount_keeps_catalog_fields(self):
        """Changing the amount must not touch the catalog snapshot."""
        item = CartLine(product_id=1, amount=1, title="Test", price="10", image="a.jpg", extra={"brand": "X"})

        updated = item.with_amount(4)

        assert updated.amount == 4
        assert updated.title == "Test"
        assert updated.image == "a.jpg"
        assert updated.extra == {"brand": "X"}
        assert item.amount == 1

    def test_from_product(self):
        """Test snapshotting catalog data into a line."""
        product = Product(id=3, title="Duramo", price=219.9, image="d.jpg", brand="Adidas")

        item = CartLine.from_product(product)

        assert item.product_id == 3
        assert item.amount == 1
        assert item.price == Decimal("219.9")
        assert item.extra == {"brand": "Adidas"}

    def test_to_dict(self):
        """Test serialization to the flat product shape."""
        item = CartLine(product_id=1, amount=1, title="Test", price="100.00", extra={"brand": "X"})

        data = item.to_dict()
        assert data == {
            "id": 1,
            "title": "Test",
            "price": "100.00",
            "image": "",
            "amount": 1,
            "brand": "X",
        }

    def test_from_dict(self):
        """Test deserialization from dict."""
        data = {"id": 1, "title": "Test", "price": 100.0, "image": "x.jpg", "amount": 2}

        item = CartLine.from_dict(data)
        assert item.product_id == 1
        assert item.amount == 2
        assert item.price == Decimal("100.0")
        assert item.extra == {}

    @pytest.mark.parametrize("data", [
        {"title": "no id", "amount": 1},
        {"id": 1, "title": "no amount"},
        {"id": 1, "amount": "2"},
        {"id": None, "amount": 1},
        {"id": 1, "amount": True},
        {"id": 1, "amount": 1, "price": "NaN"},
        {"id": 1, "amount": 1, "price": "Infinity"},
        {"id": 1, "amount": 1, "price": None},
        {"id": 1, "amount": 1, "price": "abc"},
    ])
    def test_from_dict_rejects_malformed(self, data):
        """Malformed entries raise instead of producing a half-built line."""
        with pytest.raises((KeyError, TypeError, ValueError)):
            CartLine.from_dict(data)


class TestSnapshot:
    """Tests for snapshot serialization."""

    def test_snapshot_round_trip(self):
        """Dump then parse gives equal lines in the same order."""
        lines = [
            CartLine(product_id=2, amount=1, title="B", price="139.90"),
            CartLine(product_id=1, amount=3, title="A", price="179.90", extra={"brand": "X"}),
            CartLine(product_id="sku-9", amount=2, title="C", price="5"),
        ]

        restored = parse_snapshot(dump_snapshot(lines))

        assert restored == lines

    def test_snapshot_is_deterministic(self):
        """Same lines always serialize to the same string."""
        lines = [CartLine(product_id=1, amount=1, title="A", price="1.50")]

        assert dump_snapshot(lines) == dump_snapshot(list(lines))

    def test_snapshot_is_json_list(self):
        """The snapshot is a plain JSON list readable by other clients."""
        data = json.loads(dump_snapshot([CartLine(product_id=1, amount=2, title="A", price="1")]))

        assert data == [{"id": 1, "title": "A", "price": "1", "image": "", "amount": 2}]

    def test_parse_rejects_non_list(self):
        """A JSON object is not a cart."""
        with pytest.raises(TypeError):
            parse_snapshot('{"id": 1}')

    def test_parse_rejects_invalid_json(self):
        """Broken JSON raises ValueError."""
        with pytest.raises(ValueError):
            parse_snapshot("[{")


class TestSummary:
    """Tests for cart totals."""

    def test_empty_summary(self):
        """Test summary of an empty cart."""
        summary = summarize_cart(())

        assert summary["is_empty"] is True
        assert summary["total_items"] == 0
        assert summary["total"] == Decimal("0.00")

    def test_summary_with_items(self):
        """Test totals over multiple lines."""
        lines = (
            CartLine(product_id=1, amount=2, title="A", price="100"),
            CartLine(product_id=2, amount=1, title="B", price="200"),
        )

        summary = summarize_cart(lines)

        assert summary["is_empty"] is False
        assert summary["line_count"] == 2
        assert summary["total_items"] == 3
        assert summary["total"] == Decimal("400.00")
