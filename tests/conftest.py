"""Pytest configuration and fixtures"""
import os
from decimal import Decimal

import pytest

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from rocketcart.cart import CartEngine, CartLine, MemoryCartStore  # noqa: E402
from rocketcart.errors import ApiError  # noqa: E402
from rocketcart.services.models import Product, Stock  # noqa: E402

STORAGE_KEY = "@RocketShoes:cart"


class FakeShopApi:
    """Stock lookup + catalog over dicts. Missing ids raise ApiError like a 404."""

    def __init__(self, stock=None, products=None):
        self.stock = dict(stock or {})
        self.products = dict(products or {})
        self.stock_calls = []
        self.product_calls = []

    async def get_stock(self, product_id):
        self.stock_calls.append(product_id)
        if product_id not in self.stock:
            raise ApiError(f"Shop API error 404 for /stock/{product_id}", status_code=404)
        return Stock(id=product_id, amount=self.stock[product_id])

    async def get_product(self, product_id):
        self.product_calls.append(product_id)
        if product_id not in self.products:
            raise ApiError(f"Shop API error 404 for /products/{product_id}", status_code=404)
        return Product(**self.products[product_id])


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    async def report_error(self, message):
        self.messages.append(message)


class FailingStore(MemoryCartStore):
    """Memory store whose writes can be switched off."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False

    async def set(self, key, value):
        if self.fail_writes:
            raise ConnectionError("store offline")
        await super().set(key, value)


@pytest.fixture
def sample_products():
    """Sample catalog data"""
    return {
        1: {
            "id": 1,
            "title": "Tênis de Caminhada Leve Confortável",
            "price": 179.9,
            "image": "https://example.com/shoes1.jpg",
        },
        2: {
            "id": 2,
            "title": "Tênis VR Caminhada Confortável Detalhes Couro Masculino",
            "price": 139.9,
            "image": "https://example.com/shoes2.jpg",
        },
        3: {
            "id": 3,
            "title": "Tênis Adidas Duramo Lite 2.0",
            "price": 219.9,
            "image": "https://example.com/shoes3.jpg",
            "brand": "Adidas",
        },
    }


@pytest.fixture
def shop_api(sample_products):
    return FakeShopApi(stock={1: 5, 2: 2, 3: 1}, products=sample_products)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def store():
    return FailingStore()


@pytest.fixture
def make_engine(shop_api, store, notifier):
    """Build an engine sharing the fixtures' collaborators, optionally pre-filled."""
    def _make(lines=(), language="en"):
        return CartEngine(
            shop_api,
            shop_api,
            store,
            notifier,
            storage_key=STORAGE_KEY,
            language=language,
            lines=tuple(lines),
        )
    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()


def line(product_id, amount, price="10.00", title=None):
    """Shorthand CartLine for tests."""
    return CartLine(
        product_id=product_id,
        amount=amount,
        title=title or f"Product {product_id}",
        price=Decimal(price),
    )
