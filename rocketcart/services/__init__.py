"""External collaborators: shop API, money helpers, Telegram delivery."""
from .api import ShopApiClient
from .models import Product, ProductId, Stock

__all__ = ["ShopApiClient", "Product", "ProductId", "Stock"]
