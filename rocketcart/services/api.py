"""
Shop API client.

Implements both cart collaborators over HTTP:
- Stock lookup:    GET {base}/stock/{product_id}    -> {"id", "amount"}
- Product catalog: GET {base}/products/{product_id} -> {"id", "title", "price", "image", ...}

Every failure (network, timeout, non-2xx, malformed JSON) is raised as ApiError.
"""
from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from rocketcart.config import Settings
from rocketcart.errors import ApiError, ERROR_API_BAD_PAYLOAD, ERROR_API_UNREACHABLE
from rocketcart.logging import get_logger, sanitize_id_for_logging
from rocketcart.services.models import Product, ProductId, Stock

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ShopApiClient:
    """Stock lookup and product catalog backed by the shop REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ShopApiClient":
        return cls(settings.shop_api_url, timeout=settings.shop_api_timeout)

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy creation of shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
                transport=self._transport,
            )
        return self._http_client

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "ShopApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_json(self, path: str, model: Type[ModelT]) -> ModelT:
        client = self._get_http_client()
        try:
            response = await client.get(path)
            response.raise_for_status()
            return model.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.warning(f"Shop API returned {e.response.status_code} for {path}")
            raise ApiError(
                f"Shop API error {e.response.status_code} for {path}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"Shop API network error for {path}: {e!r}")
            raise ApiError(f"{ERROR_API_UNREACHABLE}: {e!s}") from e
        except (ValueError, ValidationError) as e:
            # json decoding errors are ValueError subclasses
            logger.warning(f"Malformed Shop API payload for {path}: {e}")
            raise ApiError(ERROR_API_BAD_PAYLOAD) from e

    async def get_stock(self, product_id: ProductId) -> Stock:
        """Get currently available quantity for a product."""
        logger.debug(f"Stock lookup for product {sanitize_id_for_logging(product_id)}")
        return await self._get_json(f"/stock/{product_id}", Stock)

    async def get_product(self, product_id: ProductId) -> Product:
        """Get catalog metadata for a product."""
        logger.debug(f"Catalog lookup for product {sanitize_id_for_logging(product_id)}")
        return await self._get_json(f"/products/{product_id}", Product)
