"""API Models - Pydantic models for stock and catalog payloads."""
from decimal import Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict, field_validator

from rocketcart.services.money import parse_decimal

ProductId = Union[int, str]


class Stock(BaseModel):
    """Available quantity reported for a product. Never stored."""
    id: ProductId
    amount: int

    model_config = ConfigDict(extra="ignore")


class Product(BaseModel):
    """Catalog entry. Unknown fields are kept so they end up in the cart snapshot."""
    id: ProductId
    title: str
    price: Decimal
    image: str = ""

    model_config = ConfigDict(extra="allow")

    @field_validator("price", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return parse_decimal(v)

    @property
    def extra_fields(self) -> dict:
        return dict(self.model_extra or {})
