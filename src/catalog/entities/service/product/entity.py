"""Entity: Product."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from src.catalog.entities.core._base import Entity


class Product(Entity):
    """Product entity representing a catalog item.

    The catalog store is the system of record for products; the search
    mirror only ever holds a derived copy of these fields.
    """

    name: str = Field(min_length=1, description="Product name")
    brand: str = Field(min_length=1, description="Brand name")
    price: Decimal = Field(gt=0, description="Unit price, always positive")
    category: str = Field(min_length=1, description="Product category")
    color: str = Field(min_length=1, description="Color")
    size: str = Field(min_length=1, description="Size label")
    description: str | None = Field(default=None, description="Free-form description")

    def __eq__(self, other: Any) -> bool:
        """Compare products by business attributes, ignoring timestamps."""
        if not isinstance(other, Product):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.brand == other.brand
            and self.price == other.price
            and self.category == other.category
            and self.color == other.color
            and self.size == other.size
            and self.description == other.description
        )

    def __hash__(self) -> int:
        """Hash based on business attributes, ignoring timestamps."""
        return hash((
            self.id,
            self.name,
            self.brand,
            self.price,
            self.category,
            self.color,
            self.size,
            self.description,
        ))


class ProductCreate(BaseModel):
    """Fields accepted when creating a product."""

    name: str = Field(min_length=1)
    brand: str = Field(min_length=1)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category: str = Field(min_length=1)
    color: str = Field(min_length=1)
    size: str = Field(min_length=1)
    description: str | None = None


class ProductUpdate(BaseModel):
    """Partial update; only the fields that are sent are changed."""

    name: str | None = Field(default=None, min_length=1)
    brand: str | None = Field(default=None, min_length=1)
    price: Decimal | None = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category: str | None = Field(default=None, min_length=1)
    color: str | None = Field(default=None, min_length=1)
    size: str | None = Field(default=None, min_length=1)
    description: str | None = None


class ProductFilters(BaseModel):
    """Catalog store filters for product listings.

    String filters are case-insensitive substring matches; ``search`` matches
    any of name, brand or description.
    """

    name: str | None = None
    category: str | None = None
    brand: str | None = None
    color: str | None = None
    size: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    search: str | None = None
