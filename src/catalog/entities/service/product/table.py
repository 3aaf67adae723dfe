"""Product database table model."""

from decimal import Decimal

from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products.

    This represents how the Product entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "product"

    name: str = Field(index=True)
    brand: str = Field(index=True)
    price: Decimal = Field(max_digits=10, decimal_places=2)
    category: str = Field(index=True)
    color: str
    size: str
    description: str | None = None
