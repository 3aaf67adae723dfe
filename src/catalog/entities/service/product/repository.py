"""Product repository: data access for the catalog store."""

from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_
from sqlmodel import Session, col, select

from src.catalog.entities.core._base import utc_now
from src.catalog.entities.service.product.entity import Product, ProductFilters
from src.catalog.entities.service.product.table import ProductTable

_SUBSTRING_FILTERS = ("name", "category", "brand", "color", "size")


def _filter_clauses(filters: ProductFilters) -> list[Any]:
    clauses: list[Any] = []
    for field_name in _SUBSTRING_FILTERS:
        value = getattr(filters, field_name)
        if value:
            column = col(getattr(ProductTable, field_name))
            clauses.append(column.icontains(value, autoescape=True))

    if filters.min_price is not None:
        clauses.append(col(ProductTable.price) >= filters.min_price)
    if filters.max_price is not None:
        clauses.append(col(ProductTable.price) <= filters.max_price)

    if filters.search:
        term = filters.search
        clauses.append(
            or_(
                col(ProductTable.name).icontains(term, autoescape=True),
                col(ProductTable.brand).icontains(term, autoescape=True),
                col(ProductTable.description).icontains(term, autoescape=True),
            )
        )
    return clauses


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, values: dict[str, Any]) -> Product:
        """Insert a product and flush so the store assigns its id."""
        row = ProductTable(**values)
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row)

    def get(self, product_id: int) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return Product.model_validate(row)

    def update(self, product_id: int, changes: dict[str, Any]) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        for field_name, value in changes.items():
            setattr(row, field_name, value)
        row.updated_at = utc_now()
        self._session.add(row)
        self._session.flush()
        return Product.model_validate(row)

    def delete(self, product_id: int) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_all(self) -> list[Product]:
        """Every product, ordered by id ascending."""
        statement = select(ProductTable).order_by(col(ProductTable.id).asc())
        return [Product.model_validate(row) for row in self._session.exec(statement)]

    def find(
        self, filters: ProductFilters, offset: int, limit: int
    ) -> tuple[list[Product], int]:
        """Return one page of matching products, newest first, and the total count."""
        clauses = _filter_clauses(filters)

        statement = (
            select(ProductTable)
            .where(*clauses)
            .order_by(col(ProductTable.created_at).desc(), col(ProductTable.id).desc())
            .offset(offset)
            .limit(limit)
        )
        products = [Product.model_validate(row) for row in self._session.exec(statement)]

        count_statement = select(func.count()).select_from(ProductTable).where(*clauses)
        total = self._session.exec(count_statement).one()
        return products, total

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(ProductTable)).one()

    def distinct_values(self, field_name: str) -> list[str]:
        """Distinct values of a string column in ascending order."""
        column = col(getattr(ProductTable, field_name))
        statement = select(column).distinct().order_by(column.asc())
        return list(self._session.exec(statement).all())

    def average_price(self) -> Decimal | None:
        value = self._session.exec(select(func.avg(ProductTable.price))).one()
        if value is None:
            return None
        return Decimal(str(value))
