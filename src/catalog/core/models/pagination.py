"""Pagination envelope shared by store and search results."""

import math

from pydantic import BaseModel

from src.catalog.core.exceptions import CatalogValidationError
from src.catalog.entities.core.user import User
from src.catalog.entities.service.product import Product


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


def page_offset(page: int, limit: int) -> int:
    """Row offset for a 1-based page, validating the window."""
    if page < 1:
        raise CatalogValidationError("page must be >= 1")
    if limit < 1:
        raise CatalogValidationError("limit must be >= 1")
    return (page - 1) * limit


class ProductPage(BaseModel):
    products: list[Product]
    pagination: Pagination


class UserPage(BaseModel):
    users: list[User]
    pagination: Pagination
