"""Entity package: Product."""

from .entity import Product, ProductCreate, ProductFilters, ProductUpdate
from .repository import ProductRepository
from .table import ProductTable

__all__ = [
    "Product",
    "ProductCreate",
    "ProductFilters",
    "ProductRepository",
    "ProductTable",
    "ProductUpdate",
]
