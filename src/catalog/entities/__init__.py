"""Entities module with hybrid entity-centric structure.

This module organizes entities by business concept rather than technical layer.
Each entity has its own package containing:
- entity.py: Domain model and input models
- table.py: Database persistence model
- repository.py: Data access layer

Importing this package registers every table with the SQLModel metadata.
"""

from .core.user import User, UserRepository, UserTable
from .service.product import Product, ProductRepository, ProductTable
from .service.search_sync import (
    PendingSync,
    SearchSyncFailureRepository,
    SearchSyncFailureTable,
)

__all__ = [
    "PendingSync",
    "Product",
    "ProductRepository",
    "ProductTable",
    "SearchSyncFailureRepository",
    "SearchSyncFailureTable",
    "User",
    "UserRepository",
    "UserTable",
]
