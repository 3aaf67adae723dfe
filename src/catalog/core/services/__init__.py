"""Core services exports."""

# Database Service
from .database.db_manage import DbManageService
from .database.db_session import DbSessionService

# Catalog Services
from .product.product_service import ProductService

# Search Services
from .search import (
    PendingSyncLog,
    ProductSearchExecutor,
    SearchClientService,
    SearchMirrorSynchronizer,
)
from .user.user_service import UserService

__all__ = [
    # Database Service
    "DbManageService",
    "DbSessionService",
    # Search Services
    "PendingSyncLog",
    "ProductSearchExecutor",
    "SearchClientService",
    "SearchMirrorSynchronizer",
    # Catalog Services
    "ProductService",
    "UserService",
]
