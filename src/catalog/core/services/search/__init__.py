"""Search mirror services."""

from .index_schema import ensure_products_index
from .query_executor import ProductSearchExecutor
from .search_client import SearchClientService
from .synchronizer import PendingSyncLog, SearchMirrorSynchronizer, product_document

__all__ = [
    "PendingSyncLog",
    "ProductSearchExecutor",
    "SearchClientService",
    "SearchMirrorSynchronizer",
    "ensure_products_index",
    "product_document",
]
