"""Entity package: pending search syncs."""

from .entity import PendingSync, SyncOperation, SyncStatus
from .repository import SearchSyncFailureRepository
from .table import SearchSyncFailureTable

__all__ = [
    "PendingSync",
    "SearchSyncFailureRepository",
    "SearchSyncFailureTable",
    "SyncOperation",
    "SyncStatus",
]
