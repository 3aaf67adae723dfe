"""Entity: a search mirror sync that failed and awaits a retry."""

import enum

from pydantic import Field

from src.catalog.entities.core._base import Entity


class SyncOperation(str, enum.Enum):
    index = "index"
    delete = "delete"


class SyncStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"


class PendingSync(Entity):
    """A per-record mirror push that did not reach the search index."""

    product_id: int = Field(description="Catalog id of the product to re-sync")
    operation: SyncOperation
    error: str = Field(default="", description="Last error message")
    status: SyncStatus = SyncStatus.pending
