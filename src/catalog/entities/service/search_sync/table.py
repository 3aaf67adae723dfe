"""Pending search sync table model."""

from sqlmodel import Field

from src.catalog.entities.core._base import EntityTable
from src.catalog.entities.service.search_sync.entity import SyncOperation, SyncStatus


class SearchSyncFailureTable(EntityTable, table=True):
    """Durable record of mirror pushes that failed after the store commit."""

    __tablename__ = "search_sync_failure"

    product_id: int = Field(index=True)
    operation: SyncOperation
    error: str = ""
    status: SyncStatus = Field(default=SyncStatus.pending, index=True)
