from sqlalchemy import func
from sqlmodel import Session, col, select

from src.catalog.entities.core._base import utc_now
from src.catalog.entities.service.search_sync.entity import (
    PendingSync,
    SyncOperation,
    SyncStatus,
)
from src.catalog.entities.service.search_sync.table import SearchSyncFailureTable


class SearchSyncFailureRepository:
    """Data-access layer for pending search syncs."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def record(self, product_id: int, operation: SyncOperation, error: str) -> PendingSync:
        row = SearchSyncFailureTable(product_id=product_id, operation=operation, error=error)
        self._session.add(row)
        self._session.flush()
        return PendingSync.model_validate(row)

    def pending(self) -> list[PendingSync]:
        """Pending rows, oldest first."""
        statement = (
            select(SearchSyncFailureTable)
            .where(SearchSyncFailureTable.status == SyncStatus.pending)
            .order_by(col(SearchSyncFailureTable.id).asc())
        )
        return [PendingSync.model_validate(row) for row in self._session.exec(statement)]

    def count_pending(self) -> int:
        statement = (
            select(func.count())
            .select_from(SearchSyncFailureTable)
            .where(SearchSyncFailureTable.status == SyncStatus.pending)
        )
        return self._session.exec(statement).one()

    def resolve(self, product_id: int | None = None) -> int:
        """Mark pending rows completed, for one product or for all of them."""
        statement = select(SearchSyncFailureTable).where(
            SearchSyncFailureTable.status == SyncStatus.pending
        )
        if product_id is not None:
            statement = statement.where(SearchSyncFailureTable.product_id == product_id)
        rows = self._session.exec(statement).all()
        for row in rows:
            row.status = SyncStatus.completed
            row.updated_at = utc_now()
            self._session.add(row)
        self._session.flush()
        return len(rows)
