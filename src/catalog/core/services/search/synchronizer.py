"""Best-effort mirroring of product writes into the search index."""

from typing import Any

from elasticsearch import ApiError, NotFoundError, TransportError
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.catalog.core.exceptions import SearchBackendError, SearchSyncError
from src.catalog.core.models.search import ResyncSummary, RetrySummary
from src.catalog.core.services.database.db_session import DbSessionService
from src.catalog.core.services.search.search_client import (
    SearchClientService,
    describe_search_error,
)
from src.catalog.entities.service.product import Product, ProductRepository
from src.catalog.entities.service.search_sync import (
    PendingSync,
    SearchSyncFailureRepository,
    SyncOperation,
)

_BACKEND_ERRORS = (ApiError, TransportError, SearchBackendError)


def product_document(product: Product) -> dict[str, Any]:
    """Search document source for a product; the id goes in ``_id``."""
    return {
        "name": product.name,
        "brand": product.brand,
        "price": float(product.price),
        "category": product.category,
        "color": product.color,
        "size": product.size,
        "description": product.description,
        "created_at": product.created_at.isoformat(),
        "updated_at": product.updated_at.isoformat(),
    }


class PendingSyncLog:
    """Durable record of per-record syncs that did not reach the index.

    Every write runs in its own transaction so a recording never depends on
    the request's session.
    """

    def __init__(self, database_service: DbSessionService):
        self._database_service = database_service

    def record(self, product_id: int, operation: SyncOperation, error: str) -> None:
        try:
            with self._database_service.session_scope() as session:
                SearchSyncFailureRepository(session).record(product_id, operation, error)
        except SQLAlchemyError as e:
            logger.error(
                "Could not record pending {} for product {}: {}",
                operation.value,
                product_id,
                e,
            )
            return
        logger.info("Recorded pending {} for product {}", operation.value, product_id)

    def pending(self) -> list[PendingSync]:
        with self._database_service.session_scope() as session:
            return SearchSyncFailureRepository(session).pending()

    def count_pending(self) -> int:
        with self._database_service.session_scope() as session:
            return SearchSyncFailureRepository(session).count_pending()

    def resolve(self, product_id: int) -> int:
        with self._database_service.session_scope() as session:
            return SearchSyncFailureRepository(session).resolve(product_id)

    def resolve_all(self) -> int:
        with self._database_service.session_scope() as session:
            return SearchSyncFailureRepository(session).resolve()


class SearchMirrorSynchronizer:
    """Pushes committed product changes into the search index.

    Per-record pushes never raise: failures are logged and, when a pending
    log is configured, recorded for a later retry. Only ``resync_all``
    surfaces index errors to its caller.
    """

    def __init__(
        self,
        search_service: SearchClientService,
        failure_log: PendingSyncLog | None = None,
    ):
        self._search_service = search_service
        self._failure_log = failure_log

    @property
    def index_name(self) -> str:
        return self._search_service.index_name

    def on_product_created(self, product: Product) -> None:
        self._push_index(product, "create")

    def on_product_updated(self, product: Product) -> None:
        self._push_index(product, "update")

    def on_product_deleted(self, product_id: int) -> None:
        if not self._search_service.enabled:
            return
        try:
            self._delete_document(product_id)
        except _BACKEND_ERRORS as e:
            logger.error(
                "Error deleting product {} from search index: {}",
                product_id,
                describe_search_error(e),
            )
            self._record_failure(product_id, SyncOperation.delete, e)
            return
        logger.debug("Removed product {} from search index", product_id)

    def _push_index(self, product: Product, action: str) -> None:
        if not self._search_service.enabled:
            return
        if product.id is None:
            raise ValueError("Cannot mirror a product without a store-assigned id")
        try:
            self._index_document(product)
        except _BACKEND_ERRORS as e:
            logger.error(
                "Error indexing product {} on {}: {}",
                product.id,
                action,
                describe_search_error(e),
            )
            self._record_failure(product.id, SyncOperation.index, e)
            return
        logger.debug("Indexed product {} on {}", product.id, action)

    def _index_document(self, product: Product) -> None:
        self._search_service.get_client().index(
            index=self.index_name,
            id=str(product.id),
            document=product_document(product),
        )

    def _delete_document(self, product_id: int) -> None:
        try:
            self._search_service.get_client().delete(
                index=self.index_name, id=str(product_id)
            )
        except NotFoundError:
            logger.debug("Product {} was not in the search index", product_id)

    def _record_failure(
        self, product_id: int, operation: SyncOperation, error: Exception
    ) -> None:
        if self._failure_log is None:
            return
        self._failure_log.record(product_id, operation, describe_search_error(error))

    def resync_all(self, repository: ProductRepository) -> ResyncSummary:
        """Bulk-index every product in the store, in id order.

        Raises:
            SearchUnavailableError: If search is disabled or unavailable.
            SearchSyncError: If the bulk request fails.
        """
        client = self._search_service.get_client()
        products = repository.list_all()
        if not products:
            logger.info("No products to sync to the search index")
            return ResyncSummary(total=0, synced=0, errors=False)

        operations: list[dict[str, Any]] = []
        for product in products:
            operations.append({"index": {"_index": self.index_name, "_id": str(product.id)}})
            operations.append(product_document(product))

        try:
            response = client.bulk(operations=operations)
        except (ApiError, TransportError) as e:
            cause = describe_search_error(e)
            logger.error("Bulk resync of {} products failed: {}", len(products), cause)
            raise SearchSyncError(f"Error syncing products to search index: {cause}") from e

        items = response.get("items", [])
        failed = sum(
            1
            for item in items
            if next(iter(item.values()), {}).get("error") is not None
        )
        errors = bool(response.get("errors")) or failed > 0
        summary = ResyncSummary(
            total=len(products), synced=len(items), errors=errors, failed=failed
        )

        if errors:
            logger.warning(
                "Resync finished with {} rejected items out of {}", failed, len(items)
            )
        else:
            logger.info("Synced {} products to search index", summary.synced)
            if self._failure_log is not None:
                resolved = self._failure_log.resolve_all()
                if resolved:
                    logger.info("Resync resolved {} pending syncs", resolved)
        return summary

    def retry_pending(self, repository: ProductRepository) -> RetrySummary:
        """Replay recorded failures against the current store state.

        A product still in the store is reindexed; one that is gone is
        deleted from the index.
        """
        if self._failure_log is None:
            return RetrySummary(attempted=0, succeeded=0, remaining=0)

        client_ready = self._search_service.available
        pending = self._failure_log.pending()
        product_ids = list(dict.fromkeys(row.product_id for row in pending))

        succeeded = 0
        if client_ready:
            for product_id in product_ids:
                product = repository.get(product_id)
                try:
                    if product is not None:
                        self._index_document(product)
                    else:
                        self._delete_document(product_id)
                except _BACKEND_ERRORS as e:
                    logger.warning(
                        "Retry of pending sync for product {} failed: {}",
                        product_id,
                        describe_search_error(e),
                    )
                    continue
                self._failure_log.resolve(product_id)
                succeeded += 1
        else:
            logger.warning("Search mirror unavailable, {} pending syncs left", len(product_ids))

        remaining = self._failure_log.count_pending()
        logger.info(
            "Retried {} pending products, {} succeeded, {} rows remaining",
            len(product_ids),
            succeeded,
            remaining,
        )
        return RetrySummary(
            attempted=len(product_ids), succeeded=succeeded, remaining=remaining
        )
