"""Domain error taxonomy.

Store and validation errors propagate to callers. Search backend errors are
absorbed by the synchronizer and the search executor, except when raised
from an explicit resync.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFoundError(CatalogError):
    """The requested record does not exist in the catalog store."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class CatalogValidationError(CatalogError):
    """Caller-supplied data violates a precondition."""


class StoreError(CatalogError):
    """A catalog store operation failed."""


class ConflictError(StoreError):
    """A uniqueness constraint was violated."""


class SearchBackendError(CatalogError):
    """The search index could not serve a request."""


class SearchUnavailableError(SearchBackendError):
    """Search is disabled or was marked unavailable for this process."""


class SearchSyncError(SearchBackendError):
    """A bulk resync of the search index failed."""
