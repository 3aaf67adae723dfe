"""Elasticsearch connection service for the search mirror."""

from elasticsearch import ApiError, Elasticsearch, TransportError
from loguru import logger

from src.catalog.core.exceptions import SearchUnavailableError
from src.catalog.core.services.search.index_schema import ensure_products_index
from src.catalog.runtime.context import get_config


def describe_search_error(error: Exception) -> str:
    """Readable cause of a search client error.

    ``str()`` of an elastic-transport error can collapse to a generic label
    such as ``Connection error``; its ``message`` keeps the cause.
    """
    if isinstance(error, TransportError):
        message = getattr(error, "message", None)
        if message:
            return f"{type(error).__name__}: {message}"
    return str(error)


class SearchClientService:
    """Owns the long-lived Elasticsearch client and its availability.

    Follows the same pattern as DbSessionService: built once at startup,
    shared by every request, closed on shutdown.
    """

    def __init__(self, client: Elasticsearch | None = None):
        """Initialize the search service.

        Args:
            client: Pre-built client to use instead of one built from config.
        """
        search_config = get_config().search

        self._enabled = search_config.enabled
        self._index_name = search_config.index_name
        self._request_timeout = search_config.request_timeout
        self._unavailable_reason: str | None = None
        self._client = client

        if not self._enabled:
            logger.info("Search mirror is disabled, service will not connect")
            return

        if self._client is None:
            logger.info("Initializing Elasticsearch client for {}", search_config.url)
            basic_auth = None
            if search_config.username and search_config.password:
                basic_auth = (search_config.username, search_config.password)
            self._client = Elasticsearch(
                search_config.url,
                basic_auth=basic_auth,
                verify_certs=search_config.verify_certs,
                request_timeout=search_config.request_timeout,
                max_retries=search_config.max_retries,
                retry_on_timeout=search_config.retry_on_timeout,
            )

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def available(self) -> bool:
        return self._enabled and self._unavailable_reason is None

    @property
    def index_name(self) -> str:
        return self._index_name

    def mark_unavailable(self, reason: str) -> None:
        """Stop routing traffic to the index for the rest of this process."""
        logger.warning("Search mirror marked unavailable: {}", reason)
        self._unavailable_reason = reason

    def get_client(self) -> Elasticsearch:
        """Client bound to the configured per-call timeout.

        Raises:
            SearchUnavailableError: If search is disabled or unavailable.
        """
        if not self._enabled or self._client is None:
            raise SearchUnavailableError("Search mirror is disabled")
        if self._unavailable_reason is not None:
            raise SearchUnavailableError(
                f"Search mirror unavailable: {self._unavailable_reason}"
            )
        return self._client.options(request_timeout=self._request_timeout)

    def health_check(self) -> bool:
        """Return True if the cluster reports a status."""
        if not self._enabled or self._client is None:
            logger.debug("Search mirror is disabled, health check skipped")
            return False
        try:
            health = self._client.options(
                request_timeout=self._request_timeout
            ).cluster.health()
        except (ApiError, TransportError) as e:
            logger.error("Cannot connect to Elasticsearch: {}", describe_search_error(e))
            return False

        status = health.get("status")
        if not status:
            logger.warning("Elasticsearch did not report a cluster status")
            return False
        logger.info("Elasticsearch cluster status: {}", status)
        return True

    def initialize_index(self) -> bool:
        """Check connectivity and bootstrap the product index.

        A failed bootstrap marks the service unavailable instead of failing
        startup, so reads fall through to the catalog store.

        Returns:
            True if the index is ready for traffic.
        """
        if not self._enabled:
            return False
        if not self.health_check():
            logger.warning("Skipping search index bootstrap; cluster unreachable")
            return False
        try:
            ensure_products_index(self.get_client(), self._index_name)
        except (ApiError, TransportError) as e:
            logger.error(
                "Error creating search index '{}': {}",
                self._index_name,
                describe_search_error(e),
            )
            self.mark_unavailable(f"index bootstrap failed: {describe_search_error(e)}")
            return False
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
