"""Product search against the index, falling back to the catalog store."""

from typing import Any

from elasticsearch import ApiError, TransportError
from loguru import logger

from src.catalog.core.exceptions import SearchBackendError
from src.catalog.core.models.pagination import Pagination, page_offset
from src.catalog.core.models.search import SearchHit, SearchResult
from src.catalog.core.services.search.search_client import (
    SearchClientService,
    describe_search_error,
)
from src.catalog.entities.service.product import ProductFilters, ProductRepository

SEARCH_FIELDS = ["name", "brand", "category", "color", "description"]
HIGHLIGHT_FIELDS = ["name", "brand", "category", "description"]


def build_search_query(query: str) -> dict[str, Any]:
    return {
        "multi_match": {
            "query": query,
            "fields": SEARCH_FIELDS,
            "type": "best_fields",
            "fuzziness": "AUTO",
        }
    }


def build_highlight() -> dict[str, Any]:
    return {"fields": {field_name: {} for field_name in HIGHLIGHT_FIELDS}}


def _total_hits(total: Any) -> int:
    # Older clusters return a bare number instead of {"value": n, ...}
    if isinstance(total, dict):
        return int(total["value"])
    return int(total)


def normalize_search_response(
    response: Any, page: int, limit: int
) -> SearchResult:
    """Turn a raw search response into a SearchResult.

    Raises:
        SearchBackendError: If the response does not have the expected shape.
    """
    try:
        hits = response["hits"]
        products = [
            SearchHit(
                id=int(hit["_id"]),
                score=hit.get("_score"),
                highlight=hit.get("highlight"),
                **hit["_source"],
            )
            for hit in hits["hits"]
        ]
        total = _total_hits(hits["total"])
    except (KeyError, TypeError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        raise SearchBackendError(f"Malformed search response: {e}") from e

    return SearchResult(
        products=products,
        pagination=Pagination.build(page, limit, total),
        took=response.get("took"),
        max_score=hits.get("max_score"),
    )


class ProductSearchExecutor:
    """Two-stage product search.

    The index is queried first. Any search backend error sends the same
    request to the catalog store as a substring match on ``name``. Callers
    get the same result shape either way; store hits carry no score or
    highlight.
    """

    def __init__(self, search_service: SearchClientService):
        self._search_service = search_service

    def search(
        self,
        query: str,
        page: int,
        limit: int,
        repository: ProductRepository,
    ) -> SearchResult:
        offset = page_offset(page, limit)
        try:
            return self._search_index(query, page, limit, offset)
        except SearchBackendError as e:
            logger.warning("Search index failed for '{}', using catalog store: {}", query, e)
        return self._search_store(query, page, limit, offset, repository)

    def _search_index(
        self, query: str, page: int, limit: int, offset: int
    ) -> SearchResult:
        client = self._search_service.get_client()
        try:
            response = client.search(
                index=self._search_service.index_name,
                query=build_search_query(query),
                highlight=build_highlight(),
                from_=offset,
                size=limit,
            )
        except (ApiError, TransportError) as e:
            raise SearchBackendError(
                f"Search request failed: {describe_search_error(e)}"
            ) from e

        result = normalize_search_response(response, page, limit)
        logger.debug(
            "Search '{}' matched {} products in {}ms",
            query,
            result.pagination.total,
            result.took,
        )
        return result

    def _search_store(
        self,
        query: str,
        page: int,
        limit: int,
        offset: int,
        repository: ProductRepository,
    ) -> SearchResult:
        products, total = repository.find(ProductFilters(name=query), offset, limit)
        hits = [SearchHit.model_validate(product.model_dump()) for product in products]
        return SearchResult(
            products=hits,
            pagination=Pagination.build(page, limit, total),
        )
