from pydantic import BaseModel

from src.catalog.core.models.pagination import Pagination
from src.catalog.entities.service.product import Product


class SearchHit(Product):
    """A product returned by a search, with relevance metadata when available."""

    score: float | None = None
    highlight: dict[str, list[str]] | None = None


class SearchResult(BaseModel):
    products: list[SearchHit]
    pagination: Pagination
    took: int | None = None
    max_score: float | None = None


class ResyncSummary(BaseModel):
    """Outcome of a full rebuild of the search index."""

    total: int
    synced: int
    errors: bool
    failed: int = 0


class RetrySummary(BaseModel):
    """Outcome of replaying pending per-record syncs."""

    attempted: int
    succeeded: int
    remaining: int
