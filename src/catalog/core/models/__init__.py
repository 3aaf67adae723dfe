"""Core models exports."""

from .pagination import Pagination, ProductPage, UserPage, page_offset
from .search import ResyncSummary, RetrySummary, SearchHit, SearchResult
from .stats import ProductStats

__all__ = [
    "Pagination",
    "ProductPage",
    "ProductStats",
    "ResyncSummary",
    "RetrySummary",
    "SearchHit",
    "SearchResult",
    "UserPage",
    "page_offset",
]
