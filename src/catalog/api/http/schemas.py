"""Response envelopes shared by the API routers."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from src.catalog.core.models import Pagination

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None
    pagination: Pagination | None = None
    meta: dict[str, Any] | None = None
