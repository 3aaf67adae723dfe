"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from fastapi import Depends, Query, Request
from sqlmodel import Session

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.services import (
    ProductSearchExecutor,
    ProductService,
    SearchMirrorSynchronizer,
    UserService,
)
from src.catalog.runtime.context import get_config


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a request-scoped database session, closed after the response."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_synchronizer(request: Request) -> SearchMirrorSynchronizer:
    """Get the search mirror synchronizer."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.synchronizer


def get_search_executor(request: Request) -> ProductSearchExecutor:
    """Get the product search executor."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.search_executor


def get_product_service(
    db_session: Session = Depends(get_db_session),
    synchronizer: SearchMirrorSynchronizer = Depends(get_synchronizer),
    search_executor: ProductSearchExecutor = Depends(get_search_executor),
) -> ProductService:
    return ProductService(db_session, synchronizer, search_executor)


def get_user_service(db_session: Session = Depends(get_db_session)) -> UserService:
    return UserService(db_session)


@dataclass
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int | None = Query(default=None, ge=1, description="Page size"),
) -> PageParams:
    """Resolve paging query parameters, capping the limit at the configured maximum."""
    pagination = get_config().pagination
    if limit is None:
        limit = pagination.default_limit
    return PageParams(page=page, limit=min(limit, pagination.max_limit))
