"""Translation of domain errors into HTTP errors."""

from fastapi import HTTPException

from src.catalog.core.exceptions import (
    CatalogError,
    CatalogValidationError,
    ConflictError,
    NotFoundError,
    SearchBackendError,
    StoreError,
)

# Most specific first; ConflictError is a StoreError
_STATUS_CODES: list[tuple[type[CatalogError], int]] = [
    (NotFoundError, 404),
    (CatalogValidationError, 400),
    (ConflictError, 409),
    (StoreError, 500),
    (SearchBackendError, 503),
]


def http_error(exc: CatalogError) -> HTTPException:
    for error_type, status_code in _STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
