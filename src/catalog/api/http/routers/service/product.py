"""Product API router with CRUD, listing and search operations."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from src.catalog.api.http.deps import PageParams, get_page_params, get_product_service
from src.catalog.api.http.errors import http_error
from src.catalog.api.http.schemas import ApiResponse
from src.catalog.core.exceptions import CatalogError
from src.catalog.core.models import (
    ProductPage,
    ProductStats,
    ResyncSummary,
    RetrySummary,
    SearchHit,
)
from src.catalog.core.services import ProductService
from src.catalog.entities.service.product import (
    Product,
    ProductCreate,
    ProductFilters,
    ProductUpdate,
)

router = APIRouter()


def _page_response(result: ProductPage, message: str | None = None) -> ApiResponse[list[Product]]:
    return ApiResponse(
        message=message, data=result.products, pagination=result.pagination
    )


@router.post("/", response_model=ApiResponse[Product], status_code=201)
def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Create a new product."""
    try:
        created = service.create_product(product)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="Product created successfully", data=created)


@router.get("/", response_model=ApiResponse[list[Product]])
def list_products(
    category: str | None = None,
    brand: str | None = None,
    color: str | None = None,
    size: str | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    search: str | None = None,
    paging: PageParams = Depends(get_page_params),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[Product]]:
    """List products with optional filters, newest first."""
    filters = ProductFilters(
        category=category,
        brand=brand,
        color=color,
        size=size,
        min_price=min_price,
        max_price=max_price,
        search=search,
    )
    try:
        result = service.get_all_products(paging.page, paging.limit, filters)
    except CatalogError as e:
        raise http_error(e) from e
    return _page_response(result)


@router.get("/stats", response_model=ApiResponse[ProductStats])
def get_product_stats(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductStats]:
    try:
        stats = service.get_product_stats()
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=stats)


@router.get("/categories", response_model=ApiResponse[list[str]])
def get_categories(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[str]]:
    try:
        categories = service.get_all_categories()
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=categories)


@router.get("/brands", response_model=ApiResponse[list[str]])
def get_brands(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[str]]:
    try:
        brands = service.get_all_brands()
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=brands)


@router.get("/search", response_model=ApiResponse[list[SearchHit]])
def search_products(
    q: str = Query(min_length=1, description="Free-text search query"),
    paging: PageParams = Depends(get_page_params),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[SearchHit]]:
    """Fuzzy multi-field search.

    Served from the search index when it is healthy, otherwise from a
    name match in the catalog store.
    """
    try:
        result = service.search_products(q, paging.page, paging.limit)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(
        data=result.products,
        pagination=result.pagination,
        meta={"query": q, "took": result.took, "max_score": result.max_score},
    )


@router.get("/search-by-name", response_model=ApiResponse[list[Product]])
def search_products_by_name(
    name: str = Query(min_length=1),
    paging: PageParams = Depends(get_page_params),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[Product]]:
    try:
        result = service.search_products_by_name(name, paging.page, paging.limit)
    except CatalogError as e:
        raise http_error(e) from e
    return _page_response(result)


@router.get("/category/{category}", response_model=ApiResponse[list[Product]])
def get_products_by_category(
    category: str,
    paging: PageParams = Depends(get_page_params),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[Product]]:
    try:
        result = service.get_products_by_category(category, paging.page, paging.limit)
    except CatalogError as e:
        raise http_error(e) from e
    return _page_response(result)


@router.get("/brand/{brand}", response_model=ApiResponse[list[Product]])
def get_products_by_brand(
    brand: str,
    paging: PageParams = Depends(get_page_params),
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[list[Product]]:
    try:
        result = service.get_products_by_brand(brand, paging.page, paging.limit)
    except CatalogError as e:
        raise http_error(e) from e
    return _page_response(result)


@router.post("/sync", response_model=ApiResponse[ResyncSummary])
def sync_products(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[ResyncSummary]:
    """Rebuild the search index from the catalog store."""
    try:
        summary = service.sync_all_products()
    except CatalogError as e:
        raise http_error(e) from e
    message = (
        "Products synced to search index with errors"
        if summary.errors
        else "Products synced to search index"
    )
    return ApiResponse(message=message, data=summary)


@router.post("/sync/retry", response_model=ApiResponse[RetrySummary])
def retry_pending_sync(
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[RetrySummary]:
    """Replay per-record syncs that previously failed."""
    try:
        summary = service.retry_pending_sync()
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=summary)


@router.get("/{product_id}", response_model=ApiResponse[Product])
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Get a product by ID."""
    try:
        product = service.get_product_by_id(product_id)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(data=product)


@router.put("/{product_id}", response_model=ApiResponse[Product])
def update_product(
    product_id: int,
    product_update: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[Product]:
    """Update a product; only the fields that are sent change."""
    try:
        updated = service.update_product(product_id, product_update)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="Product updated successfully", data=updated)


@router.delete("/{product_id}", response_model=ApiResponse[None])
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> ApiResponse[None]:
    """Delete a product."""
    try:
        service.delete_product(product_id)
    except CatalogError as e:
        raise http_error(e) from e
    return ApiResponse(message="Product deleted successfully")
