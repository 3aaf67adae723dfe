from decimal import ROUND_HALF_UP, Decimal

from loguru import logger
from sqlmodel import Session

from src.catalog.core.exceptions import CatalogValidationError, NotFoundError
from src.catalog.core.models import (
    Pagination,
    ProductPage,
    ProductStats,
    ResyncSummary,
    RetrySummary,
    SearchResult,
    page_offset,
)
from src.catalog.core.services.database.db_utils import store_errors
from src.catalog.core.services.search.query_executor import ProductSearchExecutor
from src.catalog.core.services.search.synchronizer import SearchMirrorSynchronizer
from src.catalog.entities.service.product import (
    Product,
    ProductCreate,
    ProductFilters,
    ProductRepository,
    ProductUpdate,
)

_NULLABLE_FIELDS = {"description"}


class ProductService:
    """Product use cases over the catalog store and the search mirror.

    Writes commit to the store first; the mirror is only pushed after a
    successful commit and never fails the write.
    """

    def __init__(
        self,
        db_session: Session,
        synchronizer: SearchMirrorSynchronizer,
        search_executor: ProductSearchExecutor,
    ):
        self._db_session = db_session
        self._product_repo = ProductRepository(db_session)
        self._synchronizer = synchronizer
        self._search_executor = search_executor

    def create_product(self, data: ProductCreate) -> Product:
        with store_errors(self._db_session, "creating product"):
            product = self._product_repo.create(data.model_dump())
            self._db_session.commit()

        logger.info("Created product {}", product.id)
        self._synchronizer.on_product_created(product)
        return product

    def get_product_by_id(self, product_id: int) -> Product:
        with store_errors(self._db_session, "fetching product"):
            product = self._product_repo.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        changes = data.model_dump(exclude_unset=True)
        cleared = [
            name
            for name, value in changes.items()
            if value is None and name not in _NULLABLE_FIELDS
        ]
        if cleared:
            raise CatalogValidationError(f"Fields cannot be null: {', '.join(cleared)}")

        with store_errors(self._db_session, "updating product"):
            product = self._product_repo.update(product_id, changes)
            if product is None:
                raise NotFoundError("Product", product_id)
            self._db_session.commit()

        logger.info("Updated product {}", product_id)
        self._synchronizer.on_product_updated(product)
        return product

    def delete_product(self, product_id: int) -> None:
        with store_errors(self._db_session, "deleting product"):
            if not self._product_repo.delete(product_id):
                raise NotFoundError("Product", product_id)
            self._db_session.commit()

        logger.info("Deleted product {}", product_id)
        self._synchronizer.on_product_deleted(product_id)

    def get_all_products(
        self, page: int, limit: int, filters: ProductFilters | None = None
    ) -> ProductPage:
        filters = filters or ProductFilters()
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise CatalogValidationError("min_price cannot be greater than max_price")

        offset = page_offset(page, limit)
        with store_errors(self._db_session, "listing products"):
            products, total = self._product_repo.find(filters, offset, limit)
        return ProductPage(
            products=products, pagination=Pagination.build(page, limit, total)
        )

    def search_products_by_name(self, name: str, page: int, limit: int) -> ProductPage:
        return self.get_all_products(page, limit, ProductFilters(name=name))

    def get_products_by_category(
        self, category: str, page: int, limit: int
    ) -> ProductPage:
        return self.get_all_products(page, limit, ProductFilters(category=category))

    def get_products_by_brand(self, brand: str, page: int, limit: int) -> ProductPage:
        return self.get_all_products(page, limit, ProductFilters(brand=brand))

    def get_all_categories(self) -> list[str]:
        with store_errors(self._db_session, "listing categories"):
            return self._product_repo.distinct_values("category")

    def get_all_brands(self) -> list[str]:
        with store_errors(self._db_session, "listing brands"):
            return self._product_repo.distinct_values("brand")

    def get_product_stats(self) -> ProductStats:
        with store_errors(self._db_session, "computing product stats"):
            total_products = self._product_repo.count()
            total_categories = len(self._product_repo.distinct_values("category"))
            total_brands = len(self._product_repo.distinct_values("brand"))
            average = self._product_repo.average_price()

        average_price = (
            average.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
            if average is not None
            else Decimal("0")
        )
        return ProductStats(
            total_products=total_products,
            total_categories=total_categories,
            total_brands=total_brands,
            average_price=average_price,
        )

    def search_products(self, query: str, page: int, limit: int) -> SearchResult:
        if not query or not query.strip():
            raise CatalogValidationError("Search query is required")
        with store_errors(self._db_session, "searching products"):
            return self._search_executor.search(
                query.strip(), page, limit, self._product_repo
            )

    def sync_all_products(self) -> ResyncSummary:
        """Rebuild the search index from the catalog store.

        Raises:
            SearchUnavailableError: If search is disabled or unavailable.
            SearchSyncError: If the bulk request fails.
        """
        with store_errors(self._db_session, "reading products for resync"):
            return self._synchronizer.resync_all(self._product_repo)

    def retry_pending_sync(self) -> RetrySummary:
        with store_errors(self._db_session, "retrying pending syncs"):
            return self._synchronizer.retry_pending(self._product_repo)
