"""Tests for product use cases over the store and the search mirror."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.catalog.core.exceptions import (
    CatalogValidationError,
    NotFoundError,
    SearchSyncError,
    StoreError,
)
from src.catalog.core.services import ProductService
from src.catalog.entities.service.product import (
    ProductCreate,
    ProductFilters,
    ProductUpdate,
)
from tests.fixtures.search import connection_error


@pytest.fixture
def create(product_service, product_data):
    def _create(**overrides):
        return product_service.create_product(ProductCreate(**product_data(**overrides)))

    return _create


class TestWrites:
    def test_create_assigns_store_id_and_mirrors(self, create, fake_es):
        product = create()

        assert product.id is not None
        document = fake_es.documents["products"][str(product.id)]
        assert document["name"] == "Trail Runner"
        assert document["price"] == 89.99

    def test_create_survives_index_failure(self, create, product_service, fake_es, pending_log):
        fake_es.fail_on["index"] = connection_error()

        product = create()

        assert product_service.get_product_by_id(product.id) == product
        assert pending_log.count_pending() == 1

    def test_update_is_partial_and_mirrors(self, create, product_service, fake_es):
        product = create()

        updated = product_service.update_product(
            product.id, ProductUpdate(price=Decimal("79.50"))
        )

        assert updated.price == Decimal("79.50")
        assert updated.name == product.name
        assert updated.updated_at >= product.updated_at
        assert fake_es.documents["products"][str(product.id)]["price"] == 79.5

    def test_update_can_clear_description(self, create, product_service):
        product = create()

        updated = product_service.update_product(product.id, ProductUpdate(description=None))

        assert updated.description is None

    def test_update_rejects_null_required_field(self, create, product_service):
        product = create()

        with pytest.raises(CatalogValidationError):
            product_service.update_product(product.id, ProductUpdate(name=None))

    def test_update_missing_product(self, product_service, fake_es):
        with pytest.raises(NotFoundError):
            product_service.update_product(999, ProductUpdate(name="x"))

        assert fake_es.calls == []

    def test_delete_removes_row_and_document(self, create, product_service, fake_es):
        product = create()

        product_service.delete_product(product.id)

        with pytest.raises(NotFoundError):
            product_service.get_product_by_id(product.id)
        assert str(product.id) not in fake_es.documents["products"]

    def test_delete_survives_index_failure(self, create, product_service, fake_es):
        product = create()
        fake_es.fail_on["delete"] = connection_error()

        product_service.delete_product(product.id)

        with pytest.raises(NotFoundError):
            product_service.get_product_by_id(product.id)

    def test_delete_missing_product_never_touches_index(self, product_service, fake_es):
        with pytest.raises(NotFoundError, match="Product 5 not found"):
            product_service.delete_product(5)

        assert fake_es.operations("delete") == []

    def test_failed_commit_never_reaches_the_index(self, session, product_data):
        synchronizer = MagicMock()
        service = ProductService(session, synchronizer, MagicMock())
        session.commit = MagicMock(
            side_effect=OperationalError("COMMIT", {}, Exception("disk full"))
        )

        with pytest.raises(StoreError):
            service.create_product(ProductCreate(**product_data()))

        synchronizer.on_product_created.assert_not_called()


class TestReads:
    def test_listing_filters_and_orders_newest_first(self, create, product_service):
        create(name="Road Shoe", brand="Stride", category="Shoes", price=Decimal("50"))
        create(name="Rain Jacket", brand="Northwind", category="Outerwear", price=Decimal("120"))
        create(name="Trail Shoe", brand="Stride", category="Shoes", price=Decimal("95"))

        page = product_service.get_all_products(
            1, 10, ProductFilters(category="shoe", min_price=Decimal("60"))
        )

        assert [p.name for p in page.products] == ["Trail Shoe"]
        assert page.pagination.total == 1

        everything = product_service.get_all_products(1, 10)
        assert [p.name for p in everything.products] == ["Trail Shoe", "Rain Jacket", "Road Shoe"]

    def test_search_filter_matches_name_brand_or_description(self, create, product_service):
        create(name="Alpha", brand="Zed", description="waterproof shell")
        create(name="Beta", brand="Waterworks", description=None)
        create(name="Gamma", brand="Zed", description="cotton")

        page = product_service.get_all_products(1, 10, ProductFilters(search="water"))

        assert {p.name for p in page.products} == {"Alpha", "Beta"}

    def test_inverted_price_range_is_rejected(self, product_service):
        with pytest.raises(CatalogValidationError):
            product_service.get_all_products(
                1, 10, ProductFilters(min_price=Decimal("10"), max_price=Decimal("5"))
            )

    def test_pagination_envelope(self, create, product_service):
        for index in range(5):
            create(name=f"Item {index}")

        page = product_service.get_all_products(2, 2)

        assert len(page.products) == 2
        assert page.pagination.model_dump() == {"page": 2, "limit": 2, "total": 5, "pages": 3}

    def test_partial_last_page(self, create, product_service):
        for index in range(15):
            create(name=f"Item {index}")

        page = product_service.get_all_products(2, 10)

        assert len(page.products) == 5
        assert page.pagination.total == 15
        assert page.pagination.pages == 2

    def test_by_category_brand_and_name(self, create, product_service):
        create(name="Trail Runner", brand="Stride", category="Shoes")
        create(name="City Bag", brand="Carry", category="Bags")

        assert product_service.get_products_by_category("bags", 1, 10).pagination.total == 1
        assert product_service.get_products_by_brand("stri", 1, 10).products[0].name == "Trail Runner"
        assert product_service.search_products_by_name("city", 1, 10).products[0].brand == "Carry"

    def test_substring_filters_escape_wildcards(self, create, product_service):
        create(name="100% Cotton Tee")
        create(name="Cotton Tee")

        page = product_service.search_products_by_name("100%", 1, 10)

        assert [p.name for p in page.products] == ["100% Cotton Tee"]

    def test_categories_and_brands_are_distinct_and_sorted(self, create, product_service):
        create(category="Shoes", brand="Stride")
        create(category="Bags", brand="Carry")
        create(category="Shoes", brand="Carry")

        assert product_service.get_all_categories() == ["Bags", "Shoes"]
        assert product_service.get_all_brands() == ["Carry", "Stride"]

    def test_stats(self, create, product_service):
        create(category="Shoes", brand="Stride", price=Decimal("10.00"))
        create(category="Bags", brand="Carry", price=Decimal("20.00"))
        create(category="Shoes", brand="Carry", price=Decimal("15.01"))

        stats = product_service.get_product_stats()

        assert stats.total_products == 3
        assert stats.total_categories == 2
        assert stats.total_brands == 2
        assert stats.average_price == Decimal("15.00")

    def test_stats_on_empty_catalog(self, product_service):
        stats = product_service.get_product_stats()

        assert stats.total_products == 0
        assert stats.average_price == Decimal("0")


class TestSearchAndSync:
    def test_search_uses_the_index(self, create, product_service):
        create(name="Blue Widget")

        result = product_service.search_products("widget", 1, 10)

        assert result.products[0].score is not None

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_is_rejected(self, product_service, query):
        with pytest.raises(CatalogValidationError):
            product_service.search_products(query, 1, 10)

    def test_sync_all_products(self, create, product_service, fake_es):
        create()
        create(name="Second")
        fake_es.documents.clear()

        summary = product_service.sync_all_products()

        assert summary.total == 2
        assert len(fake_es.documents["products"]) == 2

    def test_sync_failure_surfaces(self, create, product_service, fake_es):
        create()
        fake_es.fail_on["bulk"] = connection_error()

        with pytest.raises(SearchSyncError):
            product_service.sync_all_products()

    def test_retry_pending_sync(self, create, product_service, fake_es):
        fake_es.fail_on["index"] = connection_error()
        product = create()
        del fake_es.fail_on["index"]

        summary = product_service.retry_pending_sync()

        assert summary.succeeded == 1
        assert summary.remaining == 0
        assert str(product.id) in fake_es.documents["products"]
