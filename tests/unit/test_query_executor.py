"""Tests for the two-stage product search."""

from decimal import Decimal

import pytest

from src.catalog.core.exceptions import CatalogValidationError, SearchBackendError
from src.catalog.core.services.search.query_executor import (
    build_search_query,
    normalize_search_response,
)
from src.catalog.core.services.search.synchronizer import product_document
from src.catalog.entities.service.product import ProductRepository
from tests.fixtures.search import FakeElasticsearch, api_error, connection_error


@pytest.fixture
def repository(session, product_data) -> ProductRepository:
    repository = ProductRepository(session)
    repository.create(product_data(name="Blue Widget", brand="Acme"))
    repository.create(product_data(name="Red Widget", brand="Acme"))
    repository.create(product_data(name="Green Gadget", brand="Globex"))
    session.commit()
    return repository


@pytest.fixture
def indexed(repository, fake_es: FakeElasticsearch) -> ProductRepository:
    for product in repository.list_all():
        fake_es.documents.setdefault("products", {})[str(product.id)] = product_document(product)
    return repository


class TestBuildSearchQuery:
    def test_multi_match_shape(self):
        query = build_search_query("widget")

        assert query == {
            "multi_match": {
                "query": "widget",
                "fields": ["name", "brand", "category", "color", "description"],
                "type": "best_fields",
                "fuzziness": "AUTO",
            }
        }


class TestNormalizeSearchResponse:
    def _response(self, total):
        return {
            "took": 4,
            "hits": {
                "total": total,
                "max_score": 2.5,
                "hits": [
                    {
                        "_id": "12",
                        "_score": 2.5,
                        "_source": {
                            "name": "Blue Widget",
                            "brand": "Acme",
                            "price": 19.99,
                            "category": "Tools",
                            "color": "Blue",
                            "size": "S",
                            "description": None,
                            "created_at": "2024-01-01T00:00:00+00:00",
                            "updated_at": "2024-01-02T00:00:00+00:00",
                        },
                        "highlight": {"name": ["<em>Blue</em> Widget"]},
                    }
                ],
            },
        }

    @pytest.mark.parametrize("total", [{"value": 21, "relation": "eq"}, 21])
    def test_total_as_object_or_number(self, total):
        result = normalize_search_response(self._response(total), page=1, limit=10)

        assert result.pagination.total == 21
        assert result.pagination.pages == 3
        assert result.took == 4
        assert result.max_score == 2.5
        hit = result.products[0]
        assert hit.id == 12
        assert hit.score == 2.5
        assert hit.highlight == {"name": ["<em>Blue</em> Widget"]}
        assert hit.price == Decimal("19.99")

    @pytest.mark.parametrize(
        "response",
        [
            {},
            {"hits": {"hits": []}},
            {"hits": {"total": {"value": 1}, "hits": [{"_id": "x", "_source": {}}]}},
            {"hits": {"total": {"value": 1}, "hits": [{"_id": "1", "_source": {"name": "only"}}]}},
        ],
    )
    def test_malformed_response_raises_backend_error(self, response):
        with pytest.raises(SearchBackendError):
            normalize_search_response(response, page=1, limit=10)


class TestProductSearchExecutor:
    def test_index_results_carry_relevance(self, search_executor, indexed, fake_es):
        result = search_executor.search("widget", 1, 10, indexed)

        assert {hit.name for hit in result.products} == {"Blue Widget", "Red Widget"}
        assert result.pagination.total == 2
        assert result.took == 2
        assert all(hit.score is not None for hit in result.products)
        assert all(hit.highlight for hit in result.products)

    def test_paging_is_passed_to_the_index(self, search_executor, indexed, fake_es):
        search_executor.search("widget", 3, 5, indexed)

        call = fake_es.operations("search")[0]
        assert call["from_"] == 10
        assert call["size"] == 5
        assert set(call["highlight"]["fields"]) == {"name", "brand", "category", "description"}

    def test_zero_matches_is_a_valid_result(self, search_executor, indexed):
        result = search_executor.search("nothing-matches", 1, 10, indexed)

        assert result.products == []
        assert result.pagination.total == 0
        assert result.pagination.pages == 0

    @pytest.mark.parametrize(
        "error", [connection_error(), api_error(500), api_error(400, "parse_exception")]
    )
    def test_backend_error_falls_back_to_store(self, search_executor, indexed, fake_es, error):
        fake_es.fail_on["search"] = error

        result = search_executor.search("widget", 1, 10, indexed)

        assert {hit.name for hit in result.products} == {"Blue Widget", "Red Widget"}
        assert all(hit.score is None and hit.highlight is None for hit in result.products)
        assert result.took is None
        assert result.max_score is None
        assert result.pagination.total == 2

    def test_malformed_response_falls_back_to_store(self, search_executor, indexed, fake_es):
        fake_es.search_response = {"unexpected": True}

        result = search_executor.search("gadget", 1, 10, indexed)

        assert [hit.name for hit in result.products] == ["Green Gadget"]
        assert result.took is None

    def test_fallback_matches_name_only_case_insensitive(
        self, search_executor, indexed, fake_es
    ):
        fake_es.fail_on["search"] = connection_error()

        assert search_executor.search("WIDGET", 1, 10, indexed).pagination.total == 2
        # Brand is searchable in the index but not in the fallback
        assert search_executor.search("Globex", 1, 10, indexed).products == []

    def test_fallback_orders_newest_first_and_pages(
        self, search_executor, indexed, fake_es
    ):
        fake_es.fail_on["search"] = connection_error()

        first = search_executor.search("widget", 1, 1, indexed)
        second = search_executor.search("widget", 2, 1, indexed)

        assert first.pagination.pages == 2
        assert first.products[0].id > second.products[0].id

    def test_fallback_partial_last_page(
        self, search_executor, session, product_data, fake_es
    ):
        repository = ProductRepository(session)
        for index in range(15):
            repository.create(product_data(name=f"Air Runner {index}"))
        session.commit()
        fake_es.fail_on["search"] = connection_error()

        result = search_executor.search("air", 2, 10, repository)

        assert len(result.products) == 5
        assert result.pagination.total == 15
        assert result.pagination.pages == 2

    def test_unavailable_search_goes_straight_to_store(
        self, search_executor, search_service, indexed, fake_es
    ):
        search_service.mark_unavailable("bootstrap failed")

        result = search_executor.search("widget", 1, 10, indexed)

        assert fake_es.operations("search") == []
        assert result.pagination.total == 2

    def test_invalid_page_is_rejected(self, search_executor, indexed):
        with pytest.raises(CatalogValidationError):
            search_executor.search("widget", 0, 10, indexed)
