"""In-memory stand-in for the Elasticsearch client."""

from __future__ import annotations

import copy
from typing import Any

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import ApiError
from elasticsearch import ConnectionError as EsConnectionError
from elasticsearch import NotFoundError as EsNotFoundError

_NODE = NodeConfig("http", "localhost", 9200)


def api_error(
    status: int = 500, message: str = "search backend failure", error_cls: type = ApiError
) -> ApiError:
    """Build an ApiError as the client would raise it."""
    meta = ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=_NODE,
    )
    return error_cls(message, meta, {"error": {"reason": message}})


def connection_error(message: str = "connection refused") -> EsConnectionError:
    return EsConnectionError(message)


class _FakeIndices:
    def __init__(self, owner: FakeElasticsearch):
        self._owner = owner
        self.create_calls: list[dict[str, Any]] = []

    def exists(self, index: str) -> bool:
        self._owner._maybe_fail("indices.exists")
        return index in self._owner.indices_created

    def create(self, index: str, mappings=None, settings=None) -> dict[str, Any]:
        self._owner._maybe_fail("indices.create")
        self.create_calls.append({"index": index, "mappings": mappings, "settings": settings})
        self._owner.indices_created.add(index)
        return {"acknowledged": True, "index": index}


class _FakeCluster:
    def __init__(self, owner: FakeElasticsearch):
        self._owner = owner

    def health(self) -> dict[str, Any]:
        self._owner._maybe_fail("cluster.health")
        return {"status": self._owner.cluster_status}


class FakeElasticsearch:
    """Keeps documents per index in memory and records every call.

    ``fail_on`` maps an operation name (``index``, ``delete``, ``bulk``,
    ``search``, ``indices.exists``, ``indices.create``, ``cluster.health``)
    to the exception it should raise.
    """

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, dict[str, Any]]] = {}
        self.indices_created: set[str] = set()
        self.fail_on: dict[str, Exception] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.options_calls: list[dict[str, Any]] = []
        self.search_response: Any = None
        self.bulk_rejections: set[str] = set()
        self.cluster_status = "green"
        self.closed = False
        self.indices = _FakeIndices(self)
        self.cluster = _FakeCluster(self)

    def _maybe_fail(self, operation: str) -> None:
        error = self.fail_on.get(operation)
        if error is not None:
            raise error

    def options(self, **kwargs: Any) -> FakeElasticsearch:
        self.options_calls.append(kwargs)
        return self

    def operations(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for op, kwargs in self.calls if op == name]

    def index(self, index: str, id: str, document: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("index", {"index": index, "id": id, "document": document}))
        self._maybe_fail("index")
        self.documents.setdefault(index, {})[id] = copy.deepcopy(document)
        return {"_id": id, "result": "created"}

    def delete(self, index: str, id: str) -> dict[str, Any]:
        self.calls.append(("delete", {"index": index, "id": id}))
        self._maybe_fail("delete")
        if id not in self.documents.get(index, {}):
            raise api_error(404, "not_found", EsNotFoundError)
        del self.documents[index][id]
        return {"_id": id, "result": "deleted"}

    def bulk(self, operations: list[dict[str, Any]]) -> dict[str, Any]:
        self.calls.append(("bulk", {"operations": operations}))
        self._maybe_fail("bulk")
        items = []
        for action, source in zip(operations[::2], operations[1::2], strict=True):
            meta = action["index"]
            if meta["_id"] in self.bulk_rejections:
                items.append(
                    {"index": {"_id": meta["_id"], "status": 400, "error": {"type": "mapper_parsing_exception"}}}
                )
                continue
            self.documents.setdefault(meta["_index"], {})[meta["_id"]] = copy.deepcopy(source)
            items.append({"index": {"_id": meta["_id"], "status": 201}})
        return {
            "took": 5,
            "errors": any("error" in item["index"] for item in items),
            "items": items,
        }

    def search(
        self,
        index: str,
        query: dict[str, Any],
        highlight: dict[str, Any] | None = None,
        from_: int = 0,
        size: int = 10,
    ) -> Any:
        self.calls.append(
            ("search", {"index": index, "query": query, "highlight": highlight, "from_": from_, "size": size})
        )
        self._maybe_fail("search")
        if self.search_response is not None:
            return self.search_response

        multi_match = query["multi_match"]
        term = multi_match["query"].lower()
        matches = [
            (doc_id, source)
            for doc_id, source in sorted(
                self.documents.get(index, {}).items(), key=lambda item: int(item[0])
            )
            if any(term in str(source.get(field) or "").lower() for field in multi_match["fields"])
        ]
        window = matches[from_ : from_ + size]
        return {
            "took": 2,
            "hits": {
                "total": {"value": len(matches), "relation": "eq"},
                "max_score": 1.0 if matches else None,
                "hits": [
                    {
                        "_index": index,
                        "_id": doc_id,
                        "_score": 1.0,
                        "_source": source,
                        "highlight": {"name": [f"<em>{source['name']}</em>"]},
                    }
                    for doc_id, source in window
                ],
            },
        }

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_es() -> FakeElasticsearch:
    return FakeElasticsearch()
