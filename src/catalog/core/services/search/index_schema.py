"""Product index mappings and idempotent bootstrap."""

from typing import Any

from elasticsearch import Elasticsearch
from loguru import logger


def _text_with_keyword() -> dict[str, Any]:
    return {
        "type": "text",
        "analyzer": "standard",
        "fields": {"keyword": {"type": "keyword"}},
    }


PRODUCT_INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "name": _text_with_keyword(),
        "brand": _text_with_keyword(),
        "price": {"type": "float"},
        "category": _text_with_keyword(),
        "color": _text_with_keyword(),
        "size": _text_with_keyword(),
        "description": {"type": "text", "analyzer": "standard"},
        "created_at": {"type": "date"},
        "updated_at": {"type": "date"},
    }
}

# Single-node deployment
PRODUCT_INDEX_SETTINGS: dict[str, Any] = {
    "number_of_shards": 1,
    "number_of_replicas": 0,
    "analysis": {
        "analyzer": {
            "custom_analyzer": {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "stop"],
            }
        }
    },
}


def ensure_products_index(client: Elasticsearch, index_name: str) -> bool:
    """Create the product index if it is missing.

    Existing indices are left untouched, including their mappings.

    Returns:
        True if the index was created, False if it already existed.
    """
    if client.indices.exists(index=index_name):
        logger.info("Search index '{}' already exists", index_name)
        return False

    client.indices.create(
        index=index_name,
        mappings=PRODUCT_INDEX_MAPPINGS,
        settings=PRODUCT_INDEX_SETTINGS,
    )
    logger.info("Created search index '{}' with product mappings", index_name)
    return True
