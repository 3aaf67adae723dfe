"""Product/User catalog API.

FastAPI service backed by a relational catalog store, with product writes
mirrored into an Elasticsearch index for full-text search.
"""

__version__ = "0.1.0"
