"""Core — query building, result normalization and the search provider."""

from searchlayer.core.normalizer import normalize_get, normalize_multi_search, normalize_search, normalize_sql
from searchlayer.core.provider import SearchProvider
from searchlayer.core.query import QueryDocument, build_query

__all__ = [
    "QueryDocument",
    "SearchProvider",
    "build_query",
    "normalize_get",
    "normalize_multi_search",
    "normalize_search",
    "normalize_sql",
]
