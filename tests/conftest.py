"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from searchlayer.clients.base import EngineClient
from searchlayer.config.settings import Settings
from searchlayer.core.provider import SearchProvider


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        engine={"connection": "http://localhost:9200"},
    )


@pytest.fixture
def engine_client() -> AsyncMock:
    """An ``EngineClient`` double whose calls are all awaitable mocks."""
    client = AsyncMock(spec=EngineClient)
    client.name = "mock"
    client.exists.return_value = True
    client.search.return_value = {"hits": {"total": {"value": 0, "relation": "eq"}, "hits": []}}
    return client


@pytest.fixture
def provider(settings: Settings, engine_client: AsyncMock) -> SearchProvider:
    return SearchProvider(settings, client=engine_client)


@pytest.fixture
def sample_hit() -> dict[str, Any]:
    """Sample search hit as returned by the engine."""
    return {
        "_index": "docs",
        "_id": "doc_001",
        "_score": 8.5,
        "_source": {
            "title": "Solar Nowcasting with Deep Learning",
            "status": "open",
            "author": "Jane Doe",
            "published_date": "2024-06-15T00:00:00Z",
        },
    }


@pytest.fixture
def search_reply(sample_hit: dict[str, Any]) -> dict[str, Any]:
    """Search reply in the Elasticsearch 7+ shape."""
    return {
        "took": 3,
        "timed_out": False,
        "hits": {
            "total": {"value": 42, "relation": "eq"},
            "max_score": 8.5,
            "hits": [sample_hit],
        },
    }
