"""API test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from searchlayer.api.app import create_app
from searchlayer.api.deps import set_provider
from searchlayer.config.settings import Settings
from searchlayer.core.provider import SearchProvider


class EngineStatusError(Exception):
    """Engine client error carrying an HTTP status, like the opensearch-py errors do."""

    def __init__(self, status_code: int, message: str = "engine error") -> None:
        super().__init__(message)
        self.status_code = status_code


@pytest.fixture
def client(settings: Settings, engine_client: AsyncMock) -> Iterator[TestClient]:
    """Test client whose provider talks to a mocked engine client."""
    app = create_app(settings)
    set_provider(SearchProvider(settings, client=engine_client))
    yield TestClient(app)
    set_provider(None)


@pytest.fixture
def engine_error() -> type[EngineStatusError]:
    return EngineStatusError
