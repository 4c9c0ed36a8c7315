"""Engine client interface — The narrow surface the search provider talks to.

Each implementation wraps one third-party client library and maps these
calls onto it. Replies are returned raw; shape differences between libraries
are the normalizer's job, not the client's. Library errors (transport
failures, not-found, version conflicts) propagate unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class EngineClient(ABC):
    """Abstract base class for search engine clients.

    One instance owns one long-lived connection handle, created by
    ``initialize()`` and released by ``close()``. All calls are coroutines and
    may run concurrently on the shared handle.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g. 'elasticsearch', 'opensearch')."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create the underlying library client."""

    @abstractmethod
    async def close(self) -> None:
        """Close the underlying library client."""

    @abstractmethod
    async def get(self, index: str, id: str, source_includes: Sequence[str] | None = None) -> Any:
        """Fetch one document. Raises the library's not-found error if absent."""

    @abstractmethod
    async def search(self, index: str, body: dict[str, Any]) -> Any:
        """Run one search request."""

    @abstractmethod
    async def msearch(self, searches: list[dict[str, Any]]) -> Any:
        """Run header/body pairs as a single multi-search request."""

    @abstractmethod
    async def exists(self, index: str, id: str) -> bool:
        """Return whether a document exists."""

    @abstractmethod
    async def create(self, index: str, id: str, body: dict[str, Any]) -> Any:
        """Index a new document under ``id``."""

    @abstractmethod
    async def update(self, index: str, id: str, doc: dict[str, Any]) -> Any:
        """Apply a partial update to an existing document."""

    @abstractmethod
    async def delete(self, index: str, id: str) -> Any:
        """Delete one document."""

    @abstractmethod
    async def delete_by_query(
        self,
        index: str,
        body: dict[str, Any],
        *,
        conflicts: str = "proceed",
        wait_for_completion: bool = False,
    ) -> Any:
        """Submit a delete-by-query request."""

    @abstractmethod
    async def sql(self, query: str) -> Any:
        """Run a SQL query and return the raw tabular reply."""

    @abstractmethod
    async def cluster_health(self) -> Any:
        """Return the raw cluster health reply."""
