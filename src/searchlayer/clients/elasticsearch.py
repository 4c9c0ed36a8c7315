"""Elasticsearch client — ``elasticsearch`` (async) implementation of ``EngineClient``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from searchlayer.clients.base import EngineClient
from searchlayer.clients.exceptions import ClientNotInitializedError, ConfigurationError

logger = logging.getLogger(__name__)


class ElasticsearchClient(EngineClient):
    """Engine client backed by ``elasticsearch.AsyncElasticsearch`` (8.x).

    The 8.x client works with 8.x clusters and, through REST compatibility,
    with 9.x clusters. A 9.x client is rejected by 8.x servers.

    Args:
        hosts: Elasticsearch node URLs.
        request_timeout: Per-request timeout in seconds.
        verify_certs: Whether to verify TLS certificates.
        **kwargs: Additional keyword arguments forwarded to ``AsyncElasticsearch``.
    """

    def __init__(
        self,
        hosts: list[str],
        request_timeout: float = 600.0,
        verify_certs: bool = True,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts
        self._request_timeout = request_timeout
        self._verify_certs = verify_certs
        self._extra_kwargs = kwargs
        self._client: Any = None

    @property
    def name(self) -> str:
        return "elasticsearch"

    @property
    def client(self) -> Any:
        if self._client is None:
            raise ClientNotInitializedError("Elasticsearch client not initialized.")
        return self._client

    async def initialize(self) -> None:
        try:
            from elasticsearch import AsyncElasticsearch
        except ImportError as e:
            raise ConfigurationError(
                "elasticsearch package is required.  Install with: pip install 'elasticsearch[async]'"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "request_timeout": self._request_timeout,
            "verify_certs": self._verify_certs,
        }
        client_kwargs.update(self._extra_kwargs)

        self._client = AsyncElasticsearch(**client_kwargs)
        logger.info("Elasticsearch client created for %s", ", ".join(self._hosts))

    async def close(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None

    async def get(self, index: str, id: str, source_includes: Sequence[str] | None = None) -> Any:
        kwargs: dict[str, Any] = {"index": index, "id": id}
        if source_includes:
            kwargs["source_includes"] = list(source_includes)
        return await self.client.get(**kwargs)

    async def search(self, index: str, body: dict[str, Any]) -> Any:
        return await self.client.search(index=index, body=body)

    async def msearch(self, searches: list[dict[str, Any]]) -> Any:
        return await self.client.msearch(searches=searches)

    async def exists(self, index: str, id: str) -> bool:
        return bool(await self.client.exists(index=index, id=id))

    async def create(self, index: str, id: str, body: dict[str, Any]) -> Any:
        return await self.client.create(index=index, id=id, document=body)

    async def update(self, index: str, id: str, doc: dict[str, Any]) -> Any:
        return await self.client.update(index=index, id=id, doc=doc)

    async def delete(self, index: str, id: str) -> Any:
        return await self.client.delete(index=index, id=id)

    async def delete_by_query(
        self,
        index: str,
        body: dict[str, Any],
        *,
        conflicts: str = "proceed",
        wait_for_completion: bool = False,
    ) -> Any:
        return await self.client.delete_by_query(
            index=index,
            body=body,
            conflicts=conflicts,
            wait_for_completion=wait_for_completion,
        )

    async def sql(self, query: str) -> Any:
        return await self.client.sql.query(query=query)

    async def cluster_health(self) -> Any:
        return await self.client.cluster.health()
