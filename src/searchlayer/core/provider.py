"""Search provider — Entry points and document helpers over one engine client.

Each search entry point seeds the query builder with its own leaf clause,
builds the request body from validated parameters, sends it through the
engine client and normalizes the reply:

    params → leaf seed → build_query → EngineClient.search → normalize_search

The provider holds no per-request state. The engine client is the only
long-lived resource and is shared by every concurrent call.

``update`` and ``delete`` check for existence before acting. The check and
the write are two separate round trips, so concurrent writers to the same id
can interleave; callers needing strict consistency should use the engine's
own conditional writes.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

from searchlayer.clients.exceptions import ClientNotInitializedError
from searchlayer.clients.registry import create_engine_client
from searchlayer.core import query as q
from searchlayer.core.normalizer import (
    normalize_get,
    normalize_multi_search,
    normalize_search,
    normalize_sql,
    unwrap_body,
)
from searchlayer.core.query import QueryDocument, build_query
from searchlayer.models.params import (
    DeleteByTimeParams,
    ExistsSearchParams,
    MatchSearchParams,
    MultiFieldSearchParams,
    SearchParams,
    TermSearchParams,
    TermsSearchParams,
)
from searchlayer.models.result import EngineHealth, ResultEnvelope

if TYPE_CHECKING:
    from searchlayer.clients.base import EngineClient
    from searchlayer.config.settings import Settings

P = TypeVar("P", bound=BaseModel)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _coerce(model: type[P], params: P | Mapping[str, Any]) -> P:
    """Validate a raw mapping into ``model``; pass model instances through."""
    if isinstance(params, model):
        return params
    return model.model_validate(params)


def _dumps(value: Any) -> str:
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True)
    if isinstance(value, Sequence) and value and all(isinstance(v, BaseModel) for v in value):
        return json.dumps([v.model_dump(mode="json", by_alias=True) for v in value])
    return json.dumps(value, default=str)


class SearchProvider:
    """Query-building and result-normalizing front end for one search engine.

    Args:
        settings: Application settings (engine connection and search options).
        client: Engine client to use. When omitted, ``initialize()`` builds
            one from ``settings.engine``.
        logger: Logger for failure reports. Defaults to this module's logger.
    """

    def __init__(
        self,
        settings: Settings,
        client: EngineClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self._client = client
        self._logger = logger or logging.getLogger(__name__)

    @property
    def client(self) -> EngineClient:
        if self._client is None:
            raise ClientNotInitializedError("Engine client not initialized. Call initialize() first.")
        return self._client

    @property
    def id_key(self) -> str:
        return self.settings.search.id_key

    async def initialize(self) -> None:
        """Create (if needed) and initialize the engine client."""
        if self._client is None:
            self._client = create_engine_client(self.settings.engine)
        await self._client.initialize()
        self._logger.info("Search provider ready (%s)", self._client.name)

    async def shutdown(self) -> None:
        """Close the engine client."""
        if self._client is not None:
            await self._client.close()
            self._logger.info("Search provider shut down")

    # ── Query building ───────────────────────────────────────────────────

    def build_query(self, seed: QueryDocument, params: SearchParams | Mapping[str, Any]) -> dict[str, Any]:
        """Build a request body without sending it."""
        return build_query(seed, _coerce(SearchParams, params))

    # ── Search entry points ──────────────────────────────────────────────

    async def search_all(self, params: SearchParams | Mapping[str, Any]) -> ResultEnvelope:
        return await self.search_by_query_builder(q.match_all(), _coerce(SearchParams, params))

    async def search_by_term(self, params: TermSearchParams | Mapping[str, Any]) -> ResultEnvelope:
        p = _coerce(TermSearchParams, params)
        return await self.search_by_query_builder(q.term(p.search_field, p.term), p)

    async def search_by_terms(self, params: TermsSearchParams | Mapping[str, Any]) -> ResultEnvelope:
        p = _coerce(TermsSearchParams, params)
        return await self.search_by_query_builder(q.terms(p.search_field, p.terms), p)

    async def search_by_match(self, params: MatchSearchParams | Mapping[str, Any]) -> ResultEnvelope:
        p = _coerce(MatchSearchParams, params)
        return await self.search_by_query_builder(q.match(p.search_field, p.query), p)

    async def search_by_query_multi_fields(
        self, params: MultiFieldSearchParams | Mapping[str, Any]
    ) -> ResultEnvelope:
        p = _coerce(MultiFieldSearchParams, params)
        return await self.search_by_query_builder(q.multi_field(p.query, p.search_fields, p.mode), p)

    async def search_by_exists(self, params: ExistsSearchParams | Mapping[str, Any]) -> ResultEnvelope:
        p = _coerce(ExistsSearchParams, params)
        return await self.search_by_query_builder(q.exists(p.search_field), p)

    async def search_by_query_builder(
        self, seed: QueryDocument, params: SearchParams | Mapping[str, Any]
    ) -> ResultEnvelope:
        """Build on a caller-supplied seed and run the search."""
        p = _coerce(SearchParams, params)
        return await self.search(p.index, build_query(seed, p))

    async def search_by_params(self, index: str, body: dict[str, Any]) -> ResultEnvelope:
        """Run a caller-built request body as-is."""
        return await self.search(index, body)

    async def search(self, index: str, body: dict[str, Any]) -> ResultEnvelope:
        """Send ``body`` to ``index`` and normalize the reply.

        Engine failures are logged with the serialized body and re-raised.
        """
        try:
            raw = await self.client.search(index, body)
        except Exception:
            self._logger.error("Failed to run search on '%s': params=%s", index, _dumps(body), exc_info=True)
            raise
        return normalize_search(raw, self.id_key)

    async def search_all_multi(
        self, params_list: Sequence[SearchParams | Mapping[str, Any]]
    ) -> list[ResultEnvelope | dict[str, Any]]:
        """Run several match-all searches in one multi-search round trip.

        ``result[i]`` answers ``params_list[i]``. A sub-query the engine
        rejected comes back as the engine's error entry.
        """
        validated = [_coerce(SearchParams, p) for p in params_list]
        searches: list[dict[str, Any]] = []
        for p in validated:
            searches.append({"index": p.index})
            searches.append(build_query(q.match_all(), p))

        try:
            raw = await self.client.msearch(searches)
        except Exception:
            self._logger.error("Failed to run multi search: params=%s", _dumps(validated), exc_info=True)
            raise
        return normalize_multi_search(raw, self.id_key)

    # ── Documents ────────────────────────────────────────────────────────

    async def get_by_id(self, index: str, id: str, fields: Sequence[str] | None = None) -> dict[str, Any] | None:
        """Fetch one stored document.

        The engine's not-found error propagates; ``None`` is returned only
        when the engine answers with ``found: false`` instead of an error.
        """
        raw = await self.client.get(index, id, fields)
        return normalize_get(raw)

    async def exists(self, index: str, id: str) -> bool:
        return await self.client.exists(index, id)

    async def create(self, index: str, id: str, item: Mapping[str, Any]) -> None:
        """Index ``item`` under ``id``; identifier fields are not stored in the body."""
        await self.client.create(index, id, self._strip_ids(item))

    async def update(self, index: str, id: str, item: Mapping[str, Any]) -> None:
        """Partially update ``id``, creating it when it does not exist yet."""
        if not await self.exists(index, id):
            await self.create(index, id, item)
            return
        await self.client.update(index, id, self._strip_ids(item))

    async def delete(self, index: str, id: str) -> None:
        """Delete ``id``. Deleting a missing document is a no-op."""
        if not await self.exists(index, id):
            return
        await self.client.delete(index, id)

    async def delete_by_time(self, params: DeleteByTimeParams | Mapping[str, Any]) -> Any:
        """Start an async delete of documents whose ``field`` is older than ``seconds``.

        Returns as soon as the engine accepts the task. Version conflicts
        with concurrent writes are skipped rather than aborting the task.
        """
        p = _coerce(DeleteByTimeParams, params)
        fmt = p.format or self.settings.search.delete_by_time_format
        cutoff = (_utcnow() - timedelta(seconds=p.seconds)).strftime(fmt)
        body = {"query": {"bool": {"must": {"range": {p.field: {"lte": cutoff}}}}}}

        try:
            raw = await self.client.delete_by_query(p.index, body, conflicts="proceed", wait_for_completion=False)
        except Exception:
            self._logger.error("Failed to delete by time: params=%s", _dumps(p), exc_info=True)
            raise
        return unwrap_body(raw)

    async def run_sql_query(self, query: str) -> list[dict[str, Any]]:
        """Run a SQL query and return one dict per row."""
        return normalize_sql(await self.client.sql(query))

    # ── Health ───────────────────────────────────────────────────────────

    async def health_check(self) -> EngineHealth:
        """Check engine cluster health."""
        if self._client is None:
            return EngineHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = unwrap_body(await self._client.cluster_health())
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            self._logger.warning("Engine health check failed: %s", e)
            return EngineHealth(status="unhealthy", message=str(e))

        status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}
        return EngineHealth(
            status=status_map.get(health.get("status", "red"), "unhealthy"),
            latency_ms=latency_ms,
            last_check=_utcnow().isoformat(),
            message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
        )

    def _strip_ids(self, item: Mapping[str, Any]) -> dict[str, Any]:
        strip = set(self.settings.search.strip_fields)
        return {key: value for key, value in item.items() if key not in strip}
