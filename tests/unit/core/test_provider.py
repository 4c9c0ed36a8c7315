"""Tests for the search provider."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from searchlayer.clients.exceptions import ClientNotInitializedError
from searchlayer.config.settings import Settings
from searchlayer.core.provider import SearchProvider
from searchlayer.models.params import TermSearchParams
from searchlayer.models.result import ResultEnvelope


def _sent_body(engine_client: AsyncMock) -> dict[str, Any]:
    index, body = engine_client.search.await_args.args
    return body


# ── Lifecycle ────────────────────────────────────────────────────────────────


class TestLifecycle:
    async def test_initialize_uses_injected_client(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.initialize()
        engine_client.initialize.assert_awaited_once()

    async def test_initialize_builds_client_from_settings(self, settings: Settings) -> None:
        client = AsyncMock()
        with patch("searchlayer.core.provider.create_engine_client", return_value=client) as factory:
            provider = SearchProvider(settings)
            await provider.initialize()
        factory.assert_called_once_with(settings.engine)
        client.initialize.assert_awaited_once()
        assert provider.client is client

    async def test_shutdown_closes_client(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.shutdown()
        engine_client.close.assert_awaited_once()

    async def test_call_before_initialize_raises(self, settings: Settings) -> None:
        provider = SearchProvider(settings)
        with pytest.raises(ClientNotInitializedError, match="not initialized"):
            await provider.search("docs", {"query": {"match_all": {}}})


# ── Search entry points ──────────────────────────────────────────────────────


class TestSearchEntryPoints:
    async def test_search_by_term_end_to_end(
        self, provider: SearchProvider, engine_client: AsyncMock, search_reply: dict
    ) -> None:
        engine_client.search.return_value = search_reply

        result = await provider.search_by_term(
            {"index": "docs", "searchField": "status", "term": "open", "pageSize": 10, "page": 2}
        )

        index, body = engine_client.search.await_args.args
        assert index == "docs"
        assert body == {"size": 10, "from": 10, "query": {"term": {"status": "open"}}}
        assert isinstance(result, ResultEnvelope)
        assert len(result.results) <= 10
        assert result.total == 42
        assert result.results[0]["_id"] == "doc_001"

    async def test_search_by_term_accepts_model(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.search_by_term(TermSearchParams(index="docs", search_field="status", term="open"))
        assert _sent_body(engine_client) == {"query": {"term": {"status": "open"}}}

    async def test_search_all(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.search_all({"index": "docs", "pageSize": 5})
        assert _sent_body(engine_client) == {"size": 5, "query": {"match_all": {}}}

    async def test_search_by_terms(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.search_by_terms({"index": "docs", "searchField": "tags", "terms": ["a", "b"]})
        assert _sent_body(engine_client) == {"query": {"terms": {"tags": ["a", "b"]}}}

    async def test_search_by_match(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.search_by_match({"index": "docs", "searchField": "title", "query": "solar"})
        assert _sent_body(engine_client) == {"query": {"match": {"title": "solar"}}}

    async def test_search_by_query_multi_fields(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.search_by_query_multi_fields(
            {"index": "docs", "query": "solar", "searchFields": ["title", "content"]}
        )
        assert _sent_body(engine_client) == {
            "query": {"multi_match": {"query": "solar", "fields": ["title", "content"]}}
        }

    async def test_search_by_query_multi_fields_query_string(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        await provider.search_by_query_multi_fields({"index": "docs", "query": "solar*", "mode": "query_string"})
        assert _sent_body(engine_client) == {"query": {"query_string": {"query": "solar*"}}}

    async def test_search_by_exists_with_filter(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.search_by_exists(
            {"index": "docs", "searchField": "author", "filter": [{"field": "status", "value": "open"}]}
        )
        assert _sent_body(engine_client) == {
            "query": {
                "bool": {
                    "must": [{"exists": {"field": "author"}}],
                    "filter": [{"term": {"status": "open"}}],
                }
            }
        }

    async def test_search_by_params_passes_body_through(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        body = {"size": 1, "sort": {"date": {"order": "desc"}}, "query": {"match_all": {}}}
        await provider.search_by_params("docs", body)
        engine_client.search.assert_awaited_once_with("docs", body)

    async def test_missing_required_param_is_rejected_before_io(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        with pytest.raises(ValidationError):
            await provider.search_by_term({"index": "docs", "term": "open"})
        engine_client.search.assert_not_awaited()

    def test_build_query_does_no_io(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        from searchlayer.core import query as q

        body = provider.build_query(q.term("a", 1), {"index": "docs", "page": 1, "pageSize": 3})
        assert body == {"size": 3, "from": 0, "query": {"term": {"a": 1}}}
        engine_client.search.assert_not_called()


# ── Error handling ───────────────────────────────────────────────────────────


class TestSearchErrors:
    async def test_search_failure_is_logged_and_reraised(
        self, settings: Settings, engine_client: AsyncMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        logger = logging.getLogger("test.provider")
        provider = SearchProvider(settings, client=engine_client, logger=logger)
        error = RuntimeError("engine down")
        engine_client.search.side_effect = error

        with caplog.at_level(logging.ERROR, logger="test.provider"), pytest.raises(RuntimeError) as exc_info:
            await provider.search_by_term({"index": "docs", "searchField": "status", "term": "open"})

        assert exc_info.value is error
        records = [r for r in caplog.records if r.name == "test.provider"]
        assert len(records) == 1
        assert '"term": {"status": "open"}' in records[0].getMessage()

    async def test_multi_search_failure_is_reraised(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        engine_client.msearch.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError, match="boom"):
            await provider.search_all_multi([{"index": "a"}])


# ── Multi search ─────────────────────────────────────────────────────────────


class TestMultiSearch:
    async def test_one_round_trip_in_order(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.msearch.return_value = {
            "responses": [
                {"hits": {"total": 1, "hits": [{"_id": "q0", "_source": {}}]}},
                {"error": {"type": "index_not_found_exception"}, "status": 404},
                {"hits": {"total": {"value": 1}, "hits": [{"_id": "q2", "_source": {}}]}},
            ]
        }

        results = await provider.search_all_multi(
            [{"index": "a", "pageSize": 1}, {"index": "missing"}, {"index": "c", "fields": ["title"]}]
        )

        engine_client.msearch.assert_awaited_once()
        (searches,) = engine_client.msearch.await_args.args
        assert searches == [
            {"index": "a"},
            {"size": 1, "query": {"match_all": {}}},
            {"index": "missing"},
            {"query": {"match_all": {}}},
            {"index": "c"},
            {"_source": {"includes": ["title"]}, "query": {"match_all": {}}},
        ]
        assert results[0].results[0]["_id"] == "q0"
        assert results[1] == {"error": {"type": "index_not_found_exception"}, "status": 404}
        assert results[2].results[0]["_id"] == "q2"


# ── Documents ────────────────────────────────────────────────────────────────


class TestDocuments:
    async def test_get_by_id_returns_source(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.get.return_value = {"_id": "1", "found": True, "_source": {"title": "x"}}
        doc = await provider.get_by_id("docs", "1", ["title"])
        engine_client.get.assert_awaited_once_with("docs", "1", ["title"])
        assert doc == {"title": "x"}

    async def test_get_by_id_propagates_not_found(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        class NotFoundError(Exception):
            pass

        engine_client.get.side_effect = NotFoundError("missing")
        with pytest.raises(NotFoundError):
            await provider.get_by_id("docs", "missing")

    async def test_create_strips_identifier_fields(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        await provider.create("docs", "1", {"_id": "1", "id": "1", "title": "x"})
        engine_client.create.assert_awaited_once_with("docs", "1", {"title": "x"})

    async def test_update_existing_sends_partial_update(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        engine_client.exists.return_value = True
        await provider.update("docs", "1", {"id": "1", "title": "y"})
        engine_client.update.assert_awaited_once_with("docs", "1", {"title": "y"})
        engine_client.create.assert_not_awaited()

    async def test_update_missing_creates_same_document(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        item = {"_id": "1", "title": "y", "status": "open"}
        engine_client.exists.return_value = False
        await provider.update("docs", "1", item)
        upserted = engine_client.create.await_args

        engine_client.create.reset_mock()
        await provider.create("docs", "1", item)

        assert upserted == engine_client.create.await_args
        engine_client.update.assert_not_awaited()

    async def test_delete_twice_is_a_no_op_the_second_time(
        self, provider: SearchProvider, engine_client: AsyncMock
    ) -> None:
        engine_client.exists.side_effect = [True, False]
        await provider.delete("docs", "1")
        await provider.delete("docs", "1")
        engine_client.delete.assert_awaited_once_with("docs", "1")

    async def test_exists_is_a_boolean(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.exists.return_value = False
        assert await provider.exists("docs", "1") is False


# ── Delete by time ───────────────────────────────────────────────────────────


class TestDeleteByTime:
    async def test_builds_cutoff_range_and_options(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.delete_by_query.return_value = {"task": "node:123"}
        fixed_now = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

        with patch("searchlayer.core.provider._utcnow", return_value=fixed_now):
            reply = await provider.delete_by_time(
                {"index": "logs", "field": "@timestamp", "seconds": 3600, "format": "%Y-%m-%d %H:%M:%S"}
            )

        assert reply == {"task": "node:123"}
        engine_client.delete_by_query.assert_awaited_once_with(
            "logs",
            {"query": {"bool": {"must": {"range": {"@timestamp": {"lte": "2024-06-15 11:00:00"}}}}}},
            conflicts="proceed",
            wait_for_completion=False,
        )

    async def test_default_format_from_settings(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        fixed_now = datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)
        with patch("searchlayer.core.provider._utcnow", return_value=fixed_now):
            await provider.delete_by_time({"index": "logs", "field": "ts", "seconds": 60})

        body = engine_client.delete_by_query.await_args.args[1]
        assert body["query"]["bool"]["must"]["range"]["ts"]["lte"] == "2024-06-15T11:59:00"

    async def test_failure_is_logged_and_reraised(
        self, provider: SearchProvider, engine_client: AsyncMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        engine_client.delete_by_query.side_effect = RuntimeError("rejected")
        with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError, match="rejected"):
            await provider.delete_by_time({"index": "logs", "field": "ts", "seconds": 60})
        assert any("delete by time" in r.getMessage() for r in caplog.records)


# ── SQL and health ───────────────────────────────────────────────────────────


class TestSqlAndHealth:
    async def test_run_sql_query_zips_rows(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.sql.return_value = {"columns": [{"name": "a"}, {"name": "b"}], "rows": [[1, 2]]}
        assert await provider.run_sql_query("SELECT a, b FROM docs") == [{"a": 1, "b": 2}]
        engine_client.sql.assert_awaited_once_with("SELECT a, b FROM docs")

    async def test_health_green(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.cluster_health.return_value = {
            "status": "green",
            "cluster_name": "test-cluster",
            "number_of_nodes": 3,
        }
        health = await provider.health_check()
        assert health.status == "healthy"
        assert "test-cluster" in (health.message or "")

    async def test_health_yellow_is_degraded(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.cluster_health.return_value = {"status": "yellow"}
        assert (await provider.health_check()).status == "degraded"

    async def test_health_exception(self, provider: SearchProvider, engine_client: AsyncMock) -> None:
        engine_client.cluster_health.side_effect = RuntimeError("Connection refused")
        health = await provider.health_check()
        assert health.status == "unhealthy"
        assert health.message == "Connection refused"

    async def test_health_not_initialized(self, settings: Settings) -> None:
        health = await SearchProvider(settings).health_check()
        assert health.status == "unhealthy"
