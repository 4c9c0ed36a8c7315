"""Integration test fixtures: live Elasticsearch / OpenSearch nodes seeded with sample documents.

Expects the engines to be reachable at:
    Elasticsearch  http://localhost:9200
    OpenSearch     http://localhost:9201

Each fixture seeds its index on first use and skips when the node is down.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import pytest

SEEDED_INDEX = "searchlayer-test"

SAMPLE_DOCUMENTS: list[dict[str, Any]] = [
    {
        "id": "doc-001",
        "title": "Solar Nowcasting with Satellite Imagery",
        "content": "Short-horizon irradiance forecasts from geostationary satellite frames.",
        "author": "Alice Johnson",
        "status": "published",
        "tags": ["solar", "forecasting"],
        "year": 2024,
        "updated_at": "2024-06-15T00:00:00",
    },
    {
        "id": "doc-002",
        "title": "Transformer Models for Document Ranking",
        "content": "Cross-encoders rerank candidate passages retrieved by BM25.",
        "author": "Bob Smith",
        "status": "published",
        "tags": ["ranking", "transformers"],
        "year": 2023,
        "updated_at": "2023-03-20T00:00:00",
    },
    {
        "id": "doc-003",
        "title": "Federated Training for Medical Imaging",
        "content": "Model averaging across hospital sites without sharing patient scans.",
        "author": "Carol Zhang",
        "status": "draft",
        "tags": ["privacy", "imaging"],
        "year": 2022,
        "updated_at": "2022-09-01T00:00:00",
    },
    {
        "id": "doc-004",
        "title": "Solar Panel Degradation in Desert Climates",
        "content": "Field measurements of module output loss under dust and heat.",
        "author": "Alice Johnson",
        "status": "published",
        "tags": ["solar", "materials"],
        "year": 2021,
        "updated_at": "2021-01-10T00:00:00",
    },
]

MAPPING = {
    "mappings": {
        "properties": {
            "title": {"type": "text"},
            "content": {"type": "text"},
            "author": {"type": "keyword"},
            "status": {"type": "keyword"},
            "tags": {"type": "keyword"},
            "year": {"type": "integer"},
            "updated_at": {"type": "date", "format": "yyyy-MM-dd'T'HH:mm:ss"},
        }
    }
}


def _wait_for_service(url: str, timeout: float = 30.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            if httpx.get(url, timeout=5).status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _seed(host: str, index: str = SEEDED_INDEX) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{index}", params={"ignore_unavailable": "true"})

        resp = await client.put(f"/{index}", json=MAPPING)
        resp.raise_for_status()

        for doc in SAMPLE_DOCUMENTS:
            resp = await client.put(f"/{index}/_doc/{doc['id']}", json=doc)
            resp.raise_for_status()

        await client.post(f"/{index}/_refresh")


# ── Elasticsearch ───────────────────────────────────────────────


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running and seeded."""
    host = "http://localhost:9200"
    if not _wait_for_service(host):
        pytest.skip("Elasticsearch not available at localhost:9200")
    asyncio.run(_seed(host))
    return host


# ── OpenSearch ──────────────────────────────────────────────────


@pytest.fixture(scope="session")
def opensearch_ready() -> str:
    """Ensure OpenSearch is running and seeded."""
    host = "http://localhost:9201"
    if not _wait_for_service(host):
        pytest.skip("OpenSearch not available at localhost:9201")
    asyncio.run(_seed(host))
    return host
