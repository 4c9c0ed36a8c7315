"""Result normalizer — One place that understands every engine reply shape.

Engine client libraries have changed their reply envelope over the years:

  - ``elasticsearch`` 8+ returns response objects exposing ``.body``
  - older JavaScript-era clients wrapped the payload as ``{"body": {...}}``
  - ``opensearch-py`` returns the bare payload dict
  - ``hits.total`` is a bare integer before Elasticsearch 7 and
    ``{"value": n, "relation": "eq" | "gte"}`` afterwards

``unwrap_body`` and ``extract_total`` detect these by shape, so the rest of
the code never branches on a client or engine version.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from searchlayer.models.result import ResultEnvelope

_PAYLOAD_KEYS = ("hits", "responses", "_source", "found", "columns", "rows", "schema", "datarows")


def unwrap_body(raw: Any) -> Any:
    """Return the payload of an engine reply, whatever wrapper it came in."""
    if not isinstance(raw, Mapping) and hasattr(raw, "body"):
        return raw.body
    if isinstance(raw, Mapping) and "body" in raw and not any(key in raw for key in _PAYLOAD_KEYS):
        return raw["body"]
    return raw


def extract_total(hits: Mapping[str, Any]) -> int:
    """Read ``hits.total`` as a plain integer.

    The ``relation`` qualifier is dropped: a lower-bound total is reported
    as if it were exact.
    """
    total = hits.get("total")
    if isinstance(total, Mapping):
        total = total.get("value", 0)
    if total is None:
        return 0
    return int(total)


def merge_hit(hit: Mapping[str, Any], id_key: str = "_id") -> dict[str, Any]:
    """Merge a hit's stored source with its engine id; the id wins on collision."""
    doc = dict(hit.get("_source") or {})
    doc[id_key] = hit.get("_id")
    return doc


def _envelope(payload: Mapping[str, Any], id_key: str) -> ResultEnvelope:
    hits = payload.get("hits") or {}
    return ResultEnvelope(
        results=[merge_hit(hit, id_key) for hit in hits.get("hits") or []],
        total=extract_total(hits),
    )


def normalize_search(raw: Any, id_key: str = "_id") -> ResultEnvelope:
    """Normalize a search reply into a ``ResultEnvelope``."""
    return _envelope(unwrap_body(raw), id_key)


def normalize_multi_search(raw: Any, id_key: str = "_id") -> list[ResultEnvelope | dict[str, Any]]:
    """Normalize a multi-search reply, one entry per sub-query, in request order.

    A sub-query the engine failed is returned exactly as the engine reported
    it (a dict with an ``error`` key) instead of failing the whole batch.
    """
    payload = unwrap_body(raw)
    normalized: list[ResultEnvelope | dict[str, Any]] = []
    for response in payload.get("responses") or []:
        if "error" in response:
            normalized.append(dict(response))
        else:
            normalized.append(_envelope(response, id_key))
    return normalized


def normalize_get(raw: Any) -> dict[str, Any] | None:
    """Return the stored source of a get reply, or ``None`` if not found."""
    payload = unwrap_body(raw)
    if payload is None or payload.get("found") is False:
        return None
    return dict(payload.get("_source") or {})


def normalize_sql(raw: Any) -> list[dict[str, Any]]:
    """Zip SQL column names against each positional row.

    Accepts the Elasticsearch SQL shape (``columns``/``rows``) and the
    OpenSearch SQL plugin shape (``schema``/``datarows``).
    """
    payload = unwrap_body(raw)
    if "columns" in payload:
        columns, rows = payload["columns"], payload.get("rows") or []
    else:
        columns, rows = payload.get("schema") or [], payload.get("datarows") or []

    keys = [column["name"] for column in columns]
    return [dict(zip(keys, row, strict=False)) for row in rows]
