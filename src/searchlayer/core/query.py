"""Query builder — Maps search parameters onto an engine query document.

A build starts from a seed ``QueryDocument`` holding at most one leaf clause
(see the leaf constructors below) and folds a fixed sequence of steps over it:

  1. window size (``page_size``)
  2. window offset (``(page - 1) * page_size``)
  3. source projection (``fields``)
  4. sort keys, in order
  5. filters, in order
  6. ranges, in order

Every step returns a new document; nothing is mutated, so a seed can be
reused across builds and the same inputs always render the same body.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from functools import reduce
from typing import Any

from pydantic import BaseModel, ConfigDict

from searchlayer.models.params import FilterItem, MultiFieldMode, RangeItem, SearchParams, SortItem


class QueryDocument(BaseModel):
    """Immutable accumulator for a query under construction."""

    model_config = ConfigDict(frozen=True)

    query: dict[str, Any] | None = None
    size: int | None = None
    offset: int | None = None
    source_includes: tuple[str, ...] = ()
    sort: tuple[dict[str, Any], ...] = ()
    filters: tuple[dict[str, Any], ...] = ()

    def with_size(self, size: int) -> QueryDocument:
        return self.model_copy(update={"size": size})

    def with_offset(self, offset: int) -> QueryDocument:
        return self.model_copy(update={"offset": offset})

    def with_source_includes(self, fields: Sequence[str]) -> QueryDocument:
        return self.model_copy(update={"source_includes": tuple(fields)})

    def with_sort(self, clause: dict[str, Any]) -> QueryDocument:
        return self.model_copy(update={"sort": (*self.sort, clause)})

    def with_filter(self, clause: dict[str, Any]) -> QueryDocument:
        return self.model_copy(update={"filters": (*self.filters, clause)})

    def to_body(self) -> dict[str, Any]:
        """Render the engine-native request body.

        The result is a fresh plain dict; callers may mutate it freely.
        """
        body: dict[str, Any] = {}

        if self.size is not None:
            body["size"] = self.size
        if self.offset is not None:
            body["from"] = self.offset
        if self.sort:
            body["sort"] = copy.deepcopy(list(self.sort))
        if self.source_includes:
            body["_source"] = {"includes": list(self.source_includes)}

        leaf = copy.deepcopy(self.query) if self.query is not None else None
        if self.filters:
            bool_clause: dict[str, Any] = {}
            if leaf is not None:
                bool_clause["must"] = [leaf]
            bool_clause["filter"] = copy.deepcopy(list(self.filters))
            body["query"] = {"bool": bool_clause}
        else:
            body["query"] = leaf if leaf is not None else {"match_all": {}}

        return body


# ── Leaf clauses ─────────────────────────────────────────────────────────


def match_all() -> QueryDocument:
    return QueryDocument()


def term(field: str, value: Any) -> QueryDocument:
    return QueryDocument(query={"term": {field: value}})


def terms(field: str, values: Sequence[Any]) -> QueryDocument:
    return QueryDocument(query={"terms": {field: list(values)}})


def match(field: str, text: str) -> QueryDocument:
    return QueryDocument(query={"match": {field: text}})


def exists(field: str) -> QueryDocument:
    return QueryDocument(query={"exists": {"field": field}})


def multi_field(text: str, fields: Sequence[str] = (), mode: MultiFieldMode = MultiFieldMode.MULTI_MATCH) -> QueryDocument:
    """Full-text clause across ``fields`` (engine defaults when empty)."""
    clause: dict[str, Any] = {"query": text}
    if fields:
        clause["fields"] = list(fields)
    return QueryDocument(query={mode.value: clause})


# ── Clause renderers ─────────────────────────────────────────────────────


def sort_clause(item: SortItem) -> dict[str, Any]:
    return {item.field: {"order": item.dir.value}}


def filter_clause(item: FilterItem) -> dict[str, Any]:
    value = list(item.value) if isinstance(item.value, list) else item.value
    return {item.type.value: {item.field: value}}


def range_clause(item: RangeItem) -> dict[str, Any]:
    bounds: dict[str, Any] = {}
    if item.from_ is not None:
        bounds["gte"] = item.from_
    if item.to is not None:
        bounds["lte"] = item.to
    return {"range": {item.field: bounds}}


# ── Build steps ──────────────────────────────────────────────────────────


def _apply_window(doc: QueryDocument, params: SearchParams) -> QueryDocument:
    return doc.with_size(params.page_size) if params.page_size else doc


def _apply_offset(doc: QueryDocument, params: SearchParams) -> QueryDocument:
    # A page without a page size has nothing to multiply by; no offset is set.
    if params.page and params.page_size:
        return doc.with_offset((params.page - 1) * params.page_size)
    return doc


def _apply_projection(doc: QueryDocument, params: SearchParams) -> QueryDocument:
    return doc.with_source_includes(params.fields) if params.fields else doc


def _apply_sort(doc: QueryDocument, params: SearchParams) -> QueryDocument:
    return reduce(lambda acc, item: acc.with_sort(sort_clause(item)), params.sort, doc)


def _apply_filters(doc: QueryDocument, params: SearchParams) -> QueryDocument:
    return reduce(lambda acc, item: acc.with_filter(filter_clause(item)), params.filter, doc)


def _apply_ranges(doc: QueryDocument, params: SearchParams) -> QueryDocument:
    return reduce(lambda acc, item: acc.with_filter(range_clause(item)), params.range, doc)


BUILD_STEPS: tuple[Callable[[QueryDocument, SearchParams], QueryDocument], ...] = (
    _apply_window,
    _apply_offset,
    _apply_projection,
    _apply_sort,
    _apply_filters,
    _apply_ranges,
)


def apply_params(seed: QueryDocument, params: SearchParams) -> QueryDocument:
    """Fold every build step over ``seed`` without rendering."""
    return reduce(lambda doc, step: step(doc, params), BUILD_STEPS, seed)


def build_query(seed: QueryDocument, params: SearchParams) -> dict[str, Any]:
    """Build the request body for ``params`` on top of ``seed``.

    Args:
        seed: Document carrying the entry point's leaf clause (or none).
        params: Validated search parameters.

    Returns:
        A plain, JSON-serializable request body.
    """
    return apply_params(seed, params).to_body()
