"""Search endpoints — One route per search entry point, plus multi and raw search.

Every route returns the same ``{results, total}`` envelope regardless of the
engine version or client library behind the provider.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from searchlayer.api.deps import get_provider
from searchlayer.api.errors import to_http_exception
from searchlayer.core.provider import SearchProvider
from searchlayer.models.params import (
    ExistsSearchParams,
    MatchSearchParams,
    MultiFieldSearchParams,
    SearchParams,
    TermSearchParams,
    TermsSearchParams,
)
from searchlayer.models.result import ResultEnvelope

router = APIRouter(prefix="/search", tags=["search"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    422: {"description": "Validation error — invalid search parameters"},
    502: {"description": "The search engine failed to answer"},
}


class MultiSearchRequest(BaseModel):
    """Several match-all searches sent as one multi-search request."""

    queries: list[SearchParams] = Field(min_length=1, description="Search parameters, one per sub-query")


class MultiSearchResponse(BaseModel):
    """Per-query results in request order.

    Entries are ``{results, total}`` envelopes, or the engine's error object
    for sub-queries that failed.
    """

    responses: list[dict[str, Any]] = Field(description="One entry per query, in request order")


async def _run(action: str, coro: Any) -> Any:
    try:
        return await coro
    except Exception as e:
        raise to_http_exception(e, action) from e


@router.post("/all", response_model=ResultEnvelope, summary="Match-all search", responses=_ERROR_RESPONSES)
async def search_all(params: SearchParams, provider: SearchProvider = Depends(get_provider)) -> ResultEnvelope:
    return await _run("Search", provider.search_all(params))


@router.post("/term", response_model=ResultEnvelope, summary="Exact term search", responses=_ERROR_RESPONSES)
async def search_by_term(
    params: TermSearchParams, provider: SearchProvider = Depends(get_provider)
) -> ResultEnvelope:
    return await _run("Term search", provider.search_by_term(params))


@router.post("/terms", response_model=ResultEnvelope, summary="Terms-set search", responses=_ERROR_RESPONSES)
async def search_by_terms(
    params: TermsSearchParams, provider: SearchProvider = Depends(get_provider)
) -> ResultEnvelope:
    return await _run("Terms search", provider.search_by_terms(params))


@router.post("/match", response_model=ResultEnvelope, summary="Scored match search", responses=_ERROR_RESPONSES)
async def search_by_match(
    params: MatchSearchParams, provider: SearchProvider = Depends(get_provider)
) -> ResultEnvelope:
    return await _run("Match search", provider.search_by_match(params))


@router.post(
    "/multi-field",
    response_model=ResultEnvelope,
    summary="Multi-field full-text search",
    description="Runs a `multi_match` or `query_string` clause depending on `mode`.",
    responses=_ERROR_RESPONSES,
)
async def search_by_query_multi_fields(
    params: MultiFieldSearchParams, provider: SearchProvider = Depends(get_provider)
) -> ResultEnvelope:
    return await _run("Multi-field search", provider.search_by_query_multi_fields(params))


@router.post("/exists", response_model=ResultEnvelope, summary="Field existence search", responses=_ERROR_RESPONSES)
async def search_by_exists(
    params: ExistsSearchParams, provider: SearchProvider = Depends(get_provider)
) -> ResultEnvelope:
    return await _run("Exists search", provider.search_by_exists(params))


@router.post("/multi", response_model=MultiSearchResponse, summary="Multi search", responses=_ERROR_RESPONSES)
async def search_all_multi(
    request: MultiSearchRequest, provider: SearchProvider = Depends(get_provider)
) -> MultiSearchResponse:
    results = await _run("Multi search", provider.search_all_multi(request.queries))
    return MultiSearchResponse(
        responses=[r.model_dump() if isinstance(r, ResultEnvelope) else r for r in results],
    )


@router.post(
    "/raw/{index}",
    response_model=ResultEnvelope,
    summary="Raw query search",
    description="Sends the request body to the engine unchanged and normalizes the reply.",
    responses=_ERROR_RESPONSES,
)
async def search_by_params(
    index: str,
    body: dict[str, Any] = Body(...),
    provider: SearchProvider = Depends(get_provider),
) -> ResultEnvelope:
    return await _run("Raw search", provider.search_by_params(index, body))
