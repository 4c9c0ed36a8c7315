"""Maintenance endpoints — Time-based cleanup and SQL queries."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from searchlayer.api.deps import get_provider
from searchlayer.api.errors import to_http_exception
from searchlayer.core.provider import SearchProvider
from searchlayer.models.params import DeleteByTimeParams

router = APIRouter(tags=["maintenance"])


class SqlRequest(BaseModel):
    query: str = Field(min_length=1, description="SQL statement")


class SqlResponse(BaseModel):
    rows: list[dict[str, Any]] = Field(description="One object per row, keyed by column name")


@router.post(
    "/maintenance/delete-by-time",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Delete documents older than a cutoff",
    description=(
        "Starts an asynchronous delete-by-query for documents whose `field` is older than "
        "`seconds` ago. Returns the engine's task reply once the task is accepted."
    ),
)
async def delete_by_time(
    params: DeleteByTimeParams,
    provider: SearchProvider = Depends(get_provider),
) -> dict[str, Any]:
    try:
        reply = await provider.delete_by_time(params)
    except Exception as e:
        raise to_http_exception(e, "Delete by time") from e
    return dict(reply or {})


@router.post("/sql", response_model=SqlResponse, summary="Run a SQL query")
async def run_sql(
    request: SqlRequest,
    provider: SearchProvider = Depends(get_provider),
) -> SqlResponse:
    try:
        rows = await provider.run_sql_query(request.query)
    except Exception as e:
        raise to_http_exception(e, "SQL query") from e
    return SqlResponse(rows=rows)
