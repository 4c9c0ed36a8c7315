"""Document endpoints — Get, create, upsert and delete single documents."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from searchlayer.api.deps import get_provider
from searchlayer.api.errors import to_http_exception
from searchlayer.core.provider import SearchProvider

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get(
    "/{index}/{doc_id}",
    summary="Get document",
    description="Returns the stored source. `fields` restricts which source fields come back.",
    responses={404: {"description": "Document or index not found"}},
)
async def get_document(
    index: str,
    doc_id: str,
    fields: list[str] | None = Query(default=None),
    provider: SearchProvider = Depends(get_provider),
) -> dict[str, Any]:
    try:
        doc = await provider.get_by_id(index, doc_id, fields)
    except Exception as e:
        raise to_http_exception(e, "Get document") from e
    if doc is None:
        raise HTTPException(status_code=404, detail=f"Document '{doc_id}' not found")
    return doc


@router.head("/{index}/{doc_id}", summary="Check document existence")
async def document_exists(
    index: str,
    doc_id: str,
    provider: SearchProvider = Depends(get_provider),
) -> None:
    try:
        found = await provider.exists(index, doc_id)
    except Exception as e:
        raise to_http_exception(e, "Exists check") from e
    if not found:
        raise HTTPException(status_code=404)


@router.post(
    "/{index}/{doc_id}",
    status_code=status.HTTP_201_CREATED,
    summary="Create document",
    responses={409: {"description": "A document with this id already exists"}},
)
async def create_document(
    index: str,
    doc_id: str,
    item: dict[str, Any] = Body(...),
    provider: SearchProvider = Depends(get_provider),
) -> dict[str, str]:
    try:
        await provider.create(index, doc_id, item)
    except Exception as e:
        raise to_http_exception(e, "Create document") from e
    return {"_id": doc_id, "result": "created"}


@router.put(
    "/{index}/{doc_id}",
    summary="Update or create document",
    description="Partially updates the document, or creates it when it does not exist.",
)
async def update_document(
    index: str,
    doc_id: str,
    item: dict[str, Any] = Body(...),
    provider: SearchProvider = Depends(get_provider),
) -> dict[str, str]:
    try:
        await provider.update(index, doc_id, item)
    except Exception as e:
        raise to_http_exception(e, "Update document") from e
    return {"_id": doc_id, "result": "updated"}


@router.delete(
    "/{index}/{doc_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete document",
    description="Deleting a document that does not exist succeeds without doing anything.",
)
async def delete_document(
    index: str,
    doc_id: str,
    provider: SearchProvider = Depends(get_provider),
) -> None:
    try:
        await provider.delete(index, doc_id)
    except Exception as e:
        raise to_http_exception(e, "Delete document") from e
