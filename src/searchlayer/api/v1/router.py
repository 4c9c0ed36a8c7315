"""API v1 Router — Search, document, maintenance, and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from searchlayer.api.v1.endpoints.documents import router as documents_router
from searchlayer.api.v1.endpoints.health import router as health_router
from searchlayer.api.v1.endpoints.maintenance import router as maintenance_router
from searchlayer.api.v1.endpoints.search import router as search_router

router = APIRouter()
router.include_router(search_router)
router.include_router(documents_router)
router.include_router(maintenance_router)
router.include_router(health_router)
