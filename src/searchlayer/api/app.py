"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from searchlayer import __version__
from searchlayer.api.deps import set_provider
from searchlayer.api.v1.router import router as v1_router
from searchlayer.config.settings import Settings
from searchlayer.core.provider import SearchProvider
from searchlayer.observability.logging import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "searchlayer.yaml"

# Fully resolved settings as JSON, exported by the CLI so that every uvicorn
# worker process builds its app from the same configuration.
RESOLVED_SETTINGS_ENV = "SEARCHLAYER_RESOLVED_SETTINGS"


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load application settings.

    Sources, first match wins: settings exported by the CLI in
    ``SEARCHLAYER_RESOLVED_SETTINGS`` (only when no path or overrides are
    given), then ``config_path``, then ``./searchlayer.yaml``, then the
    environment alone. ``overrides`` are applied on top of the file or
    environment values and validated with them.
    """
    overrides = overrides or {}

    resolved = os.environ.get(RESOLVED_SETTINGS_ENV)
    if config_path is None and not overrides and resolved:
        return Settings(**json.loads(resolved))

    if config_path is None and Path(DEFAULT_CONFIG_FILE).exists():
        config_path = DEFAULT_CONFIG_FILE

    if config_path is not None:
        logger.info("Loading configuration from %s", config_path)
        return Settings.from_yaml(config_path, **overrides)
    return Settings(**overrides)


def export_settings(settings: Settings) -> None:
    """Publish ``settings`` for app factories running in worker processes."""
    os.environ[RESOLVED_SETTINGS_ENV] = settings.model_dump_json()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads them via ``load_settings``.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the provider on startup and close it on shutdown."""
        setup_logging(settings.observability)
        logger.info("Starting searchlayer v%s", __version__)

        provider = SearchProvider(settings, logger=logging.getLogger("searchlayer.provider"))
        await provider.initialize()
        set_provider(provider)

        app.state.settings = settings
        app.state.provider = provider

        logger.info("searchlayer is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down searchlayer...")
        await provider.shutdown()
        set_provider(None)
        logger.info("searchlayer shutdown complete")

    app = FastAPI(
        title="searchlayer",
        description=(
            "Typed search entry points over Elasticsearch / OpenSearch with "
            "a stable `{results, total}` result envelope."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
