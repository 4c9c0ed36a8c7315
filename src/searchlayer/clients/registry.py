"""Engine client registry — Builds the configured ``EngineClient``.

Client classes are imported lazily so that only the selected backend's
library has to be installed.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING

from searchlayer.clients.exceptions import ConfigurationError

if TYPE_CHECKING:
    from searchlayer.clients.base import EngineClient
    from searchlayer.config.settings import EngineSettings

logger = logging.getLogger(__name__)

# Maps backend names to (module_path, class_name) for lazy import
_CLIENT_MAP: dict[str, tuple[str, str]] = {
    "elasticsearch": ("searchlayer.clients.elasticsearch", "ElasticsearchClient"),
    "opensearch": ("searchlayer.clients.opensearch", "OpenSearchClient"),
}


def available_backends() -> list[str]:
    """List the backend names ``create_engine_client`` accepts."""
    return list(_CLIENT_MAP.keys())


def create_engine_client(settings: EngineSettings) -> EngineClient:
    """Instantiate (but do not initialize) the client for ``settings.backend``.

    Raises:
        ConfigurationError: If the backend is unknown.
    """
    entry = _CLIENT_MAP.get(settings.backend)
    if entry is None:
        raise ConfigurationError(
            f"Unknown engine backend '{settings.backend}'. Available backends: {available_backends()}"
        )

    module_path, class_name = entry
    client_class = getattr(importlib.import_module(module_path), class_name)

    logger.info("Using %s engine client at %s", settings.backend, settings.connection)
    return client_class(
        hosts=[settings.connection],
        request_timeout=settings.request_timeout_seconds,
        verify_certs=settings.verify_certs,
        **settings.extra,
    )
