"""Translation of engine failures into HTTP errors."""

from __future__ import annotations

import logging

from fastapi import HTTPException

from searchlayer.clients.exceptions import SearchLayerError

logger = logging.getLogger(__name__)


def engine_status(exc: Exception) -> int | None:
    """Return the HTTP status an engine client error carries, if any.

    ``elasticsearch`` errors expose it as ``meta.status``; ``opensearch-py``
    errors as ``status_code`` (which is ``"N/A"`` for transport failures).
    """
    meta = getattr(exc, "meta", None)
    status = getattr(meta, "status", None)
    if status is None:
        status = getattr(exc, "status_code", None)
    return status if isinstance(status, int) else None


def to_http_exception(exc: Exception, action: str) -> HTTPException:
    """Map an engine failure to an ``HTTPException``.

    Client-side engine errors (404, 409, 400...) keep their status; anything
    else becomes 502. Local configuration problems become 503.
    """
    if isinstance(exc, SearchLayerError):
        logger.error("%s failed: %s", action, exc)
        return HTTPException(status_code=503, detail=f"{action} failed: {exc!s}")

    status = engine_status(exc)
    if status is not None and 400 <= status < 500:
        logger.info("%s rejected by engine (%d): %s", action, status, exc)
        return HTTPException(status_code=status, detail=f"{action} failed: {exc!s}")

    logger.error("%s failed: %s", action, exc, exc_info=True)
    return HTTPException(status_code=502, detail=f"{action} failed: {exc!s}")
