"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from searchlayer.core.provider import SearchProvider

# Global provider instance (set during application lifespan)
_provider: SearchProvider | None = None


def set_provider(provider: SearchProvider | None) -> None:
    """Set the global provider instance (called during app lifespan)."""
    global _provider
    _provider = provider


def get_provider() -> SearchProvider:
    """Get the global search provider.

    Raises:
        RuntimeError: If the provider is not initialized.
    """
    if _provider is None:
        raise RuntimeError("Search provider not initialized. Is the server running?")
    return _provider
