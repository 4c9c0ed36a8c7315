"""Library-level exceptions.

Errors raised by the engine client library itself (transport failures,
not-found, conflicts) are not wrapped; they propagate to the caller as-is.
"""


class SearchLayerError(Exception):
    """Base exception for searchlayer errors."""


class ConfigurationError(SearchLayerError):
    """Raised when engine configuration is invalid or a client package is missing."""


class ClientNotInitializedError(SearchLayerError):
    """Raised when an engine call is made before ``initialize()``."""
