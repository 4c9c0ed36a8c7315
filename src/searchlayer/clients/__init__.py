"""Engine clients — Adapters from the provider's narrow interface to client libraries.

Built-in clients:
  - elasticsearch: Elasticsearch 8.x client via ``elasticsearch[async]``
  - opensearch: OpenSearch v2+ via ``opensearch-py``

Implement ``EngineClient`` to plug in another library.
"""

from searchlayer.clients.base import EngineClient
from searchlayer.clients.registry import available_backends, create_engine_client

__all__ = ["EngineClient", "available_backends", "create_engine_client"]
