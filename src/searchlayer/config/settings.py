"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. Constructor arguments, which is how YAML config files and CLI overrides
     are applied (see ``Settings.from_yaml``)
  2. Environment variables (SEARCHLAYER_ prefix)
  3. A ``.env`` file in the working directory
  4. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    host: str = Field(default="0.0.0.0", description="Server bind address")
    port: int = Field(default=8080, description="Server port")
    workers: int = Field(default=1, ge=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class EngineSettings(BaseModel):
    """Search engine connection.

    Only the address and request timeout are interpreted here; anything else
    the client library understands goes through ``extra``.
    """

    backend: Literal["elasticsearch", "opensearch"] = Field(
        default="elasticsearch",
        description="Engine client implementation",
    )
    connection: str = Field(min_length=1, description="Engine node URL")
    request_timeout_ms: int = Field(default=10 * 60 * 1000, gt=0, description="Per-request timeout in milliseconds")
    verify_certs: bool = Field(default=True, description="Whether to verify TLS certificates")
    extra: dict[str, Any] = Field(default_factory=dict, description="Client constructor options")

    @field_validator("connection")
    @classmethod
    def _strip_connection(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("connection must not be blank")
        return v

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000


class SearchSettings(BaseModel):
    """Query and normalization behaviour."""

    id_key: str = Field(default="_id", description="Result key that carries the engine document id")
    strip_fields: list[str] = Field(
        default_factory=lambda: ["_id", "id"],
        description="Identifier fields removed from bodies on create/update",
    )
    delete_by_time_format: str = Field(
        default="%Y-%m-%dT%H:%M:%S",
        description="Default strftime pattern for delete-by-time cutoffs",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Nested settings use double underscores in environment variables.

    Example:
        SEARCHLAYER_ENGINE__CONNECTION=http://localhost:9200
        SEARCHLAYER_ENGINE__BACKEND=opensearch
        SEARCHLAYER_SERVER__PORT=9090
    """

    model_config = {
        "env_prefix": "SEARCHLAYER_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    app_name: str = Field(default="searchlayer", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")

    engine: EngineSettings
    search: SearchSettings = Field(default_factory=SearchSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path, **overrides: Any) -> Settings:
        """Load settings from a YAML configuration file.

        Values from the file take precedence over environment variables.

        Args:
            path: Path to the YAML config file.
            overrides: Values that replace the file's; nested sections are
                merged key by key.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(data.get(key), dict):
                data[key] = {**data[key], **value}
            else:
                data[key] = value

        return cls(**data)
