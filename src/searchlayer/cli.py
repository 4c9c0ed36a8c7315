"""CLI entry point for the searchlayer server."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchlayer",
        description="searchlayer — typed search API over Elasticsearch / OpenSearch",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--connection",
        type=str,
        default=None,
        help="Engine node URL (overrides config)",
    )
    parser.add_argument(
        "--backend",
        choices=["elasticsearch", "opensearch"],
        default=None,
        help="Engine client backend (overrides config)",
    )
    parser.add_argument("--host", type=str, default=None, help="Server bind address (overrides config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Server port (overrides config)")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Number of worker processes (overrides config)")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"searchlayer {_get_version()}",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for the searchlayer server."""
    args = build_parser().parse_args(argv)

    from pydantic import ValidationError

    from searchlayer.api.app import export_settings, load_settings

    if args.config and not Path(args.config).exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    try:
        settings = load_settings(args.config, _overrides(args))
    except ValidationError as e:
        print(f"Error: invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    # Workers import the app factory themselves and read these back.
    export_settings(settings)

    import uvicorn

    uvicorn.run(
        "searchlayer.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers,
        log_level=settings.observability.log_level.lower(),
    )


def _overrides(args: argparse.Namespace) -> dict[str, dict[str, Any]]:
    """Collect CLI overrides as nested settings sections."""
    sections: dict[str, dict[str, Any]] = {
        "engine": {"connection": args.connection, "backend": args.backend},
        "server": {"host": args.host, "port": args.port, "workers": args.workers},
        "observability": {"log_level": args.log_level},
    }
    overrides: dict[str, dict[str, Any]] = {}
    for section, values in sections.items():
        values = {key: value for key, value in values.items() if value is not None}
        if values:
            overrides[section] = values
    return overrides


def _get_version() -> str:
    try:
        from searchlayer import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
