"""CLI entry point for the trove-proxy server."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from troveproxy import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trove-proxy",
        description="trove-proxy — Resilient search proxy for the Trove digital archive",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Server bind address (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of worker processes",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
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
        version=f"trove-proxy {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for the trove-proxy server."""
    args = build_parser().parse_args(argv)

    from troveproxy.config.settings import Settings

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    # CLI overrides; exported so that worker processes building the app
    # through the factory see the same values.
    if args.config:
        os.environ["TROVEPROXY_CONFIG"] = str(Path(args.config).resolve())
    if args.host:
        settings.server.host = args.host
    if args.port:
        settings.server.port = args.port
    if args.workers:
        settings.server.workers = args.workers
    if args.log_level:
        settings.observability.log_level = args.log_level
        os.environ["TROVEPROXY_OBSERVABILITY__LOG_LEVEL"] = args.log_level

    if not settings.has_trove_key:
        print("Warning: TROVE_API_KEY is not set; searches will fail with 500", file=sys.stderr)

    import uvicorn

    uvicorn.run(
        "troveproxy.api.app:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        workers=settings.server.workers if not args.reload else 1,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


if __name__ == "__main__":
    main()
