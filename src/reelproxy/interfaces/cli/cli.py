"""``reelproxy`` console script: load config, set up logging, serve with uvicorn."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from reelproxy.infrastructure.config import load_config
from reelproxy.infrastructure.logging import configure_logging
from reelproxy.interfaces.app import create_app

log = structlog.get_logger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 10000


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reelproxy",
        description="Short-video resolver and Range-aware streaming proxy.",
    )

    listen = parser.add_argument_group("listen address")
    listen.add_argument("--host", default=None, help="Interface to bind (env: HOST).")
    listen.add_argument(
        "--port", default=None, type=int, help="TCP port to bind (env: PORT)."
    )

    settings = parser.add_argument_group("settings")
    settings.add_argument("--config", default=None, help="YAML settings file.")
    settings.add_argument(
        "--dotenv", default=None, help="File with REELPROXY_* variables."
    )
    settings.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    settings.add_argument("--log-format", default=None, choices=["json", "console"])

    return parser.parse_args(argv)


def _listen_address(args: argparse.Namespace) -> tuple[str, int]:
    """Flags win over the HOST/PORT variables set by hosting platforms."""
    host = args.host or os.getenv("HOST") or DEFAULT_HOST
    port = args.port or int(os.getenv("PORT") or DEFAULT_PORT)
    return host, port


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    flags = {"log_level": args.log_level, "log_format": args.log_format}
    return {key: value for key, value in flags.items() if value}


def start(argv: Iterable[str] | None = None) -> None:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    host, port = _listen_address(args)

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=_overrides(args),
    )
    log_config = configure_logging(config)
    log.info(
        "server_starting",
        host=host,
        port=port,
        environment=config.environment,
        resolver_backend=config.resolver.backend,
        store_backend=config.store.backend,
    )

    uvicorn.run(create_app(config), host=host, port=port, log_config=log_config)


if __name__ == "__main__":
    raise SystemExit(start())
