"""Command line entry point.

Example::

    python -m boilweb -addr :8777 -sql-db postgres://app@localhost/app
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from boilweb.assets import AssetError
from boilweb.core.config import DEFAULT_ADDR, get_settings
from boilweb.core.logging import configure_logging
from boilweb.main import create_app
from boilweb.templating import TemplateError

logger = logging.getLogger(__name__)

_TRUE = frozenset({"1", "t", "true"})
_FALSE = frozenset({"0", "f", "false"})


def parse_bool(value: str) -> bool:
    """Boolean flag value in the forms ``-prod=true`` / ``-prod=0`` accept."""
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boilweb", description="Serve the boilweb site.")
    parser.add_argument("-addr", "--addr", default=None, help=f"Server Addr (default {DEFAULT_ADDR})")
    parser.add_argument(
        "-prod",
        "--prod",
        nargs="?",
        const=True,
        default=None,
        type=parse_bool,
        help="use minimized js, turn off debugging, etc (also -prod=false)",
    )
    parser.add_argument(
        "-sql-driver",
        "--sql-driver",
        dest="sql_driver",
        default=None,
        help="name of sql driver to connect to db with (default postgres)",
    )
    parser.add_argument(
        "-sql-db",
        "--sql-db",
        dest="sql_db",
        default=None,
        help="connection string for sql db, empty disables the database",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = get_settings().with_overrides(
            addr=args.addr,
            prod=args.prod,
            sql_driver=args.sql_driver,
            sql_db=args.sql_db,
        )
    except ValueError as exc:
        parser.error(str(exc))

    configure_logging(settings.log_level)
    try:
        app = create_app(settings)
    except (TemplateError, AssetError) as exc:
        logger.critical("startup failed: %s", exc)
        return 1

    logger.info("serving on %s", settings.server.address)
    # uvicorn exits with status 1 on its own when the address cannot be bound
    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.log_level.lower(),
    )
    return 0


__all__ = ["build_parser", "main"]
