"""
Standalone aiohttp application for the Capset API.
"""

from __future__ import annotations

import argparse
import logging

from aiohttp import web

from .config import DEBUG, HOST, PORT
from .routes import register_routes
from .shared import get_logger

logger = get_logger(__name__)


def create_app() -> web.Application:
    """Build the `web.Application` with every Capset route registered."""
    app = web.Application()
    register_routes(app)
    return app


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Capset dataset API.")
    parser.add_argument("--host", default=HOST, help=f"Bind address (default: {HOST}).")
    parser.add_argument("--port", type=int, default=PORT, help=f"Bind port (default: {PORT}).")
    parser.add_argument("--debug", action="store_true", default=DEBUG, help="Verbose logging.")
    return parser.parse_args(argv)


def _set_capset_log_level(level: int) -> None:
    # Capset loggers do not propagate, so each one is set individually.
    for name, item in list(logging.root.manager.loggerDict.items()):
        if name.startswith("capset.") and isinstance(item, logging.Logger):
            item.setLevel(level)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    app = create_app()
    _set_capset_log_level(logging.DEBUG if args.debug else logging.INFO)
    logger.info("Serving Capset API on http://%s:%s", args.host, args.port)
    web.run_app(app, host=args.host, port=args.port, print=None)
    return 0
