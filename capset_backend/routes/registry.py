"""
Route registration system.
Coordinates all route handlers and registers them with an aiohttp app.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from aiohttp import web

from capset_backend.observability import ensure_observability
from capset_backend.shared import get_logger

from .handlers import (
    register_caption_routes,
    register_export_routes,
    register_image_routes,
    register_rating_routes,
    register_version_routes,
)

# --- CONFIGURATION ---
API_PREFIX = "/capset/"
_APP_KEY_SECURITY_MIDDLEWARES_INSTALLED: web.AppKey[bool] = web.AppKey(
    "_capset_security_middlewares_installed", bool
)
_APP_KEY_ROUTES_REGISTERED: web.AppKey[bool] = web.AppKey("_capset_routes_registered", bool)

logger = get_logger(__name__)


@web.middleware
async def security_headers_middleware(
    request: web.Request,
    handler: Callable[[web.Request], Awaitable[web.StreamResponse]],
) -> web.StreamResponse:
    """Apply strict security headers to Capset API responses only."""
    response = await handler(request)
    if not (request.path or "").startswith(API_PREFIX):
        return response

    # API responses should never be treated as a document.
    response.headers.setdefault("Content-Security-Policy", "default-src 'none'")
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Cache-Control", "no-store, no-cache, must-revalidate")
    return response


def _install_security_middlewares(app: web.Application) -> None:
    if app.get(_APP_KEY_SECURITY_MIDDLEWARES_INSTALLED):
        return
    app.middlewares.insert(0, security_headers_middleware)
    app[_APP_KEY_SECURITY_MIDDLEWARES_INSTALLED] = True


def register_all_routes(routes: web.RouteTableDef | None = None) -> web.RouteTableDef:
    """
    Register all route handlers and return the RouteTableDef.
    This is the central registration point for all routes.
    """
    routes = routes if routes is not None else web.RouteTableDef()

    register_version_routes(routes)
    register_caption_routes(routes)
    register_rating_routes(routes)
    register_image_routes(routes)
    register_export_routes(routes)

    logger.info("=" * 60)
    logger.info("Routes registered:")
    for route in routes:
        method = getattr(route, "method", "?")
        path = getattr(route, "path", "?")
        logger.info("  %s %s", method, path)
    logger.info("=" * 60)
    return routes


def register_routes(app: web.Application) -> None:
    """
    Register routes onto an aiohttp application, with request correlation and
    security headers. Calling it twice on the same app is a no-op.
    """
    if app.get(_APP_KEY_ROUTES_REGISTERED):
        logger.debug("register_routes(app) skipped: routes already registered on this app")
        return

    ensure_observability(app)
    _install_security_middlewares(app)
    app.add_routes(register_all_routes())
    app[_APP_KEY_ROUTES_REGISTERED] = True
