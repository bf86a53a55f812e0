"""
Request correlation and lightweight access logging for the Capset HTTP surface.

Every request gets an id (taken from `X-Request-ID` or generated) that is bound to
`request_id_var` for the duration of the handler, so log lines emitted by feature
services carry it, and echoed back on the response.
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

from aiohttp import web

from .shared import get_logger, request_id_var
from .utils import env_bool, env_float

logger = get_logger(__name__)

_APP_KEY_OBSERVABILITY_INSTALLED: web.AppKey[bool] = web.AppKey("_capset_observability_installed", bool)
_DEFAULT_SLOW_MS = 1500.0

# Runtime-configured values are read from env at call time (tests rely on monkeypatching env).


def _new_request_id() -> str:
    return uuid4().hex


def _get_request_id(request: web.Request) -> str:
    rid = (request.headers.get("X-Request-ID") or "").strip()
    return rid or _new_request_id()


def _response_status_code(response: Any) -> int:
    try:
        return int(getattr(response, "status", 200) or 200)
    except (TypeError, ValueError):
        return 200


def _attach_request_id_header(response: Any, rid: str) -> None:
    try:
        response.headers["X-Request-ID"] = rid
    except (AttributeError, TypeError) as exc:
        logger.debug("Unable to attach X-Request-ID: %s", exc)


def _emit_request_log(request: web.Request, *, status: int | None, duration_ms: float, error: str | None) -> None:
    slow_ms = env_float("CAPSET_OBS_SLOW_MS", _DEFAULT_SLOW_MS)
    line = "%s %s -> %s (%.1fms)"
    args = (request.method, request.path, status, duration_ms)
    if error or (status is not None and status >= 500):
        logger.error(line + " %s", *args, error or "")
    elif status is not None and status >= 400:
        logger.warning(line, *args)
    elif duration_ms >= slow_ms:
        logger.info(line + " slow", *args)
    else:
        logger.debug(line, *args)


@web.middleware
async def request_context_middleware(request: web.Request, handler):
    """Add request-id correlation and request logging."""
    if env_bool("CAPSET_OBS_DISABLE", False):
        return await handler(request)

    rid = _get_request_id(request)
    request["capset_request_id"] = rid
    token = request_id_var.set(rid)
    start = time.perf_counter()
    status: int | None = None
    error: str | None = None
    try:
        response = await handler(request)
        status = _response_status_code(response)
        _attach_request_id_header(response, rid)
        return response
    except web.HTTPException as exc:
        status = exc.status
        _attach_request_id_header(exc, rid)
        raise
    except Exception as exc:
        status = 500
        error = f"{exc.__class__.__name__}: {exc}"
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000.0
        request_id_var.reset(token)
        _emit_request_log(request, status=status, duration_ms=duration_ms, error=error)


def ensure_observability(app: web.Application) -> None:
    """Install the request context middleware once per application."""
    if app.get(_APP_KEY_OBSERVABILITY_INSTALLED):
        return
    app.middlewares.insert(0, request_context_middleware)
    app[_APP_KEY_OBSERVABILITY_INSTALLED] = True
