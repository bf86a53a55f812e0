"""
Dataset export endpoints.

Each request runs one complete export pass on a worker thread so the event loop
stays responsive; the pass itself is sequential.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from aiohttp import web

from capset_backend.config import EXPORT_TIMEOUT_S
from capset_backend.features.export import (
    ExportByRatingOptions,
    ExportOptions,
    ExportResult,
    export_by_rating,
    export_dataset,
)
from capset_backend.shared import ErrorCode, Result, get_logger, sanitize_error_message

from ..core import _json_response, _read_json

logger = get_logger(__name__)


async def _run_export(fn: Callable[[Any], Result[ExportResult]], options: Any) -> Result[ExportResult]:
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn, options), timeout=EXPORT_TIMEOUT_S)
    except asyncio.TimeoutError:
        return Result.Err(ErrorCode.EXPORT_FAILED, "Export timed out")
    except Exception as exc:
        logger.error("Export crashed: %s", exc, exc_info=True)
        return Result.Err(ErrorCode.EXPORT_FAILED, sanitize_error_message(exc, "Export failed"))


def register_export_routes(routes: web.RouteTableDef) -> None:
    """Register flat and rating-bucketed export routes."""

    @routes.post("/capset/export")
    async def export_dataset_route(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        try:
            options = ExportOptions.from_payload(body_res.data or {})
        except ValueError as exc:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, str(exc)))
        result = await _run_export(export_dataset, options)
        return _json_response(result)

    @routes.post("/capset/export/by-rating")
    async def export_by_rating_route(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        options = ExportByRatingOptions.from_payload(body_res.data or {})
        result = await _run_export(export_by_rating, options)
        return _json_response(result)
