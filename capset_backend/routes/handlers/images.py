"""
Image file endpoints (crop, delete).
"""

from __future__ import annotations

import asyncio
from typing import Any

from aiohttp import web

from capset_backend.features import images
from capset_backend.shared import ErrorCode, Result, get_logger
from capset_backend.utils import parse_bool

from ..core import _json_response, _payload_path, _read_json, safe_error_message

logger = get_logger(__name__)


def _int_field(body: dict[str, Any], key: str, default: int | None = None) -> int | None:
    value = body.get(key, default)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def register_image_routes(routes: web.RouteTableDef) -> None:
    """Register image crop/delete routes."""

    @routes.post("/capset/images/crop")
    async def crop_image(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        body = body_res.data or {}
        path_res = _payload_path(body, "image_path", "path")
        if not path_res.ok:
            return _json_response(path_res)

        region = {key: _int_field(body, key) for key in ("x", "y", "width", "height")}
        if any(v is None or v < 0 for v in region.values()):
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "x, y, width and height must be non-negative integers"))
        rotate = _int_field(body, "rotate_degrees", 0)
        if rotate is None:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "rotate_degrees must be an integer"))

        try:
            result = await asyncio.to_thread(
                images.crop_image,
                path_res.data,
                region["x"],
                region["y"],
                region["width"],
                region["height"],
                flip_x=parse_bool(body.get("flip_x"), False),
                flip_y=parse_bool(body.get("flip_y"), False),
                rotate_degrees=rotate,
                save_as_new=parse_bool(body.get("save_as_new"), False),
            )
        except Exception as exc:
            logger.error("Crop crashed: %s", exc, exc_info=True)
            result = Result.Err("CROP_FAILED", safe_error_message(exc, "Failed to crop image"))
        return _json_response(result)

    @routes.post("/capset/images/delete")
    async def delete_image(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        path_res = _payload_path(body_res.data or {}, "image_path", "path")
        if not path_res.ok:
            return _json_response(path_res)
        return _json_response(images.delete_image(path_res.data))
