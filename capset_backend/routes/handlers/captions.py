"""
Caption (tag file) endpoints.
"""

from __future__ import annotations

import asyncio
from typing import Any

from aiohttp import web

from capset_backend.features import captions
from capset_backend.shared import ErrorCode, Result, get_logger, sanitize_error_message

from ..core import _json_response, _payload_path, _payload_str, _read_json

logger = get_logger(__name__)


def _tags_payload(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [str(t) for t in value if isinstance(t, (str, int, float))]


async def _image_request(request: web.Request) -> tuple[Result[Any], dict[str, Any]]:
    body_res = await _read_json(request)
    if not body_res.ok:
        return body_res, {}
    body = body_res.data or {}
    path_res = _payload_path(body, "path", "image_path")
    return path_res, body


def register_caption_routes(routes: web.RouteTableDef) -> None:
    """Register caption read/write/edit routes."""

    @routes.post("/capset/captions/read")
    async def read_caption(request: web.Request) -> web.Response:
        path_res, _body = await _image_request(request)
        if not path_res.ok:
            return _json_response(path_res)
        return _json_response(captions.read_caption(path_res.data))

    @routes.post("/capset/captions/write")
    async def write_caption(request: web.Request) -> web.Response:
        path_res, body = await _image_request(request)
        if not path_res.ok:
            return _json_response(path_res)
        tags = _tags_payload(body.get("tags"))
        if tags is None:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "tags must be a list"))
        return _json_response(captions.write_caption(path_res.data, tags))

    @routes.post("/capset/captions/add-tag")
    async def add_tag(request: web.Request) -> web.Response:
        path_res, body = await _image_request(request)
        if not path_res.ok:
            return _json_response(path_res)
        return _json_response(captions.add_tag(path_res.data, _payload_str(body, "tag")))

    @routes.post("/capset/captions/remove-tag")
    async def remove_tag(request: web.Request) -> web.Response:
        path_res, body = await _image_request(request)
        if not path_res.ok:
            return _json_response(path_res)
        return _json_response(captions.remove_tag(path_res.data, _payload_str(body, "tag")))

    @routes.post("/capset/captions/reorder")
    async def reorder_tags(request: web.Request) -> web.Response:
        path_res, body = await _image_request(request)
        if not path_res.ok:
            return _json_response(path_res)
        tags = _tags_payload(body.get("tags"))
        if tags is None:
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "tags must be a list"))
        return _json_response(captions.reorder_tags(path_res.data, tags))

    @routes.post("/capset/captions/clear-all")
    async def clear_all(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        root_res = _payload_path(body_res.data or {}, "root_path", "root")
        if not root_res.ok:
            return _json_response(root_res)
        try:
            result = await asyncio.to_thread(captions.clear_all_captions, root_res.data)
        except Exception as exc:
            logger.error("Clearing captions crashed: %s", exc, exc_info=True)
            result = Result.Err("CLEAR_FAILED", sanitize_error_message(exc, "Failed to clear captions"))
        if result.ok:
            result = Result.Ok({"cleared_count": result.data})
        return _json_response(result)
