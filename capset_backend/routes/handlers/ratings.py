"""
Rating endpoints.
"""

from aiohttp import web

from capset_backend.features import ratings
from capset_backend.shared import Result

from ..core import _json_response, _payload_path, _payload_str, _read_json


def register_rating_routes(routes: web.RouteTableDef) -> None:
    """Register rating lookup/update routes."""

    @routes.get("/capset/ratings")
    async def list_ratings(request: web.Request) -> web.Response:
        root_res = _payload_path(dict(request.query), "root")
        if not root_res.ok:
            return _json_response(root_res)
        rel = _payload_str(dict(request.query), "path")
        if rel:
            label = ratings.get_rating(root_res.data, rel)
            return _json_response(Result.Ok({"path": rel, "rating": label.value}))
        return _json_response(Result.Ok({"ratings": ratings.load_ratings(root_res.data)}))

    @routes.post("/capset/ratings")
    async def set_rating(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        body = body_res.data or {}
        root_res = _payload_path(body, "root")
        if not root_res.ok:
            return _json_response(root_res)
        result = ratings.set_rating(root_res.data, _payload_str(body, "path"), _payload_str(body, "rating"))
        return _json_response(result)
