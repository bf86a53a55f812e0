"""
Version reporting endpoint.
"""
from aiohttp import web

from capset_backend.shared import Result
from capset_shared.version import get_version_info

from ..core import _json_response


def register_version_routes(routes: web.RouteTableDef) -> None:
    """
    Expose the currently installed Capset version.
    """
    async def _get_version(_request: web.Request) -> web.Response:
        data = get_version_info()
        return _json_response(Result.Ok(data))

    routes.get("/capset/version")(_get_version)
