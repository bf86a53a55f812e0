"""
Route handler registration functions.
"""
from .captions import register_caption_routes
from .export import register_export_routes
from .images import register_image_routes
from .ratings import register_rating_routes
from .version import register_version_routes

__all__ = [
    "register_caption_routes",
    "register_export_routes",
    "register_image_routes",
    "register_rating_routes",
    "register_version_routes",
]
