"""
Modular route system for Capset.
Importing this package is side-effect free; route registration is explicit.
"""
from .registry import register_all_routes, register_routes

__all__ = [
    "register_routes",
    "register_all_routes",
]
