"""
Core utilities for route handlers.
"""
from .paths import _payload_path, _payload_str
from .request_json import _read_json
from .response import _json_response, safe_error_message

__all__ = [
    "_json_response",
    "_payload_path",
    "_payload_str",
    "_read_json",
    "safe_error_message",
]
