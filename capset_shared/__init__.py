"""Shared utilities for Capset."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success, request_id_var
from .result import Result
from .time import timer
from .types import IMAGE_EXTENSIONS, RATING_BUCKETS, ErrorCode, RatingLabel, is_image_file

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "timer",
    "ErrorCode",
    "RatingLabel",
    "RATING_BUCKETS",
    "IMAGE_EXTENSIONS",
    "is_image_file",
    "log_structured",
    "request_id_var",
    "sanitize_error_message",
]
