"""Backend-facing alias for shared utilities.

Feature modules import from here (`from ...shared import Result, get_logger`)
so the backend package has a single seam onto `capset_shared`.
"""

from __future__ import annotations

import capset_shared as _root_shared
from capset_shared.types import IMAGE_EXTENSIONS, RATING_BUCKETS, RatingLabel, is_image_file

Result = _root_shared.Result
ErrorCode = _root_shared.ErrorCode
get_logger = _root_shared.get_logger
log_success = _root_shared.log_success
log_structured = _root_shared.log_structured
request_id_var = _root_shared.request_id_var
sanitize_error_message = _root_shared.sanitize_error_message
timer = _root_shared.timer

__all__ = [
    "Result",
    "ErrorCode",
    "RatingLabel",
    "RATING_BUCKETS",
    "IMAGE_EXTENSIONS",
    "is_image_file",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "sanitize_error_message",
    "timer",
]
