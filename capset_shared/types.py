"""
Shared types, enums, and constants.
"""
import os
from enum import Enum
from pathlib import Path
from typing import Any, Final


class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"
    NOT_FOUND = "NOT_FOUND"

    # Dataset preconditions
    NOT_A_DIRECTORY = "NOT_A_DIRECTORY"
    PATH_RESOLUTION_ERROR = "PATH_RESOLUTION_ERROR"
    DESTINATION_ERROR = "DESTINATION_ERROR"
    ARCHIVE_ERROR = "ARCHIVE_ERROR"

    # Operation errors
    NAMESPACE_EXHAUSTED = "NAMESPACE_EXHAUSTED"
    EXPORT_FAILED = "EXPORT_FAILED"
    IO_ERROR = "IO_ERROR"


class RatingLabel(str, Enum):
    """Coarse quality rating attached to an image."""

    GOOD = "good"
    BAD = "bad"
    NEEDS_EDIT = "needs_edit"
    NONE = "none"

    @classmethod
    def parse(cls, value: Any) -> "RatingLabel":
        """Map a stored value to a label; anything unknown means unrated."""
        if isinstance(value, RatingLabel):
            return value
        try:
            raw = str(value or "").strip().lower()
        except Exception:
            return cls.NONE
        for label in cls:
            if label.value == raw:
                return label
        return cls.NONE


# Buckets used by rating export, in output order. NONE is never exported.
RATING_BUCKETS: Final[tuple[RatingLabel, ...]] = (
    RatingLabel.GOOD,
    RatingLabel.BAD,
    RatingLabel.NEEDS_EDIT,
)

IMAGE_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp"}
)


def is_image_file(filename: str | Path) -> bool:
    """
    Check whether a file name carries a supported raster image extension.

    Args:
        filename: File name or path

    Returns:
        True for png/jpg/jpeg/webp/gif/bmp (case-insensitive)
    """
    ext = os.path.splitext(str(filename))[1].lower()
    return ext in IMAGE_EXTENSIONS
