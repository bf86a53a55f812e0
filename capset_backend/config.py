"""
Configuration for Capset.

Every knob is read from the environment once, at import time. Invalid values are
logged and replaced by the default (numbers are clamped to their bounds).
"""
import logging
import os

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


def _caption_ext(raw: str | None) -> str:
    ext = str(raw or "").strip() or ".txt"
    if not ext.startswith("."):
        ext = f".{ext}"
    return ext.lower()


# --- Dataset layout ---
# Ratings live in a JSON file at the dataset root.
RATINGS_FILENAME = _env_raw("CAPSET_RATINGS_FILENAME", default=".capset_ratings.json") or ".capset_ratings.json"
# Sibling caption extension (same stem as the image).
CAPTION_EXT = _caption_ext(_env_raw("CAPSET_CAPTION_EXT"))

# --- Export ---
DEFAULT_EXPORT_CHUNK_BYTES = 1024 * 1024  # 1MB
EXPORT_CHUNK_BYTES = _env_int(DEFAULT_EXPORT_CHUNK_BYTES, "CAPSET_EXPORT_CHUNK_BYTES", min_value=16 * 1024)
# Export passes dispatched by the HTTP layer give up waiting after this many seconds.
EXPORT_TIMEOUT_S = _env_float(3600.0, "CAPSET_EXPORT_TIMEOUT_S", min_value=1.0)
# Upper bound for "stem_N_crop.ext" probing when saving a crop as a new image.
CROP_NAME_MAX = _env_int(9999, "CAPSET_CROP_NAME_MAX", min_value=1, max_value=9999)

# --- Filesystem walk ---
SCAN_IOPS_LIMIT = _env_float(0.0, "CAPSET_SCAN_IOPS_LIMIT", min_value=0.0)

# --- HTTP surface ---
MAX_JSON_BYTES = _env_int(10 * 1024 * 1024, "CAPSET_MAX_JSON_SIZE", min_value=1024)
HOST = _env_raw("CAPSET_HOST", default="127.0.0.1") or "127.0.0.1"
PORT = _env_int(8765, "CAPSET_PORT", min_value=1, max_value=65535)
DEBUG = _env_bool(False, "CAPSET_DEBUG")
