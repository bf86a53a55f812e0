"""
Path extraction and validation for request payloads.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from capset_backend.path_utils import normalize_path
from capset_backend.shared import ErrorCode, Result


def _payload_str(payload: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def _payload_path(payload: dict[str, Any], *keys: str) -> Result[Path]:
    """Resolve the first non-empty path field; reject missing or malformed values."""
    raw = _payload_str(payload, *keys)
    if not raw:
        return Result.Err(ErrorCode.INVALID_INPUT, f"Missing {keys[0] if keys else 'path'}")
    path = normalize_path(raw)
    if path is None:
        return Result.Err(ErrorCode.INVALID_INPUT, f"Invalid {keys[0] if keys else 'path'}")
    return Result.Ok(path)
