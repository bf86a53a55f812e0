"""
Shared path normalization and safety helpers.

`normalize_rel` produces the canonical relative-path form used as the join key
between images and rating records; `normalize_key_for_lookup` produces the
case-folded comparison key only (never store it).
"""

from __future__ import annotations

import os
from pathlib import Path

_SEPARATORS = "/\\"


def normalize_rel(raw: str) -> str:
    """Forward slashes, no leading separator. All-separator input gives ""."""
    if not raw:
        return ""
    return str(raw).replace("\\", "/").lstrip(_SEPARATORS)


def normalize_key_for_lookup(raw: str) -> str:
    return normalize_rel(raw).lower()


def normalize_path(value: str) -> Path | None:
    if not value:
        return None
    if "\x00" in value:
        return None
    try:
        return Path(value).expanduser().resolve(strict=False)
    except (OSError, ValueError, RuntimeError):
        return None


def is_within_root(candidate: Path, root: Path) -> bool:
    """Lexical containment: `..` segments are collapsed, symlinks are not followed."""
    root_norm = os.path.normpath(str(root))
    cand_norm = os.path.normpath(str(candidate))
    try:
        return os.path.commonpath([root_norm, cand_norm]) == root_norm
    except ValueError:
        return False
