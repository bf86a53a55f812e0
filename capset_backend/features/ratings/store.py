"""
Ratings store: one JSON file at the dataset root.

Format::

    {"version": 1, "ratings": {"sub/img.png": "good", ...}}

Keys are written normalized (forward slashes, no leading separator), but older
files may hold keys in any shape; readers go through `resolve_rating`.
Absent keys mean unrated.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from ...config import RATINGS_FILENAME
from ...path_utils import normalize_rel
from ...shared import ErrorCode, RatingLabel, Result, get_logger
from .reconciler import resolve_rating

logger = get_logger(__name__)

RATINGS_FORMAT_VERSION = 1


def ratings_path(project_root: str | Path) -> Path:
    return Path(project_root) / RATINGS_FILENAME


def load_ratings(project_root: str | Path) -> dict[str, str]:
    """
    Load the rating mapping for a project.

    A missing or unreadable file yields an empty mapping; values are kept as
    stored (unknown labels resolve to unrated later).
    """
    path = ratings_path(project_root)
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable ratings file %s: %s", path.name, exc)
        return {}
    if isinstance(data, dict) and isinstance(data.get("ratings"), dict):
        data = data["ratings"]
    if not isinstance(data, dict):
        logger.warning("Ignoring ratings file %s with unexpected layout", path.name)
        return {}
    return {str(k): str(v) for k, v in data.items() if isinstance(k, str) and v is not None}


def _write_ratings(project_root: str | Path, ratings: dict[str, str]) -> None:
    path = ratings_path(project_root)
    payload = {"version": RATINGS_FORMAT_VERSION, "ratings": dict(sorted(ratings.items()))}
    fd, tmp_name = tempfile.mkstemp(prefix=".ratings_", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def set_rating(project_root: str | Path, relative_path: str, rating: str) -> Result[str]:
    """Store a rating under the normalized key; `none` removes the record."""
    root = Path(project_root)
    if not root.is_dir():
        return Result.Err(ErrorCode.NOT_A_DIRECTORY, "Project folder does not exist")
    key = normalize_rel(relative_path)
    if not key:
        return Result.Err(ErrorCode.INVALID_INPUT, "Missing relative path")
    raw_label = str(rating or "").strip().lower()
    if raw_label not in {label.value for label in RatingLabel}:
        return Result.Err(ErrorCode.INVALID_INPUT, f"Unknown rating: {rating}")
    label = RatingLabel(raw_label)

    ratings = load_ratings(root)
    if label is RatingLabel.NONE:
        ratings.pop(key, None)
    else:
        ratings[key] = label.value
    try:
        _write_ratings(root, ratings)
    except OSError as exc:
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to save ratings: {exc}")
    return Result.Ok(label.value)


def get_rating(project_root: str | Path, relative_path: str) -> RatingLabel:
    root = Path(project_root)
    try:
        canonical = str(root.resolve(strict=True))
    except (OSError, RuntimeError):
        canonical = str(root)
    return resolve_rating(load_ratings(root), normalize_rel(relative_path), relative_path, canonical)
