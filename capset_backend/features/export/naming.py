"""
Destination names for exported files.

Sequential names are the 1-based position in the pass (``0007.png``), so they
are unique by construction. Non-sequential export keeps original file names;
the destination is flat, so two sources sharing a name in different folders end
up as one file (in a folder the later copy wins, in an archive the first one).
"""

from __future__ import annotations

from pathlib import Path

from ...config import CAPTION_EXT, CROP_NAME_MAX
from ...shared import ErrorCode, Result

DEFAULT_EXT = "png"
# Exported captions use the same extension as the source sidecars.
CAPTION_SUFFIX = CAPTION_EXT


def destination_name(index: int, original: Path, sequential: bool) -> str:
    """
    Compute the destination file name for one exported image.

    Args:
        index: 1-based position of the image in the pass (or bucket)
        original: Source image path
        sequential: Use zero-padded ordinal names instead of original names
    """
    if sequential:
        ext = original.suffix[1:] if original.suffix else DEFAULT_EXT
        return f"{index:04d}.{ext}"
    return original.name or f"image.{DEFAULT_EXT}"


def caption_name_for(dest_name: str) -> str:
    """``0007.png`` -> ``0007.txt``; the stem is everything before the last dot."""
    base, dot, _ext = dest_name.rpartition(".")
    return f"{base if dot else dest_name}{CAPTION_SUFFIX}"


def allocate_crop_path(image_path: str | Path, max_attempts: int = CROP_NAME_MAX) -> Result[Path]:
    """
    First free ``<stem>_<n>_crop.<ext>`` next to the image, n starting at 1.

    Fails with NAMESPACE_EXHAUSTED once `max_attempts` candidates all exist.
    """
    path = Path(image_path)
    parent = path.parent
    stem = path.stem or "image"
    ext = path.suffix[1:] if path.suffix else DEFAULT_EXT
    for n in range(1, max(1, int(max_attempts)) + 1):
        candidate = parent / f"{stem}_{n}_crop.{ext}"
        if not candidate.exists():
            return Result.Ok(candidate)
    return Result.Err(
        ErrorCode.NAMESPACE_EXHAUSTED,
        "Could not create unique filename for new image",
        attempts=max_attempts,
    )
