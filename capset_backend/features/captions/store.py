"""
Caption (tag file) store.

Each image has a sibling text file with the same stem holding a comma-separated
tag list, e.g. ``red hair, outdoors, 1girl``. Every write replaces the whole
file; there are no partial or append writes.

Single-tag edits are deduplicated case-insensitively. Bulk replace/reorder keeps
the caller's list verbatim so a user-chosen order is never re-sorted or pruned.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path

from ...config import CAPTION_EXT
from ...shared import ErrorCode, Result, get_logger
from ..index import FileSystemWalker

logger = get_logger(__name__)

TAG_SEPARATOR = ","
TAG_JOINER = ", "


@dataclass
class CaptionData:
    exists: bool
    raw: str = ""
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def caption_path_for(image_path: str | Path) -> Path:
    """Caption file for an image: same directory and stem, caption extension."""
    return Path(image_path).with_suffix(CAPTION_EXT)


def parse_tags(raw: str) -> list[str]:
    return [part.strip() for part in str(raw or "").split(TAG_SEPARATOR) if part.strip()]


def serialize_tags(tags: list[str]) -> str:
    return TAG_JOINER.join(tags)


def caption_text(image_path: str | Path) -> str | None:
    """
    Raw caption content, or None when the image has no caption file.

    Read errors are left to the caller.
    """
    path = caption_path_for(image_path)
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def _write_text(path: Path, content: str) -> Result[bool]:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to write caption %s: %s", path.name, exc)
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to write caption: {exc}")
    return Result.Ok(True)


def _read_tags(image_path: str | Path) -> Result[list[str] | None]:
    try:
        raw = caption_text(image_path)
    except (OSError, UnicodeDecodeError) as exc:
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to read caption: {exc}")
    return Result.Ok(None if raw is None else parse_tags(raw))


def read_caption(image_path: str | Path) -> Result[CaptionData]:
    """Read and parse the caption for an image; a missing file is not an error."""
    try:
        raw = caption_text(image_path)
    except (OSError, UnicodeDecodeError) as exc:
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to read caption: {exc}")
    if raw is None:
        return Result.Ok(CaptionData(exists=False))
    return Result.Ok(CaptionData(exists=True, raw=raw.strip(), tags=parse_tags(raw)))


def write_caption(image_path: str | Path, tags: list[str]) -> Result[bool]:
    """Serialize tags with ", " and overwrite (or create) the caption file."""
    return _write_text(caption_path_for(image_path), serialize_tags(list(tags or [])))


def add_tag(image_path: str | Path, tag: str) -> Result[list[str]]:
    """Append a tag unless an equal one (case-insensitive) is already present."""
    current = _read_tags(image_path)
    if not current.ok:
        return Result.Err(current.code, current.error or "Failed to read caption")
    tags = list(current.data or [])

    new_tag = str(tag or "").strip()
    if not new_tag:
        return Result.Ok(tags)
    if any(t.lower() == new_tag.lower() for t in tags):
        return Result.Ok(tags)

    tags.append(new_tag)
    written = write_caption(image_path, tags)
    if not written.ok:
        return Result.Err(written.code, written.error or "Failed to write caption")
    return Result.Ok(tags)


def remove_tag(image_path: str | Path, tag: str) -> Result[list[str]]:
    """Remove every tag equal to `tag` (case-insensitive)."""
    current = _read_tags(image_path)
    if not current.ok:
        return Result.Err(current.code, current.error or "Failed to read caption")
    if current.data is None:
        return Result.Ok([])

    needle = str(tag or "").strip().lower()
    tags = [t for t in current.data if t.lower() != needle]
    written = write_caption(image_path, tags)
    if not written.ok:
        return Result.Err(written.code, written.error or "Failed to write caption")
    return Result.Ok(tags)


def reorder_tags(image_path: str | Path, tags: list[str]) -> Result[bool]:
    """Replace all tags with the given ordered list, exactly as supplied."""
    return write_caption(image_path, tags)


def clear_all_captions(root: str | Path) -> Result[int]:
    """Write an empty caption next to every image under root; stop at the first failure."""
    root_path = Path(root)
    if not root_path.is_dir():
        return Result.Err(ErrorCode.NOT_A_DIRECTORY, "Project folder does not exist")
    try:
        canonical = root_path.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        return Result.Err(ErrorCode.PATH_RESOLUTION_ERROR, f"Cannot resolve project folder: {exc}")

    cleared = 0
    for image in FileSystemWalker().iter_files(canonical, recursive=True):
        target = caption_path_for(image)
        written = _write_text(target, "")
        if not written.ok:
            return Result.Err(
                ErrorCode.IO_ERROR,
                f"Failed to clear {target.name}: {written.error}",
                cleared=cleared,
            )
        cleared += 1
    logger.info("Cleared %s caption(s) under %s", cleared, canonical.name)
    return Result.Ok(cleared)
