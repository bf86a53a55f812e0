"""
Image selection for export passes.

Two modes:
- explicit relative paths: caller order is kept, entries that are not an image
  file lexically inside the root (symlinks allowed, `..` escapes refused) are
  dropped silently;
- full walk: every image under the root, sorted by full path string so that
  sequential naming is reproducible on an unchanged tree.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from ...path_utils import is_within_root, normalize_rel
from ...shared import ErrorCode, Result, get_logger, is_image_file
from ..captions import caption_path_for
from ..index import FileSystemWalker

logger = get_logger(__name__)


def resolve_root(root: str | Path) -> Result[Path]:
    """Canonicalize a dataset root, failing when it is not an existing directory."""
    source = Path(root) if str(root or "").strip() else None
    if source is None or not source.is_dir():
        return Result.Err(ErrorCode.NOT_A_DIRECTORY, "Source folder does not exist")
    try:
        return Result.Ok(source.resolve(strict=True))
    except (OSError, RuntimeError) as exc:
        return Result.Err(ErrorCode.PATH_RESOLUTION_ERROR, f"Cannot resolve source folder: {exc}")


def relative_key(path: Path, root: Path) -> tuple[str, str]:
    """Return (raw relative path with "/" separators, normalized key) for an image under root."""
    raw = str(path.relative_to(root)).replace("\\", "/")
    return raw, normalize_rel(raw)


def _has_caption(path: Path) -> bool:
    return caption_path_for(path).exists()


def _select_explicit(root: Path, relative_paths: Iterable[str], only_captioned: bool) -> list[Path]:
    images: list[Path] = []
    seen: set[Path] = set()
    for rel in relative_paths:
        normalized = normalize_rel(rel)
        if not normalized:
            continue
        full = Path(os.path.normpath(root / normalized))
        if not is_within_root(full, root):
            logger.debug("Ignoring selection outside the dataset root: %s", normalized)
            continue
        if not full.is_file() or not is_image_file(full.name):
            continue
        if only_captioned and not _has_caption(full):
            continue
        marker = full.resolve()
        if marker in seen:
            continue
        seen.add(marker)
        images.append(full)
    return images


def _select_walk(root: Path, only_captioned: bool, walker: FileSystemWalker) -> list[Path]:
    images = [
        p for p in walker.iter_files(root, recursive=True)
        if not only_captioned or _has_caption(p)
    ]
    images.sort(key=str)
    return images


def select_images(
    root: str | Path,
    *,
    relative_paths: Iterable[str] | None = None,
    only_captioned: bool = False,
    walker: FileSystemWalker | None = None,
) -> Result[list[Path]]:
    """
    Produce the ordered, duplicate-free list of images to act on.

    Returns:
        Result.Ok(list of absolute image paths under the canonical root), or
        NOT_A_DIRECTORY / PATH_RESOLUTION_ERROR for a bad root.
    """
    root_res = resolve_root(root)
    if not root_res.ok or root_res.data is None:
        return Result.Err(root_res.code, root_res.error or "Invalid source folder")
    canonical = root_res.data

    if relative_paths is not None:
        images = _select_explicit(canonical, relative_paths, only_captioned)
    else:
        images = _select_walk(canonical, only_captioned, walker or FileSystemWalker())
    return Result.Ok(images, root=str(canonical))
