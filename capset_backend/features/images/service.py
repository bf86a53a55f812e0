"""
Image file operations: crop (optionally flipped/rotated) and delete.

Cropping either overwrites the source or, with `save_as_new`, writes
``<stem>_<n>_crop.<ext>`` beside it. A new crop starts without a caption.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ...shared import ErrorCode, Result, get_logger
from ..captions import caption_path_for
from ..export.naming import allocate_crop_path

logger = get_logger(__name__)


def _clamp_region(width: int, height: int, x: int, y: int, w: int, h: int) -> tuple[int, int, int, int]:
    x = max(0, min(int(x), max(0, width - 1)))
    y = max(0, min(int(y), max(0, height - 1)))
    w = max(0, min(int(w), width - x))
    h = max(0, min(int(h), height - y))
    return x, y, w, h


def _transform(img: Image.Image, flip_x: bool, flip_y: bool, rotate_degrees: int) -> Image.Image:
    if flip_x:
        img = img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
    if flip_y:
        img = img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
    # Clockwise quarter turns; negative angles wrap around.
    turns = ((int(rotate_degrees) % 360 + 360) % 360) // 90
    for _ in range(turns):
        img = img.transpose(Image.Transpose.ROTATE_270)
    return img


def crop_image(
    image_path: str | Path,
    x: int,
    y: int,
    width: int,
    height: int,
    *,
    flip_x: bool = False,
    flip_y: bool = False,
    rotate_degrees: int = 0,
    save_as_new: bool = False,
) -> Result[Optional[str]]:
    """
    Crop a region (in source pixel coordinates), then flip/rotate the result.

    Returns:
        Result.Ok(new path) when `save_as_new`, Result.Ok(None) when overwritten
    """
    path = Path(image_path)
    if not path.is_file():
        return Result.Err(ErrorCode.NOT_FOUND, "Image file not found")

    try:
        with Image.open(path) as src:
            fmt = src.format
            x0, y0, cw, ch = _clamp_region(src.width, src.height, x, y, width, height)
            if cw == 0 or ch == 0:
                return Result.Err(ErrorCode.INVALID_INPUT, "Crop region has zero size")
            out = src.crop((x0, y0, x0 + cw, y0 + ch)).convert("RGB")
    except (UnidentifiedImageError, OSError) as exc:
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to load image: {exc}")

    out = _transform(out, flip_x, flip_y, rotate_degrees)

    if save_as_new:
        target_res = allocate_crop_path(path)
        if not target_res.ok or target_res.data is None:
            return Result.Err(target_res.code, target_res.error or "Could not allocate file name")
        target = target_res.data
    else:
        target = path

    try:
        out.save(target, format=fmt or None)
    except (OSError, ValueError, KeyError) as exc:
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to save image: {exc}")

    logger.info("Cropped %s -> %s", path.name, target.name)
    return Result.Ok(str(target) if save_as_new else None)


def delete_image(image_path: str | Path) -> Result[bool]:
    """Delete an image and its caption file (when present)."""
    path = Path(image_path)
    if not path.is_file():
        return Result.Err(ErrorCode.NOT_FOUND, "Image file not found")
    try:
        path.unlink()
    except OSError as exc:
        return Result.Err(ErrorCode.IO_ERROR, f"Failed to delete image: {exc}")
    caption = caption_path_for(path)
    if caption.is_file():
        try:
            caption.unlink()
        except OSError as exc:
            logger.warning("Deleted %s but not its caption: %s", path.name, exc)
    return Result.Ok(True)
