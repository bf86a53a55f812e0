"""
Export orchestrator.

A pass runs strictly sequentially on the calling thread: select, then for each
image allocate a name, write the image, write the (trigger-word) caption. The
HTTP layer may dispatch a whole pass to a worker thread, but nothing inside a
pass runs in parallel, so sequential names always follow enumeration order.

Precondition failures (bad source root, destination or archive that cannot be
created) return `Result.Err`. Individual unreadable images only increase
`skipped_count`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

from ...shared import (
    RATING_BUCKETS,
    ErrorCode,
    RatingLabel,
    Result,
    get_logger,
    log_structured,
    log_success,
    sanitize_error_message,
    timer,
)
from ..captions import caption_text
from ..index import FileSystemWalker
from ..ratings import load_ratings, resolve_rating
from .models import ExportByRatingOptions, ExportOptions, ExportResult
from .naming import caption_name_for, destination_name
from .selector import relative_key, resolve_root, select_images
from .sinks import (
    ArchiveSink,
    ExportArchiveError,
    ExportDestinationError,
    ExportSink,
    FolderSink,
    apply_trigger,
)

logger = get_logger(__name__)


def make_sink(dest_path: str | Path, as_zip: bool) -> ExportSink:
    dest = Path(dest_path)
    return ArchiveSink(dest) if as_zip else FolderSink(dest)


def _export_images(
    sink: ExportSink,
    images: Sequence[Path],
    *,
    trigger_word: Optional[str],
    sequential: bool,
) -> tuple[int, int]:
    """Write one ordered run of images into the sink's current group; return (exported, skipped)."""
    exported = 0
    skipped = 0
    for index, image in enumerate(images, start=1):
        name = destination_name(index, image, sequential)
        if not sink.add_image(image, name):
            skipped += 1
            continue

        try:
            content = caption_text(image)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Caption for %s could not be read, exporting image only: %s", image.name, exc)
            content = None
        if content is not None:
            sink.add_caption(apply_trigger(content, trigger_word), caption_name_for(name))
        exported += 1
    return exported, skipped


def _sink_failure(exc: Exception) -> Result[ExportResult]:
    if isinstance(exc, ExportDestinationError):
        return Result.Err(ErrorCode.DESTINATION_ERROR, sanitize_error_message(exc, "Export destination unavailable"))
    return Result.Err(ErrorCode.ARCHIVE_ERROR, sanitize_error_message(exc, "Archive write failed"))


def _validate_destination(dest_path: str) -> Result[bool]:
    if not str(dest_path or "").strip():
        return Result.Err(ErrorCode.INVALID_INPUT, "Missing destination path")
    return Result.Ok(True)


def export_dataset(options: ExportOptions) -> Result[ExportResult]:
    """
    Flat export: selected images (and captions) into one folder or one ZIP.

    Args:
        options: Source root, destination and export switches

    Returns:
        Result.Ok(ExportResult) with counts, or Result.Err on a precondition failure
    """
    dest_check = _validate_destination(options.dest_path)
    if not dest_check.ok:
        return Result.Err(dest_check.code, dest_check.error or "Invalid destination")

    selection = select_images(
        options.source_path,
        relative_paths=options.relative_paths,
        only_captioned=options.only_captioned,
    )
    if not selection.ok:
        return Result.Err(selection.code, selection.error or "Selection failed")
    images = selection.data or []

    try:
        with timer("dataset export", logger):
            with make_sink(options.dest_path, options.as_zip) as sink:
                exported, skipped = _export_images(
                    sink,
                    images,
                    trigger_word=options.trigger_word,
                    sequential=options.sequential_naming,
                )
    except (ExportDestinationError, ExportArchiveError) as exc:
        logger.error("Export to %s aborted: %s", Path(options.dest_path).name, exc)
        return _sink_failure(exc)

    log_success(logger, f"Exported {exported} image(s), skipped {skipped}")
    log_structured(
        logger,
        logging.INFO,
        "export pass finished",
        mode="flat",
        as_zip=options.as_zip,
        exported=exported,
        skipped=skipped,
    )
    return Result.Ok(
        ExportResult(
            success=True,
            exported_count=exported,
            skipped_count=skipped,
            error=None,
            output_path=options.dest_path,
        )
    )


def bucket_images_by_rating(
    root: Path,
    ratings: dict[str, str],
    walker: FileSystemWalker | None = None,
) -> dict[RatingLabel, list[Path]]:
    """
    Walk every image under the canonical root and route it to its rating bucket.

    Unrated (`none`) images are dropped; each bucket is sorted by path.
    """
    buckets: dict[RatingLabel, list[Path]] = {label: [] for label in RATING_BUCKETS}
    project_root = str(root)
    for image in (walker or FileSystemWalker()).iter_files(root, recursive=True):
        raw_rel, rel_key = relative_key(image, root)
        if not rel_key:
            continue
        label = resolve_rating(ratings, rel_key, raw_rel, project_root)
        if label in buckets:
            buckets[label].append(image)
    for items in buckets.values():
        items.sort(key=str)
    return buckets


def export_by_rating(options: ExportByRatingOptions) -> Result[ExportResult]:
    """
    Rating-bucketed export: ``dest/good``, ``dest/bad``, ``dest/needs_edit``.

    Always a full walk of the source; naming restarts at 0001 in every bucket.
    """
    dest_check = _validate_destination(options.dest_path)
    if not dest_check.ok:
        return Result.Err(dest_check.code, dest_check.error or "Invalid destination")

    root_res = resolve_root(options.source_path)
    if not root_res.ok or root_res.data is None:
        return Result.Err(root_res.code, root_res.error or "Invalid source folder")
    root = root_res.data

    # Loaded once for this pass and passed down explicitly.
    ratings = load_ratings(root)
    buckets = bucket_images_by_rating(root, ratings)

    total_exported = 0
    total_skipped = 0
    per_bucket: dict[str, int] = {}
    try:
        with timer("rating export", logger):
            with make_sink(options.dest_path, options.as_zip) as sink:
                for label in RATING_BUCKETS:
                    sink.begin_group(label.value)
                    exported, skipped = _export_images(
                        sink,
                        buckets[label],
                        trigger_word=options.trigger_word,
                        sequential=options.sequential_naming,
                    )
                    per_bucket[label.value] = exported
                    total_exported += exported
                    total_skipped += skipped
    except (ExportDestinationError, ExportArchiveError) as exc:
        logger.error("Rating export to %s aborted: %s", Path(options.dest_path).name, exc)
        return _sink_failure(exc)

    log_success(logger, f"Exported {total_exported} rated image(s), skipped {total_skipped}")
    log_structured(
        logger,
        logging.INFO,
        "export pass finished",
        mode="by_rating",
        as_zip=options.as_zip,
        exported=total_exported,
        skipped=total_skipped,
        buckets=per_bucket,
    )
    return Result.Ok(
        ExportResult(
            success=True,
            exported_count=total_exported,
            skipped_count=total_skipped,
            error=None,
            output_path=options.dest_path,
        )
    )
