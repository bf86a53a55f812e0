"""Dataset export: selection, naming, sinks and the export passes."""
from .models import ExportByRatingOptions, ExportOptions, ExportResult
from .naming import allocate_crop_path, caption_name_for, destination_name
from .selector import relative_key, resolve_root, select_images
from .service import bucket_images_by_rating, export_by_rating, export_dataset, make_sink
from .sinks import (
    ArchiveSink,
    ExportArchiveError,
    ExportDestinationError,
    ExportSink,
    ExportSinkError,
    FolderSink,
    apply_trigger,
)

__all__ = [
    "ArchiveSink",
    "ExportArchiveError",
    "ExportByRatingOptions",
    "ExportDestinationError",
    "ExportOptions",
    "ExportResult",
    "ExportSink",
    "ExportSinkError",
    "FolderSink",
    "allocate_crop_path",
    "apply_trigger",
    "bucket_images_by_rating",
    "caption_name_for",
    "destination_name",
    "export_by_rating",
    "export_dataset",
    "make_sink",
    "relative_key",
    "resolve_root",
    "select_images",
]
