"""
Export sinks: where exported images and captions are written.

`FolderSink` writes plain files under a destination directory; `ArchiveSink`
writes entries into a single deflate-compressed ZIP. The orchestrator drives
both through the same `ExportSink` interface, so selection, naming and counting
are written once.

Failure contract:
- `open()` / `begin_group()` raise `ExportDestinationError` (whole pass aborts);
- `add_image()` returns False when the source cannot be read or copied, when
  the folder target is the source file itself, or when the archive already
  holds an entry of that name (the item is skipped, the pass continues);
- repeated names overwrite in a folder; in an archive the first entry wins;
- archive write failures after open raise `ExportArchiveError` (the partial
  archive is left on disk).
"""

from __future__ import annotations

import os
import shutil
import stat
import time
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import BinaryIO, Optional

from ...config import EXPORT_CHUNK_BYTES
from ...shared import get_logger

logger = get_logger(__name__)


class ExportSinkError(Exception):
    """Base class for failures that abort a whole export pass."""


class ExportDestinationError(ExportSinkError):
    """Destination folder or archive could not be created."""


class ExportArchiveError(ExportSinkError):
    """Writing into an already open archive failed."""


class SourceReadError(OSError):
    """Reading the source image failed part-way through a copy."""


def apply_trigger(content: str, trigger: Optional[str]) -> str:
    """Trim the caption and prefix it with the trigger word when one is set."""
    body = str(content or "").strip()
    word = str(trigger or "")
    if word:
        return f"{word.strip()}, {body}"
    return body


def _join_group(group: str, name: str) -> str:
    return f"{group}/{name}" if group else name


class ExportSink(ABC):
    """Uniform write target for one export pass. Use as a context manager."""

    def __init__(self, destination: Path, *, chunk_bytes: int = EXPORT_CHUNK_BYTES) -> None:
        self.destination = Path(destination)
        self.chunk_bytes = max(16 * 1024, int(chunk_bytes))
        self._group = ""

    def __enter__(self) -> "ExportSink":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def begin_group(self, name: str) -> None:
        """Scope following writes to a sub-folder (bucket) of the destination."""
        self._group = str(name or "").strip("/\\")

    def entry_name(self, name: str) -> str:
        return _join_group(self._group, name)

    def _copy_stream(self, src: BinaryIO, out: BinaryIO) -> None:
        while True:
            try:
                chunk = src.read(self.chunk_bytes)
            except OSError as exc:
                raise SourceReadError(str(exc)) from exc
            if not chunk:
                break
            out.write(chunk)

    @abstractmethod
    def open(self) -> None:
        ...

    @abstractmethod
    def add_image(self, source: Path, dest_name: str) -> bool:
        ...

    @abstractmethod
    def add_caption(self, text: str, dest_name: str) -> None:
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class FolderSink(ExportSink):
    """Copy images and write captions into a directory tree."""

    def open(self) -> None:
        try:
            self.destination.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ExportDestinationError(f"Cannot create destination folder: {exc}") from exc

    def begin_group(self, name: str) -> None:
        super().begin_group(name)
        if not self._group:
            return
        try:
            (self.destination / self._group).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ExportDestinationError(f"Cannot create folder {self._group}: {exc}") from exc

    def add_image(self, source: Path, dest_name: str) -> bool:
        target = self.destination / self.entry_name(dest_name)
        if self._is_source(source, target):
            logger.warning("Skipping %s: destination is the source file", source.name)
            return False
        try:
            with open(source, "rb") as src:
                with open(target, "wb") as out:
                    self._copy_stream(src, out)
        except SourceReadError as exc:
            logger.warning("Skipping %s (read failed): %s", source.name, exc)
            target.unlink(missing_ok=True)
            return False
        except OSError as exc:
            logger.debug("Skipping %s: %s", source.name, exc)
            return False
        try:
            shutil.copystat(source, target)
        except OSError:
            logger.debug("Could not copy timestamps to %s", target.name, exc_info=True)
        return True

    @staticmethod
    def _is_source(source: Path, target: Path) -> bool:
        try:
            return target.exists() and os.path.samefile(source, target)
        except OSError:
            return False

    def add_caption(self, text: str, dest_name: str) -> None:
        target = self.destination / self.entry_name(dest_name)
        try:
            target.write_text(text, encoding="utf-8")
        except OSError as exc:
            # The image is already in place; a missing caption is reported, not fatal.
            logger.warning("Failed to write caption %s: %s", target.name, exc)

    def close(self) -> None:
        return None


class ArchiveSink(ExportSink):
    """Stream images and captions into one ZIP file (deflate, flat or bucket folders)."""

    def __init__(self, destination: Path, *, chunk_bytes: int = EXPORT_CHUNK_BYTES) -> None:
        super().__init__(destination, chunk_bytes=chunk_bytes)
        self._zip: zipfile.ZipFile | None = None
        self._closed = False
        self._names: set[str] = set()

    def open(self) -> None:
        try:
            self.destination.parent.mkdir(parents=True, exist_ok=True)
            self._zip = zipfile.ZipFile(self.destination, "w", compression=zipfile.ZIP_DEFLATED)
        except OSError as exc:
            raise ExportDestinationError(f"Cannot create archive: {exc}") from exc

    def _require_zip(self) -> zipfile.ZipFile:
        if self._zip is None or self._closed:
            raise ExportArchiveError("Archive is not open")
        return self._zip

    def _claim(self, name: str) -> bool:
        if name in self._names:
            logger.warning("Skipping duplicate archive entry %s", name)
            return False
        self._names.add(name)
        return True

    @staticmethod
    def _date_time(st: os.stat_result) -> tuple[int, int, int, int, int, int]:
        dt = time.localtime(float(st.st_mtime))
        # ZIP timestamps cannot predate 1980.
        if dt.tm_year < 1980:
            return (1980, 1, 1, 0, 0, 0)
        return (dt.tm_year, dt.tm_mon, dt.tm_mday, dt.tm_hour, dt.tm_min, dt.tm_sec)

    def add_image(self, source: Path, dest_name: str) -> bool:
        zf = self._require_zip()
        name = self.entry_name(dest_name)
        if name in self._names:
            logger.warning("Skipping %s: archive already has %s", source.name, name)
            return False
        try:
            src = open(source, "rb")
        except OSError as exc:
            logger.debug("Skipping %s: %s", source.name, exc)
            return False
        with src:
            # Open once and stream; ZipFile.write() would re-open by name.
            try:
                st = os.fstat(src.fileno())
            except OSError as exc:
                logger.debug("Skipping %s: %s", source.name, exc)
                return False
            if not stat.S_ISREG(st.st_mode):
                return False
            self._names.add(name)
            info = zipfile.ZipInfo(filename=name, date_time=self._date_time(st))
            info.compress_type = zipfile.ZIP_DEFLATED
            info.file_size = st.st_size
            try:
                with zf.open(info, "w") as out:
                    self._copy_stream(src, out)
            except SourceReadError as exc:
                # The truncated entry stays in the archive; the item is not counted.
                logger.warning("Skipping %s (read failed mid-entry): %s", source.name, exc)
                return False
            except OSError as exc:
                raise ExportArchiveError(f"Failed to write archive entry: {exc}") from exc
        return True

    def add_caption(self, text: str, dest_name: str) -> None:
        zf = self._require_zip()
        name = self.entry_name(dest_name)
        if not self._claim(name):
            return
        info = zipfile.ZipInfo(filename=name, date_time=time.localtime()[:6])
        info.compress_type = zipfile.ZIP_DEFLATED
        try:
            zf.writestr(info, text.encode("utf-8"))
        except OSError as exc:
            raise ExportArchiveError(f"Failed to write archive entry: {exc}") from exc

    def close(self) -> None:
        if self._closed or self._zip is None:
            return
        self._closed = True
        try:
            self._zip.close()
        except OSError as exc:
            raise ExportArchiveError(f"Failed to finalize archive: {exc}") from exc
