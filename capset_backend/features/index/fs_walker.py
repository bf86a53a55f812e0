"""
FileSystemWalker: lazy directory traversal for dataset images.

Used by export selection and bulk caption operations so both see the exact same
set of files. Symlinked directories are never descended into.
"""
import os
import time
from collections.abc import Iterator
from pathlib import Path

from ...config import SCAN_IOPS_LIMIT
from ...shared import get_logger, is_image_file

logger = get_logger(__name__)


class FileSystemWalker:
    """
    Walks a directory tree and yields supported image paths one by one.
    Supports optional I/O pacing via `CAPSET_SCAN_IOPS_LIMIT`.
    """

    def __init__(self, scan_iops_limit: float = SCAN_IOPS_LIMIT) -> None:
        self._scan_iops_limit = scan_iops_limit
        self._scan_iops_next_ts = 0.0

    # ------------------------------------------------------------------
    # I/O throttling
    # ------------------------------------------------------------------

    def _scan_iops_wait(self) -> None:
        """Best-effort pacing; sleeps so entries are visited at most `limit` per second."""
        limit = self._scan_iops_limit
        if limit <= 0.0:
            return
        now = time.perf_counter()
        next_ts = self._scan_iops_next_ts
        if next_ts > now:
            time.sleep(next_ts - now)
            now = time.perf_counter()
        self._scan_iops_next_ts = max(next_ts, now) + (1.0 / limit)

    # ------------------------------------------------------------------
    # File iteration
    # ------------------------------------------------------------------

    def iter_files(self, directory: Path, recursive: bool = True) -> Iterator[Path]:
        """
        Generator: iterate over all image files under directory (streaming).

        Args:
            directory: Directory to scan
            recursive: Scan subdirectories

        Yields:
            File paths one by one, in filesystem order (callers sort when needed)
        """
        self._scan_iops_next_ts = 0.0
        # Iterative scandir is generally faster than os.walk on large trees/NAS shares.
        stack: list[Path] = [directory]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as it:
                    for entry in it:
                        self._scan_iops_wait()
                        next_dir = self._next_dir(entry) if recursive else None
                        if next_dir is not None:
                            stack.append(next_dir)
                            continue
                        file_path = self._candidate(entry)
                        if file_path is not None:
                            yield file_path
            except OSError:
                logger.debug("Skipping unreadable directory %s", current, exc_info=True)
                continue

    @staticmethod
    def _next_dir(entry: os.DirEntry) -> Path | None:
        try:
            if entry.is_dir(follow_symlinks=False):
                return Path(entry.path)
        except OSError:
            return None
        return None

    def _candidate(self, entry: os.DirEntry) -> Path | None:
        try:
            if not is_image_file(entry.name):
                return None
            # Symlinks to files count as files; symlinked dirs were filtered above.
            if not entry.is_file(follow_symlinks=True):
                return None
        except OSError:
            return None
        return Path(entry.path)
