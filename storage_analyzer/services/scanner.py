"""Parallel recursive filesystem scanner."""

import logging
import os
import time
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Optional

from storage_analyzer.errors import EntryUnreadable, TimestampUnparseable, VolumeUnavailable
from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.volume import ScanResult
from storage_analyzer.services.aggregator import Aggregator
from storage_analyzer.utils.formatters import format_bytes

logger = logging.getLogger(__name__)


def to_datetime(timestamp: float) -> datetime:
    """
    Convert a POSIX timestamp to an aware UTC datetime.

    Raises:
        TimestampUnparseable: If the value is outside the platform's range
    """
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise TimestampUnparseable(f"{timestamp!r}: {e}") from e


def _optional_datetime(path: str, timestamp: float) -> Optional[datetime]:
    try:
        return to_datetime(timestamp)
    except TimestampUnparseable as e:
        logger.debug(f"Unparseable timestamp on {path}: {e}")
        return None


def build_record(entry: os.DirEntry) -> FileRecord:
    """
    Stat a directory entry into a FileRecord.

    Raises:
        EntryUnreadable: If the entry cannot be stat'd
    """
    try:
        st = entry.stat(follow_symlinks=False)
    except OSError as e:
        raise EntryUnreadable(f"{entry.path}: {e}") from e

    return FileRecord(
        path=entry.path,
        size=st.st_size,
        modified_time=_optional_datetime(entry.path, st.st_mtime),
        accessed_time=_optional_datetime(entry.path, st.st_atime),
    )


class _Listing:
    """Files and subdirectories found in one directory."""

    __slots__ = ("files", "subdirs")

    def __init__(self):
        self.files: list[FileRecord] = []
        self.subdirs: list[tuple[str, str]] = []  # (path, name)


class FilesystemScanner:
    """Walks a directory tree level by level on a worker pool.

    Every directory on a level is listed, and its entries stat'd, as an
    independent task. Unreadable entries are skipped; only failing to list
    the root itself is an error.

    Args:
        executor: Pool for directory listing tasks, or None to walk inline
        aggregator: Computes recursive sizes of the shallow directories
        shallow_depth: Deepest level (relative to the root) of listed directories
        hidden_prefix: Directories whose name starts with this are not listed
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        aggregator: Optional[Aggregator] = None,
        shallow_depth: int = 3,
        hidden_prefix: str = ".",
    ):
        self.executor = executor
        self.aggregator = aggregator or Aggregator(executor=executor)
        self.shallow_depth = shallow_depth
        self.hidden_prefix = hidden_prefix

    def _read_entries(self, path: str) -> list[os.DirEntry]:
        with os.scandir(path) as it:
            return list(it)

    def _collect(self, entries: list[os.DirEntry]) -> _Listing:
        listing = _Listing()
        for entry in entries:
            try:
                if entry.is_dir(follow_symlinks=False):
                    listing.subdirs.append((entry.path, entry.name))
                elif entry.is_file(follow_symlinks=False):
                    listing.files.append(build_record(entry))
            except (EntryUnreadable, OSError) as e:
                logger.debug(f"Skipping unreadable entry: {e}")
        return listing

    def _list_directory(self, path: str) -> _Listing:
        try:
            entries = self._read_entries(path)
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {path}: {e}")
            return _Listing()
        return self._collect(entries)

    def scan(self, root: str) -> ScanResult:
        """
        Scan every file under a root.

        Args:
            root: Directory to scan (usually a volume root)

        Returns:
            ScanResult with all files and the shallow directory summaries

        Raises:
            VolumeUnavailable: If the root itself cannot be listed
        """
        started = time.monotonic()
        norm_root = os.path.normpath(os.path.abspath(root))
        logger.info(f"Scanning {norm_root}")

        try:
            root_entries = self._read_entries(norm_root)
        except OSError as e:
            raise VolumeUnavailable(root, str(e)) from e

        files: list[FileRecord] = []
        shallow: list[tuple[str, int]] = []

        listings = [self._collect(root_entries)]
        depth = 0
        while listings:
            frontier = []
            depth += 1
            for listing in listings:
                files.extend(listing.files)
                for path, name in listing.subdirs:
                    frontier.append(path)
                    if depth <= self.shallow_depth and not name.startswith(self.hidden_prefix):
                        shallow.append((path, depth))

            if not frontier:
                break
            if self.executor is None:
                listings = [self._list_directory(path) for path in frontier]
            else:
                listings = list(self.executor.map(self._list_directory, frontier))

        directories = self.aggregator.summarize_directories(norm_root, shallow, files)
        result = ScanResult(root=norm_root, files=tuple(files), directories=tuple(directories))

        logger.info(
            f"Scan of {norm_root} complete: {len(files):,} files ({format_bytes(sum(f.size for f in files))}), "
            f"{len(directories)} shallow directories in {time.monotonic() - started:.1f}s"
        )
        return result
