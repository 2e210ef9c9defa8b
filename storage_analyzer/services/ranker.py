"""Ranking and time-window filtering of scan results."""

import heapq
import logging
from concurrent.futures import Executor
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional, Sequence

from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat

logger = logging.getLogger(__name__)


def file_rank_key(record: FileRecord) -> tuple[int, str]:
    return (-record.size, record.path)


def directory_rank_key(summary: DirectorySummary) -> tuple[int, str]:
    return (-summary.size, summary.path)


def extension_rank_key(stat: ExtensionStat) -> tuple[int, str]:
    return (-stat.size, stat.extension)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ranker:
    """Orders records by size (largest first, path ascending on ties).

    Args:
        executor: Pool used to sort large collections in chunks
        chunk_size: Records per sort task
        clock: Returns the current aware datetime; swapped out in tests
    """

    def __init__(
        self,
        executor: Optional[Executor] = None,
        chunk_size: int = 10_000,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.executor = executor
        self.chunk_size = chunk_size
        self.clock = clock or _utcnow

    def sort_files(self, files: Sequence[FileRecord]) -> list[FileRecord]:
        """
        Sort files by size descending, path ascending.

        Collections larger than one chunk are sorted chunk-wise on the pool
        and k-way merged; the key is a total order, so the result does not
        depend on the chunking.
        """
        if self.executor is None or len(files) <= self.chunk_size:
            return sorted(files, key=file_rank_key)

        chunks = [files[i:i + self.chunk_size] for i in range(0, len(files), self.chunk_size)]
        sorted_chunks = list(self.executor.map(lambda chunk: sorted(chunk, key=file_rank_key), chunks))
        return list(heapq.merge(*sorted_chunks, key=file_rank_key))

    def _top(self, files: Iterable[FileRecord], n: Optional[int]) -> list[FileRecord]:
        if n is None:
            return self.sort_files(list(files))
        if n <= 0:
            return []
        return heapq.nsmallest(n, files, key=file_rank_key)

    def largest_files(self, files: Sequence[FileRecord], n: Optional[int] = None) -> list[FileRecord]:
        """
        Largest files first.

        Args:
            files: Files to rank
            n: Keep only the first n, or all when None

        Returns:
            Ranked files
        """
        return self._top(files, n)

    def files_modified_within(
        self,
        files: Sequence[FileRecord],
        days: int,
        n: Optional[int] = None,
        min_size: int = 0,
    ) -> list[FileRecord]:
        """
        Largest files modified more recently than ``days`` ago.

        Files without a modification time are excluded.

        Args:
            files: Files to filter and rank
            days: Window length in days
            n: Keep only the first n, or all when None
            min_size: Optional size floor in bytes (0 disables)

        Returns:
            Ranked files inside the window
        """
        cutoff = self.clock() - timedelta(days=days)
        selected = (
            f for f in files
            if f.modified_time is not None and f.modified_time > cutoff and f.size >= min_size
        )
        return self._top(selected, n)

    def files_modified_before(
        self,
        files: Sequence[FileRecord],
        days: int,
        n: Optional[int] = None,
        min_size: int = 0,
    ) -> list[FileRecord]:
        """
        Largest files last modified longer than ``days`` ago.

        Files without a modification time are excluded.

        Args:
            files: Files to filter and rank
            days: Age threshold in days
            n: Keep only the first n, or all when None
            min_size: Optional size floor in bytes (0 disables)

        Returns:
            Ranked files outside the window
        """
        cutoff = self.clock() - timedelta(days=days)
        selected = (
            f for f in files
            if f.modified_time is not None and f.modified_time < cutoff and f.size >= min_size
        )
        return self._top(selected, n)
