"""Size aggregation by extension and by directory.

Both derivations are folds over the cached file list. Each worker folds one
chunk into a partial map, and partial maps are merged by summing matching
keys. The merge is associative and commutative, so results do not depend on
traversal order or on how the list is chunked. Sums stay in integer bytes;
GB values only appear when thresholds are applied and when models are
serialized.
"""

import functools
import logging
import os
from concurrent.futures import Executor
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from storage_analyzer.models.file_record import FileRecord, file_extension
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat
from storage_analyzer.services.ranker import directory_rank_key, extension_rank_key
from storage_analyzer.utils.formatters import bytes_to_gb

logger = logging.getLogger(__name__)

T = TypeVar("T")
A = TypeVar("A")

# key -> [size_bytes, file_count]
Tally = dict[str, list[int]]


def parallel_fold(
    items: Sequence[T],
    empty: Callable[[], A],
    insert: Callable[[A, T], None],
    merge: Callable[[A, A], A],
    executor: Optional[Executor] = None,
    chunk_size: int = 10_000,
) -> A:
    """
    Fold items into an accumulator, fanning chunks out over a pool.

    Args:
        items: Items to fold
        empty: Builds the neutral accumulator
        insert: Adds one item to an accumulator in place
        merge: Combines two accumulators (may reuse the left one)
        executor: Pool for the per-chunk folds, or None to fold inline
        chunk_size: Items per fold task

    Returns:
        The merged accumulator
    """
    def fold(chunk: Sequence[T]) -> A:
        acc = empty()
        for item in chunk:
            insert(acc, item)
        return acc

    chunks = [items[i:i + chunk_size] for i in range(0, len(items), chunk_size)]
    if executor is None or len(chunks) <= 1:
        partials = [fold(chunk) for chunk in chunks]
    else:
        partials = list(executor.map(fold, chunks))

    return functools.reduce(merge, partials, empty())


def merge_tallies(left: Tally, right: Tally) -> Tally:
    for key, (size, count) in right.items():
        entry = left.get(key)
        if entry is None:
            left[key] = [size, count]
        else:
            entry[0] += size
            entry[1] += count
    return left


def tally_extension(tally: Tally, record: FileRecord) -> None:
    ext = file_extension(record.path)
    entry = tally.get(ext)
    if entry is None:
        tally[ext] = [record.size, 1]
    else:
        entry[0] += record.size
        entry[1] += 1


def _dir_prefix(root: str) -> str:
    return root if root.endswith(os.sep) else root + os.sep


class Aggregator:
    """Derives extension and directory statistics from a file list."""

    def __init__(
        self,
        executor: Optional[Executor] = None,
        chunk_size: int = 10_000,
        min_extension_size_gb: float = 0.01,
        min_folder_size_gb: float = 0.1,
    ):
        self.executor = executor
        self.chunk_size = chunk_size
        self.min_extension_size_gb = min_extension_size_gb
        self.min_folder_size_gb = min_folder_size_gb

    def extension_tally(self, files: Sequence[FileRecord]) -> Tally:
        """Unfiltered extension -> [size, count] map."""
        return parallel_fold(
            files,
            dict,
            tally_extension,
            merge_tallies,
            executor=self.executor,
            chunk_size=self.chunk_size,
        )

    def extension_distribution(self, files: Sequence[FileRecord]) -> list[ExtensionStat]:
        """
        Size and count per extension, largest first.

        Groups whose cumulative size is not above ``min_extension_size_gb``
        are dropped.

        Args:
            files: Files to group

        Returns:
            ExtensionStat list sorted by size descending
        """
        tally = self.extension_tally(files)
        stats = [
            ExtensionStat(extension=ext, size=size, file_count=count)
            for ext, (size, count) in tally.items()
            if bytes_to_gb(size) > self.min_extension_size_gb
        ]
        stats.sort(key=extension_rank_key)
        logger.debug(f"Extension distribution: {len(stats)} of {len(tally)} groups above threshold")
        return stats

    def summarize_directories(
        self,
        root: str,
        directories: Iterable[tuple[str, int]],
        files: Sequence[FileRecord],
    ) -> list[DirectorySummary]:
        """
        Recursive size roll-up for selected directories in one pass.

        Every file adds its size to each selected ancestor, however deep the
        file sits, including files under hidden subdirectories.

        Args:
            root: Scan root the directory paths are built from
            directories: (path, depth below root) pairs to summarize
            files: Every file under the root

        Returns:
            One DirectorySummary per requested directory, unordered
        """
        depths = dict(directories)
        if not depths:
            return []

        prefix = _dir_prefix(root)
        max_depth = max(depths.values())

        def insert(tally: Tally, record: FileRecord) -> None:
            if not record.path.startswith(prefix):
                return
            parts = record.path[len(prefix):].split(os.sep)
            # parts[-1] is the file name; ancestors are the leading parts
            for depth in range(1, min(len(parts) - 1, max_depth) + 1):
                ancestor = prefix + os.sep.join(parts[:depth])
                if ancestor not in depths:
                    continue
                entry = tally.get(ancestor)
                if entry is None:
                    tally[ancestor] = [record.size, 1]
                else:
                    entry[0] += record.size
                    entry[1] += 1

        tally = parallel_fold(
            files,
            dict,
            insert,
            merge_tallies,
            executor=self.executor,
            chunk_size=self.chunk_size,
        )

        return [
            DirectorySummary(
                path=path,
                depth=depth,
                size=tally.get(path, (0, 0))[0],
                file_count=tally.get(path, (0, 0))[1],
            )
            for path, depth in depths.items()
        ]

    def folder_sizes(
        self,
        directories: Iterable[DirectorySummary],
        depth: int = 3,
    ) -> list[DirectorySummary]:
        """
        Largest shallow folders first.

        Args:
            directories: Summaries produced by a scan
            depth: Deepest level to report, 1 to 3

        Returns:
            Summaries above ``min_folder_size_gb`` sorted by size descending
        """
        if not 1 <= depth <= 3:
            raise ValueError(f"depth must be between 1 and 3, got {depth}")

        folders = [
            d for d in directories
            if d.depth <= depth and bytes_to_gb(d.size) > self.min_folder_size_gb
        ]
        folders.sort(key=directory_rank_key)
        return folders
