"""Storage analysis engine: the query API over volume identifiers."""

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from storage_analyzer.config import Settings, get_settings
from storage_analyzer.errors import StorageAnalyzerError
from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.report import Report
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat
from storage_analyzer.models.volume import ScanResult, VolumeSpace
from storage_analyzer.services.aggregator import Aggregator
from storage_analyzer.services.ranker import Ranker
from storage_analyzer.services.report_service import ReportComposer
from storage_analyzer.services.scan_cache import ScanCache
from storage_analyzer.services.scanner import FilesystemScanner
from storage_analyzer.services.volume_provider import VolumeProvider, get_volume_provider
from storage_analyzer.utils.formatters import mb_to_bytes
from storage_analyzer.utils.validators import validate_volume_id

logger = logging.getLogger(__name__)


class StorageAnalyzer:
    """Answers storage queries about local volumes.

    One instance owns a worker pool and a scan cache. Each volume is walked
    at most once per instance; every file-based query after that reads the
    cached scan. Capacity queries always go to the volume provider.

    Args:
        settings: Tunables, defaults to ``get_settings()``
        volume_provider: Platform capability, defaults to ``get_volume_provider()``
        scanner: Scanner to populate the cache, built from settings if omitted
        executor: Shared worker pool; created (and owned) if omitted
        clock: Current-time source for the date-windowed views
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        volume_provider: Optional[VolumeProvider] = None,
        scanner: Optional[FilesystemScanner] = None,
        executor: Optional[Executor] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="storage-analyzer",
        )
        self.volume_provider = volume_provider or get_volume_provider()
        self.aggregator = Aggregator(
            executor=self.executor,
            chunk_size=self.settings.chunk_size,
            min_extension_size_gb=self.settings.min_extension_size_gb,
            min_folder_size_gb=self.settings.min_folder_size_gb,
        )
        self.ranker = Ranker(executor=self.executor, chunk_size=self.settings.chunk_size, clock=clock)
        self.scanner = scanner or FilesystemScanner(
            executor=self.executor,
            aggregator=self.aggregator,
            shallow_depth=self.settings.shallow_depth,
            hidden_prefix=self.settings.hidden_prefix,
        )
        self.cache = ScanCache(self.scanner)
        self.reports = ReportComposer(self)

    def __enter__(self) -> "StorageAnalyzer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Shut down the worker pool if this instance created it."""
        if self._owns_executor:
            self.executor.shutdown(wait=True)

    def _limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.settings.top_n
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        return limit

    def _large_file_floor(self) -> int:
        return int(mb_to_bytes(self.settings.min_large_file_size_mb))

    def scan(self, volume_id: str) -> ScanResult:
        """
        Cached scan of a volume.

        Raises:
            InvalidVolumeIdentifier: If the id does not name a directory
            VolumeUnavailable: If the volume root cannot be listed
        """
        validate_volume_id(volume_id)
        return self.cache.get_or_scan(volume_id)

    def list_volumes(self) -> list[str]:
        """Fixed local volumes reported by the volume provider."""
        volumes = self.volume_provider.list_fixed_volumes()
        logger.debug(f"Fixed volumes: {volumes}")
        return volumes

    def get_drive_space(self, volume_id: str) -> VolumeSpace:
        """
        Current capacity of a volume; never cached.

        Raises:
            InvalidVolumeIdentifier: If the id does not name a directory
            VolumeUnavailable: If the capacity query fails
        """
        validate_volume_id(volume_id)
        return self.volume_provider.space_of(volume_id)

    def get_largest_folders(
        self,
        volume_id: str,
        limit: Optional[int] = None,
        depth: Optional[int] = None,
    ) -> list[DirectorySummary]:
        """Largest non-hidden folders within ``depth`` levels of the root."""
        scan = self.scan(volume_id)
        folders = self.aggregator.folder_sizes(
            scan.directories,
            self.settings.shallow_depth if depth is None else depth,
        )
        return folders[:self._limit(limit)]

    def get_extension_distribution(self, volume_id: str, limit: Optional[int] = None) -> list[ExtensionStat]:
        """Extension groups with the most cumulative size."""
        scan = self.scan(volume_id)
        return self.aggregator.extension_distribution(scan.files)[:self._limit(limit)]

    def get_largest_files(self, volume_id: str, limit: Optional[int] = None) -> list[FileRecord]:
        """Largest files on the volume."""
        scan = self.scan(volume_id)
        return self.ranker.largest_files(scan.files, self._limit(limit))

    def get_recent_large_files(
        self,
        volume_id: str,
        limit: Optional[int] = None,
        days: Optional[int] = None,
    ) -> list[FileRecord]:
        """Largest files modified within the last ``recent_days`` days."""
        scan = self.scan(volume_id)
        return self.ranker.files_modified_within(
            scan.files,
            self.settings.recent_days if days is None else days,
            self._limit(limit),
            min_size=self._large_file_floor(),
        )

    def get_old_large_files(
        self,
        volume_id: str,
        limit: Optional[int] = None,
        days: Optional[int] = None,
    ) -> list[FileRecord]:
        """Largest files not modified for more than ``old_days`` days."""
        scan = self.scan(volume_id)
        return self.ranker.files_modified_before(
            scan.files,
            self.settings.old_days if days is None else days,
            self._limit(limit),
            min_size=self._large_file_floor(),
        )

    def full_report(self, volume_id: str) -> Report:
        """Every section for one volume; see ReportComposer."""
        return self.reports.full_report(volume_id)

    def analyze_volumes(
        self,
        volume_ids: Optional[Iterable[str]] = None,
        running: Optional[threading.Event] = None,
    ) -> list[Report]:
        """
        Full reports for several volumes, one after another.

        The ``running`` flag is checked between volumes only; clearing it
        lets the volume in progress finish and skips the rest.

        Args:
            volume_ids: Volumes to analyze, defaults to all fixed volumes
            running: Cooperative "still running" flag

        Returns:
            One Report per analyzed volume
        """
        volumes = list(volume_ids) if volume_ids is not None else self.list_volumes()
        reports = []
        for volume_id in volumes:
            if running is not None and not running.is_set():
                logger.warning(f"Stopping before {volume_id}: run cancelled")
                break
            try:
                reports.append(self.full_report(volume_id))
            except StorageAnalyzerError as e:
                logger.warning(f"Skipping {volume_id}: {e}")
                reports.append(Report(
                    volume=volume_id,
                    generated_at=datetime.now(timezone.utc),
                    errors=[str(e)],
                ))
        return reports
