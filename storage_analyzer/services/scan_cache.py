"""In-process memoization of volume scans."""

import logging
import os
import threading

from storage_analyzer.models.volume import ScanResult
from storage_analyzer.services.scanner import FilesystemScanner

logger = logging.getLogger(__name__)


class ScanCache:
    """Scan results per volume, kept for the lifetime of the owning engine.

    Entries are never evicted or refreshed: a volume is scanned once and
    later queries see that snapshot even if the filesystem has changed
    since. Concurrent first queries for the same volume share one scan;
    queries for different volumes do not wait on each other.
    """

    def __init__(self, scanner: FilesystemScanner):
        """
        Initialize scan cache.

        Args:
            scanner: Scanner used to populate missing entries
        """
        self.scanner = scanner
        self._entries: dict[str, ScanResult] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    @staticmethod
    def build_key(volume_id: str) -> str:
        """
        Build a cache key from a volume identifier.

        Spellings of the same root ("C:/", "C:\\", "/mnt/data/", a relative path)
        share a key.
        """
        return os.path.normcase(os.path.normpath(os.path.abspath(volume_id)))

    def get_or_scan(self, volume_id: str) -> ScanResult:
        """
        Get the cached scan of a volume, scanning it on first use.

        Args:
            volume_id: Volume identifier

        Returns:
            ScanResult for the volume

        Raises:
            VolumeUnavailable: If the volume root cannot be listed
        """
        key = self.build_key(volume_id)

        entry = self._entries.get(key)
        if entry is not None:
            logger.debug(f"Scan cache hit: {key}")
            return entry

        with self._guard:
            lock = self._key_locks.setdefault(key, threading.Lock())

        with lock:
            entry = self._entries.get(key)
            if entry is not None:
                logger.debug(f"Scan cache hit after wait: {key}")
                return entry

            logger.info(f"No cached scan for {volume_id}, scanning")
            entry = self.scanner.scan(volume_id)
            self._entries[key] = entry
            logger.info(f"Cached scan for {volume_id}: {len(entry.files):,} files")
            return entry

    def __contains__(self, volume_id: str) -> bool:
        return self.build_key(volume_id) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
