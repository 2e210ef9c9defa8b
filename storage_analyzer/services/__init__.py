"""Service layer: the storage analysis engine."""

from storage_analyzer.services.volume_provider import (
    PosixVolumeProvider,
    VolumeProvider,
    WindowsVolumeProvider,
    get_volume_provider,
)
from storage_analyzer.services.scanner import FilesystemScanner
from storage_analyzer.services.scan_cache import ScanCache
from storage_analyzer.services.aggregator import Aggregator
from storage_analyzer.services.ranker import Ranker
from storage_analyzer.services.report_service import ReportComposer
from storage_analyzer.services.analyzer import StorageAnalyzer

__all__ = [
    "Aggregator",
    "FilesystemScanner",
    "PosixVolumeProvider",
    "Ranker",
    "ReportComposer",
    "ScanCache",
    "StorageAnalyzer",
    "VolumeProvider",
    "WindowsVolumeProvider",
    "get_volume_provider",
]
