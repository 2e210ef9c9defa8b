"""Storage Analyzer: where the space on local volumes goes."""

from storage_analyzer.config import Settings, get_settings
from storage_analyzer.errors import InvalidVolumeIdentifier, StorageAnalyzerError, VolumeUnavailable
from storage_analyzer.services.analyzer import StorageAnalyzer

__version__ = "1.0.0"

__all__ = [
    "InvalidVolumeIdentifier",
    "Settings",
    "StorageAnalyzer",
    "StorageAnalyzerError",
    "VolumeUnavailable",
    "get_settings",
]
