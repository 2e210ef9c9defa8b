"""Pydantic models for scan data, reports and API responses."""

from storage_analyzer.models.file_record import NO_EXTENSION, FileRecord, file_extension
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat
from storage_analyzer.models.volume import ScanResult, VolumeSpace
from storage_analyzer.models.report import Report
from storage_analyzer.models.response import (
    ErrorResponse,
    ExtensionListResponse,
    FileListResponse,
    FolderListResponse,
    VolumeListResponse,
)

__all__ = [
    "NO_EXTENSION",
    "FileRecord",
    "file_extension",
    "DirectorySummary",
    "ExtensionStat",
    "ScanResult",
    "VolumeSpace",
    "Report",
    "ErrorResponse",
    "ExtensionListResponse",
    "FileListResponse",
    "FolderListResponse",
    "VolumeListResponse",
]
