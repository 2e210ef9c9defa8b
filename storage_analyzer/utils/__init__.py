"""Utility functions for the Storage Analyzer."""

from storage_analyzer.utils.formatters import (
    BYTES_PER_GB,
    BYTES_PER_MB,
    bytes_to_gb,
    bytes_to_mb,
    format_bytes,
    format_timestamp,
)
from storage_analyzer.utils.validators import (
    normalize_drive_reference,
    validate_limit,
    validate_volume_id,
)

__all__ = [
    "BYTES_PER_GB",
    "BYTES_PER_MB",
    "bytes_to_gb",
    "bytes_to_mb",
    "format_bytes",
    "format_timestamp",
    "normalize_drive_reference",
    "validate_limit",
    "validate_volume_id",
]
