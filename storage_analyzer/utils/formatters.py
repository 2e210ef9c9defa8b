"""Unit conversion and formatting utilities.

All byte to GB/MB conversions in the project go through this module so every
surfaced size uses the same binary units.
"""

from datetime import datetime
from typing import Optional

BYTES_PER_GB = 1 << 30
BYTES_PER_MB = 1 << 20

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def bytes_to_gb(bytes_value: int) -> float:
    """Convert a byte count to GB (2^30 bytes)."""
    return bytes_value / BYTES_PER_GB


def bytes_to_mb(bytes_value: int) -> float:
    """Convert a byte count to MB (2^20 bytes)."""
    return bytes_value / BYTES_PER_MB


def mb_to_bytes(mb_value: float) -> float:
    """Convert MB (2^20 bytes) to a byte count."""
    return mb_value * BYTES_PER_MB


def format_bytes(bytes_value: int, decimal_places: int = 2) -> str:
    """
    Format bytes to human-readable string.

    Args:
        bytes_value: Size in bytes
        decimal_places: Number of decimal places

    Returns:
        Formatted string (e.g., "1.50 GB")
    """
    if bytes_value < 0:
        return "0 B"

    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    unit_index = 0

    size = float(bytes_value)
    while size >= 1024.0 and unit_index < len(units) - 1:
        size /= 1024.0
        unit_index += 1

    return f"{size:.{decimal_places}f} {units[unit_index]}"


def format_timestamp(timestamp: Optional[datetime], format_str: str = DEFAULT_DATE_FORMAT) -> str:
    """
    Format timestamp to string.

    Args:
        timestamp: Datetime object
        format_str: Format string

    Returns:
        Formatted timestamp string, or "Unknown" when missing
    """
    if timestamp is None:
        return "Unknown"

    return timestamp.strftime(format_str)
