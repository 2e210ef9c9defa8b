"""Validation utilities."""

import os
from typing import Optional

from fastapi import HTTPException

from storage_analyzer.errors import InvalidVolumeIdentifier


def normalize_drive_reference(reference: str) -> str:
    """
    Normalize a user-typed drive reference.

    A bare drive letter ("c") or a drive root in any spelling ("C:", "c:/",
    "C:\\") becomes "C:/". Anything else is treated as a mount-point path and
    returned stripped but otherwise unchanged.

    Args:
        reference: Drive letter or path as typed by the user

    Returns:
        Normalized volume identifier

    Raises:
        InvalidVolumeIdentifier: If the reference is empty
    """
    value = (reference or "").strip()
    if not value:
        raise InvalidVolumeIdentifier(reference or "", "volume reference cannot be empty")

    letter = value[0]
    if len(value) == 1 and letter.isascii() and letter.isalpha():
        return f"{letter.upper()}:/"

    if (
        len(value) in (2, 3)
        and letter.isascii()
        and letter.isalpha()
        and value[1] == ":"
        and value[2:] in ("", "/", "\\")
    ):
        return f"{letter.upper()}:/"

    return value


def validate_volume_id(volume_id: str) -> str:
    """
    Check that a volume identifier names an existing directory.

    Args:
        volume_id: Volume root path

    Returns:
        The volume identifier, unchanged

    Raises:
        InvalidVolumeIdentifier: If the id is empty, missing or not a directory
    """
    if not volume_id or not volume_id.strip():
        raise InvalidVolumeIdentifier(volume_id or "", "volume identifier cannot be empty")

    if "\x00" in volume_id:
        raise InvalidVolumeIdentifier(volume_id, "volume identifier contains a NUL byte")

    if not os.path.exists(volume_id):
        raise InvalidVolumeIdentifier(volume_id, "path does not exist")

    if not os.path.isdir(volume_id):
        raise InvalidVolumeIdentifier(volume_id, "path is not a directory")

    return volume_id


def validate_limit(limit: Optional[int], max_limit: int, default_limit: int) -> int:
    """
    Validate and normalize limit parameter.

    Args:
        limit: Requested limit
        max_limit: Maximum allowed limit
        default_limit: Default limit if None

    Returns:
        Validated limit value

    Raises:
        HTTPException: If limit is invalid
    """
    if limit is None:
        return default_limit

    if limit < 1:
        raise HTTPException(
            status_code=400,
            detail="Limit must be greater than 0"
        )

    if limit > max_limit:
        raise HTTPException(
            status_code=400,
            detail=f"Limit exceeds maximum allowed value ({max_limit})"
        )

    return limit
