"""File record models."""

import os
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from storage_analyzer.utils.formatters import bytes_to_gb, bytes_to_mb

NO_EXTENSION = "(no extension)"


def file_extension(path: str) -> str:
    """
    Normalized extension of a file path.

    The extension is the text after the last dot of the base name, lowercased
    and without the dot. A single leading dot marks a hidden file, not an
    extension, so ".bashrc" has none; "notes." has none either.

    Args:
        path: File path

    Returns:
        Lowercase extension, or NO_EXTENSION
    """
    name = os.path.basename(path)
    if name.startswith("."):
        name = name[1:]
    _, dot, ext = name.rpartition(".")
    if not dot or not ext:
        return NO_EXTENSION
    return ext.lower()


class FileRecord(BaseModel):
    """A regular file observed during a volume scan."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Full absolute path")
    size: int = Field(..., description="File size in bytes", ge=0)
    modified_time: Optional[datetime] = Field(None, description="Last modified timestamp (UTC)")
    accessed_time: Optional[datetime] = Field(None, description="Last accessed timestamp (UTC)")

    @field_validator("modified_time", "accessed_time")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @computed_field
    @property
    def size_mb(self) -> float:
        return bytes_to_mb(self.size)

    @computed_field
    @property
    def size_gb(self) -> float:
        return bytes_to_gb(self.size)

    @computed_field
    @property
    def extension(self) -> str:
        return file_extension(self.path)
