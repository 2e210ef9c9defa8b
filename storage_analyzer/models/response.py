"""API response models."""

from typing import Optional

from pydantic import BaseModel, Field

from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    detail: str = Field(..., description="Error details")
    volume: Optional[str] = Field(None, description="Volume the request targeted")


class VolumeListResponse(BaseModel):
    """Fixed local volumes."""

    volumes: list[str] = Field(default_factory=list, description="Volume identifiers")
    total: int = Field(..., description="Number of volumes", ge=0)


class FileListResponse(BaseModel):
    """Ranked file list."""

    volume: str = Field(..., description="Volume identifier")
    files: list[FileRecord] = Field(default_factory=list, description="Files, largest first")
    total: int = Field(..., description="Number of files returned", ge=0)
    limit: int = Field(..., description="Limit applied", ge=0)
    total_size: int = Field(..., description="Combined size of returned files", ge=0)


class FolderListResponse(BaseModel):
    """Ranked folder list."""

    volume: str = Field(..., description="Volume identifier")
    folders: list[DirectorySummary] = Field(default_factory=list, description="Folders, largest first")
    total: int = Field(..., description="Number of folders returned", ge=0)
    limit: int = Field(..., description="Limit applied", ge=0)


class ExtensionListResponse(BaseModel):
    """Ranked extension distribution."""

    volume: str = Field(..., description="Volume identifier")
    extensions: list[ExtensionStat] = Field(default_factory=list, description="Extension groups, largest first")
    total: int = Field(..., description="Number of groups returned", ge=0)
    limit: int = Field(..., description="Limit applied", ge=0)
