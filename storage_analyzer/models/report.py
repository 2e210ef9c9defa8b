"""Full volume report model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.summary import DirectorySummary, ExtensionStat
from storage_analyzer.models.volume import VolumeSpace


class Report(BaseModel):
    """Composite analysis of one volume.

    Sections that could not be produced are left empty and described in
    ``errors``.
    """

    volume: str = Field(..., description="Volume identifier")
    generated_at: datetime = Field(..., description="When the report was assembled (UTC)")
    space: Optional[VolumeSpace] = Field(None, description="Capacity readout, None if the query failed")
    largest_folders: list[DirectorySummary] = Field(default_factory=list)
    extension_distribution: list[ExtensionStat] = Field(default_factory=list)
    largest_files: list[FileRecord] = Field(default_factory=list)
    recent_large_files: list[FileRecord] = Field(default_factory=list)
    old_large_files: list[FileRecord] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list, description="Messages for degraded sections")

    @property
    def complete(self) -> bool:
        return not self.errors
