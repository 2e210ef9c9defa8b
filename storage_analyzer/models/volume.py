"""Volume models."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from storage_analyzer.models.file_record import FileRecord
from storage_analyzer.models.summary import DirectorySummary
from storage_analyzer.utils.formatters import bytes_to_gb


class VolumeSpace(BaseModel):
    """Point-in-time capacity readout of a volume."""

    volume: str = Field(..., description="Volume identifier")
    total: int = Field(..., description="Total capacity in bytes", ge=0)
    used: int = Field(..., description="Used bytes", ge=0)
    free: int = Field(..., description="Free bytes", ge=0)

    @computed_field
    @property
    def free_percent(self) -> float:
        if self.total == 0:
            return 0.0
        return self.free / self.total * 100

    @computed_field
    @property
    def total_gb(self) -> float:
        return bytes_to_gb(self.total)

    @computed_field
    @property
    def used_gb(self) -> float:
        return bytes_to_gb(self.used)

    @computed_field
    @property
    def free_gb(self) -> float:
        return bytes_to_gb(self.free)


class ScanResult(BaseModel):
    """Raw output of one volume scan, as held by the scan cache."""

    model_config = ConfigDict(frozen=True)

    root: str = Field(..., description="Normalized scan root")
    files: tuple[FileRecord, ...] = Field(default_factory=tuple, description="Every regular file under the root")
    directories: tuple[DirectorySummary, ...] = Field(
        default_factory=tuple,
        description="Shallow, non-hidden directories with their recursive sizes"
    )
