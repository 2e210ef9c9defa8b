"""Derived size summaries."""

from pydantic import BaseModel, ConfigDict, Field, computed_field

from storage_analyzer.utils.formatters import bytes_to_gb


class DirectorySummary(BaseModel):
    """Recursive size roll-up of one shallow directory."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Directory path")
    depth: int = Field(..., description="Depth below the volume root", ge=1)
    size: int = Field(0, description="Total size of every file beneath the directory, in bytes", ge=0)
    file_count: int = Field(0, description="Number of files beneath the directory", ge=0)

    @computed_field
    @property
    def size_gb(self) -> float:
        return bytes_to_gb(self.size)


class ExtensionStat(BaseModel):
    """Cumulative size and count of one extension group."""

    model_config = ConfigDict(frozen=True)

    extension: str = Field(..., description="Lowercase extension or the no-extension marker")
    size: int = Field(..., description="Cumulative size in bytes", ge=0)
    file_count: int = Field(..., description="Number of files in the group", ge=0)

    @computed_field
    @property
    def size_gb(self) -> float:
        return bytes_to_gb(self.size)
