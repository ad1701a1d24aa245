"""Data models for tidymac."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CleanupTarget(BaseModel):
    """A named location or external command that can be cleaned."""

    id: str = Field(..., description="Unique identifier for the target")
    name: str = Field(..., description="Human-readable name")
    path: str = Field("", description="Path or glob pattern (supports ~ expansion)")
    description: str = Field("", description="What this target contains")
    category: str = Field(..., description="Category label (Cache, Logs, Dev, ...)")
    requires_sudo: bool = Field(False, description="Whether cleaning needs administrator rights")
    is_command: bool = Field(False, description="If True, cleaning runs `command` instead of deleting `path`")
    command: str = Field("", description="External cleanup command for command-based targets")

    # Mutable session state
    size: int = Field(0, description="Measured size in bytes from the last scan")
    selected: bool = Field(False, description="Whether the user selected this target")


class BigFile(BaseModel):
    """A file at or above the big-file threshold."""

    model_config = ConfigDict(frozen=True)

    path: str
    size: int
    mod_time: datetime


class DuplicateGroup(BaseModel):
    """Files sharing byte size and content fingerprint."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(..., description="Fingerprint of the first bytes of each member")
    size: int = Field(..., description="Byte size shared by every member")
    files: list[str] = Field(..., min_length=2, description="Member paths, keeper first")

    @property
    def key(self) -> str:
        """Stable selection key for the group."""
        return f"{self.size}:{self.hash}"

    @property
    def keep(self) -> str:
        """The copy that survives deletion."""
        return self.files[0]

    @property
    def extras(self) -> list[str]:
        """Copies that would be deleted."""
        return self.files[1:]

    @property
    def reclaimable(self) -> int:
        """Bytes freed if every copy but the keeper is deleted."""
        return self.size * (len(self.files) - 1)


class OldFile(BaseModel):
    """A file not modified since the age cutoff."""

    model_config = ConfigDict(frozen=True)

    path: str
    size: int
    last_access: datetime = Field(..., description="Modification time, used as a last-access proxy")


class CleanResult(BaseModel):
    """Outcome of cleaning one target."""

    target: str = Field(..., description="Target name")
    requested: int = Field(0, description="Bytes the scan expected to free")
    actual: int = Field(0, description="Bytes measured as freed on disk")
    error: Optional[str] = Field(None, description="Error message if cleaning failed")
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def success(self) -> bool:
        """Whether the target was cleaned without error."""
        return self.error is None
