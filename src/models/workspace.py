"""Clone workspace data models."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class WorkspaceStatus(str, Enum):
    """Workspace status enumeration."""

    ACTIVE = "active"
    CLEANUP = "cleanup"
    DISPOSED = "disposed"


class WorkspaceConfig(BaseModel):
    """Configuration for clone workspace management."""

    base_dir: Path | None = Field(
        default=None,
        description="Base directory for workspaces (None = system temp)",
    )
    prefix: str = Field(
        default="depresolve_scm_",
        description="Prefix for workspace directory names",
    )


class WorkspaceInfo(BaseModel):
    """A directory holding one repository clone."""

    name: str = Field(description="Unique workspace name")
    path: Path = Field(description="Absolute path to workspace directory")
    status: WorkspaceStatus = Field(default=WorkspaceStatus.ACTIVE)
    created_at: datetime = Field(default_factory=datetime.now)
    repo_url: str | None = Field(default=None, description="Repository cloned into the workspace")

    def mark_cleanup(self) -> None:
        """Mark workspace as being cleaned up."""
        self.status = WorkspaceStatus.CLEANUP

    def mark_disposed(self) -> None:
        """Mark workspace as disposed."""
        self.status = WorkspaceStatus.DISPOSED
