"""Data models module."""

from src.models.dependency import Dependency, Ecosystem
from src.models.project import Coordinates, ProjectInfo, ProjectsDetails, StatusCode
from src.models.scm import GitRef, GitRefType, ScmConfiguration, ScmType
from src.models.workspace import WorkspaceConfig, WorkspaceInfo, WorkspaceStatus

__all__ = [
    "Coordinates",
    "Dependency",
    "Ecosystem",
    "GitRef",
    "GitRefType",
    "ProjectInfo",
    "ProjectsDetails",
    "ScmConfiguration",
    "ScmType",
    "StatusCode",
    "WorkspaceConfig",
    "WorkspaceInfo",
    "WorkspaceStatus",
]
