"""Exception definitions module."""

from src.core.exceptions.errors import (
    ConfigurationError,
    DepResolveError,
    GitError,
    InstallError,
    ScanError,
    WorkspaceError,
)

__all__ = [
    "DepResolveError",
    "GitError",
    "WorkspaceError",
    "ConfigurationError",
    "InstallError",
    "ScanError",
]
