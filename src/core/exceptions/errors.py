"""Custom exception definitions for depresolve."""

from typing import Any


class DepResolveError(Exception):
    """Base exception for all depresolve errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class GitError(DepResolveError):
    """Exception raised for Git clone and checkout errors."""

    def __init__(
        self,
        message: str,
        repo_url: str | None = None,
        git_ref: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize Git error.

        Args:
            message: Error message.
            repo_url: Repository URL that caused the error.
            git_ref: Git reference (branch/tag) involved.
            details: Additional error details.
        """
        details = details or {}
        if repo_url:
            details["repo_url"] = repo_url
        if git_ref:
            details["git_ref"] = git_ref
        super().__init__(message, details)


class WorkspaceError(DepResolveError):
    """Exception raised for clone workspace errors."""

    def __init__(
        self,
        message: str,
        workspace_name: str | None = None,
        workspace_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if workspace_name:
            details["workspace_name"] = workspace_name
        if workspace_path:
            details["workspace_path"] = workspace_path
        super().__init__(message, details)


class ConfigurationError(DepResolveError):
    """Exception raised for configuration and manifest errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key or file that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class InstallError(DepResolveError):
    """Exception raised when a package-manager install cannot be started."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        cwd: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if command:
            details["command"] = " ".join(command)
        if cwd:
            details["cwd"] = cwd
        super().__init__(message, details)


class ScanError(DepResolveError):
    """Exception raised for dependency scanning errors."""
