"""Project and resolution result models."""

from enum import Enum

from pydantic import BaseModel, Field

from src.models.dependency import Dependency


class StatusCode(int, Enum):
    """Outcome of a resolution run."""

    SUCCESS = 0
    ERROR = -1
    PREP_STEP_FAILURE = -6

    @property
    def exit_code(self) -> int:
        """Process exit code; POSIX exit statuses are unsigned (0, 1 or 6)."""
        return abs(self.value)


class Coordinates(BaseModel):
    """Project coordinates."""

    namespace: str | None = None
    name: str | None = None
    version: str | None = None

    def __str__(self) -> str:
        """Return string representation."""
        parts = [p for p in (self.namespace, self.name, self.version) if p]
        return ":".join(parts)


class ProjectInfo(BaseModel):
    """A discovered project and its dependencies."""

    coordinates: Coordinates | None = Field(default=None, description="Project coordinates")
    project_token: str | None = Field(default=None, description="Existing project token")
    dependencies: list[Dependency] = Field(default_factory=list)
    base_dirs: list[str] = Field(
        default_factory=list,
        description="Directories the project was scanned from",
    )

    @property
    def has_identity(self) -> bool:
        """Whether the project is labelled by coordinates or a token."""
        return self.coordinates is not None or bool((self.project_token or "").strip())

    @property
    def display_name(self) -> str:
        """Label used in reports."""
        if self.coordinates is not None:
            return str(self.coordinates) or "<unnamed>"
        if self.project_token:
            return f"token:{self.project_token}"
        return "<unnamed>"


class ProjectsDetails(BaseModel):
    """Result envelope of a resolution run."""

    projects: list[ProjectInfo] = Field(default_factory=list)
    status_code: StatusCode = Field(default=StatusCode.SUCCESS)
    details: str = Field(default="")

    @property
    def success(self) -> bool:
        """Whether the run finished with StatusCode.SUCCESS."""
        return self.status_code == StatusCode.SUCCESS

    @classmethod
    def success_result(
        cls,
        projects: list[ProjectInfo],
        status_code: StatusCode = StatusCode.SUCCESS,
        details: str = "",
    ) -> "ProjectsDetails":
        """Create a result carrying projects.

        Args:
            projects: Resolved projects.
            status_code: Status of the run; PREP_STEP_FAILURE still carries projects.
            details: Detail message.

        Returns:
            ProjectsDetails instance.
        """
        return cls(projects=list(projects), status_code=status_code, details=details)

    @classmethod
    def failure_result(cls, status_code: StatusCode, details: str) -> "ProjectsDetails":
        """Create a result with no projects.

        Args:
            status_code: Non-success status.
            details: Human-readable failure message.

        Returns:
            ProjectsDetails instance.
        """
        return cls(projects=[], status_code=status_code, details=details)
