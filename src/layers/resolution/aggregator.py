"""Assign identity to scanned projects."""

from pathlib import Path

from src.core.config.settings import RequestSettings
from src.core.logger.logger import get_logger
from src.models.project import Coordinates, ProjectInfo, ProjectsDetails

logger = get_logger(__name__)


class ProjectAggregator:
    """Turns raw scan output into labelled projects."""

    def __init__(self, request: RequestSettings) -> None:
        """Initialize the aggregator.

        Args:
            request: Configured project identity.
        """
        self.request = request

    def assign_subfolder_identity(self, unit: ProjectsDetails, directory: Path) -> ProjectInfo | None:
        """Label the single project of a sub-folder unit with the folder name.

        Any identity the scanner produced is replaced.

        Args:
            unit: Result of resolving one sub-folder.
            directory: The sub-folder.

        Returns:
            The labelled project, or None when the unit did not yield exactly one.
        """
        if len(unit.projects) != 1:
            # several projects cannot share one folder name
            logger.info(
                f"Dropping {directory}: expected one project, found {len(unit.projects)}"
            )
            return None

        project = unit.projects[0]
        project.coordinates = Coordinates(
            namespace=None,
            name=Path(directory).name,
            version=self.request.project_version,
        )
        return project

    def assign_single_unit_identity(self, details: ProjectsDetails) -> ProjectsDetails:
        """Label the project of a single-unit run with the configured identity.

        Only a lone project without identity is labelled; the token wins over
        name and version.

        Args:
            details: Result of the single resolution unit.

        Returns:
            The same details, possibly with the project labelled.
        """
        if len(details.projects) == 1:
            project = details.projects[0]
            if not project.has_identity:
                token = (self.request.project_token or "").strip()
                if token:
                    project.project_token = token
                else:
                    project.coordinates = Coordinates(
                        namespace=None,
                        name=self.request.project_name,
                        version=self.request.project_version,
                    )

        details.projects = self.deduplicate(details.projects)
        return details

    def deduplicate(self, projects: list[ProjectInfo]) -> list[ProjectInfo]:
        """Extension point for merging projects that share an identity.

        Projects are returned unchanged; there is no merge policy yet.
        """
        return projects
