"""File system agent: resolves directories and repositories into projects."""

from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from src.core.config.settings import Settings
from src.core.logger.logger import get_logger
from src.layers.acquisition.git_operations import GitOperations
from src.layers.acquisition.scm_connector import create_connector
from src.layers.acquisition.workspace import WorkspaceManager
from src.layers.preparation.installer import CommandLineInstaller
from src.layers.preparation.preparer import ConnectorFactory, RepositoryPreparer
from src.layers.resolution.aggregator import ProjectAggregator
from src.layers.resolution.cleanup import CleanupCoordinator
from src.layers.resolution.dispatcher import ScanDispatcher
from src.models.project import ProjectInfo, ProjectsDetails, StatusCode
from src.models.workspace import WorkspaceConfig

logger = get_logger(__name__)


class ResolutionStage(str, Enum):
    """Stages of a resolution run."""

    INIT = "init"
    PREPARING = "preparing"
    DISPATCHING = "dispatching"
    AGGREGATING = "aggregating"
    CLEANING = "cleaning"
    DONE = "done"


def expand_subfolders(dependency_dirs: Sequence[Path | str]) -> list[Path]:
    """Replace every directory by its immediate sub-directories.

    Files are kept as they are; paths that do not exist are logged and dropped.
    """
    expanded: list[Path] = []
    for entry in dependency_dirs:
        path = Path(entry)
        if path.is_dir():
            expanded.extend(sorted(child for child in path.iterdir() if child.is_dir()))
        elif path.is_file():
            expanded.append(path)
        else:
            logger.warning(f"{path} is not a file nor a directory")
    return expanded


class FileSystemAgent:
    """Runs prepare, dispatch, aggregate and cleanup for configured sources.

    In project-per-subfolder mode every sub-folder is one unit that goes
    through the whole pipeline, and the first failing unit ends the run.
    Otherwise all directories form a single unit.
    """

    def __init__(
        self,
        settings: Settings,
        dependency_dirs: Sequence[Path | str],
        workspace_manager: WorkspaceManager | None = None,
        dispatcher: ScanDispatcher | None = None,
        installer: CommandLineInstaller | None = None,
        git_operations: GitOperations | None = None,
        connector_factory: ConnectorFactory = create_connector,
    ) -> None:
        """Initialize the agent.

        Args:
            settings: Application settings.
            dependency_dirs: Local directories (or files) to scan.
            workspace_manager: Owner of clone directories.
            dispatcher: Scan dispatcher.
            installer: Installer for the clone prep step.
            git_operations: Git operations for connectors.
            connector_factory: Builds connectors from SCM descriptors.
        """
        self.settings = settings
        self.project_per_subfolder = settings.request.project_per_subfolder

        if self.project_per_subfolder:
            self.dependency_dirs = expand_subfolders(dependency_dirs)
        else:
            self.dependency_dirs = [Path(d) for d in dependency_dirs]

        self.workspace_manager = workspace_manager or WorkspaceManager(
            WorkspaceConfig(
                base_dir=settings.workspace.base_dir,
                prefix=settings.workspace.prefix,
            )
        )
        self.preparer = RepositoryPreparer(
            scm_settings=settings.scm,
            workspace_manager=self.workspace_manager,
            agent_error=settings.agent.error,
            installer=installer,
            git_operations=git_operations
            or GitOperations(
                retry_attempts=settings.git.retry_attempts,
                retry_delay=settings.git.retry_delay,
                verify_ssl=settings.git.verify_ssl,
            ),
            connector_factory=connector_factory,
            clone_depth=settings.git.default_depth,
        )
        self.dispatcher = dispatcher or ScanDispatcher(
            scan_package_manager=settings.agent.scan_package_manager
        )
        self.aggregator = ProjectAggregator(settings.request)
        self.stage = ResolutionStage.INIT

    def _transition(self, stage: ResolutionStage) -> None:
        logger.debug(f"Resolution stage: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def create_projects(self) -> ProjectsDetails:
        """Resolve the configured sources into projects.

        Returns:
            ProjectsDetails; failures are reported through its status code.
        """
        self.stage = ResolutionStage.INIT

        if self.project_per_subfolder:
            result = self._create_projects_per_subfolder()
        else:
            unit = self._resolve_unit(self.dependency_dirs)
            if unit.status_code == StatusCode.ERROR:
                result = unit
            else:
                self._transition(ResolutionStage.AGGREGATING)
                result = self.aggregator.assign_single_unit_identity(unit)

        self._transition(ResolutionStage.DONE)
        logger.info(
            f"Resolution finished with {result.status_code.name}: "
            f"{len(result.projects)} project(s)"
        )
        return result

    def _create_projects_per_subfolder(self) -> ProjectsDetails:
        projects: list[ProjectInfo] = []

        for directory in self.dependency_dirs:
            logger.info(f"Resolving project folder {directory}")
            unit = self._resolve_unit([directory])

            if unit.status_code != StatusCode.SUCCESS:
                logger.error(f"Stopping at {directory}: {unit.status_code.name} {unit.details}")
                return ProjectsDetails.failure_result(unit.status_code, unit.details)

            self._transition(ResolutionStage.AGGREGATING)
            project = self.aggregator.assign_subfolder_identity(unit, directory)
            if project is not None:
                projects.append(project)

        return ProjectsDetails.success_result(projects)

    def _resolve_unit(self, directories: Sequence[Path]) -> ProjectsDetails:
        """Prepare and scan one unit; its clones are deleted before returning."""
        self._transition(ResolutionStage.PREPARING)

        with CleanupCoordinator(self.workspace_manager) as cleanup:
            try:
                preparation = self.preparer.prepare(directories)
                cleanup.track(*preparation.scm_paths)
                if preparation.failed:
                    return ProjectsDetails.failure_result(StatusCode.ERROR, preparation.error or "")

                self._transition(ResolutionStage.DISPATCHING)
                projects = self.dispatcher.dispatch(
                    preparation.base_dirs,
                    preparation.has_scm_sources,
                )
                return ProjectsDetails.success_result(projects, status_code=preparation.status)
            except Exception as e:
                logger.error(f"Failed to resolve {', '.join(map(str, directories))}: {e}")
                cleanup.track(*(ws.path for ws in self.workspace_manager.workspaces.values()))
                return ProjectsDetails.failure_result(StatusCode.ERROR, str(e))
            finally:
                self._transition(ResolutionStage.CLEANING)
