"""Turn configured source locations into directories ready for scanning."""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from pathlib import Path

from src.core.config.settings import ScmSettings
from src.core.exceptions.errors import DepResolveError
from src.core.logger.logger import get_logger
from src.layers.acquisition.git_operations import GitOperations
from src.layers.acquisition.repositories_parser import parse_repositories_file
from src.layers.acquisition.scm_connector import GitConnector, create_connector
from src.layers.acquisition.workspace import WorkspaceManager
from src.layers.preparation.installer import CommandLineInstaller
from src.models.project import StatusCode
from src.models.scm import ScmConfiguration

logger = get_logger(__name__)

PACKAGE_JSON = "package.json"
PACKAGE_LOCK = "package-lock.json"

ConnectorFactory = Callable[..., GitConnector | None]


@dataclass(frozen=True)
class PreparedRepository:
    """One cloned repository after its prep step."""

    connector: GitConnector
    path: Path
    status: StatusCode = StatusCode.SUCCESS


@dataclass(frozen=True)
class PreparationResult:
    """Directories to scan plus the clones that must be deleted afterwards.

    Attributes:
        base_dirs: Local directories followed by clone directories.
        scm_paths: Transient clone directories.
        has_scm_sources: Whether at least one repository was cloned.
        status: Folded status of all prep steps.
        error: Fatal error message; set only together with StatusCode.ERROR.
    """

    base_dirs: tuple[Path, ...]
    scm_paths: tuple[Path, ...] = ()
    has_scm_sources: bool = False
    status: StatusCode = StatusCode.SUCCESS
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Whether preparation hit a fatal error."""
        return self.error is not None


def fold_status(repositories: Iterable[PreparedRepository]) -> StatusCode:
    """Combine per-repository statuses; the last non-success status wins."""
    return reduce(
        lambda current, repo: repo.status if repo.status != StatusCode.SUCCESS else current,
        repositories,
        StatusCode.SUCCESS,
    )


class RepositoryPreparer:
    """Clones configured repositories and runs their prep step."""

    def __init__(
        self,
        scm_settings: ScmSettings,
        workspace_manager: WorkspaceManager,
        agent_error: str | None = None,
        installer: CommandLineInstaller | None = None,
        git_operations: GitOperations | None = None,
        connector_factory: ConnectorFactory = create_connector,
        clone_depth: int = 0,
    ) -> None:
        """Initialize the preparer.

        Args:
            scm_settings: Inline SCM descriptor and install options.
            workspace_manager: Owner of clone directories.
            agent_error: Pre-existing error that aborts preparation after connecting.
            installer: Installer used for the prep step.
            git_operations: Git operations shared by all connectors.
            connector_factory: Builds a connector from a descriptor.
            clone_depth: Clone depth (0 = full clone).
        """
        self.scm_settings = scm_settings
        self.workspace_manager = workspace_manager
        self.agent_error = agent_error
        self.installer = installer or CommandLineInstaller()
        self.git_operations = git_operations
        self.connector_factory = connector_factory
        self.clone_depth = clone_depth

    def load_descriptors(self) -> list[ScmConfiguration]:
        """Descriptors from the repositories file, or the inline one.

        Raises:
            ConfigurationError: If the repositories file cannot be parsed.
        """
        scm = self.scm_settings
        if scm.repositories_file:
            return parse_repositories_file(
                scm.repositories_file,
                scm_type=scm.type,
                ppk=scm.ppk,
                user=scm.user,
                password=scm.password,
            )

        if not (scm.url or "").strip():
            return []

        return [
            ScmConfiguration(
                type=scm.type,
                url=scm.url,
                user=scm.user,
                password=scm.password,
                ppk=scm.ppk,
                branch=scm.branch,
                tag=scm.tag,
            )
        ]

    def _create_connectors(self, descriptors: Sequence[ScmConfiguration]) -> list[GitConnector]:
        connectors: list[GitConnector] = []
        for descriptor in descriptors:
            connector = self.connector_factory(
                descriptor,
                self.workspace_manager,
                git_operations=self.git_operations,
                depth=self.clone_depth,
            )
            if connector is None:
                logger.warning(f"No connector for repository {descriptor.url!r}, skipping")
                continue
            connectors.append(connector)
        return connectors

    def prepare(self, base_dirs: Sequence[Path]) -> PreparationResult:
        """Clone and prepare every configured repository.

        Args:
            base_dirs: Local directories to scan.

        Returns:
            PreparationResult. On a fatal error every clone is already deleted.
        """
        local_dirs = tuple(Path(d) for d in base_dirs)
        errors: list[str] = []

        try:
            descriptors = self.load_descriptors()
        except DepResolveError as e:
            logger.error(str(e))
            errors.append(e.message)
            descriptors = []

        connectors = self._create_connectors(descriptors)
        if not connectors and not errors and not self.agent_error:
            return PreparationResult(base_dirs=local_dirs)

        cloned: list[tuple[GitConnector, Path]] = []
        for connector in connectors:
            try:
                cloned.append((connector, connector.clone_repository()))
            except DepResolveError as e:
                logger.error(f"Failed to connect to {connector.url}: {e}")
                errors.append(e.message)

        prepared: list[PreparedRepository] = []
        if not errors and not self.agent_error:
            for connector, path in cloned:
                try:
                    prepared.append(self._prepare_repository(connector, path))
                except DepResolveError as e:
                    logger.error(f"Failed to re-clone {connector.url}: {e}")
                    errors.append(e.message)

        error = self.agent_error or "; ".join(errors)
        if error:
            logger.error(f"Aborting resolution: {error}")
            for connector in connectors:
                connector.delete_clone_directory()
            return PreparationResult(
                base_dirs=local_dirs,
                has_scm_sources=bool(cloned),
                status=StatusCode.ERROR,
                error=error,
            )

        scm_paths = tuple(repo.path for repo in prepared)
        return PreparationResult(
            base_dirs=local_dirs + scm_paths,
            scm_paths=scm_paths,
            has_scm_sources=bool(scm_paths),
            status=fold_status(prepared),
        )

    def _prepare_repository(self, connector: GitConnector, path: Path) -> PreparedRepository:
        """Run ``npm install`` on a clone; re-clone it when the install fails.

        Raises:
            DepResolveError: If the re-clone fails.
        """
        package_json = path / PACKAGE_JSON
        if not self.scm_settings.npm_install or not package_json.is_file():
            return PreparedRepository(connector=connector, path=path)

        package_lock = path / PACKAGE_LOCK
        if package_lock.exists():
            package_lock.unlink()

        logger.info(f"Found {PACKAGE_JSON}, executing 'npm install' on {connector.url}")
        result = self.installer.run(path, self.scm_settings.npm_install_timeout_minutes)
        if not result.failed:
            return PreparedRepository(connector=connector, path=path)

        if result.started:
            logger.error(f"Failed to run 'npm install' on {connector.url}: {result.error_message}")
        else:
            logger.error(f"Failed to start 'npm install' on {connector.url}: {result.error_message}")

        # The tree may hold a partial node_modules; scan a pristine clone instead
        connector.delete_clone_directory()
        fresh_path = connector.clone_repository()
        return PreparedRepository(
            connector=connector,
            path=fresh_path,
            status=StatusCode.PREP_STEP_FAILURE,
        )
