"""Temporary directories that hold repository clones."""

import shutil
import tempfile
import uuid
from pathlib import Path

from src.core.config.settings import get_settings
from src.core.exceptions.errors import WorkspaceError
from src.core.logger.logger import get_logger
from src.models.workspace import WorkspaceConfig, WorkspaceInfo, WorkspaceStatus

logger = get_logger(__name__)


class WorkspaceManager:
    """Creates and removes clone workspaces."""

    def __init__(self, config: WorkspaceConfig | None = None) -> None:
        """Initialize the workspace manager.

        Args:
            config: Workspace configuration. Uses global settings if not provided.
        """
        if config is None:
            settings = get_settings()
            config = WorkspaceConfig(
                base_dir=settings.workspace.base_dir,
                prefix=settings.workspace.prefix,
            )

        self.config = config
        self._workspaces: dict[str, WorkspaceInfo] = {}

    @property
    def active_count(self) -> int:
        """Return count of active workspaces."""
        return sum(1 for ws in self._workspaces.values() if ws.status == WorkspaceStatus.ACTIVE)

    @property
    def workspaces(self) -> dict[str, WorkspaceInfo]:
        """Return all workspace info."""
        return self._workspaces.copy()

    def _get_base_dir(self) -> Path:
        if self.config.base_dir:
            self.config.base_dir.mkdir(parents=True, exist_ok=True)
            return self.config.base_dir
        return Path(tempfile.gettempdir())

    def create(self, repo_url: str | None = None, name: str | None = None) -> WorkspaceInfo:
        """Create a new, empty workspace directory.

        Args:
            repo_url: Repository that will be cloned into the workspace.
            name: Optional workspace name. Auto-generated if not provided.

        Returns:
            WorkspaceInfo for the created workspace.

        Raises:
            WorkspaceError: If the name is taken or the directory cannot be created.
        """
        workspace_name = name or f"{self.config.prefix}{uuid.uuid4().hex[:8]}"
        if workspace_name in self._workspaces:
            raise WorkspaceError(
                f"Workspace already exists: {workspace_name}",
                workspace_name=workspace_name,
            )

        workspace_path = self._get_base_dir() / workspace_name
        try:
            workspace_path.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise WorkspaceError(
                f"Failed to create workspace directory: {workspace_path}",
                workspace_name=workspace_name,
                workspace_path=str(workspace_path),
                details={"error": str(e)},
            ) from e

        info = WorkspaceInfo(name=workspace_name, path=workspace_path, repo_url=repo_url)
        self._workspaces[workspace_name] = info
        logger.debug(f"Created workspace {workspace_name} at {workspace_path}")
        return info

    def find_by_path(self, path: Path) -> WorkspaceInfo | None:
        """Find the workspace whose directory is ``path``."""
        resolved = Path(path).resolve()
        for info in self._workspaces.values():
            if info.path.resolve() == resolved:
                return info
        return None

    def cleanup(self, name: str) -> bool:
        """Remove a workspace directory and forget the workspace.

        A directory that cannot be removed is logged and the workspace is still
        marked disposed.

        Args:
            name: Workspace name to clean up.

        Returns:
            True if the directory is gone.

        Raises:
            WorkspaceError: If the workspace is unknown.
        """
        info = self._workspaces.get(name)
        if info is None:
            raise WorkspaceError(f"Workspace not found: {name}", workspace_name=name)

        info.mark_cleanup()
        removed = True
        try:
            if info.path.exists():
                shutil.rmtree(info.path)
        except OSError as e:
            removed = False
            logger.warning(f"Failed to remove workspace directory: {info.path} - {e}")
        finally:
            info.mark_disposed()
            del self._workspaces[name]

        logger.debug(f"Cleaned up workspace: {name}")
        return removed
