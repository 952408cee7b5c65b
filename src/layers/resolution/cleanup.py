"""Removal of transient clone directories."""

import shutil
from pathlib import Path

from src.core.logger.logger import get_logger
from src.layers.acquisition.workspace import WorkspaceManager

logger = get_logger(__name__)


class CleanupCoordinator:
    """Deletes tracked clone directories exactly once.

    Used as a context manager around dispatch, so deletion also happens when
    the scanner raises. Deletion failures are logged and never raised.
    """

    def __init__(self, workspace_manager: WorkspaceManager | None = None) -> None:
        """Initialize the coordinator.

        Args:
            workspace_manager: Manager owning the clone directories, released
                through it so its registry stays in sync.
        """
        self.workspace_manager = workspace_manager
        self._pending: list[Path] = []
        self._deleted: list[Path] = []

    @property
    def pending(self) -> list[Path]:
        """Directories still waiting for deletion."""
        return list(self._pending)

    @property
    def deleted(self) -> list[Path]:
        """Directories already processed."""
        return list(self._deleted)

    def track(self, *paths: Path) -> None:
        """Register directories for deletion; repeated paths are tracked once."""
        for path in paths:
            path = Path(path)
            if path not in self._pending and path not in self._deleted:
                self._pending.append(path)

    def _delete(self, path: Path) -> None:
        if self.workspace_manager is not None:
            workspace = self.workspace_manager.find_by_path(path)
            if workspace is not None:
                self.workspace_manager.cleanup(workspace.name)
                return

        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to delete {path}: {e}")

    def cleanup(self) -> int:
        """Delete every pending directory.

        Returns:
            Number of directories processed.
        """
        processed = 0
        while self._pending:
            path = self._pending.pop(0)
            self._deleted.append(path)
            self._delete(path)
            processed += 1
        if processed:
            logger.debug(f"Deleted {processed} transient directories")
        return processed

    def __enter__(self) -> "CleanupCoordinator":
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Delete pending directories."""
        self.cleanup()
