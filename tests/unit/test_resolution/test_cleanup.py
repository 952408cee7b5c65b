"""Tests for CleanupCoordinator."""

from pathlib import Path
from unittest.mock import patch

import pytest

from src.layers.acquisition.workspace import WorkspaceManager
from src.layers.resolution.cleanup import CleanupCoordinator


def _make_dirs(root: Path, *names: str) -> list[Path]:
    paths = []
    for name in names:
        path = root / name
        path.mkdir(parents=True)
        (path / "file.txt").write_text("x")
        paths.append(path)
    return paths


class TestCleanupCoordinator:
    """Tests for CleanupCoordinator."""

    def test_deletes_tracked_dirs(self, temp_dir: Path) -> None:
        """Test every tracked directory is removed."""
        paths = _make_dirs(temp_dir, "a", "b")
        coordinator = CleanupCoordinator()
        coordinator.track(*paths)

        assert coordinator.cleanup() == 2
        assert not any(p.exists() for p in paths)
        assert coordinator.pending == []
        assert coordinator.deleted == paths

    def test_each_path_deleted_once(self, temp_dir: Path) -> None:
        """Test repeated tracking and repeated cleanup delete once."""
        [path] = _make_dirs(temp_dir, "a")
        coordinator = CleanupCoordinator()

        with patch("src.layers.resolution.cleanup.shutil.rmtree") as mock_rmtree:
            coordinator.track(path, path)
            coordinator.cleanup()
            coordinator.track(path)
            coordinator.cleanup()

        mock_rmtree.assert_called_once_with(path)

    def test_context_manager_cleans_on_error(self, temp_dir: Path) -> None:
        """Test deletion still happens when the body raises."""
        [path] = _make_dirs(temp_dir, "clone")

        with pytest.raises(RuntimeError):
            with CleanupCoordinator() as coordinator:
                coordinator.track(path)
                raise RuntimeError("scanner failed")

        assert not path.exists()

    def test_missing_dir_ignored(self, temp_dir: Path) -> None:
        """Test an already removed directory is not an error."""
        coordinator = CleanupCoordinator()
        coordinator.track(temp_dir / "gone")

        assert coordinator.cleanup() == 1

    def test_failure_swallowed(self, temp_dir: Path) -> None:
        """Test deletion errors are logged, not raised."""
        paths = _make_dirs(temp_dir, "a", "b")
        coordinator = CleanupCoordinator()
        coordinator.track(*paths)

        with patch(
            "src.layers.resolution.cleanup.shutil.rmtree",
            side_effect=[PermissionError("busy"), None],
        ) as mock_rmtree:
            assert coordinator.cleanup() == 2

        assert mock_rmtree.call_count == 2

    def test_releases_through_workspace_manager(
        self, workspace_manager: WorkspaceManager
    ) -> None:
        """Test managed clone directories are released through the manager."""
        workspace = workspace_manager.create()
        coordinator = CleanupCoordinator(workspace_manager)
        coordinator.track(workspace.path)

        coordinator.cleanup()

        assert not workspace.path.exists()
        assert workspace.name not in workspace_manager.workspaces
