"""Tests for ScanDispatcher."""

from pathlib import Path
from unittest.mock import MagicMock

from src.layers.dependency_scanner.file_system_scanner import FileSystemScanner
from src.layers.dependency_scanner.package_manager import PackageManagerExtractor
from src.layers.resolution.dispatcher import ScanDispatcher
from src.models.project import ProjectInfo


class TestScanDispatcher:
    """Tests for ScanDispatcher.dispatch."""

    def test_directories_scanned(self) -> None:
        """Test directory scanning by default."""
        scanner = MagicMock(spec=FileSystemScanner)
        scanner.create_projects.return_value = [ProjectInfo()]
        extractor = MagicMock(spec=PackageManagerExtractor)
        dispatcher = ScanDispatcher(scanner=scanner, package_manager_extractor=extractor)

        projects = dispatcher.dispatch((Path("/a"), Path("/b")), has_scm_sources=True)

        assert projects == [ProjectInfo()]
        scanner.create_projects.assert_called_once_with([Path("/a"), Path("/b")], True)
        extractor.create_projects.assert_not_called()

    def test_package_manager(self) -> None:
        """Test package manager listing replaces directory scanning."""
        scanner = MagicMock(spec=FileSystemScanner)
        extractor = MagicMock(spec=PackageManagerExtractor)
        extractor.create_projects.return_value = []
        dispatcher = ScanDispatcher(
            scan_package_manager=True,
            scanner=scanner,
            package_manager_extractor=extractor,
        )

        assert dispatcher.dispatch([Path("/a")], has_scm_sources=False) == []
        extractor.create_projects.assert_called_once_with()
        scanner.create_projects.assert_not_called()
