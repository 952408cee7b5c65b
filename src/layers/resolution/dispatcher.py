"""Dispatch prepared directories to the dependency scanner."""

from collections.abc import Sequence
from pathlib import Path

from src.core.logger.logger import get_logger
from src.layers.dependency_scanner.file_system_scanner import FileSystemScanner
from src.layers.dependency_scanner.package_manager import PackageManagerExtractor
from src.models.project import ProjectInfo

logger = get_logger(__name__)


class ScanDispatcher:
    """Chooses between directory scanning and installed-package listing."""

    def __init__(
        self,
        scan_package_manager: bool = False,
        scanner: FileSystemScanner | None = None,
        package_manager_extractor: PackageManagerExtractor | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            scan_package_manager: List installed OS packages instead of scanning
                directories.
            scanner: Directory scanner.
            package_manager_extractor: Installed-package lister.
        """
        self.scan_package_manager = scan_package_manager
        self.scanner = scanner or FileSystemScanner()
        self.package_manager_extractor = package_manager_extractor or PackageManagerExtractor()

    def dispatch(self, base_dirs: Sequence[Path], has_scm_sources: bool) -> list[ProjectInfo]:
        """Produce raw projects for the prepared directories.

        Args:
            base_dirs: Prepared directories.
            has_scm_sources: Whether some directories are clones.

        Returns:
            Raw projects, possibly empty.
        """
        if self.scan_package_manager:
            logger.debug("Scanning package manager instead of directories")
            return self.package_manager_extractor.create_projects()

        return self.scanner.create_projects(list(base_dirs), has_scm_sources)
