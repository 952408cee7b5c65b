"""Scan prepared directories into a project."""

import os
from collections.abc import Sequence
from pathlib import Path

from src.core.logger.logger import get_logger
from src.layers.dependency_scanner.base_scanner import CompositeScanner
from src.models.dependency import Dependency
from src.models.project import ProjectInfo

logger = get_logger(__name__)


class FileSystemScanner:
    """Collects the dependencies of several base directories into one project."""

    def __init__(self, composite_scanner: CompositeScanner | None = None) -> None:
        self.composite_scanner = composite_scanner or CompositeScanner()

    def create_projects(self, base_dirs: Sequence[Path], has_scm_sources: bool) -> list[ProjectInfo]:
        """Scan every base directory.

        Args:
            base_dirs: Directories to scan; paths that are not directories are skipped.
            has_scm_sources: Whether some directories are transient clones. Source
                files are then reported relative to their base directory, since the
                clone location will not outlive the run.

        Returns:
            One project without identity, or an empty list when nothing could be scanned.
        """
        directories: list[Path] = []
        for base_dir in base_dirs:
            path = Path(base_dir)
            if path.is_dir():
                directories.append(path)
            else:
                logger.warning(f"Skipping {path}: not a directory")

        if not directories:
            logger.error("No directories to scan")
            return []

        dependencies: list[Dependency] = []
        seen: set[tuple[str, str, str, str]] = set()
        for directory in directories:
            result = self.composite_scanner.scan(directory)
            for error in result.errors:
                logger.error(f"{directory}: {error}")
            for dep in result.dependencies:
                if has_scm_sources:
                    dep = dep.model_copy(
                        update={"source_file": os.path.relpath(dep.source_file, directory)}
                    )
                key = (*dep.key, dep.source_file)
                if key not in seen:
                    seen.add(key)
                    dependencies.append(dep)

        logger.info(f"Resolved {len(dependencies)} dependencies from {len(directories)} directories")
        return [
            ProjectInfo(
                dependencies=dependencies,
                base_dirs=[str(d) for d in directories],
            )
        ]
