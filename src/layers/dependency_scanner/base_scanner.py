"""Base dependency scanner and the composite that runs all of them."""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from src.core.exceptions.errors import ScanError
from src.core.logger.logger import get_logger
from src.models.dependency import Dependency, Ecosystem

SKIP_DIRS = frozenset(
    {
        "node_modules",
        "venv",
        ".venv",
        "env",
        "__pycache__",
        ".git",
        "dist",
        "build",
        "target",
        "vendor",
    }
)


class ScanResult(BaseModel):
    """Dependencies found under one directory."""

    source_path: str = Field(..., description="Scanned directory")
    dependencies: list[Dependency] = Field(default_factory=list)
    files_scanned: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    def add_dependencies(self, dependencies: list[Dependency]) -> None:
        """Add dependencies, dropping exact duplicates."""
        seen = {dep.key for dep in self.dependencies}
        for dep in dependencies:
            if dep.key not in seen:
                seen.add(dep.key)
                self.dependencies.append(dep)


class BaseDependencyScanner(ABC):
    """Base class for manifest scanners."""

    supported_files: list[str] = []
    ecosystem: Ecosystem

    def __init__(self) -> None:
        """Initialize the scanner."""
        self.logger = get_logger(self.__class__.__name__)

    def can_scan(self, file_path: Path) -> bool:
        """Check if this scanner can handle the file."""
        return file_path.name in self.supported_files

    @abstractmethod
    def scan(self, source_path: Path) -> list[Dependency]:
        """Scan for dependencies.

        Args:
            source_path: Directory to scan.

        Returns:
            List of found dependencies.
        """

    def find_files(self, source_path: Path) -> list[Path]:
        """Find supported manifests under ``source_path``, skipping vendored trees."""
        found: list[Path] = []
        for pattern in self.supported_files:
            for file_path in sorted(source_path.rglob(pattern)):
                if self._should_skip_path(file_path.relative_to(source_path)):
                    continue
                if file_path not in found:
                    found.append(file_path)
        return found

    def _should_skip_path(self, path: Path) -> bool:
        return any(part in SKIP_DIRS for part in path.parts)

    def _safe_read_file(self, file_path: Path) -> str | None:
        try:
            return file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"Failed to read {file_path}: {e}")
            return None

    def _safe_read_json(self, file_path: Path) -> dict[str, Any] | None:
        content = self._safe_read_file(file_path)
        if content is None:
            return None

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self.logger.warning(f"Failed to parse JSON {file_path}: {e}")
            return None
        return data if isinstance(data, dict) else None


class CompositeScanner:
    """Runs every manifest scanner over a directory."""

    def __init__(self, scanners: list[BaseDependencyScanner] | None = None) -> None:
        """Initialize composite scanner.

        Args:
            scanners: Scanners to run. Defaults to npm, Python and Go.
        """
        if scanners is None:
            from src.layers.dependency_scanner.go_scanner import GoScanner
            from src.layers.dependency_scanner.npm_scanner import NpmScanner
            from src.layers.dependency_scanner.python_scanner import PythonScanner

            scanners = [NpmScanner(), PythonScanner(), GoScanner()]

        self.scanners = scanners
        self.logger = get_logger(__name__)

    def scan(self, source_path: Path) -> ScanResult:
        """Scan a directory with all scanners.

        A failing scanner is logged and recorded in ``errors``; the others still run.

        Args:
            source_path: Directory to scan.

        Returns:
            Combined scan result.

        Raises:
            ScanError: If source_path is not a directory.
        """
        if not source_path.is_dir():
            raise ScanError(f"Not a directory: {source_path}", details={"path": str(source_path)})

        result = ScanResult(source_path=str(source_path))
        self.logger.info(f"Scanning dependencies in {source_path}")

        for scanner in self.scanners:
            name = scanner.__class__.__name__
            try:
                files = scanner.find_files(source_path)
                if not files:
                    continue
                self.logger.debug(f"{name} found {len(files)} files")
                result.files_scanned.extend(str(f) for f in files)
                result.add_dependencies(scanner.scan(source_path))
            except Exception as e:
                self.logger.error(f"Scanner {name} failed: {e}")
                result.errors.append(f"{name}: {e}")

        self.logger.info(
            f"Scan complete: {len(result.dependencies)} dependencies from "
            f"{len(result.files_scanned)} files"
        )
        return result
