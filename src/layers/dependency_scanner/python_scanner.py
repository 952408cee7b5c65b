"""Python dependency scanner for requirements files and pyproject.toml."""

import re
import tomllib
from pathlib import Path
from typing import Any

from src.layers.dependency_scanner.base_scanner import BaseDependencyScanner
from src.models.dependency import Dependency, Ecosystem

REQUIREMENT_PATTERN = re.compile(
    r"^(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)"
    r"(?:\[[^\]]*\])?"
    r"\s*(?P<version>(?:===|==|~=|!=|>=|<=|>|<)[^;]+)?"
)


class PythonScanner(BaseDependencyScanner):
    """Scanner for requirements*.txt and pyproject.toml (PEP 621 and Poetry)."""

    supported_files = ["requirements*.txt", "pyproject.toml"]
    ecosystem = Ecosystem.PYPI

    def can_scan(self, file_path: Path) -> bool:
        """Check if this scanner can handle the file."""
        name = file_path.name
        return name == "pyproject.toml" or (name.startswith("requirements") and name.endswith(".txt"))

    def scan(self, source_path: Path) -> list[Dependency]:
        """Scan for Python dependencies.

        Args:
            source_path: Directory to scan.

        Returns:
            List of Python dependencies.
        """
        dependencies: list[Dependency] = []
        for manifest in self.find_files(source_path):
            if manifest.name == "pyproject.toml":
                dependencies.extend(self._parse_pyproject_toml(manifest))
            else:
                dependencies.extend(self._parse_requirements_txt(manifest))

        self.logger.info(f"Found {len(dependencies)} Python dependencies in {source_path}")
        return dependencies

    def _parse_requirements_txt(self, file_path: Path) -> list[Dependency]:
        content = self._safe_read_file(file_path)
        if content is None:
            return []

        dependencies: list[Dependency] = []
        for raw_line in content.splitlines():
            line = raw_line.split(" #", 1)[0].strip()
            # options (-r, -e, --index-url) and bare URLs carry no name==version
            if not line or line.startswith(("#", "-", "http://", "https://")):
                continue
            dep = self._requirement_to_dependency(line, file_path)
            if dep is not None:
                dependencies.append(dep)
        return dependencies

    def _parse_pyproject_toml(self, file_path: Path) -> list[Dependency]:
        content = self._safe_read_file(file_path)
        if content is None:
            return []

        try:
            data = tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            self.logger.warning(f"Failed to parse {file_path}: {e}")
            return []

        dependencies: list[Dependency] = []
        project = data.get("project") or {}

        for requirement in project.get("dependencies") or []:
            dep = self._requirement_to_dependency(requirement, file_path)
            if dep is not None:
                dependencies.append(dep)

        for requirements in (project.get("optional-dependencies") or {}).values():
            for requirement in requirements:
                dep = self._requirement_to_dependency(requirement, file_path, is_optional=True)
                if dep is not None:
                    dependencies.append(dep)

        poetry = (data.get("tool") or {}).get("poetry") or {}
        for name, constraint in (poetry.get("dependencies") or {}).items():
            if name.lower() == "python":
                continue
            version = self._poetry_version(constraint)
            if version is None:
                continue
            dependencies.append(
                Dependency(
                    name=self._normalize_name(name),
                    version=version,
                    ecosystem=Ecosystem.PYPI,
                    source_file=str(file_path),
                )
            )

        return dependencies

    def _requirement_to_dependency(
        self, requirement: str, file_path: Path, is_optional: bool = False
    ) -> Dependency | None:
        match = REQUIREMENT_PATTERN.match(requirement.strip())
        if match is None or "@" in requirement.split(";")[0]:
            return None

        version = (match.group("version") or "*").strip()
        return Dependency(
            name=self._normalize_name(match.group("name")),
            version=version.lstrip("=") if version.startswith("==") else version,
            ecosystem=Ecosystem.PYPI,
            source_file=str(file_path),
            is_optional=is_optional,
        )

    def _poetry_version(self, constraint: Any) -> str | None:
        if isinstance(constraint, str):
            return constraint
        if isinstance(constraint, dict) and isinstance(constraint.get("version"), str):
            return constraint["version"]
        # path / git dependencies
        return None

    def _normalize_name(self, name: str) -> str:
        return re.sub(r"[-_.]+", "-", name).lower()
