"""Go dependency scanner for go.mod files."""

import re
from pathlib import Path

from src.layers.dependency_scanner.base_scanner import BaseDependencyScanner
from src.models.dependency import Dependency, Ecosystem

# module/path v1.2.3 // indirect
REQUIRE_PATTERN = re.compile(r"^(?P<path>\S+)\s+(?P<version>v\S+)(?:\s*//\s*(?P<comment>.*))?$")


class GoScanner(BaseDependencyScanner):
    """Scanner for go.mod require directives."""

    supported_files = ["go.mod"]
    ecosystem = Ecosystem.GO

    def scan(self, source_path: Path) -> list[Dependency]:
        """Scan for Go dependencies.

        Args:
            source_path: Directory to scan.

        Returns:
            List of Go dependencies.
        """
        dependencies: list[Dependency] = []
        for go_mod in self.find_files(source_path):
            dependencies.extend(self._parse_go_mod(go_mod))

        self.logger.info(f"Found {len(dependencies)} Go dependencies in {source_path}")
        return dependencies

    def _parse_go_mod(self, file_path: Path) -> list[Dependency]:
        content = self._safe_read_file(file_path)
        if content is None:
            return []

        dependencies: list[Dependency] = []
        in_require_block = False

        for line in content.splitlines():
            stripped = line.strip()
            if stripped.startswith("require ("):
                in_require_block = True
                continue
            if in_require_block and stripped == ")":
                in_require_block = False
                continue

            if in_require_block:
                entry = stripped
            elif stripped.startswith("require "):
                entry = stripped[len("require ") :].strip()
            else:
                continue

            match = REQUIRE_PATTERN.match(entry)
            if match is None:
                continue

            comment = match.group("comment") or ""
            dependencies.append(
                Dependency(
                    name=match.group("path"),
                    version=match.group("version"),
                    ecosystem=Ecosystem.GO,
                    source_file=str(file_path),
                    is_direct="indirect" not in comment,
                )
            )

        return dependencies
