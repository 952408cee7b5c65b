"""npm dependency scanner for package.json, package-lock.json and node_modules."""

from pathlib import Path
from typing import Any

from src.layers.dependency_scanner.base_scanner import BaseDependencyScanner
from src.models.dependency import Dependency, Ecosystem

LOCAL_PREFIXES = ("file:", "link:", "workspace:", "git+file:", "./", "../")


class NpmScanner(BaseDependencyScanner):
    """Scanner for npm projects.

    Declared dependencies come from package.json. Resolved versions come from
    package-lock.json when present, otherwise from an installed node_modules
    tree (what ``npm install`` leaves behind in a prepared clone).
    """

    supported_files = ["package.json", "package-lock.json"]
    ecosystem = Ecosystem.NPM

    def scan(self, source_path: Path) -> list[Dependency]:
        """Scan for npm dependencies.

        Args:
            source_path: Directory to scan.

        Returns:
            List of npm dependencies.
        """
        dependencies: list[Dependency] = []

        for manifest in self.find_files(source_path):
            if manifest.name == "package.json":
                dependencies.extend(self._parse_package_json(manifest))
                lock_file = manifest.with_name("package-lock.json")
                if not lock_file.exists():
                    dependencies.extend(self._parse_node_modules(manifest.parent / "node_modules"))
            else:
                dependencies.extend(self._parse_package_lock(manifest))

        self.logger.info(f"Found {len(dependencies)} npm dependencies in {source_path}")
        return dependencies

    def _parse_package_json(self, file_path: Path) -> list[Dependency]:
        data = self._safe_read_json(file_path)
        if data is None:
            return []

        dependencies: list[Dependency] = []
        sections = [
            ("dependencies", False, False),
            ("devDependencies", True, False),
            ("optionalDependencies", False, True),
        ]
        for section, is_dev, is_optional in sections:
            entries = data.get(section) or {}
            if not isinstance(entries, dict):
                continue
            for name, version in entries.items():
                if not isinstance(version, str) or version.startswith(LOCAL_PREFIXES):
                    continue
                dependencies.append(
                    Dependency(
                        name=name,
                        version=self._clean_version(version),
                        ecosystem=Ecosystem.NPM,
                        source_file=str(file_path),
                        is_direct=True,
                        is_dev=is_dev,
                        is_optional=is_optional,
                    )
                )
        return dependencies

    def _parse_package_lock(self, file_path: Path) -> list[Dependency]:
        data = self._safe_read_json(file_path)
        if data is None:
            return []

        if data.get("lockfileVersion", 1) >= 2:
            packages: dict[str, Any] = data.get("packages") or {}
            entries = (
                (pkg_path.split("node_modules/")[-1], info)
                for pkg_path, info in packages.items()
                if pkg_path
            )
        else:
            entries = self._walk_v1_dependencies(data.get("dependencies") or {})

        dependencies: list[Dependency] = []
        for name, info in entries:
            version = info.get("version")
            if not version or info.get("link"):
                continue
            dependencies.append(
                Dependency(
                    name=name,
                    version=version,
                    ecosystem=Ecosystem.NPM,
                    source_file=str(file_path),
                    is_direct=False,
                    is_dev=bool(info.get("dev", False)),
                    is_optional=bool(info.get("optional", False)),
                )
            )
        return dependencies

    def _walk_v1_dependencies(self, entries: dict[str, Any]):
        for name, info in entries.items():
            yield name, info
            yield from self._walk_v1_dependencies(info.get("dependencies") or {})

    def _parse_node_modules(self, node_modules: Path) -> list[Dependency]:
        if not node_modules.is_dir():
            return []

        manifests = list(node_modules.glob("*/package.json")) + list(
            node_modules.glob("@*/*/package.json")
        )
        dependencies: list[Dependency] = []
        for manifest in sorted(manifests):
            data = self._safe_read_json(manifest)
            if not data or not data.get("name") or not data.get("version"):
                continue
            dependencies.append(
                Dependency(
                    name=data["name"],
                    version=data["version"],
                    ecosystem=Ecosystem.NPM,
                    source_file=str(manifest),
                    is_direct=False,
                )
            )
        return dependencies

    def _clean_version(self, version: str) -> str:
        """Reduce a version range to its first concrete version."""
        cleaned = version.split("||")[0].strip()
        cleaned = cleaned.split()[0] if cleaned else cleaned
        return cleaned.lstrip("^~>=<") or "*"
