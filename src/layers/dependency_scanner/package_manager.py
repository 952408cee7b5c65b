"""List packages installed by the operating system's package manager."""

import re
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass

from src.core.logger.logger import get_logger
from src.models.dependency import Dependency, Ecosystem
from src.models.project import ProjectInfo

logger = get_logger(__name__)

APK_PACKAGE_PATTERN = re.compile(r"^(?P<name>.+)-(?P<version>[^-]+-r\d+)$")
COMMAND_TIMEOUT_SECONDS = 120


def _parse_tab_separated(output: str) -> list[tuple[str, str]]:
    packages = []
    for line in output.splitlines():
        name, _, version = line.partition("\t")
        if name.strip() and version.strip():
            packages.append((name.strip(), version.strip()))
    return packages


def _parse_apk(output: str) -> list[tuple[str, str]]:
    packages = []
    for line in output.splitlines():
        match = APK_PACKAGE_PATTERN.match(line.strip())
        if match:
            packages.append((match.group("name"), match.group("version")))
    return packages


@dataclass(frozen=True)
class PackageManagerCommand:
    """A package listing command and how to read its output."""

    ecosystem: Ecosystem
    command: tuple[str, ...]
    parse: Callable[[str], list[tuple[str, str]]]


PACKAGE_MANAGERS: tuple[PackageManagerCommand, ...] = (
    PackageManagerCommand(
        Ecosystem.DEBIAN,
        ("dpkg-query", "-W", "-f", "${Package}\t${Version}\n"),
        _parse_tab_separated,
    ),
    PackageManagerCommand(
        Ecosystem.RPM,
        ("rpm", "-qa", "--qf", "%{NAME}\t%{VERSION}-%{RELEASE}\n"),
        _parse_tab_separated,
    ),
    PackageManagerCommand(Ecosystem.ALPINE, ("apk", "info", "-v"), _parse_apk),
)


class PackageManagerExtractor:
    """Builds a project from the packages installed on this machine."""

    def __init__(self, package_managers: tuple[PackageManagerCommand, ...] = PACKAGE_MANAGERS) -> None:
        self.package_managers = package_managers

    def create_projects(self) -> list[ProjectInfo]:
        """List installed packages with the first available package manager.

        Returns:
            One project, or an empty list when no package manager is available
            or its listing fails.
        """
        for manager in self.package_managers:
            executable = shutil.which(manager.command[0])
            if executable is None:
                continue

            logger.info(f"Listing installed packages with {manager.command[0]}")
            try:
                completed = subprocess.run(
                    [executable, *manager.command[1:]],
                    capture_output=True,
                    text=True,
                    timeout=COMMAND_TIMEOUT_SECONDS,
                    check=True,
                )
            except (OSError, subprocess.SubprocessError) as e:
                logger.error(f"Failed to list packages with {manager.command[0]}: {e}")
                return []

            dependencies = [
                Dependency(
                    name=name,
                    version=version,
                    ecosystem=manager.ecosystem,
                    source_file=manager.command[0],
                )
                for name, version in manager.parse(completed.stdout)
            ]
            logger.info(f"Found {len(dependencies)} installed {manager.ecosystem.value} packages")
            return [ProjectInfo(dependencies=dependencies)]

        logger.error("No supported package manager found (dpkg, rpm, apk)")
        return []
