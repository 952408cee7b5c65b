"""Run package-manager install commands inside a repository clone."""

import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.core.exceptions.errors import InstallError
from src.core.logger.logger import get_logger

logger = get_logger(__name__)

NPM_INSTALL_COMMAND = ["npm", "install"]


@dataclass(frozen=True)
class InstallResult:
    """Result of an install invocation.

    Attributes:
        started: Whether the process could be started at all.
        error_in_process: Whether the process exited non-zero or timed out.
        timed_out: Whether the process was killed on timeout.
        return_code: Exit code, when the process finished.
        duration_seconds: Wall time of the invocation.
        error_message: Short description of the failure.
    """

    started: bool
    error_in_process: bool = False
    timed_out: bool = False
    return_code: int | None = None
    duration_seconds: float = 0.0
    error_message: str | None = None

    @property
    def failed(self) -> bool:
        """Whether the install should be treated as a failure."""
        return not self.started or self.error_in_process

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            "started": self.started,
            "error_in_process": self.error_in_process,
            "timed_out": self.timed_out,
            "return_code": self.return_code,
            "duration_seconds": self.duration_seconds,
            "error_message": self.error_message,
        }


class CommandLineInstaller:
    """Runs an install command (``npm install`` by default) with a timeout."""

    def __init__(self, command: list[str] | None = None) -> None:
        """Initialize the installer.

        Args:
            command: Command and arguments. The executable is looked up on PATH,
                which also resolves ``npm.cmd`` on Windows.
        """
        self.command = list(command or NPM_INSTALL_COMMAND)

    def resolve_command(self) -> list[str]:
        """Resolve the executable to an absolute path.

        Raises:
            InstallError: If the executable is not on PATH.
        """
        executable = shutil.which(self.command[0])
        if executable is None:
            raise InstallError(f"Executable not found: {self.command[0]}", command=self.command)
        return [executable, *self.command[1:]]

    def run(self, path: Path, timeout_minutes: int) -> InstallResult:
        """Run the install command in ``path``.

        Args:
            path: Working directory.
            timeout_minutes: Kill the process after this many minutes.

        Returns:
            InstallResult; never raises for process failures.
        """
        start_time = time.monotonic()

        try:
            command = self.resolve_command()
            completed = subprocess.run(
                command,
                cwd=path,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                timeout=timeout_minutes * 60,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return InstallResult(
                started=True,
                error_in_process=True,
                timed_out=True,
                duration_seconds=time.monotonic() - start_time,
                error_message=f"Timed out after {timeout_minutes} minutes",
            )
        except (InstallError, OSError) as e:
            return InstallResult(
                started=False,
                duration_seconds=time.monotonic() - start_time,
                error_message=str(e),
            )

        error_message = None
        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace") if completed.stderr else ""
            error_message = stderr.strip()[-500:] or f"Exited with code {completed.returncode}"

        result = InstallResult(
            started=True,
            error_in_process=completed.returncode != 0,
            return_code=completed.returncode,
            duration_seconds=time.monotonic() - start_time,
            error_message=error_message,
        )
        logger.debug(f"Install finished in {path}: {result.to_dict()}")
        return result
