"""Repository preparation: clone, install, recover."""

from src.layers.preparation.installer import CommandLineInstaller, InstallResult
from src.layers.preparation.preparer import (
    PreparationResult,
    PreparedRepository,
    RepositoryPreparer,
    fold_status,
)

__all__ = [
    "CommandLineInstaller",
    "InstallResult",
    "PreparationResult",
    "PreparedRepository",
    "RepositoryPreparer",
    "fold_status",
]
