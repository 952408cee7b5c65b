"""Resolution: orchestrate preparation, scanning, identity and cleanup."""

from src.layers.resolution.agent import FileSystemAgent, ResolutionStage, expand_subfolders
from src.layers.resolution.aggregator import ProjectAggregator
from src.layers.resolution.cleanup import CleanupCoordinator
from src.layers.resolution.dispatcher import ScanDispatcher

__all__ = [
    "CleanupCoordinator",
    "FileSystemAgent",
    "ProjectAggregator",
    "ResolutionStage",
    "ScanDispatcher",
    "expand_subfolders",
]
