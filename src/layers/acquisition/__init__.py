"""Repository acquisition: cloning and clone workspaces."""

from src.layers.acquisition.git_operations import GitOperations
from src.layers.acquisition.repositories_parser import parse_repositories_file
from src.layers.acquisition.scm_connector import GitConnector, authenticated_url, create_connector
from src.layers.acquisition.workspace import WorkspaceManager

__all__ = [
    "GitConnector",
    "GitOperations",
    "WorkspaceManager",
    "authenticated_url",
    "create_connector",
    "parse_repositories_file",
]
