"""Connectors that clone remote repositories into transient workspaces."""

from pathlib import Path
from urllib.parse import quote, urlsplit, urlunsplit

from src.core.exceptions.errors import GitError, WorkspaceError
from src.core.logger.logger import get_logger
from src.layers.acquisition.git_operations import GitOperations
from src.layers.acquisition.workspace import WorkspaceManager
from src.models.scm import ScmConfiguration, ScmType
from src.models.workspace import WorkspaceInfo

logger = get_logger(__name__)

# User name hosts expect when only an access token is configured
TOKEN_USERS: dict[ScmType, str] = {
    ScmType.GITHUB: "x-access-token",
    ScmType.GITLAB: "oauth2",
    ScmType.BITBUCKET: "x-token-auth",
}


def authenticated_url(url: str, scm_type: ScmType, user: str | None, password: str | None) -> str:
    """Embed credentials into an http(s) repository URL.

    SSH and local URLs are returned unchanged.

    Args:
        url: Repository URL.
        scm_type: Host type, used to pick the user for token-only credentials.
        user: User name.
        password: Password or access token.

    Returns:
        URL to hand to git.
    """
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not password:
        return url

    user = user or TOKEN_USERS.get(scm_type)
    if not user:
        return url

    host = parts.netloc.rsplit("@", 1)[-1]
    netloc = f"{quote(user, safe='')}:{quote(password, safe='')}@{host}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


class GitConnector:
    """Clones one repository into a workspace it owns."""

    def __init__(
        self,
        scm: ScmConfiguration,
        scm_type: ScmType,
        workspace_manager: WorkspaceManager,
        git_operations: GitOperations | None = None,
        depth: int = 0,
    ) -> None:
        """Initialize the connector.

        Args:
            scm: Repository descriptor.
            scm_type: Parsed SCM type.
            workspace_manager: Manager that owns the clone directory.
            git_operations: Git operations instance.
            depth: Clone depth (0 = full clone).
        """
        self.scm = scm
        self.scm_type = scm_type
        self.workspace_manager = workspace_manager
        self.git_operations = git_operations or GitOperations()
        self.depth = depth
        self._workspace: WorkspaceInfo | None = None

    @property
    def url(self) -> str:
        """Repository URL without credentials."""
        return self.scm.url or ""

    @property
    def clone_path(self) -> Path | None:
        """Directory of the current clone, if any."""
        return self._workspace.path if self._workspace else None

    def clone_repository(self) -> Path:
        """Clone the repository into a fresh workspace.

        Any clone held from an earlier call is discarded first.

        Returns:
            Path to the clone.

        Raises:
            GitError: If the clone or checkout fails.
            WorkspaceError: If no workspace can be created.
        """
        self.delete_clone_directory()

        logger.info(f"Connecting to SCM: {self.url}")
        workspace = self.workspace_manager.create(repo_url=self.url)
        try:
            self.git_operations.clone(
                repo_url=authenticated_url(self.url, self.scm_type, self.scm.user, self.scm.password),
                target_path=workspace.path,
                depth=self.depth,
                git_ref=self.scm.git_ref,
                env=self.git_operations.build_env(self.scm.ppk),
                display_url=self.url,
            )
        except GitError:
            self.workspace_manager.cleanup(workspace.name)
            raise

        self._workspace = workspace
        return workspace.path

    def delete_clone_directory(self) -> None:
        """Delete the current clone, if any."""
        if self._workspace is None:
            return
        workspace, self._workspace = self._workspace, None
        try:
            self.workspace_manager.cleanup(workspace.name)
        except WorkspaceError as e:
            # already released by someone holding the path
            logger.debug(f"Clone directory already released: {e}")


def create_connector(
    scm: ScmConfiguration,
    workspace_manager: WorkspaceManager,
    git_operations: GitOperations | None = None,
    depth: int = 0,
) -> GitConnector | None:
    """Create a connector for a descriptor.

    Args:
        scm: Repository descriptor.
        workspace_manager: Manager for clone directories.
        git_operations: Git operations instance.
        depth: Clone depth.

    Returns:
        A connector, or None when the descriptor has no URL or an unknown type.
    """
    if not (scm.url or "").strip():
        return None

    scm_type = ScmType.parse(scm.type)
    if scm_type is None:
        logger.warning(f"Unsupported SCM type '{scm.type}' for {scm.url}, skipping")
        return None

    return GitConnector(
        scm=scm,
        scm_type=scm_type,
        workspace_manager=workspace_manager,
        git_operations=git_operations,
        depth=depth,
    )
