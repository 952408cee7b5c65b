"""Git operations wrapper with retry support."""

import os
import shutil
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from git import Repo
from git.exc import GitCommandError

from src.core.config.settings import get_settings
from src.core.exceptions.errors import GitError
from src.core.logger.logger import get_logger
from src.models.scm import GitRef, GitRefType

T = TypeVar("T")

logger = get_logger(__name__)


class GitOperations:
    """Handles Git clone and checkout operations."""

    def __init__(
        self,
        retry_attempts: int | None = None,
        retry_delay: int | None = None,
        verify_ssl: bool | None = None,
    ) -> None:
        """Initialize Git operations.

        Args:
            retry_attempts: Number of attempts for a clone.
            retry_delay: Delay between attempts in seconds.
            verify_ssl: Whether to verify SSL certificates.
        """
        settings = get_settings()

        self.retry_attempts = retry_attempts or settings.git.retry_attempts
        self.retry_delay = retry_delay if retry_delay is not None else settings.git.retry_delay
        self.verify_ssl = verify_ssl if verify_ssl is not None else settings.git.verify_ssl

    def _retry_operation(
        self,
        operation: Callable[..., T],
        *args: Any,
        cleanup: Callable[[], None] | None = None,
        **kwargs: Any,
    ) -> T:
        """Execute an operation with retry logic.

        Args:
            operation: Callable to execute.
            *args: Positional arguments for the operation.
            cleanup: Called after each failed attempt, before the next one.
            **kwargs: Keyword arguments for the operation.

        Returns:
            Result of the operation.

        Raises:
            GitError: If all attempts fail.
        """
        last_error: Exception | None = None

        for attempt in range(1, self.retry_attempts + 1):
            try:
                return operation(*args, **kwargs)
            except GitCommandError as e:
                last_error = e
                logger.warning(
                    f"Git operation failed (attempt {attempt}/{self.retry_attempts}): {e}"
                )
                if cleanup is not None:
                    cleanup()
                if attempt < self.retry_attempts:
                    logger.info(f"Retrying in {self.retry_delay} seconds...")
                    time.sleep(self.retry_delay)

        raise GitError(
            f"Git operation failed after {self.retry_attempts} attempts",
            details={"last_error": str(last_error)},
        )

    def build_env(self, ssh_key: Path | None = None) -> dict[str, str]:
        """Build the environment for git subprocesses.

        Args:
            ssh_key: Private key used for SSH remotes.

        Returns:
            Environment variables to pass to git.
        """
        env: dict[str, str] = {"GIT_TERMINAL_PROMPT": "0"}
        if not self.verify_ssl:
            env["GIT_SSL_NO_VERIFY"] = "true"
        if ssh_key is not None:
            env["GIT_SSH_COMMAND"] = (
                f'ssh -i "{ssh_key}" -o IdentitiesOnly=yes -o StrictHostKeyChecking=no'
            )
        return env

    def clone(
        self,
        repo_url: str,
        target_path: Path,
        depth: int = 0,
        git_ref: GitRef | None = None,
        env: dict[str, str] | None = None,
        display_url: str | None = None,
    ) -> Repo:
        """Clone a Git repository.

        Args:
            repo_url: URL of the repository, credentials included.
            target_path: Local path to clone into.
            depth: Clone depth (0 = full clone).
            git_ref: Optional Git reference to checkout after clone.
            env: Extra environment for the git process.
            display_url: URL to use in log lines and errors.

        Returns:
            Cloned Repo object.

        Raises:
            GitError: If clone or checkout fails.
        """
        shown_url = display_url or repo_url
        logger.info(f"Cloning repository: {shown_url}")

        clone_kwargs: dict[str, Any] = {
            "url": repo_url,
            "to_path": str(target_path),
            "env": {**os.environ, **(env or {})},
        }
        if depth > 0:
            clone_kwargs["depth"] = depth
            # A shallow clone only carries the requested ref
            if git_ref is not None:
                clone_kwargs["branch"] = git_ref.ref_value

        def _clone() -> Repo:
            return Repo.clone_from(**clone_kwargs)

        def _discard_partial_clone() -> None:
            shutil.rmtree(target_path, ignore_errors=True)

        try:
            repo = self._retry_operation(_clone, cleanup=_discard_partial_clone)
        except GitError as e:
            raise GitError(
                f"Failed to clone {shown_url}",
                repo_url=shown_url,
                details=e.details,
            ) from e

        logger.info(f"Successfully cloned {shown_url} to {target_path}")

        if git_ref is not None and depth == 0:
            self.checkout(repo, git_ref)

        return repo

    def checkout(self, repo: Repo, git_ref: GitRef) -> None:
        """Checkout a branch or tag.

        Args:
            repo: Repo object.
            git_ref: Git reference to checkout.

        Raises:
            GitError: If the reference does not exist or checkout fails.
        """
        ref_value = git_ref.ref_value
        logger.info(f"Checking out {git_ref.ref_type.value}: {ref_value}")

        try:
            if git_ref.ref_type == GitRefType.BRANCH:
                if ref_value in [h.name for h in repo.heads]:
                    repo.heads[ref_value].checkout()
                else:
                    remote_branch = f"origin/{ref_value}"
                    if remote_branch not in [ref.name for ref in repo.remote("origin").refs]:
                        raise GitError(f"Branch not found: {ref_value}", git_ref=str(git_ref))
                    repo.git.checkout(remote_branch, b=ref_value)
            else:
                if ref_value not in [t.name for t in repo.tags]:
                    raise GitError(f"Tag not found: {ref_value}", git_ref=str(git_ref))
                repo.git.checkout(ref_value)
        except GitCommandError as e:
            raise GitError(
                f"Failed to checkout {git_ref.ref_type.value}: {ref_value}",
                git_ref=str(git_ref),
                details={"error": str(e)},
            ) from e
