"""Pytest configuration and shared fixtures."""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from git import Repo

from src.core.config.settings import (
    AgentSettings,
    GitSettings,
    RequestSettings,
    ScmSettings,
    Settings,
    WorkspaceSettings,
)
from src.layers.acquisition.workspace import WorkspaceManager
from src.models.workspace import WorkspaceConfig


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DEPRESOLVE_* variables of the developer shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("DEPRESOLVE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def workspace_config(temp_dir: Path) -> WorkspaceConfig:
    """Create a workspace configuration for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        WorkspaceConfig instance.
    """
    return WorkspaceConfig(
        base_dir=temp_dir / "workspaces",
        prefix="test_",
    )


@pytest.fixture
def workspace_manager(workspace_config: WorkspaceConfig) -> WorkspaceManager:
    """Create a workspace manager for testing.

    Args:
        workspace_config: Workspace configuration fixture.

    Returns:
        WorkspaceManager instance.
    """
    return WorkspaceManager(config=workspace_config)


@pytest.fixture
def sample_git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a sample Git repository holding an npm project.

    The repository has a ``develop`` branch with an extra dependency and a
    ``v1.0.0`` tag on the initial commit.

    Args:
        temp_dir: Temporary directory fixture.

    Yields:
        Path to the sample Git repository.
    """
    repo_path = temp_dir / "sample_repo"
    repo_path.mkdir()

    repo = Repo.init(repo_path)

    (repo_path / "README.md").write_text("# Sample Repository\n")
    (repo_path / "package.json").write_text(
        json.dumps({"name": "sample", "version": "1.0.0", "dependencies": {"lodash": "^4.17.21"}})
    )
    repo.index.add(["README.md", "package.json"])
    repo.index.commit("Initial commit")
    repo.create_tag("v1.0.0")

    default_branch = repo.active_branch
    develop = repo.create_head("develop")
    develop.checkout()
    (repo_path / "package.json").write_text(
        json.dumps(
            {
                "name": "sample",
                "version": "1.1.0",
                "dependencies": {"lodash": "^4.17.21", "express": "~4.18.2"},
            }
        )
    )
    repo.index.add(["package.json"])
    repo.index.commit("Add express")
    default_branch.checkout()

    yield repo_path

    # Cleanup is handled by temp_dir fixture


@pytest.fixture
def npm_project(temp_dir: Path) -> Path:
    """Create a directory with a package.json.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to the project directory.
    """
    project = temp_dir / "npm_project"
    project.mkdir()
    (project / "package.json").write_text(
        json.dumps(
            {
                "name": "web",
                "dependencies": {"react": "^18.2.0"},
                "devDependencies": {"jest": "29.7.0"},
            }
        )
    )
    return project


@pytest.fixture
def make_settings(workspace_config: WorkspaceConfig):
    """Build Settings for tests with workspaces under the temp directory.

    Returns:
        Factory accepting ``request``, ``scm`` and ``agent`` keyword dicts.
    """

    def _make(
        request: dict | None = None,
        scm: dict | None = None,
        agent: dict | None = None,
    ) -> Settings:
        return Settings(
            workspace=WorkspaceSettings(
                base_dir=workspace_config.base_dir,
                prefix=workspace_config.prefix,
            ),
            git=GitSettings(retry_attempts=1, retry_delay=0),
            scm=ScmSettings(**(scm or {})),
            request=RequestSettings(**(request or {})),
            agent=AgentSettings(**(agent or {})),
        )

    return _make


class FakeConnector:
    """Connector stand-in that "clones" by creating a directory."""

    def __init__(
        self,
        root: Path,
        url: str,
        files: dict[str, str] | None = None,
        fail_clone: bool = False,
        fail_reclone: bool = False,
    ) -> None:
        self.root = root
        self.url = url
        self.files = files or {}
        self.fail_clone = fail_clone
        self.fail_reclone = fail_reclone
        self.clone_count = 0
        self.clone_path: Path | None = None
        self.deleted: list[Path] = []

    def clone_repository(self) -> Path:
        from src.core.exceptions.errors import GitError

        self.delete_clone_directory()
        self.clone_count += 1
        if self.fail_clone or (self.fail_reclone and self.clone_count > 1):
            raise GitError(f"Failed to clone {self.url}", repo_url=self.url)

        path = self.root / f"{self.url.rstrip('/').rsplit('/', 1)[-1]}-{self.clone_count}"
        path.mkdir(parents=True)
        for name, content in self.files.items():
            (path / name).write_text(content)
        self.clone_path = path
        return path

    def delete_clone_directory(self) -> None:
        if self.clone_path is None:
            return
        shutil.rmtree(self.clone_path, ignore_errors=True)
        self.deleted.append(self.clone_path)
        self.clone_path = None


class FakeScm:
    """Registry of fake connectors, keyed by repository url."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.connectors: dict[str, FakeConnector] = {}

    def add(self, url: str, **kwargs) -> FakeConnector:
        connector = FakeConnector(self.root, url, **kwargs)
        self.connectors[url] = connector
        return connector

    def factory(self, scm, workspace_manager, git_operations=None, depth=0):
        return self.connectors.get(scm.url)


@pytest.fixture
def fake_scm(temp_dir: Path) -> FakeScm:
    """Fake SCM whose ``factory`` can replace create_connector.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        FakeScm registry.
    """
    return FakeScm(temp_dir / "clones")
