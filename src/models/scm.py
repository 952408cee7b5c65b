"""SCM descriptor models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ScmType(str, Enum):
    """Supported source-control hosts.

    Every host is reached through plain git; the type only selects how
    credentials are attached to the url.
    """

    GIT = "git"
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"

    @classmethod
    def parse(cls, value: str | None) -> "ScmType | None":
        """Map a configured type string to a ScmType, or None when unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class GitRefType(str, Enum):
    """Git reference type enumeration."""

    BRANCH = "branch"
    TAG = "tag"


class GitRef(BaseModel):
    """Git reference to check out after cloning."""

    model_config = {"frozen": True}

    ref_type: GitRefType = Field(default=GitRefType.BRANCH)
    ref_value: str

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.ref_type.value}:{self.ref_value}"


class ScmConfiguration(BaseModel):
    """Descriptor of one remote repository to clone."""

    model_config = {"frozen": True}

    type: str | None = Field(default=None, description="SCM type")
    url: str | None = Field(default=None, description="Repository URL")
    user: str | None = Field(default=None, description="User name")
    password: str | None = Field(default=None, description="Password or access token", repr=False)
    ppk: Path | None = Field(default=None, description="Private key file")
    branch: str | None = Field(default=None, description="Branch to check out")
    tag: str | None = Field(default=None, description="Tag to check out")

    @property
    def git_ref(self) -> GitRef | None:
        """Reference to check out; a tag wins over a branch."""
        if self.tag:
            return GitRef(ref_type=GitRefType.TAG, ref_value=self.tag)
        if self.branch:
            return GitRef(ref_type=GitRefType.BRANCH, ref_value=self.branch)
        return None
