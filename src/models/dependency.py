"""Dependency data models."""

from enum import Enum

from pydantic import BaseModel, Field


class Ecosystem(str, Enum):
    """Package ecosystem types."""

    NPM = "npm"
    PYPI = "pypi"
    GO = "go"
    DEBIAN = "debian"
    RPM = "rpm"
    ALPINE = "alpine"


class Dependency(BaseModel):
    """A single resolved dependency."""

    name: str = Field(..., description="Package name")
    version: str = Field(..., description="Package version or constraint")
    ecosystem: Ecosystem = Field(..., description="Package ecosystem")
    source_file: str = Field(..., description="File the dependency was read from")
    is_direct: bool = Field(default=True, description="Declared directly by the project")
    is_dev: bool = Field(default=False, description="Development-only dependency")
    is_optional: bool = Field(default=False, description="Optional dependency")

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used to drop duplicates."""
        return (self.ecosystem.value, self.name, self.version)
