"""Application settings using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.config.loader import DEFAULT_CONFIG_PATH, ConfigLoader


def _optional_path(v: str | Path | None) -> Path | None:
    if v is None or v == "":
        return None
    return Path(v)


class WorkspaceSettings(BaseSettings):
    """Clone workspace settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_WORKSPACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_dir: Path | None = Field(
        default=None,
        description="Base directory for clone workspaces (None = system temp)",
    )
    prefix: str = Field(
        default="depresolve_scm_",
        description="Workspace directory name prefix",
    )

    @field_validator("base_dir", mode="before")
    @classmethod
    def validate_base_dir(cls, v: str | Path | None) -> Path | None:
        """Validate and convert base_dir to Path."""
        return _optional_path(v)


class GitSettings(BaseSettings):
    """Git operation configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_GIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_depth: int = Field(
        default=0,
        ge=0,
        description="Default clone depth (0 = full)",
    )
    retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Retry attempts for clone operations",
    )
    retry_delay: int = Field(
        default=5,
        ge=0,
        le=60,
        description="Retry delay in seconds",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Verify SSL certificates",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_LOGGING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="[%(name)s] %(message)s",
        description="Log format string",
    )
    file: Path | None = Field(default=None, description="Log file path")
    use_rich: bool = Field(default=True, description="Use Rich console for output")

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator("file", mode="before")
    @classmethod
    def validate_file(cls, v: str | Path | None) -> Path | None:
        """Validate and convert file to Path."""
        return _optional_path(v)


class ScmSettings(BaseSettings):
    """Inline SCM descriptor and repository preparation settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_SCM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    type: str | None = Field(default=None, description="SCM type (git, github, gitlab, bitbucket)")
    url: str | None = Field(default=None, description="Repository URL")
    user: str | None = Field(default=None, description="SCM user name")
    password: str | None = Field(default=None, description="SCM password or access token")
    ppk: Path | None = Field(default=None, description="Private key file for SSH urls")
    branch: str | None = Field(default=None, description="Branch to check out")
    tag: str | None = Field(default=None, description="Tag to check out (wins over branch)")
    repositories_file: Path | None = Field(
        default=None,
        description="Manifest listing several repositories to clone",
    )
    npm_install: bool = Field(
        default=True,
        description="Run 'npm install' on clones that contain package.json",
    )
    npm_install_timeout_minutes: int = Field(
        default=15,
        ge=1,
        le=240,
        description="Timeout for 'npm install' in minutes",
    )

    @field_validator("ppk", "repositories_file", mode="before")
    @classmethod
    def validate_paths(cls, v: str | Path | None) -> Path | None:
        """Validate and convert file settings to Path."""
        return _optional_path(v)


class RequestSettings(BaseSettings):
    """Project identity settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_REQUEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_per_subfolder: bool = Field(
        default=False,
        description="Create one project per top-level sub-folder",
    )
    project_token: str | None = Field(default=None, description="Existing project token")
    project_name: str | None = Field(default=None, description="Project name")
    project_version: str | None = Field(default=None, description="Project version")


class AgentSettings(BaseSettings):
    """Agent run settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_AGENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    error: str | None = Field(
        default=None,
        description="Pre-existing error that aborts resolution after SCM connect",
    )
    scan_package_manager: bool = Field(
        default=False,
        description="List installed OS packages instead of scanning directories",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEPRESOLVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workspace: WorkspaceSettings = Field(default_factory=WorkspaceSettings)
    git: GitSettings = Field(default_factory=GitSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    scm: ScmSettings = Field(default_factory=ScmSettings)
    request: RequestSettings = Field(default_factory=RequestSettings)
    agent: AgentSettings = Field(default_factory=AgentSettings)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file.

        Args:
            path: Path to YAML configuration file.

        Returns:
            Settings instance with values from YAML.
        """
        loader = ConfigLoader(path)
        loader.load()

        def section(name: str) -> dict:
            # null values defer to the environment
            return {k: v for k, v in loader.get_section(name).items() if v is not None}

        return cls(
            workspace=WorkspaceSettings(**section("workspace")),
            git=GitSettings(**section("git")),
            logging=LoggingSettings(**section("logging")),
            scm=ScmSettings(**section("scm")),
            request=RequestSettings(**section("request")),
            agent=AgentSettings(**section("agent")),
        )

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from default locations.

        Priority: config/default.yaml values > environment variables > .env > defaults

        Returns:
            Settings instance.
        """
        if DEFAULT_CONFIG_PATH.exists():
            return cls.from_yaml(DEFAULT_CONFIG_PATH)

        return cls()

    def validation_errors(self) -> list[str]:
        """Collect configuration problems that make a resolution run meaningless.

        Returns:
            Human-readable error messages, empty when the settings are usable.
        """
        errors: list[str] = []
        request = self.request

        if not request.project_per_subfolder and not self.agent.scan_package_manager:
            if not (request.project_token or "").strip() and not (request.project_name or "").strip():
                errors.append("Missing project identity: set a project token or a project name")

        if self.scm.url and not self.scm.type:
            errors.append(f"SCM type is required for repository url {self.scm.url}")

        if self.scm.repositories_file and not self.scm.repositories_file.is_file():
            errors.append(f"Repositories file not found: {self.scm.repositories_file}")

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings singleton.
    """
    return Settings.load()
