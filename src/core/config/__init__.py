"""Configuration management for depresolve."""

from src.core.config.loader import ConfigLoader
from src.core.config.settings import (
    AgentSettings,
    GitSettings,
    LoggingSettings,
    RequestSettings,
    ScmSettings,
    Settings,
    WorkspaceSettings,
    get_settings,
)

__all__ = [
    "AgentSettings",
    "ConfigLoader",
    "GitSettings",
    "LoggingSettings",
    "RequestSettings",
    "ScmSettings",
    "Settings",
    "WorkspaceSettings",
    "get_settings",
]
