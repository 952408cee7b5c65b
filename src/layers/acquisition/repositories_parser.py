"""Parse repository manifests listing several SCM repositories."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from src.core.exceptions.errors import ConfigurationError
from src.core.logger.logger import get_logger
from src.models.scm import ScmConfiguration

logger = get_logger(__name__)

REPOSITORIES_KEY = "scmRepositories"
YAML_SUFFIXES = {".yml", ".yaml"}


def _load_rows(path: Path) -> list[Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read repositories file: {path}",
            config_key=str(path),
            details={"error": str(e)},
        ) from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            data = yaml.safe_load(content)
        else:
            data = json.loads(content) if content.strip() else None
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Invalid repositories file: {path}",
            config_key=str(path),
            details={"error": str(e)},
        ) from e

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get(REPOSITORIES_KEY) or []
    if not isinstance(data, list):
        raise ConfigurationError(
            f"Repositories file must hold a list of repositories: {path}",
            config_key=str(path),
        )
    return data


def parse_repositories_file(
    path: Path,
    scm_type: str | None,
    ppk: Path | None = None,
    user: str | None = None,
    password: str | None = None,
) -> list[ScmConfiguration]:
    """Read a repositories manifest.

    Rows carry ``url`` and optionally ``branch``/``tag``; type and credentials
    come from the inline SCM settings unless a row overrides them. Rows
    without a URL are skipped.

    Args:
        path: JSON or YAML manifest.
        scm_type: Default SCM type.
        ppk: Default private key file.
        user: Default user name.
        password: Default password or token.

    Returns:
        Parsed descriptors, possibly empty.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    configurations: list[ScmConfiguration] = []

    for index, row in enumerate(_load_rows(path)):
        if not isinstance(row, dict) or not row.get("url"):
            logger.warning(f"Skipping repository entry #{index} without url in {path}")
            continue
        try:
            configurations.append(
                ScmConfiguration(
                    type=row.get("type") or scm_type,
                    url=row["url"],
                    user=row.get("user") or user,
                    password=row.get("password") or password,
                    ppk=row.get("ppk") or ppk,
                    branch=row.get("branch"),
                    tag=row.get("tag"),
                )
            )
        except ValidationError as e:
            logger.warning(f"Skipping invalid repository entry #{index} in {path}: {e}")

    logger.info(f"Loaded {len(configurations)} repositories from {path}")
    return configurations
