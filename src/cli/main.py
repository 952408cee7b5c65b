"""Main CLI entry point for depresolve."""

import json
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from src.cli.display import (
    console,
    create_progress,
    details_to_dict,
    show_banner,
    show_error,
    show_projects,
)
from src.core.config.settings import Settings, get_settings
from src.core.exceptions.errors import ConfigurationError
from src.core.logger.logger import setup_logging
from src.layers.resolution.agent import FileSystemAgent
from src.models.project import ProjectsDetails, StatusCode
from src.models.scm import ScmType


def _section_update(**values: Any) -> dict[str, Any]:
    """Keep only the options that were actually given on the command line."""
    return {key: value for key, value in values.items() if value is not None}


def apply_overrides(
    settings: Settings,
    request: dict[str, Any],
    scm: dict[str, Any],
    agent: dict[str, Any],
) -> Settings:
    """Return a copy of settings with command line values applied.

    Configuration problems reported by Settings.validation_errors() are
    folded into ``agent.error`` so the resolution aborts cleanly.

    Args:
        settings: Settings loaded from file and environment.
        request: Overrides for the request section.
        scm: Overrides for the scm section.
        agent: Overrides for the agent section.

    Returns:
        Updated settings.
    """
    updated = settings.model_copy(
        update={
            "request": settings.request.model_copy(update=_section_update(**request)),
            "scm": settings.scm.model_copy(update=_section_update(**scm)),
            "agent": settings.agent.model_copy(update=_section_update(**agent)),
        }
    )

    errors = updated.validation_errors()
    if updated.agent.error:
        errors.insert(0, updated.agent.error)
    if errors:
        updated = updated.model_copy(
            update={"agent": updated.agent.model_copy(update={"error": "; ".join(errors)})}
        )
    return updated


def load_settings(config_path: Path | None) -> Settings:
    """Load settings from an explicit YAML file or the default locations.

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values.
    """
    if config_path is None:
        return get_settings()

    try:
        return Settings.from_yaml(config_path)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}",
            config_key=str(config_path),
            details={"errors": e.error_count()},
        ) from e


def run_resolution(settings: Settings, dependency_dirs: list[Path], quiet: bool) -> ProjectsDetails:
    """Run the file system agent, showing a spinner unless quiet."""
    agent = FileSystemAgent(settings, dependency_dirs)

    if quiet:
        return agent.create_projects()

    with create_progress() as progress:
        progress.add_task("[cyan]Resolving projects...", total=None)
        return agent.create_projects()


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, version: bool) -> None:
    """depresolve - resolve dependency projects from directories and repositories."""
    if version:
        from src import __version__

        click.echo(f"depresolve version {__version__}")
        return

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option(
    "--dir",
    "-d",
    "dirs",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Directory to scan (repeatable)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option(
    "--project-per-folder/--single-project",
    default=None,
    help="Create one project per sub-folder of each directory",
)
@click.option("--project-token", help="Existing project token")
@click.option("--project-name", help="Project name")
@click.option("--project-version", help="Project version")
@click.option(
    "--scm-type",
    type=click.Choice([t.value for t in ScmType], case_sensitive=False),
    help="SCM type of the repository url",
)
@click.option("--scm-url", help="Repository URL to clone")
@click.option("--scm-user", help="SCM user name")
@click.option("--scm-password", envvar="DEPRESOLVE_SCM_PASSWORD", help="SCM password or access token")
@click.option("--scm-ppk", type=click.Path(path_type=Path), help="Private key file for SSH urls")
@click.option("--branch", "-b", help="Branch to check out")
@click.option("--tag", "-t", help="Tag to check out (wins over --branch)")
@click.option(
    "--repositories-file",
    type=click.Path(path_type=Path),
    help="JSON or YAML file listing repositories to clone",
)
@click.option(
    "--npm-install/--no-npm-install",
    default=None,
    help="Run 'npm install' on cloned repositories",
)
@click.option(
    "--npm-timeout",
    type=click.IntRange(1, 240),
    help="Timeout for 'npm install' in minutes",
)
@click.option(
    "--package-manager",
    "package_manager",
    is_flag=True,
    help="List installed OS packages instead of scanning directories",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def scan(
    dirs: tuple[Path, ...],
    config_path: Path | None,
    project_per_folder: bool | None,
    project_token: str | None,
    project_name: str | None,
    project_version: str | None,
    scm_type: str | None,
    scm_url: str | None,
    scm_user: str | None,
    scm_password: str | None,
    scm_ppk: Path | None,
    branch: str | None,
    tag: str | None,
    repositories_file: Path | None,
    npm_install: bool | None,
    npm_timeout: int | None,
    package_manager: bool,
    as_json: bool,
) -> None:
    """Resolve projects and their dependencies.

    The process exit code reflects the status of the run
    (0 success, 1 error, 6 prep step failure).

    Example:
        depresolve scan -d ./services --project-per-folder --project-version 2.0
        depresolve scan --scm-type github --scm-url https://github.com/org/app.git \\
            --project-name app
    """
    try:
        settings = load_settings(config_path)
    except ConfigurationError as e:
        show_error("Configuration Error", str(e))
        sys.exit(StatusCode.ERROR.exit_code)

    settings = apply_overrides(
        settings,
        request={
            "project_per_subfolder": project_per_folder,
            "project_token": project_token,
            "project_name": project_name,
            "project_version": project_version,
        },
        scm={
            "type": scm_type,
            "url": scm_url,
            "user": scm_user,
            "password": scm_password,
            "ppk": scm_ppk,
            "branch": branch,
            "tag": tag,
            "repositories_file": repositories_file,
            "npm_install": npm_install,
            "npm_install_timeout_minutes": npm_timeout,
        },
        agent={"scan_package_manager": package_manager or None},
    )
    setup_logging(settings.logging)

    has_scm = bool(settings.scm.url or settings.scm.repositories_file)
    if not dirs and not has_scm and not settings.agent.scan_package_manager:
        raise click.UsageError("Nothing to scan: pass --dir, an SCM url or --package-manager")

    if not as_json:
        show_banner()

    details = run_resolution(settings, list(dirs), quiet=as_json)

    if as_json:
        click.echo(json.dumps(details_to_dict(details), indent=2))
    else:
        show_projects(details)
        console.print()

    sys.exit(details.status_code.exit_code)


if __name__ == "__main__":
    main()
