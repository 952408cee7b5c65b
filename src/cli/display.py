"""Display components for CLI using Rich."""

from collections import Counter
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from src.models.project import ProjectsDetails, StatusCode

console = Console()

STATUS_STYLES = {
    StatusCode.SUCCESS: "bold green",
    StatusCode.ERROR: "bold red",
    StatusCode.PREP_STEP_FAILURE: "bold yellow",
}


def show_banner() -> None:
    """Display the depresolve banner."""
    from src import __version__

    console.print()
    console.print(
        Panel(
            f"[bold cyan]depresolve[/] [dim]{__version__}[/]\n"
            "[dim]Resolve dependency projects from directories and repositories[/]",
            border_style="cyan",
            padding=(0, 2),
        )
    )


def show_error(title: str, message: str) -> None:
    """Display an error message."""
    console.print()
    console.print(
        Panel(
            f"[bold red]{escape(message)}[/]",
            title=f"[bold]{escape(title)}[/]",
            border_style="red",
        )
    )


def create_progress() -> Progress:
    """Create a spinner for work of unknown length."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    )


def show_projects(details: ProjectsDetails) -> None:
    """Display resolved projects and the run status.

    Args:
        details: Result of a resolution run.
    """
    console.print()

    if details.projects:
        table = Table(title="[bold]Resolved Projects[/]")
        table.add_column("Project", style="cyan")
        table.add_column("Dependencies", justify="right")
        table.add_column("Ecosystems", style="magenta")
        table.add_column("Sources", style="dim")

        for project in details.projects:
            ecosystems = Counter(dep.ecosystem.value for dep in project.dependencies)
            table.add_row(
                escape(project.display_name),
                str(len(project.dependencies)),
                ", ".join(f"{name} ({count})" for name, count in sorted(ecosystems.items())) or "-",
                escape("\n".join(project.base_dirs)) or "-",
            )

        console.print(table)
    else:
        console.print("[dim]No projects resolved[/]")

    style = STATUS_STYLES.get(details.status_code, "bold")
    status_line = f"[{style}]{details.status_code.name}[/] ({details.status_code.value})"
    if details.details:
        status_line += f"\n{escape(details.details)}"

    console.print(
        Panel(
            status_line,
            title="[bold]Status[/]",
            border_style="green" if details.success else "red",
        )
    )


def details_to_dict(details: ProjectsDetails) -> dict[str, Any]:
    """Convert a resolution result to a JSON-serializable dictionary."""
    return {
        "status": details.status_code.name,
        "status_code": details.status_code.value,
        "details": details.details,
        "projects": [
            {
                "name": project.display_name,
                "coordinates": (
                    project.coordinates.model_dump(mode="json") if project.coordinates else None
                ),
                "project_token": project.project_token,
                "base_dirs": project.base_dirs,
                "dependencies": [dep.model_dump(mode="json") for dep in project.dependencies],
            }
            for project in details.projects
        ],
    }
