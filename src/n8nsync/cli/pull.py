"""
n8n-sync CLI - Pull command.

Fetch workflows from an n8n instance and save them as canonical JSON files,
one directory per category.
"""

import typer
from rich.console import Console
from rich.markup import escape

from n8nsync.cli.common import DEFAULT_ENVIRONMENT, connect, open_project
from n8nsync.cli.errors import ExitCode, print_error
from n8nsync.core.n8n import N8nError
from n8nsync.core.pull import PullService

console = Console()


def pull(
    environment: str = typer.Argument(
        DEFAULT_ENVIRONMENT,
        help="Environment name (test, production, etc.)",
    ),
    category: str | None = typer.Option(
        None,
        "--category",
        "-c",
        help="Only pull workflows of this category",
    ),
) -> None:
    """
    Pull workflows from n8n into the repository.

    Workflows without a category tag are skipped.

    Examples:
        n8n-sync pull
        n8n-sync pull production -c business
    """
    project = open_project()

    if category is not None and category not in project.settings.categories:
        valid = ", ".join(project.settings.categories)
        print_error(
            f"Unknown category: {category}",
            reason=f"Configured categories are: {valid}",
            solution=f"Use one of: {valid}",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    console.print(f"Loaded configuration for [cyan]{environment}[/cyan] environment")

    with connect(environment, project) as client:
        try:
            result = PullService(client, project.store, project.settings).pull(category)
        except N8nError as e:
            print_error("Pull failed", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    for pulled in result.pulled:
        console.print(f"[green]✓[/green] Saved: [green]{project.store.relative(pulled.path)}[/green]")
    for skipped in result.skipped:
        console.print(f"[dim]○ Skipped: {escape(skipped.name)} ({escape(skipped.reason)})[/dim]")
    for failed in result.failed:
        console.print(f"[red]✗[/red] Failed: {escape(failed.name)}")
        console.print(f"  [red]Error:[/red] {escape(failed.error)}")

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  [green]✓[/green] Pulled: {len(result.pulled)}")
    if result.skipped:
        console.print(f"  [dim]○[/dim] Skipped: {len(result.skipped)}")
    if result.failed:
        console.print(f"  [red]✗[/red] Failed: {len(result.failed)}")
    console.print()
    console.print("[dim]Review changes with: git status[/dim]")

    if not result.success:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
