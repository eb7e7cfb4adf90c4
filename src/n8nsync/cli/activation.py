"""
n8n-sync CLI - Activate and deactivate commands.

Toggle a remote workflow, found by its exact name.
"""

import typer
from rich.console import Console
from rich.markup import escape

from n8nsync.cli.common import connect, open_project
from n8nsync.cli.errors import ExitCode, print_error, print_workflow_not_found_error
from n8nsync.core.n8n import N8nError

console = Console()


def _set_active(environment: str, name: str, active: bool) -> None:
    project = open_project()
    with connect(environment, project) as client:
        try:
            summary = client.find_workflow_by_name(name)
            if summary is None:
                print_workflow_not_found_error(name, environment)
                raise typer.Exit(ExitCode.USER_ERROR)

            if summary.active == active:
                state = "active" if active else "inactive"
                console.print(f"[dim]{escape(name)} is already {state}[/dim]", highlight=False)
                return

            if active:
                client.activate_workflow(summary.id)
            else:
                client.deactivate_workflow(summary.id)
        except N8nError as e:
            verb = "activate" if active else "deactivate"
            print_error(f"Failed to {verb} {name}", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    verb = "Activated" if active else "Deactivated"
    console.print(f"[green]✓[/green] {verb}: {escape(name)} (ID: {summary.id})", highlight=False)


def activate(
    environment: str = typer.Argument(..., help="Environment name"),
    name: str = typer.Argument(..., help="Exact workflow name"),
) -> None:
    """Activate a workflow on n8n."""
    _set_active(environment, name, True)


def deactivate(
    environment: str = typer.Argument(..., help="Environment name"),
    name: str = typer.Argument(..., help="Exact workflow name"),
) -> None:
    """Deactivate a workflow on n8n."""
    _set_active(environment, name, False)
