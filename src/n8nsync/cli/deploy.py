"""
n8n-sync CLI - Deploy command.

Push workflow files to an n8n instance: existing workflows (matched by
name) are updated in place, missing ones are created.
"""

import typer
from rich.console import Console
from rich.markup import escape

from n8nsync.cli.common import DEFAULT_ENVIRONMENT, connect, open_project
from n8nsync.cli.errors import ExitCode, print_no_workflows_error
from n8nsync.core.deploy import DeployOutcome, DeployService, DeployStatus

console = Console()

_ICONS = {
    DeployStatus.CREATED: "[green]✓[/green]",
    DeployStatus.UPDATED: "[green]✓[/green]",
    DeployStatus.PLANNED: "[cyan]○[/cyan]",
    DeployStatus.FAILED: "[red]✗[/red]",
}


def _print_outcome(outcome: DeployOutcome) -> None:
    console.print(f"{_ICONS[outcome.status]} {escape(outcome.message)}", highlight=False)
    for note in outcome.notes:
        console.print(f"  [yellow]⚠[/yellow] [dim]{escape(note)}[/dim]", highlight=False)


def deploy(
    environment: str = typer.Argument(
        DEFAULT_ENVIRONMENT,
        help="Environment name (test, production, etc.)",
    ),
    target: str | None = typer.Argument(
        None,
        help="What to deploy: all, a category name, or a workflow file path",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Preview changes without deploying",
    ),
    parallel: bool = typer.Option(
        False,
        "--parallel",
        help="Deploy workflows in parallel",
    ),
) -> None:
    """
    Deploy workflows from the repository to n8n.

    Newly created workflows are activated only when their file says
    "active": true (see the "activation" project setting).

    Examples:
        n8n-sync deploy
        n8n-sync deploy production business --parallel
        n8n-sync deploy test workflows/business/Invoice.json --dry-run
    """
    project = open_project()

    paths = project.store.resolve_target(target)
    if not paths:
        print_no_workflows_error(target)
        raise typer.Exit(ExitCode.USER_ERROR)

    # A dry run still validates the environment but never calls n8n
    with connect(environment, project, check=not dry_run) as client:
        service = DeployService(client, project.store, project.settings)
        mode = "parallel" if parallel and len(paths) > 1 else "sequential"
        verb = "Planning" if dry_run else "Deploying"
        console.print(
            f"{verb} {len(paths)} workflow(s) to [cyan]{environment}[/cyan] ({mode})"
        )
        result = service.deploy_batch(
            paths,
            dry_run=dry_run,
            parallel=parallel,
            on_outcome=_print_outcome,
        )

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  {result.summary()}")
    if dry_run:
        console.print()
        console.print("[dim]Dry run: nothing was sent to n8n[/dim]")

    if not result.success:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
