"""
n8n-sync CLI - List command.

Show workflow files per category and, optionally, the workflows of a
remote instance.
"""

import typer
from rich.console import Console
from rich.markup import escape

from n8nsync.cli.common import DEFAULT_ENVIRONMENT, connect, open_project
from n8nsync.cli.errors import ExitCode, print_error
from n8nsync.core.n8n import N8nError, WorkflowValidationError

console = Console()


def list_workflows(
    environment: str = typer.Argument(
        DEFAULT_ENVIRONMENT,
        help="Environment name for remote listing",
    ),
    remote: bool = typer.Option(
        False,
        "--remote",
        "-r",
        help="Also list workflows on the remote n8n instance",
    ),
) -> None:
    """
    List workflows in the repository and optionally on n8n.

    Examples:
        n8n-sync list
        n8n-sync list production --remote
    """
    project = open_project()
    store = project.store

    console.print("[bold cyan]LOCAL WORKFLOWS[/bold cyan]")
    console.print()

    total_local = 0
    for category in project.settings.categories:
        files = store.find_files(category)
        if not files:
            continue

        console.print(f"[bold]📁 {category}/[/bold]")
        for path in files:
            try:
                workflow = store.load(path)
            except WorkflowValidationError as e:
                console.print(f"  [red]✗[/red] {path.name}")
                console.print(f"    [red]Error:[/red] {escape('; '.join(e.errors))}", highlight=False)
                continue
            console.print(f"  [green]✓[/green] {path.stem}")
            console.print(f"    Name: {escape(workflow.name)}", highlight=False)
            console.print(f"    ID: {workflow.id or 'no-id'} | Nodes: {len(workflow.nodes)}")
        console.print()
        total_local += len(files)

    if total_local == 0:
        console.print("[dim]  No local workflows found[/dim]")
        console.print()

    if not remote:
        console.print("[bold]Summary:[/bold]")
        console.print(f"  Local workflows: {total_local}")
        console.print()
        console.print("[dim]Use --remote to also list remote workflows[/dim]")
        return

    with connect(environment, project, check=False) as client:
        try:
            workflows = client.list_workflows()
        except N8nError as e:
            print_error("Failed to fetch remote workflows", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    console.print(f"[bold cyan]REMOTE WORKFLOWS ({environment})[/bold cyan]")
    console.print()
    if not workflows:
        console.print("[dim]  No remote workflows found[/dim]")
    for workflow in workflows:
        marker = "[green]●[/green]" if workflow.active else "[dim]○[/dim]"
        tags = ", ".join(workflow.tag_names) or "none"
        console.print(f"{marker} [bold]{escape(workflow.name)}[/bold]", highlight=False)
        console.print(
            f"  ID: {workflow.id} | Nodes: {workflow.node_count} | Tags: {escape(tags)}",
            highlight=False,
        )

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  Local workflows: {total_local}")
    console.print(f"  Remote workflows: {len(workflows)}")
