"""
n8n-sync CLI - Diff command.

Compare workflow files with the workflows on an n8n instance.
"""

import typer
from rich.console import Console
from rich.markup import escape

from n8nsync.cli.common import DEFAULT_ENVIRONMENT, connect, open_project
from n8nsync.cli.errors import ExitCode, print_error
from n8nsync.core.diff import DiffService
from n8nsync.core.n8n import N8nError, WorkflowValidationError
from n8nsync.core.workflows.models import DiffResult

console = Console()


def _print_group(title: str, style: str, icon: str, results: list[DiffResult]) -> None:
    if not results:
        return
    console.print(f"[bold {style}]{title} ({len(results)}):[/bold {style}]")
    for result in results:
        console.print(f"  [{style}]{icon} {escape(result.subject_name)}[/{style}]", highlight=False)
        for detail in result.differences:
            console.print(f"      [dim]{escape(detail)}[/dim]", highlight=False)
    console.print()


def diff(
    environment: str = typer.Argument(
        DEFAULT_ENVIRONMENT,
        help="Environment name (test, production, etc.)",
    ),
    target: str | None = typer.Argument(
        None,
        help="A category name or workflow file path (default: all)",
    ),
) -> None:
    """
    Compare local workflows with a remote n8n instance.

    Examples:
        n8n-sync diff
        n8n-sync diff production shared
    """
    project = open_project()
    store = project.store

    paths = store.resolve_target(target)
    category: str | None = None
    name: str | None = None
    if target and target.endswith(".json"):
        try:
            name = store.load(paths[0]).name
        except WorkflowValidationError:
            # reported as a local-only result below
            name = None
    elif target and target != "all":
        category = target

    if not paths:
        console.print("[dim]No workflow files found to compare[/dim]")
        return

    with connect(environment, project) as client:
        try:
            report = DiffService(client, store, project.settings).run(
                paths, category=category, name=name
            )
        except N8nError as e:
            print_error("Comparison failed", reason=str(e))
            raise typer.Exit(ExitCode.GENERAL_ERROR) from e

    console.print()
    console.print("[bold]Workflow Comparison Results:[/bold]")
    console.print()
    _print_group("Modified", "yellow", "⚠", report.modified)
    _print_group("Local Only", "blue", "↑", report.local_only)
    _print_group("Remote Only", "magenta", "↓", report.remote_only)
    _print_group("Identical", "green", "✓", report.identical)

    console.print("[bold]Summary:[/bold]")
    console.print(f"  Total workflows compared: {len(report.results)}")
    console.print(f"  [yellow]Modified: {len(report.modified)}[/yellow]")
    console.print(f"  [blue]Local only: {len(report.local_only)}[/blue]")
    console.print(f"  [magenta]Remote only: {len(report.remote_only)}[/magenta]")
    console.print(f"  [green]Identical: {len(report.identical)}[/green]")
