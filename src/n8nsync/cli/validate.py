"""
n8n-sync CLI - Validate command.

Check that every workflow file loads as a valid workflow, without
contacting n8n.
"""

import typer
from rich.console import Console
from rich.markup import escape

from n8nsync.cli.common import open_project
from n8nsync.cli.errors import ExitCode

console = Console()


def validate() -> None:
    """
    Validate all workflow JSON files.

    Exits with status 1 when any file is invalid.
    """
    project = open_project()

    console.print("[bold]Validating workflow files...[/bold]")
    console.print()

    report = project.store.validate_all()

    if report.invalid:
        console.print(f"[bold red]✗ {len(report.invalid)} workflow(s) failed validation:[/bold red]")
        console.print()
        for error in report.invalid:
            console.print(f"[red]✗ {error.path}[/red]", highlight=False)
            for line in error.errors:
                console.print(f"  [dim]{escape(line)}[/dim]", highlight=False)
            console.print()

    if report.valid:
        console.print(f"[green]✓ {len(report.valid)} workflow(s) validated successfully[/green]")

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  [green]Valid:[/green] {len(report.valid)}")
    console.print(f"  [red]Invalid:[/red] {len(report.invalid)}")

    if not report.ok:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
