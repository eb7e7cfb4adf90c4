"""
n8n-sync CLI - Envs command.

List the environments configured under config/.
"""

from rich.console import Console
from rich.table import Table

from n8nsync.cli.common import open_project
from n8nsync.core.config import get_environment_path, list_environments
from n8nsync.core.config.env import read_env_file

console = Console()


def envs() -> None:
    """List configured environments (config/<env>.env)."""
    project = open_project()
    names = list_environments(project.root)

    if not names:
        console.print("[yellow]No environments configured[/yellow]")
        console.print("[dim]Create one with: cp config/template.env config/test.env[/dim]")
        return

    table = Table(title="Environments")
    table.add_column("Name", style="cyan")
    table.add_column("API URL")
    table.add_column("Label", style="dim")

    for name in names:
        values = read_env_file(get_environment_path(name, project.root))
        table.add_row(
            name,
            values.get("N8N_API_URL", "[red]missing[/red]"),
            values.get("ENVIRONMENT", ""),
        )

    console.print(table)
