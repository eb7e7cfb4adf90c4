"""
n8n-sync CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer

from n8nsync import __version__
from n8nsync.cli import activation, deploy, diff, envs, list_cmd, pull, validate
from n8nsync.cli.common import setup_logging
from n8nsync.core.config.env import load_layered_env
from n8nsync.utils.project import get_project_root

PANEL_SYNC = "Sync Workflows"
PANEL_INSPECT = "Inspect"
PANEL_REMOTE = "Manage Remote Workflows"

app = typer.Typer(
    name="n8n-sync",
    help="Keep n8n workflows in source control and deploy them across environments",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"n8n-sync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """
    n8n-sync - n8n workflows under source control.

    Workflow files live in workflows/<category>/; each environment is
    described by config/<env>.env (N8N_API_URL, N8N_API_KEY).

    Common Workflows:
        n8n-sync pull                  # test instance -> files
        n8n-sync diff production       # what would change
        n8n-sync deploy production     # files -> production
    """
    setup_logging(debug)

    # Precedence: OS env > project .env > user .env
    load_layered_env(project_dir=get_project_root())

    ctx.obj = {"debug": debug}


app.command(name="pull", rich_help_panel=PANEL_SYNC)(pull.pull)
app.command(name="deploy", rich_help_panel=PANEL_SYNC)(deploy.deploy)
app.command(name="diff", rich_help_panel=PANEL_SYNC)(diff.diff)

app.command(name="list", rich_help_panel=PANEL_INSPECT)(list_cmd.list_workflows)
app.command(name="validate", rich_help_panel=PANEL_INSPECT)(validate.validate)
app.command(name="envs", rich_help_panel=PANEL_INSPECT)(envs.envs)

app.command(name="activate", rich_help_panel=PANEL_REMOTE)(activation.activate)
app.command(name="deactivate", rich_help_panel=PANEL_REMOTE)(activation.deactivate)


def cli_main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "cli_main", "main"]
