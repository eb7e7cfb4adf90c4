"""
Shared setup for commands that touch the project or an n8n instance.

Configuration problems are reported here with ``print_error`` and turned
into ``typer.Exit(ExitCode.USER_ERROR)``, so command bodies only deal with
their own work.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import typer

from n8nsync.cli.errors import (
    ExitCode,
    print_config_error,
    print_connection_error,
    print_error,
)
from n8nsync.core.config import SyncSettings, load_environment, load_settings
from n8nsync.core.n8n import ConfigError, N8nClient
from n8nsync.core.workflows.store import WorkflowStore
from n8nsync.utils.project import get_project_root

DEFAULT_ENVIRONMENT = "test"


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the CLI.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@dataclass
class Project:
    """Project root, settings and workflow files of the current directory."""

    root: Path
    settings: SyncSettings
    store: WorkflowStore


def open_project() -> Project:
    root = get_project_root()
    try:
        settings = load_settings(root)
    except ConfigError as e:
        print_error("Invalid project settings", reason=str(e))
        raise typer.Exit(ExitCode.USER_ERROR) from e
    return Project(root=root, settings=settings, store=WorkflowStore(root, settings))


def connect(environment: str, project: Project, check: bool = True) -> N8nClient:
    """
    Build a client for ``environment`` and optionally verify the connection.

    Raises:
        typer.Exit: USER_ERROR on configuration problems, GENERAL_ERROR when
            the API does not answer an authenticated request
    """
    try:
        config = load_environment(environment, project.root)
    except ConfigError as e:
        print_config_error(environment, str(e))
        raise typer.Exit(ExitCode.USER_ERROR) from e

    client = N8nClient(config, timeout=project.settings.timeout)
    if check and not client.test_connection():
        client.close()
        print_connection_error(config.api_url)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    return client
