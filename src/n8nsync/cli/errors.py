"""
Standardized error handling and exit codes for the n8n-sync CLI.

Every command reports problems through ``print_error`` so the output reads
the same everywhere: what went wrong, why, and what to try next.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for n8n-sync CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """A workflow failed or the n8n API returned an error."""

    USER_ERROR = 2
    """Configuration or input error (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
    doc_url: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it
        doc_url: Optional documentation URL for more help

    Example:
        >>> print_error(
        ...     "Cannot connect to n8n",
        ...     reason="The API answered 401 Unauthorized",
        ...     solution="Check N8N_API_KEY in config/test.env",
        ... )
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")

    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")

    if doc_url:
        console.print(f"[dim]Docs: {doc_url}[/dim]")


def print_config_error(environment: str, reason: str) -> None:
    """Print error when an environment cannot be configured."""
    print_error(
        f"Cannot load configuration for '{environment}'",
        reason=reason,
        solution=f"cp config/template.env config/{environment}.env  # then set N8N_API_URL and N8N_API_KEY",
    )


def print_connection_error(api_url: str) -> None:
    """Print error when the n8n API does not accept our requests."""
    print_error(
        "Failed to connect to n8n API",
        reason=f"No authenticated answer from {api_url}",
        solution="Check your API URL and API key configuration",
        doc_url="https://docs.n8n.io/api/authentication/",
    )


def print_no_workflows_error(target: str | None = None) -> None:
    """Print error when a target selects no workflow files."""
    reason = (
        f"No workflow files match: {target}" if target else "The workflows directory is empty"
    )
    print_error(
        "No workflow files found",
        reason=reason,
        solution="n8n-sync pull  # to fetch workflows from n8n",
    )


def print_workflow_not_found_error(name: str, environment: str) -> None:
    """Print error when a workflow name does not exist on the remote."""
    print_error(
        f"Workflow not found: {name}",
        reason=f"No workflow with this exact name exists in '{environment}'",
        solution=f"n8n-sync list {environment} --remote  # to see remote workflows",
    )
