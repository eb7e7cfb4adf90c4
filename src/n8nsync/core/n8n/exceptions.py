"""
Custom exceptions for n8n-sync.

Exception Hierarchy:
    SyncError (base)
    ├── WorkflowValidationError (malformed local workflow file)
    ├── ConfigError (missing or invalid environment configuration)
    └── N8nError (remote API errors)
        ├── RemoteApiError (non-2xx response, status and body kept verbatim)
        │   └── NotFoundError (404 on a workflow that was expected to exist)
        └── TransportError (no response at all)

Example:
    >>> try:
    ...     client.get_workflow("42")
    ... except NotFoundError as e:
    ...     print(f"gone: {e.status_code}")
    ... except RemoteApiError as e:
    ...     print(f"n8n said {e.status_code}: {e.body}")
"""

from __future__ import annotations


class SyncError(Exception):
    """
    Base exception for all n8n-sync errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class WorkflowValidationError(SyncError):
    """
    Exception for workflow files that cannot be loaded.

    Raised for unreadable files, invalid JSON, and schema violations.
    Never involves the remote instance.

    Attributes:
        path: Path of the offending file
        errors: One line per problem found
    """

    def __init__(self, path: str, errors: list[str], **context: object) -> None:
        message = f"Invalid workflow file {path}: {'; '.join(errors)}"
        super().__init__(message, path=path, **context)
        self.path = path
        self.errors = errors


class ConfigError(SyncError):
    """Exception for missing or invalid environment configuration."""


class N8nError(SyncError):
    """Base exception for failures talking to the n8n API."""


class RemoteApiError(N8nError):
    """
    Exception for non-2xx responses from the n8n API.

    Attributes:
        status_code: HTTP status returned by n8n
        body: Response body as returned (not parsed or shortened)
    """

    def __init__(self, message: str, status_code: int, body: str = "", **context: object) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        return f"{self.message} (HTTP {self.status_code})"


class NotFoundError(RemoteApiError):
    """Exception for 404 responses on a specific resource."""


class TransportError(N8nError):
    """
    Exception for requests that got no response.

    The underlying httpx exception is preserved via ``__cause__``.
    """


__all__ = [
    "ConfigError",
    "N8nError",
    "NotFoundError",
    "RemoteApiError",
    "SyncError",
    "TransportError",
    "WorkflowValidationError",
]
