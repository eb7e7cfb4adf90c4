"""
n8n public REST API access.

Example:
    >>> from n8nsync.core.n8n import N8nClient, NotFoundError
    >>> with N8nClient(env_config) as client:
    ...     workflows = client.list_workflows()
"""

from n8nsync.core.n8n.exceptions import (
    ConfigError,
    N8nError,
    NotFoundError,
    RemoteApiError,
    SyncError,
    TransportError,
    WorkflowValidationError,
)
from n8nsync.core.n8n.client import N8nClient, WorkflowApi

__all__ = [
    "ConfigError",
    "N8nClient",
    "N8nError",
    "NotFoundError",
    "RemoteApiError",
    "SyncError",
    "TransportError",
    "WorkflowApi",
    "WorkflowValidationError",
]
