"""
n8n-sync - n8n workflows under source control

A CLI tool that pulls, diffs and deploys n8n workflows across environments
that assign different ids to the same logical workflows.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from n8nsync.core.config.models import EnvironmentConfig, SyncSettings
from n8nsync.core.workflows.models import RemoteWorkflow, WorkflowDefinition

__all__ = [
    "EnvironmentConfig",
    "RemoteWorkflow",
    "SyncSettings",
    "WorkflowDefinition",
    "__version__",
]
