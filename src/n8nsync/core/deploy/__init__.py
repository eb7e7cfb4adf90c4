"""
Deployment of local workflow files to n8n.

    >>> from n8nsync.core.deploy import DeployService
    >>> result = DeployService(client, store, settings).deploy_batch(paths)
"""

from n8nsync.core.deploy.models import (
    BatchResult,
    DeployOutcome,
    DeployStatus,
    FailureKind,
    LookupState,
)
from n8nsync.core.deploy.service import DeployService

__all__ = [
    "BatchResult",
    "DeployOutcome",
    "DeployService",
    "DeployStatus",
    "FailureKind",
    "LookupState",
]
