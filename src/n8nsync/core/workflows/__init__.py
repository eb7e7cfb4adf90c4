"""
Workflow reconciliation and diff engine.

    >>> from n8nsync.core.workflows import normalize, reconcile, diff_workflows
    >>> canonical = normalize(remote_record)
    >>> merged = reconcile(source, remote_record).definition
    >>> diff_workflows(source, remote_record).status
    <DiffStatus.IDENTICAL: 'identical'>
"""

from n8nsync.core.workflows.diff import (
    compare_workflows,
    determine_category,
    diff_workflows,
    find_remote_only,
)
from n8nsync.core.workflows.models import (
    CredentialRef,
    DiffResult,
    DiffStatus,
    Node,
    RemoteWorkflow,
    Tag,
    TagRef,
    WorkflowDefinition,
    WorkflowSummary,
)
from n8nsync.core.workflows.normalize import normalize, to_storage
from n8nsync.core.workflows.reconcile import Reconciliation, reconcile
from n8nsync.core.workflows.tags import TagResolver, resolve_tags

__all__ = [
    "CredentialRef",
    "DiffResult",
    "DiffStatus",
    "Node",
    "Reconciliation",
    "RemoteWorkflow",
    "Tag",
    "TagRef",
    "TagResolver",
    "WorkflowDefinition",
    "WorkflowSummary",
    "compare_workflows",
    "determine_category",
    "diff_workflows",
    "find_remote_only",
    "normalize",
    "reconcile",
    "resolve_tags",
    "to_storage",
]
