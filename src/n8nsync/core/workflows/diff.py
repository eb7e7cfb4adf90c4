"""
Structural comparison of local and remote workflows.

Both sides are normalized first, so environment-specific ids and runtime
state never show up as differences. The comparison is intentionally coarse:
workflow name, node count, node names, node type and disabled flag,
settings, and tag names. Node parameters are not diffed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from n8nsync.core.workflows.models import (
    DiffResult,
    DiffStatus,
    RemoteWorkflow,
    WorkflowDefinition,
)
from n8nsync.core.workflows.normalize import normalize


def determine_category(tag_names: Iterable[str], categories: Sequence[str]) -> str | None:
    """
    Pick the storage category of a workflow from its tags.

    Categories are checked in configured order and matched
    case-insensitively against the tag names.

    Returns:
        The first matching category, or None when no tag is a category
    """
    lowered = {name.lower() for name in tag_names}
    for category in categories:
        if category.lower() in lowered:
            return category
    return None


def compare_workflows(local: WorkflowDefinition, remote: WorkflowDefinition) -> list[str]:
    """
    List the differences between two canonical workflows.

    Args:
        local: Normalized local definition
        remote: Normalized remote definition

    Returns:
        Human-readable difference lines; empty when the workflows match
    """
    differences: list[str] = []

    if local.name != remote.name:
        differences.append(f'Name: "{local.name}" vs "{remote.name}"')

    if len(local.nodes) != len(remote.nodes):
        differences.append(f"Nodes: {len(local.nodes)} vs {len(remote.nodes)}")

    local_nodes = local.node_map()
    remote_nodes = remote.node_map()

    for name in local_nodes:
        if name not in remote_nodes:
            differences.append(f'Node added locally: "{name}"')

    for name in remote_nodes:
        if name not in local_nodes:
            differences.append(f'Node added remotely: "{name}"')

    for name, local_node in local_nodes.items():
        remote_node = remote_nodes.get(name)
        if remote_node is None:
            continue
        if local_node.type != remote_node.type:
            differences.append(f'Node "{name}" type: {local_node.type} vs {remote_node.type}')
        # n8n omits "disabled" when false
        if bool(local_node.disabled) != bool(remote_node.disabled):
            differences.append(
                f'Node "{name}" disabled: {bool(local_node.disabled)} '
                f"vs {bool(remote_node.disabled)}"
            )

    if local.settings != remote.settings:
        differences.append("Settings differ")

    local_tags = sorted(set(local.tag_names))
    remote_tags = sorted(set(remote.tag_names))
    if local_tags != remote_tags:
        differences.append(f"Tags: [{', '.join(local_tags)}] vs [{', '.join(remote_tags)}]")

    return differences


def diff_workflows(
    local: WorkflowDefinition,
    remote: WorkflowDefinition | None,
    *,
    path: str | None = None,
) -> DiffResult:
    """
    Classify a local definition against its remote counterpart.

    Args:
        local: Local definition (any form; normalized here)
        remote: Remote record with the same name, or None when there is none
        path: Workflow file the local definition came from, for display

    Returns:
        DiffResult with status local-only, identical or modified
    """
    if remote is None:
        details = [f"File: {path}"] if path else []
        return DiffResult(
            subject_name=local.name,
            status=DiffStatus.LOCAL_ONLY,
            differences=details,
            path=path,
        )

    differences = compare_workflows(normalize(local), normalize(remote))
    return DiffResult(
        subject_name=local.name,
        status=DiffStatus.MODIFIED if differences else DiffStatus.IDENTICAL,
        differences=differences,
        path=path,
        remote_id=remote.id,
    )


def find_remote_only(
    records: Iterable[RemoteWorkflow],
    local_names: set[str],
    categories: Sequence[str],
    *,
    category: str | None = None,
    name: str | None = None,
) -> list[DiffResult]:
    """
    Report remote workflows that have no local file.

    Remote workflows without a recognized category tag are not managed by
    this tool and are skipped.

    Args:
        records: Remote workflows to inspect
        local_names: Names of workflows that have a local file
        categories: Recognized category tag names
        category: Only report workflows of this category
        name: Only report the workflow with this name

    Returns:
        One remote-only DiffResult per unmatched, categorized workflow
    """
    results: list[DiffResult] = []

    for record in records:
        if record.name in local_names:
            continue
        if name is not None and record.name != name:
            continue

        record_category = determine_category(record.tag_names, categories)
        if record_category is None:
            continue
        if category is not None and record_category != category:
            continue

        results.append(
            DiffResult(
                subject_name=record.name,
                status=DiffStatus.REMOTE_ONLY,
                differences=[f"Category: {record_category}", f"ID: {record.id}"],
                category=record_category,
                remote_id=record.id,
            )
        )

    return results


__all__ = [
    "compare_workflows",
    "determine_category",
    "diff_workflows",
    "find_remote_only",
]
