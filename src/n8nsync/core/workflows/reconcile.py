"""
Identity reconciliation between a source definition and a remote record.

A source definition carries no environment-specific ids. Before it can be
submitted as an update, the ids of the existing remote workflow are merged
in by name: the workflow id, the id and webhook id of every node whose name
matches a remote node, and the credential id of every credential slot that
references the same credential name on the matching remote node.

Anything without a remote counterpart stays without an id: new nodes are
created by n8n, and credential references that cannot be matched are left
unresolved for the operator to wire up after the deploy.

Example:
    >>> result = reconcile(source, existing)
    >>> result.definition.id == existing.id
    True
    >>> result.unresolved_credentials
    ['Send Email/smtp: Mailer (prod)']
"""

from __future__ import annotations

from dataclasses import dataclass, field

from n8nsync.core.workflows.models import (
    CredentialRef,
    Node,
    RemoteWorkflow,
    WorkflowDefinition,
)


@dataclass
class Reconciliation:
    """
    Result of merging remote identifiers into a source definition.

    Attributes:
        definition: Source definition carrying the remote ids, safe to submit
            as an update
        new_nodes: Names of source nodes with no remote counterpart
        unresolved_credentials: "node/slot: credential" entries whose id
            could not be taken from the remote record
    """

    definition: WorkflowDefinition
    new_nodes: list[str] = field(default_factory=list)
    unresolved_credentials: list[str] = field(default_factory=list)


def _reconcile_credentials(
    node: Node, remote_node: Node | None, unresolved: list[str]
) -> dict[str, CredentialRef] | None:
    if node.credentials is None:
        return None

    remote_credentials = (remote_node.credentials if remote_node else None) or {}
    merged: dict[str, CredentialRef] = {}

    for slot, ref in node.credentials.items():
        remote_ref = remote_credentials.get(slot)
        if remote_ref is not None and remote_ref.id and remote_ref.name == ref.name:
            merged[slot] = ref.model_copy(update={"id": remote_ref.id})
        else:
            merged[slot] = ref.model_copy(update={"id": None})
            unresolved.append(f"{node.name}/{slot}: {ref.name or '<unnamed>'}")

    return merged


def reconcile(source: WorkflowDefinition, existing: RemoteWorkflow) -> Reconciliation:
    """
    Copy the identifiers of ``existing`` onto ``source``.

    Args:
        source: Portable definition (typically read from a workflow file)
        existing: Full remote record whose name matches ``source.name``

    Returns:
        Reconciliation with the merged definition and what stayed unmatched.
        ``source`` itself is not modified.
    """
    remote_nodes = existing.node_map()
    new_nodes: list[str] = []
    unresolved: list[str] = []
    nodes: list[Node] = []

    for node in source.nodes:
        remote_node = remote_nodes.get(node.name)
        if remote_node is None:
            new_nodes.append(node.name)
            ids = {"id": None, "webhook_id": None}
        else:
            ids = {"id": remote_node.id, "webhook_id": remote_node.webhook_id}

        credentials = _reconcile_credentials(node, remote_node, unresolved)
        nodes.append(node.model_copy(update={**ids, "credentials": credentials}))

    definition = source.model_copy(update={"id": existing.id, "nodes": nodes})
    return Reconciliation(
        definition=definition,
        new_nodes=new_nodes,
        unresolved_credentials=unresolved,
    )


__all__ = ["Reconciliation", "reconcile"]
