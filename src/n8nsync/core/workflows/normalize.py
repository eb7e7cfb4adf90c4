"""
Canonical form of a workflow.

The canonical form is what gets written to source control and what the diff
engine compares. It strips everything the n8n instance owns (ids, timestamps,
version markers, activation state, pinned test data, execution output) and
keeps only the portable configuration: name, nodes, connections, settings and
tag names.

``normalize`` is a pure function and idempotent:

    >>> normalize(normalize(record)) == normalize(record)
    True

It is applied the same way to local and remote records, so comparing two
canonical forms is an exact comparison.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from n8nsync.core.workflows.models import WorkflowDefinition

# Workflow-level keys owned by the n8n instance
WORKFLOW_RUNTIME_FIELDS = frozenset(
    {
        "id",
        "active",
        "createdAt",
        "updatedAt",
        "versionId",
        "versionCounter",
        "activeVersionId",
        "isArchived",
        "triggerCount",
        "pinData",
        "shared",
        "staticData",
        "meta",
    }
)

# Node-level identifiers and execution output
NODE_RUNTIME_FIELDS = frozenset({"id", "webhookId", "data", "issues", "hints"})


def _as_mapping(record: WorkflowDefinition | Mapping[str, Any]) -> dict[str, Any]:
    # Raw mappings go through the model so null-valued extras drop out the same way
    if not isinstance(record, BaseModel):
        record = WorkflowDefinition.model_validate(record)
    return record.model_dump(mode="json", by_alias=True, exclude_none=True)


def _normalize_credentials(credentials: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for slot, ref in credentials.items():
        if isinstance(ref, Mapping):
            normalized[slot] = {k: v for k, v in ref.items() if k != "id" and v is not None}
        else:
            normalized[slot] = ref
    return normalized


def _normalize_node(node: Mapping[str, Any]) -> dict[str, Any]:
    cleaned = {
        k: v for k, v in node.items() if k not in NODE_RUNTIME_FIELDS and v is not None
    }
    if isinstance(cleaned.get("credentials"), Mapping):
        cleaned["credentials"] = _normalize_credentials(cleaned["credentials"])
    return cleaned


def _tag_names(tags: Any) -> list[str]:
    names: set[str] = set()
    for tag in tags or []:
        if isinstance(tag, Mapping) and tag.get("name"):
            names.add(str(tag["name"]))
    return sorted(names)


def normalize(record: WorkflowDefinition | Mapping[str, Any]) -> WorkflowDefinition:
    """
    Reduce a workflow record to its environment-portable canonical form.

    Args:
        record: Local definition, remote record, or raw API/file mapping

    Returns:
        A new WorkflowDefinition without ids, runtime state or tag ids.
        Tags are reduced to their names, de-duplicated and sorted.

    Raises:
        pydantic.ValidationError: If a raw mapping is not a valid workflow
    """
    data = _as_mapping(record)

    canonical = {k: v for k, v in data.items() if k not in WORKFLOW_RUNTIME_FIELDS}
    canonical["nodes"] = [_normalize_node(node) for node in data.get("nodes") or []]
    canonical["connections"] = data.get("connections") or {}
    canonical["settings"] = data.get("settings") or {}
    canonical["tags"] = [{"name": name} for name in _tag_names(data.get("tags"))]

    return WorkflowDefinition.model_validate(canonical)


def to_storage(record: WorkflowDefinition | Mapping[str, Any]) -> dict[str, Any]:
    """Return the JSON-ready canonical mapping written to a workflow file."""
    return normalize(record).model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "NODE_RUNTIME_FIELDS",
    "WORKFLOW_RUNTIME_FIELDS",
    "normalize",
    "to_storage",
]
