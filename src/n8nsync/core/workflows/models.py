"""
Data models for workflow definitions and remote workflow records.

Workflows are modeled the way the n8n public API returns them, with the
camelCase JSON keys exposed through field aliases. Unknown keys are kept
(``extra="allow"``) so node options that n8n adds over time survive a
pull/deploy round trip.

Identity rules:
    - a workflow is identified across environments by ``name``
    - a node is identified within a workflow by ``name``
    - a tag is identified across environments by ``name``

Ids (workflow, node, webhook, credential, tag) are environment-local and
are never used for lookup.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CredentialRef(BaseModel):
    """Reference from a node credential slot to a named credential."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    name: str | None = None


class Node(BaseModel):
    """
    A single node of a workflow.

    ``id`` and ``webhook_id`` are assigned by the n8n instance and only
    appear on remote records (or on a reconciled definition about to be
    submitted as an update).
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    name: str = Field(min_length=1)
    type: str
    type_version: int | float | None = Field(default=None, alias="typeVersion")
    position: list[int | float] | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    credentials: dict[str, CredentialRef] | None = None
    webhook_id: str | None = Field(default=None, alias="webhookId")
    disabled: bool | None = None
    notes: str | None = None


class TagRef(BaseModel):
    """Tag reference by name, as stored in source control."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)


class Tag(TagRef):
    """Tag as known to one n8n instance."""

    id: str


class WorkflowDefinition(BaseModel):
    """
    Workflow definition as kept in source control.

    The canonical (stored) form never carries ``id`` or ``active``; ``id``
    is only set on a reconciled definition about to be submitted as an
    update, and ``active`` may be set by hand to request activation when
    the workflow is first created.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | None = None
    name: str = Field(min_length=1)
    active: bool | None = None
    nodes: list[Node] = Field(default_factory=list)
    connections: dict[str, Any] = Field(default_factory=dict)
    settings: dict[str, Any] = Field(default_factory=dict)
    static_data: dict[str, Any] | None = Field(default=None, alias="staticData")
    tags: list[TagRef] = Field(default_factory=list)

    @field_validator("connections", "settings", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        # "tags": ["prod"] is shorthand for [{"name": "prod"}]
        if value is None:
            return []
        if isinstance(value, list):
            return [{"name": tag} if isinstance(tag, str) else tag for tag in value]
        return value

    @field_validator("nodes")
    @classmethod
    def _unique_node_names(cls, nodes: list[Node]) -> list[Node]:
        seen: set[str] = set()
        for node in nodes:
            if node.name in seen:
                raise ValueError(f'duplicate node name "{node.name}"')
            seen.add(node.name)
        return nodes

    @property
    def tag_names(self) -> list[str]:
        """Tag names in declaration order."""
        return [tag.name for tag in self.tags]

    def node_map(self) -> dict[str, Node]:
        """Nodes keyed by name."""
        return {node.name: node for node in self.nodes}


class RemoteWorkflow(WorkflowDefinition):
    """Full workflow record as returned by ``GET /workflows/{id}``."""

    id: str
    active: bool = False
    tags: list[Tag] = Field(default_factory=list)
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
    version_id: str | None = Field(default=None, alias="versionId")
    is_archived: bool | None = Field(default=None, alias="isArchived")
    trigger_count: int | None = Field(default=None, alias="triggerCount")
    pin_data: dict[str, Any] | None = Field(default=None, alias="pinData")
    meta: dict[str, Any] | None = None
    shared: Any = None


class WorkflowSummary(BaseModel):
    """Entry of the workflow list endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    active: bool = False
    tags: list[Tag] = Field(default_factory=list)
    node_count: int = 0

    @model_validator(mode="before")
    @classmethod
    def _count_nodes(cls, data: Any) -> Any:
        if isinstance(data, dict) and "node_count" not in data:
            nodes = data.get("nodes") or []
            data = {**data, "node_count": len(nodes)}
        return data

    @field_validator("tags", mode="before")
    @classmethod
    def _none_as_no_tags(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags]


class DiffStatus(str, Enum):
    """Relationship between a local definition and its remote counterpart."""

    IDENTICAL = "identical"
    MODIFIED = "modified"
    LOCAL_ONLY = "local-only"
    REMOTE_ONLY = "remote-only"


class DiffResult(BaseModel):
    """Outcome of comparing one workflow across local and remote."""

    subject_name: str
    status: DiffStatus
    differences: list[str] = Field(default_factory=list)
    path: str | None = None
    category: str | None = None
    remote_id: str | None = None

    @property
    def is_identical(self) -> bool:
        return self.status == DiffStatus.IDENTICAL


__all__ = [
    "CredentialRef",
    "DiffResult",
    "DiffStatus",
    "Node",
    "RemoteWorkflow",
    "Tag",
    "TagRef",
    "WorkflowDefinition",
    "WorkflowSummary",
]
