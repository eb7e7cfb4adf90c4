"""
Data models for the deploy service.

Each workflow file ends in exactly one ``DeployOutcome``; a batch collects
them in a ``BatchResult``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DeployStatus(str, Enum):
    """Terminal state of one file's deployment."""

    CREATED = "created"
    UPDATED = "updated"
    PLANNED = "planned"
    FAILED = "failed"


class FailureKind(str, Enum):
    """Why a deployment failed."""

    VALIDATION = "validation"
    """The local file could not be loaded; the remote was never contacted."""

    LOOKUP = "lookup"
    """The workflow found by name vanished and recreation is disabled."""

    REMOTE = "remote"
    """n8n answered with an error status."""

    TRANSPORT = "transport"
    """n8n did not answer."""

    UNEXPECTED = "unexpected"
    """The pipeline raised an error it does not handle."""


class LookupState(str, Enum):
    """Result of looking a workflow up by name."""

    FOUND = "found"
    ABSENT = "absent"
    MISMATCH = "mismatch"
    """Listed by name, but the record was gone when fetched or updated."""


class DeployOutcome(BaseModel):
    """
    Result of deploying one workflow file.

    Example:
        >>> outcome.status
        <DeployStatus.CREATED: 'created'>
        >>> outcome.notes
        ['inactive, verify before activation']
    """

    path: str = Field(description="Workflow file, relative to the project root")
    workflow_name: str | None = Field(default=None, description="Name from the file")
    status: DeployStatus
    workflow_id: str | None = Field(default=None, description="Remote id after deploy")
    failure: FailureKind | None = None
    message: str = Field(default="", description="Human-readable result")
    notes: list[str] = Field(default_factory=list, description="Follow-ups for the operator")
    recreated: bool = Field(
        default=False,
        description="Created because the record found by name had vanished",
    )
    activated: bool = False
    tag_ids: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status != DeployStatus.FAILED


class BatchResult(BaseModel):
    """Outcomes of a deploy batch, in completion order."""

    outcomes: list[DeployOutcome] = Field(default_factory=list)
    parallel: bool = False
    dry_run: bool = False

    def _count(self, status: DeployStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def created(self) -> int:
        return self._count(DeployStatus.CREATED)

    @property
    def updated(self) -> int:
        return self._count(DeployStatus.UPDATED)

    @property
    def planned(self) -> int:
        return self._count(DeployStatus.PLANNED)

    @property
    def failed(self) -> int:
        return self._count(DeployStatus.FAILED)

    @property
    def succeeded(self) -> int:
        return len(self.outcomes) - self.failed

    @property
    def success(self) -> bool:
        """True when no file failed."""
        return self.failed == 0

    def summary(self) -> str:
        parts = []
        if self.created:
            parts.append(f"{self.created} created")
        if self.updated:
            parts.append(f"{self.updated} updated")
        if self.planned:
            parts.append(f"{self.planned} planned")
        if self.failed:
            parts.append(f"{self.failed} failed")
        return ", ".join(parts) or "nothing deployed"


__all__ = [
    "BatchResult",
    "DeployOutcome",
    "DeployStatus",
    "FailureKind",
    "LookupState",
]
