"""
Pull service: save remote workflows as canonical local files.

Only workflows tagged with a recognized category are pulled; the category
decides the directory the file lands in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from n8nsync.core.config.models import SyncSettings
from n8nsync.core.n8n.client import WorkflowApi
from n8nsync.core.n8n.exceptions import N8nError
from n8nsync.core.workflows.diff import determine_category
from n8nsync.core.workflows.store import WorkflowStore

logger = logging.getLogger(__name__)


@dataclass
class PulledWorkflow:
    name: str
    category: str
    path: Path


@dataclass
class SkippedWorkflow:
    name: str
    reason: str


@dataclass
class FailedPull:
    name: str
    error: str


@dataclass
class PullResult:
    """What a pull wrote, skipped and failed on."""

    pulled: list[PulledWorkflow] = field(default_factory=list)
    skipped: list[SkippedWorkflow] = field(default_factory=list)
    failed: list[FailedPull] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


class PullService:
    """
    Fetch every remote workflow and store the categorized ones.

    Example:
        >>> result = PullService(client, store, settings).pull(category="business")
        >>> [p.name for p in result.pulled]
        ['Invoice']
    """

    def __init__(self, api: WorkflowApi, store: WorkflowStore, settings: SyncSettings) -> None:
        self.api = api
        self.store = store
        self.settings = settings

    def pull(self, category: str | None = None) -> PullResult:
        """
        Pull remote workflows into the workflows directory.

        A workflow that fails to fetch or save is recorded and the pull
        moves on to the next one.

        Args:
            category: Only pull workflows of this category

        Raises:
            N8nError: If the workflow list cannot be fetched
        """
        result = PullResult()

        for summary in self.api.list_workflows():
            try:
                record = self.api.get_workflow(summary.id)
            except N8nError as e:
                logger.error("Failed to fetch workflow %r: %s", summary.name, e)
                result.failed.append(FailedPull(summary.name, str(e)))
                continue

            record_category = determine_category(record.tag_names, self.settings.categories)
            if record_category is None:
                result.skipped.append(SkippedWorkflow(record.name, "no category tag"))
                continue
            if category is not None and record_category != category:
                result.skipped.append(
                    SkippedWorkflow(record.name, f"category: {record_category}")
                )
                continue

            try:
                path = self.store.save(record, record_category)
            except OSError as e:
                logger.error("Failed to save workflow %r: %s", record.name, e)
                result.failed.append(FailedPull(record.name, str(e)))
                continue

            result.pulled.append(PulledWorkflow(record.name, record_category, path))

        return result


__all__ = ["FailedPull", "PullResult", "PullService", "PulledWorkflow", "SkippedWorkflow"]
