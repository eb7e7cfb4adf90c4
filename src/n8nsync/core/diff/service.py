"""
Diff service: compare local workflow files with a remote n8n instance.

Matching is by workflow name. Local files are diffed against the full remote
record of the same name; afterwards remote workflows that carry a recognized
category tag but have no local file are reported as remote-only.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, Field

from n8nsync.core.config.models import SyncSettings
from n8nsync.core.n8n.client import WorkflowApi
from n8nsync.core.n8n.exceptions import N8nError, NotFoundError, WorkflowValidationError
from n8nsync.core.workflows.diff import diff_workflows, find_remote_only
from n8nsync.core.workflows.models import DiffResult, DiffStatus, WorkflowSummary
from n8nsync.core.workflows.store import WorkflowStore

logger = logging.getLogger(__name__)


class DiffReport(BaseModel):
    """Diff results of one run, in the order they were produced."""

    results: list[DiffResult] = Field(default_factory=list)

    def _with_status(self, status: DiffStatus) -> list[DiffResult]:
        return [result for result in self.results if result.status == status]

    @property
    def modified(self) -> list[DiffResult]:
        return self._with_status(DiffStatus.MODIFIED)

    @property
    def local_only(self) -> list[DiffResult]:
        return self._with_status(DiffStatus.LOCAL_ONLY)

    @property
    def remote_only(self) -> list[DiffResult]:
        return self._with_status(DiffStatus.REMOTE_ONLY)

    @property
    def identical(self) -> list[DiffResult]:
        return self._with_status(DiffStatus.IDENTICAL)

    @property
    def in_sync(self) -> bool:
        """True when every compared workflow is identical."""
        return all(result.is_identical for result in self.results)


class DiffService:
    """
    Compare workflow files against a remote instance.

    Example:
        >>> report = DiffService(client, store, settings).run(store.find_files())
        >>> [r.subject_name for r in report.modified]
        ['Invoice']
    """

    def __init__(self, api: WorkflowApi, store: WorkflowStore, settings: SyncSettings) -> None:
        self.api = api
        self.store = store
        self.settings = settings

    def run(
        self,
        paths: Sequence[Path],
        *,
        category: str | None = None,
        name: str | None = None,
    ) -> DiffReport:
        """
        Diff ``paths`` and look for remote-only workflows.

        Args:
            paths: Local workflow files to compare
            category: Only report remote-only workflows of this category
            name: Only report a remote-only workflow with this name

        Returns:
            DiffReport with one result per file plus the remote-only ones

        Raises:
            N8nError: If the remote workflow list cannot be fetched
        """
        summaries = self.api.list_workflows()
        by_name: dict[str, WorkflowSummary] = {}
        for summary in summaries:
            by_name.setdefault(summary.name, summary)

        report = DiffReport()
        for path in paths:
            report.results.append(self._diff_file(path, by_name))

        local_names = {result.subject_name for result in report.results}
        candidates = [
            s for s in summaries if s.name not in local_names and (name is None or s.name == name)
        ]
        records = []
        for summary in candidates:
            try:
                records.append(self.api.get_workflow(summary.id))
            except NotFoundError:
                logger.warning("Workflow %r (id %s) listed but not found", summary.name, summary.id)
        report.results.extend(
            find_remote_only(
                records,
                local_names,
                self.settings.categories,
                category=category,
                name=name,
            )
        )

        logger.debug(
            "Diff complete: %d modified, %d local-only, %d remote-only, %d identical",
            len(report.modified),
            len(report.local_only),
            len(report.remote_only),
            len(report.identical),
        )
        return report

    def _diff_file(self, path: Path, by_name: dict[str, WorkflowSummary]) -> DiffResult:
        display = self.store.relative(path)
        try:
            local = self.store.load(path)
        except WorkflowValidationError as e:
            return DiffResult(
                subject_name=path.stem,
                status=DiffStatus.LOCAL_ONLY,
                differences=[f"File: {display}", f"Error: {e}"],
                path=display,
            )

        summary = by_name.get(local.name)
        if summary is None:
            return diff_workflows(local, None, path=display)

        try:
            remote = self.api.get_workflow(summary.id)
        except N8nError as e:
            logger.warning("Could not fetch remote workflow %r: %s", local.name, e)
            return DiffResult(
                subject_name=local.name,
                status=DiffStatus.LOCAL_ONLY,
                differences=[f"File: {display}", f"Error: {e}"],
                path=display,
            )
        return diff_workflows(local, remote, path=display)


__all__ = ["DiffReport", "DiffService"]
