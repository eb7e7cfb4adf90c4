"""
Deploy service: push local workflow files to an n8n instance.

Each file goes through the same pipeline:

    load → (dry run: stop) → lookup by name
        found  → fetch full record → reconcile ids → update → tags
        absent → create inactive → tags → activate (policy)

A workflow listed by name that has vanished by the time it is fetched or
updated is a lookup mismatch; it is created anew unless
``SyncSettings.recreate_missing`` is off.

Files are independent: a failure is recorded as that file's outcome and the
batch carries on. The remote calls of one file are not atomic; a failure
after the create/update leaves the workflow written but untagged, and the
outcome says so.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path

from n8nsync.core.config.models import ActivationPolicy, SyncSettings
from n8nsync.core.deploy.models import (
    BatchResult,
    DeployOutcome,
    DeployStatus,
    FailureKind,
    LookupState,
)
from n8nsync.core.n8n.client import WorkflowApi
from n8nsync.core.n8n.exceptions import (
    N8nError,
    NotFoundError,
    TransportError,
    WorkflowValidationError,
)
from n8nsync.core.workflows.models import RemoteWorkflow, WorkflowDefinition
from n8nsync.core.workflows.normalize import normalize
from n8nsync.core.workflows.reconcile import reconcile
from n8nsync.core.workflows.store import WorkflowStore
from n8nsync.core.workflows.tags import TagResolver

logger = logging.getLogger(__name__)

INACTIVE_NOTE = "inactive, verify before activation"
UNTAGGED_NOTE = "workflow was written but its tags were not assigned"

OutcomeCallback = Callable[[DeployOutcome], None]


@dataclass
class Lookup:
    """Where a workflow stands on the remote, by name."""

    state: LookupState
    record: RemoteWorkflow | None = None
    was_active: bool = False


def _credential_notes(definition: WorkflowDefinition) -> list[str]:
    notes = []
    for node in definition.nodes:
        for slot, ref in (node.credentials or {}).items():
            notes.append(f"credential needs manual setup: {node.name}/{slot}: {ref.name}")
    return notes


class DeployService:
    """
    Create-or-update deployment of workflow files.

    Example:
        >>> service = DeployService(client, store, settings)
        >>> result = service.deploy_batch(store.find_files(), parallel=True)
        >>> result.success
        True
    """

    def __init__(
        self,
        api: WorkflowApi,
        store: WorkflowStore,
        settings: SyncSettings,
        tag_resolver: TagResolver | None = None,
    ) -> None:
        self.api = api
        self.store = store
        self.settings = settings
        self.tag_resolver = tag_resolver or TagResolver(api.list_tags, api.create_tag)

    # ------------------------------------------------------------------
    # Single file
    # ------------------------------------------------------------------

    def deploy_file(self, path: Path, dry_run: bool = False) -> DeployOutcome:
        """
        Deploy one workflow file.

        Never raises for validation or remote errors; they are returned as a
        FAILED outcome.

        Args:
            path: Workflow file
            dry_run: Report the intended action without contacting n8n
        """
        display = self.store.relative(path)

        try:
            source = self.store.load(path)
        except WorkflowValidationError as e:
            return DeployOutcome(
                path=display,
                status=DeployStatus.FAILED,
                failure=FailureKind.VALIDATION,
                message=str(e),
            )

        if dry_run:
            return DeployOutcome(
                path=display,
                workflow_name=source.name,
                status=DeployStatus.PLANNED,
                message=f"Would deploy: {display}",
            )

        try:
            return self._deploy(source, display)
        except N8nError as e:
            return self._failed(display, source.name, e)

    def lookup(self, name: str) -> Lookup:
        """Find the remote workflow named ``name`` and fetch its full record."""
        summary = next((s for s in self.api.list_workflows() if s.name == name), None)
        if summary is None:
            return Lookup(LookupState.ABSENT)

        try:
            record = self.api.get_workflow(summary.id)
        except NotFoundError:
            logger.warning("Workflow %r (id %s) listed but not found", name, summary.id)
            return Lookup(LookupState.MISMATCH, was_active=summary.active)

        return Lookup(LookupState.FOUND, record=record, was_active=record.active)

    def _deploy(self, source: WorkflowDefinition, display: str) -> DeployOutcome:
        lookup = self.lookup(source.name)

        if lookup.state is LookupState.FOUND and lookup.record is not None:
            outcome = self._update(source, lookup.record, display)
            if outcome is not None:
                return outcome
            lookup = Lookup(LookupState.MISMATCH, was_active=lookup.was_active)

        if lookup.state is LookupState.MISMATCH and not self.settings.recreate_missing:
            return DeployOutcome(
                path=display,
                workflow_name=source.name,
                status=DeployStatus.FAILED,
                failure=FailureKind.LOOKUP,
                message=(
                    f"Workflow {source.name!r} disappeared from the remote during deploy "
                    "and recreation is disabled"
                ),
            )

        return self._create(source, display, lookup)

    def _update(
        self, source: WorkflowDefinition, existing: RemoteWorkflow, display: str
    ) -> DeployOutcome | None:
        """Update ``existing``; None when it vanished before the update landed."""
        result = reconcile(source, existing)

        try:
            updated = self.api.update_workflow(existing.id, result.definition)
        except NotFoundError:
            logger.warning("Workflow %r (id %s) vanished before update", source.name, existing.id)
            return None

        notes = [
            f"credential needs manual setup: {entry}" for entry in result.unresolved_credentials
        ]
        for note in notes:
            logger.warning("%s: %s", source.name, note)

        try:
            tag_ids = self._assign_tags(updated.id, source)
        except N8nError as e:
            return self._failed(display, source.name, e, workflow_id=updated.id, notes=[UNTAGGED_NOTE])

        logger.info("Updated workflow %r (id %s)", source.name, updated.id)
        return DeployOutcome(
            path=display,
            workflow_name=source.name,
            status=DeployStatus.UPDATED,
            workflow_id=updated.id,
            message=f"Updated: {display} (ID: {updated.id})",
            notes=notes,
            activated=updated.active,
            tag_ids=tag_ids,
        )

    def _create(self, source: WorkflowDefinition, display: str, lookup: Lookup) -> DeployOutcome:
        recreated = lookup.state is LookupState.MISMATCH
        submission = normalize(source).model_copy(
            update={"active": False, "static_data": source.static_data}
        )
        created = self.api.create_workflow(submission)

        notes = _credential_notes(submission)
        try:
            tag_ids = self._assign_tags(created.id, source)
        except N8nError as e:
            return self._failed(display, source.name, e, workflow_id=created.id, notes=[UNTAGGED_NOTE])

        activated = False
        if self._should_activate(source, lookup):
            try:
                self.api.activate_workflow(created.id)
            except N8nError as e:
                return self._failed(
                    display,
                    source.name,
                    e,
                    workflow_id=created.id,
                    notes=["workflow was created inactive; activation failed"],
                )
            activated = True
        else:
            notes.append(INACTIVE_NOTE)
            logger.warning("Workflow %r created inactive", source.name)

        verb = "Recreated" if recreated else "Created"
        logger.info("%s workflow %r (id %s)", verb, source.name, created.id)
        return DeployOutcome(
            path=display,
            workflow_name=source.name,
            status=DeployStatus.CREATED,
            workflow_id=created.id,
            message=f"{verb}: {display} (ID: {created.id})",
            notes=notes,
            recreated=recreated,
            activated=activated,
            tag_ids=tag_ids,
        )

    def _should_activate(self, source: WorkflowDefinition, lookup: Lookup) -> bool:
        if self.settings.activation is ActivationPolicy.NEVER:
            return False
        if source.active:
            return True
        return (
            lookup.state is LookupState.MISMATCH
            and self.settings.reactivate_recreated
            and lookup.was_active
        )

    def _assign_tags(self, workflow_id: str, source: WorkflowDefinition) -> list[str]:
        if not source.tags:
            return []
        tag_ids = self.tag_resolver.resolve(source.tag_names)
        self.api.set_workflow_tags(workflow_id, tag_ids)
        return tag_ids

    def _failed(
        self,
        display: str,
        name: str,
        error: N8nError,
        workflow_id: str | None = None,
        notes: list[str] | None = None,
    ) -> DeployOutcome:
        kind = FailureKind.TRANSPORT if isinstance(error, TransportError) else FailureKind.REMOTE
        logger.error("Deploy of %s failed: %s", display, error)
        return DeployOutcome(
            path=display,
            workflow_name=name,
            status=DeployStatus.FAILED,
            workflow_id=workflow_id,
            failure=kind,
            message=f"Failed: {display} - {error}",
            notes=notes or [],
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def _guarded_deploy(self, path: Path, dry_run: bool) -> DeployOutcome:
        """deploy_file, with any unexpected exception turned into a FAILED outcome."""
        try:
            return self.deploy_file(path, dry_run=dry_run)
        except Exception as e:
            logger.exception("Unexpected error deploying %s", path)
            display = self.store.relative(path)
            return DeployOutcome(
                path=display,
                status=DeployStatus.FAILED,
                failure=FailureKind.UNEXPECTED,
                message=f"Failed: {display} - {e}",
            )

    def deploy_batch(
        self,
        paths: Sequence[Path],
        *,
        dry_run: bool = False,
        parallel: bool = False,
        on_outcome: OutcomeCallback | None = None,
    ) -> BatchResult:
        """
        Deploy several files, sequentially or on a thread pool.

        Sequential mode keeps input order. Parallel mode starts every file at
        once (bounded by ``SyncSettings.max_workers``) and records outcomes
        as they complete; a failing file never cancels the others.

        Args:
            paths: Workflow files
            dry_run: Report intended actions only
            parallel: Run the per-file pipelines concurrently
            on_outcome: Called with each outcome as it is recorded

        Returns:
            BatchResult with one outcome per file
        """
        result = BatchResult(parallel=parallel and len(paths) > 1, dry_run=dry_run)
        lock = threading.Lock()

        def record(outcome: DeployOutcome) -> None:
            with lock:
                result.outcomes.append(outcome)
                if on_outcome is not None:
                    on_outcome(outcome)

        if not result.parallel:
            for path in paths:
                record(self._guarded_deploy(path, dry_run))
            return result

        max_workers = min(self.settings.max_workers or len(paths), len(paths))
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(self._guarded_deploy, path, dry_run) for path in paths]
            for future in as_completed(futures):
                record(future.result())

        return result


__all__ = ["DeployService", "INACTIVE_NOTE", "Lookup", "UNTAGGED_NOTE"]
