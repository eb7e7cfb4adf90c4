"""
Pytest configuration and shared fixtures.

Provides a temporary project layout, settings, and ``FakeN8nApi``, an
in-memory stand-in for an n8n instance that behaves like the public API:
it assigns ids on create, keeps node ids on update, stores tag assignments
and raises NotFoundError for unknown workflows.
"""

from __future__ import annotations

import itertools
import json
import threading
from pathlib import Path
from typing import Any

import pytest

from n8nsync.core.config.models import SyncSettings
from n8nsync.core.n8n.client import build_payload
from n8nsync.core.n8n.exceptions import NotFoundError
from n8nsync.core.workflows.models import (
    RemoteWorkflow,
    Tag,
    WorkflowDefinition,
    WorkflowSummary,
)
from n8nsync.core.workflows.store import WorkflowStore

# ==============================================================================
# Fake n8n API
# ==============================================================================


class FakeN8nApi:
    """
    In-memory n8n instance.

    Failure injection:
        errors: method name -> exception raised on every call of that method
        vanish_on_get: workflow ids that are listed but 404 when fetched
        vanish_on_update: workflow ids that 404 when updated
    """

    def __init__(self) -> None:
        self.workflows: dict[str, dict[str, Any]] = {}
        self.tags: dict[str, Tag] = {}
        self.calls: list[tuple[str, Any]] = []
        self.errors: dict[str, Exception] = {}
        self.vanish_on_get: set[str] = set()
        self.vanish_on_update: set[str] = set()
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    # -- helpers ---------------------------------------------------------

    def _next_id(self, prefix: str) -> str:
        with self._lock:
            return f"{prefix}{next(self._ids)}"

    def _record(self, method: str, arg: Any = None) -> None:
        with self._lock:
            self.calls.append((method, arg))
        if method in self.errors:
            raise self.errors[method]

    def _not_found(self, workflow_id: str) -> NotFoundError:
        return NotFoundError(
            f"n8n API error: workflow {workflow_id} not found",
            status_code=404,
            body='{"message":"Not Found"}',
        )

    def _store_nodes(self, nodes: list[dict[str, Any]]) -> list[dict[str, Any]]:
        stored = []
        for node in nodes:
            node = dict(node)
            node.setdefault("id", self._next_id("node-"))
            stored.append(node)
        return stored

    def calls_to(self, method: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == method]

    def seed(
        self,
        name: str,
        nodes: list[dict[str, Any]] | None = None,
        tags: list[str] | None = None,
        active: bool = False,
        **extra: Any,
    ) -> str:
        """Put a workflow on the instance directly and return its id."""
        workflow_id = self._next_id("wf-")
        self.workflows[workflow_id] = {
            "id": workflow_id,
            "name": name,
            "active": active,
            "nodes": self._store_nodes(nodes or []),
            "connections": {},
            "settings": {},
            "tags": [self.ensure_tag(t).model_dump() for t in tags or []],
            "createdAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "versionId": f"v-{workflow_id}",
            **extra,
        }
        return workflow_id

    def ensure_tag(self, name: str) -> Tag:
        for tag in self.tags.values():
            if tag.name == name:
                return tag
        tag = Tag(id=self._next_id("tag-"), name=name)
        self.tags[tag.id] = tag
        return tag

    # -- WorkflowApi -----------------------------------------------------

    def list_workflows(self) -> list[WorkflowSummary]:
        self._record("list_workflows")
        return [WorkflowSummary.model_validate(wf) for wf in list(self.workflows.values())]

    def find_workflow_by_name(self, name: str) -> WorkflowSummary | None:
        return next((s for s in self.list_workflows() if s.name == name), None)

    def get_workflow(self, workflow_id: str) -> RemoteWorkflow:
        self._record("get_workflow", workflow_id)
        if workflow_id in self.vanish_on_get or workflow_id not in self.workflows:
            raise self._not_found(workflow_id)
        return RemoteWorkflow.model_validate(self.workflows[workflow_id])

    def create_workflow(self, definition: WorkflowDefinition) -> RemoteWorkflow:
        self._record("create_workflow", definition)
        payload = build_payload(definition)
        workflow_id = self._next_id("wf-")
        self.workflows[workflow_id] = {
            **payload,
            "id": workflow_id,
            "active": False,
            "nodes": self._store_nodes(payload.get("nodes", [])),
            "tags": [],
        }
        return RemoteWorkflow.model_validate(self.workflows[workflow_id])

    def update_workflow(self, workflow_id: str, definition: WorkflowDefinition) -> RemoteWorkflow:
        self._record("update_workflow", definition)
        if workflow_id in self.vanish_on_update or workflow_id not in self.workflows:
            raise self._not_found(workflow_id)
        payload = build_payload(definition)
        current = self.workflows[workflow_id]
        self.workflows[workflow_id] = {
            **current,
            **payload,
            "nodes": self._store_nodes(payload.get("nodes", [])),
        }
        return RemoteWorkflow.model_validate(self.workflows[workflow_id])

    def set_workflow_tags(self, workflow_id: str, tag_ids: list[str]) -> None:
        self._record("set_workflow_tags", (workflow_id, list(tag_ids)))
        self.workflows[workflow_id]["tags"] = [self.tags[t].model_dump() for t in tag_ids]

    def list_tags(self) -> list[Tag]:
        self._record("list_tags")
        return list(self.tags.values())

    def create_tag(self, name: str) -> Tag:
        self._record("create_tag", name)
        tag = Tag(id=self._next_id("tag-"), name=name)
        self.tags[tag.id] = tag
        return tag

    def activate_workflow(self, workflow_id: str) -> None:
        self._record("activate_workflow", workflow_id)
        self.workflows[workflow_id]["active"] = True

    def deactivate_workflow(self, workflow_id: str) -> None:
        self._record("deactivate_workflow", workflow_id)
        self.workflows[workflow_id]["active"] = False

    # -- N8nClient extras used by the CLI --------------------------------

    def test_connection(self) -> bool:
        return "list_workflows" not in self.errors

    def close(self) -> None:
        pass

    def __enter__(self) -> FakeN8nApi:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ==============================================================================
# Sample data
# ==============================================================================


def make_node(name: str, node_type: str = "n8n-nodes-base.set", **extra: Any) -> dict[str, Any]:
    """Build a node dict as it appears in a workflow file."""
    return {
        "name": name,
        "type": node_type,
        "typeVersion": 1,
        "position": [0, 0],
        "parameters": {},
        **extra,
    }


def make_workflow(
    name: str,
    nodes: list[dict[str, Any]] | None = None,
    tags: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a workflow dict as it appears in a workflow file."""
    return {
        "name": name,
        "nodes": nodes if nodes is not None else [make_node("Start")],
        "connections": {},
        "settings": {},
        "tags": [{"name": t} for t in tags or []],
        **extra,
    }


# ==============================================================================
# Project Fixtures
# ==============================================================================


@pytest.fixture
def fake_api() -> FakeN8nApi:
    return FakeN8nApi()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary project directory.

    Creates:
    - workflows/ with one directory per default category
    - config/test.env and config/template.env
    """
    project = tmp_path / "project"
    for category in ("business", "management", "shared"):
        (project / "workflows" / category).mkdir(parents=True)

    config_dir = project / "config"
    config_dir.mkdir()
    (config_dir / "test.env").write_text(
        "N8N_API_URL=https://acme.n8n.cloud/api/v1\nN8N_API_KEY=test-key\nENVIRONMENT=test\n"
    )
    (config_dir / "template.env").write_text("N8N_API_URL=\nN8N_API_KEY=\n")
    return project


@pytest.fixture
def settings() -> SyncSettings:
    return SyncSettings()


@pytest.fixture
def store(project_dir: Path, settings: SyncSettings) -> WorkflowStore:
    return WorkflowStore(project_dir, settings)


@pytest.fixture
def write_workflow(project_dir: Path):
    """Factory fixture: write a workflow dict under workflows/<category>/."""

    def _write(category: str, data: dict[str, Any], filename: str | None = None) -> Path:
        path = project_dir / "workflows" / category / (filename or f"{data['name']}.json")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n")
        return path

    return _write


@pytest.fixture(autouse=True)
def clean_sync_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shell settings out of the tests."""
    for key in (
        "N8N_API_URL",
        "N8N_API_KEY",
        "ENVIRONMENT",
        "N8N_SYNC_WORKFLOWS_DIR",
        "N8N_SYNC_MAX_WORKERS",
        "N8N_SYNC_TIMEOUT",
        "N8N_SYNC_ACTIVATION",
    ):
        monkeypatch.delenv(key, raising=False)
