"""
Tests for the diff engine.

Tests cover:
- Category selection from tags
- Structural comparison messages
- Diff symmetry and runtime-field blindness
- Remote-only detection with category filtering
- The Invoice scenario (3 local nodes vs 4 remote nodes, one renamed)
"""

from __future__ import annotations

import pytest

from conftest import make_node, make_workflow
from n8nsync.core.config.models import DEFAULT_CATEGORIES
from n8nsync.core.workflows.diff import (
    compare_workflows,
    determine_category,
    diff_workflows,
    find_remote_only,
)
from n8nsync.core.workflows.models import DiffStatus, RemoteWorkflow, WorkflowDefinition


def _remote(workflow_id: str, data: dict, **extra) -> RemoteWorkflow:
    tags = [{"id": f"tag-{t['name']}", "name": t["name"]} for t in data.get("tags", [])]
    return RemoteWorkflow.model_validate({**data, "id": workflow_id, "tags": tags, **extra})


class TestDetermineCategory:
    """Tests for determine_category()."""

    def test_first_configured_category_wins(self) -> None:
        assert determine_category(["shared", "business"], DEFAULT_CATEGORIES) == "business"

    def test_case_insensitive(self) -> None:
        assert determine_category(["Management"], DEFAULT_CATEGORIES) == "management"

    def test_no_category_tag(self) -> None:
        assert determine_category(["experimental"], DEFAULT_CATEGORIES) is None
        assert determine_category([], DEFAULT_CATEGORIES) is None


class TestCompareWorkflows:
    """Tests for compare_workflows()."""

    def test_identical(self) -> None:
        wf = WorkflowDefinition.model_validate(make_workflow("X"))

        assert compare_workflows(wf, wf) == []

    def test_name_difference(self) -> None:
        a = WorkflowDefinition.model_validate(make_workflow("A"))
        b = WorkflowDefinition.model_validate(make_workflow("B"))

        assert compare_workflows(a, b) == ['Name: "A" vs "B"']

    def test_type_and_disabled_differences(self) -> None:
        local = WorkflowDefinition.model_validate(
            make_workflow("X", [make_node("Step", "n8n-nodes-base.set", disabled=True)])
        )
        remote = WorkflowDefinition.model_validate(
            make_workflow("X", [make_node("Step", "n8n-nodes-base.code")])
        )

        assert compare_workflows(local, remote) == [
            'Node "Step" type: n8n-nodes-base.set vs n8n-nodes-base.code',
            'Node "Step" disabled: True vs False',
        ]

    def test_absent_disabled_equals_false(self) -> None:
        local = WorkflowDefinition.model_validate(
            make_workflow("X", [make_node("Step", disabled=False)])
        )
        remote = WorkflowDefinition.model_validate(make_workflow("X", [make_node("Step")]))

        assert compare_workflows(local, remote) == []

    def test_settings_and_tags(self) -> None:
        local = WorkflowDefinition.model_validate(
            make_workflow("X", tags=["business"], settings={"timezone": "UTC"})
        )
        remote = WorkflowDefinition.model_validate(make_workflow("X", tags=["business", "prod"]))

        assert compare_workflows(local, remote) == [
            "Settings differ",
            "Tags: [business] vs [business, prod]",
        ]

    def test_parameters_are_not_compared(self) -> None:
        local = WorkflowDefinition.model_validate(
            make_workflow("X", [make_node("Step", parameters={"value": 1})])
        )
        remote = WorkflowDefinition.model_validate(
            make_workflow("X", [make_node("Step", parameters={"value": 2})])
        )

        assert compare_workflows(local, remote) == []


class TestDiffWorkflows:
    """Tests for diff_workflows()."""

    def test_no_remote_is_local_only(self) -> None:
        local = WorkflowDefinition.model_validate(make_workflow("X"))

        result = diff_workflows(local, None, path="workflows/business/X.json")

        assert result.status == DiffStatus.LOCAL_ONLY
        assert result.differences == ["File: workflows/business/X.json"]

    def test_same_record_both_sides_is_identical(self) -> None:
        """diff(X, X) is always identical."""
        remote = _remote(
            "wf-1",
            make_workflow("X", [make_node("A", id="n1", webhookId="h1")], tags=["shared"]),
            active=True,
            versionId="v9",
        )

        result = diff_workflows(remote, remote)

        assert result.status == DiffStatus.IDENTICAL
        assert result.is_identical
        assert result.remote_id == "wf-1"

    def test_runtime_fields_never_differ(self) -> None:
        local = WorkflowDefinition.model_validate(make_workflow("X", [make_node("A")], active=True))
        remote = _remote(
            "wf-1",
            make_workflow("X", [make_node("A", id="n1")]),
            active=False,
            pinData={"A": []},
            updatedAt="2024-05-01T00:00:00.000Z",
        )

        assert diff_workflows(local, remote).status == DiffStatus.IDENTICAL

    def test_invoice_scenario(self) -> None:
        """3 local nodes vs 4 remote nodes with one node renamed."""
        local = WorkflowDefinition.model_validate(
            make_workflow(
                "Invoice",
                [make_node("Webhook"), make_node("Build Invoice"), make_node("Send Email")],
                tags=["business"],
            )
        )
        remote = _remote(
            "wf-9",
            make_workflow(
                "Invoice",
                [
                    make_node("Webhook", id="n1"),
                    make_node("Create Invoice", id="n2"),
                    make_node("Send Email", id="n3"),
                    make_node("Log", id="n4"),
                ],
                tags=["business"],
            ),
        )

        result = diff_workflows(local, remote, path="workflows/business/Invoice.json")

        assert result.status == DiffStatus.MODIFIED
        assert "Nodes: 3 vs 4" in result.differences
        assert 'Node added locally: "Build Invoice"' in result.differences
        assert 'Node added remotely: "Create Invoice"' in result.differences
        assert 'Node added remotely: "Log"' in result.differences


class TestFindRemoteOnly:
    """Tests for find_remote_only()."""

    @pytest.fixture
    def records(self) -> list[RemoteWorkflow]:
        return [
            _remote("wf-1", make_workflow("Invoice", tags=["business"])),
            _remote("wf-2", make_workflow("Cleanup", tags=["Management"])),
            _remote("wf-3", make_workflow("Playground", tags=["experimental"])),
            _remote("wf-4", make_workflow("Local", tags=["shared"])),
        ]

    def test_reports_unmatched_categorized_records(self, records) -> None:
        results = find_remote_only(records, {"Local"}, DEFAULT_CATEGORIES)

        assert [r.subject_name for r in results] == ["Invoice", "Cleanup"]
        assert all(r.status == DiffStatus.REMOTE_ONLY for r in results)
        assert results[1].differences == ["Category: management", "ID: wf-2"]

    def test_uncategorized_records_never_appear(self, records) -> None:
        results = find_remote_only(records, set(), DEFAULT_CATEGORIES, category="business")

        assert [r.subject_name for r in results] == ["Invoice"]
        assert "Playground" not in {r.subject_name for r in find_remote_only(records, set(), DEFAULT_CATEGORIES)}

    def test_name_filter(self, records) -> None:
        results = find_remote_only(records, set(), DEFAULT_CATEGORIES, name="Cleanup")

        assert [r.remote_id for r in results] == ["wf-2"]
