"""
Tests for the diff service against the in-memory API.
"""

from __future__ import annotations

from conftest import make_node, make_workflow
from n8nsync.core.diff import DiffService
from n8nsync.core.workflows.models import DiffStatus


class TestDiffService:
    """Tests for DiffService.run()."""

    def test_groups_results(self, fake_api, store, settings, write_workflow) -> None:
        same = write_workflow("business", make_workflow("Same", tags=["business"]))
        changed = write_workflow("business", make_workflow("Changed", tags=["business"]))
        new = write_workflow("shared", make_workflow("New", tags=["shared"]))
        fake_api.seed("Same", [make_node("Start")], tags=["business"], active=True)
        fake_api.seed("Changed", [make_node("Start"), make_node("Extra")], tags=["business"])
        remote_id = fake_api.seed("Remote", tags=["management"])
        fake_api.seed("Scratch", tags=["experimental"])

        report = DiffService(fake_api, store, settings).run([same, changed, new])

        assert [r.subject_name for r in report.identical] == ["Same"]
        assert [r.subject_name for r in report.modified] == ["Changed"]
        assert report.modified[0].differences == ["Nodes: 1 vs 2", 'Node added remotely: "Extra"']
        assert [r.subject_name for r in report.local_only] == ["New"]
        assert report.local_only[0].differences == ["File: workflows/shared/New.json"]
        assert [(r.subject_name, r.remote_id) for r in report.remote_only] == [
            ("Remote", remote_id)
        ]
        assert not report.in_sync

    def test_unloadable_file_is_local_only(self, fake_api, store, settings, write_workflow) -> None:
        bad = write_workflow("shared", {"nodes": "nope"}, "Broken.json")

        report = DiffService(fake_api, store, settings).run([bad])

        (result,) = report.local_only
        assert result.subject_name == "Broken"
        assert result.differences[0] == "File: workflows/shared/Broken.json"
        assert result.differences[1].startswith("Error: Invalid workflow file")

    def test_category_filter_on_remote_only(self, fake_api, store, settings) -> None:
        """An uncategorized or other-category record never shows up."""
        fake_api.seed("Cleanup", tags=["management"])
        fake_api.seed("Playground", tags=["experimental"])
        fake_api.seed("Billing", tags=["business"])

        report = DiffService(fake_api, store, settings).run([], category="business")

        assert [r.subject_name for r in report.remote_only] == ["Billing"]

    def test_name_filter_skips_other_fetches(self, fake_api, store, settings) -> None:
        fake_api.seed("Cleanup", tags=["management"])
        wanted = fake_api.seed("Billing", tags=["business"])

        report = DiffService(fake_api, store, settings).run([], name="Billing")

        assert [r.remote_id for r in report.remote_only] == [wanted]
        assert fake_api.calls_to("get_workflow") == [wanted]

    def test_single_list_call(self, fake_api, store, settings, write_workflow) -> None:
        paths = [write_workflow("shared", make_workflow(f"W{i}")) for i in range(3)]

        DiffService(fake_api, store, settings).run(paths)

        assert len(fake_api.calls_to("list_workflows")) == 1

    def test_everything_identical(self, fake_api, store, settings, write_workflow) -> None:
        path = write_workflow("shared", make_workflow("Only", tags=["shared"]))
        fake_api.seed("Only", [make_node("Start")], tags=["shared"])

        report = DiffService(fake_api, store, settings).run([path])

        assert report.in_sync
        assert report.results[0].status == DiffStatus.IDENTICAL

    def test_fetch_failure_is_contained_per_file(
        self, fake_api, store, settings, write_workflow
    ) -> None:
        """A record deleted between list and fetch only affects its own file."""
        first = write_workflow("business", make_workflow("A", tags=["business"]))
        second = write_workflow("business", make_workflow("B", tags=["business"]))
        fake_api.seed("A", [make_node("Start")], tags=["business"])
        gone = fake_api.seed("B", [make_node("Start")], tags=["business"])
        fake_api.vanish_on_get.add(gone)

        report = DiffService(fake_api, store, settings).run([first, second])

        assert [r.subject_name for r in report.identical] == ["A"]
        (result,) = report.local_only
        assert result.subject_name == "B"
        assert result.differences[0] == "File: workflows/business/B.json"
        assert result.differences[1].startswith("Error: ")
        assert "not found" in result.differences[1]

    def test_vanished_remote_only_candidate_is_skipped(self, fake_api, store, settings) -> None:
        gone = fake_api.seed("Cleanup", tags=["management"])
        fake_api.seed("Billing", tags=["business"])
        fake_api.vanish_on_get.add(gone)

        report = DiffService(fake_api, store, settings).run([])

        assert [r.subject_name for r in report.remote_only] == ["Billing"]
