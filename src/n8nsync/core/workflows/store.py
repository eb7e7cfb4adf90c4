"""
Local workflow storage.

Workflows live in source control as one JSON file per workflow:

    <project>/<workflows_dir>/<category>/<sanitized-name>.json

The category is the first recognized category tag of the workflow. The file
content is always the canonical form (see ``normalize``), written with
2-space indentation and a trailing newline so diffs stay clean.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from n8nsync.core.config.models import SyncSettings
from n8nsync.core.n8n.exceptions import WorkflowValidationError
from n8nsync.core.workflows.models import WorkflowDefinition
from n8nsync.core.workflows.normalize import to_storage

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_name(name: str) -> str:
    """Turn a workflow name into a file stem ("Send Invoice!" -> "Send_Invoice_")."""
    return _UNSAFE_CHARS.sub("_", name)


@dataclass
class ValidationReport:
    """Result of validating every local workflow file."""

    valid: list[Path] = field(default_factory=list)
    invalid: list[WorkflowValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.invalid


class WorkflowStore:
    """
    Workflow files of one project.

    Example:
        >>> store = WorkflowStore(project_dir, settings)
        >>> path = store.save(remote_record, "business")
        >>> store.load(path).name
        'Invoice'
    """

    def __init__(self, project_dir: Path, settings: SyncSettings) -> None:
        self.project_dir = project_dir
        self.settings = settings

    @property
    def workflows_dir(self) -> Path:
        return self.project_dir / self.settings.workflows_dir

    def category_dir(self, category: str) -> Path:
        return self.workflows_dir / category

    def path_for(self, name: str, category: str) -> Path:
        return self.category_dir(category) / f"{sanitize_name(name)}.json"

    def relative(self, path: Path) -> str:
        """Path relative to the project root when possible, for display."""
        try:
            return str(path.resolve().relative_to(self.project_dir.resolve()))
        except ValueError:
            return str(path)

    def save(self, workflow: WorkflowDefinition, category: str) -> Path:
        """
        Write the canonical form of ``workflow`` under ``category``.

        Returns:
            Path of the written file
        """
        path = self.path_for(workflow.name, category)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(to_storage(workflow), indent=2, ensure_ascii=False) + "\n"
        path.write_text(content, encoding="utf-8")
        logger.info("Saved workflow %r to %s", workflow.name, path)
        return path

    def load(self, path: Path) -> WorkflowDefinition:
        """
        Read and validate one workflow file.

        The definition is returned as written; callers normalize it when
        they need the canonical form.

        Raises:
            WorkflowValidationError: If the file is unreadable, not JSON, or
                not a valid workflow
        """
        display = self.relative(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise WorkflowValidationError(display, [f"cannot read file: {e.strerror or e}"]) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise WorkflowValidationError(display, [f"invalid JSON: {e}"]) from e

        if not isinstance(data, dict):
            raise WorkflowValidationError(display, ["expected a JSON object"])

        try:
            return WorkflowDefinition.model_validate(data)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or 'workflow'}: {err['msg']}"
                for err in e.errors()
            ]
            raise WorkflowValidationError(display, errors) from e

    def find_files(self, category: str | None = None) -> list[Path]:
        """
        List workflow files, sorted by category order then file name.

        Args:
            category: Restrict to one category directory

        Returns:
            Existing *.json files under the recognized category directories
        """
        if not self.workflows_dir.is_dir():
            logger.warning("Workflows directory not found: %s", self.workflows_dir)
            return []

        categories = [category] if category else list(self.settings.categories)
        files: list[Path] = []
        for name in categories:
            directory = self.category_dir(name)
            if directory.is_dir():
                files.extend(sorted(p for p in directory.glob("*.json") if p.is_file()))
        return files

    def resolve_target(self, target: str | None) -> list[Path]:
        """
        Turn a command-line target into workflow files.

        Args:
            target: A .json file path (absolute or relative to the project
                root), a category name, or None / "all" for every workflow

        Returns:
            Files to process
        """
        if not target or target == "all":
            return self.find_files()
        if target.endswith(".json"):
            path = Path(target)
            return [path if path.is_absolute() else self.project_dir / path]
        return self.find_files(target)

    def validate_all(self) -> ValidationReport:
        """Load every workflow file and collect the ones that fail."""
        report = ValidationReport()
        for path in self.find_files():
            try:
                self.load(path)
            except WorkflowValidationError as e:
                report.invalid.append(e)
            else:
                report.valid.append(path)
        return report


__all__ = ["ValidationReport", "WorkflowStore", "sanitize_name"]
