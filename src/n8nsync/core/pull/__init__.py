"""Download of remote workflows into local files."""

from n8nsync.core.pull.service import (
    FailedPull,
    PulledWorkflow,
    PullResult,
    PullService,
    SkippedWorkflow,
)

__all__ = ["FailedPull", "PullResult", "PullService", "PulledWorkflow", "SkippedWorkflow"]
