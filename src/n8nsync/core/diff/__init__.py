"""Comparison of local workflow files with a remote instance."""

from n8nsync.core.diff.service import DiffReport, DiffService

__all__ = ["DiffReport", "DiffService"]
