"""Execution collaborators and preview output."""

from .executors import Executor, MySQLExecutor, DryRunExecutor
from .preview_writer import PreviewWriter

__all__ = ["Executor", "MySQLExecutor", "DryRunExecutor", "PreviewWriter"]
