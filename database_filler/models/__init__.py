"""Data models and enums for the database filler."""

from .enums import TypeKind, DiagnosticKind, DiagnosticLevel
from .dataclasses import (
    GenerationConfig,
    ConnectionSettings,
    FillerSettings,
    ColumnDefinition,
    TableSchema,
    InsertPayload,
    ExecutionResult,
    Diagnostic,
    TableOutcome,
    RunReport,
)

__all__ = [
    "TypeKind",
    "DiagnosticKind",
    "DiagnosticLevel",
    "GenerationConfig",
    "ConnectionSettings",
    "FillerSettings",
    "ColumnDefinition",
    "TableSchema",
    "InsertPayload",
    "ExecutionResult",
    "Diagnostic",
    "TableOutcome",
    "RunReport",
]
