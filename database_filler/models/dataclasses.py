"""Data classes for schema, generation and run structures."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from .enums import TypeKind, DiagnosticKind, DiagnosticLevel


@dataclass(frozen=True)
class GenerationConfig:
    """Row synthesis options, fixed for a whole run."""
    row_count: int = 1
    use_random_data: bool = True
    low_char_code: int = 33
    high_char_code: int = 126
    populate_primary_key: bool = False
    incremental_integers: bool = False
    batch_size: int = 0  # 0 = one INSERT per table


@dataclass(frozen=True)
class ConnectionSettings:
    """MySQL connection details (only needed outside dry-run)."""
    host: str = "localhost"
    port: int = 3306
    database: str = ""
    username: str = ""
    password: str = ""
    encoding: str = "utf8mb4"

    def is_complete(self) -> bool:
        return bool(self.host and self.database and self.username)


@dataclass(frozen=True)
class FillerSettings:
    """Everything a run needs, as validated from CLI or config file."""
    schema_file: Path
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)
    debug: bool = False
    seed: Optional[int] = None


@dataclass(frozen=True)
class ColumnDefinition:
    """Structural metadata of one column definition line."""
    name: str
    type_kind: Optional[TypeKind] = None
    declared_length: int = 0
    unsigned: bool = False
    enum_values: Tuple[str, ...] = ()

    @property
    def is_resolved(self) -> bool:
        return self.type_kind is not None

    @property
    def quoted_name(self) -> str:
        return f"`{self.name}`"


@dataclass(frozen=True)
class TableSchema:
    """One parsed CREATE TABLE block."""
    name: str
    primary_key_column_name: str
    columns: Tuple[ColumnDefinition, ...] = ()
    index: int = 0  # 1-based position in the schema document

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def generatable_columns(self) -> Tuple[ColumnDefinition, ...]:
        """Columns with a resolved type, in declaration order."""
        return tuple(c for c in self.columns if c.is_resolved)

    def unresolved_columns(self) -> Tuple[ColumnDefinition, ...]:
        return tuple(c for c in self.columns if not c.is_resolved)


@dataclass
class InsertPayload:
    """Column list plus generated rows for one table, ready to render."""
    table_name: str
    column_names: List[str] = field(default_factory=list)
    rows: List[Tuple[str, ...]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows or not self.column_names


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome reported by an execution collaborator for one statement."""
    success: bool
    detail: str = ""


@dataclass(frozen=True)
class Diagnostic:
    """A single message recorded during a run."""
    kind: DiagnosticKind
    level: DiagnosticLevel
    message: str
    table_index: Optional[int] = None
    table_name: Optional[str] = None

    def __str__(self) -> str:
        prefix = f"[{self.level.value}]"
        if self.table_index is not None:
            label = self.table_name or "?"
            prefix += f" table {self.table_index} ({label})"
        return f"{prefix}: {self.message}"


@dataclass
class TableOutcome:
    """Result of filling one table."""
    table_index: int
    table_name: str
    column_count: int = 0
    row_count: int = 0
    statement_count: int = 0
    success: bool = False
    detail: str = ""


@dataclass
class RunReport:
    """Ordered record of everything that happened in a run."""
    diagnostics: List[Diagnostic] = field(default_factory=list)
    outcomes: List[TableOutcome] = field(default_factory=list)
    aborted: bool = False

    def add(self, kind: DiagnosticKind, level: DiagnosticLevel, message: str,
            table_index: Optional[int] = None,
            table_name: Optional[str] = None) -> Diagnostic:
        """Append a diagnostic and return it."""
        diagnostic = Diagnostic(kind, level, message, table_index, table_name)
        self.diagnostics.append(diagnostic)
        return diagnostic

    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == DiagnosticLevel.ERROR]

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    @property
    def succeeded(self) -> bool:
        return not self.aborted and not self.errors()

    def format_messages(self) -> str:
        return "\n".join(str(d) for d in self.diagnostics)
