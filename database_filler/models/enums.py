"""Enumerations for schema and run data types."""

from enum import Enum


class TypeKind(str, Enum):
    """Internal kind a declared SQL column type is normalized to."""
    TEXT = "text"                   # CHAR, VARCHAR, *TEXT
    INT8 = "int8"                   # TINYINT
    INT16 = "int16"                 # SMALLINT
    INT24 = "int24"                 # MEDIUMINT
    INT32 = "int32"                 # INT, INTEGER
    INT64 = "int64"                 # BIGINT
    DECIMAL = "decimal"             # DECIMAL, NUMERIC
    FLOAT_SINGLE = "float_single"   # FLOAT
    FLOAT_DOUBLE = "float_double"   # DOUBLE
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    ENUMERATION = "enumeration"     # ENUM('a','b')

    @property
    def is_integer(self) -> bool:
        return self in (TypeKind.INT8, TypeKind.INT16, TypeKind.INT24,
                        TypeKind.INT32, TypeKind.INT64)


class DiagnosticKind(str, Enum):
    """What a run diagnostic is about."""
    INPUT_NOT_FOUND = "INPUT_NOT_FOUND"                 # Schema file missing
    MALFORMED_SCHEMA = "MALFORMED_SCHEMA"               # Table block unusable
    UNRESOLVED_COLUMN_TYPE = "UNRESOLVED_COLUMN_TYPE"   # Column skipped
    EXECUTION_FAILURE = "EXECUTION_FAILURE"             # Server rejected insert
    TABLE_FILLED = "TABLE_FILLED"                       # Rows added
    NO_TABLES = "NO_TABLES"                             # Nothing to fill


class DiagnosticLevel(str, Enum):
    """Severity of a run diagnostic."""
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
