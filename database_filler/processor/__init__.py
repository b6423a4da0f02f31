"""Schema extraction, value generation and insert assembly."""

from .type_catalog import TypeCatalog, TypeMatch, DEFAULT_CATALOG
from .column_parser import ColumnParser
from .schema_extractor import SchemaExtractor, MalformedSchemaError
from .value_generator import generate, generate_row, generate_rows, UnresolvedColumnTypeError
from .statement_assembler import build_payload, render_insert, render_batches
from .orchestrator import DatabaseFiller

__all__ = [
    "TypeCatalog",
    "TypeMatch",
    "DEFAULT_CATALOG",
    "ColumnParser",
    "SchemaExtractor",
    "MalformedSchemaError",
    "generate",
    "generate_row",
    "generate_rows",
    "UnresolvedColumnTypeError",
    "build_payload",
    "render_insert",
    "render_batches",
    "DatabaseFiller",
]
