"""
Split a DDL document into tables and build a TableSchema for each.

The extractor works on mysqldump-style DDL: every table starts with
CREATE TABLE, ends with an ENGINE= clause, quotes identifiers with
backticks and declares exactly one primary key.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from ..loader.schema_file_loader import SchemaFileLoader
from ..models.dataclasses import ColumnDefinition, RunReport, TableSchema
from ..models.enums import DiagnosticKind, DiagnosticLevel
from .column_parser import ColumnParser, IDENTIFIER_PATTERN, INLINE_PRIMARY_KEY
from .type_catalog import blank_quoted

logger = logging.getLogger(__name__)

TABLE_START = re.compile(r"CREATE\s+(?:TEMPORARY\s+)?TABLE(?![\w$])", re.IGNORECASE)
TABLE_END = re.compile(r"(?<![\w$])ENGINE\s*=", re.IGNORECASE)


class MalformedSchemaError(Exception):
    """Raised when a table block cannot be turned into a TableSchema."""

    def __init__(self, message: str, table_index: int = 0,
                 table_name: Optional[str] = None):
        super().__init__(message)
        self.table_index = table_index
        self.table_name = table_name


@dataclass
class RawTableBlock:
    """Text of one CREATE TABLE ... (up to ENGINE=) block."""
    index: int
    text: str
    terminated: bool = True


def split_table_blocks(sql: str) -> List[RawTableBlock]:
    """
    Pair each CREATE TABLE marker with the next ENGINE= token.

    A marker followed by another CREATE TABLE before any ENGINE= yields an
    unterminated block, so one malformed table never swallows the next.
    """
    masked = blank_quoted(sql)
    starts = [m.start() for m in TABLE_START.finditer(masked)]
    blocks = []

    for i, start in enumerate(starts):
        limit = starts[i + 1] if i + 1 < len(starts) else len(sql)
        end = TABLE_END.search(masked, start, limit)

        if end:
            blocks.append(RawTableBlock(i + 1, sql[start:end.start()]))
        else:
            blocks.append(RawTableBlock(i + 1, sql[start:limit], terminated=False))

    return blocks


def split_definitions(block: str) -> List[str]:
    """
    Split a table block into its header and one segment per definition.

    Commas only separate definitions at parenthesis depth 1 outside quotes,
    so DECIMAL(10,2) and ENUM('a','b') stay whole regardless of how the
    definitions are laid out over physical lines.
    """
    segments = []
    current = []
    depth = 0
    quote = None
    i = 0
    n = len(block)

    while i < n:
        char = block[i]

        if quote:
            current.append(char)
            if char == "\\" and quote != "`" and i + 1 < n:
                current.append(block[i + 1])
                i += 2
                continue
            if char == quote:
                if i + 1 < n and block[i + 1] == quote:
                    current.append(block[i + 1])
                    i += 2
                    continue
                quote = None
            i += 1
            continue

        if char in ("'", '"', "`"):
            quote = char
            current.append(char)
        elif char == "(":
            if depth == 0:
                # End of the CREATE TABLE header
                segments.append("".join(current))
                current = []
            else:
                current.append(char)
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                segments.append("".join(current))
                current = []
                # Anything after the closing paren is table options
                break
            current.append(char)
        elif char == "," and depth == 1:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    if current:
        segments.append("".join(current))

    return [s.strip() for s in segments if s.strip()]


def find_primary_key(definitions: List[str]) -> Optional[str]:
    """
    Return the primary key column from the definition segments.

    Handles both a standalone PRIMARY KEY (`col`) clause and an inline
    `col` INT ... PRIMARY KEY column.
    """
    for definition in definitions:
        masked = blank_quoted(definition)
        match = INLINE_PRIMARY_KEY.search(masked)
        if not match:
            continue

        if definition.lstrip().startswith("`"):
            name = IDENTIFIER_PATTERN.search(definition)
            return name.group(1) if name else None

        names = IDENTIFIER_PATTERN.findall(definition, match.end())
        if not names:
            return None
        if len(names) > 1:
            logger.debug(f"Composite primary key {names}, using `{names[0]}`")
        return names[0]

    return None


class SchemaExtractor:
    """Build TableSchema objects from a raw DDL document."""

    def __init__(self, parser: Optional[ColumnParser] = None):
        self.parser = parser or ColumnParser()

    def extract_tables(self, sql: str, populate_primary_key: bool = False,
                       report: Optional[RunReport] = None) -> List[TableSchema]:
        """
        Extract every well-formed table from a DDL document.

        Args:
            sql: Raw schema file content
            populate_primary_key: Keep the primary key column in the schema
            report: Optional run report collecting MALFORMED_SCHEMA errors

        Returns:
            TableSchema list in document order (malformed tables omitted)
        """
        sql_clean = SchemaFileLoader.strip_comments(sql)
        tables = []

        for block in split_table_blocks(sql_clean):
            try:
                tables.append(self.parse_table(block, populate_primary_key))
            except MalformedSchemaError as e:
                logger.error(f"Skipping table {e.table_index}: {e}")
                if report is not None:
                    report.add(DiagnosticKind.MALFORMED_SCHEMA, DiagnosticLevel.ERROR,
                               str(e), e.table_index, e.table_name)

        logger.info(f"Extracted {len(tables)} table(s)")
        return tables

    def parse_table(self, block: RawTableBlock,
                    populate_primary_key: bool = False) -> TableSchema:
        """
        Parse one table block.

        Raises:
            MalformedSchemaError: No table name, no primary key, or no
                ENGINE= terminator
        """
        definitions = split_definitions(block.text)
        header = definitions[0] if definitions else ""

        names = IDENTIFIER_PATTERN.findall(header)
        if not names:
            raise MalformedSchemaError("no backtick-quoted table name found",
                                       block.index)
        # `db`.`table` -> table
        table_name = names[-1]

        if not block.terminated:
            raise MalformedSchemaError("table definition has no ENGINE= terminator",
                                       block.index, table_name)

        primary_key = find_primary_key(definitions[1:])
        if not primary_key:
            raise MalformedSchemaError("no PRIMARY KEY column found",
                                       block.index, table_name)

        columns: List[ColumnDefinition] = []
        for definition in definitions[1:]:
            column = self.parser.parse(definition, primary_key, populate_primary_key)
            if column is not None:
                columns.append(column)

        logger.debug(f"Table `{table_name}`: {len(columns)} column(s), "
                     f"primary key `{primary_key}`")

        return TableSchema(
            name=table_name,
            primary_key_column_name=primary_key,
            columns=tuple(columns),
            index=block.index,
        )
