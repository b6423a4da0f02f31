"""
Recognize column definition lines and extract their metadata.
"""

import re
from typing import Optional, Tuple

from ..models.dataclasses import ColumnDefinition
from ..models.enums import TypeKind
from .type_catalog import TypeCatalog, DEFAULT_CATALOG, blank_quoted


IDENTIFIER_PATTERN = re.compile(r"`([^`]+)`")

# Lines containing any of these tokens are keys, indexes or
# server-managed timestamp columns, never generated
REJECT_MARKERS = re.compile(
    r"(?<![\w$])(KEY|INDEX|UNIQUE|FULLTEXT|SPATIAL|TIMESTAMP)(?![\w$])",
    re.IGNORECASE,
)

# Table-level constraints written as their own definition
CONSTRAINT_PREFIX = re.compile(r"^\s*(CONSTRAINT|CHECK)(?![\w$])", re.IGNORECASE)

TABLE_HEADER = re.compile(r"CREATE\s+(?:TEMPORARY\s+)?TABLE(?![\w$])", re.IGNORECASE)
INLINE_PRIMARY_KEY = re.compile(r"(?<![\w$])PRIMARY\s+KEY(?![\w$])", re.IGNORECASE)
UNSIGNED_MARKER = re.compile(r"(?<![\w$])UNSIGNED(?![\w$])", re.IGNORECASE)
DIGITS = re.compile(r"[0-9]+")

NO_LENGTH_KINDS = (TypeKind.DATE, TypeKind.DATETIME)


class ColumnParser:
    """Turn one definition segment into a ColumnDefinition."""

    def __init__(self, catalog: Optional[TypeCatalog] = None):
        self.catalog = catalog or DEFAULT_CATALOG

    def parse(self, line: str, primary_key_name: str,
              populate_primary_key: bool = False) -> Optional[ColumnDefinition]:
        """
        Parse a definition segment.

        Args:
            line: One column or constraint definition
            primary_key_name: Primary key column of the table being parsed
            populate_primary_key: Produce a definition for the key column too

        Returns:
            ColumnDefinition, or None if the line is not a generatable column
        """
        masked = blank_quoted(line)

        if TABLE_HEADER.search(masked):
            return None

        if CONSTRAINT_PREFIX.match(masked):
            return None

        marker_text = masked
        if populate_primary_key and line.lstrip().startswith("`"):
            marker_text = INLINE_PRIMARY_KEY.sub(" ", masked)

        if REJECT_MARKERS.search(marker_text):
            return None

        name_match = IDENTIFIER_PATTERN.search(line)
        if not name_match or not name_match.group(1).strip():
            return None

        name = name_match.group(1)
        if name.lower() == primary_key_name.lower() and not populate_primary_key:
            return None

        type_kind = None
        length = 0
        enum_values: Tuple[str, ...] = ()

        type_match = self.catalog.find_type(line)
        if type_match:
            type_kind = type_match.kind

            if type_kind not in NO_LENGTH_KINDS:
                # First digits anywhere after the keyword, so a width-less
                # TEXT COLLATE utf8mb4_... reads as length 8
                digits = DIGITS.search(masked, type_match.end)
                if digits:
                    length = int(digits.group(0))

            if type_kind == TypeKind.ENUMERATION:
                enum_values = self._parse_enum_values(line, type_match.end)

        return ColumnDefinition(
            name=name,
            type_kind=type_kind,
            declared_length=length,
            unsigned=bool(UNSIGNED_MARKER.search(masked)),
            enum_values=enum_values,
        )

    @staticmethod
    def _parse_enum_values(line: str, offset: int) -> Tuple[str, ...]:
        """Split ENUM('a', 'b') into ('a', 'b')."""
        start = line.find("(", offset)
        end = line.find(")", start + 1) if start != -1 else -1
        if start == -1 or end == -1:
            return ()

        params = line[start + 1:end]
        for ch in ("'", '"'):
            params = params.replace(ch, "")
        params = params.replace(", ", ",")

        return tuple(params.split(","))
