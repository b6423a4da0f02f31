"""
Ordered catalog of SQL type keywords and the kinds they normalize to.
"""

import re
from typing import Dict, List, NamedTuple, Optional, Tuple

from ..models.enums import TypeKind


# Order is significant: the first entry found in a line wins
TYPE_KEYWORDS: List[Tuple[str, TypeKind]] = [
    ("BIGINT", TypeKind.INT64),
    ("TINYINT", TypeKind.INT8),
    ("SMALLINT", TypeKind.INT16),
    ("MEDIUMINT", TypeKind.INT24),
    ("INTEGER", TypeKind.INT32),
    ("INT", TypeKind.INT32),

    ("DECIMAL", TypeKind.DECIMAL),
    ("NUMERIC", TypeKind.DECIMAL),
    ("FLOAT", TypeKind.FLOAT_SINGLE),
    ("DOUBLE", TypeKind.FLOAT_DOUBLE),

    ("CHAR", TypeKind.TEXT),
    ("VARCHAR", TypeKind.TEXT),
    ("TEXT", TypeKind.TEXT),
    ("TINYTEXT", TypeKind.TEXT),
    ("MEDIUMTEXT", TypeKind.TEXT),
    ("LONGTEXT", TypeKind.TEXT),

    ("ENUM", TypeKind.ENUMERATION),

    ("DATETIME", TypeKind.DATETIME),
    ("DATE", TypeKind.DATE),
    ("TIME", TypeKind.TIME),
]


def _compile(entries: List[Tuple[str, TypeKind]]):
    return [
        (keyword, kind, re.compile(rf"(?<![\w$]){keyword}(?![\w$])", re.IGNORECASE))
        for keyword, kind in entries
    ]


_QUOTES = ("'", '"', "`")


class TypeMatch(NamedTuple):
    """A type keyword located in a definition line."""
    keyword: str
    kind: TypeKind
    start: int
    end: int


def blank_quoted(line: str) -> str:
    """
    Replace backtick identifiers and quoted strings (delimiters included)
    with spaces, keeping every other character at its original offset.
    """
    out = list(line)
    quote = None
    i = 0

    while i < len(line):
        char = line[i]
        if quote:
            out[i] = " "
            if char == "\\" and quote != "`" and i + 1 < len(line):
                out[i + 1] = " "
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
            out[i] = " "
        i += 1

    return "".join(out)


class TypeCatalog:
    """Map SQL type keywords to TypeKind using whole-token matching."""

    def __init__(self, entries: Optional[List[Tuple[str, TypeKind]]] = None):
        self._patterns = _compile(entries or TYPE_KEYWORDS)
        self._by_keyword: Dict[str, TypeKind] = {
            kw.upper(): kind for kw, kind, _ in self._patterns
        }

    def lookup(self, keyword: str) -> Optional[TypeKind]:
        """Return the kind for a single type keyword, or None."""
        return self._by_keyword.get(keyword.strip().upper())

    def find_type(self, line: str) -> Optional[TypeMatch]:
        """
        Find the first catalog keyword occurring as a whole token in a line.

        Identifiers and string literals are ignored, so a column named
        `date` or a DEFAULT 'text' never decides the type.

        Args:
            line: One column definition segment

        Returns:
            TypeMatch with offsets into ``line``, or None if unrecognized
        """
        masked = blank_quoted(line)

        for keyword, kind, pattern in self._patterns:
            match = pattern.search(masked)
            if match:
                return TypeMatch(keyword, kind, match.start(), match.end())

        return None

    def keywords(self) -> List[str]:
        return [kw for kw, _, _ in self._patterns]


DEFAULT_CATALOG = TypeCatalog()
