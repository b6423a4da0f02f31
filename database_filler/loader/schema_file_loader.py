"""
Load DDL schema files and strip comments before extraction.
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

QUOTE_CHARS = ("'", '"')
COMMENT_KEYWORD = "COMMENT"


class InputNotFoundError(FileNotFoundError):
    """Raised when the schema file does not resolve to readable content."""
    pass


class SchemaFileLoader:
    """Load and preprocess a DDL schema file."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load_file(self, path: Path) -> str:
        """
        Load a schema file.

        Args:
            path: Path to the .sql dump

        Returns:
            Raw file content

        Raises:
            InputNotFoundError: If the path is missing or unreadable
        """
        path = Path(path)

        if not path.is_file():
            raise InputNotFoundError(f"The schema file '{path}' does not exist")

        try:
            with open(path, encoding=self.encoding, errors="replace") as f:
                content = f.read()
        except OSError as e:
            raise InputNotFoundError(f"Cannot read schema file '{path}': {e}") from e

        logger.info(f"Loaded schema file {path} ({len(content)} chars)")
        return content

    @staticmethod
    def strip_comments(sql: str) -> str:
        """
        Remove comments from DDL text:
        - Block comments (/* ... */), including /*! ... */ version comments
        - Line comments (-- ... and # ...)
        - Column comment clauses (COMMENT 'text' / COMMENT = "text")

        String literals and backtick identifiers are preserved as-is, so
        comment-like punctuation inside them is never treated as a comment.
        """
        result = []
        i = 0
        n = len(sql)
        quote: Optional[str] = None   # active string or identifier delimiter
        in_line_comment = False
        in_block_comment = False

        while i < n:
            char = sql[i]
            nxt = sql[i + 1] if i + 1 < n else ""

            if in_line_comment:
                if char == "\n":
                    in_line_comment = False
                    result.append(char)
                i += 1
                continue

            if in_block_comment:
                if char == "*" and nxt == "/":
                    in_block_comment = False
                    result.append(" ")
                    i += 2
                    continue
                i += 1
                continue

            # Inside string or identifier - preserve as-is
            if quote:
                result.append(char)
                if char == "\\" and quote != "`" and nxt:
                    result.append(nxt)
                    i += 2
                    continue
                if char == quote:
                    if nxt == quote:
                        result.append(nxt)
                        i += 2
                        continue
                    quote = None
                i += 1
                continue

            if char in QUOTE_CHARS or char == "`":
                quote = char
                result.append(char)
                i += 1
                continue

            if char == "/" and nxt == "*":
                in_block_comment = True
                i += 2
                continue

            if char == "#" or (char == "-" and nxt == "-" and
                               (i + 2 >= n or sql[i + 2].isspace())):
                in_line_comment = True
                i += 1
                continue

            if char in "Cc":
                end = _comment_clause_end(sql, i)
                if end is not None:
                    result.append(" ")
                    i = end
                    continue

            result.append(char)
            i += 1

        return "".join(result)


def _comment_clause_end(sql: str, start: int) -> Optional[int]:
    """
    If a COMMENT clause starts at ``start``, return the offset just past its
    closing quote, else None.
    """
    n = len(sql)
    end_kw = start + len(COMMENT_KEYWORD)

    if sql[start:end_kw].upper() != COMMENT_KEYWORD:
        return None
    if start > 0 and (sql[start - 1].isalnum() or sql[start - 1] == "_"):
        return None
    if end_kw < n and (sql[end_kw].isalnum() or sql[end_kw] == "_"):
        return None

    j = end_kw
    while j < n and sql[j].isspace():
        j += 1
    if j < n and sql[j] == "=":
        j += 1
        while j < n and sql[j].isspace():
            j += 1
    if j >= n or sql[j] not in QUOTE_CHARS:
        return None

    quote = sql[j]
    j += 1
    while j < n:
        if sql[j] == "\\":
            j += 2
            continue
        if sql[j] == quote:
            if j + 1 < n and sql[j + 1] == quote:
                j += 2
                continue
            return j + 1
        j += 1

    # Unterminated comment text runs to the end of the document
    return n
