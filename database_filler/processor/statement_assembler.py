"""
Assemble generated rows into batched INSERT statements.
"""

from typing import Iterator, List, Sequence, Tuple

from ..models.dataclasses import InsertPayload, TableSchema


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def build_payload(schema: TableSchema, rows: Sequence[Tuple[str, ...]]) -> InsertPayload:
    """Pair a table's generatable column names with its generated rows."""
    return InsertPayload(
        table_name=schema.name,
        column_names=[c.name for c in schema.generatable_columns()],
        rows=list(rows),
    )


def _render(table_name: str, column_names: Sequence[str],
            rows: Sequence[Tuple[str, ...]]) -> str:
    columns = ",".join(quote_identifier(c) for c in column_names)
    values = ",".join("(" + ",".join(row) + ")" for row in rows)
    return f"INSERT INTO {quote_identifier(table_name)} ({columns}) VALUES {values}"


def render_insert(payload: InsertPayload) -> str:
    """
    Render the whole payload as a single multi-row INSERT.

    Returns an empty string for a payload with no rows or no columns.
    """
    if payload.is_empty:
        return ""
    return _render(payload.table_name, payload.column_names, payload.rows)


def iter_batches(payload: InsertPayload, batch_size: int = 0) -> Iterator[str]:
    """
    Yield INSERT statements of at most ``batch_size`` rows each.

    A batch size of 0 (or less) yields one statement holding every row.
    """
    if payload.is_empty:
        return

    if batch_size <= 0:
        yield render_insert(payload)
        return

    for start in range(0, len(payload.rows), batch_size):
        yield _render(payload.table_name, payload.column_names,
                      payload.rows[start:start + batch_size])


def render_batches(payload: InsertPayload, batch_size: int = 0) -> List[str]:
    return list(iter_batches(payload, batch_size))
