"""
Excel preview of generated rows.

Produces one workbook with:
- Summary (table, columns, rows generated)
- One sheet per table holding the generated SQL literals
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

import pandas as pd

from ..models.dataclasses import InsertPayload, TableSchema

logger = logging.getLogger(__name__)

MAX_SHEET_NAME = 31
INVALID_SHEET_CHARS = set('[]:*?/\\')


def sheet_name_for(table_name: str, used: Set[str]) -> str:
    """Excel-safe, unique sheet name (31 chars max)."""
    base = "".join("_" if ch in INVALID_SHEET_CHARS else ch for ch in table_name)
    base = base[:MAX_SHEET_NAME] or "table"
    name = base
    n = 2
    while name.lower() in used:
        suffix = f"~{n}"
        name = base[:MAX_SHEET_NAME - len(suffix)] + suffix
        n += 1
    used.add(name.lower())
    return name


class PreviewWriter:
    """Write generated payloads to an Excel workbook instead of a database."""

    def __init__(self, output_dir: Path, max_rows: int = 1000):
        """
        Initialize the writer.

        Args:
            output_dir: Directory for output files
            max_rows: Rows written per table sheet
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.max_rows = max_rows

    def write(self, payloads: Iterable[Tuple[TableSchema, InsertPayload]],
              schema_name: Optional[str] = None) -> Path:
        """
        Write table previews to a workbook.

        Args:
            payloads: (schema, payload) pairs as produced by
                DatabaseFiller.generate_payloads()
            schema_name: Name used in the output filename

        Returns:
            Path to written file
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{schema_name or 'schema'}_preview_{timestamp}.xlsx"
        output_path = self.output_dir / filename

        used: Set[str] = {"summary"}
        summary_rows = []
        sheets: List[Tuple[str, pd.DataFrame]] = []

        for schema, payload in payloads:
            sheet = sheet_name_for(payload.table_name, used)
            sheets.append((sheet, self._build_table_df(payload)))
            summary_rows.append({
                "table": payload.table_name,
                "sheet": sheet,
                "primary_key": schema.primary_key_column_name,
                "columns": len(payload.column_names),
                "skipped_columns": ", ".join(c.name for c in schema.unresolved_columns()),
                "rows_generated": len(payload.rows),
                "rows_shown": min(len(payload.rows), self.max_rows),
            })

        summary_df = pd.DataFrame(summary_rows, columns=[
            "table", "sheet", "primary_key", "columns",
            "skipped_columns", "rows_generated", "rows_shown",
        ])

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            summary_df.to_excel(writer, sheet_name="Summary", index=False)
            for sheet, df in sheets:
                df.to_excel(writer, sheet_name=sheet, index=False)

        logger.info(f"Written: {output_path}")
        return output_path

    def _build_table_df(self, payload: InsertPayload) -> pd.DataFrame:
        if not payload.column_names:
            return pd.DataFrame()
        rows = payload.rows[:self.max_rows]
        return pd.DataFrame(rows, columns=payload.column_names)
