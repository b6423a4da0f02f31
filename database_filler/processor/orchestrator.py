"""
Drive a fill run: load schema, extract tables, generate, insert.
"""

import logging
import random
import time
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Tuple

from ..loader.schema_file_loader import SchemaFileLoader, InputNotFoundError
from ..models.dataclasses import (
    ColumnDefinition, FillerSettings, InsertPayload, RunReport, TableOutcome, TableSchema
)
from ..models.enums import DiagnosticKind, DiagnosticLevel
from .schema_extractor import SchemaExtractor
from .statement_assembler import build_payload, iter_batches
from .value_generator import generate_rows

logger = logging.getLogger(__name__)


class DatabaseFiller:
    """Fill every table of a DDL schema with synthetic rows."""

    def __init__(self, settings: FillerSettings, executor=None,
                 rng: Optional[random.Random] = None,
                 loader: Optional[SchemaFileLoader] = None,
                 extractor: Optional[SchemaExtractor] = None,
                 clock: Callable[[], datetime] = datetime.now):
        """
        Initialize the filler.

        Args:
            settings: Validated run settings
            executor: Object with execute(sql) -> ExecutionResult; only
                required by run()
            rng: Randomness source (default: seeded from settings.seed)
            loader: Schema file loader
            extractor: Schema extractor
            clock: Time source for DATE/DATETIME/TIME columns
        """
        self.settings = settings
        self.config = settings.generation
        self.executor = executor
        self.rng = rng or random.Random(settings.seed)
        self.loader = loader or SchemaFileLoader()
        self.extractor = extractor or SchemaExtractor()
        self.clock = clock

    def load_tables(self, report: RunReport) -> Optional[List[TableSchema]]:
        """
        Read the schema file and extract its tables.

        Returns None (and marks the report aborted) if the file is missing.
        """
        try:
            sql = self.loader.load_file(self.settings.schema_file)
        except InputNotFoundError as e:
            logger.error(str(e))
            report.add(DiagnosticKind.INPUT_NOT_FOUND, DiagnosticLevel.ERROR, str(e))
            report.aborted = True
            return None

        tables = self.extractor.extract_tables(
            sql, self.config.populate_primary_key, report
        )

        if not tables and not report.errors():
            report.add(DiagnosticKind.NO_TABLES, DiagnosticLevel.WARNING,
                       f"No CREATE TABLE statements found in '{self.settings.schema_file}'")

        return tables

    def prepare_columns(self, schema: TableSchema,
                        report: RunReport) -> Tuple[ColumnDefinition, ...]:
        """Drop columns with no recognized type, once per table."""
        for column in schema.unresolved_columns():
            report.add(DiagnosticKind.UNRESOLVED_COLUMN_TYPE, DiagnosticLevel.WARNING,
                       f"column `{column.name}` has an unsupported type and was skipped",
                       schema.index, schema.name)
        return schema.generatable_columns()

    def build_table_payload(self, schema: TableSchema, report: RunReport) -> InsertPayload:
        """Generate ``row_count`` rows for one table."""
        columns = self.prepare_columns(schema, report)

        t1 = time.perf_counter()
        rows = generate_rows(columns, self.config, self.rng, self.clock)
        t2 = time.perf_counter()
        logger.debug(f"Generated {len(rows)} row(s) for `{schema.name}` in {t2 - t1:.6f} sec")

        return build_payload(schema, rows)

    def generate_payloads(self, report: Optional[RunReport] = None
                          ) -> Iterator[Tuple[TableSchema, InsertPayload]]:
        """Yield (schema, payload) per table without executing anything."""
        report = report if report is not None else RunReport()
        tables = self.load_tables(report)

        for schema in tables or []:
            yield schema, self.build_table_payload(schema, report)

    def fill_table(self, position: int, schema: TableSchema,
                   report: RunReport) -> TableOutcome:
        """
        Generate, assemble and execute the inserts for one table.

        Args:
            position: 1-based processing order, for log labels
            schema: Table to fill
            report: Run report receiving diagnostics
        """
        mode = "random" if self.config.use_random_data else "fixed"
        logger.info(f"Table {position}: generating SQL for `{schema.name}`")

        payload = self.build_table_payload(schema, report)
        outcome = TableOutcome(
            table_index=schema.index,
            table_name=schema.name,
            column_count=len(payload.column_names),
        )

        if payload.is_empty:
            outcome.success = True
            outcome.detail = "nothing to insert"
            logger.warning(f"Table `{schema.name}`: no generatable columns or rows")
            return outcome

        total = len(payload.rows)
        batch_size = self.config.batch_size if self.config.batch_size > 0 else total

        for sql in iter_batches(payload, self.config.batch_size):
            batch_rows = min(batch_size, total - outcome.row_count)

            t1 = time.perf_counter()
            result = self.executor.execute(sql)
            t2 = time.perf_counter()
            logger.debug(f"SQL insertion: {t2 - t1:.6f} sec")

            outcome.statement_count += 1
            if not result.success:
                outcome.detail = result.detail
                message = (f"MySQL reports errors attempting to add {batch_rows} rows "
                           f"of {mode} data: {result.detail}")
                if outcome.row_count:
                    # Earlier batches are already committed
                    message += f" ({outcome.row_count} of {total} rows were inserted)"
                report.add(DiagnosticKind.EXECUTION_FAILURE, DiagnosticLevel.ERROR,
                           message, schema.index, schema.name)
                return outcome

            outcome.row_count += batch_rows

        outcome.success = True
        report.add(DiagnosticKind.TABLE_FILLED, DiagnosticLevel.INFO,
                   f"added {outcome.row_count} rows of {mode} data",
                   schema.index, schema.name)
        return outcome

    def run(self) -> RunReport:
        """
        Fill every table in schema order.

        Per-table failures are recorded in the returned report and never
        stop the run; a missing schema file aborts it.
        """
        if self.executor is None:
            raise ValueError("DatabaseFiller.run() needs an executor")

        report = RunReport()
        tables = self.load_tables(report)
        if tables is None:
            return report

        for position, schema in enumerate(tables, start=1):
            report.outcomes.append(self.fill_table(position, schema, report))

        failed = [o for o in report.outcomes if not o.success]
        logger.info(f"Filled {len(report.outcomes) - len(failed)}/{len(report.outcomes)} table(s)")
        return report
