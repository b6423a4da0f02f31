"""
Execution collaborators: where assembled INSERT statements go.

- MySQLExecutor sends statements to a live server (PyMySQL)
- DryRunExecutor only checks they parse as MySQL (SQLGlot) and keeps them
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol

import pymysql
import sqlglot
from sqlglot.errors import ParseError, TokenError

from ..models.dataclasses import ConnectionSettings, ExecutionResult

logger = logging.getLogger(__name__)

# Rows above which a root connection raises max_allowed_packet
LARGE_INSERT_ROWS = 1500
MAX_ALLOWED_PACKET = 268435456


class Executor(Protocol):
    """Anything that can run one SQL statement and report the outcome."""

    def execute(self, sql: str) -> ExecutionResult:
        ...


class MySQLExecutor:
    """Run statements against MySQL with foreign key checks disabled."""

    def __init__(self, settings: ConnectionSettings, row_count: int = 0):
        """
        Connect to the server.

        Args:
            settings: Connection details
            row_count: Rows per table, used to size max_allowed_packet
        """
        self.settings = settings
        self.connection = pymysql.connect(
            host=settings.host,
            port=settings.port,
            user=settings.username,
            password=settings.password,
            database=settings.database,
            charset=settings.encoding,
        )
        logger.info(f"Connected to {settings.username}@{settings.host}:{settings.port}/{settings.database}")

        with self.connection.cursor() as cur:
            cur.execute("SET foreign_key_checks = 0")
            if settings.username == "root" and row_count > LARGE_INSERT_ROWS:
                # Global variable, needs a privileged account
                cur.execute(f"SET GLOBAL max_allowed_packet = {MAX_ALLOWED_PACKET}")

    def execute(self, sql: str) -> ExecutionResult:
        try:
            with self.connection.cursor() as cur:
                cur.execute(sql)
            self.connection.commit()
        except UnicodeEncodeError as e:
            # Statement never reached the server
            detail = f"Cannot encode statement as {self.settings.encoding}: {e}"
            logger.error(f"Insert failed: {detail}")
            return ExecutionResult(False, detail)
        except pymysql.MySQLError as e:
            self._rollback()
            detail = str(e)
            warnings = self._show_warnings()
            if warnings:
                detail = f"{detail} | {warnings}"
            logger.error(f"Insert failed: {detail}")
            return ExecutionResult(False, detail)

        return ExecutionResult(True)

    def _rollback(self):
        try:
            self.connection.rollback()
        except pymysql.MySQLError as e:
            logger.warning(f"Rollback failed: {e}")

    def _show_warnings(self) -> str:
        try:
            with self.connection.cursor() as cur:
                cur.execute("SHOW WARNINGS")
                rows = cur.fetchall()
        except pymysql.MySQLError:
            return ""
        return " | ".join(" ".join(str(v) for v in row) for row in rows)

    def close(self):
        if self.connection.open:
            try:
                self.connection.close()
            except pymysql.MySQLError as e:
                logger.warning(f"Closing connection failed: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class DryRunExecutor:
    """Validate statements without a database and keep them for output."""

    def __init__(self, validate: bool = True):
        self.validate = validate
        self.statements: List[str] = []

    def execute(self, sql: str) -> ExecutionResult:
        if self.validate:
            try:
                sqlglot.parse_one(sql, read="mysql")
            except (ParseError, TokenError) as e:
                logger.error(f"Generated SQL does not parse: {e}")
                return ExecutionResult(False, f"SQL parse error: {e}")

        self.statements.append(sql)
        logger.debug(f"Dry run: {sql[:200]}{'...' if len(sql) > 200 else ''}")
        return ExecutionResult(True)

    def write(self, path: Path) -> Optional[Path]:
        """Write collected statements to a .sql file, one per line."""
        if not self.statements:
            return None

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write("SET foreign_key_checks = 0;\n")
            for sql in self.statements:
                f.write(sql + ";\n")
            f.write("SET foreign_key_checks = 1;\n")

        logger.info(f"Written: {path}")
        return path
