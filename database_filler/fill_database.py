#!/usr/bin/env python3
"""
Database Filler - Fill MySQL tables with test data parsed from a schema file.

Usage:
    # Insert 100 rows per table
    python -m database_filler.fill_database --schema test.sql --rows 100 \\
        --database dbfilltest --username USER --password PASS

    # Validate the generated SQL without a database, keep it in a file
    python -m database_filler.fill_database --schema test.sql --rows 10 --dry-run --sql-out out/fill.sql

    # Preview generated rows in Excel
    python -m database_filler.fill_database --schema test.sql --rows 50 --preview output/

    # Options from a JSON file (CLI flags win)
    python -m database_filler.fill_database --config filler.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pymysql

from database_filler import __version__
from database_filler.contracts import ValidationError, load_config, validate_config
from database_filler.models import FillerSettings, RunReport
from database_filler.output import DryRunExecutor, MySQLExecutor, PreviewWriter
from database_filler.processor import DatabaseFiller

logger = logging.getLogger("database_filler")


def setup_logging(level: str, log_file: Optional[Path] = None) -> None:
    """Configure logging."""
    log_levels = {
        'normal': logging.WARNING,
        'verbose': logging.INFO,
        'debug': logging.DEBUG,
    }

    handlers: List[logging.Handler] = []

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_levels.get(level, logging.WARNING))
    console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    handlers.append(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description='Database Filler - Fill MySQL tables with test data parsed from a schema file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Input
    parser.add_argument('--schema', type=Path, help='Path to the SQL schema (DDL) file')
    parser.add_argument('--config', type=Path, help='JSON file with configuration options')

    # Generation
    gen_group = parser.add_argument_group('generation')
    gen_group.add_argument('--rows', type=int, help='Rows to insert per table (default: 1)')
    gen_group.add_argument('--fixed-data', action='store_true', default=None,
                           help='Fast fixed-character fill (unusable with unique indexes)')
    gen_group.add_argument('--low-char', type=int, help='Lowest random character code (default: 33)')
    gen_group.add_argument('--high-char', type=int, help='Highest random character code (default: 126)')
    gen_group.add_argument('--populate-primary-key', action='store_true', default=None,
                           help='Generate values for the primary key column too')
    gen_group.add_argument('--incremental-ints', action='store_true', default=None,
                           help='Row-numbered INT/BIGINT values (simple foreign key provision)')
    gen_group.add_argument('--batch-size', type=int,
                           help='Rows per INSERT statement (default: 0 = one statement per table)')
    gen_group.add_argument('--seed', type=int, help='Random seed for reproducible data')

    # Connection
    conn_group = parser.add_argument_group('connection')
    conn_group.add_argument('--host', help='MySQL host (default: localhost)')
    conn_group.add_argument('--port', type=int, help='MySQL port (default: 3306)')
    conn_group.add_argument('--database', help='Database name')
    conn_group.add_argument('--username', help='Database user')
    conn_group.add_argument('--password', help='Database password')
    conn_group.add_argument('--encoding', help='Connection character set (default: utf8mb4)')

    # Modes
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument('--dry-run', action='store_true',
                            help='Generate and validate SQL without a database')
    mode_group.add_argument('--preview', type=Path, metavar='DIR',
                            help='Write generated rows to an Excel workbook in DIR')
    parser.add_argument('--sql-out', type=Path,
                        help='With --dry-run: write the INSERT statements to this file')

    # Logging
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument('--verbose', action='store_true', help='Verbose output')
    log_group.add_argument('--debug', action='store_true', help='Debug output')
    parser.add_argument('--log-file', type=Path, help='Also write a debug log to this file')

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    return parser


def collect_options(args: argparse.Namespace) -> Dict[str, Any]:
    """Merge config file options with command line flags (flags win)."""
    options: Dict[str, Any] = load_config(args.config) if args.config else {}

    overrides = {
        'schema_file': args.schema,
        'row_count': args.rows,
        'random_data': False if args.fixed_data else None,
        'low_char': args.low_char,
        'high_char': args.high_char,
        'populate_primary_key': args.populate_primary_key,
        'incremental_ints': args.incremental_ints,
        'batch_size': args.batch_size,
        'seed': args.seed,
        'host': args.host,
        'port': args.port,
        'database': args.database,
        'username': args.username,
        'password': args.password,
        'encoding': args.encoding,
    }
    if args.dry_run or args.preview:
        overrides['debug'] = True

    options.update({k: v for k, v in overrides.items() if v is not None})
    return options


def run_preview(settings: FillerSettings, output_dir: Path) -> RunReport:
    """Generate rows and write them to Excel; no database access."""
    report = RunReport()
    filler = DatabaseFiller(settings)
    writer = PreviewWriter(output_dir)

    payloads = list(filler.generate_payloads(report))
    if payloads:
        path = writer.write(payloads, schema_name=settings.schema_file.stem)
        print(f"\nPreview: {path}")
    return report


def run_dry(settings: FillerSettings, sql_out: Optional[Path]) -> RunReport:
    """Generate and validate statements without a database."""
    executor = DryRunExecutor()
    report = DatabaseFiller(settings, executor).run()

    if sql_out:
        path = executor.write(sql_out)
        if path:
            print(f"\nSQL written to: {path}")
    return report


def run_database(settings: FillerSettings) -> RunReport:
    """Insert generated rows into MySQL."""
    with MySQLExecutor(settings.connection, settings.generation.row_count) as executor:
        return DatabaseFiller(settings, executor).run()


def main() -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.schema and not args.config:
        parser.error("Must specify --schema or --config")

    if args.sql_out and not args.dry_run:
        parser.error("--sql-out requires --dry-run")

    log_level = 'normal'
    if args.debug:
        log_level = 'debug'
    elif args.verbose:
        log_level = 'verbose'
    setup_logging(log_level, args.log_file)

    logger.info(f"Database Filler v{__version__}")

    try:
        settings = validate_config(collect_options(args))
    except ValidationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.preview:
        report = run_preview(settings, args.preview)
    elif settings.debug:
        report = run_dry(settings, args.sql_out)
    else:
        try:
            report = run_database(settings)
        except pymysql.MySQLError as e:
            print(f"Database connection failed: {e}", file=sys.stderr)
            return 1

    print()
    print(report.format_messages())

    return 0 if report.succeeded else 1


if __name__ == '__main__':
    sys.exit(main())
