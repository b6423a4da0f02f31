"""
Test suite for schema extraction.

Run with:
    python -m pytest database_filler/tests/test_schema_extractor.py -v

Or directly:
    python database_filler/tests/test_schema_extractor.py
"""

import sys
from pathlib import Path

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from database_filler.models import RunReport
from database_filler.models.enums import DiagnosticKind, TypeKind
from database_filler.processor.schema_extractor import (
    SchemaExtractor, MalformedSchemaError, RawTableBlock,
    split_table_blocks, split_definitions, find_primary_key,
)


ONE_LINE_DDL = (
    "CREATE TABLE `t` (`id` INT UNSIGNED, `name` VARCHAR(10), "
    "PRIMARY KEY (`id`)) ENGINE=InnoDB;"
)


def _table_ddl(name: str) -> str:
    return (
        f"CREATE TABLE `{name}` (\n"
        f"  `id` int(11) NOT NULL AUTO_INCREMENT,\n"
        f"  `label` varchar(20) DEFAULT NULL,\n"
        f"  PRIMARY KEY (`id`)\n"
        f") ENGINE=InnoDB;\n\n"
    )


def test_k_blocks_give_k_tables_in_order():
    """One TableSchema per CREATE TABLE block, in source order."""
    names = ["alpha", "beta", "gamma", "delta", "epsilon"]
    sql = "".join(_table_ddl(n) for n in names)

    tables = SchemaExtractor().extract_tables(sql)

    assert [t.name for t in tables] == names
    assert [t.index for t in tables] == [1, 2, 3, 4, 5]

    print("test_k_blocks_give_k_tables_in_order: PASSED")


def test_one_line_table():
    """Definitions on a single physical line still split per column."""
    tables = SchemaExtractor().extract_tables(ONE_LINE_DDL)

    assert len(tables) == 1
    table = tables[0]
    assert table.name == "t"
    assert table.primary_key_column_name == "id"
    assert table.column_names == ["name"]
    assert table.columns[0].declared_length == 10

    print("test_one_line_table: PASSED")


def test_populate_primary_key_keeps_key_column():
    tables = SchemaExtractor().extract_tables(ONE_LINE_DDL, populate_primary_key=True)

    assert tables[0].column_names == ["id", "name"]
    assert tables[0].columns[0].unsigned is True

    print("test_populate_primary_key_keeps_key_column: PASSED")


def test_split_definitions_respects_parens_and_quotes():
    block = (
        "CREATE TABLE `t` (\n"
        "  `price` decimal(10,2) NOT NULL,\n"
        "  `kind` enum('a,b','c') NOT NULL,\n"
        "  `note` varchar(5) DEFAULT ')',\n"
        "  PRIMARY KEY (`price`)\n"
        ") "
    )
    definitions = split_definitions(block)

    assert definitions == [
        "CREATE TABLE `t`",
        "`price` decimal(10,2) NOT NULL",
        "`kind` enum('a,b','c') NOT NULL",
        "`note` varchar(5) DEFAULT ')'",
        "PRIMARY KEY (`price`)",
    ]

    print("test_split_definitions_respects_parens_and_quotes: PASSED")


def test_find_primary_key_forms():
    assert find_primary_key(["`a` int", "PRIMARY KEY (`a`)"]) == "a"
    assert find_primary_key(["`uuid` char(36) NOT NULL PRIMARY KEY", "`b` int"]) == "uuid"
    assert find_primary_key(["CONSTRAINT `pk` PRIMARY KEY (`x`,`y`)"]) == "x"
    assert find_primary_key(["`a` int", "KEY `k` (`a`)"]) is None

    print("test_find_primary_key_forms: PASSED")


def test_sample_file():
    """Test with the sample mysqldump schema."""
    sample_path = Path(__file__).parent / "sql_samples" / "test.sql"
    sql = sample_path.read_text(encoding="utf-8")

    tables = SchemaExtractor().extract_tables(sql)

    assert [t.name for t in tables] == ["customers", "orders"]

    customers, orders = tables
    assert customers.primary_key_column_name == "customer_id"
    assert customers.column_names == [
        "first_name", "last_name", "status", "credit", "visits",
        "rating", "balance", "joined", "last_login",
    ]

    kinds = {c.name: c.type_kind for c in customers.columns}
    assert kinds["status"] == TypeKind.ENUMERATION
    assert kinds["credit"] == TypeKind.DECIMAL
    assert kinds["visits"] == TypeKind.INT16
    assert kinds["rating"] == TypeKind.INT8
    assert kinds["balance"] == TypeKind.FLOAT_DOUBLE
    assert kinds["joined"] == TypeKind.DATE
    assert kinds["last_login"] == TypeKind.DATETIME

    status = customers.columns[2]
    assert status.enum_values == ("active", "suspended", "closed")

    assert orders.primary_key_column_name == "order_id"
    assert orders.column_names == ["customer_id", "note", "amount", "pickup", "geo"]
    assert [c.name for c in orders.unresolved_columns()] == ["geo"]

    print("test_sample_file: PASSED")


def test_table_without_primary_key_is_reported():
    """A malformed table fails alone; the next table is still extracted."""
    sql = (
        "CREATE TABLE `link` (`a_id` int(11) NOT NULL, `b_id` int(11) NOT NULL) ENGINE=InnoDB;\n"
        + _table_ddl("after")
    )
    report = RunReport()

    tables = SchemaExtractor().extract_tables(sql, report=report)

    assert [t.name for t in tables] == ["after"]
    errors = report.of_kind(DiagnosticKind.MALFORMED_SCHEMA)
    assert len(errors) == 1
    assert errors[0].table_index == 1
    assert errors[0].table_name == "link"
    assert "PRIMARY KEY" in errors[0].message

    print("test_table_without_primary_key_is_reported: PASSED")


def test_unterminated_table_does_not_swallow_next():
    sql = (
        "CREATE TABLE `broken` (`id` int, PRIMARY KEY (`id`));\n"
        + _table_ddl("fine")
    )
    blocks = split_table_blocks(sql)

    assert len(blocks) == 2
    assert blocks[0].terminated is False
    assert blocks[1].terminated is True

    report = RunReport()
    tables = SchemaExtractor().extract_tables(sql, report=report)
    assert [t.name for t in tables] == ["fine"]
    assert report.errors()[0].table_name == "broken"

    print("test_unterminated_table_does_not_swallow_next: PASSED")


def test_missing_table_name_raises():
    block = RawTableBlock(1, "CREATE TABLE t (`id` int, PRIMARY KEY (`id`)) ")

    try:
        SchemaExtractor().parse_table(block)
    except MalformedSchemaError as e:
        assert e.table_index == 1
    else:
        raise AssertionError("Expected MalformedSchemaError")

    print("test_missing_table_name_raises: PASSED")


def test_qualified_table_name():
    sql = "CREATE TABLE IF NOT EXISTS `shop`.`items` (`id` int, `n` int, PRIMARY KEY (`id`)) ENGINE=MyISAM;"
    tables = SchemaExtractor().extract_tables(sql)

    assert tables[0].name == "items"
    assert tables[0].column_names == ["n"]

    print("test_qualified_table_name: PASSED")


def test_commented_out_table_ignored():
    sql = "/* CREATE TABLE `old` (`id` int) ENGINE=InnoDB; */\n" + _table_ddl("live")
    tables = SchemaExtractor().extract_tables(sql)

    assert [t.name for t in tables] == ["live"]

    print("test_commented_out_table_ignored: PASSED")


def run_all_tests():
    """Run all tests."""
    print("=" * 60)
    print("Schema Extractor Tests")
    print("=" * 60)
    print()

    tests = [
        test_k_blocks_give_k_tables_in_order,
        test_one_line_table,
        test_populate_primary_key_keeps_key_column,
        test_split_definitions_respects_parens_and_quotes,
        test_find_primary_key_forms,
        test_sample_file,
        test_table_without_primary_key_is_reported,
        test_unterminated_table_does_not_swallow_next,
        test_missing_table_name_raises,
        test_qualified_table_name,
        test_commented_out_table_ignored,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except AssertionError as e:
            print(f"{test.__name__}: FAILED - {e}")
            failed += 1
        except Exception as e:
            print(f"{test.__name__}: ERROR - {e}")
            failed += 1

    print()
    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
