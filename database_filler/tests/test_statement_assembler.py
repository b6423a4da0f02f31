"""Tests for INSERT statement assembly."""

from database_filler.models import ColumnDefinition, InsertPayload, TableSchema
from database_filler.models.enums import TypeKind
from database_filler.processor.statement_assembler import (
    build_payload, render_insert, render_batches,
)


def _payload(rows=3):
    return InsertPayload(
        table_name="t",
        column_names=["a", "b"],
        rows=[(f"'{i}'", str(i)) for i in range(rows)],
    )


def test_single_statement():
    sql = render_insert(_payload())
    assert sql == "INSERT INTO `t` (`a`,`b`) VALUES ('0',0),('1',1),('2',2)"


def test_batches_split_rows():
    statements = render_batches(_payload(5), batch_size=2)

    assert len(statements) == 3
    assert statements[0].endswith("VALUES ('0',0),('1',1)")
    assert statements[2].endswith("VALUES ('4',4)")


def test_batch_size_zero_is_one_statement():
    assert render_batches(_payload(5), batch_size=0) == [render_insert(_payload(5))]


def test_empty_payload_renders_nothing():
    assert render_insert(_payload(0)) == ""
    assert render_batches(_payload(0)) == []
    assert render_insert(InsertPayload("t", [], [(), ()])) == ""


def test_build_payload_uses_generatable_columns():
    schema = TableSchema(
        name="t",
        primary_key_column_name="id",
        columns=(
            ColumnDefinition("geo"),
            ColumnDefinition("name", TypeKind.TEXT, 4),
        ),
    )
    payload = build_payload(schema, [("'XXXX'",)])

    assert payload.column_names == ["name"]
    assert render_insert(payload) == "INSERT INTO `t` (`name`) VALUES ('XXXX')"
