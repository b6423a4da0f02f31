"""Tests for per-type value synthesis."""

import random
import re
from datetime import datetime

import pytest

from database_filler.models import ColumnDefinition, GenerationConfig
from database_filler.models.enums import TypeKind
from database_filler.processor.value_generator import (
    generate, generate_row, generate_rows, quote_string, UnresolvedColumnTypeError,
)


RANDOM = GenerationConfig(row_count=5, use_random_data=True)
FIXED = GenerationConfig(row_count=5, use_random_data=False)
INCREMENTAL = GenerationConfig(row_count=5, incremental_integers=True)
NOW = datetime(2024, 3, 9, 7, 5, 1)


def _unquote(literal: str) -> str:
    assert literal.startswith("'") and literal.endswith("'")
    return literal[1:-1]


def _values(column, config, n=500, seed=7):
    rng = random.Random(seed)
    return [generate(column, i, config, rng, NOW) for i in range(n)]


def test_unsigned_smallint_range():
    column = ColumnDefinition("qty", TypeKind.INT16, unsigned=True)
    values = [int(v) for v in _values(column, RANDOM)]

    assert all(0 <= v <= 65535 for v in values)


def test_signed_smallint_range():
    column = ColumnDefinition("delta", TypeKind.INT16)
    values = [int(v) for v in _values(column, RANDOM)]

    assert all(-32768 <= v <= 32767 for v in values)
    assert any(v < 0 for v in values)


def test_signed_int_is_skewed_negative():
    column = ColumnDefinition("n", TypeKind.INT32)
    values = [int(v) for v in _values(column, RANDOM)]

    assert all(-9999999 <= v <= 1000000 for v in values)


def test_fixed_integers_use_type_maximum():
    assert generate(ColumnDefinition("a", TypeKind.INT8), 0, FIXED, random.Random()) == "127"
    assert generate(ColumnDefinition("a", TypeKind.INT8, unsigned=True), 0, FIXED, random.Random()) == "255"
    assert generate(ColumnDefinition("a", TypeKind.INT24, unsigned=True), 0, FIXED, random.Random()) == "16777215"
    assert generate(ColumnDefinition("a", TypeKind.INT64, unsigned=True), 0, FIXED,
                    random.Random()) == "18446744073709551615"


def test_incremental_int_sequence():
    column = ColumnDefinition("fk", TypeKind.INT32, unsigned=True)
    rows = generate_rows([column], INCREMENTAL, random.Random(1))

    assert [r[0] for r in rows] == ["1", "2", "3", "4", "5"]


def test_incremental_narrow_int_uses_maximum():
    column = ColumnDefinition("flag", TypeKind.INT8, unsigned=True)
    rows = generate_rows([column], INCREMENTAL, random.Random(1))

    assert {r[0] for r in rows} == {"255"}


def test_random_bigint_is_one_digit_short():
    unsigned = ColumnDefinition("big", TypeKind.INT64, unsigned=True)
    signed = ColumnDefinition("big", TypeKind.INT64)

    for value in _values(unsigned, RANDOM, n=50):
        assert re.fullmatch(r"[0-9]{19}", value)
        assert int(value) <= 18446744073709551615

    for value in _values(signed, RANDOM, n=50):
        assert re.fullmatch(r"[0-9]{18}", value)


def test_fixed_text_has_declared_length():
    column = ColumnDefinition("name", TypeKind.TEXT, declared_length=10)
    for value in _values(column, FIXED, n=5):
        assert _unquote(value) == "X" * 10


def test_text_default_length_is_255():
    column = ColumnDefinition("body", TypeKind.TEXT)
    assert len(_unquote(generate(column, 0, FIXED, random.Random()))) == 255


def test_random_text_character_range():
    """Random characters stay in range and never include < or >."""
    config = GenerationConfig(low_char_code=60, high_char_code=62)
    column = ColumnDefinition("s", TypeKind.TEXT, declared_length=50)

    for value in _values(column, config, n=20):
        assert set(_unquote(value)) <= {"=", "Z"}


def test_random_text_is_escaped():
    config = GenerationConfig(low_char_code=39, high_char_code=39)  # only '
    column = ColumnDefinition("s", TypeKind.TEXT, declared_length=3)

    assert generate(column, 0, config, random.Random()) == "'\\'\\'\\''"


def test_enumeration_membership():
    column = ColumnDefinition("c", TypeKind.ENUMERATION, enum_values=("a", "b", "c"))
    values = {_unquote(v) for v in _values(column, RANDOM, n=200)}

    assert values <= {"a", "b", "c"}
    assert len(values) == 3


def test_decimal_values():
    column = ColumnDefinition("price", TypeKind.DECIMAL, declared_length=8)

    assert generate(column, 0, FIXED, random.Random()) == "'9999.50'"

    for value in _values(column, RANDOM, n=100):
        whole, fraction = _unquote(value).split(".")
        assert 0 <= int(whole) <= 9999
        assert len(fraction) == 2


def test_short_decimal_has_zero_integer_part():
    column = ColumnDefinition("rate", TypeKind.DECIMAL, declared_length=3)
    assert generate(column, 0, FIXED, random.Random()) == "'0.50'"


def test_float_is_bare_and_bounded():
    column = ColumnDefinition("w", TypeKind.FLOAT_SINGLE, declared_length=4)
    for value in _values(column, RANDOM, n=100):
        assert not value.startswith("'")
        assert 0.0 <= float(value) <= 9999 * 0.01


def test_temporal_formats():
    rng = random.Random()
    assert generate(ColumnDefinition("d", TypeKind.DATE), 0, RANDOM, rng, NOW) == "'2024-03-09'"
    assert generate(ColumnDefinition("d", TypeKind.DATETIME), 0, RANDOM, rng, NOW) == "'2024-03-09 07:05:01'"
    assert generate(ColumnDefinition("d", TypeKind.TIME), 0, RANDOM, rng, NOW) == "'07:05:01'"


def test_unresolved_type_raises():
    with pytest.raises(UnresolvedColumnTypeError):
        generate(ColumnDefinition("geo"), 0, RANDOM, random.Random())


def test_seeded_rows_are_reproducible():
    columns = [
        ColumnDefinition("a", TypeKind.TEXT, declared_length=8),
        ColumnDefinition("b", TypeKind.INT32),
        ColumnDefinition("c", TypeKind.DECIMAL, declared_length=10),
    ]
    first = [generate_row(columns, i, RANDOM, random.Random(42), NOW) for i in range(3)]
    second = [generate_row(columns, i, RANDOM, random.Random(42), NOW) for i in range(3)]

    assert first == second
    assert all(len(row) == 3 for row in first)


def test_quote_string_escapes_delimiters():
    assert quote_string('a\'b"c\\d\n') == "'a\\'b\\\"c\\\\d\\n'"
