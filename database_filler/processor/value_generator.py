"""
Synthesize SQL literal values for parsed columns.

Every function returns a string ready to embed in a VALUES tuple:
strings and temporal values are quoted and escaped, numbers are bare.
"""

import random
from datetime import datetime
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..models.dataclasses import ColumnDefinition, GenerationConfig
from ..models.enums import TypeKind


DEFAULT_TEXT_LENGTH = 255
FIXED_FILL_CHAR = "X"
PLACEHOLDER_CHAR = "Z"
CORRUPTING_CHARS = ("<", ">")

# (signed range, unsigned range) per width
INTEGER_RANGES: Dict[TypeKind, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    TypeKind.INT8: ((-128, 127), (0, 255)),
    TypeKind.INT16: ((-32768, 32767), (0, 65535)),
    TypeKind.INT24: ((-8388608, 8388607), (0, 16777215)),
    # Signed INT is skewed towards negative values
    TypeKind.INT32: ((-9999999, 1000000), (0, 4294967295)),
    TypeKind.INT64: ((-9223372036854775808, 9223372036854775807),
                     (0, 18446744073709551615)),
}

INCREMENTAL_KINDS = (TypeKind.INT32, TypeKind.INT64)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TIME_FORMAT = "%H:%M:%S"

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\0": "\\0",
    "\n": "\\n",
    "\r": "\\r",
    "\x1a": "\\Z",
}


class UnresolvedColumnTypeError(ValueError):
    """Raised when asked to generate a value for a column with no type."""
    pass


def quote_string(value: str) -> str:
    """Escape a string and wrap it in single quotes."""
    return "'" + "".join(_ESCAPES.get(ch, ch) for ch in value) + "'"


@lru_cache(maxsize=16)
def _alphabet(low: int, high: int) -> Tuple[str, ...]:
    chars = []
    for code in range(low, high + 1):
        ch = chr(code)
        chars.append(PLACEHOLDER_CHAR if ch in CORRUPTING_CHARS else ch)
    return tuple(chars)


def generate_text(column: ColumnDefinition, config: GenerationConfig,
                  rng: random.Random) -> str:
    """Random or fixed-fill string of the declared length (255 if none)."""
    length = column.declared_length or DEFAULT_TEXT_LENGTH

    if config.use_random_data:
        alphabet = _alphabet(config.low_char_code, config.high_char_code)
        text = "".join(rng.choices(alphabet, k=length))
    else:
        # Identical values: unusable with unique indexes
        text = FIXED_FILL_CHAR * length

    return quote_string(text)


def integer_range(column: ColumnDefinition) -> Tuple[int, int]:
    """Return (min, max) for an integer column's width and sign."""
    signed, unsigned = INTEGER_RANGES[column.type_kind]
    return unsigned if column.unsigned else signed


def generate_integer(column: ColumnDefinition, row_index: int,
                     config: GenerationConfig, rng: random.Random) -> str:
    minimum, maximum = integer_range(column)

    if config.incremental_integers:
        if column.type_kind in INCREMENTAL_KINDS:
            return str(row_index + 1)
        return str(maximum)

    if not config.use_random_data:
        return str(maximum)

    if column.type_kind == TypeKind.INT64:
        # One digit short of the maximum magnitude can never overflow
        digits = len(str(maximum)) - 1
        return "".join(str(rng.randint(0, 9)) for _ in range(digits))

    return str(rng.randint(minimum, maximum))


def generate_decimal(column: ColumnDefinition, config: GenerationConfig,
                     rng: random.Random) -> str:
    digits = max(column.declared_length - 4, 0)

    if config.use_random_data:
        whole = str(rng.randint(0, 10 ** digits - 1))
        fraction = rng.randint(0, 99)
    else:
        whole = "9" * digits or "0"
        fraction = 50

    return f"'{whole}.{fraction:02d}'"


def generate_float(column: ColumnDefinition, rng: random.Random) -> str:
    maximum = 10 ** column.declared_length - 1
    return repr(rng.random() * (maximum * 0.01))


def generate_enumeration(column: ColumnDefinition, rng: random.Random) -> str:
    if not column.enum_values:
        return "''"
    return quote_string(rng.choice(column.enum_values))


def generate(column: ColumnDefinition, row_index: int, config: GenerationConfig,
             rng: random.Random, now: Optional[datetime] = None) -> str:
    """
    Generate one SQL literal for a column.

    Args:
        column: Parsed column definition
        row_index: 0-based row number within the current table
        config: Run generation options
        rng: Randomness source (seed it for reproducible output)
        now: Clock value for temporal columns (default: current time)

    Returns:
        SQL literal string

    Raises:
        UnresolvedColumnTypeError: Column has no recognized type
    """
    kind = column.type_kind

    if kind is None:
        raise UnresolvedColumnTypeError(f"Column `{column.name}` has no recognized type")

    if kind == TypeKind.TEXT:
        return generate_text(column, config, rng)
    if kind.is_integer:
        return generate_integer(column, row_index, config, rng)
    if kind == TypeKind.DECIMAL:
        return generate_decimal(column, config, rng)
    if kind in (TypeKind.FLOAT_SINGLE, TypeKind.FLOAT_DOUBLE):
        return generate_float(column, rng)
    if kind == TypeKind.ENUMERATION:
        return generate_enumeration(column, rng)

    now = now or datetime.now()
    if kind == TypeKind.DATE:
        return f"'{now.strftime(DATE_FORMAT)}'"
    if kind == TypeKind.DATETIME:
        return f"'{now.strftime(DATETIME_FORMAT)}'"
    if kind == TypeKind.TIME:
        return f"'{now.strftime(TIME_FORMAT)}'"

    raise UnresolvedColumnTypeError(f"No generator for type {kind.value}")


def generate_row(columns: Sequence[ColumnDefinition], row_index: int,
                 config: GenerationConfig, rng: random.Random,
                 now: Optional[datetime] = None) -> Tuple[str, ...]:
    """Generate one row tuple, one literal per column, in column order."""
    return tuple(generate(c, row_index, config, rng, now) for c in columns)


def generate_rows(columns: Sequence[ColumnDefinition], config: GenerationConfig,
                  rng: random.Random,
                  clock: Callable[[], datetime] = datetime.now) -> List[Tuple[str, ...]]:
    """
    Generate ``config.row_count`` rows for one table.

    Unresolved columns must be filtered out beforehand; the row index
    restarts at 0 for every call.
    """
    return [
        generate_row(columns, i, config, rng, clock())
        for i in range(config.row_count)
    ]
