"""
Validate filler configuration against the contract.

This ensures any input (CLI flags, JSON config file) conforms to the
expected options before a run starts.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Union
import json

from ..models.dataclasses import ConnectionSettings, FillerSettings, GenerationConfig


class ValidationError(Exception):
    """Raised when configuration doesn't conform to the filler contract."""
    pass


# Contract definition
REQUIRED_KEYS = ["schema_file"]

CONNECTION_KEYS = ["host", "port", "database", "username", "password", "encoding"]

ALL_KEYS = REQUIRED_KEYS + [
    "row_count",
    "random_data",
    "low_char",
    "high_char",
    "populate_primary_key",
    "incremental_ints",
    "batch_size",
    "seed",
    "debug",
] + CONNECTION_KEYS

# Map common variants to canonical names
KEY_ALIASES = {
    "schema": "schema_file",
    "schemafile": "schema_file",
    "num_rows": "row_count",
    "rows": "row_count",
    "rowcount": "row_count",
    "use_random_data": "random_data",
    "userandomdata": "random_data",
    "low_char_code": "low_char",
    "lowcharcode": "low_char",
    "high_char_code": "high_char",
    "highcharcode": "high_char",
    "populateprimarykey": "populate_primary_key",
    "incremental_integers": "incremental_ints",
    "incrementalintegers": "incremental_ints",
    "batchsize": "batch_size",
    "user": "username",
    "db": "database",
}

BOOLEAN_KEYS = {"random_data", "populate_primary_key", "incremental_ints", "debug"}
INTEGER_KEYS = {"row_count", "low_char", "high_char", "batch_size", "seed", "port"}

MAX_CHAR_CODE = 0x10FFFF

# UTF-16 surrogates, not encodable on their own
SURROGATE_RANGE = (0xD800, 0xDFFF)


def normalize_keys(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Lowercase keys, turn dashes into underscores and resolve aliases."""
    normalized = {}
    for key, value in config.items():
        name = str(key).strip().lower().replace("-", "_")
        name = KEY_ALIASES.get(name, KEY_ALIASES.get(name.replace("_", ""), name))
        normalized[name] = value
    return normalized


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "yes", "1", "false", "no", "0"):
        return value.strip().lower() in ("true", "yes", "1")
    raise ValidationError(f"Invalid boolean for '{key}': {value!r}")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid integer for '{key}': {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid integer for '{key}': {value!r}")


def validate_config(config: Mapping[str, Any]) -> FillerSettings:
    """
    Validate a configuration mapping and build FillerSettings.

    Args:
        config: Option names to values (aliases accepted, None = unset)

    Raises:
        ValidationError: If configuration doesn't conform to contract

    Returns:
        FillerSettings
    """
    values = {k: v for k, v in normalize_keys(config).items() if v is not None}

    unknown = set(values) - set(ALL_KEYS)
    if unknown:
        raise ValidationError(f"Unknown configuration keys: {sorted(unknown)}")

    missing = [k for k in REQUIRED_KEYS if not values.get(k)]
    if missing:
        raise ValidationError(f"Missing required configuration: {missing}")

    for key in BOOLEAN_KEYS & set(values):
        values[key] = _to_bool(key, values[key])
    for key in INTEGER_KEYS & set(values):
        values[key] = _to_int(key, values[key])

    generation = GenerationConfig(
        row_count=values.get("row_count", 1),
        use_random_data=values.get("random_data", True),
        low_char_code=values.get("low_char", 33),
        high_char_code=values.get("high_char", 126),
        populate_primary_key=values.get("populate_primary_key", False),
        incremental_integers=values.get("incremental_ints", False),
        batch_size=values.get("batch_size", 0),
    )
    validate_generation(generation)

    connection = ConnectionSettings(**{
        k: (values[k] if k == "port" else str(values[k]))
        for k in CONNECTION_KEYS if k in values
    })

    debug = values.get("debug", False)
    if not debug and not connection.is_complete():
        raise ValidationError(
            "Database connection details have not been fully specified "
            "(host, database and username are required unless running in debug/dry-run mode)"
        )

    return FillerSettings(
        schema_file=Path(values["schema_file"]),
        generation=generation,
        connection=connection,
        debug=debug,
        seed=values.get("seed"),
    )


def validate_generation(config: GenerationConfig) -> bool:
    """
    Check generation options are usable.

    Raises:
        ValidationError: On a negative row count or a bad character range
    """
    if config.row_count < 0:
        raise ValidationError(f"row_count must be >= 0, got {config.row_count}")

    if config.batch_size < 0:
        raise ValidationError(f"batch_size must be >= 0, got {config.batch_size}")

    if not 0 <= config.low_char_code <= MAX_CHAR_CODE:
        raise ValidationError(f"low_char out of range: {config.low_char_code}")

    if not 0 <= config.high_char_code <= MAX_CHAR_CODE:
        raise ValidationError(f"high_char out of range: {config.high_char_code}")

    if config.low_char_code > config.high_char_code:
        raise ValidationError(
            f"low_char ({config.low_char_code}) is greater than high_char ({config.high_char_code})"
        )

    low, high = SURROGATE_RANGE
    if config.low_char_code <= high and config.high_char_code >= low:
        raise ValidationError(
            f"Character range {config.low_char_code}..{config.high_char_code} overlaps "
            f"the surrogate block {low:#x}..{high:#x}"
        )

    return True


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a JSON configuration file.

    Raises:
        ValidationError: If the file is missing or not a JSON object
    """
    path = Path(path)

    if not path.exists():
        raise ValidationError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read JSON config: {e}")

    if not isinstance(data, dict):
        raise ValidationError("JSON config must be an object of option names to values")

    return data
