"""Configuration contract and validation."""

from .validator import validate_config, validate_generation, load_config, ValidationError

__all__ = ["validate_config", "validate_generation", "load_config", "ValidationError"]
