"""Loaders for input files."""

from .schema_file_loader import SchemaFileLoader, InputNotFoundError

__all__ = ["SchemaFileLoader", "InputNotFoundError"]
