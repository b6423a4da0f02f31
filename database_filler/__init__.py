"""Fill a MySQL database with synthetic rows derived from its DDL schema."""

__version__ = "1.0.0"
