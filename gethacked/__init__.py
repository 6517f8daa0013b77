"""Core of a security services portal: SQLite migrations, seed data, validation and engagement workflows."""

__version__ = "0.1.0"