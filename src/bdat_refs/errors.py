"""Exceptions raised while resolving table references."""

from __future__ import annotations


class BdatRefError(Exception):
    """Base class for all errors raised by bdat_refs."""


class UnknownTable(BdatRefError, KeyError):
    """A table name was looked up that the collection does not hold."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Table '{name}' not found")
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class UnknownField(BdatRefError, KeyError):
    """A field name was looked up that the table schema has no column for."""

    def __init__(self, table: str, name: str) -> None:
        super().__init__(f"Field '{name}' not found in table '{table}'")
        self.table = table
        self.name = name

    def __str__(self) -> str:
        return self.args[0]


class InvalidFieldValue(BdatRefError, ValueError):
    """A raw payload could not be parsed as the number its field requires."""

    def __init__(self, raw: str, expected: str, where: str | None = None) -> None:
        location = f" in {where}" if where else ""
        super().__init__(f"Invalid {expected} value {raw!r}{location}")
        self.raw = raw
        self.expected = expected
        self.where = where


class CyclicReference(BdatRefError, RuntimeError):
    """A value's resolution re-entered itself through a chain of references."""

    def __init__(self, where: str) -> None:
        super().__init__(f"Cyclic reference detected while resolving {where}")
        self.where = where


class SchemaError(BdatRefError, ValueError):
    """A field schema, router catalog or config is malformed."""
