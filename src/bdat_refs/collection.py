"""Table collection: the root container of a loaded game-data set."""

from __future__ import annotations

from typing import Any, Iterator

from bdat_refs.errors import UnknownTable
from bdat_refs.table import Row, Table
from bdat_refs.types import EnumRegistry, FieldSchema


class TableCollection:
    """All tables of a data set, plus the index of columns with resolution metadata."""

    def __init__(self, enums: EnumRegistry | None = None) -> None:
        """Initialize an empty collection.

        Args:
            enums: Enum registry used by the collection's field schemas.
        """
        self.enums = enums if enums is not None else EnumRegistry()
        self._tables: dict[str, Table] = {}

    def add_table(
        self,
        name: str,
        columns: list[str],
        display_field: str | None = None,
        base_id: int = 1,
    ) -> Table:
        """Create a table in this collection and return it."""
        if name in self._tables:
            raise ValueError(f"Table '{name}' is already defined")
        table = Table(
            name,
            columns,
            collection=self,
            display_field=display_field,
            base_id=base_id,
        )
        self._tables[name] = table
        return table

    def add_rows(self, table_name: str, rows: list[dict[str, Any] | list[Any]]) -> list[Row]:
        """Append rows with sequential ids to a table."""
        table = self.get_table(table_name)
        return [table.add_row(values) for values in rows]

    def set_field(self, table_name: str, field_name: str, schema: FieldSchema) -> None:
        """Attach resolution metadata to a column of a table."""
        self.get_table(table_name).set_schema(field_name, schema)

    def get_table(self, name: str) -> Table:
        """Get a table by name.

        Raises:
            UnknownTable: If the collection has no such table.
        """
        table = self._tables.get(name)
        if table is None:
            raise UnknownTable(name)
        return table

    def has_table(self, name: str) -> bool:
        return name in self._tables

    @property
    def field_index(self) -> dict[tuple[str, str], FieldSchema]:
        """Return every ``(table, field)`` pair that carries resolution metadata."""
        return {
            (table.name, field_name): schema
            for table in self._tables.values()
            for field_name, schema in table.schemas.items()
        }

    def list_tables(self) -> list[str]:
        """List all table names."""
        return list(self._tables.keys())

    def __getitem__(self, name: str) -> Table:
        return self.get_table(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def __iter__(self) -> Iterator[Table]:
        return iter(self._tables.values())
