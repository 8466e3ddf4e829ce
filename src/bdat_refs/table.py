"""In-memory tables and rows of game data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterator

from bdat_refs.errors import UnknownField
from bdat_refs.value import Value

if TYPE_CHECKING:
    from bdat_refs.collection import TableCollection
    from bdat_refs.types import FieldSchema


class Row:
    """One record of a table, holding a value per column."""

    def __init__(self, table: Table, row_id: int) -> None:
        self.table = table
        self.id = row_id
        self._values: dict[str, Value] = {}
        # Referrers of a row whose table has no display field
        self._referenced_by: list[Row] = []

    def get_value(self, name: str) -> Value:
        """Get the value of a column.

        Raises:
            UnknownField: If the table has no such column.
        """
        value = self._values.get(name)
        if value is None:
            raise UnknownField(self.table.name, name)
        return value

    def __getitem__(self, name: str) -> Value:
        return self.get_value(name)

    def __contains__(self, name: str) -> bool:
        return name in self._values

    @property
    def values(self) -> list[Value]:
        """Return the row's values in column order."""
        return list(self._values.values())

    @property
    def display(self) -> Value | None:
        """Return the value carrying this row's display text, if the table has one."""
        if self.table.display_field is None:
            return None
        return self._values.get(self.table.display_field)

    @property
    def referenced_by(self) -> list[Row]:
        """Return the rows whose fields point at this row."""
        display = self.display
        referrers = list(display.referenced_by) if display is not None else []
        return referrers + self._referenced_by

    def add_referrer(self, row: Row) -> None:
        """Record a back-reference on a row that has no display value."""
        self._referenced_by.append(row)

    def references(self) -> list[Value]:
        """Return the values on this row that point at another row."""
        return [v for v in self._values.values() if v.reference is not None]

    def __repr__(self) -> str:
        return f"Row({self.table.name!r}, {self.id})"


class Table:
    """A named collection of rows sharing one set of columns.

    Rows are addressed by integer id. Ids start at ``base_id`` when rows are
    added without an explicit id, and need not be contiguous.
    """

    def __init__(
        self,
        name: str,
        columns: list[str],
        collection: TableCollection | None = None,
        display_field: str | None = None,
        base_id: int = 1,
    ) -> None:
        """Initialize a table.

        Args:
            name: Table name, unique within its collection.
            columns: Column names in declaration order.
            collection: Collection this table belongs to.
            display_field: Column whose value is a row's display text.
            base_id: Id given to the first row added without an explicit id.
        """
        if display_field is not None and display_field not in columns:
            raise UnknownField(name, display_field)
        self.name = name
        self.columns = list(columns)
        self.collection = collection
        self.display_field = display_field
        self.base_id = base_id
        self.schemas: dict[str, FieldSchema] = {}
        self._rows: dict[int, Row] = {}
        self._next_id = base_id

    @property
    def count(self) -> int:
        """Return the number of rows in the table."""
        return len(self._rows)

    def add_row(self, values: dict[str, Any] | list[Any], row_id: int | None = None) -> Row:
        """Add a row and return it.

        Args:
            values: Raw payloads by column name, or in column order.
            row_id: Explicit id; defaults to one past the last sequential id.
        """
        if isinstance(values, (tuple, list)):
            if len(values) != len(self.columns):
                raise ValueError(
                    f"Table '{self.name}' has {len(self.columns)} columns, got {len(values)} values"
                )
            values = dict(zip(self.columns, values))

        for name in values:
            if name not in self.columns:
                raise UnknownField(self.name, name)

        if row_id is None:
            row_id = self._next_id
        if row_id in self._rows:
            raise ValueError(f"Row {row_id} already exists in table '{self.name}'")
        self._next_id = max(self._next_id, row_id + 1)

        row = Row(self, row_id)
        for name in self.columns:
            raw = values.get(name, "")
            row._values[name] = Value(
                row=row, name=name, raw=str(raw), schema=self.schemas.get(name)
            )
        self._rows[row_id] = row
        return row

    def set_schema(self, name: str, schema: FieldSchema | None) -> None:
        """Attach resolution metadata to a column, including rows already added."""
        if name not in self.columns:
            raise UnknownField(self.name, name)
        if schema is None:
            self.schemas.pop(name, None)
        else:
            self.schemas[name] = schema
        for row in self._rows.values():
            row._values[name].schema = schema

    def get_row(self, row_id: int) -> Row | None:
        """Get a row by id, or None if the table has no such row."""
        return self._rows.get(row_id)

    def contains_id(self, row_id: int) -> bool:
        return row_id in self._rows

    def __getitem__(self, row_id: int) -> Row | None:
        return self._rows.get(row_id)

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._rows

    def __iter__(self) -> Iterator[Row]:
        for row_id in sorted(self._rows):
            yield self._rows[row_id]

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"Table({self.name!r}, rows={len(self._rows)})"
