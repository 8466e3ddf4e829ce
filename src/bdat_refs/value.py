"""Field values: the unit of reference resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bdat_refs.table import Row
    from bdat_refs.types import FieldSchema


class ResolveState(Enum):
    """Resolution progress of a single value."""

    UNRESOLVED = 0
    IN_PROGRESS = 1
    RESOLVED = 2


@dataclass(eq=False, repr=False)
class Value:
    """One field of one row, with its raw payload and resolved display.

    ``display`` is either None, a literal string, or another Value whose
    display text is reused. ``reference`` is the target's display Value, or
    the target Row itself when its table has no display field.
    ``reference`` and ``referenced_by`` never own what they point at.
    """

    row: Row
    name: str
    raw: str
    schema: FieldSchema | None = None
    display: str | Value | None = None
    reference: Value | Row | None = None
    referenced_by: list[Row] = field(default_factory=list)
    state: ResolveState = ResolveState.UNRESOLVED

    @property
    def resolved(self) -> bool:
        return self.state is ResolveState.RESOLVED

    @resolved.setter
    def resolved(self, flag: bool) -> None:
        self.state = ResolveState.RESOLVED if flag else ResolveState.UNRESOLVED

    @property
    def display_string(self) -> str | None:
        """Return the text this value displays as.

        Plain columns with no schema display their raw payload. Columns with
        resolution metadata display nothing until a display is assigned.
        """
        current = self
        # Shared displays may chain through several values.
        while isinstance(current.display, Value):
            current = current.display
        if current.display is None and current.schema is None:
            return current.raw
        return current.display

    @property
    def location(self) -> str:
        """Return a ``table[id].field`` label for messages."""
        return f"{self.row.table.name}[{self.row.id}].{self.name}"

    def __repr__(self) -> str:
        return f"Value({self.location}, raw={self.raw!r})"
