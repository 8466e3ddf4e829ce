"""Table-name routing: which table a numeric id or type code points into.

A router is built from a catalog mapping id ranges (items, events, quests,
characters) and type codes (conditions, tasks, shops) to table names. Every
lookup returns None when the catalog has no mapping; the resolver treats
that the same as a missing row.

Catalog shape (JSON or dict)::

    {
        "item": [[1, 999, "ITM_PcWpn"], [1001, 1999, "ITM_PcEquip"]],
        "event": [[10001, 19999, "EVT_listBf"]],
        "quest": [[1, 999, "FLD_QuestList"]],
        "character": [[1, 999, "CHR_Dr"]],
        "condition": {"SCENARIO": "FLD_ConditionScenario"},
        "task": {"BATTLE": "FLD_QuestBattle"},
        "shop": {"NORMAL": "MNU_ShopNormal"}
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Any, Iterable, TypeVar

from bdat_refs.errors import SchemaError
from bdat_refs.types import ConditionType, ShopType, TaskType

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=IntEnum)


@dataclass(frozen=True)
class IdRange:
    """An inclusive id range owned by one table."""

    start: int
    end: int
    table: str

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise SchemaError(f"Id range {self.start}..{self.end} for '{self.table}' is empty")

    def __contains__(self, item_id: object) -> bool:
        return isinstance(item_id, int) and self.start <= item_id <= self.end


def _find_range(ranges: tuple[IdRange, ...], item_id: int) -> str | None:
    for r in ranges:
        if item_id in r:
            return r.table
    return None


class TableRouter:
    """Maps ids and type codes to the tables holding the referenced rows."""

    def __init__(
        self,
        item_ranges: Iterable[IdRange] = (),
        event_ranges: Iterable[IdRange] = (),
        quest_ranges: Iterable[IdRange] = (),
        character_ranges: Iterable[IdRange] = (),
        condition_tables: dict[ConditionType, str] | None = None,
        task_tables: dict[TaskType, str] | None = None,
        shop_tables: dict[ShopType, str] | None = None,
    ) -> None:
        self.item_ranges = tuple(item_ranges)
        self.event_ranges = tuple(event_ranges)
        self.quest_ranges = tuple(quest_ranges)
        self.character_ranges = tuple(character_ranges)
        self.condition_tables = dict(condition_tables or {})
        self.task_tables = dict(task_tables or {})
        self.shop_tables = dict(shop_tables or {})

    def table_for_item_kind(self, item_id: int) -> str | None:
        return _find_range(self.item_ranges, item_id)

    def table_for_event_kind(self, event_id: int) -> str | None:
        return _find_range(self.event_ranges, event_id)

    def table_for_quest_kind(self, quest_id: int) -> str | None:
        return _find_range(self.quest_ranges, quest_id)

    def table_for_character(self, character_id: int) -> str | None:
        return _find_range(self.character_ranges, character_id)

    def table_for_condition_type(self, condition_type: ConditionType | None) -> str | None:
        return self.condition_tables.get(condition_type) if condition_type is not None else None

    def table_for_task_type(self, task_type: TaskType | None) -> str | None:
        return self.task_tables.get(task_type) if task_type is not None else None

    def table_for_shop_type(self, shop_type: ShopType | None) -> str | None:
        return self.shop_tables.get(shop_type) if shop_type is not None else None

    @classmethod
    def from_dict(cls, catalog: dict[str, Any]) -> TableRouter:
        """Build a router from a catalog mapping."""
        known = {"item", "event", "quest", "character", "condition", "task", "shop"}
        unknown = sorted(set(catalog) - known)
        if unknown:
            raise SchemaError(f"Unknown router catalog sections: {', '.join(unknown)}")

        return cls(
            item_ranges=_parse_ranges(catalog.get("item", []), "item"),
            event_ranges=_parse_ranges(catalog.get("event", []), "event"),
            quest_ranges=_parse_ranges(catalog.get("quest", []), "quest"),
            character_ranges=_parse_ranges(catalog.get("character", []), "character"),
            condition_tables=_parse_type_map(catalog.get("condition", {}), ConditionType),
            task_tables=_parse_type_map(catalog.get("task", {}), TaskType),
            shop_tables=_parse_type_map(catalog.get("shop", {}), ShopType),
        )

    @classmethod
    def from_json(cls, path: Path | str) -> TableRouter:
        """Load a router catalog from a JSON file."""
        with open(path) as f:
            try:
                catalog = json.load(f)
            except json.JSONDecodeError as e:
                raise SchemaError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(catalog, dict):
            raise SchemaError(f"Router catalog in {path} must be a JSON object")
        return cls.from_dict(catalog)


def _parse_ranges(entries: list[Any], section: str) -> list[IdRange]:
    ranges = []
    for entry in entries:
        if isinstance(entry, dict):
            try:
                ranges.append(IdRange(int(entry["start"]), int(entry["end"]), str(entry["table"])))
            except KeyError as e:
                raise SchemaError(f"Range in '{section}' is missing {e}") from e
        elif isinstance(entry, (list, tuple)) and len(entry) == 3:
            start, end, table = entry
            ranges.append(IdRange(int(start), int(end), str(table)))
        else:
            raise SchemaError(f"Malformed range in '{section}': {entry!r}")
    return ranges


def _parse_type_map(entries: dict[str, str], enum_cls: type[E]) -> dict[E, str]:
    """Parse ``{member_name_or_number: table}`` into an enum-keyed map."""
    result: dict[E, str] = {}
    for key, table in entries.items():
        try:
            member = enum_cls[key.upper()] if not key.isdigit() else enum_cls(int(key))
        except (KeyError, ValueError) as e:
            raise SchemaError(f"Unknown {enum_cls.__name__} '{key}'") from e
        result[member] = table
    return result


def to_type_code(enum_cls: type[E], code: int) -> E | None:
    """Convert a raw discriminator to its enum member, or None if it has none."""
    try:
        return enum_cls(code)
    except ValueError:
        logger.debug("No %s member for code %d", enum_cls.__name__, code)
        return None
