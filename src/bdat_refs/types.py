"""Field schema and enum type definitions for bdat_refs."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from bdat_refs.errors import SchemaError


class FieldKind(Enum):
    """How a field's raw integer payload is interpreted during resolution."""

    MESSAGE = "message"
    REFERENCE = "reference"
    ITEM = "item"
    EVENT = "event"
    QUEST_FLAG = "quest_flag"
    CONDITION = "condition"
    TASK = "task"
    SHOP_TABLE = "shop_table"
    CHARACTER = "character"
    ENHANCE = "enhance"
    WEATHER_ID_MAP = "weather_id_map"
    POUCH_BUFF = "pouch_buff"

    @property
    def needs_ref_table(self) -> bool:
        """Return whether this kind reads from an explicitly named table."""
        return self in (FieldKind.MESSAGE, FieldKind.REFERENCE)

    @property
    def needs_ref_field(self) -> bool:
        """Return whether this kind reads a sibling field on the same row."""
        return self in (
            FieldKind.CONDITION,
            FieldKind.TASK,
            FieldKind.SHOP_TABLE,
            FieldKind.POUCH_BUFF,
        )

    @property
    def is_reference(self) -> bool:
        """Return whether this kind points at a row of another table."""
        return self not in (
            FieldKind.MESSAGE,
            FieldKind.ENHANCE,
            FieldKind.WEATHER_ID_MAP,
            FieldKind.POUCH_BUFF,
        )


# Mapping from kind name strings to FieldKind values
FIELD_KIND_NAMES: dict[str, FieldKind] = {fk.value: fk for fk in FieldKind}


class ConditionType(IntEnum):
    """Discriminator selecting which condition table a condition id points into."""

    SCENARIO = 1
    QUEST = 2
    ENVIRONMENT = 3
    CHARACTER = 4
    PARTY_MEMBER = 5
    ITEM = 6
    FLAG = 7
    IDEA = 8
    CONDITION_LIST = 9


class TaskType(IntEnum):
    """Discriminator selecting which task table a quest task id points into."""

    BATTLE = 1
    TALK = 2
    EVENT = 3
    REACH = 4
    COLLECT = 5
    REQUEST = 6
    GIMMICK = 7
    USE = 8
    CONDITION = 9


class ShopType(IntEnum):
    """Discriminator selecting which shop table a shop id points into."""

    NORMAL = 0
    EXCHANGE = 1
    INN = 2
    DEED = 3
    ALCHEMY = 4


@dataclass
class EnumVariantDefinition:
    """A single named member of an enum type."""

    name: str
    discriminant: int


@dataclass
class EnumTypeDefinition:
    """Enum type descriptor: a plain enum or a flag bitset."""

    name: str
    variants: list[EnumVariantDefinition] = field(default_factory=list)
    is_flags: bool = False

    def get_variant(self, name: str) -> EnumVariantDefinition | None:
        for v in self.variants:
            if v.name == name:
                return v
        return None

    def get_variant_by_discriminant(self, disc: int) -> EnumVariantDefinition | None:
        for v in self.variants:
            if v.discriminant == disc:
                return v
        return None


@dataclass
class FieldSchema:
    """Per-column resolution metadata, shared by every row of a table.

    Each kind requires a particular subset of the optional attributes:
    MESSAGE and REFERENCE read from ``ref_table``; CONDITION, TASK,
    SHOP_TABLE and POUCH_BUFF read a sibling column named by ``ref_field``.
    """

    kind: FieldKind | None = None
    adjust: int = 0
    ref_table: str | None = None
    ref_field: str | None = None
    enum_type: EnumTypeDefinition | None = None

    def __post_init__(self) -> None:
        if self.kind is None:
            if self.enum_type is None:
                raise SchemaError("Field schema needs a kind or an enum type")
            return
        if self.kind.needs_ref_table and not self.ref_table:
            raise SchemaError(f"Field kind '{self.kind.value}' requires ref_table")
        if self.kind.needs_ref_field and not self.ref_field:
            raise SchemaError(f"Field kind '{self.kind.value}' requires ref_field")


class EnumRegistry:
    """Registry of enum type descriptors, filled when schemas are built."""

    def __init__(self) -> None:
        self._types: dict[str, EnumTypeDefinition] = {}

    def register(self, enum_def: EnumTypeDefinition) -> None:
        """Register an enum type descriptor."""
        if enum_def.name in self._types:
            raise ValueError(f"Enum '{enum_def.name}' is already defined")
        self._types[enum_def.name] = enum_def

    def define(
        self, name: str, members: dict[int, str], flags: bool = False
    ) -> EnumTypeDefinition:
        """Build and register an enum from a ``{value: name}`` mapping."""
        variants = [
            EnumVariantDefinition(name=member, discriminant=value)
            for value, member in sorted(members.items())
        ]
        enum_def = EnumTypeDefinition(name=name, variants=variants, is_flags=flags)
        self.register(enum_def)
        return enum_def

    def get(self, name: str) -> EnumTypeDefinition | None:
        """Get an enum by name."""
        return self._types.get(name)

    def get_or_raise(self, name: str) -> EnumTypeDefinition:
        """Get an enum by name, raising if not found."""
        enum_def = self._types.get(name)
        if enum_def is None:
            raise KeyError(f"Enum '{name}' not found")
        return enum_def

    def list_types(self) -> list[str]:
        """List all registered enum names."""
        return list(self._types.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._types
