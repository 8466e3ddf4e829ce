"""Leaf formatters: enum names, flag sets and weather maps."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from bdat_refs.types import EnumTypeDefinition

if TYPE_CHECKING:
    from bdat_refs.collection import TableCollection
    from bdat_refs.config import ResolverConfig
    from bdat_refs.value import Value


def render_flags(enum_type: EnumTypeDefinition, number: int, separator: str = ", ") -> str | None:
    """Render a bitset as the names of the flags it contains.

    Members with a zero discriminant only match a zero value. Bits no member
    covers are appended as a hex remainder.
    """
    if number == 0:
        zero = enum_type.get_variant_by_discriminant(0)
        return zero.name if zero is not None else None

    names = []
    remaining = number
    for variant in sorted(enum_type.variants, key=lambda v: v.discriminant):
        disc = variant.discriminant
        if disc != 0 and number & disc == disc:
            names.append(variant.name)
            remaining &= ~disc
    if remaining:
        names.append(hex(remaining))
    return separator.join(names)


def render_enum(enum_type: EnumTypeDefinition, number: int, separator: str = ", ") -> str | None:
    """Render a number as its enum member name; never raises.

    Flag enums combine member names. A number that is no member of a plain
    enum renders as itself, or as nothing when it is zero.
    """
    if enum_type.is_flags:
        return render_flags(enum_type, number, separator)
    variant = enum_type.get_variant_by_discriminant(number)
    if variant is not None:
        return variant.name
    return str(number) if number != 0 else None


def weather_id_map(
    mask: int,
    collection: TableCollection | None,
    resolve: Callable[[Value], None],
    config: ResolverConfig,
) -> str | None:
    """List the weathers enabled in a bitmask.

    Bit ``i`` stands for row ``i + 1`` of the weather table; a row that is
    missing is shown by its id.
    """
    table = None
    if collection is not None and config.weather_table in collection:
        table = collection[config.weather_table]

    labels = []
    for i in range(config.weather_map_size):
        if not mask & (1 << i):
            continue
        weather_id = i + 1
        row = table.get_row(weather_id) if table is not None else None
        label = None
        if row is not None and config.weather_label_field in row:
            label_value = row[config.weather_label_field]
            if not label_value.resolved:
                resolve(label_value)
            label = label_value.display_string
        labels.append(label if label and label.strip() else str(weather_id))
    return ", ".join(labels) if labels else None
