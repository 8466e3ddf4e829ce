"""Resolver configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from bdat_refs.errors import SchemaError


@dataclass(frozen=True)
class ResolverConfig:
    """Table and column names the leaf formatters read, plus rendering options."""

    # Message lookups read this column of the message table
    message_text_field: str = "name"

    # Pouch buff captions
    pouch_buff_table: str = "BTL_PouchBuff"
    pouch_buff_caption_field: str = "Name"
    param_subtypes: frozenset[str] = field(
        default_factory=lambda: frozenset({"PouchParam", "param"})
    )

    # Enhance captions
    enhance_table: str = "BTL_Enhance"
    enhance_caption_field: str = "Caption"
    enhance_subtype: str = "Enhance"
    enhance_default_param: str = "Param1"

    # Weather id maps
    weather_table: str = "RSC_WeatherSet"
    weather_label_field: str = "name"
    weather_map_size: int = 13

    flag_separator: str = ", "

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResolverConfig:
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SchemaError(f"Unknown resolver config keys: {', '.join(unknown)}")
        values = dict(data)
        if "param_subtypes" in values:
            subtypes = values["param_subtypes"]
            if not isinstance(subtypes, (list, tuple, set, frozenset)):
                raise SchemaError(
                    f"param_subtypes must be a list of names, got {type(subtypes).__name__}"
                )
            values["param_subtypes"] = frozenset(subtypes)
        if "weather_map_size" in values:
            try:
                size = int(values["weather_map_size"])
            except (TypeError, ValueError) as e:
                raise SchemaError(
                    f"weather_map_size must be an integer, got {values['weather_map_size']!r}"
                ) from e
            if size < 0:
                raise SchemaError("weather_map_size must not be negative")
            values["weather_map_size"] = size
        return cls(**values)

    @classmethod
    def from_json(cls, path: Path | str) -> ResolverConfig:
        """Load a config from a JSON file."""
        with open(path) as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise SchemaError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise SchemaError(f"Resolver config in {path} must be a JSON object")
        return cls.from_dict(data)
