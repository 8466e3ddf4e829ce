"""Tests for enum, flag and weather map rendering."""

import pytest

from bdat_refs.collection import TableCollection
from bdat_refs.config import ResolverConfig
from bdat_refs.formatting import render_enum, render_flags, weather_id_map
from bdat_refs.resolver import Resolver
from bdat_refs.types import EnumRegistry, FieldKind, FieldSchema


@pytest.fixture
def enums():
    registry = EnumRegistry()
    registry.define("Element", {0: "None", 1: "Fire", 2: "Water"})
    registry.define("Terrain", {1: "A", 2: "B", 4: "C"}, flags=True)
    registry.define("Party", {0: "Nobody", 1: "Rex", 2: "Nia", 4: "Tora"}, flags=True)
    return registry


class TestRenderEnum:
    def test_member_name(self, enums):
        assert render_enum(enums.get("Element"), 1) == "Fire"
        assert render_enum(enums.get("Element"), 0) == "None"

    def test_unmapped_value(self, enums):
        assert render_enum(enums.get("Element"), 9) == "9"

    def test_unmapped_zero(self):
        registry = EnumRegistry()
        enum_def = registry.define("Sparse", {5: "Five"})
        assert render_enum(enum_def, 0) is None

    def test_flags_dispatch(self, enums):
        assert render_enum(enums.get("Terrain"), 3) == "A, B"
        assert render_enum(enums.get("Terrain"), 5, separator=" | ") == "A | C"


class TestRenderFlags:
    def test_combination(self, enums):
        assert render_flags(enums.get("Terrain"), 7) == "A, B, C"

    def test_single(self, enums):
        assert render_flags(enums.get("Terrain"), 2) == "B"

    def test_zero(self, enums):
        assert render_flags(enums.get("Terrain"), 0) is None
        assert render_flags(enums.get("Party"), 0) == "Nobody"

    def test_zero_member_not_included_in_combinations(self, enums):
        assert render_flags(enums.get("Party"), 6) == "Nia, Tora"

    def test_leftover_bits(self, enums):
        assert render_flags(enums.get("Terrain"), 9) == "A, 0x8"


@pytest.fixture
def collection():
    c = TableCollection()
    weather = c.add_table("RSC_WeatherSet", ["name"], display_field="name")
    weather.add_row(["Clear"])
    weather.add_row(["Rain"])
    weather.add_row(["Fog"])
    weather.add_row([" "], row_id=5)
    land = c.add_table("FLD_Land", ["Weather"])
    land.set_schema("Weather", FieldSchema(FieldKind.WEATHER_ID_MAP))
    return c


class TestWeatherIdMap:
    def _resolve(self, collection, raw, config=None):
        row = collection["FLD_Land"].add_row([raw])
        Resolver(config=config).resolve(row["Weather"])
        return row["Weather"].display

    def test_labels_from_table(self, collection):
        assert self._resolve(collection, "5") == "Clear, Fog"

    def test_missing_and_blank_rows_show_id(self, collection):
        assert self._resolve(collection, str(8 | 16)) == "4, 5"

    def test_empty_mask(self, collection):
        assert self._resolve(collection, "0") is None

    def test_bits_beyond_size_ignored(self, collection):
        assert self._resolve(collection, str(1 | (1 << 13))) == "Clear"

    def test_custom_size(self, collection):
        config = ResolverConfig(weather_map_size=2)
        assert self._resolve(collection, "7", config) == "Clear, Rain"

    def test_without_weather_table(self):
        c = TableCollection()
        assert weather_id_map(3, c, Resolver().resolve, ResolverConfig()) == "1, 2"
