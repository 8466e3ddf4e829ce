"""Tests for table-name routing and resolver configuration."""

import json

import pytest

from bdat_refs.config import ResolverConfig
from bdat_refs.errors import SchemaError
from bdat_refs.routing import IdRange, TableRouter, to_type_code
from bdat_refs.types import ConditionType, ShopType, TaskType


@pytest.fixture
def catalog():
    return {
        "item": [[1, 999, "ITM_PcWpn"], {"start": 1001, "end": 1999, "table": "ITM_PcEquip"}],
        "event": [[10001, 19999, "EVT_listBf"]],
        "quest": [[1, 999, "FLD_QuestList"]],
        "character": [[1, 38, "CHR_Dr"], [1001, 1999, "CHR_Bl"]],
        "condition": {"SCENARIO": "FLD_ConditionScenario", "2": "FLD_ConditionQuest"},
        "task": {"battle": "FLD_QuestBattle"},
        "shop": {"EXCHANGE": "MNU_ShopChange"},
    }


class TestIdRange:
    def test_contains(self):
        r = IdRange(10, 20, "T")
        assert 10 in r
        assert 20 in r
        assert 21 not in r
        assert "15" not in r

    def test_empty_range(self):
        with pytest.raises(SchemaError):
            IdRange(5, 4, "T")


class TestTableRouter:
    def test_empty_router_maps_nothing(self):
        router = TableRouter()
        assert router.table_for_item_kind(1) is None
        assert router.table_for_event_kind(1) is None
        assert router.table_for_quest_kind(1) is None
        assert router.table_for_character(1) is None
        assert router.table_for_condition_type(ConditionType.QUEST) is None
        assert router.table_for_task_type(TaskType.BATTLE) is None
        assert router.table_for_shop_type(ShopType.NORMAL) is None

    def test_from_dict(self, catalog):
        router = TableRouter.from_dict(catalog)
        assert router.table_for_item_kind(5) == "ITM_PcWpn"
        assert router.table_for_item_kind(1500) == "ITM_PcEquip"
        assert router.table_for_item_kind(1000) is None
        assert router.table_for_event_kind(10001) == "EVT_listBf"
        assert router.table_for_quest_kind(999) == "FLD_QuestList"
        assert router.table_for_character(1001) == "CHR_Bl"
        assert router.table_for_condition_type(ConditionType.SCENARIO) == "FLD_ConditionScenario"
        assert router.table_for_condition_type(ConditionType.QUEST) == "FLD_ConditionQuest"
        assert router.table_for_task_type(TaskType.BATTLE) == "FLD_QuestBattle"
        assert router.table_for_shop_type(ShopType.EXCHANGE) == "MNU_ShopChange"
        assert router.table_for_shop_type(None) is None

    def test_from_json(self, catalog, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(catalog))
        router = TableRouter.from_json(path)
        assert router.table_for_item_kind(5) == "ITM_PcWpn"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json")
        with pytest.raises(SchemaError):
            TableRouter.from_json(path)

    def test_unknown_section(self):
        with pytest.raises(SchemaError):
            TableRouter.from_dict({"weapons": []})

    def test_unknown_type_name(self):
        with pytest.raises(SchemaError):
            TableRouter.from_dict({"task": {"DANCE": "FLD_QuestDance"}})

    def test_malformed_range(self):
        with pytest.raises(SchemaError):
            TableRouter.from_dict({"item": [[1, 2]]})
        with pytest.raises(SchemaError):
            TableRouter.from_dict({"item": [{"start": 1, "table": "T"}]})


class TestToTypeCode:
    def test_known_code(self):
        assert to_type_code(ConditionType, 2) is ConditionType.QUEST

    def test_unknown_code(self):
        assert to_type_code(TaskType, 99) is None


class TestResolverConfig:
    def test_defaults(self):
        config = ResolverConfig()
        assert config.pouch_buff_table == "BTL_PouchBuff"
        assert config.weather_map_size == 13
        assert "PouchParam" in config.param_subtypes

    def test_from_dict(self):
        config = ResolverConfig.from_dict(
            {"flag_separator": " | ", "param_subtypes": ["Param"]}
        )
        assert config.flag_separator == " | "
        assert config.param_subtypes == frozenset({"Param"})

    def test_unknown_key(self):
        with pytest.raises(SchemaError):
            ResolverConfig.from_dict({"pouch_table": "X"})

    def test_negative_weather_size(self):
        with pytest.raises(SchemaError):
            ResolverConfig.from_dict({"weather_map_size": -1})

    def test_weather_size_coerced_to_int(self):
        config = ResolverConfig.from_dict({"weather_map_size": "13"})
        assert config.weather_map_size == 13
        assert isinstance(config.weather_map_size, int)

    @pytest.mark.parametrize("size", ["abc", None, [13]])
    def test_weather_size_not_a_number(self, size):
        with pytest.raises(SchemaError):
            ResolverConfig.from_dict({"weather_map_size": size})

    def test_param_subtypes_bare_string_rejected(self):
        with pytest.raises(SchemaError):
            ResolverConfig.from_dict({"param_subtypes": "PouchParam"})

    def test_from_json(self, tmp_path):
        path = tmp_path / "resolver.json"
        path.write_text(json.dumps({"weather_table": "RSC_Weather"}))
        assert ResolverConfig.from_json(path).weather_table == "RSC_Weather"

    def test_json_must_be_object(self, tmp_path):
        path = tmp_path / "resolver.json"
        path.write_text("[]")
        with pytest.raises(SchemaError):
            ResolverConfig.from_json(path)
