"""Tests for pv_system.py input loading and statistics."""
import json
import re

import pytest
import yaml

from pv_system import (
    Inverter,
    Isolator,
    PvString,
    SystemDescription,
    SystemShapeError,
    get_system_stats,
    load_system,
    system_from_dict,
)
from conftest import system_data


class TestSystemFromDict:
    def test_builds_tree(self, three_panel_system):
        assert three_panel_system == SystemDescription(
            inverters=(
                Inverter(isolators=(Isolator(pvstrings=(PvString("X", 3),)),)),
            )
        )

    def test_empty_lists_are_valid(self):
        system = system_from_dict({"inverters": [{"isolators": [{"pvstrings": []}]}]})
        assert system.inverters[0].isolators[0].pvstrings == ()

    def test_no_inverters(self):
        assert system_from_dict({"inverters": []}).inverters == ()

    def test_zero_length_string_allowed(self):
        system = system_from_dict(system_data([[0]]))
        assert system.inverters[0].isolators[0].pvstrings[0].length == 0

    def test_extra_keys_ignored(self):
        data = system_data([[2]])
        data["site"] = "Depot roof"
        data["inverters"][0]["rating_kw"] = 10
        assert len(system_from_dict(data).inverters) == 1

    @pytest.mark.parametrize(
        "data, where",
        [
            ([], "system"),
            ({}, "inverters"),
            ({"inverters": {}}, "system.inverters"),
            ({"inverters": [1]}, "inverters[0]"),
            ({"inverters": [{}]}, "isolators"),
            ({"inverters": [{"isolators": [{}]}]}, "pvstrings"),
        ],
    )
    def test_bad_shape(self, data, where):
        with pytest.raises(SystemShapeError, match=re.escape(where)):
            system_from_dict(data)

    def test_error_names_the_field(self):
        data = system_data([[2], [1, -1]])
        with pytest.raises(SystemShapeError) as excinfo:
            system_from_dict(data)
        assert "inverters[0].isolators[1].pvstrings[1].length" in str(excinfo.value)

    @pytest.mark.parametrize("length", [-1, 2.5, "3", True, None])
    def test_bad_length(self, length):
        data = {"inverters": [{"isolators": [{"pvstrings": [{"model": "X", "length": length}]}]}]}
        with pytest.raises(SystemShapeError, match="length"):
            system_from_dict(data)

    def test_missing_model(self):
        data = {"inverters": [{"isolators": [{"pvstrings": [{"length": 2}]}]}]}
        with pytest.raises(SystemShapeError, match="model"):
            system_from_dict(data)

    def test_model_must_be_string(self):
        data = {"inverters": [{"isolators": [{"pvstrings": [{"model": 7, "length": 2}]}]}]}
        with pytest.raises(SystemShapeError, match="model"):
            system_from_dict(data)

    def test_is_value_error(self):
        assert issubclass(SystemShapeError, ValueError)


class TestLoadSystem:
    def test_json(self, system_file, three_panel_system):
        assert load_system(system_file) == three_panel_system

    @pytest.mark.parametrize("suffix", [".yaml", ".yml"])
    def test_yaml(self, tmp_path, three_panel_data, three_panel_system, suffix):
        path = tmp_path / f"system{suffix}"
        path.write_text(yaml.safe_dump(three_panel_data), encoding="utf-8")
        assert load_system(path) == three_panel_system

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_system(tmp_path / "missing.json")

    def test_bad_json_propagates(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_system(path)

    def test_bad_shape_from_file(self, tmp_path):
        path = tmp_path / "system.json"
        path.write_text(json.dumps({"inverter": []}), encoding="utf-8")
        with pytest.raises(SystemShapeError):
            load_system(path)


class TestStats:
    def test_three_panels(self, three_panel_system):
        stats = get_system_stats(three_panel_system)
        assert (stats.inverters, stats.isolators, stats.pv_strings, stats.total_panels) == (
            1,
            1,
            1,
            3,
        )

    def test_mixed(self, mixed_system):
        stats = get_system_stats(mixed_system)
        assert stats.inverters == 4
        assert stats.isolators == 6
        assert stats.pv_strings == 13
        assert stats.total_panels == 3 + 2 + 1 + 4 + 4 + 1 + 0 + 2 + 6 + 5 + 6 + 5 + 2

    def test_empty(self):
        stats = get_system_stats(SystemDescription())
        assert stats.total_panels == 0
