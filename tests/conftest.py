"""Shared fixtures for the PV single line diagram tests."""
import json

import pytest

from config import LayoutConfig, LayoutStyle
from layout import compute_layout
from pv_system import system_from_dict


def system_data(*inverters):
    """Build an input document. Each inverter is a list of isolators, each
    isolator a list of string lengths."""
    return {
        "inverters": [
            {
                "isolators": [
                    {"pvstrings": [{"model": "X", "length": n} for n in isolator]}
                    for isolator in inverter
                ]
            }
            for inverter in inverters
        ]
    }


@pytest.fixture(scope="session")
def three_panel_data():
    return system_data([[3]])


@pytest.fixture(scope="session")
def three_panel_system(three_panel_data):
    return system_from_dict(three_panel_data)


@pytest.fixture(scope="session")
def three_panel_layout(three_panel_system):
    return compute_layout(three_panel_system)


@pytest.fixture(scope="session")
def two_inverter_system():
    return system_from_dict(system_data([[3]], [[2]]))


@pytest.fixture(scope="session")
def mixed_system():
    """Several isolators, an empty isolator, a zero-length string and an
    inverter with no isolators at all."""
    return system_from_dict(
        system_data(
            [[3, 2], [1], [4, 4, 1]],
            [[], [0, 2]],
            [],
            [[6, 5, 6, 5, 2]],
        )
    )


@pytest.fixture(scope="session")
def daisy_layout(mixed_system):
    return compute_layout(mixed_system)


@pytest.fixture(scope="session")
def grid_config():
    return LayoutConfig(layout_style=LayoutStyle.GRID)


@pytest.fixture(scope="session")
def grid_layout(mixed_system, grid_config):
    return compute_layout(mixed_system, grid_config)


@pytest.fixture
def system_file(tmp_path, three_panel_data):
    path = tmp_path / "system.json"
    path.write_text(json.dumps(three_panel_data), encoding="utf-8")
    return path
