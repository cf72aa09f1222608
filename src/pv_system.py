"""
Photovoltaic system description: inverters feed from DC isolators, which feed
from PV strings. Loaded from a JSON or YAML document and checked for shape
before any layout is attempted.
"""

# Standard library imports
import json
import logging
import pathlib
from dataclasses import dataclass

# Third-party imports
import yaml

logger = logging.getLogger(__name__)


class SystemShapeError(ValueError):
    """Raised when the input document is not a valid system description."""


# --- Dataclasses ---
@dataclass(frozen=True)
class PvString:
    model: str
    length: int  # number of panels in series


@dataclass(frozen=True)
class Isolator:
    pvstrings: tuple[PvString, ...] = ()


@dataclass(frozen=True)
class Inverter:
    isolators: tuple[Isolator, ...] = ()


@dataclass(frozen=True)
class SystemDescription:
    inverters: tuple[Inverter, ...] = ()


@dataclass(frozen=True)
class SystemStats:
    inverters: int
    isolators: int
    pv_strings: int
    total_panels: int


# --- Parsing ---
def _require_mapping(value, where: str) -> dict:
    if not isinstance(value, dict):
        raise SystemShapeError(
            f"{where}: expected an object, got {type(value).__name__}"
        )
    return value


def _require_list(parent: dict, key: str, where: str) -> list:
    if key not in parent:
        raise SystemShapeError(f"{where}: missing required field '{key}'")
    value = parent[key]
    if not isinstance(value, list):
        raise SystemShapeError(
            f"{where}.{key}: expected a list, got {type(value).__name__}"
        )
    return value


def _parse_pv_string(data, where: str) -> PvString:
    data = _require_mapping(data, where)
    if "model" not in data:
        raise SystemShapeError(f"{where}: missing required field 'model'")
    if "length" not in data:
        raise SystemShapeError(f"{where}: missing required field 'length'")
    model = data["model"]
    length = data["length"]
    if not isinstance(model, str):
        raise SystemShapeError(
            f"{where}.model: expected a string, got {type(model).__name__}"
        )
    # bool is a subclass of int, so reject it explicitly
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise SystemShapeError(
            f"{where}.length: expected a non-negative integer, got {length!r}"
        )
    return PvString(model=model, length=length)


def system_from_dict(data) -> SystemDescription:
    """Build a SystemDescription from a decoded document.

    Raises SystemShapeError naming the first field that does not match the
    expected inverters -> isolators -> pvstrings shape.
    """
    root = _require_mapping(data, "system")
    inverters = []
    for i, inv_data in enumerate(_require_list(root, "inverters", "system")):
        inv_where = f"inverters[{i}]"
        inv_data = _require_mapping(inv_data, inv_where)
        isolators = []
        for j, iso_data in enumerate(_require_list(inv_data, "isolators", inv_where)):
            iso_where = f"{inv_where}.isolators[{j}]"
            iso_data = _require_mapping(iso_data, iso_where)
            strings = tuple(
                _parse_pv_string(string_data, f"{iso_where}.pvstrings[{k}]")
                for k, string_data in enumerate(
                    _require_list(iso_data, "pvstrings", iso_where)
                )
            )
            isolators.append(Isolator(pvstrings=strings))
        inverters.append(Inverter(isolators=tuple(isolators)))
    return SystemDescription(inverters=tuple(inverters))


def load_system(filename) -> SystemDescription:
    """Load a system description from a .json, .yaml or .yml file.

    Read and decode errors propagate to the caller unchanged.
    """
    path = pathlib.Path(filename)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)
    system = system_from_dict(data)
    logger.info("Loaded %d inverter(s) from %s", len(system.inverters), path)
    return system


# --- Statistics ---
def get_system_stats(system: SystemDescription) -> SystemStats:
    """Count inverters, isolators, strings and panels."""
    inverters = isolators = pv_strings = total_panels = 0
    for inverter in system.inverters:
        inverters += 1
        for isolator in inverter.isolators:
            isolators += 1
            for pv_string in isolator.pvstrings:
                pv_strings += 1
                total_panels += pv_string.length
    return SystemStats(
        inverters=inverters,
        isolators=isolators,
        pv_strings=pv_strings,
        total_panels=total_panels,
    )
