"""
Layout engine for the PV single line diagram.

compute_layout() places every inverter, isolator and PV panel (plus the main
busbar in the grid style) and lists the typed connections between them. It is
a pure function of the system description and the drawing parameters: the
same input always gives the same identifiers, coordinates and connection
order.

Two placement styles are supported:

- daisy (default): one horizontal row of panels per string, with a positive
  daisy chain through the panels and a separate negative return.
- grid: each string drawn as a single block, wrapped into a fixed number of
  columns below its isolator, with every inverter hung off a main busbar.
"""

# Standard library imports
import logging
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import Optional

# Local application/library specific imports
from config import ConfigError, LayoutConfig, LayoutStyle
from pv_system import Inverter, SystemDescription

logger = logging.getLogger(__name__)

BUSBAR_ID = "busbar_main"
BUSBAR_EMPTY_HEIGHT = 100


# --- Enums and Dataclasses ---
class ComponentKind(Enum):
    INVERTER = auto()
    ISOLATOR = auto()
    PV_PANEL = auto()
    BUSBAR = auto()


class ConnectionKind(Enum):
    DAISY_POSITIVE = auto()
    DAISY_NEGATIVE_RETURN = auto()
    BUSBAR_LINK = auto()
    DC_LINK = auto()
    PV_LINK = auto()


@dataclass(frozen=True)
class Footprint:
    width: float
    height: float


SYMBOL_SIZES = MappingProxyType(
    {
        ComponentKind.INVERTER: Footprint(80, 50),
        ComponentKind.ISOLATOR: Footprint(40, 40),
        ComponentKind.PV_PANEL: Footprint(60, 40),
        ComponentKind.BUSBAR: Footprint(20, 400),
    }
)


@dataclass(frozen=True)
class Component:
    id: str
    kind: ComponentKind
    x: float
    y: float
    label: str = ""
    # Only the busbar overrides its symbol size
    width: Optional[float] = None
    height: Optional[float] = None


@dataclass(frozen=True)
class Connection:
    source: str
    target: str
    kind: ConnectionKind


@dataclass(frozen=True)
class LayoutResult:
    components: tuple[Component, ...]
    connections: tuple[Connection, ...]
    width: float
    height: float
    style: LayoutStyle = LayoutStyle.DAISY
    block_top: Optional[float] = None
    block_bottom: Optional[float] = None

    def component(self, component_id: str) -> Component:
        """Look up a component by id. Raises KeyError if it is not present."""
        for component in self.components:
            if component.id == component_id:
                return component
        raise KeyError(component_id)

    def components_of(self, kind: ComponentKind) -> list[Component]:
        return [c for c in self.components if c.kind == kind]


def footprint(component: Component) -> Footprint:
    """Width and height of a component, honouring per-component overrides."""
    symbol = SYMBOL_SIZES[component.kind]
    return Footprint(
        component.width if component.width is not None else symbol.width,
        component.height if component.height is not None else symbol.height,
    )


def bounding_box(component: Component) -> tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of a component's footprint."""
    size = footprint(component)
    return (component.x, component.y, component.x + size.width, component.y + size.height)


def string_label(model: str, length: int) -> str:
    return f"{model} ({length} panels)"


# --- Block sizing ---
def daisy_block_height(inverter: Inverter, config: LayoutConfig) -> float:
    """Vertical space one inverter's isolators and strings take in the daisy style."""
    height = 0
    for isolator in inverter.isolators:
        height += len(isolator.pvstrings) * config.string_spacing
        height += config.isolator_spacing
    return max(height, config.min_block_height)


def grid_rows(string_count: int, config: LayoutConfig) -> int:
    # ceil without floats
    return -(-string_count // config.grid_columns)


def grid_block_height(inverter: Inverter, config: LayoutConfig) -> float:
    """Vertical space one inverter's isolators and string grids take in the grid style."""
    height = 0
    for isolator in inverter.isolators:
        height += grid_rows(len(isolator.pvstrings), config) * config.grid_row_spacing
        height += config.grid_isolator_spacing
    return max(height, config.min_block_height)


# --- Placement ---
def _layout_daisy(system: SystemDescription, config: LayoutConfig):
    inverter_size = SYMBOL_SIZES[ComponentKind.INVERTER]
    isolator_size = SYMBOL_SIZES[ComponentKind.ISOLATOR]

    inverter_x = config.margin
    isolator_x = inverter_x + inverter_size.width + config.component_spacing
    panel_x = isolator_x + isolator_size.width + config.component_spacing

    components: list[Component] = []
    connections: list[Connection] = []
    current_y = config.margin + config.title_space
    layout_top = None
    layout_bottom = None

    for i, inverter in enumerate(system.inverters):
        block_height = daisy_block_height(inverter, config)
        inverter_center_y = current_y + block_height / 2
        inverter_id = f"inverter_{i}"
        components.append(
            Component(
                id=inverter_id,
                kind=ComponentKind.INVERTER,
                x=inverter_x,
                y=inverter_center_y - inverter_size.height / 2,
                label=f"Inverter {i + 1}",
            )
        )

        isolator_y = current_y
        for j, isolator in enumerate(inverter.isolators):
            isolator_id = f"isolator_{i}_{j}"
            components.append(
                Component(
                    id=isolator_id,
                    kind=ComponentKind.ISOLATOR,
                    x=isolator_x,
                    y=isolator_y,
                    label=f"DC Isolator {i + 1}-{j + 1}",
                )
            )
            # Home run: the two conductors between isolator and inverter
            connections.append(
                Connection(isolator_id, inverter_id, ConnectionKind.DAISY_POSITIVE)
            )
            connections.append(
                Connection(
                    isolator_id, inverter_id, ConnectionKind.DAISY_NEGATIVE_RETURN
                )
            )

            for k, pv_string in enumerate(isolator.pvstrings):
                row_y = isolator_y + k * config.string_spacing
                panel_ids = []
                for p in range(pv_string.length):
                    panel_id = f"pv_{i}_{j}_{k}_{p}"
                    label = string_label(pv_string.model, pv_string.length) if p == 0 else ""
                    components.append(
                        Component(
                            id=panel_id,
                            kind=ComponentKind.PV_PANEL,
                            x=panel_x + p * config.panel_spacing,
                            y=row_y,
                            label=label,
                        )
                    )
                    panel_ids.append(panel_id)

                if not panel_ids:
                    logger.debug("String %d of %s has no panels", k, isolator_id)
                    continue
                connections.append(
                    Connection(isolator_id, panel_ids[0], ConnectionKind.DAISY_POSITIVE)
                )
                for a, b in zip(panel_ids, panel_ids[1:]):
                    connections.append(Connection(a, b, ConnectionKind.DAISY_POSITIVE))
                connections.append(
                    Connection(
                        panel_ids[-1], isolator_id, ConnectionKind.DAISY_NEGATIVE_RETURN
                    )
                )

            isolator_y += len(isolator.pvstrings) * config.string_spacing
            isolator_y += config.isolator_spacing

        block_top = current_y
        block_bottom = current_y + block_height
        layout_top = block_top if layout_top is None else min(layout_top, block_top)
        layout_bottom = (
            block_bottom if layout_bottom is None else max(layout_bottom, block_bottom)
        )
        current_y += block_height + config.inverter_spacing

    return components, connections, layout_top, layout_bottom


def _layout_grid(system: SystemDescription, config: LayoutConfig):
    inverter_size = SYMBOL_SIZES[ComponentKind.INVERTER]
    isolator_size = SYMBOL_SIZES[ComponentKind.ISOLATOR]

    busbar_x = config.margin
    inverter_x = busbar_x + config.busbar_column_gap
    isolator_x = inverter_x + inverter_size.width + config.component_spacing
    panel_x = isolator_x + isolator_size.width + config.component_spacing / 2

    components: list[Component] = []
    connections: list[Connection] = []
    current_y = config.margin + config.title_space + config.busbar_padding
    layout_top = None
    layout_bottom = None

    for i, inverter in enumerate(system.inverters):
        block_height = grid_block_height(inverter, config)
        inverter_center_y = current_y + block_height / 2
        inverter_id = f"inverter_{i}"
        components.append(
            Component(
                id=inverter_id,
                kind=ComponentKind.INVERTER,
                x=inverter_x,
                y=inverter_center_y - inverter_size.height / 2,
                label=f"Inverter {i + 1}",
            )
        )
        connections.append(
            Connection(BUSBAR_ID, inverter_id, ConnectionKind.BUSBAR_LINK)
        )

        isolator_y = current_y
        for j, isolator in enumerate(inverter.isolators):
            isolator_id = f"isolator_{i}_{j}"
            components.append(
                Component(
                    id=isolator_id,
                    kind=ComponentKind.ISOLATOR,
                    x=isolator_x,
                    y=isolator_y,
                    label=f"DC Isolator {i + 1}-{j + 1}",
                )
            )
            connections.append(
                Connection(isolator_id, inverter_id, ConnectionKind.DC_LINK)
            )

            for k, pv_string in enumerate(isolator.pvstrings):
                row, col = divmod(k, config.grid_columns)
                pv_id = f"pv_{i}_{j}_{k}"
                components.append(
                    Component(
                        id=pv_id,
                        kind=ComponentKind.PV_PANEL,
                        x=panel_x + col * config.grid_column_spacing,
                        y=isolator_y + config.grid_row_offset + row * config.grid_row_spacing,
                        label=string_label(pv_string.model, pv_string.length),
                    )
                )
                connections.append(Connection(pv_id, isolator_id, ConnectionKind.PV_LINK))

            rows = grid_rows(len(isolator.pvstrings), config)
            isolator_y += rows * config.grid_row_spacing + config.grid_isolator_spacing

        block_top = current_y
        block_bottom = current_y + block_height
        layout_top = block_top if layout_top is None else min(layout_top, block_top)
        layout_bottom = (
            block_bottom if layout_bottom is None else max(layout_bottom, block_bottom)
        )
        current_y += block_height + config.inverter_spacing

    # The busbar spans every inverter block once they are all placed
    if layout_top is not None:
        busbar = Component(
            id=BUSBAR_ID,
            kind=ComponentKind.BUSBAR,
            x=busbar_x,
            y=layout_top - config.busbar_padding,
            label="Main Bus",
            width=SYMBOL_SIZES[ComponentKind.BUSBAR].width,
            height=(layout_bottom - layout_top) + 2 * config.busbar_padding,
        )
    else:
        busbar = Component(
            id=BUSBAR_ID,
            kind=ComponentKind.BUSBAR,
            x=busbar_x,
            y=config.margin,
            label="Main Bus",
            width=SYMBOL_SIZES[ComponentKind.BUSBAR].width,
            height=BUSBAR_EMPTY_HEIGHT,
        )
    components.insert(0, busbar)

    return components, connections, layout_top, layout_bottom


def check_spacing(config: LayoutConfig) -> None:
    """Reject spacings too small for the symbols they separate."""
    inverter = SYMBOL_SIZES[ComponentKind.INVERTER]
    isolator = SYMBOL_SIZES[ComponentKind.ISOLATOR]
    panel = SYMBOL_SIZES[ComponentKind.PV_PANEL]
    busbar = SYMBOL_SIZES[ComponentKind.BUSBAR]
    minimums = [
        ("min_block_height", inverter.height),
        ("string_spacing", panel.height),
        ("isolator_spacing", isolator.height),
        ("panel_spacing", panel.width),
        ("grid_row_offset", isolator.height),
        ("grid_row_spacing", panel.height),
        ("grid_column_spacing", panel.width),
        ("grid_isolator_spacing", isolator.height),
        ("busbar_column_gap", busbar.width),
    ]
    for name, minimum in minimums:
        value = getattr(config, name)
        # NaN compares false both ways
        if not value >= minimum:
            raise ConfigError(f"{name} must be at least {minimum}, got {value}")
    # last grid row must end before the next isolator starts
    needed = config.grid_row_offset + panel.height - config.grid_row_spacing
    if not config.grid_isolator_spacing >= needed:
        raise ConfigError(
            f"grid_isolator_spacing must be at least {needed}, "
            f"got {config.grid_isolator_spacing}"
        )


def canvas_size(
    components: list[Component], config: LayoutConfig
) -> tuple[float, float]:
    """Canvas width and height large enough for every component plus margin."""
    max_right = 0
    max_bottom = 0
    for component in components:
        _, _, right, bottom = bounding_box(component)
        max_right = max(max_right, right)
        max_bottom = max(max_bottom, bottom)
    width = max(config.canvas_min_width, max_right + config.margin + config.canvas_padding_x)
    height = max(
        config.canvas_min_height, max_bottom + config.margin + config.canvas_padding_y
    )
    return width, height


def compute_layout(
    system: SystemDescription, config: Optional[LayoutConfig] = None
) -> LayoutResult:
    """Place every component of the system and list its connections."""
    if config is None:
        config = LayoutConfig()
    config.validate()
    check_spacing(config)

    if config.layout_style == LayoutStyle.GRID:
        components, connections, top, bottom = _layout_grid(system, config)
    else:
        components, connections, top, bottom = _layout_daisy(system, config)

    width, height = canvas_size(components, config)
    logger.debug(
        "Layout (%s): %d components, %d connections, canvas %gx%g",
        config.layout_style.value,
        len(components),
        len(connections),
        width,
        height,
    )
    return LayoutResult(
        components=tuple(components),
        connections=tuple(connections),
        width=width,
        height=height,
        style=config.layout_style,
        block_top=top,
        block_bottom=bottom,
    )
