"""
Orthogonal wire routing for the PV single line diagram.

Every connection of a LayoutResult is drawn as one or two axis-aligned
polylines. Where several wires fan into the same component (isolators into an
inverter, strings into an isolator) each sibling is given a slot index, its
rank by vertical position among the siblings, and the slot decides:

- which of the evenly spread terminals it uses on the inverter body, and
- which vertical lane (corridor) its jog runs in, so parallel wires never
  share a lane.

Positive lanes are measured out from the component at the far end of the run
and negative lanes from the isolator, in the opposite direction, so the two
conductors of a circuit run in separate corridors. Lane order flips between
wires that jog downwards and wires that jog upwards, which keeps sibling
wires of the same polarity from crossing each other. Wires of opposite
polarity may still cross, for example where an isolator sits below the
inverter terminals and its positive jog cuts its own negative run.

All functions here are pure: slots are recomputed from the layout every time
a diagram is drawn and nothing is stored on the components.
"""

# Standard library imports
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

# Local application/library specific imports
from corner_minimise import simplify_polyline
from layout import (
    Component,
    ComponentKind,
    Connection,
    ConnectionKind,
    LayoutResult,
    footprint,
)

Point = tuple[float, float]

# --- Constants ---
LANE_WIDTH = 8
POSITIVE_LANE_OFFSET = 16
NEGATIVE_LANE_OFFSET = 16
TERMINAL_MARGIN = 4
TERMINAL_OFFSET = 6  # isolator terminals above (+) and below (-) its centre
RETURN_DROP = 12
PAIR_OFFSET = 4
ROW_LANE_OFFSET = 8
ROW_LANE_STEP = 10
MIN_STUB = 8


class Polarity(Enum):
    POSITIVE = auto()
    NEGATIVE = auto()
    BUS = auto()


@dataclass(frozen=True)
class RoutedPath:
    source: str
    target: str
    kind: ConnectionKind
    polarity: Polarity
    points: tuple[Point, ...]


# --- Geometry helpers ---
def _center(component: Component) -> Point:
    size = footprint(component)
    return (component.x + size.width / 2, component.y + size.height / 2)


def _right(component: Component) -> float:
    return component.x + footprint(component).width


def _fit_lane_width(available: float, total: int) -> float:
    """Lane pitch that fits `total` positive and `total` negative lanes."""
    if total <= 0:
        return LANE_WIDTH
    return min(LANE_WIDTH, max(available, 0) / (2 * total))


def _path(
    connection_kind: ConnectionKind,
    source: Component,
    target: Component,
    polarity: Polarity,
    points: list[Point],
) -> RoutedPath:
    return RoutedPath(
        source=source.id,
        target=target.id,
        kind=connection_kind,
        polarity=polarity,
        points=tuple(simplify_polyline(points)),
    )


# --- Terminals ---
def inverter_terminal_y(
    inverter: Component, slot: int, total: int, polarity: Polarity
) -> float:
    """Y of the terminal a home run enters on the inverter body.

    The inverter carries two terminals per isolator (positive then negative),
    spread evenly over its height and clamped inside the body.
    """
    height = footprint(inverter).height
    count = max(total, 1) * 2
    index = 2 * slot + (1 if polarity == Polarity.NEGATIVE else 0)
    spacing = height / (count + 1)
    y = inverter.y + spacing * (index + 1)
    low = inverter.y + TERMINAL_MARGIN
    high = inverter.y + height - TERMINAL_MARGIN
    return min(max(y, low), high)


def isolator_terminal_y(isolator: Component, polarity: Polarity) -> float:
    _, center_y = _center(isolator)
    if polarity == Polarity.NEGATIVE:
        return center_y + TERMINAL_OFFSET
    return center_y - TERMINAL_OFFSET


# --- Routes ---
def route_home_run(
    isolator: Component,
    inverter: Component,
    slot: int,
    total: int,
    polarity: Polarity,
    kind: ConnectionKind = ConnectionKind.DAISY_POSITIVE,
) -> RoutedPath:
    """Route one conductor from an isolator's left edge to an inverter's right edge."""
    sx = isolator.x
    sy = isolator_terminal_y(isolator, polarity)
    tx = _right(inverter)
    ty = inverter_terminal_y(inverter, slot, total, polarity)

    lane = _fit_lane_width(
        (sx - MIN_STUB - NEGATIVE_LANE_OFFSET) - (tx + POSITIVE_LANE_OFFSET), total
    )
    going_down = sy <= ty
    if polarity == Polarity.NEGATIVE:
        rank = (total - 1 - slot) if going_down else slot
        jog_x = sx - MIN_STUB - NEGATIVE_LANE_OFFSET - rank * lane
    else:
        rank = slot if going_down else (total - 1 - slot)
        jog_x = tx + POSITIVE_LANE_OFFSET + rank * lane
    jog_x = min(max(jog_x, tx), sx)

    points = [(sx, sy), (jog_x, sy), (jog_x, ty), (tx, ty)]
    return _path(kind, isolator, inverter, polarity, points)


def route_string_feed(
    isolator: Component, panel: Component, slot: int, total: int
) -> RoutedPath:
    """Route the positive feed from an isolator to the first panel of a string."""
    sx = _right(isolator)
    sy = isolator_terminal_y(isolator, Polarity.POSITIVE)
    tx = panel.x
    _, ty = _center(panel)

    lane = _fit_lane_width(
        (tx - POSITIVE_LANE_OFFSET) - (sx + NEGATIVE_LANE_OFFSET), total
    )
    jog_x = tx - POSITIVE_LANE_OFFSET - slot * lane
    jog_x = min(max(jog_x, sx), tx)

    points = [(sx, sy), (jog_x, sy), (jog_x, ty), (tx, ty)]
    return _path(ConnectionKind.DAISY_POSITIVE, isolator, panel, Polarity.POSITIVE, points)


def route_panel_link(a: Component, b: Component) -> RoutedPath:
    """Straight positive link between neighbouring panels of one string."""
    _, y = _center(a)
    points = [(_right(a), y), (b.x, y)]
    return _path(ConnectionKind.DAISY_POSITIVE, a, b, Polarity.POSITIVE, points)


def route_string_return(
    panel: Component,
    isolator: Component,
    slot: int,
    total: int,
    first_panel_x: Optional[float] = None,
) -> RoutedPath:
    """Route the negative return from the last panel of a string back to its isolator.

    The return drops below the string row, runs back under the panels and
    climbs to the isolator in a lane next to the isolator body.
    """
    center_x, _ = _center(panel)
    bottom = panel.y + footprint(panel).height
    return_y = bottom + RETURN_DROP
    tx = _right(isolator)
    ty = isolator_terminal_y(isolator, Polarity.NEGATIVE)
    if first_panel_x is None:
        first_panel_x = panel.x

    lane = _fit_lane_width(
        (first_panel_x - POSITIVE_LANE_OFFSET) - (tx + NEGATIVE_LANE_OFFSET), total
    )
    rank = total - 1 - slot
    jog_x = tx + NEGATIVE_LANE_OFFSET + rank * lane
    jog_x = min(max(jog_x, tx), first_panel_x)

    points = [
        (center_x, bottom),
        (center_x, return_y),
        (jog_x, return_y),
        (jog_x, ty),
        (tx, ty),
    ]
    return _path(
        ConnectionKind.DAISY_NEGATIVE_RETURN, panel, isolator, Polarity.NEGATIVE, points
    )


def route_pv_link(
    panel: Component,
    isolator: Component,
    slot: int,
    total: int,
    polarity: Polarity,
    columns: int = 1,
    corridor: Optional[float] = None,
    row_gap: Optional[float] = None,
) -> RoutedPath:
    """Route one conductor from a grid string block up and back to its isolator.

    `columns` is the number of blocks per grid row, `corridor` the free width
    between the isolator and the first grid column and `row_gap` the free
    height between two grid rows. The horizontal lanes above a row and the
    vertical lanes beside the isolator are squeezed to fit those gaps.
    """
    columns = max(columns, 1)
    row, col = divmod(slot, columns)
    rows = -(-max(total, 1) // columns)

    center_x, _ = _center(panel)
    _, iso_center_y = _center(isolator)
    tx = _right(isolator)
    if corridor is None:
        corridor = panel.x - tx

    # each vertical lane carries a pair of conductors, so it is twice as wide
    available = max(corridor - MIN_STUB - POSITIVE_LANE_OFFSET, 0)
    lane = min(2 * LANE_WIDTH, available / max(total, 1))
    rank = (rows - 1 - row) * columns + col
    jog_x = tx + POSITIVE_LANE_OFFSET + rank * lane

    step = ROW_LANE_STEP
    if row_gap is not None and columns > 1:
        free = max(row_gap - ROW_LANE_OFFSET - 2 * PAIR_OFFSET, 0)
        step = min(step, free / (columns - 1))
    lane_y = panel.y - ROW_LANE_OFFSET - col * step

    # Positive runs left/low of the pair, negative right/high, so they never
    # cross; the pair stays narrower than the lane pitch in both axes
    dx = min(PAIR_OFFSET, lane / 2.5)
    dy = min(PAIR_OFFSET, step / 2.5) if columns > 1 else PAIR_OFFSET
    if polarity == Polarity.NEGATIVE:
        dy = -dy
    else:
        dx = -dx

    points = [
        (center_x + dx, panel.y),
        (center_x + dx, lane_y + dy),
        (jog_x + dx, lane_y + dy),
        (jog_x + dx, iso_center_y + dy),
        (tx, iso_center_y + dy),
    ]
    return _path(ConnectionKind.PV_LINK, panel, isolator, polarity, points)


def route_busbar_link(busbar: Component, inverter: Component) -> RoutedPath:
    """Horizontal run from the busbar's right edge to the inverter's left edge."""
    _, y = _center(inverter)
    points = [(_right(busbar), y), (inverter.x, y)]
    return _path(ConnectionKind.BUSBAR_LINK, busbar, inverter, Polarity.BUS, points)


# --- Slots ---
def _slot_group(
    connection: Connection, source: Component, target: Component
) -> Optional[tuple[str, str, str]]:
    """(parent id, child id, group) for connections that fan into a parent."""
    if target.kind == ComponentKind.INVERTER and source.kind == ComponentKind.ISOLATOR:
        return target.id, source.id, "home"
    if connection.kind == ConnectionKind.DAISY_POSITIVE and (
        source.kind == ComponentKind.ISOLATOR and target.kind == ComponentKind.PV_PANEL
    ):
        return source.id, target.id, "feed"
    if connection.kind == ConnectionKind.DAISY_NEGATIVE_RETURN and (
        target.kind == ComponentKind.ISOLATOR
    ):
        return target.id, source.id, "return"
    if connection.kind == ConnectionKind.PV_LINK:
        return target.id, source.id, "pv"
    return None


def assign_slots(result: LayoutResult) -> dict[tuple[str, str], tuple[int, int]]:
    """Rank siblings that share a parent by vertical position.

    Returns a mapping of (parent id, child id) to (slot, total). Siblings are
    ordered by (y, x, id) so the ranking is stable for identical input.
    """
    by_id = {c.id: c for c in result.components}
    groups: dict[tuple[str, str], dict[str, Component]] = {}
    for connection in result.connections:
        source = by_id[connection.source]
        target = by_id[connection.target]
        key = _slot_group(connection, source, target)
        if key is None:
            continue
        parent_id, child_id, group = key
        groups.setdefault((parent_id, group), {})[child_id] = by_id[child_id]

    slots: dict[tuple[str, str], tuple[int, int]] = {}
    for (parent_id, _), children in groups.items():
        ordered = sorted(children.values(), key=lambda c: (c.y, c.x, c.id))
        for slot, child in enumerate(ordered):
            slots[(parent_id, child.id)] = (slot, len(ordered))
    return slots


def _grid_siblings(result: LayoutResult, isolator_id: str) -> list[Component]:
    by_id = {c.id: c for c in result.components}
    return [
        by_id[c.source]
        for c in result.connections
        if c.kind == ConnectionKind.PV_LINK and c.target == isolator_id
    ]


def route_connection(
    result: LayoutResult,
    connection: Connection,
    slots: Optional[dict] = None,
) -> list[RoutedPath]:
    """Route one connection. DC and PV links give a positive and a negative path."""
    if slots is None:
        slots = assign_slots(result)
    source = result.component(connection.source)
    target = result.component(connection.target)
    kind = connection.kind

    if kind == ConnectionKind.BUSBAR_LINK:
        return [route_busbar_link(source, target)]

    if kind == ConnectionKind.DC_LINK:
        slot, total = slots[(target.id, source.id)]
        return [
            route_home_run(source, target, slot, total, Polarity.POSITIVE, kind),
            route_home_run(source, target, slot, total, Polarity.NEGATIVE, kind),
        ]

    if kind == ConnectionKind.PV_LINK:
        slot, total = slots[(target.id, source.id)]
        siblings = _grid_siblings(result, target.id)
        columns = len({c.x for c in siblings})
        corridor = min(c.x for c in siblings) - _right(target)
        row_ys = sorted({c.y for c in siblings})
        row_gap = None
        if len(row_ys) > 1:
            row_gap = row_ys[1] - row_ys[0] - footprint(source).height
        return [
            route_pv_link(
                source, target, slot, total, polarity, columns, corridor, row_gap
            )
            for polarity in (Polarity.POSITIVE, Polarity.NEGATIVE)
        ]

    polarity = (
        Polarity.NEGATIVE
        if kind == ConnectionKind.DAISY_NEGATIVE_RETURN
        else Polarity.POSITIVE
    )
    if target.kind == ComponentKind.INVERTER:
        slot, total = slots[(target.id, source.id)]
        return [route_home_run(source, target, slot, total, polarity, kind)]
    if source.kind == ComponentKind.ISOLATOR:
        slot, total = slots[(source.id, target.id)]
        return [route_string_feed(source, target, slot, total)]
    if target.kind == ComponentKind.ISOLATOR:
        slot, total = slots[(target.id, source.id)]
        # all strings of an isolator start in the same panel column
        first_x = _first_panel_x(result, target.id)
        return [route_string_return(source, target, slot, total, first_x)]
    return [route_panel_link(source, target)]


def _first_panel_x(result: LayoutResult, isolator_id: str) -> Optional[float]:
    xs = [
        result.component(c.target).x
        for c in result.connections
        if c.source == isolator_id and c.kind == ConnectionKind.DAISY_POSITIVE
        and result.component(c.target).kind == ComponentKind.PV_PANEL
    ]
    return min(xs) if xs else None


def route_all(result: LayoutResult) -> list[RoutedPath]:
    """Route every connection of the layout, in connection order."""
    slots = assign_slots(result)
    paths: list[RoutedPath] = []
    for connection in result.connections:
        paths.extend(route_connection(result, connection, slots))
    return paths
