"""
Sanity checks for a computed layout.

Overlap between symbols is detected with shapely boxes, the electrical
connectivity of the diagram with a networkx graph. validate_layout() runs all
of them and raises LayoutError describing every problem it found.
"""

# Standard library imports
import logging

# Third-party imports
import networkx as nx
from shapely.geometry import box

# Local application/library specific imports
from layout import ComponentKind, LayoutResult, bounding_box

logger = logging.getLogger(__name__)

MAX_REPORTED_PROBLEMS = 20


class LayoutError(RuntimeError):
    """Raised when a layout breaks one of the diagram invariants."""

    def __init__(self, problems: list[str]):
        self.problems = problems
        shown = problems[:MAX_REPORTED_PROBLEMS]
        message = f"{len(problems)} layout problem(s):\n  " + "\n  ".join(shown)
        if len(problems) > len(shown):
            message += f"\n  ... and {len(problems) - len(shown)} more"
        super().__init__(message)


def find_overlaps(result: LayoutResult) -> list[tuple[str, str]]:
    """Pairs of component ids whose symbols overlap.

    Symbols that only share an edge are not counted as overlapping.
    """
    polygons = [(c.id, box(*bounding_box(c))) for c in result.components]
    overlaps = []
    # Sort by left edge so pairs that cannot meet are skipped early
    polygons.sort(key=lambda item: item[1].bounds[0])
    for index, (id_i, poly_i) in enumerate(polygons):
        max_x = poly_i.bounds[2]
        for id_j, poly_j in polygons[index + 1 :]:
            if poly_j.bounds[0] >= max_x:
                break
            if poly_i.intersects(poly_j) and not poly_i.touches(poly_j):
                overlaps.append(tuple(sorted((id_i, id_j))))
    return sorted(overlaps)


def dangling_connections(result: LayoutResult) -> list[str]:
    """Describe every connection that names a component not in the layout."""
    known = {c.id for c in result.components}
    problems = []
    for index, connection in enumerate(result.connections):
        for end in (connection.source, connection.target):
            if end not in known:
                problems.append(
                    f"connection {index} ({connection.kind.name}) refers to unknown "
                    f"component '{end}'"
                )
    return problems


def duplicate_ids(result: LayoutResult) -> list[str]:
    seen = set()
    duplicates = []
    for component in result.components:
        if component.id in seen:
            duplicates.append(component.id)
        seen.add(component.id)
    return duplicates


def connection_graph(result: LayoutResult) -> nx.MultiDiGraph:
    """Directed multigraph of components (nodes) and typed connections (edges)."""
    graph = nx.MultiDiGraph()
    for component in result.components:
        graph.add_node(component.id, kind=component.kind, label=component.label)
    for connection in result.connections:
        graph.add_edge(connection.source, connection.target, kind=connection.kind)
    return graph


def unreachable_components(result: LayoutResult) -> list[str]:
    """Isolators and panels with no electrical path to any inverter."""
    graph = connection_graph(result).to_undirected(as_view=True)
    inverters = {c.id for c in result.components_of(ComponentKind.INVERTER)}
    unreachable = set()
    for members in nx.connected_components(graph):
        if not members & inverters:
            unreachable.update(members)
    return [
        c.id
        for c in result.components
        if c.id in unreachable
        and c.kind in (ComponentKind.ISOLATOR, ComponentKind.PV_PANEL)
    ]


def uncontained_components(result: LayoutResult, margin: float) -> list[str]:
    """Components whose footprint plus margin does not fit the canvas."""
    outside = []
    for component in result.components:
        min_x, min_y, max_x, max_y = bounding_box(component)
        if min_x < 0 or min_y < 0:
            outside.append(component.id)
        elif max_x + margin > result.width or max_y + margin > result.height:
            outside.append(component.id)
    return outside


def validate_layout(result: LayoutResult, margin: float = 0) -> None:
    """Raise LayoutError if the layout breaks any diagram invariant."""
    problems = []
    for component_id in duplicate_ids(result):
        problems.append(f"duplicate component id '{component_id}'")
    problems.extend(dangling_connections(result))
    for id_a, id_b in find_overlaps(result):
        problems.append(f"components '{id_a}' and '{id_b}' overlap")
    for component_id in uncontained_components(result, margin):
        problems.append(f"component '{component_id}' extends past the canvas")
    # Reachability is only meaningful once every connection end is known
    if not problems:
        for component_id in unreachable_components(result):
            problems.append(f"component '{component_id}' has no path to an inverter")

    if problems:
        raise LayoutError(problems)
    logger.debug(
        "Layout passed checks: %d components, %d connections",
        len(result.components),
        len(result.connections),
    )
