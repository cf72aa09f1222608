"""
Helpers to keep routed wires minimal: an orthogonal polyline is condensed to
one segment per straight run, so clamped lanes that collapse to zero length
do not leave stray points or doubled-back corners in the drawing.
"""

Point = tuple[float, float]

# Coordinates closer than this are treated as equal
EPSILON = 1e-9


def _is_zero(value: float) -> bool:
    return abs(value) < EPSILON


def _same_axis(a: Point, b: Point, c: Point) -> bool:
    """True if a->b and b->c both run along the same axis."""
    both_horizontal = _is_zero(b[1] - a[1]) and _is_zero(c[1] - b[1])
    both_vertical = _is_zero(b[0] - a[0]) and _is_zero(c[0] - b[0])
    return both_horizontal or both_vertical


def simplify_polyline(points: list[Point]) -> list[Point]:
    """Reduce a polyline to its start, its corners and its end.

    Converts a list like [(0, 0), (10, 0), (20, 0), (20, 0), (20, 15)]
    into [(0, 0), (20, 0), (20, 15)]. Repeated points are dropped and
    subsequent moves along the same axis are combined, keeping the original
    coordinates of every point that survives.

    Args:
        points: Absolute coordinates of the polyline

    Returns:
        list[Point]: Simplified polyline
    """
    simplified: list[Point] = []
    for point in points:
        if simplified and _is_zero(point[0] - simplified[-1][0]) and _is_zero(
            point[1] - simplified[-1][1]
        ):
            continue
        if len(simplified) >= 2 and _same_axis(simplified[-2], simplified[-1], point):
            # Replace the middle point, the run continues
            simplified[-1] = point
            if _is_zero(point[0] - simplified[-2][0]) and _is_zero(
                point[1] - simplified[-2][1]
            ):
                # the run doubled back onto its start
                simplified.pop()
            continue
        simplified.append(point)
    return simplified


def is_orthogonal(points: list[Point]) -> bool:
    """True if every segment of the polyline is horizontal or vertical."""
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        if not (_is_zero(x2 - x1) or _is_zero(y2 - y1)):
            return False
    return True
