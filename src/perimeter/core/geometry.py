"""Geometric primitives for shape generation, labelling and projection.

This module provides core mathematical utilities for:
- Signed area calculation (shoelace formula)
- Point-in-polygon testing (ray casting algorithm)
- Centroid, edge length, midpoint and bounding box
- Edge orientation and direction classification
- Perpendicular, outward-normal and rotated unit vectors

All functions are pure and stateless.
"""

import math

from perimeter.domain import Orientation, Point

EPSILON = 1e-9


def signed_area(points: list[Point] | tuple[Point, ...]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    With the y axis pointing down, a positive area means the outline runs
    clockwise on screen.

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
        >>> signed_area(square)
        1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def point_in_polygon(point: Point, polygon: list[Point] | tuple[Point, ...]) -> bool:
    """Determine if a point is inside a polygon using ray casting algorithm.

    Casts a horizontal ray from the point to the right and counts intersections
    with polygon edges. Odd number of intersections = inside, even = outside.

    Args:
        point: The point to test
        polygon: List of points forming the polygon boundary

    Returns:
        True if point is inside polygon, False otherwise

    Examples:
        >>> square = [Point(0.0, 0.0), Point(2.0, 0.0), Point(2.0, 2.0), Point(0.0, 2.0)]
        >>> point_in_polygon(Point(1.0, 1.0), square)
        True
        >>> point_in_polygon(Point(3.0, 3.0), square)
        False
    """
    n = len(polygon)
    if n < 3:
        return False

    inside = False
    x, y = point.x, point.y
    j = n - 1

    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y

        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def centroid(points: list[Point] | tuple[Point, ...]) -> Point:
    """Average of the polygon's vertices.

    Raises:
        ValueError: If points is empty
    """
    if not points:
        raise ValueError("Cannot compute centroid of an empty point list")
    n = len(points)
    return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)


def edge_length(start: Point, end: Point) -> float:
    """Euclidean length of the segment from start to end."""
    return math.hypot(end.x - start.x, end.y - start.y)


def midpoint(start: Point, end: Point) -> Point:
    """Midpoint of the segment from start to end."""
    return Point((start.x + end.x) / 2, (start.y + end.y) / 2)


def bounding_box(points: list[Point] | tuple[Point, ...]) -> tuple[float, float, float, float]:
    """Calculate the axis-aligned bounding box.

    Returns:
        Tuple of (min_x, min_y, max_x, max_y); all zeros for no points
    """
    if not points:
        return (0.0, 0.0, 0.0, 0.0)
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return (min(xs), min(ys), max(xs), max(ys))


def edge_orientation(start: Point, end: Point, tolerance: float = EPSILON) -> Orientation:
    """Classify a segment as horizontal, vertical or oblique."""
    if abs(end.y - start.y) <= tolerance:
        return Orientation.HORIZONTAL
    if abs(end.x - start.x) <= tolerance:
        return Orientation.VERTICAL
    return Orientation.OBLIQUE


def edge_direction(start: Point, end: Point, tolerance: float = EPSILON) -> tuple[int, int]:
    """Axis direction of an axis-aligned segment.

    Returns:
        (1, 0) rightwards, (-1, 0) leftwards, (0, 1) downwards, (0, -1) upwards

    Raises:
        ValueError: If the segment is oblique or has zero length
    """
    orientation = edge_orientation(start, end, tolerance)
    if orientation == Orientation.HORIZONTAL and abs(end.x - start.x) > tolerance:
        return (1 if end.x > start.x else -1, 0)
    if orientation == Orientation.VERTICAL and abs(end.y - start.y) > tolerance:
        return (0, 1 if end.y > start.y else -1)
    raise ValueError("Edge direction is only defined for non-degenerate axis-aligned edges")


def is_axis_aligned(points: list[Point] | tuple[Point, ...]) -> bool:
    """True when every edge of the closed outline is horizontal or vertical."""
    n = len(points)
    return all(
        edge_orientation(points[i], points[(i + 1) % n]) != Orientation.OBLIQUE for i in range(n)
    )


def has_degenerate_edge(points: list[Point] | tuple[Point, ...], tolerance: float = EPSILON) -> bool:
    """True when any edge of the closed outline has (near) zero length."""
    n = len(points)
    return any(edge_length(points[i], points[(i + 1) % n]) <= tolerance for i in range(n))


def perpendicular_direction(p1: Point, p2: Point) -> tuple[float, float]:
    """Calculate the unit perpendicular vector to a line from p1 to p2.

    The perpendicular is the direction vector (p2 - p1) rotated by +90 degrees,
    (x, y) -> (-y, x).

    Args:
        p1: Start point of line
        p2: End point of line

    Returns:
        Tuple (px, py) representing the unit perpendicular vector

    Raises:
        ValueError: If p1 and p2 are the same point (zero-length line)
    """
    dx = p2.x - p1.x
    dy = p2.y - p1.y

    length = math.hypot(dx, dy)
    if length < 1e-10:
        raise ValueError("Cannot calculate perpendicular of zero-length line")

    dx /= length
    dy /= length

    return -dy, dx


def rotate(vector: tuple[float, float], angle: float) -> tuple[float, float]:
    """Rotate a vector by ``angle`` radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    x, y = vector
    return (x * cos_a - y * sin_a, x * sin_a + y * cos_a)


def outward_normal(points: list[Point] | tuple[Point, ...], index: int) -> tuple[float, float]:
    """Unit normal of edge ``index`` pointing away from the polygon interior.

    Probes a point just either side of the edge midpoint. If the probe cannot
    tell the sides apart, falls back to pointing away from the centroid.

    Args:
        points: Closed polygon outline
        index: Edge index

    Returns:
        Tuple (nx, ny) unit vector
    """
    n = len(points)
    start, end = points[index % n], points[(index + 1) % n]
    px, py = perpendicular_direction(start, end)
    mid = midpoint(start, end)

    probe = max(edge_length(start, end) * 1e-3, 1e-6)
    inside_pos = point_in_polygon(Point(mid.x + px * probe, mid.y + py * probe), points)
    inside_neg = point_in_polygon(Point(mid.x - px * probe, mid.y - py * probe), points)

    if inside_pos != inside_neg:
        return (-px, -py) if inside_pos else (px, py)

    center = centroid(points)
    if (mid.x - center.x) * px + (mid.y - center.y) * py < 0:
        return (-px, -py)
    return (px, py)
