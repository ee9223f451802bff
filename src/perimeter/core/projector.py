"""Diagram projector: fit a raw outline and its labels onto a canvas.

The projector is the single place where shape-local coordinates become canvas
coordinates. The on-screen renderer and the print layout both call
``project``; they differ only in target size and font size.

Projection steps:
1. Normalize the outline to its bounding box
2. Work out label standoffs (raised for crowded edges)
3. Reserve a margin on each axis for the largest label
4. Scale uniformly so the limiting axis fills the remaining area
5. Centre the shape on the canvas
"""

import math

from perimeter.config import PlacementConfig
from perimeter.core.geometry import bounding_box, centroid, midpoint
from perimeter.core.placement import pill_size
from perimeter.domain import LabelSpec, Point, ProjectedShape, RawShape
from perimeter.exceptions import ProjectionError


def edge_crowding(points: tuple[Point, ...], radius: float) -> list[float]:
    """Crowding factor in [0, 1] for every edge.

    An edge is crowded when its midpoint lies close to the centroid, measured
    on the outline normalized to unit size. Such edges sit in notches and
    re-entrant corners where labels compete for room.

    Args:
        points: Outline vertices
        radius: Normalized distance below which an edge counts as crowded

    Returns:
        One factor per edge; 0 for uncrowded edges, 1 at the centroid
    """
    min_x, min_y, max_x, max_y = bounding_box(points)
    size = max(max_x - min_x, max_y - min_y) or 1.0
    center = centroid(points)
    n = len(points)

    factors = []
    for i in range(n):
        mid = midpoint(points[i], points[(i + 1) % n])
        distance = math.hypot(mid.x - center.x, mid.y - center.y) / size
        factors.append(max(0.0, 1.0 - distance / radius) if radius > 0 else 0.0)
    return factors


def project(
    raw_shape: RawShape,
    target_width: float,
    target_height: float,
    labels: list[LabelSpec],
    font_size: float,
    config: PlacementConfig | None = None,
) -> ProjectedShape:
    """Project a raw outline onto a ``target_width`` x ``target_height`` canvas.

    Args:
        raw_shape: Outline in shape-local coordinates
        target_width: Canvas width
        target_height: Canvas height
        labels: Labels that will be placed around the outline
        font_size: Label font size in canvas units
        config: Placement configuration (defaults if None)

    Returns:
        Projected outline with per-edge standoffs

    Raises:
        ProjectionError: If the canvas cannot hold the label margins
    """
    config = config or PlacementConfig()
    points = raw_shape.points

    base_standoff = font_size * config.standoff_ratio
    standoffs = tuple(
        base_standoff * (1 + config.crowding_gain * crowd)
        for crowd in edge_crowding(points, config.crowding_radius)
    )

    slack = config.margin_slack_ratio * font_size
    margin_x = margin_y = slack
    if labels:
        max_standoff = max(standoffs[spec.edge_index] for spec in labels)
        sizes = [pill_size(spec.text, font_size, config) for spec in labels]
        margin_x += max_standoff + max(w for w, _ in sizes) / 2
        margin_y += max_standoff + max(h for _, h in sizes) / 2

    available_w = target_width - 2 * margin_x
    available_h = target_height - 2 * margin_y
    if available_w <= 0 or available_h <= 0:
        raise ProjectionError(
            target_width,
            target_height,
            f"label margins need {2 * margin_x:.1f} x {2 * margin_y:.1f}",
        )

    min_x, min_y, max_x, max_y = bounding_box(points)
    span_x = (max_x - min_x) or 1.0
    span_y = (max_y - min_y) or 1.0
    scale = min(available_w / span_x, available_h / span_y)

    offset_x = (target_width - span_x * scale) / 2
    offset_y = (target_height - span_y * scale) / 2

    projected = tuple(
        Point(offset_x + (p.x - min_x) * scale, offset_y + (p.y - min_y) * scale) for p in points
    )

    return ProjectedShape(
        points=projected,
        width=target_width,
        height=target_height,
        scale=scale,
        margin_x=margin_x,
        margin_y=margin_y,
        standoffs=standoffs,
    )
