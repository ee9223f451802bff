"""Diagram builder: one immutable model shared by every renderer.

``build_diagram`` combines the projector, the label placement engine and the
equal-length tick marks into a ``DiagramModel``. Renderers only draw what the
model holds; they contain no geometry of their own.
"""

import structlog

from perimeter.config import PlacementConfig, StyleConfig
from perimeter.core.geometry import edge_length, midpoint, outward_normal
from perimeter.core.placement import LabelPlacer
from perimeter.core.projector import project
from perimeter.domain import (
    DiagramModel,
    Edge,
    LabelSpec,
    LabelState,
    Point,
    Question,
    ShapeKind,
    TickMark,
    Unit,
)

logger = structlog.get_logger(__name__)


def label_specs(question: Question, show_answer: bool, style: StyleConfig) -> list[LabelSpec]:
    """Text, state and colour of every labelled edge.

    In answer mode missing and converted edges are revealed in centimetres.
    """
    specs = []
    for edge in question.edges:
        if not edge.labelled:
            continue
        state = _label_state(edge, show_answer)
        colour = {
            LabelState.GIVEN: style.given_colour,
            LabelState.HIDDEN: style.hidden_colour,
            LabelState.REVEALED: style.revealed_colour,
        }[state]
        text = edge.label_text(reveal=state == LabelState.REVEALED)
        specs.append(LabelSpec(edge_index=edge.index, text=text, state=state, colour=colour))
    return specs


def _label_state(edge: Edge, show_answer: bool) -> LabelState:
    if show_answer and (edge.hidden or edge.unit != Unit.CM):
        return LabelState.REVEALED
    if edge.hidden:
        return LabelState.HIDDEN
    return LabelState.GIVEN


def tick_marks(
    question: Question,
    points: tuple[Point, ...],
    font_size: float,
    config: PlacementConfig,
) -> tuple[TickMark, ...]:
    """Equal-length tick marks for polygon symmetry groups.

    Every edge of a group with more than one member gets ``group + 1`` short
    strokes across its midpoint, so edges sharing a tick count share a length.
    """
    if question.definition.kind != ShapeKind.POLYGON:
        return ()

    half = font_size * config.tick_length_ratio / 2
    spacing = font_size * config.tick_spacing_ratio
    n = len(points)
    ticks = []

    for group_index, group in enumerate(question.definition.groups):
        if len(group) < 2:
            continue
        count = group_index + 1
        for i in group:
            start, end = points[i], points[(i + 1) % n]
            length = edge_length(start, end)
            ux, uy = (end.x - start.x) / length, (end.y - start.y) / length
            nx, ny = -uy, ux
            mid = midpoint(start, end)

            segments = []
            for k in range(count):
                shift = (k - (count - 1) / 2) * spacing
                cx, cy = mid.x + ux * shift, mid.y + uy * shift
                segments.append(
                    (Point(cx - nx * half, cy - ny * half), Point(cx + nx * half, cy + ny * half))
                )
            ticks.append(TickMark(edge_index=i, count=count, segments=tuple(segments)))

    return tuple(ticks)


def build_diagram(
    question: Question,
    width: float,
    height: float,
    font_size: float,
    *,
    show_answer: bool = False,
    origin: Point = Point(0.0, 0.0),
    placement_config: PlacementConfig | None = None,
    style: StyleConfig | None = None,
) -> DiagramModel:
    """Build the renderer-independent diagram for a question.

    Args:
        question: Generated question
        width: Canvas width
        height: Canvas height
        font_size: Label font size in canvas units
        show_answer: Reveal missing and converted edges in centimetres
        origin: Top-left corner of the canvas in the renderer's frame; every
            coordinate of the returned model is offset by it
        placement_config: Placement configuration (defaults if None)
        style: Colours (defaults if None)

    Returns:
        Diagram model

    Raises:
        ProjectionError: If the canvas is too small for the labels
    """
    config = placement_config or PlacementConfig()
    style = style or StyleConfig()

    specs = label_specs(question, show_answer, style)
    projected = project(question.raw_shape, width, height, specs, font_size, config)
    projected = projected.translated(origin.x, origin.y)
    points = projected.points
    n = len(points)

    placer = LabelPlacer(config)
    candidates = [
        placer.build_candidate(
            edge_index=spec.edge_index,
            text=spec.text,
            midpoint=midpoint(points[spec.edge_index], points[(spec.edge_index + 1) % n]),
            normal=outward_normal(points, spec.edge_index),
            standoff=projected.standoffs[spec.edge_index],
            font_size=font_size,
            state=spec.state,
            colour=spec.colour,
        )
        for spec in specs
    ]
    placement = placer.place(candidates)

    logger.debug(
        "Diagram built",
        shape=question.shape_key,
        labels=len(placement),
        scale=round(projected.scale, 4),
        min_separation=placement.min_separation,
    )

    return DiagramModel(
        shape_key=question.shape_key,
        points=points,
        width=width,
        height=height,
        origin=origin,
        scale=projected.scale,
        font_size=font_size,
        ticks=tick_marks(question, points, font_size, config),
        placement=placement,
        show_answer=show_answer,
    )
