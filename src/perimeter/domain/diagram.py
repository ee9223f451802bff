"""Projected diagram model shared by the screen and print renderers."""

from dataclasses import dataclass
from typing import Any

from perimeter.domain.label import Placement
from perimeter.domain.shape import Point


@dataclass(frozen=True)
class ProjectedShape:
    """A raw shape mapped onto a target canvas.

    Attributes:
        points: Vertices in canvas coordinates
        width: Canvas width
        height: Canvas height
        scale: Canvas units per shape-local unit
        margin_x: Horizontal margin reserved for labels
        margin_y: Vertical margin reserved for labels
        standoffs: Label standoff per edge, in canvas units
    """

    points: tuple[Point, ...]
    width: float
    height: float
    scale: float
    margin_x: float
    margin_y: float
    standoffs: tuple[float, ...]

    def translated(self, dx: float, dy: float) -> "ProjectedShape":
        """Return a copy shifted by (dx, dy), used to place a diagram in a page cell."""
        return ProjectedShape(
            points=tuple(Point(p.x + dx, p.y + dy) for p in self.points),
            width=self.width,
            height=self.height,
            scale=self.scale,
            margin_x=self.margin_x,
            margin_y=self.margin_y,
            standoffs=self.standoffs,
        )


@dataclass(frozen=True)
class TickMark:
    """Equal-length tick marks drawn across one edge.

    Attributes:
        edge_index: Edge the ticks cross
        count: Number of ticks (symmetry group index + 1)
        segments: Tick line segments in canvas coordinates
    """

    edge_index: int
    count: int
    segments: tuple[tuple[Point, Point], ...]


@dataclass(frozen=True)
class DiagramModel:
    """Everything a renderer needs to draw one question.

    Attributes:
        shape_key: Catalogue key of the shape
        points: Projected vertices
        width: Canvas width
        height: Canvas height
        origin: Top-left corner of the canvas in the renderer's frame
        scale: Canvas units per shape-local unit
        font_size: Label font size in canvas units
        ticks: Tick marks for equal-length groups
        placement: Placed labels with leader lines
        show_answer: Whether labels are in answer mode
    """

    shape_key: str
    points: tuple[Point, ...]
    width: float
    height: float
    origin: Point
    scale: float
    font_size: float
    ticks: tuple[TickMark, ...]
    placement: Placement
    show_answer: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "shape_key": self.shape_key,
            "points": [p.to_dict() for p in self.points],
            "width": self.width,
            "height": self.height,
            "origin": self.origin.to_dict(),
            "scale": self.scale,
            "font_size": self.font_size,
            "ticks": [
                {
                    "edge_index": t.edge_index,
                    "count": t.count,
                    "segments": [[a.to_dict(), b.to_dict()] for a, b in t.segments],
                }
                for t in self.ticks
            ],
            "placement": self.placement.to_dict(),
            "show_answer": self.show_answer,
        }
