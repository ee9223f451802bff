"""Core geometric types for shape description.

This module defines the fundamental shape types used throughout perimeter:
- Point: A 2D point in a shape-local or canvas frame
- ShapeKind: Polygon catalogue versus rectilinear templates
- ShapeFamily: Coarse family used to balance worksheet batches
- ShapeDefinition: Static catalogue entry with symmetry groups
- RawShape: A closed outline in unscaled shape-local coordinates
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ShapeKind(str, Enum):
    """Which catalogue a shape comes from."""

    POLYGON = "polygon"
    RECTILINEAR = "rectilinear"


class ShapeFamily(str, Enum):
    """Coarse shape family.

    Only used to avoid over-repeating one family within a worksheet batch.
    """

    TRIANGLE = "triangle"
    REGULAR = "regular"
    IRREGULAR = "irregular"
    RECTILINEAR = "rectilinear"


class Orientation(str, Enum):
    """Orientation of an edge in the shape-local frame."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    OBLIQUE = "oblique"


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts. The y axis points down, as
    on a canvas or a printed page.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple."""
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary."""
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True)
class ShapeDefinition:
    """Symbolic description of a shape family.

    Attributes:
        key: Catalogue key (e.g. "square", "l_shape")
        name: Human-readable name used in working steps
        sides: Number of edges
        groups: Partition of edge indices into symmetry groups; every edge of
            a group has the same length
        family: Coarse family for batch balancing
        kind: Polygon catalogue or rectilinear template
        tier: Lowest difficulty level the shape appears at
        axis_aligned: True when every edge is horizontal or vertical, which
            makes missing-edge questions derivable
    """

    key: str
    name: str
    sides: int
    groups: tuple[tuple[int, ...], ...]
    family: ShapeFamily
    kind: ShapeKind
    tier: int = 1
    axis_aligned: bool = False

    def __post_init__(self) -> None:
        covered = sorted(i for group in self.groups for i in group)
        if covered != list(range(self.sides)):
            raise ValueError(
                f"Symmetry groups of '{self.key}' must partition edges 0..{self.sides - 1}"
            )

    def group_of(self, edge_index: int) -> int:
        """Return the index of the symmetry group containing an edge."""
        for group_idx, group in enumerate(self.groups):
            if edge_index in group:
                return group_idx
        raise IndexError(f"Edge {edge_index} is not part of '{self.key}'")

    @property
    def is_regular(self) -> bool:
        """True when all edges share one length."""
        return len(self.groups) == 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "key": self.key,
            "name": self.name,
            "sides": self.sides,
            "groups": [list(g) for g in self.groups],
            "family": self.family.value,
            "kind": self.kind.value,
            "tier": self.tier,
            "axis_aligned": self.axis_aligned,
        }


@dataclass(frozen=True)
class RawShape:
    """A closed outline in an unscaled, origin-relative frame.

    Edge ``i`` connects vertex ``i`` to vertex ``(i + 1) % n``.

    Attributes:
        points: Ordered vertices of the outline
    """

    points: tuple[Point, ...]

    def __len__(self) -> int:
        return len(self.points)

    def edge(self, index: int) -> tuple[Point, Point]:
        """Return the endpoints of edge ``index``."""
        n = len(self.points)
        return self.points[index % n], self.points[(index + 1) % n]

    def edges(self) -> list[tuple[Point, Point]]:
        """Return the endpoints of every edge in order."""
        return [self.edge(i) for i in range(len(self.points))]

    @classmethod
    def from_tuples(cls, coords: list[tuple[float, float]]) -> "RawShape":
        """Build a raw shape from (x, y) tuples."""
        return cls(points=tuple(Point(float(x), float(y)) for x, y in coords))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"points": [p.to_dict() for p in self.points]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RawShape":
        """Deserialize from dictionary."""
        return cls(points=tuple(Point.from_dict(p) for p in data["points"]))
