"""Label types for measurement pills.

This module defines the label placement domain models used to position
measurement labels ("pills") around the edges of a projected shape.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from perimeter.domain.shape import Point


class LabelState(str, Enum):
    """Display state of a measurement label."""

    GIVEN = "given"
    HIDDEN = "hidden"
    REVEALED = "revealed"


@dataclass(frozen=True)
class LabelSpec:
    """What to write on one edge, before any geometry is known.

    Attributes:
        edge_index: Edge the label measures
        text: Label text
        state: Display state
        colour: Text colour
    """

    edge_index: int
    text: str
    state: LabelState = LabelState.GIVEN
    colour: str = "#1e40af"


@dataclass(frozen=True)
class LabelCandidate:
    """Candidate anchor positions for one labelled edge.

    Attributes:
        edge_index: Edge the label measures
        text: Label text (e.g. "7 cm", "?")
        anchors: Perpendicular-outward anchor followed by its two 45 degree
            rotations
        width: Rendered pill width
        height: Rendered pill height
        midpoint: Edge midpoint the leader line is tethered to
        standoff: Distance from midpoint to every anchor
        state: Display state
        colour: Text colour
    """

    edge_index: int
    text: str
    anchors: tuple[Point, ...]
    width: float
    height: float
    midpoint: Point
    standoff: float
    state: LabelState = LabelState.GIVEN
    colour: str = "#1e40af"


@dataclass(frozen=True)
class PlacedLabel:
    """A label at its chosen anchor.

    Attributes:
        edge_index: Edge the label measures
        text: Label text
        anchor: Pill centre
        leader_start: Edge midpoint; the leader line runs to ``anchor``
        width: Pill width
        height: Pill height
        state: Display state
        colour: Text colour
        candidate_index: Which of the candidate anchors was chosen
    """

    edge_index: int
    text: str
    anchor: Point
    leader_start: Point
    width: float
    height: float
    state: LabelState
    colour: str
    candidate_index: int

    @property
    def leader(self) -> tuple[Point, Point]:
        """Leader line endpoints (edge midpoint, pill centre)."""
        return (self.leader_start, self.anchor)

    def bounding_box(self) -> tuple[float, float, float, float]:
        """Pill bounding box as (min_x, min_y, max_x, max_y)."""
        half_w = self.width / 2
        half_h = self.height / 2
        return (
            self.anchor.x - half_w,
            self.anchor.y - half_h,
            self.anchor.x + half_w,
            self.anchor.y + half_h,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "edge_index": self.edge_index,
            "text": self.text,
            "anchor": self.anchor.to_dict(),
            "leader_start": self.leader_start.to_dict(),
            "width": self.width,
            "height": self.height,
            "state": self.state.value,
            "colour": self.colour,
            "candidate_index": self.candidate_index,
        }


@dataclass(frozen=True)
class Placement:
    """Chosen anchor for every label of one diagram.

    Attributes:
        labels: Placed labels in candidate order
        choices: Candidate index chosen per label
        min_separation: Smallest pairwise pill gap of the chosen assignment
            (infinite with fewer than two labels)
        exhaustive: True when every assignment was evaluated
    """

    labels: tuple[PlacedLabel, ...] = ()
    choices: tuple[int, ...] = ()
    min_separation: float = float("inf")
    exhaustive: bool = True

    def __len__(self) -> int:
        return len(self.labels)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "labels": [label.to_dict() for label in self.labels],
            "choices": list(self.choices),
            "min_separation": self.min_separation,
            "exhaustive": self.exhaustive,
        }
