"""Measurement and question types.

This module defines the generated question model:
- Unit: Display unit of a measurement
- Edge: One edge of a generated shape with its length and display state
- WorkingStep: One line of the worked solution
- Question: A complete generated question
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from perimeter.domain.shape import Orientation, RawShape, ShapeDefinition


class Unit(str, Enum):
    """Display unit for an edge length."""

    CM = "cm"
    MM = "mm"
    M = "m"


class StepKind(str, Enum):
    """Role of a working step in the solution."""

    INFO = "info"
    CONVERSION = "conversion"
    DERIVATION = "derivation"
    SUM = "sum"
    ANSWER = "answer"


@dataclass(frozen=True)
class Edge:
    """One edge of a generated shape.

    Attributes:
        index: Edge index in the raw shape
        group: Symmetry group index
        length_cm: Base length in centimetres
        orientation: Horizontal, vertical or oblique in the shape-local frame
        unit: Unit the length is displayed in
        display: Length rendered in ``unit`` (e.g. "120 mm")
        hidden: Length withheld, to be derived by the learner
        labelled: Whether the edge carries a measurement label
    """

    index: int
    group: int
    length_cm: int
    orientation: Orientation
    unit: Unit = Unit.CM
    display: str = ""
    hidden: bool = False
    labelled: bool = True

    def label_text(self, reveal: bool = False) -> str:
        """Text shown in this edge's label.

        Args:
            reveal: Answer mode; missing and converted edges show their
                length in centimetres

        Returns:
            Label text
        """
        if reveal:
            return f"{self.length_cm} cm"
        if self.hidden:
            return "?"
        return self.display or f"{self.length_cm} cm"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "index": self.index,
            "group": self.group,
            "length_cm": self.length_cm,
            "orientation": self.orientation.value,
            "unit": self.unit.value,
            "display": self.display,
            "hidden": self.hidden,
            "labelled": self.labelled,
        }


@dataclass(frozen=True)
class WorkingStep:
    """One line of a worked solution.

    Attributes:
        text: Human-readable step
        kind: Role of the step
        value: Number the step concludes, in centimetres (None for headings)
    """

    text: str
    kind: StepKind = StepKind.INFO
    value: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {"text": self.text, "kind": self.kind.value, "value": self.value}


@dataclass(frozen=True)
class Question:
    """One generated perimeter question.

    Immutable once returned by the generator.

    Attributes:
        definition: Catalogue shape definition
        raw_shape: Concrete outline in shape-local coordinates
        edges: Per-edge measurements, in edge order
        perimeter: Sum of every edge length in centimetres
        answer: Human-readable final answer
        steps: Ordered working steps; the last one states the answer
        level: Difficulty level (1-3) that produced the question
        mix_units: Whether some labels are shown in mm or m
    """

    definition: ShapeDefinition
    raw_shape: RawShape
    edges: tuple[Edge, ...]
    perimeter: int
    answer: str
    steps: tuple[WorkingStep, ...]
    level: int
    mix_units: bool = False

    @property
    def shape_key(self) -> str:
        """Catalogue key of the shape."""
        return self.definition.key

    @property
    def hidden_indices(self) -> tuple[int, ...]:
        """Indices of edges whose length is withheld."""
        return tuple(e.index for e in self.edges if e.hidden)

    @property
    def labelled_indices(self) -> tuple[int, ...]:
        """Indices of edges carrying a measurement label."""
        return tuple(e.index for e in self.edges if e.labelled)

    @property
    def edge_lengths(self) -> tuple[int, ...]:
        """Edge lengths in centimetres, in edge order."""
        return tuple(e.length_cm for e in self.edges)

    @property
    def config_key(self) -> tuple[Any, ...]:
        """Key identifying equivalent questions within a batch."""
        return (
            self.definition.key,
            self.edge_lengths,
            self.hidden_indices,
            tuple(e.unit.value for e in self.edges),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "shape": self.definition.to_dict(),
            "raw_shape": self.raw_shape.to_dict(),
            "edges": [e.to_dict() for e in self.edges],
            "perimeter": self.perimeter,
            "answer": self.answer,
            "steps": [s.to_dict() for s in self.steps],
            "level": self.level,
            "mix_units": self.mix_units,
        }
