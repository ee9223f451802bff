"""Domain models for perimeter.

This module contains the core domain models representing shapes, generated
questions, measurement labels and projected diagrams. All models are:

- Immutable (frozen dataclasses); a question never changes after generation
- Serializable to plain dictionaries
- Independent of any renderer

Key classes:
- Point: A 2D point
- ShapeDefinition: Static catalogue entry with symmetry groups
- RawShape: Unscaled shape outline
- Edge: Edge measurement with unit and hidden state
- WorkingStep: One line of the worked solution
- Question: A complete generated question
- LabelCandidate: Candidate anchors for one label
- Placement: Chosen anchors for every label
- DiagramModel: Projected diagram shared by both renderers
"""

from perimeter.domain.diagram import DiagramModel, ProjectedShape, TickMark
from perimeter.domain.label import (
    LabelCandidate,
    LabelSpec,
    LabelState,
    PlacedLabel,
    Placement,
)
from perimeter.domain.question import Edge, Question, StepKind, Unit, WorkingStep
from perimeter.domain.shape import (
    Orientation,
    Point,
    RawShape,
    ShapeDefinition,
    ShapeFamily,
    ShapeKind,
)

__all__: list[str] = [
    # Enums
    "LabelState",
    "Orientation",
    "ShapeFamily",
    "ShapeKind",
    "StepKind",
    "Unit",
    # Core types
    "Point",
    "RawShape",
    "ShapeDefinition",
    "Edge",
    "WorkingStep",
    "Question",
    "LabelSpec",
    "LabelCandidate",
    "PlacedLabel",
    "Placement",
    "ProjectedShape",
    "TickMark",
    "DiagramModel",
]
