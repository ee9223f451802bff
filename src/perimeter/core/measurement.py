"""Measurement model: edge lengths, missing edges, unit conversion and working.

This module turns a raw outline and its lengths into the measurement side of
a question:
- One length per symmetry group, copied to every edge of the group
- Missing-edge selection and derivation for axis-aligned outlines
- Display in mm or m with exact conversion back to cm
- The ordered working steps that justify the final answer

The missing-edge rule uses the fact that, walking round an axis-aligned
outline, the edges travelling right sum to the edges travelling left (and
likewise up and down). A hidden edge therefore equals the sum of the edges
running against it minus the other edges running with it.
"""

import random
from decimal import Decimal

from perimeter.core.geometry import edge_direction, edge_orientation
from perimeter.domain import (
    Edge,
    Orientation,
    RawShape,
    ShapeDefinition,
    ShapeKind,
    StepKind,
    Unit,
    WorkingStep,
)

MM_PER_CM = 10
CM_PER_M = 100


# ---------------------------------------------------------------------------
# Lengths
# ---------------------------------------------------------------------------


def assign_lengths(definition: ShapeDefinition, group_values: list[int] | tuple[int, ...]) -> list[int]:
    """Expand one length per symmetry group into one length per edge.

    Raises:
        ValueError: If the number of values does not match the groups
    """
    if len(group_values) != len(definition.groups):
        raise ValueError(
            f"'{definition.key}' has {len(definition.groups)} symmetry groups, "
            f"got {len(group_values)} lengths"
        )
    lengths = [0] * definition.sides
    for group, value in zip(definition.groups, group_values):
        for edge_idx in group:
            lengths[edge_idx] = int(value)
    return lengths


def outline_lengths(raw_shape: RawShape) -> list[int]:
    """Integer edge lengths of an axis-aligned outline with integer vertices."""
    return [
        int(round(abs(end.x - start.x) + abs(end.y - start.y))) for start, end in raw_shape.edges()
    ]


def edge_orientations(raw_shape: RawShape) -> list[Orientation]:
    """Orientation of every edge of the outline."""
    return [edge_orientation(start, end) for start, end in raw_shape.edges()]


def labelled_edges(definition: ShapeDefinition, hidden: tuple[int, ...] = ()) -> set[int]:
    """Edges that carry a measurement label.

    Polygons label the first edge of each symmetry group; rectilinear
    outlines, and any outline with a missing edge, label every edge.
    """
    if hidden or definition.kind == ShapeKind.RECTILINEAR:
        return set(range(definition.sides))
    return {group[0] for group in definition.groups}


# ---------------------------------------------------------------------------
# Missing edges
# ---------------------------------------------------------------------------


def pick_hidden(raw_shape: RawShape, count: int, rng: random.Random) -> tuple[int, ...]:
    """Choose which edges to hide.

    One hidden edge may be any horizontal or vertical edge; two hidden edges
    are one horizontal and one vertical, so that each stays derivable from
    the edges sharing its orientation.

    Args:
        raw_shape: Axis-aligned outline
        count: 0, 1 or 2
        rng: Random source

    Returns:
        Sorted hidden edge indices

    Raises:
        ValueError: If count is not 0, 1 or 2
    """
    if count not in (0, 1, 2):
        raise ValueError(f"Hidden edge count must be 0, 1 or 2, got {count}")
    if count == 0:
        return ()

    orientations = edge_orientations(raw_shape)
    horizontal = [i for i, o in enumerate(orientations) if o == Orientation.HORIZONTAL]
    vertical = [i for i, o in enumerate(orientations) if o == Orientation.VERTICAL]

    if count == 1:
        return (rng.choice(horizontal + vertical),)
    return tuple(sorted((rng.choice(horizontal), rng.choice(vertical))))


def derivation_terms(
    raw_shape: RawShape, lengths: list[int] | tuple[int, ...], hidden_index: int
) -> tuple[list[int], list[int]]:
    """Lengths used to derive a hidden edge.

    Returns:
        (opposite, same): lengths of edges travelling against the hidden edge
        and of the other edges travelling with it
    """
    points = raw_shape.points
    n = len(points)
    target = edge_direction(points[hidden_index], points[(hidden_index + 1) % n])
    reverse = (-target[0], -target[1])

    opposite: list[int] = []
    same: list[int] = []
    for i in range(n):
        if i == hidden_index:
            continue
        start, end = points[i], points[(i + 1) % n]
        if edge_orientation(start, end) == Orientation.OBLIQUE:
            continue
        direction = edge_direction(start, end)
        if direction == target:
            same.append(lengths[i])
        elif direction == reverse:
            opposite.append(lengths[i])
    return opposite, same


def derive_hidden(raw_shape: RawShape, lengths: list[int] | tuple[int, ...], hidden_index: int) -> int:
    """Length of a hidden edge from the other edges of its orientation.

    Args:
        raw_shape: Axis-aligned outline
        lengths: Edge lengths (the hidden edge's own value is not read)
        hidden_index: Edge to derive

    Returns:
        Derived length in centimetres
    """
    opposite, same = derivation_terms(raw_shape, lengths, hidden_index)
    return sum(opposite) - sum(same)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------


def format_length(length_cm: int, unit: Unit) -> str:
    """Render a centimetre length in the given unit.

    Metres use two decimals unless the value is a whole number.

    Examples:
        >>> format_length(12, Unit.MM)
        '120 mm'
        >>> format_length(12, Unit.M)
        '0.12 m'
    """
    if unit == Unit.MM:
        return f"{length_cm * MM_PER_CM} mm"
    if unit == Unit.M:
        metres = Decimal(length_cm) / CM_PER_M
        if metres == metres.to_integral_value():
            return f"{int(metres)} m"
        return f"{metres:.2f} m"
    return f"{length_cm} cm"


def display_to_cm(display: str) -> Decimal:
    """Convert a displayed length (e.g. "120 mm", "0.12 m") back to centimetres.

    Uses decimal arithmetic so the round trip is exact.

    Raises:
        ValueError: If the string is not "<number> <unit>"
    """
    parts = display.split()
    if len(parts) != 2:
        raise ValueError(f"Expected '<value> <unit>', got '{display}'")
    value, unit = Decimal(parts[0]), Unit(parts[1])
    if unit == Unit.MM:
        return value / MM_PER_CM
    if unit == Unit.M:
        return value * CM_PER_M
    return value


def conversion_step(length_cm: int, unit: Unit) -> WorkingStep:
    """Working step converting one displayed length to centimetres.

    Raises:
        ValueError: For lengths already in centimetres
    """
    display = format_length(length_cm, unit)
    if unit == Unit.MM:
        return WorkingStep(f"{display} = {length_cm} cm (÷{MM_PER_CM})", StepKind.CONVERSION, length_cm)
    if unit == Unit.M:
        return WorkingStep(f"{display} = {length_cm} cm (×{CM_PER_M})", StepKind.CONVERSION, length_cm)
    raise ValueError("Centimetre lengths need no conversion")


def assign_units(
    candidates: list[int] | tuple[int, ...],
    rng: random.Random,
    mixed_probability: float,
    metre_probability: float,
) -> dict[int, Unit]:
    """Choose display units for a mixed-unit question.

    One draw decides whether the question uses mm or m; then each candidate
    edge independently switches to that unit with ``mixed_probability``.

    Returns:
        Mapping of edge index to unit (edges left in cm are omitted)
    """
    alternate = Unit.M if rng.random() < metre_probability else Unit.MM
    units: dict[int, Unit] = {}
    for edge_idx in candidates:
        if rng.random() < mixed_probability:
            units[edge_idx] = alternate
    return units


# ---------------------------------------------------------------------------
# Working steps
# ---------------------------------------------------------------------------


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def _sum_text(values: list[int]) -> str:
    return " + ".join(str(v) for v in values) if values else "0"


def _derivation_steps(
    raw_shape: RawShape, lengths: list[int], hidden_index: int, orientation: Orientation
) -> list[WorkingStep]:
    opposite, same = derivation_terms(raw_shape, lengths, hidden_index)
    value = sum(opposite) - sum(same)
    direction = orientation.value
    steps = [
        WorkingStep(f"Find the missing {direction} edge:"),
        WorkingStep(
            f"Opposite {direction} edges: {_sum_text(opposite)} = {sum(opposite)} cm",
            StepKind.DERIVATION,
            sum(opposite),
        ),
    ]
    if same:
        steps.append(
            WorkingStep(
                f"Known {direction} edges on the same side: {_sum_text(same)} = {sum(same)} cm",
                StepKind.DERIVATION,
                sum(same),
            )
        )
    steps.append(
        WorkingStep(
            f"Missing edge = {sum(opposite)} - {sum(same)} = {value} cm",
            StepKind.DERIVATION,
            value,
        )
    )
    return steps


def _grouped_total(
    definition: ShapeDefinition, group_values: list[int], lengths: list[int], perimeter: int
) -> WorkingStep:
    """One-line total once every side is known, e.g. ``Perimeter = 2 × (9 + 6) = 30``."""
    sizes = {len(group) for group in definition.groups}
    if len(sizes) != 1:
        return WorkingStep(f"Perimeter = {_sum_text(lengths)}", StepKind.SUM, perimeter)
    size = sizes.pop()
    if len(group_values) == 1:
        text = f"Perimeter = {size} × {group_values[0]} = {perimeter}"
    else:
        text = f"Perimeter = {size} × ({_sum_text(group_values)}) = {perimeter}"
    return WorkingStep(text, StepKind.SUM, perimeter)


def _group_sum_steps(
    definition: ShapeDefinition, group_values: list[int], perimeter: int
) -> list[WorkingStep]:
    steps = [
        WorkingStep(
            f"{definition.name} has {len(group)} side{_plural(len(group))} of {value} cm",
            StepKind.INFO,
            value,
        )
        for group, value in zip(definition.groups, group_values)
    ]
    products = [len(group) * value for group, value in zip(definition.groups, group_values)]
    steps.append(
        WorkingStep(
            "Perimeter = "
            + " + ".join(f"{len(group)} × {value}" for group, value in zip(definition.groups, group_values)),
            StepKind.SUM,
        )
    )
    if len(products) > 1:
        steps.append(WorkingStep(f"Perimeter = {_sum_text(products)}", StepKind.SUM, perimeter))
    return steps


def build_measurements(
    definition: ShapeDefinition,
    raw_shape: RawShape,
    lengths: list[int] | tuple[int, ...],
    *,
    hidden: tuple[int, ...] = (),
    units: dict[int, Unit] | None = None,
) -> tuple[tuple[Edge, ...], tuple[WorkingStep, ...], int]:
    """Build the edges, working steps and perimeter of a question.

    Args:
        definition: Catalogue shape
        raw_shape: Concrete outline
        lengths: Length of every edge in centimetres
        hidden: Edges whose length is withheld
        units: Display unit per edge (missing entries stay in cm)

    Returns:
        Tuple of (edges, steps, perimeter)

    Raises:
        ValueError: If a hidden edge is not derivable from its orientation
    """
    lengths = [int(v) for v in lengths]
    units = dict(units or {})
    orientations = edge_orientations(raw_shape)
    perimeter = sum(lengths)

    labelled = labelled_edges(definition, hidden)

    edges = []
    for i, length in enumerate(lengths):
        is_hidden = i in hidden
        unit = units.get(i, Unit.CM) if (i in labelled and not is_hidden) else Unit.CM
        edges.append(
            Edge(
                index=i,
                group=definition.group_of(i),
                length_cm=length,
                orientation=orientations[i],
                unit=unit,
                display=format_length(length, unit),
                hidden=is_hidden,
                labelled=i in labelled,
            )
        )

    steps: list[WorkingStep] = []

    converted = [e for e in edges if e.labelled and not e.hidden and e.unit != Unit.CM]
    if converted:
        steps.append(WorkingStep("Convert all measurements to centimetres:"))
        steps.extend(conversion_step(e.length_cm, e.unit) for e in converted)

    for hidden_index in sorted(hidden):
        if derive_hidden(raw_shape, lengths, hidden_index) != lengths[hidden_index]:
            raise ValueError(f"Edge {hidden_index} of '{definition.key}' cannot be derived")
        steps.extend(_derivation_steps(raw_shape, lengths, hidden_index, orientations[hidden_index]))

    group_values = [lengths[group[0]] for group in definition.groups]
    if definition.kind == ShapeKind.RECTILINEAR:
        if not hidden and not converted:
            steps.append(WorkingStep("Add all edge lengths:"))
        steps.append(WorkingStep(f"Perimeter = {_sum_text(lengths)}", StepKind.SUM, perimeter))
    elif hidden:
        steps.append(_grouped_total(definition, group_values, lengths, perimeter))
    elif definition.is_regular and not converted:
        side = group_values[0]
        steps.append(WorkingStep(f"{definition.name}: all {definition.sides} sides are equal"))
        steps.append(WorkingStep(f"Each side = {side} cm", StepKind.INFO, side))
        steps.append(
            WorkingStep(f"Perimeter = {definition.sides} × {side} = {perimeter}", StepKind.SUM, perimeter)
        )
    else:
        steps.extend(_group_sum_steps(definition, group_values, perimeter))

    steps.append(WorkingStep(f"Perimeter = {perimeter} cm", StepKind.ANSWER, perimeter))
    return tuple(edges), tuple(steps), perimeter
