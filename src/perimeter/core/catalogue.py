"""Shape catalogue: polygon definitions and rectilinear outline templates.

The catalogue is static data created at import time:

- Polygons (triangle to octagon) with symmetry groups. Their outlines are
  built from one length per group by ``polygon_outline``.
- Rectilinear templates (L-shapes, staircases, notches, ...). Each template is
  a parametrized function drawing integer dimensions from a random source;
  every edge is its own symmetry group and the edge lengths follow from the
  outline itself.

Key functions:
- get_definition: Look up a shape by key
- level_pool: Shapes available at a difficulty level
- polygon_outline: Raw outline of a polygon from its group lengths
"""

import math
import random
from collections.abc import Callable
from dataclasses import dataclass

from perimeter.domain import RawShape, ShapeDefinition, ShapeFamily, ShapeKind
from perimeter.exceptions import EmptyPoolError, UnknownShapeError

Coords = list[tuple[int, int]]

LEVELS = (1, 2, 3)


def _polygon(
    key: str,
    name: str,
    sides: int,
    groups: list[list[int]],
    family: ShapeFamily,
    tier: int,
    axis_aligned: bool = False,
) -> ShapeDefinition:
    return ShapeDefinition(
        key=key,
        name=name,
        sides=sides,
        groups=tuple(tuple(g) for g in groups),
        family=family,
        kind=ShapeKind.POLYGON,
        tier=tier,
        axis_aligned=axis_aligned,
    )


POLYGON_SHAPES: dict[str, ShapeDefinition] = {
    d.key: d
    for d in (
        _polygon("equilateral_triangle", "Equilateral Triangle", 3, [[0, 1, 2]], ShapeFamily.TRIANGLE, 1),
        _polygon("square", "Square", 4, [[0, 1, 2, 3]], ShapeFamily.REGULAR, 1, axis_aligned=True),
        _polygon("regular_pentagon", "Regular Pentagon", 5, [[0, 1, 2, 3, 4]], ShapeFamily.REGULAR, 1),
        _polygon("regular_hexagon", "Regular Hexagon", 6, [[0, 1, 2, 3, 4, 5]], ShapeFamily.REGULAR, 1),
        _polygon(
            "regular_octagon", "Regular Octagon", 8, [[0, 1, 2, 3, 4, 5, 6, 7]], ShapeFamily.REGULAR, 1
        ),
        _polygon("rectangle", "Rectangle", 4, [[0, 2], [1, 3]], ShapeFamily.IRREGULAR, 2, axis_aligned=True),
        _polygon("isosceles_triangle", "Isosceles Triangle", 3, [[0, 2], [1]], ShapeFamily.TRIANGLE, 2),
        _polygon("parallelogram", "Parallelogram", 4, [[0, 2], [1, 3]], ShapeFamily.IRREGULAR, 2),
        _polygon("rhombus", "Rhombus", 4, [[0, 1, 2, 3]], ShapeFamily.IRREGULAR, 2),
    )
}


def polygon_outline(key: str, group_values: list[int] | tuple[int, ...]) -> RawShape:
    """Build the raw outline of a catalogue polygon.

    Rectangles, parallelograms, isosceles triangles and rhombi use their group
    lengths so the drawing is in proportion; regular polygons are drawn on the
    unit circle starting from the top vertex.

    Args:
        key: Polygon catalogue key
        group_values: One length per symmetry group

    Returns:
        Raw outline

    Raises:
        UnknownShapeError: If key is not a catalogue polygon
    """
    if key not in POLYGON_SHAPES:
        raise UnknownShapeError(key)

    if key == "rectangle":
        w, h = group_values[0], group_values[1]
        return RawShape.from_tuples([(0, 0), (w, 0), (w, h), (0, h)])
    if key == "square":
        s = group_values[0]
        return RawShape.from_tuples([(0, 0), (s, 0), (s, s), (0, s)])
    if key == "parallelogram":
        w, h = group_values[0], group_values[1]
        shear = h * 0.4
        return RawShape.from_tuples([(shear, 0), (shear + w, 0), (w, h), (0, h)])
    if key == "isosceles_triangle":
        leg, base = group_values[0], group_values[1]
        height = math.sqrt(max(1.0, leg * leg - (base / 2) * (base / 2)))
        return RawShape.from_tuples([(base / 2, 0), (base, height), (0, height)])
    if key == "rhombus":
        s = group_values[0]
        return RawShape.from_tuples([(s * 0.5, 0), (s, s * 0.6), (s * 0.5, s * 1.2), (0, s * 0.6)])

    sides = POLYGON_SHAPES[key].sides
    coords = []
    for i in range(sides):
        angle = (i * 2 * math.pi / sides) - math.pi / 2
        coords.append((math.cos(angle), math.sin(angle)))
    return RawShape.from_tuples(coords)


# ---------------------------------------------------------------------------
# Rectilinear templates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RectilinearTemplate:
    """A parametrized rectilinear outline.

    Attributes:
        definition: Catalogue entry (one symmetry group per edge)
        build: Draws an outline from a random source
        fallback: Fixed valid outline used when sampling keeps failing
    """

    definition: ShapeDefinition
    build: Callable[[random.Random], Coords]
    fallback: Coords


def _l_shape(rng: random.Random) -> Coords:
    w, h = rng.randint(10, 17), rng.randint(12, 19)
    cw, ch = rng.randint(4, 7), rng.randint(5, 8)
    return [(0, 0), (w, 0), (w, ch), (cw, ch), (cw, h), (0, h)]


def _t_shape(rng: random.Random) -> Coords:
    tw, th = rng.randint(16, 22), rng.randint(4, 7)
    sw, sh = rng.randint(5, 8), rng.randint(7, 12)
    left = (tw - sw) // 2
    return [
        (0, 0), (tw, 0), (tw, th), (left + sw, th),
        (left + sw, th + sh), (left, th + sh), (left, th), (0, th),
    ]


def _staircase(rng: random.Random) -> Coords:
    s1, s2, s3 = rng.randint(5, 8), rng.randint(5, 8), rng.randint(5, 8)
    h1, h2, h3 = rng.randint(3, 5), rng.randint(3, 5), rng.randint(3, 5)
    return [
        (0, 0), (s1, 0), (s1, h1), (s1 + s2, h1), (s1 + s2, h1 + h2),
        (s1 + s2 + s3, h1 + h2), (s1 + s2 + s3, h1 + h2 + h3), (0, h1 + h2 + h3),
    ]


def _u_shape(rng: random.Random) -> Coords:
    ow, oh = rng.randint(14, 19), rng.randint(11, 16)
    wall, inner = rng.randint(3, 5), rng.randint(5, 8)
    return [
        (0, 0), (ow, 0), (ow, oh), (ow - wall, oh),
        (ow - wall, inner), (wall, inner), (wall, oh), (0, oh),
    ]


def _step_notch(rng: random.Random) -> Coords:
    # A right column of height rh and a left column of height lh joined by a
    # bar of depth lh - rh; equal depths would give a zero-length edge.
    lw, rw, gap = rng.randint(3, 5), rng.randint(3, 5), rng.randint(5, 9)
    lh = rng.randint(12, 18)
    rh = rng.randint(5, max(6, lh - 5))
    step = lh - rh
    total = lw + gap + rw
    return [
        (0, 0), (total, 0), (total, rh), (total - rw, rh),
        (total - rw, step), (lw, step), (lw, lh), (0, lh),
    ]


def _double_arm(rng: random.Random) -> Coords:
    spine_w = rng.randint(3, 5)
    arm1_w, arm1_h = rng.randint(6, 10), rng.randint(3, 4)
    arm2_w, arm2_h = rng.randint(5, 9), rng.randint(3, 4)
    arm2_y = arm1_h + rng.randint(4, 8)
    spine_h = max(rng.randint(14, 20), arm2_y + arm2_h + 2)
    return [
        (0, 0), (spine_w + arm1_w, 0), (spine_w + arm1_w, arm1_h), (spine_w, arm1_h),
        (spine_w, arm2_y), (spine_w + arm2_w, arm2_y), (spine_w + arm2_w, arm2_y + arm2_h),
        (spine_w, arm2_y + arm2_h), (spine_w, spine_h), (0, spine_h),
    ]


def _uneven_u(rng: random.Random) -> Coords:
    ow, oh = rng.randint(14, 20), rng.randint(13, 19)
    left_wall, right_wall = rng.randint(3, 5), rng.randint(3, 5)
    floor = min(rng.randint(5, oh - 5), rng.randint(5, oh - 5))
    return [
        (0, 0), (ow, 0), (ow, oh), (ow - right_wall, oh),
        (ow - right_wall, floor), (left_wall, floor), (left_wall, oh), (0, oh),
    ]


def _cross(rng: random.Random) -> Coords:
    cw, ch = rng.randint(4, 6), rng.randint(4, 6)
    top, bottom = rng.randint(3, 5), rng.randint(3, 5)
    left, right = rng.randint(4, 7), rng.randint(4, 7)
    return [
        (left, 0), (left + cw, 0), (left + cw, top), (left + cw + right, top),
        (left + cw + right, top + ch), (left + cw, top + ch), (left + cw, top + ch + bottom),
        (left, top + ch + bottom), (left, top + ch), (0, top + ch), (0, top), (left, top),
    ]


def _template(
    key: str, name: str, build: Callable[[random.Random], Coords], fallback: Coords
) -> RectilinearTemplate:
    sides = len(fallback)
    definition = ShapeDefinition(
        key=key,
        name=name,
        sides=sides,
        groups=tuple((i,) for i in range(sides)),
        family=ShapeFamily.RECTILINEAR,
        kind=ShapeKind.RECTILINEAR,
        tier=1,
        axis_aligned=True,
    )
    return RectilinearTemplate(definition=definition, build=build, fallback=fallback)


RECTILINEAR_TEMPLATES: dict[str, RectilinearTemplate] = {
    t.definition.key: t
    for t in (
        _template("l_shape", "L-shape", _l_shape, [(0, 0), (12, 0), (12, 6), (5, 6), (5, 15), (0, 15)]),
        _template(
            "t_shape", "T-shape", _t_shape,
            [(0, 0), (18, 0), (18, 5), (12, 5), (12, 14), (6, 14), (6, 5), (0, 5)],
        ),
        _template(
            "staircase", "Staircase", _staircase,
            [(0, 0), (6, 0), (6, 4), (12, 4), (12, 8), (18, 8), (18, 12), (0, 12)],
        ),
        _template(
            "u_shape", "U-shape", _u_shape,
            [(0, 0), (16, 0), (16, 13), (12, 13), (12, 6), (4, 6), (4, 13), (0, 13)],
        ),
        _template(
            "step_notch", "Step notch", _step_notch,
            [(0, 0), (14, 0), (14, 5), (10, 5), (10, 9), (4, 9), (4, 14), (0, 14)],
        ),
        _template(
            "double_arm", "Double arm", _double_arm,
            [(0, 0), (12, 0), (12, 3), (4, 3), (4, 9), (11, 9), (11, 12), (4, 12), (4, 17), (0, 17)],
        ),
        _template(
            "uneven_u", "Uneven U-shape", _uneven_u,
            [(0, 0), (17, 0), (17, 15), (13, 15), (13, 7), (4, 7), (4, 15), (0, 15)],
        ),
        _template(
            "cross", "Cross", _cross,
            [(5, 0), (10, 0), (10, 4), (15, 4), (15, 9), (10, 9), (10, 13), (5, 13), (5, 9), (0, 9), (0, 4), (5, 4)],
        ),
    )
}


def get_definition(key: str) -> ShapeDefinition:
    """Look up a catalogue shape by key.

    Raises:
        UnknownShapeError: If the key is in neither catalogue
    """
    if key in POLYGON_SHAPES:
        return POLYGON_SHAPES[key]
    if key in RECTILINEAR_TEMPLATES:
        return RECTILINEAR_TEMPLATES[key].definition
    raise UnknownShapeError(key)


def get_template(key: str) -> RectilinearTemplate:
    """Look up a rectilinear template by key.

    Raises:
        UnknownShapeError: If the key is not a rectilinear template
    """
    if key not in RECTILINEAR_TEMPLATES:
        raise UnknownShapeError(key)
    return RECTILINEAR_TEMPLATES[key]


def level_pool(level: int, kind: ShapeKind | None = None) -> list[ShapeDefinition]:
    """Shapes available at a difficulty level.

    Polygons: level 1 draws from the tier 1 (regular) shapes, level 2 from the
    tier 2 shapes and level 3 from both. Rectilinear templates are available
    at every level; the level only changes how their measurements are shown.

    Args:
        level: Difficulty level (1-3)
        kind: Restrict to one catalogue, or None for both

    Returns:
        Matching definitions in catalogue order

    Raises:
        ValueError: If level is not 1, 2 or 3
        EmptyPoolError: If no shape matches
    """
    if level not in LEVELS:
        raise ValueError(f"Level must be one of {LEVELS}, got {level}")

    pool: list[ShapeDefinition] = []
    if kind in (None, ShapeKind.POLYGON):
        pool.extend(d for d in POLYGON_SHAPES.values() if level == 3 or d.tier == level)
    if kind in (None, ShapeKind.RECTILINEAR):
        pool.extend(t.definition for t in RECTILINEAR_TEMPLATES.values())

    if not pool:
        raise EmptyPoolError(level, kind.value if kind else None)
    return pool


def all_definitions() -> list[ShapeDefinition]:
    """Every catalogue definition, polygons first."""
    return list(POLYGON_SHAPES.values()) + [t.definition for t in RECTILINEAR_TEMPLATES.values()]
