"""Question generation with bounded rejection sampling.

This module implements the shape generator:
- Drawing a catalogue shape for a level (or using an explicit key)
- Sampling side lengths and rejecting visually ambiguous or degenerate draws
- Falling back to a fixed valid parameter set when sampling keeps failing
- Picking balanced sets of shapes for worksheet batches

Generation never raises for sampling failures: every call returns a valid
Question. Catalogue errors (unknown keys, empty pools) are raised loudly.

Key classes:
- QuestionGenerator: Generates one question per call

Key functions:
- is_valid_isosceles: Triangle acceptance test
- pick_polygon_keys: Family-balanced polygon keys for a batch
- pick_template_keys: Non-repeating rectilinear templates for a batch
"""

import math
import random

import structlog

from perimeter.config import GenerationConfig
from perimeter.core.catalogue import (
    LEVELS,
    POLYGON_SHAPES,
    RECTILINEAR_TEMPLATES,
    RectilinearTemplate,
    get_definition,
    get_template,
    level_pool,
    polygon_outline,
)
from perimeter.core.geometry import has_degenerate_edge
from perimeter.core.measurement import (
    assign_lengths,
    assign_units,
    build_measurements,
    labelled_edges,
    outline_lengths,
    pick_hidden,
)
from perimeter.domain import Question, RawShape, ShapeDefinition, ShapeFamily, ShapeKind
from perimeter.utils import GenerationLogger

logger = structlog.get_logger(__name__)

_TWO_SIDED = ("rectangle", "parallelogram")


def is_valid_isosceles(leg: int, base: int, min_height_ratio: float) -> bool:
    """Check an isosceles triangle draw.

    The base must be strictly shorter than two legs and the triangle must be
    tall enough relative to its base not to look like a sliver.

    Examples:
        >>> is_valid_isosceles(10, 21, 0.4)
        False
        >>> is_valid_isosceles(10, 8, 0.4)
        True
    """
    if base <= 0 or leg <= 0 or base >= 2 * leg:
        return False
    height = math.sqrt(leg * leg - (base / 2) * (base / 2))
    return height / base >= min_height_ratio


class QuestionGenerator:
    """Generates perimeter questions.

    Pure apart from the random source: a generator seeded with the same value
    produces the same sequence of questions.

    Example:
        generator = QuestionGenerator(GenerationConfig(), random.Random(7))
        question = generator.generate(level=2, kind=ShapeKind.RECTILINEAR)
    """

    def __init__(
        self,
        config: GenerationConfig | None = None,
        rng: random.Random | None = None,
        tracker: GenerationLogger | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Sampling configuration (defaults if None)
            rng: Random source (a fresh unseeded one if None)
            tracker: Optional statistics collector for fallbacks
        """
        self.config = config or GenerationConfig()
        self.rng = rng or random.Random()
        self.tracker = tracker

    def generate(
        self,
        level: int,
        shape_key: str | None = None,
        kind: ShapeKind | None = None,
        hidden_count: int | None = None,
        mix_units: bool | None = None,
    ) -> Question:
        """Generate one question.

        Args:
            level: Difficulty level (1-3)
            shape_key: Use this catalogue shape instead of drawing one
            kind: Restrict the draw to polygons or rectilinear outlines
            hidden_count: Edges to hide (0-2); defaults to 1 or 2 for level 2
                rectilinear shapes and 0 otherwise. Clamped to 0 for shapes
                that are not axis-aligned.
            mix_units: Show some lengths in mm or m; defaults to level 3

        Returns:
            A valid question

        Raises:
            ValueError: If level or hidden_count is out of range
            CatalogueError: If shape_key is unknown or no shape matches
        """
        if level not in LEVELS:
            raise ValueError(f"Level must be one of {LEVELS}, got {level}")
        if hidden_count is not None and hidden_count not in (0, 1, 2):
            raise ValueError(f"Hidden edge count must be 0, 1 or 2, got {hidden_count}")

        if shape_key is not None:
            definition = get_definition(shape_key)
        else:
            definition = self.rng.choice(level_pool(level, kind))

        mix = level == 3 if mix_units is None else mix_units
        hidden_target = self._hidden_count(definition, level, hidden_count)

        if definition.kind == ShapeKind.RECTILINEAR:
            raw_shape = self._sample_template(get_template(definition.key))
            lengths = outline_lengths(raw_shape)
        else:
            group_values = self._sample_group_values(definition)
            raw_shape = polygon_outline(definition.key, group_values)
            lengths = assign_lengths(definition, group_values)

        hidden = pick_hidden(raw_shape, hidden_target, self.rng)

        units = {}
        if mix:
            candidates = sorted(labelled_edges(definition, hidden) - set(hidden))
            units = assign_units(
                candidates,
                self.rng,
                self.config.mixed_unit_probability,
                self.config.metre_probability,
            )

        edges, steps, perimeter = build_measurements(
            definition, raw_shape, lengths, hidden=hidden, units=units
        )

        return Question(
            definition=definition,
            raw_shape=raw_shape,
            edges=edges,
            perimeter=perimeter,
            answer=f"{perimeter} cm",
            steps=steps,
            level=level,
            mix_units=mix,
        )

    def _hidden_count(self, definition: ShapeDefinition, level: int, requested: int | None) -> int:
        if not definition.axis_aligned:
            return 0
        if requested is not None:
            return requested
        if level == 2 and definition.kind == ShapeKind.RECTILINEAR:
            return 2 if self.rng.random() < self.config.two_hidden_probability else 1
        return 0

    def _fallback(self, shape_key: str, reason: str) -> None:
        logger.debug("Sampling fallback used", shape=shape_key, reason=reason)
        if self.tracker is not None:
            self.tracker.log_fallback(shape_key, reason)

    def _sample_group_values(self, definition: ShapeDefinition) -> list[int]:
        """Draw one length per symmetry group, re-rolling invalid draws."""
        cfg = self.config
        values = [self.rng.randint(cfg.min_side, cfg.max_side) for _ in definition.groups]

        if definition.key in _TWO_SIDED:
            attempts = 0
            while abs(values[0] - values[1]) < cfg.rect_min_gap and attempts < cfg.max_attempts:
                values = [self.rng.randint(cfg.min_side, cfg.max_side) for _ in definition.groups]
                attempts += 1
            if abs(values[0] - values[1]) < cfg.rect_min_gap:
                offset = cfg.rect_fallback_offset
                values[1] = values[0] - offset if values[0] + offset > cfg.max_side else values[0] + offset
                self._fallback(definition.key, "side lengths too similar")

        elif definition.key == "isosceles_triangle":
            attempts = 0
            while (
                not is_valid_isosceles(values[0], values[1], cfg.iso_min_height_ratio)
                and attempts < cfg.max_attempts
            ):
                values = [self.rng.randint(cfg.iso_min_side, cfg.iso_max_side) for _ in definition.groups]
                attempts += 1
            if not is_valid_isosceles(values[0], values[1], cfg.iso_min_height_ratio):
                leg = self.rng.randint(8, 14)
                max_base = math.floor(min(leg * 1.2, 2 * leg - 1))
                values = [leg, self.rng.randint(max(4, math.ceil(leg * 0.5)), max_base)]
                self._fallback(definition.key, "degenerate triangle")

        return values

    def _sample_template(self, template: RectilinearTemplate) -> RawShape:
        """Draw a rectilinear outline, rejecting zero-length edges."""
        for _ in range(self.config.max_attempts):
            raw_shape = RawShape.from_tuples(template.build(self.rng))
            if not has_degenerate_edge(raw_shape.points):
                return raw_shape
        self._fallback(template.definition.key, "degenerate outline")
        return RawShape.from_tuples(template.fallback)


def pick_polygon_keys(
    levels: list[int],
    rng: random.Random,
    max_per_family: int = 2,
) -> list[str]:
    """Pick one polygon key per requested level, balancing families.

    Prefers keys not yet used in the batch and families below the cap; each
    rule is relaxed in turn when the level's pool runs out.

    Args:
        levels: Level of each question in the batch
        rng: Random source
        max_per_family: Cap on shapes per family

    Returns:
        One polygon key per entry of ``levels``
    """
    result: list[str] = []
    used: set[str] = set()
    family_count: dict[ShapeFamily, int] = {}

    for level in levels:
        pool = [d.key for d in level_pool(level, ShapeKind.POLYGON)]

        def under_cap(key: str) -> bool:
            return family_count.get(POLYGON_SHAPES[key].family, 0) < max_per_family

        candidates = [k for k in pool if k not in used and under_cap(k)]
        if not candidates:
            candidates = [k for k in pool if under_cap(k)]
        if not candidates:
            candidates = pool

        key = rng.choice(candidates)
        result.append(key)
        used.add(key)
        family = POLYGON_SHAPES[key].family
        family_count[family] = family_count.get(family, 0) + 1

    return result


def pick_template_keys(count: int, rng: random.Random) -> list[str]:
    """Pick rectilinear templates, using every template once before repeating."""
    keys = list(RECTILINEAR_TEMPLATES)
    result: list[str] = []
    used: set[str] = set()
    for _ in range(count):
        available = [k for k in keys if k not in used]
        if not available:
            used.clear()
            available = keys
        key = rng.choice(available)
        result.append(key)
        used.add(key)
    return result
