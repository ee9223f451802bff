"""Unit tests for question generation."""

import random
from collections import Counter

import pytest
import structlog

from perimeter.config import GenerationConfig
from perimeter.core.catalogue import POLYGON_SHAPES, RECTILINEAR_TEMPLATES
from perimeter.core.generator import (
    QuestionGenerator,
    is_valid_isosceles,
    pick_polygon_keys,
    pick_template_keys,
)
from perimeter.core.measurement import derive_hidden, display_to_cm
from perimeter.domain import Orientation, ShapeFamily, ShapeKind, StepKind, Unit
from perimeter.exceptions import UnknownShapeError
from perimeter.utils import GenerationLogger


class ScriptedRandom(random.Random):
    """Random source whose randint returns a fixed script."""

    def __init__(self, values: list[int]) -> None:
        super().__init__(0)
        self.values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return self.values.pop(0)


class TestIsValidIsosceles:
    """Tests for the isosceles acceptance test."""

    def test_base_too_long(self) -> None:
        """Test base >= 2 * leg is rejected."""
        assert not is_valid_isosceles(10, 21, 0.4)
        assert not is_valid_isosceles(10, 20, 0.4)

    def test_too_flat(self) -> None:
        """Test a valid but sliver-like triangle is rejected."""
        # height = sqrt(100 - 81) ~ 4.36, ratio ~ 0.24
        assert not is_valid_isosceles(10, 18, 0.4)

    def test_valid(self) -> None:
        """Test a comfortable triangle is accepted."""
        assert is_valid_isosceles(10, 8, 0.4)


class TestScriptedGeneration:
    """Tests driving the generator with scripted random draws."""

    def test_square_seven(self) -> None:
        """Test a 7 cm square gives perimeter 28 with one symmetry group."""
        question = QuestionGenerator(rng=ScriptedRandom([7])).generate(1, shape_key="square")

        assert question.perimeter == 28
        assert question.edge_lengths == (7, 7, 7, 7)
        assert len(question.definition.groups) == 1
        assert "Perimeter = 4 × 7 = 28" in [s.text for s in question.steps]
        assert question.answer == "28 cm"

    def test_isosceles_rejects_long_base(self) -> None:
        """Test a (leg=10, base=21) draw is rejected and re-rolled."""
        rng = ScriptedRandom([10, 21, 10, 8])
        question = QuestionGenerator(rng=rng).generate(2, shape_key="isosceles_triangle")

        assert question.edge_lengths == (10, 8, 10)
        assert question.perimeter == 28
        assert rng.values == []
        assert rng.calls[2:] == [(4, 16), (4, 16)]

    def test_isosceles_fallback(self) -> None:
        """Test the fixed fallback after exhausting attempts."""
        config = GenerationConfig(max_attempts=2)
        tracker = GenerationLogger(structlog.get_logger("test"))
        rng = ScriptedRandom([10, 21, 10, 21, 10, 21, 10, 9])
        question = QuestionGenerator(config, rng, tracker).generate(2, shape_key="isosceles_triangle")

        assert question.edge_lengths == (10, 9, 10)
        assert rng.calls[-2] == (8, 14)
        assert rng.calls[-1] == (5, 12)
        assert tracker.stats.fallbacks_used == 1

    def test_rectangle_rerolls_similar_sides(self) -> None:
        """Test sides closer than the minimum gap are re-rolled."""
        rng = ScriptedRandom([9, 10, 9, 15])
        question = QuestionGenerator(rng=rng).generate(2, shape_key="rectangle")
        assert question.edge_lengths == (9, 15, 9, 15)

    def test_rectangle_fallback_adds_offset(self) -> None:
        """Test the fallback sets the second side to the first plus 5."""
        config = GenerationConfig(max_attempts=1)
        question = QuestionGenerator(config, ScriptedRandom([9, 10, 9, 11])).generate(
            2, shape_key="rectangle"
        )
        assert question.edge_lengths == (9, 14, 9, 14)

    def test_rectangle_fallback_subtracts_offset_near_maximum(self) -> None:
        """Test the fallback subtracts 5 when adding would exceed the maximum side."""
        config = GenerationConfig(max_attempts=1)
        question = QuestionGenerator(config, ScriptedRandom([18, 19, 18, 19])).generate(
            2, shape_key="rectangle"
        )
        assert question.edge_lengths == (18, 13, 18, 13)


class TestGeneratedQuestions:
    """Property tests over many seeded questions."""

    @pytest.fixture
    def questions(self) -> list:
        """Generate a spread of questions across levels and kinds."""
        result = []
        for seed in range(40):
            generator = QuestionGenerator(rng=random.Random(seed))
            for level in (1, 2, 3):
                for kind in (ShapeKind.POLYGON, ShapeKind.RECTILINEAR):
                    result.append(generator.generate(level, kind=kind))
        return result

    def test_perimeter_is_sum_of_edges(self, questions: list) -> None:
        """Test the perimeter is the sum of every edge length."""
        for question in questions:
            assert sum(e.length_cm for e in question.edges) == question.perimeter

    def test_last_step_states_answer(self, questions: list) -> None:
        """Test the final working step matches the perimeter."""
        for question in questions:
            last = question.steps[-1]
            assert last.kind == StepKind.ANSWER
            assert last.value == question.perimeter
            assert last.text == f"Perimeter = {question.perimeter} cm"

    def test_groups_share_length(self, questions: list) -> None:
        """Test every symmetry group has one length."""
        for question in questions:
            for group in question.definition.groups:
                assert len({question.edges[i].length_cm for i in group}) == 1

    def test_no_zero_length_edges(self, questions: list) -> None:
        """Test no edge is degenerate."""
        for question in questions:
            assert all(e.length_cm > 0 for e in question.edges)

    def test_polygon_sampling_constraints(self, questions: list) -> None:
        """Test rectangle gap and isosceles validity."""
        config = GenerationConfig()
        for question in questions:
            lengths = question.edge_lengths
            if question.shape_key in ("rectangle", "parallelogram"):
                assert abs(lengths[0] - lengths[1]) >= config.rect_min_gap
            if question.shape_key == "isosceles_triangle":
                assert is_valid_isosceles(lengths[0], lengths[1], config.iso_min_height_ratio)

    def test_hidden_edges_round_trip(self, questions: list) -> None:
        """Test every hidden edge re-derives from the other edges."""
        checked = 0
        for question in questions:
            for index in question.hidden_indices:
                assert derive_hidden(question.raw_shape, question.edge_lengths, index) == (
                    question.edge_lengths[index]
                )
                checked += 1
        assert checked > 0

    def test_converted_units_round_trip(self, questions: list) -> None:
        """Test every mm/m display converts back to the exact length."""
        converted = 0
        for question in questions:
            for edge in question.edges:
                if edge.unit != Unit.CM:
                    assert display_to_cm(edge.display) == edge.length_cm
                    converted += 1
        assert converted > 0

    def test_level_defaults(self, questions: list) -> None:
        """Test level 2 rectilinear questions hide edges and level 3 mixes units."""
        for question in questions:
            if question.level == 2 and question.definition.kind == ShapeKind.RECTILINEAR:
                assert len(question.hidden_indices) in (1, 2)
            if question.level == 1:
                assert question.hidden_indices == ()
                assert not question.mix_units
            if question.level == 3:
                assert question.mix_units

    def test_two_hidden_edges_are_perpendicular(self, questions: list) -> None:
        """Test two hidden edges are one horizontal and one vertical."""
        for question in questions:
            if len(question.hidden_indices) == 2:
                orientations = {question.edges[i].orientation for i in question.hidden_indices}
                assert orientations == {Orientation.HORIZONTAL, Orientation.VERTICAL}


class TestGeneratorOptions:
    """Tests for explicit generator options."""

    @pytest.fixture
    def generator(self) -> QuestionGenerator:
        return QuestionGenerator(rng=random.Random(5))

    def test_hidden_count_clamped_on_oblique_shapes(self, generator: QuestionGenerator) -> None:
        """Test shapes with oblique edges never hide an edge."""
        question = generator.generate(2, shape_key="regular_hexagon", hidden_count=2)
        assert question.hidden_indices == ()

    def test_hidden_count_on_rectangle(self, generator: QuestionGenerator) -> None:
        """Test an explicit hidden edge on a rectangle labels every edge."""
        question = generator.generate(2, shape_key="rectangle", hidden_count=1)
        assert len(question.hidden_indices) == 1
        assert question.labelled_indices == (0, 1, 2, 3)

    def test_explicit_no_mix(self, generator: QuestionGenerator) -> None:
        """Test mix_units=False overrides the level 3 default."""
        question = generator.generate(3, kind=ShapeKind.RECTILINEAR, mix_units=False)
        assert all(e.unit == Unit.CM for e in question.edges)

    def test_kind_restriction(self, generator: QuestionGenerator) -> None:
        """Test the kind filter."""
        for _ in range(20):
            assert generator.generate(1, kind=ShapeKind.RECTILINEAR).shape_key in RECTILINEAR_TEMPLATES
            assert generator.generate(1, kind=ShapeKind.POLYGON).shape_key in POLYGON_SHAPES

    def test_invalid_level(self, generator: QuestionGenerator) -> None:
        """Test level validation."""
        with pytest.raises(ValueError):
            generator.generate(0)

    def test_invalid_hidden_count(self, generator: QuestionGenerator) -> None:
        """Test hidden count validation."""
        with pytest.raises(ValueError):
            generator.generate(2, shape_key="l_shape", hidden_count=3)

    def test_unknown_shape(self, generator: QuestionGenerator) -> None:
        """Test unknown keys raise a catalogue error."""
        with pytest.raises(UnknownShapeError):
            generator.generate(1, shape_key="trapezium")

    def test_seeded_generation_is_reproducible(self) -> None:
        """Test the same seed gives the same question."""
        a = QuestionGenerator(rng=random.Random(42)).generate(2, kind=ShapeKind.RECTILINEAR)
        b = QuestionGenerator(rng=random.Random(42)).generate(2, kind=ShapeKind.RECTILINEAR)
        assert a.config_key == b.config_key
        assert a.steps == b.steps


class TestBatchPicking:
    """Tests for batch shape picking."""

    def test_family_cap(self) -> None:
        """Test no more than two shapes of one family while the pool allows it."""
        for seed in range(20):
            keys = pick_polygon_keys([2, 2, 2, 2], random.Random(seed), max_per_family=2)
            families = Counter(POLYGON_SHAPES[k].family for k in keys)
            assert families == {ShapeFamily.IRREGULAR: 2, ShapeFamily.TRIANGLE: 2}

    def test_no_repeats_while_pool_allows(self) -> None:
        """Test the first picks of a batch are distinct."""
        keys = pick_polygon_keys([3, 3, 3, 3], random.Random(1), max_per_family=2)
        assert len(set(keys)) == 4

    def test_one_key_per_level(self) -> None:
        """Test keys come from each level's pool."""
        keys = pick_polygon_keys([1, 2], random.Random(3))
        assert POLYGON_SHAPES[keys[0]].tier == 1
        assert POLYGON_SHAPES[keys[1]].tier == 2

    def test_templates_used_once_before_repeating(self) -> None:
        """Test every template appears before any repeats."""
        keys = pick_template_keys(12, random.Random(4))
        assert set(keys[:8]) == set(RECTILINEAR_TEMPLATES)
        assert len(set(keys[8:])) == 4
