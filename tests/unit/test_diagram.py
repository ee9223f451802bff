"""Unit tests for the diagram builder."""

import random

import pytest

from perimeter.config import StyleConfig
from perimeter.core.diagram import build_diagram, label_specs
from perimeter.core.generator import QuestionGenerator
from perimeter.domain import LabelState, Point, Question, ShapeKind


def _generate(level: int, **kwargs) -> Question:
    return QuestionGenerator(rng=random.Random(21)).generate(level, **kwargs)


class TestLabelSpecs:
    """Tests for label_specs function."""

    @pytest.fixture
    def style(self) -> StyleConfig:
        return StyleConfig()

    def test_hidden_label_is_question_mark(self, style: StyleConfig) -> None:
        """Test the hidden edge reads '?' in its own colour."""
        question = _generate(2, shape_key="l_shape", hidden_count=1)
        specs = {s.edge_index: s for s in label_specs(question, False, style)}
        hidden = specs[question.hidden_indices[0]]
        assert hidden.text == "?"
        assert hidden.state == LabelState.HIDDEN
        assert hidden.colour == style.hidden_colour

    def test_answer_mode_reveals(self, style: StyleConfig) -> None:
        """Test answer mode shows the hidden length in centimetres."""
        question = _generate(2, shape_key="l_shape", hidden_count=1)
        index = question.hidden_indices[0]
        specs = {s.edge_index: s for s in label_specs(question, True, style)}
        assert specs[index].text == f"{question.edges[index].length_cm} cm"
        assert specs[index].state == LabelState.REVEALED
        assert specs[index].colour == style.revealed_colour

    def test_only_labelled_edges(self, style: StyleConfig) -> None:
        """Test a regular polygon gets a single label."""
        question = _generate(1, shape_key="regular_hexagon")
        specs = label_specs(question, False, style)
        assert [s.edge_index for s in specs] == [0]
        assert specs[0].state == LabelState.GIVEN


class TestBuildDiagram:
    """Tests for build_diagram function."""

    def test_labels_inside_canvas(self) -> None:
        """Test every pill stays on the canvas for every template."""
        generator = QuestionGenerator(rng=random.Random(2))
        for _ in range(30):
            question = generator.generate(3, kind=ShapeKind.RECTILINEAR)
            diagram = build_diagram(question, 520, 520, 19)
            for label in diagram.placement.labels:
                min_x, min_y, max_x, max_y = label.bounding_box()
                assert min_x >= -1e-6 and max_x <= 520 + 1e-6
                assert min_y >= -1e-6 and max_y <= 520 + 1e-6

    def test_one_label_per_labelled_edge(self) -> None:
        """Test the placement covers exactly the labelled edges."""
        question = _generate(2, shape_key="rectangle")
        diagram = build_diagram(question, 300, 300, 12)
        assert [label.edge_index for label in diagram.placement.labels] == list(question.labelled_indices)

    def test_leaders_start_at_edge_midpoints(self) -> None:
        """Test leader lines are tethered to their edge midpoints."""
        question = _generate(2, shape_key="l_shape")
        diagram = build_diagram(question, 520, 520, 19)
        n = len(diagram.points)
        for label in diagram.placement.labels:
            a, b = diagram.points[label.edge_index], diagram.points[(label.edge_index + 1) % n]
            assert label.leader_start == Point((a.x + b.x) / 2, (a.y + b.y) / 2)

    def test_origin_offsets_every_coordinate(self) -> None:
        """Test a non-zero origin shifts the outline and the labels."""
        question = _generate(1, shape_key="square")
        local = build_diagram(question, 100, 100, 4)
        shifted = build_diagram(question, 100, 100, 4, origin=Point(30, 40))
        for a, b in zip(local.points, shifted.points):
            assert b.x == pytest.approx(a.x + 30)
            assert b.y == pytest.approx(a.y + 40)
        assert shifted.placement.choices == local.placement.choices

    def test_rectangle_tick_marks(self) -> None:
        """Test rectangle sides get one and two ticks by group."""
        question = _generate(2, shape_key="rectangle")
        diagram = build_diagram(question, 300, 300, 12)
        counts = {tick.edge_index: tick.count for tick in diagram.ticks}
        assert counts == {0: 1, 2: 1, 1: 2, 3: 2}
        assert all(len(tick.segments) == tick.count for tick in diagram.ticks)

    def test_no_ticks_on_rectilinear_or_single_edge_groups(self) -> None:
        """Test ticks only mark polygon groups with several edges."""
        assert build_diagram(_generate(1, shape_key="l_shape"), 300, 300, 12).ticks == ()
        triangle = build_diagram(_generate(2, shape_key="isosceles_triangle"), 300, 300, 12)
        assert {tick.edge_index for tick in triangle.ticks} == {0, 2}

    def test_to_dict(self) -> None:
        """Test diagram serialization."""
        diagram = build_diagram(_generate(1, shape_key="square"), 200, 200, 8, show_answer=True)
        data = diagram.to_dict()
        assert data["shape_key"] == "square"
        assert data["show_answer"] is True
        assert len(data["points"]) == 4
