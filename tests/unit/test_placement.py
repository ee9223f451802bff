"""Unit tests for the label placement engine."""

import itertools
import math
import random

import pytest

from perimeter.config import PlacementConfig
from perimeter.core.diagram import build_diagram
from perimeter.core.generator import QuestionGenerator
from perimeter.core.geometry import midpoint, outward_normal
from perimeter.core.placement import (
    LabelPlacer,
    candidate_anchors,
    pill_size,
    rect_gap,
)
from perimeter.domain import LabelCandidate, Point
from perimeter.exceptions import PlacementError


def brute_force_best(candidates: list[LabelCandidate]) -> float:
    """Best achievable minimum pairwise gap over every assignment."""
    best = -math.inf
    for choices in itertools.product(*(range(len(c.anchors)) for c in candidates)):
        worst = math.inf
        for a, b in itertools.combinations(range(len(candidates)), 2):
            ca, cb = candidates[a], candidates[b]
            gap = rect_gap(
                ca.anchors[choices[a]], ca.width, ca.height, cb.anchors[choices[b]], cb.width, cb.height
            )
            worst = min(worst, gap)
        best = max(best, worst)
    return best


def octagon(radius: float = 60.0, center: float = 100.0) -> list[Point]:
    return [
        Point(center + radius * math.cos(i * math.pi / 4), center + radius * math.sin(i * math.pi / 4))
        for i in range(8)
    ]


class TestPillSize:
    """Tests for pill_size function."""

    def test_width_grows_with_text(self) -> None:
        """Test pill width formula."""
        config = PlacementConfig()
        width, height = pill_size("7 cm", 10.0, config)
        assert width == pytest.approx(4 * 10 * 0.62 + 2 * 10 * 0.8)
        assert height == pytest.approx(15.0)
        assert pill_size("120 mm", 10.0, config)[0] > width


class TestCandidateAnchors:
    """Tests for candidate_anchors function."""

    def test_three_anchors_at_standoff(self) -> None:
        """Test anchors sit at the standoff distance, perpendicular first."""
        mid = Point(10, 10)
        anchors = candidate_anchors(mid, (0.0, -1.0), 20.0)

        assert len(anchors) == 3
        assert anchors[0].x == pytest.approx(10.0)
        assert anchors[0].y == pytest.approx(-10.0)
        for anchor in anchors:
            assert math.hypot(anchor.x - mid.x, anchor.y - mid.y) == pytest.approx(20.0)

    def test_rotations_are_symmetric(self) -> None:
        """Test the two rotated anchors mirror each other about the normal."""
        anchors = candidate_anchors(Point(0, 0), (1.0, 0.0), 10.0)
        assert anchors[1].x == pytest.approx(anchors[2].x)
        assert anchors[1].y == pytest.approx(-anchors[2].y)
        assert anchors[1].x == pytest.approx(10 / math.sqrt(2))


class TestRectGap:
    """Tests for rect_gap function."""

    def test_overlap_is_zero(self) -> None:
        """Test overlapping boxes have no gap."""
        assert rect_gap(Point(0, 0), 10, 10, Point(5, 5), 10, 10) == 0.0

    def test_horizontal_gap(self) -> None:
        """Test boxes separated along x only."""
        assert rect_gap(Point(0, 0), 10, 10, Point(15, 2), 10, 10) == pytest.approx(5.0)

    def test_vertical_gap(self) -> None:
        """Test boxes separated along y only."""
        assert rect_gap(Point(0, 0), 10, 4, Point(3, 10), 10, 4) == pytest.approx(6.0)

    def test_corner_gap(self) -> None:
        """Test diagonal separation uses the corner distance."""
        assert rect_gap(Point(0, 0), 2, 2, Point(5, 6), 2, 2) == pytest.approx(5.0)

    def test_symmetric(self) -> None:
        """Test the gap does not depend on argument order."""
        a = rect_gap(Point(0, 0), 8, 3, Point(11, 9), 5, 4)
        b = rect_gap(Point(11, 9), 5, 4, Point(0, 0), 8, 3)
        assert a == b


class TestLabelPlacer:
    """Tests for LabelPlacer class."""

    @pytest.fixture
    def config(self) -> PlacementConfig:
        """Create default placement config."""
        return PlacementConfig()

    @pytest.fixture
    def placer(self, config: PlacementConfig) -> LabelPlacer:
        """Create label placer."""
        return LabelPlacer(config)

    def _octagon_candidates(self, placer: LabelPlacer, font_size: float = 9.0) -> list[LabelCandidate]:
        points = octagon()
        return [
            placer.build_candidate(
                edge_index=i,
                text=f"{i + 11} cm",
                midpoint=midpoint(points[i], points[(i + 1) % 8]),
                normal=outward_normal(points, i),
                standoff=font_size * 2.4,
                font_size=font_size,
            )
            for i in range(8)
        ]

    def test_no_labels(self, placer: LabelPlacer) -> None:
        """Test zero labels returns an empty placement without search."""
        placement = placer.place([])
        assert len(placement) == 0
        assert placement.exhaustive

    def test_single_label_uses_perpendicular(self, placer: LabelPlacer) -> None:
        """Test a lone label keeps the perpendicular anchor."""
        candidate = placer.build_candidate(0, "7 cm", Point(50, 0), (0.0, -1.0), 20.0, 10.0)
        placement = placer.place([candidate])
        assert placement.choices == (0,)
        assert placement.labels[0].anchor == candidate.anchors[0]
        assert placement.labels[0].leader == (Point(50, 0), candidate.anchors[0])

    def test_empty_anchor_set_rejected(self, placer: LabelPlacer) -> None:
        """Test malformed candidates raise a placement error."""
        bad = LabelCandidate(0, "7 cm", (), 10, 10, Point(0, 0), 10)
        with pytest.raises(PlacementError):
            placer.place([bad])

    def test_max_min_matches_brute_force(self, placer: LabelPlacer) -> None:
        """Test the chosen assignment is the true max-min optimum."""
        rng = random.Random(8)
        for _ in range(25):
            candidates = []
            for i in range(rng.randint(2, 5)):
                mid = Point(rng.uniform(0, 60), rng.uniform(0, 60))
                angle = rng.uniform(0, 2 * math.pi)
                candidates.append(
                    placer.build_candidate(
                        i, f"{rng.randint(3, 20)} cm", mid, (math.cos(angle), math.sin(angle)), 15.0, 6.0
                    )
                )
            placement = placer.place(candidates)
            assert placement.exhaustive
            assert placement.min_separation == pytest.approx(brute_force_best(candidates))

    def test_octagon_eight_labels(self, placer: LabelPlacer) -> None:
        """Test an octagon with eight distinct labels is searched exhaustively."""
        candidates = self._octagon_candidates(placer)
        placement = placer.place(candidates)

        assert placement.exhaustive
        assert len(placement) == 8
        assert [label.text for label in placement.labels] == [f"{i + 11} cm" for i in range(8)]
        best = brute_force_best(candidates)
        assert placement.min_separation == pytest.approx(best)
        if best > 0:
            assert placement.min_separation > 0

    def test_choices_index_anchors(self, placer: LabelPlacer) -> None:
        """Test each placed label sits on the anchor its choice names."""
        candidates = self._octagon_candidates(placer)
        placement = placer.place(candidates)
        for candidate, choice, label in zip(candidates, placement.choices, placement.labels):
            assert label.anchor == candidate.anchors[choice]
            assert label.candidate_index == choice

    def test_local_search_above_bound(self) -> None:
        """Test label counts above the bound use local search from every uniform start."""
        placer = LabelPlacer(PlacementConfig(max_exhaustive_labels=4))
        candidates = self._octagon_candidates(placer)
        placement = placer.place(candidates)

        assert not placement.exhaustive
        assert len(placement) == 8
        gaps = LabelPlacer._gap_table(candidates)
        uniform = max(LabelPlacer.score((option,) * 8, gaps) for option in range(3))
        assert placement.min_separation >= uniform
        assert placement.min_separation == pytest.approx(LabelPlacer.score(placement.choices, gaps))

    def test_local_search_optimizes_tightest_pair(self) -> None:
        """Test local search settles the pair that limits the score."""
        placer = LabelPlacer(PlacementConfig(max_exhaustive_labels=1))
        # Labels 0 and 1 sit either side of a corner; label 2 is far away.
        candidates = [
            placer.build_candidate(0, "12 cm", Point(50, 45), (0.0, -1.0), 10.0, 6.0),
            placer.build_candidate(1, "12 cm", Point(55, 50), (1.0, 0.0), 10.0, 6.0),
            placer.build_candidate(2, "7 cm", Point(0, 200), (-1.0, 0.0), 10.0, 6.0),
        ]
        gaps = LabelPlacer._gap_table(candidates)
        placement = placer.place(candidates)

        assert not placement.exhaustive
        assert placement.min_separation > LabelPlacer.score((0, 0, 0), gaps)
        assert placement.min_separation == pytest.approx(brute_force_best(candidates))

    def test_deterministic(self, placer: LabelPlacer) -> None:
        """Test identical candidates give identical placements."""
        candidates = self._octagon_candidates(placer)
        assert placer.place(candidates) == placer.place(candidates)


def pruned_product_best(candidates: list[LabelCandidate]) -> float:
    """Best minimum gap by scoring every assignment in product order."""
    gaps = LabelPlacer._gap_table(candidates)
    best = -math.inf
    for choices in itertools.product(*(range(len(c.anchors)) for c in candidates)):
        best = max(best, LabelPlacer.score(choices, gaps, floor=best))
    return best


def diagram_candidates(diagram, placer: LabelPlacer) -> list[LabelCandidate]:
    """Rebuild the candidate sets a diagram's placement chose from."""
    points = diagram.points
    candidates = []
    for label in diagram.placement.labels:
        standoff = math.dist((label.leader_start.x, label.leader_start.y), (label.anchor.x, label.anchor.y))
        candidate = placer.build_candidate(
            label.edge_index,
            label.text,
            label.leader_start,
            outward_normal(points, label.edge_index),
            standoff,
            diagram.font_size,
        )
        candidates.append(candidate)
    return candidates


class TestCatalogueTemplates:
    """Tests for placement on the largest rectilinear templates."""

    @pytest.mark.parametrize("shape_key", ["double_arm", "cross"])
    @pytest.mark.parametrize("seed", [0, 4, 7])
    def test_placement_is_max_min_optimal(self, shape_key: str, seed: int) -> None:
        """Test 10 and 12 label outlines get the best achievable separation."""
        question = QuestionGenerator(rng=random.Random(seed)).generate(1, shape_key=shape_key)
        diagram = build_diagram(question, 520.0, 520.0, 19.0)
        placement = diagram.placement

        assert placement.exhaustive
        assert len(placement) == len(question.edges)

        candidates = diagram_candidates(diagram, LabelPlacer())
        for candidate, label in zip(candidates, placement.labels):
            assert candidate.anchors[label.candidate_index].x == pytest.approx(label.anchor.x)
            assert candidate.anchors[label.candidate_index].y == pytest.approx(label.anchor.y)

        best = pruned_product_best(candidates)
        assert placement.min_separation == pytest.approx(best)
        if best > 0:
            assert placement.min_separation > 0
