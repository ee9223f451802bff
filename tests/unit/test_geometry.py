"""Unit tests for geometry primitives."""

import math

import pytest

from perimeter.core.geometry import (
    bounding_box,
    centroid,
    edge_direction,
    edge_length,
    edge_orientation,
    has_degenerate_edge,
    is_axis_aligned,
    midpoint,
    outward_normal,
    perpendicular_direction,
    point_in_polygon,
    rotate,
    signed_area,
)
from perimeter.domain import Orientation, Point

L_SHAPE = [Point(0, 0), Point(12, 0), Point(12, 6), Point(5, 6), Point(5, 15), Point(0, 15)]


class TestSignedArea:
    """Tests for signed_area function."""

    def test_clockwise_on_screen_is_positive(self) -> None:
        """Test that a square running clockwise on screen (y down) is positive."""
        square = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
        assert signed_area(square) == pytest.approx(100.0)

    def test_reversed_is_negative(self) -> None:
        """Test that reversing the outline flips the sign."""
        square = [Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)]
        assert signed_area(square) == pytest.approx(-100.0)

    def test_degenerate(self) -> None:
        """Test fewer than three points gives zero area."""
        assert signed_area([Point(0, 0), Point(1, 1)]) == 0.0


class TestPointInPolygon:
    """Tests for point_in_polygon function."""

    def test_inside_l_shape(self) -> None:
        """Test a point in the vertical arm of an L-shape."""
        assert point_in_polygon(Point(2, 12), L_SHAPE)

    def test_outside_in_notch(self) -> None:
        """Test a point in the L-shape's cut-out corner."""
        assert not point_in_polygon(Point(9, 12), L_SHAPE)

    def test_too_few_points(self) -> None:
        """Test that a segment contains nothing."""
        assert not point_in_polygon(Point(0, 0), [Point(0, 0), Point(1, 1)])


class TestBasics:
    """Tests for centroid, length, midpoint and bounding box."""

    def test_centroid(self) -> None:
        """Test vertex average of a rectangle."""
        assert centroid([Point(0, 0), Point(4, 0), Point(4, 2), Point(0, 2)]) == Point(2, 1)

    def test_centroid_empty(self) -> None:
        """Test that an empty outline has no centroid."""
        with pytest.raises(ValueError):
            centroid([])

    def test_edge_length(self) -> None:
        """Test the 3-4-5 triangle hypotenuse."""
        assert edge_length(Point(0, 0), Point(3, 4)) == pytest.approx(5.0)

    def test_midpoint(self) -> None:
        """Test segment midpoint."""
        assert midpoint(Point(0, 0), Point(4, 6)) == Point(2, 3)

    def test_bounding_box(self) -> None:
        """Test bounding box of an L-shape."""
        assert bounding_box(L_SHAPE) == (0, 0, 12, 15)


class TestOrientation:
    """Tests for edge orientation and direction."""

    @pytest.mark.parametrize(
        ("start", "end", "expected"),
        [
            (Point(0, 0), Point(5, 0), Orientation.HORIZONTAL),
            (Point(0, 0), Point(0, -5), Orientation.VERTICAL),
            (Point(0, 0), Point(3, 4), Orientation.OBLIQUE),
        ],
    )
    def test_edge_orientation(self, start: Point, end: Point, expected: Orientation) -> None:
        """Test classification of segments."""
        assert edge_orientation(start, end) == expected

    def test_edge_direction(self) -> None:
        """Test signed axis directions."""
        assert edge_direction(Point(0, 0), Point(5, 0)) == (1, 0)
        assert edge_direction(Point(5, 0), Point(0, 0)) == (-1, 0)
        assert edge_direction(Point(0, 0), Point(0, 5)) == (0, 1)
        assert edge_direction(Point(0, 5), Point(0, 0)) == (0, -1)

    def test_edge_direction_oblique(self) -> None:
        """Test that oblique edges have no axis direction."""
        with pytest.raises(ValueError):
            edge_direction(Point(0, 0), Point(3, 4))

    def test_edge_direction_zero_length(self) -> None:
        """Test that zero-length edges have no direction."""
        with pytest.raises(ValueError):
            edge_direction(Point(1, 1), Point(1, 1))

    def test_is_axis_aligned(self) -> None:
        """Test axis alignment of an L-shape and a triangle."""
        assert is_axis_aligned(L_SHAPE)
        assert not is_axis_aligned([Point(0, 0), Point(4, 0), Point(2, 3)])

    def test_has_degenerate_edge(self) -> None:
        """Test detection of repeated vertices."""
        assert not has_degenerate_edge(L_SHAPE)
        assert has_degenerate_edge([Point(0, 0), Point(4, 0), Point(4, 0), Point(0, 3)])


class TestNormals:
    """Tests for perpendicular, rotation and outward normals."""

    def test_perpendicular_direction(self) -> None:
        """Test (dx, dy) rotates to (-dy, dx)."""
        px, py = perpendicular_direction(Point(0, 0), Point(10, 0))
        assert (px, py) == pytest.approx((0.0, 1.0))

    def test_perpendicular_zero_length(self) -> None:
        """Test zero-length lines are rejected."""
        with pytest.raises(ValueError):
            perpendicular_direction(Point(1, 1), Point(1, 1))

    def test_rotate_quarter_turn(self) -> None:
        """Test rotating by 90 degrees."""
        assert rotate((1.0, 0.0), math.pi / 2) == pytest.approx((0.0, 1.0))

    def test_rotate_preserves_length(self) -> None:
        """Test rotation keeps unit vectors unit length."""
        x, y = rotate((0.6, 0.8), math.pi / 4)
        assert math.hypot(x, y) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        ("index", "expected"),
        [(0, (0.0, -1.0)), (1, (1.0, 0.0)), (2, (0.0, 1.0)), (3, (-1.0, 0.0))],
    )
    def test_outward_normal_square(self, index: int, expected: tuple[float, float]) -> None:
        """Test every square edge points away from the interior."""
        square = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
        assert outward_normal(square, index) == pytest.approx(expected)

    def test_outward_normal_independent_of_winding(self) -> None:
        """Test that reversing the outline keeps normals outward."""
        reversed_square = [Point(0, 0), Point(0, 10), Point(10, 10), Point(10, 0)]
        # Edge 0 is the left side, running downwards.
        assert outward_normal(reversed_square, 0) == pytest.approx((-1.0, 0.0))

    def test_outward_normal_reentrant_edge(self) -> None:
        """Test the inner step of an L-shape points into the notch."""
        # Edge 2 runs from (12, 6) to (5, 6): the notch is below it.
        assert outward_normal(L_SHAPE, 2) == pytest.approx((0.0, 1.0))
        # Edge 3 runs from (5, 6) to (5, 15): the notch is to its right.
        assert outward_normal(L_SHAPE, 3) == pytest.approx((1.0, 0.0))
