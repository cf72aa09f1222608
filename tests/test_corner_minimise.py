"""Tests for corner_minimise.py polyline clean-up."""
from corner_minimise import is_orthogonal, simplify_polyline


class TestSimplifyPolyline:
    def test_merges_runs(self):
        points = [(0, 0), (10, 0), (20, 0), (20, 0), (20, 15)]
        assert simplify_polyline(points) == [(0, 0), (20, 0), (20, 15)]

    def test_keeps_corners(self):
        points = [(0, 0), (5, 0), (5, 5), (10, 5)]
        assert simplify_polyline(points) == points

    def test_zero_length_jog(self):
        # a lane clamped onto the target collapses to a straight line
        points = [(0, 3), (8, 3), (8, 3), (8, 3), (20, 3)]
        assert simplify_polyline(points) == [(0, 3), (20, 3)]

    def test_overshoot(self):
        points = [(0, 0), (10, 0), (5, 0), (5, 5)]
        assert simplify_polyline(points) == [(0, 0), (5, 0), (5, 5)]

    def test_doubles_back_to_start(self):
        assert simplify_polyline([(0, 0), (10, 0), (0, 0)]) == [(0, 0)]

    def test_empty(self):
        assert simplify_polyline([]) == []

    def test_tolerance(self):
        assert simplify_polyline([(0, 0), (1e-12, 0)]) == [(0, 0)]


class TestIsOrthogonal:
    def test_orthogonal(self):
        assert is_orthogonal([(0, 0), (0, 5), (7, 5)])

    def test_diagonal(self):
        assert not is_orthogonal([(0, 0), (1, 1)])

    def test_single_point(self):
        assert is_orthogonal([(3, 3)])
