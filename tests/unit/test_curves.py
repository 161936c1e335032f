"""Tests for Bezier curve geometry."""

import math
import random

import pytest

from asciistrator import core
from asciistrator.core._bezier import solve_cubic, solve_quadratic
from asciistrator.core.curves import (
    CubicBezier,
    QuadraticBezier,
    create_arc,
    create_circle,
    create_ellipse,
    curve_from_points,
    format_number,
)
from asciistrator.core.geometry import point_to_segment_distance
from asciistrator.domain import Vec2


def _random_point(rng: random.Random) -> Vec2:
    return Vec2(rng.uniform(-50, 50), rng.uniform(-50, 50))


def _random_curve(rng: random.Random) -> QuadraticBezier | CubicBezier:
    if rng.random() < 0.5:
        return QuadraticBezier(*(_random_point(rng) for _ in range(3)))
    return CubicBezier(*(_random_point(rng) for _ in range(4)))


@pytest.fixture
def arch() -> CubicBezier:
    """Symmetric cubic arch used by several scenarios."""
    return CubicBezier(Vec2(0, 0), Vec2(33, 100), Vec2(66, 100), Vec2(100, 0))


@pytest.fixture
def straight() -> CubicBezier:
    """Cubic with evenly spaced collinear control points (x = 30t)."""
    return CubicBezier(Vec2(0, 0), Vec2(10, 0), Vec2(20, 0), Vec2(30, 0))


class TestEvaluation:
    """Tests for point and derivative evaluation."""

    def test_endpoints_exact(self) -> None:
        """Test that t=0 and t=1 return the end control points exactly."""
        rng = random.Random(7)
        for _ in range(50):
            curve = _random_curve(rng)
            assert curve.point_at(0) == curve.points[0]
            assert curve.point_at(1) == curve.points[-1]

    def test_quadratic_midpoint_scenario(self) -> None:
        curve = QuadraticBezier(Vec2(0, 0), Vec2(50, 100), Vec2(100, 0))
        assert curve.point_at(0.5) == Vec2(50, 50)

    def test_tangent_of_degenerate_curve(self) -> None:
        """Test that a curve collapsed to a point reports the default tangent."""
        p = Vec2(3, 3)
        curve = CubicBezier(p, p, p, p)
        assert curve.tangent_at(0.5) == Vec2(1.0, 0.0)
        assert curve.curvature_at(0.5) == 0.0

    def test_normal_is_perpendicular(self, arch: CubicBezier) -> None:
        for t in (0.0, 0.3, 0.7, 1.0):
            assert abs(arch.tangent_at(t).dot(arch.normal_at(t))) < 1e-12

    def test_curvature_of_arc(self) -> None:
        arc = create_arc(Vec2(0, 0), 10.0, 0.0, math.pi / 2)
        assert math.isclose(abs(arc.curvature_at(0.5)), 0.1, rel_tol=0.01)

    def test_straight_curve_has_zero_curvature(self, straight: CubicBezier) -> None:
        assert straight.curvature_at(0.4) == 0.0
        assert straight.is_straight()

    def test_quadratic_to_cubic_is_exact(self) -> None:
        quad = QuadraticBezier(Vec2(0, 0), Vec2(50, 100), Vec2(100, 0))
        cubic = quad.to_cubic()
        for i in range(11):
            t = i / 10
            assert quad.point_at(t).distance_to(cubic.point_at(t)) < 1e-9

    def test_curve_from_points(self) -> None:
        pts = [Vec2(0, 0), Vec2(1, 1), Vec2(2, 0)]
        assert isinstance(curve_from_points(pts), QuadraticBezier)
        assert isinstance(curve_from_points([*pts, Vec2(3, 3)]), CubicBezier)
        with pytest.raises(ValueError):
            curve_from_points(pts[:2])

    def test_to_dict(self, arch: CubicBezier) -> None:
        data = arch.to_dict()
        assert data["type"] == "cubic"
        assert data["points"][1] == {"x": 33, "y": 100}


class TestSubdivision:
    """Tests for split, subdivide and reverse."""

    def test_split_joint_continuity(self) -> None:
        """Test that both halves meet at the original curve point."""
        rng = random.Random(11)
        for _ in range(100):
            curve = _random_curve(rng)
            t = rng.uniform(0.001, 0.999)
            left, right = curve.split(t)
            expected = curve.point_at(t)
            assert left.point_at(1).distance_to(expected) <= 1e-9
            assert right.point_at(0).distance_to(expected) <= 1e-9
            assert type(left) is type(curve)

    def test_subdivide(self, arch: CubicBezier) -> None:
        pieces = arch.subdivide(4)
        assert len(pieces) == 4
        assert pieces[0].start == arch.start
        assert pieces[-1].end.distance_to(arch.end) < 1e-9
        for a, b in zip(pieces, pieces[1:]):
            assert a.end == b.start
        assert pieces[1].start.distance_to(arch.point_at(0.25)) < 1e-9

    def test_reverse(self, arch: CubicBezier) -> None:
        reversed_curve = arch.reverse()
        for t in (0.0, 0.2, 0.5, 0.9):
            assert reversed_curve.point_at(1 - t).distance_to(arch.point_at(t)) < 1e-9


class TestMeasurement:
    """Tests for bounds, length and nearest point."""

    def test_cubic_length_scenario(self, arch: CubicBezier) -> None:
        length = arch.length()
        assert 100 < length < 300

    def test_straight_length(self, straight: CubicBezier) -> None:
        assert math.isclose(straight.length(), 30.0)

    def test_length_matches_dense_polyline(self, arch: CubicBezier) -> None:
        samples = [arch.point_at(i / 2000) for i in range(2001)]
        reference = sum(a.distance_to(b) for a, b in zip(samples, samples[1:]))
        assert math.isclose(arch.length(), reference, rel_tol=1e-3)

    def test_s_curve_length(self) -> None:
        """Test an S-curve whose midpoint lies on its chord."""
        curve = CubicBezier(Vec2(0, 0), Vec2(100, 100), Vec2(0, 100), Vec2(100, 0))
        samples = [curve.point_at(i / 2000) for i in range(2001)]
        reference = sum(a.distance_to(b) for a, b in zip(samples, samples[1:]))
        assert math.isclose(curve.length(), reference, rel_tol=1e-2)

    def test_bounding_box_uses_extrema(self, arch: CubicBezier) -> None:
        box = arch.bounding_box()
        assert box.min_x == 0
        assert box.max_x == 100
        assert box.min_y == 0
        assert math.isclose(box.max_y, 75.0)

    def test_quadratic_bounding_box(self) -> None:
        box = QuadraticBezier(Vec2(0, 0), Vec2(50, 100), Vec2(100, 0)).bounding_box()
        assert box.to_tuple() == (0, 0, 100, 50.0)

    def test_nearest_point(self, straight: CubicBezier) -> None:
        result = straight.nearest_point(Vec2(15, 5))
        assert result.point.distance_to(Vec2(15, 0)) < 1e-6
        assert math.isclose(result.t, 0.5, abs_tol=1e-6)
        assert math.isclose(result.distance, 5.0)

    def test_nearest_point_refines_between_samples(self, arch: CubicBezier) -> None:
        target = arch.point_at(0.123)
        result = arch.nearest_point(target, samples=10)
        assert result.distance < 1e-4

    def test_parameter_at_length(self, straight: CubicBezier) -> None:
        assert straight.parameter_at_length(-1) == 0.0
        assert straight.parameter_at_length(100) == 1.0
        assert math.isclose(straight.parameter_at_length(15), 0.5, abs_tol=1e-3)

    def test_evenly_spaced_points(self, straight: CubicBezier) -> None:
        points = straight.evenly_spaced_points(4)
        assert len(points) == 4
        for point, expected_x in zip(points, (0, 10, 20, 30)):
            assert math.isclose(point.x, expected_x, abs_tol=0.05)
        assert straight.evenly_spaced_points(0) == []


class TestFlatten:
    """Tests for polyline approximation."""

    def test_straight_curve_flattens_to_chord(self, straight: CubicBezier) -> None:
        assert straight.flatten() == [Vec2(0, 0), Vec2(30, 0)]

    def test_flatten_within_tolerance(self) -> None:
        """Test every curve point lies within tolerance of the polyline."""
        rng = random.Random(1234)
        for _ in range(25):
            curve = _random_curve(rng)
            tolerance = rng.uniform(0.01, 2.0)
            polyline = curve.flatten(tolerance)

            assert polyline[0] == curve.start
            assert polyline[-1] == curve.end
            for i in range(51):
                point = curve.point_at(i / 50)
                nearest = min(
                    point_to_segment_distance(point, a, b)
                    for a, b in zip(polyline, polyline[1:])
                )
                assert nearest <= tolerance + 1e-9

    def test_depth_limit_terminates(self, arch: CubicBezier) -> None:
        points = arch.flatten(tolerance=1e-12, max_depth=3)
        assert len(points) == 2**3 + 1


class TestOffsetAndConics:
    """Tests for offsetting and conic approximations."""

    def test_offset_straight_curve(self, straight: CubicBezier) -> None:
        curves = straight.offset(2.0)
        assert len(curves) >= 1
        assert curves[0].start.distance_to(Vec2(0, 2)) < 1e-9
        assert curves[-1].end.distance_to(Vec2(30, 2)) < 1e-9
        for curve in curves:
            for i in range(11):
                assert math.isclose(curve.point_at(i / 10).y, 2.0, abs_tol=1e-6)

    def test_offset_keeps_distance(self, arch: CubicBezier) -> None:
        for curve in arch.offset(5.0, segments=40):
            for i in range(11):
                nearest = arch.nearest_point(curve.point_at(i / 10), samples=200)
                assert abs(nearest.distance - 5.0) < 1.5

    def test_circle(self) -> None:
        center = Vec2(5, 5)
        curves = create_circle(center, 10.0)
        assert len(curves) == 4
        assert curves[0].start.distance_to(Vec2(15, 5)) < 1e-9
        for curve in curves:
            for i in range(11):
                radius = curve.point_at(i / 10).distance_to(center)
                assert math.isclose(radius, 10.0, rel_tol=1e-3)

    def test_ellipse(self) -> None:
        curves = create_ellipse(Vec2(0, 0), 10.0, 5.0)
        assert curves[0].start == Vec2(10.0, 0.0)
        assert curves[-1].end == curves[0].start
        for curve in curves:
            for i in range(11):
                p = curve.point_at(i / 10)
                assert abs(p.x**2 / 100 + p.y**2 / 25 - 1) < 2e-3


class TestRootSolvers:
    """Tests for polynomial root helpers."""

    def test_quadratic_roots(self) -> None:
        assert solve_quadratic(1, -3, 2) == [1.0, 2.0]
        assert solve_quadratic(0, 2, -4) == [2.0]
        assert solve_quadratic(1, 0, 1) == []
        assert solve_quadratic(0, 0, 1) == []

    def test_cubic_three_roots(self) -> None:
        roots = solve_cubic(1, -6, 11, -6)
        assert len(roots) == 3
        for root, expected in zip(roots, (1.0, 2.0, 3.0)):
            assert math.isclose(root, expected, abs_tol=1e-9)

    def test_cubic_single_root(self) -> None:
        roots = solve_cubic(1, 0, 0, -8)
        assert len(roots) == 1
        assert math.isclose(roots[0], 2.0)

    def test_cubic_degenerates_to_quadratic(self) -> None:
        assert solve_cubic(0, 1, -3, 2) == [1.0, 2.0]


class TestFormatNumber:
    """Tests for path data number formatting."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0, "0"), (3.0, "3"), (-2.5, "-2.5"), (1e-3, "0.001"), (1 / 3, "0.3333333333333333")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        assert format_number(value) == expected
        assert float(format_number(value)) == value


class TestCorePackage:
    """Tests for the core package namespace."""

    def test_exported_names_resolve(self) -> None:
        for name in core.__all__:
            assert getattr(core, name) is not None, name
