"""Tests for least-squares cubic curve fitting."""

import math
import random
from unittest.mock import patch

import pytest

from asciistrator.core import fitting
from asciistrator.core.curves import CubicBezier, QuadraticBezier
from asciistrator.core.fitting import (
    chord_length_parameterize,
    fit_cubic_beziers,
    fit_path,
    generate_bezier,
)
from asciistrator.core.geometry import rdp_simplify
from asciistrator.domain import AnchorType, Vec2


def _max_deviation(points: list[Vec2], curves: list[CubicBezier]) -> float:
    return max(
        min(curve.nearest_point(p, samples=200).distance for curve in curves)
        for p in points
    )


class TestFitCubicBeziers:
    """Tests for fit_cubic_beziers."""

    def test_fit_sampled_cubic(self) -> None:
        """Test fitting points sampled from a known cubic stays within tolerance."""
        source = CubicBezier(Vec2(0, 0), Vec2(20, 40), Vec2(60, -20), Vec2(80, 10))
        points = [source.point_at(i / 40) for i in range(41)]

        curves = fit_cubic_beziers(points, error=0.5)

        assert curves
        assert curves[0].start == points[0]
        assert curves[-1].end == points[-1]
        assert _max_deviation(points, curves) <= 0.5 + 1e-6

    def test_fit_sampled_quadratic(self) -> None:
        source = QuadraticBezier(Vec2(0, 0), Vec2(50, 100), Vec2(100, 0))
        points = [source.point_at(i / 30) for i in range(31)]
        curves = fit_cubic_beziers(points, error=0.5)
        assert _max_deviation(points, curves) <= 0.5 + 1e-6

    def test_fit_noisy_stroke(self) -> None:
        """Test a jittery freehand stroke is fitted within tolerance."""
        rng = random.Random(99)
        points = [
            Vec2(i * 2.0, 20 * math.sin(i / 6) + rng.uniform(-0.3, 0.3)) for i in range(60)
        ]
        curves = fit_cubic_beziers(points, error=1.0)
        assert _max_deviation(points, curves) <= 1.0 + 1e-6
        for a, b in zip(curves, curves[1:]):
            assert a.end == b.start

    def test_sharp_corner_splits(self) -> None:
        points = [Vec2(i, 0) for i in range(11)] + [Vec2(10, i) for i in range(1, 11)]
        curves = fit_cubic_beziers(points, error=0.5)
        assert len(curves) >= 2
        assert _max_deviation(points, curves) <= 0.5 + 1e-6

    def test_collinear_points_fit_one_curve(self) -> None:
        curves = fit_cubic_beziers([Vec2(0, 0), Vec2(5, 0), Vec2(10, 0)])
        assert len(curves) == 1

    def test_two_points(self) -> None:
        """Test two points give a straight cubic with third-length handles."""
        curves = fit_cubic_beziers([Vec2(0, 0), Vec2(9, 0)])
        assert curves == [CubicBezier(Vec2(0, 0), Vec2(3, 0), Vec2(6, 0), Vec2(9, 0))]

    @pytest.mark.parametrize(
        "points",
        [[], [Vec2(1, 1)], [Vec2(1, 1), Vec2(1, 1), Vec2(1, 1)]],
    )
    def test_degenerate_input(self, points: list[Vec2]) -> None:
        assert fit_cubic_beziers(points) == []

    def test_duplicates_are_dropped(self) -> None:
        curves = fit_cubic_beziers([Vec2(0, 0), Vec2(0, 0), Vec2(9, 0), Vec2(9, 0)])
        assert len(curves) == 1
        assert curves[0].end == Vec2(9, 0)

    def test_depth_limit_terminates(self) -> None:
        rng = random.Random(5)
        points = [Vec2(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(200)]
        curves = fit_cubic_beziers(points, error=0.05, max_depth=2)
        assert 1 <= len(curves) <= 4

    def test_small_tolerance_splits_without_reparameterizing(self) -> None:
        """Test a deviation above an error under 1 goes straight to splitting."""
        points = [Vec2(i, 0) for i in range(11)] + [Vec2(10, i) for i in range(1, 11)]
        with patch(
            "asciistrator.core.fitting.reparameterize", wraps=fitting.reparameterize
        ) as spy:
            curves = fit_cubic_beziers(points, error=0.5)
        spy.assert_not_called()
        assert _max_deviation(points, curves) <= 0.5 + 1e-6

    def test_large_tolerance_reparameterizes(self) -> None:
        """Test a deviation between error and error squared is refined first."""
        points = [Vec2(i * 2.0, 30 * math.sin(i / 5)) for i in range(50)]
        with patch(
            "asciistrator.core.fitting.reparameterize", wraps=fitting.reparameterize
        ) as spy:
            curves = fit_cubic_beziers(points, error=10.0)
        assert spy.called
        assert _max_deviation(points, curves) <= 10.0 + 1e-6


class TestFittingHelpers:
    """Tests for parameterization and the least-squares solve."""

    def test_chord_length_parameterize(self) -> None:
        params = chord_length_parameterize([Vec2(0, 0), Vec2(1, 0), Vec2(4, 0)])
        assert params == [0.0, 0.25, 1.0]

    def test_chord_length_parameterize_coincident(self) -> None:
        params = chord_length_parameterize([Vec2(2, 2)] * 3)
        assert params == [0.0, 0.5, 1.0]

    def test_generate_bezier_recovers_curve(self) -> None:
        source = CubicBezier(Vec2(0, 0), Vec2(0, 30), Vec2(60, 30), Vec2(60, 0))
        params = [i / 20 for i in range(21)]
        points = [source.point_at(t) for t in params]
        fitted = generate_bezier(points, params, Vec2(0, 1), Vec2(0, 1))
        assert fitted.p1.distance_to(source.p1) < 1e-6
        assert fitted.p2.distance_to(source.p2) < 1e-6


class TestFitPath:
    """Tests for fit_path and RDP simplification."""

    def test_fit_path_open(self) -> None:
        points = [Vec2(i, 10 * math.sin(i / 5)) for i in range(40)]
        path = fit_path(points, error=0.5)
        assert not path.closed
        assert path.anchors[0].position == points[0]
        assert path.anchors[-1].position == points[-1]
        interior = path.anchors[1:-1]
        assert all(a.anchor_type is AnchorType.SMOOTH for a in interior)

    def test_fit_path_closed(self) -> None:
        points = [
            Vec2(20 * math.cos(2 * math.pi * i / 24), 20 * math.sin(2 * math.pi * i / 24))
            for i in range(24)
        ]
        path = fit_path(points, error=0.5, closed=True)
        assert path.closed
        assert len(path.segments()) == len(path)
        assert path.anchors[0].position == points[0]

    def test_rdp_collinear(self) -> None:
        """Test collinear interior points vanish at any positive tolerance."""
        line = [Vec2(i * 1.5, i * 0.5) for i in range(12)]
        for tolerance in (1e-6, 0.1, 10.0):
            assert rdp_simplify(line, tolerance) == [line[0], line[-1]]
