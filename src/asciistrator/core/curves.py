"""Quadratic and cubic Bezier curves.

This module provides the parametric curve model used by paths, curve fitting
and the rasterizer. Both degrees share one contract defined by BezierCurve:

- Evaluation: point_at, derivative_at, second_derivative_at
- Differential geometry: tangent_at, normal_at, curvature_at
- Subdivision: split (de Casteljau), subdivide, flatten
- Measurement: bounding_box (exact), length (adaptive), nearest_point
- Sampling: parameter_at_length, evenly_spaced_points

Curves are immutable; every operation returns new curves or derived values.
Evaluation outside t in [0, 1] extrapolates without validation.

Nearest-point queries refine a coarse sample with Newton-Raphson. On curves
that cross themselves the refinement settles in whichever basin the best
sample falls into, which may be a local minimum.

Key classes:
- BezierCurve: Abstract base shared by both degrees
- QuadraticBezier: Three control points
- CubicBezier: Four control points
- NearestPoint: Result of a nearest-point query

Key functions:
- create_arc, create_circle, create_ellipse: Cubic approximations of conics
- curve_from_points: Pick the curve class from a control point count
- format_number, format_point: Path data text for coordinates
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, NamedTuple

from asciistrator.core._bezier import (
    EPSILON,
    chord_length,
    de_casteljau,
    flatten_into,
    solve_quadratic,
)
from asciistrator.core.geometry import point_to_segment_distance
from asciistrator.domain import BoundingBox, Vec2

MAX_SUBDIVISION_DEPTH = 16
NEWTON_STEP_EPSILON = 1e-6
ELLIPSE_KAPPA = 0.5522847498


def format_number(value: float) -> str:
    """Shortest text that parses back to the same float, without a trailing ".0"."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def format_point(point: Vec2) -> str:
    return f"{format_number(point.x)} {format_number(point.y)}"


class NearestPoint(NamedTuple):
    """Closest point on a curve to a query point."""

    point: Vec2
    t: float
    distance: float


def _clamp01(t: float) -> float:
    return max(0.0, min(1.0, t))


class BezierCurve(ABC):
    """Common behaviour of quadratic and cubic Bezier curves.

    Subclasses supply the degree-specific closed forms; everything that can
    be expressed through them lives here.
    """

    __slots__ = ()

    newton_iterations: ClassVar[int]
    default_length_tolerance: ClassVar[float]
    kind: ClassVar[str]
    path_command: ClassVar[str]

    @property
    @abstractmethod
    def points(self) -> tuple[Vec2, ...]:
        """Control points in order."""

    @abstractmethod
    def point_at(self, t: float) -> Vec2:
        """Evaluate the curve at parameter t."""

    @abstractmethod
    def derivative_at(self, t: float) -> Vec2:
        """First derivative with respect to t."""

    @abstractmethod
    def second_derivative_at(self, t: float) -> Vec2:
        """Second derivative with respect to t."""

    @abstractmethod
    def _extrema(self) -> list[float]:
        """Parameters in (0, 1) where either coordinate's derivative vanishes."""

    @property
    def start(self) -> Vec2:
        return self.points[0]

    @property
    def end(self) -> Vec2:
        return self.points[-1]

    def tangent_at(self, t: float) -> Vec2:
        """Unit tangent, or (1, 0) where the derivative vanishes."""
        d = self.derivative_at(t)
        if d.length() < EPSILON:
            return Vec2(1.0, 0.0)
        return d.normalize()

    def normal_at(self, t: float) -> Vec2:
        """Unit tangent rotated by +90 degrees."""
        return self.tangent_at(t).perpendicular()

    def curvature_at(self, t: float) -> float:
        """Signed curvature cross(d1, d2) / |d1|^3, or 0 at stationary points."""
        d1 = self.derivative_at(t)
        length = d1.length()
        if length < EPSILON:
            return 0.0
        return d1.cross(self.second_derivative_at(t)) / (length * length * length)

    def split(self, t: float) -> tuple["BezierCurve", "BezierCurve"]:
        """Split the curve at t using de Casteljau subdivision.

        Args:
            t: Split parameter

        Returns:
            Tuple of (left, right) curves of the same degree
        """
        left, right = de_casteljau(self.points, t)
        cls = type(self)
        return cls(*left), cls(*right)

    def subdivide(self, count: int) -> list["BezierCurve"]:
        """Split into ``count`` pieces at uniform parameter steps."""
        if count <= 1:
            return [self]
        pieces: list[BezierCurve] = []
        rest: BezierCurve = self
        for i in range(count - 1):
            left, rest = rest.split(1.0 / (count - i))
            pieces.append(left)
        pieces.append(rest)
        return pieces

    def reverse(self) -> "BezierCurve":
        """Same curve traversed from end to start."""
        return type(self)(*reversed(self.points))

    def bounding_box(self) -> BoundingBox:
        """Exact bounds from the endpoints and the derivative roots in (0, 1)."""
        candidates = [self.start, self.end]
        candidates.extend(self.point_at(t) for t in self._extrema())
        return BoundingBox.from_points(candidates)

    def length(
        self,
        tolerance: float | None = None,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> float:
        """Arc length by recursive chord summation.

        Args:
            tolerance: Per-piece chord-sum tolerance (degree default if None)
            max_depth: Subdivision limit

        Returns:
            Estimated arc length
        """
        if tolerance is None:
            tolerance = self.default_length_tolerance
        return chord_length(self.points, tolerance, max_depth)

    def nearest_point(self, point: Vec2, samples: int = 50) -> NearestPoint:
        """Find the point on the curve closest to ``point``.

        Args:
            point: Query point
            samples: Number of uniform intervals for the initial search

        Returns:
            NearestPoint with the curve point, its parameter and distance
        """
        samples = max(1, samples)
        best_t = 0.0
        best_dist = math.inf
        for i in range(samples + 1):
            t = i / samples
            dist = self.point_at(t).distance_squared_to(point)
            if dist < best_dist:
                best_dist = dist
                best_t = t

        t = best_t
        for _ in range(self.newton_iterations):
            d1 = self.derivative_at(t)
            d2 = self.second_derivative_at(t)
            diff = self.point_at(t) - point
            denominator = d1.dot(d1) + diff.dot(d2)
            if abs(denominator) < EPSILON:
                break
            new_t = _clamp01(t - diff.dot(d1) / denominator)
            step = abs(new_t - t)
            t = new_t
            if step < NEWTON_STEP_EPSILON:
                break

        if self.point_at(t).distance_squared_to(point) > best_dist:
            t = best_t

        nearest = self.point_at(t)
        return NearestPoint(nearest, t, nearest.distance_to(point))

    def flatten(
        self,
        tolerance: float = 0.5,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> list[Vec2]:
        """Approximate the curve by a polyline.

        Pieces are subdivided at their midpoint until the curve midpoint lies
        within tolerance of the chord and the control polygon does too.

        Args:
            tolerance: Maximum deviation from the true curve
            max_depth: Subdivision limit

        Returns:
            Points from the start point to the end point inclusive
        """
        out = [self.start]
        flatten_into(self.points, tolerance, max_depth, out)
        return out

    def is_straight(self, tolerance: float = 0.5) -> bool:
        """True when every control point lies within tolerance of the chord."""
        return all(
            point_to_segment_distance(p, self.start, self.end) <= tolerance
            for p in self.points[1:-1]
        )

    def parameter_at_length(self, distance: float, tolerance: float = 0.01) -> float:
        """Parameter t whose prefix has the given arc length (bisection).

        Args:
            distance: Arc length from the start
            tolerance: Accepted length error

        Returns:
            Parameter in [0, 1]
        """
        if distance <= 0:
            return 0.0
        total = self.length()
        if distance >= total:
            return 1.0

        low, high = 0.0, 1.0
        t = distance / total
        for _ in range(50):
            prefix = self.split(t)[0].length()
            if abs(prefix - distance) < tolerance:
                break
            if prefix < distance:
                low = t
            else:
                high = t
            t = (low + high) / 2
        return t

    def evenly_spaced_points(self, count: int) -> list[Vec2]:
        """Points spaced at equal arc length, both endpoints included."""
        if count <= 0:
            return []
        if count == 1:
            return [self.start]
        total = self.length()
        return [
            self.point_at(self.parameter_at_length(total * i / (count - 1)))
            for i in range(count)
        ]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "points": [p.to_dict() for p in self.points]}

    def to_path_data(self) -> str:
        """SVG path data drawing this curve alone.

        Examples:
            >>> CubicBezier(Vec2(0, 0), Vec2(1, 2), Vec2(3, 2), Vec2(4, 0)).to_path_data()
            'M 0 0 C 1 2 3 2 4 0'
        """
        head, *rest = self.points
        controls = " ".join(format_point(p) for p in rest)
        return f"M {format_point(head)} {self.path_command} {controls}"


@dataclass(frozen=True, slots=True)
class QuadraticBezier(BezierCurve):
    """Quadratic Bezier curve with three control points.

    Attributes:
        p0: Start point
        p1: Control point
        p2: End point
    """

    p0: Vec2
    p1: Vec2
    p2: Vec2

    newton_iterations: ClassVar[int] = 5
    default_length_tolerance: ClassVar[float] = 0.1
    kind: ClassVar[str] = "quadratic"
    path_command: ClassVar[str] = "Q"

    @property
    def points(self) -> tuple[Vec2, ...]:
        return (self.p0, self.p1, self.p2)

    def point_at(self, t: float) -> Vec2:
        mt = 1 - t
        a = mt * mt
        b = 2 * mt * t
        c = t * t
        return Vec2(
            a * self.p0.x + b * self.p1.x + c * self.p2.x,
            a * self.p0.y + b * self.p1.y + c * self.p2.y,
        )

    def derivative_at(self, t: float) -> Vec2:
        mt = 1 - t
        return (self.p1 - self.p0) * (2 * mt) + (self.p2 - self.p1) * (2 * t)

    def second_derivative_at(self, t: float) -> Vec2:
        return (self.p2 - self.p1 * 2 + self.p0) * 2

    def _extrema(self) -> list[float]:
        roots = []
        for a, b, c in (
            (self.p0.x, self.p1.x, self.p2.x),
            (self.p0.y, self.p1.y, self.p2.y),
        ):
            denom = a - 2 * b + c
            if abs(denom) > EPSILON:
                t = (a - b) / denom
                if 0 < t < 1:
                    roots.append(t)
        return roots

    def to_cubic(self) -> "CubicBezier":
        """Exact degree elevation to a cubic."""
        return CubicBezier(
            self.p0,
            self.p0 + (self.p1 - self.p0) * (2 / 3),
            self.p2 + (self.p1 - self.p2) * (2 / 3),
            self.p2,
        )


@dataclass(frozen=True, slots=True)
class CubicBezier(BezierCurve):
    """Cubic Bezier curve with four control points.

    Attributes:
        p0: Start point
        p1: First control point
        p2: Second control point
        p3: End point
    """

    p0: Vec2
    p1: Vec2
    p2: Vec2
    p3: Vec2

    newton_iterations: ClassVar[int] = 10
    default_length_tolerance: ClassVar[float] = 0.001
    kind: ClassVar[str] = "cubic"
    path_command: ClassVar[str] = "C"

    @property
    def points(self) -> tuple[Vec2, ...]:
        return (self.p0, self.p1, self.p2, self.p3)

    def point_at(self, t: float) -> Vec2:
        mt = 1 - t
        a = mt * mt * mt
        b = 3 * mt * mt * t
        c = 3 * mt * t * t
        d = t * t * t
        return Vec2(
            a * self.p0.x + b * self.p1.x + c * self.p2.x + d * self.p3.x,
            a * self.p0.y + b * self.p1.y + c * self.p2.y + d * self.p3.y,
        )

    def derivative_at(self, t: float) -> Vec2:
        mt = 1 - t
        return (
            (self.p1 - self.p0) * (3 * mt * mt)
            + (self.p2 - self.p1) * (6 * mt * t)
            + (self.p3 - self.p2) * (3 * t * t)
        )

    def second_derivative_at(self, t: float) -> Vec2:
        mt = 1 - t
        return (self.p2 - self.p1 * 2 + self.p0) * (6 * mt) + (
            self.p3 - self.p2 * 2 + self.p1
        ) * (6 * t)

    def _extrema(self) -> list[float]:
        roots = []
        for p0, p1, p2, p3 in (
            (self.p0.x, self.p1.x, self.p2.x, self.p3.x),
            (self.p0.y, self.p1.y, self.p2.y, self.p3.y),
        ):
            a = -p0 + 3 * p1 - 3 * p2 + p3
            b = 2 * (p0 - 2 * p1 + p2)
            c = p1 - p0
            roots.extend(t for t in solve_quadratic(a, b, c) if 0 < t < 1)
        return roots

    def offset(self, distance: float, segments: int = 20) -> list["CubicBezier"]:
        """Approximate the parallel curve at a signed distance.

        Samples ``segments + 1`` points, pushes each along the local normal and
        refits cubics through them. Self-intersections at high curvature are
        left as they fall.

        Args:
            distance: Offset along the +90 degree normal
            segments: Number of sampling intervals

        Returns:
            Fitted cubic curves
        """
        from asciistrator.core.fitting import fit_cubic_beziers

        segments = max(1, segments)
        points = []
        for i in range(segments + 1):
            t = i / segments
            points.append(self.point_at(t) + self.normal_at(t) * distance)
        return fit_cubic_beziers(points, error=1.0)


def create_arc(center: Vec2, radius: float, start_angle: float, end_angle: float) -> CubicBezier:
    """Single cubic approximating a circular arc.

    Accurate for sweeps up to a quarter turn.

    Args:
        center: Arc center
        radius: Arc radius
        start_angle: Start angle in radians
        end_angle: End angle in radians

    Returns:
        Cubic curve from the start angle to the end angle
    """
    k = 4 / 3 * math.tan((end_angle - start_angle) / 4)
    cos_a, sin_a = math.cos(start_angle), math.sin(start_angle)
    cos_b, sin_b = math.cos(end_angle), math.sin(end_angle)

    p0 = Vec2(center.x + radius * cos_a, center.y + radius * sin_a)
    p3 = Vec2(center.x + radius * cos_b, center.y + radius * sin_b)
    p1 = Vec2(p0.x - k * radius * sin_a, p0.y + k * radius * cos_a)
    p2 = Vec2(p3.x + k * radius * sin_b, p3.y - k * radius * cos_b)
    return CubicBezier(p0, p1, p2, p3)


def create_circle(center: Vec2, radius: float) -> list[CubicBezier]:
    """Four quarter arcs approximating a full circle."""
    quarter = math.pi / 2
    return [create_arc(center, radius, i * quarter, (i + 1) * quarter) for i in range(4)]


def create_ellipse(center: Vec2, rx: float, ry: float) -> list[CubicBezier]:
    """Four cubics approximating an axis-aligned ellipse.

    Args:
        center: Ellipse center
        rx: Horizontal radius
        ry: Vertical radius

    Returns:
        Curves starting at the rightmost point, in increasing-angle order
    """
    kx = rx * ELLIPSE_KAPPA
    ky = ry * ELLIPSE_KAPPA
    cx, cy = center.x, center.y
    right = Vec2(cx + rx, cy)
    bottom = Vec2(cx, cy + ry)
    left = Vec2(cx - rx, cy)
    top = Vec2(cx, cy - ry)
    return [
        CubicBezier(right, Vec2(cx + rx, cy + ky), Vec2(cx + kx, cy + ry), bottom),
        CubicBezier(bottom, Vec2(cx - kx, cy + ry), Vec2(cx - rx, cy + ky), left),
        CubicBezier(left, Vec2(cx - rx, cy - ky), Vec2(cx - kx, cy - ry), top),
        CubicBezier(top, Vec2(cx + kx, cy - ry), Vec2(cx + rx, cy - ky), right),
    ]


def curve_from_points(points: list[Vec2]) -> BezierCurve:
    """Build the curve class matching the number of control points.

    Raises:
        ValueError: If the count is not 3 or 4
    """
    if len(points) == 3:
        return QuadraticBezier(*points)
    if len(points) == 4:
        return CubicBezier(*points)
    raise ValueError(f"Bezier curves need 3 or 4 control points, got {len(points)}")
