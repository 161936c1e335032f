"""Least-squares cubic curve fitting (Schneider's algorithm).

Fits a short sequence of cubic Bezier curves through an ordered point list so
that every input point lies within a maximum distance of the fit. Used for
freehand smoothing and for offsetting cubic curves.

Outline:
1. End tangents from the immediate neighbours of each end point
2. Chord-length parameterization of the points
3. 2x2 least-squares solve for the two handle lengths
4. Maximum deviation at the parameter values
5. Accept, or reparameterize with Newton-Raphson up to four times
6. Otherwise split at the worst point and fit both halves

The recursion always ends: ranges shrink on every split and a two-point range
is fitted exactly by a straight cubic.
"""

from collections.abc import Sequence

from asciistrator.core._bezier import EPSILON
from asciistrator.core.curves import CubicBezier
from asciistrator.core.geometry import dedupe_points
from asciistrator.core.path import Path
from asciistrator.domain import Vec2

MAX_REPARAMETERIZE = 4
MAX_FIT_DEPTH = 32


def chord_length_parameterize(points: Sequence[Vec2]) -> list[float]:
    """Parameters proportional to cumulative chord length, from 0 to 1.

    Args:
        points: Ordered points

    Returns:
        One parameter per point
    """
    u = [0.0]
    for i in range(1, len(points)):
        u.append(u[-1] + points[i].distance_to(points[i - 1]))

    total = u[-1]
    if total == 0:
        return [i / max(1, len(points) - 1) for i in range(len(points))]
    return [value / total for value in u]


def generate_bezier(
    points: Sequence[Vec2],
    params: Sequence[float],
    left_tangent: Vec2,
    right_tangent: Vec2,
) -> CubicBezier:
    """Least-squares cubic with fixed end points and end tangent directions.

    Solves for the handle lengths alpha1 (along left_tangent) and alpha2
    (along right_tangent). A near-singular system or a handle length that is
    not positive falls back to one third of the end-to-end distance.

    Args:
        points: Points to fit
        params: Parameter value of each point
        left_tangent: Unit tangent at the first point, pointing inwards
        right_tangent: Unit tangent at the last point, pointing inwards

    Returns:
        Fitted cubic curve
    """
    first = points[0]
    last = points[-1]

    c00 = c01 = c11 = 0.0
    x0 = x1 = 0.0
    for point, t in zip(points, params, strict=True):
        mt = 1 - t
        b0 = mt * mt * mt
        b1 = 3 * mt * mt * t
        b2 = 3 * mt * t * t
        b3 = t * t * t

        a1 = left_tangent * b1
        a2 = right_tangent * b2
        tmp = point - (first * (b0 + b1) + last * (b2 + b3))

        c00 += a1.dot(a1)
        c01 += a1.dot(a2)
        c11 += a2.dot(a2)
        x0 += a1.dot(tmp)
        x1 += a2.dot(tmp)

    seg_length = first.distance_to(last)
    fallback = seg_length / 3

    det = c00 * c11 - c01 * c01
    if abs(det) < EPSILON:
        alpha_l = alpha_r = fallback
    else:
        alpha_l = (x0 * c11 - x1 * c01) / det
        alpha_r = (c00 * x1 - c01 * x0) / det

    epsilon = 1e-6 * seg_length
    if alpha_l < epsilon or alpha_r < epsilon:
        alpha_l = alpha_r = fallback

    return CubicBezier(
        first,
        first + left_tangent * alpha_l,
        last + right_tangent * alpha_r,
        last,
    )


def compute_max_error(
    points: Sequence[Vec2],
    curve: CubicBezier,
    params: Sequence[float],
) -> tuple[float, int]:
    """Largest squared distance between the points and the curve.

    Args:
        points: Fitted points
        curve: Candidate curve
        params: Parameter value of each point

    Returns:
        Tuple of (max squared distance, index of the worst interior point)
    """
    max_sq = 0.0
    split = len(points) // 2
    for i in range(1, len(points) - 1):
        dist = curve.point_at(params[i]).distance_squared_to(points[i])
        if dist >= max_sq:
            max_sq = dist
            split = i
    return max_sq, split


def newton_raphson_root(curve: CubicBezier, point: Vec2, u: float) -> float:
    """One Newton step moving u towards the curve point closest to point."""
    diff = curve.point_at(u) - point
    d1 = curve.derivative_at(u)
    d2 = curve.second_derivative_at(u)

    numerator = diff.dot(d1)
    denominator = d1.dot(d1) + diff.dot(d2)
    if abs(denominator) < EPSILON:
        return u
    return max(0.0, min(1.0, u - numerator / denominator))


def reparameterize(
    curve: CubicBezier,
    points: Sequence[Vec2],
    params: Sequence[float],
) -> list[float]:
    return [newton_raphson_root(curve, p, u) for p, u in zip(points, params, strict=True)]


def _fit_range(
    points: Sequence[Vec2],
    left_tangent: Vec2,
    right_tangent: Vec2,
    error: float,
    depth: int,
    max_depth: int,
    out: list[CubicBezier],
) -> None:
    if len(points) == 2:
        dist = points[0].distance_to(points[1]) / 3
        out.append(
            CubicBezier(
                points[0],
                points[0] + left_tangent * dist,
                points[1] + right_tangent * dist,
                points[1],
            )
        )
        return

    params = chord_length_parameterize(points)
    curve = generate_bezier(points, params, left_tangent, right_tangent)
    max_sq, split = compute_max_error(points, curve, params)

    error_sq = error * error
    if max_sq <= error_sq:
        out.append(curve)
        return

    if max_sq <= error_sq * error_sq:
        for _ in range(MAX_REPARAMETERIZE):
            params = reparameterize(curve, points, params)
            curve = generate_bezier(points, params, left_tangent, right_tangent)
            max_sq, split = compute_max_error(points, curve, params)
            if max_sq <= error_sq:
                out.append(curve)
                return

    if depth >= max_depth:
        out.append(curve)
        return

    center = points[split - 1] - points[split + 1]
    if center.length() == 0:
        center = points[split - 1] - points[split]
    center = center.normalize()

    _fit_range(points[: split + 1], left_tangent, center, error, depth + 1, max_depth, out)
    _fit_range(points[split:], -center, right_tangent, error, depth + 1, max_depth, out)


def fit_cubic_beziers(
    points: Sequence[Vec2],
    error: float = 1.0,
    max_depth: int = MAX_FIT_DEPTH,
) -> list[CubicBezier]:
    """Fit cubic curves through an ordered point sequence.

    Consecutive duplicates are dropped first. The result always covers the
    whole input: ranges that cannot meet the tolerance are split until they
    do or the depth limit is reached.

    Args:
        points: Ordered points to fit
        error: Maximum distance from any input point to the fit
        max_depth: Split recursion limit

    Returns:
        Connected cubic curves from the first point to the last, or an empty
        list for fewer than two distinct points

    Examples:
        >>> curves = fit_cubic_beziers([Vec2(0, 0), Vec2(5, 0), Vec2(10, 0)])
        >>> len(curves)
        1
    """
    pts = dedupe_points(points)
    if len(pts) < 2:
        return []

    left_tangent = (pts[1] - pts[0]).normalize()
    right_tangent = (pts[-2] - pts[-1]).normalize()

    curves: list[CubicBezier] = []
    _fit_range(pts, left_tangent, right_tangent, error, 0, max_depth, curves)
    return curves


def fit_path(points: Sequence[Vec2], error: float = 1.0, closed: bool = False) -> Path:
    """Smooth a freehand stroke into a path of fitted curves.

    Args:
        points: Raw stroke points
        error: Maximum deviation of the fit
        closed: Close the path, fitting through the first point again

    Returns:
        Path whose interior joints are SMOOTH where the fit is tangent-continuous
    """
    pts = list(points)
    if closed and len(pts) > 2 and pts[0] != pts[-1]:
        pts.append(pts[0])
    return Path.from_curves(fit_cubic_beziers(pts, error), closed=closed)
