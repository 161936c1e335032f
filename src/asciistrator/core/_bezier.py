"""Internal Bezier subdivision and root-finding helpers.

This is an internal module containing the degree-independent algorithms behind
the curve classes. Not intended for public use.
"""

import math
from collections.abc import Sequence

from asciistrator.core.geometry import point_to_segment_distance
from asciistrator.domain import Vec2

EPSILON = 1e-10

# Length estimation always subdivides this many times before trusting the
# chord test, so S-shaped pieces whose midpoint sits on the chord are measured.
MIN_LENGTH_DEPTH = 3


def solve_quadratic(a: float, b: float, c: float) -> list[float]:
    """Real roots of a*t^2 + b*t + c = 0.

    Degenerates to the linear equation when a is (near) zero.

    Args:
        a: Quadratic coefficient
        b: Linear coefficient
        c: Constant term

    Returns:
        Real roots, in ascending order where there are two
    """
    if abs(a) < EPSILON:
        if abs(b) < EPSILON:
            return []
        return [-c / b]

    disc = b * b - 4 * a * c
    if disc < 0:
        return []
    if disc == 0:
        return [-b / (2 * a)]

    sq = math.sqrt(disc)
    return sorted([(-b - sq) / (2 * a), (-b + sq) / (2 * a)])


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


def solve_cubic(a: float, b: float, c: float, d: float) -> list[float]:
    """Real roots of a*t^3 + b*t^2 + c*t + d = 0 (Cardano / trigonometric).

    Args:
        a: Cubic coefficient
        b: Quadratic coefficient
        c: Linear coefficient
        d: Constant term

    Returns:
        Real roots in ascending order
    """
    if abs(a) < EPSILON:
        return solve_quadratic(b, c, d)

    b, c, d = b / a, c / a, d / a
    p = (3 * c - b * b) / 3
    q = (2 * b * b * b - 9 * b * c + 27 * d) / 27
    shift = -b / 3
    disc = q * q / 4 + p * p * p / 27

    if abs(disc) < EPSILON:
        if abs(q) < EPSILON:
            return [shift]
        u = _cbrt(-q / 2)
        return sorted([2 * u + shift, -u + shift])

    if disc > 0:
        sq = math.sqrt(disc)
        return [_cbrt(-q / 2 + sq) + _cbrt(-q / 2 - sq) + shift]

    r = math.sqrt(-p * p * p / 27)
    phi = math.acos(max(-1.0, min(1.0, -q / (2 * r))))
    m = 2 * _cbrt(r)
    return sorted(
        m * math.cos((phi + 2 * math.pi * k) / 3) + shift for k in range(3)
    )


def de_casteljau(points: Sequence[Vec2], t: float) -> tuple[list[Vec2], list[Vec2]]:
    """Split a control polygon of any degree at t.

    Args:
        points: Control points
        t: Split parameter

    Returns:
        Tuple of (left, right) control points; left[-1] is right[0]
    """
    level = list(points)
    left = [level[0]]
    right = [level[-1]]
    while len(level) > 1:
        level = [level[i].lerp(level[i + 1], t) for i in range(len(level) - 1)]
        left.append(level[0])
        right.append(level[-1])
    right.reverse()
    return left, right


def _is_flat(points: Sequence[Vec2], mid: Vec2, tolerance: float) -> bool:
    start = points[0]
    end = points[-1]
    chord = end - start

    # Perpendicular deviation of the curve midpoint from the chord
    if (mid - start).reject(chord).length() >= tolerance:
        return False

    # The curve lies inside its control hull, so a hull within tolerance of
    # the chord bounds the whole piece.
    return all(
        point_to_segment_distance(ctrl, start, end) <= tolerance
        for ctrl in points[1:-1]
    )


def flatten_into(
    points: Sequence[Vec2],
    tolerance: float,
    max_depth: int,
    out: list[Vec2],
    depth: int = 0,
) -> None:
    """Append the flattened points of a curve piece to ``out``.

    The start point of the piece is not appended; callers seed ``out`` with it.

    Args:
        points: Control points of the piece
        tolerance: Maximum deviation from the chord
        max_depth: Subdivision limit; pieces at the limit are accepted as-is
        out: Output list
        depth: Current recursion depth
    """
    left, right = de_casteljau(points, 0.5)
    if depth >= max_depth or _is_flat(points, left[-1], tolerance):
        out.append(points[-1])
        return

    flatten_into(left, tolerance, max_depth, out, depth + 1)
    flatten_into(right, tolerance, max_depth, out, depth + 1)


def chord_length(
    points: Sequence[Vec2],
    tolerance: float,
    max_depth: int,
    depth: int = 0,
) -> float:
    """Adaptive arc length by recursive chord summation.

    Args:
        points: Control points
        tolerance: Accepted difference between the two-chord and one-chord sums
        max_depth: Subdivision limit
        depth: Current recursion depth

    Returns:
        Estimated arc length
    """
    left, right = de_casteljau(points, 0.5)
    start = points[0]
    end = points[-1]
    mid = left[-1]

    chord = start.distance_to(end)
    two_chords = start.distance_to(mid) + mid.distance_to(end)

    if depth >= max_depth or (
        depth >= MIN_LENGTH_DEPTH and abs(two_chords - chord) < tolerance
    ):
        return two_chords

    return chord_length(left, tolerance, max_depth, depth + 1) + chord_length(
        right, tolerance, max_depth, depth + 1
    )
