"""Geometric utility functions for asciistrator.

This module provides pure functions for polyline and polygon operations used by
the path model and the rasterizer:
- Point-to-segment distance and projection
- Point-in-polygon tests (even-odd parity and nonzero winding)
- Ramer-Douglas-Peucker polyline simplification
- Duplicate-point removal

All functions work on Vec2 sequences and are stateless.
"""

from collections.abc import Sequence

from asciistrator.domain import Vec2


def nearest_point_on_segment(point: Vec2, seg_start: Vec2, seg_end: Vec2) -> Vec2:
    """Find the closest point on a line segment to a given point.

    Projects the point onto the segment's line and clamps the parameter to the
    segment. A zero-length segment returns its start point.

    Args:
        point: Query point
        seg_start: First endpoint of segment
        seg_end: Second endpoint of segment

    Returns:
        Closest point on the segment

    Examples:
        >>> nearest_point_on_segment(Vec2(5, 5), Vec2(0, 0), Vec2(10, 0))
        Vec2(x=5.0, y=0.0)
    """
    direction = seg_end - seg_start
    length_sq = direction.length_squared()
    if length_sq == 0:
        return seg_start

    t = (point - seg_start).dot(direction) / length_sq
    t = max(0.0, min(1.0, t))
    return Vec2(seg_start.x + t * direction.x, seg_start.y + t * direction.y)


def point_to_segment_distance(point: Vec2, seg_start: Vec2, seg_end: Vec2) -> float:
    """Distance from a point to the closest point of a segment.

    Args:
        point: Query point
        seg_start: First endpoint of segment
        seg_end: Second endpoint of segment

    Returns:
        Euclidean distance, clamped to the segment endpoints
    """
    return point.distance_to(nearest_point_on_segment(point, seg_start, seg_end))


def point_in_polygon(point: Vec2, polygon: Sequence[Vec2]) -> bool:
    """Test if point is inside polygon using the even-odd rule.

    Casts a horizontal ray to the right and counts edge crossings. The polygon
    is implicitly closed.

    Args:
        point: Point to test
        polygon: Polygon vertices

    Returns:
        True if the crossing count is odd

    Examples:
        >>> square = [Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)]
        >>> point_in_polygon(Vec2(5, 5), square)
        True
    """
    n = len(polygon)
    if n < 3:
        return False

    x, y = point.x, point.y
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def winding_number(point: Vec2, polygon: Sequence[Vec2]) -> int:
    """Signed number of times the polygon winds around a point.

    Upward crossings to the right of the point count +1, downward crossings
    count -1. A nonzero result means the point is inside under the nonzero
    fill rule.

    Args:
        point: Point to test
        polygon: Polygon vertices (implicitly closed)

    Returns:
        Winding number
    """
    n = len(polygon)
    if n < 3:
        return 0

    winding = 0
    for i in range(n):
        a = polygon[i]
        b = polygon[(i + 1) % n]
        side = (b.x - a.x) * (point.y - a.y) - (point.x - a.x) * (b.y - a.y)
        if a.y <= point.y:
            if b.y > point.y and side > 0:
                winding += 1
        elif b.y <= point.y and side < 0:
            winding -= 1
    return winding


def rdp_simplify(points: Sequence[Vec2], tolerance: float) -> list[Vec2]:
    """Simplify a polyline with the Ramer-Douglas-Peucker algorithm.

    For each range, the interior point farthest from the chord between the
    range endpoints is kept when its distance exceeds the tolerance and both
    sub-ranges are processed; otherwise the whole range collapses to its
    endpoints.

    Args:
        points: Polyline vertices
        tolerance: Maximum allowed deviation

    Returns:
        Simplified polyline, always keeping the first and last points

    Examples:
        >>> line = [Vec2(0, 0), Vec2(1, 0), Vec2(2, 0), Vec2(3, 0)]
        >>> len(rdp_simplify(line, 0.1))
        2
    """
    n = len(points)
    if n < 3:
        return list(points)

    keep = [False] * n
    keep[0] = keep[n - 1] = True

    stack = [(0, n - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        max_dist = -1.0
        index = first
        for i in range(first + 1, last):
            dist = point_to_segment_distance(points[i], points[first], points[last])
            if dist > max_dist:
                max_dist = dist
                index = i

        if max_dist > tolerance:
            keep[index] = True
            stack.append((first, index))
            stack.append((index, last))

    return [p for p, kept in zip(points, keep, strict=True) if kept]


def dedupe_points(points: Sequence[Vec2], tolerance: float = 1e-9) -> list[Vec2]:
    """Drop consecutive points closer than tolerance to their predecessor.

    Args:
        points: Input points
        tolerance: Minimum distance between kept consecutive points

    Returns:
        Points with consecutive duplicates removed
    """
    result: list[Vec2] = []
    for p in points:
        if not result or result[-1].distance_to(p) > tolerance:
            result.append(p)
    return result
