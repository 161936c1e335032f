"""Paths built from anchor points.

A Path is a single contour: an ordered list of AnchorPoints, a closed flag and a
fill rule. Consecutive anchors form PathSegments, which are lines when both
adjoining handles are absent and cubic curves otherwise.

Key classes:
- PathSegment: Transient view over two adjacent anchors
- Path: Anchor sequence with building verbs and path-level geometry
"""

from collections.abc import Iterable, Iterator, Sequence
from typing import Any

from asciistrator.core.curves import (
    MAX_SUBDIVISION_DEPTH,
    BezierCurve,
    CubicBezier,
    QuadraticBezier,
)
from asciistrator.core.geometry import (
    point_in_polygon,
    point_to_segment_distance,
    rdp_simplify,
    winding_number,
)
from asciistrator.domain import AnchorPoint, AnchorType, BoundingBox, FillRule, Vec2
from asciistrator.exceptions import PathStructureError

HIT_SAMPLES_CURVE = 20
HIT_SAMPLES_LINE = 2
COINCIDENT_EPSILON = 1e-9


class PathSegment:
    """A segment between two adjacent anchors.

    Derived on demand from a path's anchor list and never stored.

    Attributes:
        start: Anchor the segment leaves from
        end: Anchor the segment arrives at
    """

    __slots__ = ("start", "end")

    def __init__(self, start: AnchorPoint, end: AnchorPoint) -> None:
        self.start = start
        self.end = end

    @property
    def is_line(self) -> bool:
        return self.start.handle_out is None and self.end.handle_in is None

    @property
    def is_curve(self) -> bool:
        return not self.is_line

    def to_curve(self) -> CubicBezier:
        """Cubic equivalent; a missing handle sits on its anchor."""
        p0 = self.start.position
        p3 = self.end.position
        p1 = self.start.handle_out if self.start.handle_out is not None else p0
        p2 = self.end.handle_in if self.end.handle_in is not None else p3
        return CubicBezier(p0, p1, p2, p3)

    def point_at(self, t: float) -> Vec2:
        if self.is_line:
            return self.start.position.lerp(self.end.position, t)
        return self.to_curve().point_at(t)

    def tangent_at(self, t: float) -> Vec2:
        """Unit tangent, (1, 0) for a zero-length line."""
        if self.is_line:
            direction = self.end.position - self.start.position
            if direction.length() == 0:
                return Vec2(1.0, 0.0)
            return direction.normalize()
        return self.to_curve().tangent_at(t)

    def length(
        self,
        tolerance: float | None = None,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> float:
        if self.is_line:
            return self.start.position.distance_to(self.end.position)
        return self.to_curve().length(tolerance, max_depth)

    def bounds(self) -> BoundingBox:
        if self.is_line:
            return BoundingBox.from_points([self.start.position, self.end.position])
        return self.to_curve().bounding_box()

    def split(self, t: float) -> tuple[BezierCurve, BezierCurve]:
        return self.to_curve().split(t)

    def flatten(
        self,
        tolerance: float = 0.5,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> list[Vec2]:
        if self.is_line:
            return [self.start.position, self.end.position]
        return self.to_curve().flatten(tolerance, max_depth)

    def sample(self, count: int) -> list[Vec2]:
        """``count`` points at uniform parameter steps, both ends included."""
        if count < 2:
            return [self.start.position]
        return [self.point_at(i / (count - 1)) for i in range(count)]

    def __repr__(self) -> str:
        kind = "line" if self.is_line else "curve"
        return f"PathSegment({kind}, {self.start.position!r} -> {self.end.position!r})"


class Path:
    """A single contour of anchor points.

    Segment count is ``len(anchors) - 1`` for open paths and ``len(anchors)``
    for closed ones, where the last anchor connects back to the first.

    Building verbs return the path so calls can be chained:

        path = Path().move_to(0, 0).line_to(10, 0).line_to(10, 10).close_path()

    Attributes:
        closed: Whether the last anchor joins the first
        fill_rule: Containment rule for filled rendering
    """

    def __init__(
        self,
        anchors: Iterable[AnchorPoint] | None = None,
        closed: bool = False,
        fill_rule: FillRule = FillRule.NONZERO,
    ) -> None:
        self._anchors: list[AnchorPoint] = list(anchors) if anchors is not None else []
        self.closed = closed
        self.fill_rule = fill_rule

    # ------------------------------------------------------------------
    # Anchor management
    # ------------------------------------------------------------------

    @property
    def anchors(self) -> tuple[AnchorPoint, ...]:
        return tuple(self._anchors)

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[AnchorPoint]:
        return iter(self._anchors)

    def is_empty(self) -> bool:
        return not self._anchors

    def add_anchor(self, anchor: AnchorPoint, index: int | None = None) -> None:
        if index is None:
            self._anchors.append(anchor)
        else:
            self._anchors.insert(index, anchor)

    def remove_anchor(self, index: int) -> AnchorPoint | None:
        """Remove and return the anchor at index, or None when out of range."""
        if not 0 <= index < len(self._anchors):
            return None
        return self._anchors.pop(index)

    def anchor_at(self, index: int) -> AnchorPoint | None:
        """Anchor at index, wrapping around for closed paths."""
        if not self._anchors:
            return None
        if self.closed:
            return self._anchors[index % len(self._anchors)]
        if 0 <= index < len(self._anchors):
            return self._anchors[index]
        return None

    def translate(self, dx: float, dy: float) -> None:
        for anchor in self._anchors:
            anchor.translate(dx, dy)

    def copy(self) -> "Path":
        return Path([a.copy() for a in self._anchors], self.closed, self.fill_rule)

    # ------------------------------------------------------------------
    # Building verbs
    # ------------------------------------------------------------------

    def move_to(self, x: float, y: float) -> "Path":
        """Start the anchor chain at (x, y)."""
        self._anchors.append(AnchorPoint(x, y))
        return self

    def line_to(self, x: float, y: float) -> "Path":
        self._anchors.append(AnchorPoint(x, y))
        return self

    def quadratic_curve_to(self, cpx: float, cpy: float, x: float, y: float) -> "Path":
        """Append a quadratic curve, stored as the equivalent cubic handles.

        Does nothing on an empty path, since there is no start point.
        """
        if not self._anchors:
            return self

        last = self._anchors[-1]
        control = Vec2(cpx, cpy)
        end = Vec2(x, y)
        last.set_handle_out(last.position + (control - last.position) * (2 / 3))
        self._anchors.append(
            AnchorPoint(x, y, handle_in=end + (control - end) * (2 / 3))
        )
        return self

    def bezier_curve_to(
        self,
        cp1x: float,
        cp1y: float,
        cp2x: float,
        cp2y: float,
        x: float,
        y: float,
    ) -> "Path":
        """Append a cubic curve. Does nothing on an empty path."""
        if not self._anchors:
            return self

        self._anchors[-1].set_handle_out(Vec2(cp1x, cp1y))
        self._anchors.append(AnchorPoint(x, y, handle_in=Vec2(cp2x, cp2y)))
        return self

    def arc_to(self, x: float, y: float, radius: float) -> "Path":
        """Append a bulging arc, approximated by a quadratic curve.

        The control point sits ``radius / 2`` off the chord midpoint along the
        chord's +90 degree normal. A zero-length chord degenerates to line_to.
        """
        if not self._anchors:
            return self

        start = self._anchors[-1].position
        end = Vec2(x, y)
        chord = end - start
        length = chord.length()
        if length == 0:
            return self.line_to(x, y)

        normal = chord.perpendicular() / length
        control = (start + end) * 0.5 + normal * (radius * 0.5)
        return self.quadratic_curve_to(control.x, control.y, x, y)

    def close_path(self) -> "Path":
        self.closed = True
        return self

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def segments(self) -> list[PathSegment]:
        """Segments in order, including the wrap-around segment when closed."""
        n = len(self._anchors)
        count = n if self.closed else max(0, n - 1)
        return [
            PathSegment(self._anchors[i], self._anchors[(i + 1) % n]) for i in range(count)
        ]

    def length(
        self,
        tolerance: float | None = None,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> float:
        return sum(segment.length(tolerance, max_depth) for segment in self.segments())

    def _locate(self, distance: float) -> tuple[PathSegment, float] | None:
        segments = self.segments()
        if not segments:
            return None
        if distance <= 0:
            return segments[0], 0.0

        accumulated = 0.0
        for segment in segments:
            seg_length = segment.length()
            if accumulated + seg_length >= distance:
                if seg_length == 0:
                    return segment, 0.0
                return segment, (distance - accumulated) / seg_length
            accumulated += seg_length
        return None

    def point_at_length(self, distance: float) -> Vec2 | None:
        """Point at an arc-length distance from the start.

        The remainder inside the containing segment is mapped to its parameter
        linearly, which approximates true arc-length sampling on curves.

        Args:
            distance: Distance along the path

        Returns:
            Point, or None when the distance is beyond the end of the path
        """
        located = self._locate(distance)
        if located is None:
            return None
        segment, t = located
        return segment.point_at(t)

    def tangent_at_length(self, distance: float) -> Vec2 | None:
        """Unit tangent at an arc-length distance, or None beyond the end."""
        located = self._locate(distance)
        if located is None:
            return None
        segment, t = located
        return segment.tangent_at(t)

    def flatten(
        self,
        tolerance: float = 0.5,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> "Path":
        """New line-only path approximating this one within tolerance.

        Args:
            tolerance: Maximum deviation for curved segments
            max_depth: Subdivision limit per segment

        Returns:
            Path of corner anchors with the same closed flag and fill rule
        """
        points: list[Vec2] = []
        for segment in self.segments():
            flat = segment.flatten(tolerance, max_depth)
            points.extend(flat if not points else flat[1:])

        if not points:
            points = [a.position for a in self._anchors]
        elif self.closed and len(points) > 1:
            # The wrap-around segment ends on the first anchor again
            points.pop()

        return Path.from_points(points, closed=self.closed, fill_rule=self.fill_rule)

    def simplify(self, tolerance: float = 1.0) -> "Path":
        """Flatten at half the tolerance, then reduce with Ramer-Douglas-Peucker.

        Args:
            tolerance: Maximum deviation of removed points

        Returns:
            New line-only path (a plain copy when under three anchors)
        """
        if len(self._anchors) < 3:
            return self.copy()

        points = [a.position for a in self.flatten(tolerance / 2)]
        if self.closed:
            reduced = rdp_simplify(points + [points[0]], tolerance)[:-1]
        else:
            reduced = rdp_simplify(points, tolerance)

        return Path.from_points(reduced, closed=self.closed, fill_rule=self.fill_rule)

    def offset(self, distance: float) -> "Path":
        """Displace every anchor along the averaged normal of its segments.

        Open endpoints use their single adjoining segment. Handles move with
        their anchor. Self-intersections are not resolved.

        Args:
            distance: Signed distance along the +90 degree normal

        Returns:
            New path
        """
        segments = self.segments()
        result = self.copy()
        if not segments:
            return result

        n = len(self._anchors)
        for i, anchor in enumerate(result._anchors):
            normals = []
            if self.closed or i > 0:
                normals.append(segments[i - 1].tangent_at(1.0).perpendicular())
            if self.closed or i < n - 1:
                normals.append(segments[i % len(segments)].tangent_at(0.0).perpendicular())

            normal = Vec2(0.0, 0.0)
            for candidate in normals:
                normal = normal + candidate
            normal = normal.normalize()
            if normal.length() == 0:
                # Opposing segments; fall back to the outgoing side
                normal = normals[-1]

            anchor.translate(normal.x * distance, normal.y * distance)
        return result

    def reverse(self) -> "Path":
        """New path traversing the anchors backwards, handles swapped."""
        return Path(
            [a.swapped() for a in reversed(self._anchors)], self.closed, self.fill_rule
        )

    def local_bounds(self) -> BoundingBox:
        """Exact bounds of all segments.

        A single anchor yields a point box, an empty path the zero box.
        """
        segments = self.segments()
        if not segments:
            return BoundingBox.from_points(a.position for a in self._anchors)

        bounds = segments[0].bounds()
        for segment in segments[1:]:
            bounds = bounds.union(segment.bounds())
        return bounds

    def contains_point(self, x: float, y: float, tolerance: float = 1.0) -> bool:
        """Point membership against the flattened outline using the fill rule.

        Open paths and outlines with fewer than three points contain nothing.
        """
        if not self.closed:
            return False

        polygon = [a.position for a in self.flatten(tolerance)]
        if len(polygon) < 3:
            return False

        point = Vec2(x, y)
        if self.fill_rule is FillRule.EVENODD:
            return point_in_polygon(point, polygon)
        return winding_number(point, polygon) != 0

    def hit_test(
        self,
        x: float,
        y: float,
        tolerance: float = 3.0,
        filled: bool = False,
    ) -> bool:
        """Check whether (x, y) touches the path.

        The expanded bounds reject distant points first. Each segment is then
        sampled (20 points for curves, 2 for lines) and the point is tested
        against the polyline through the samples. Filled closed paths also hit
        on their interior.

        Args:
            x: Query x
            y: Query y
            tolerance: Maximum distance to the stroke
            filled: Whether the interior counts as a hit

        Returns:
            True if the point hits the stroke or filled interior
        """
        if not self._anchors:
            return False
        if not self.local_bounds().expand(tolerance).contains(x, y):
            return False

        point = Vec2(x, y)
        segments = self.segments()
        if not segments:
            return self._anchors[0].position.distance_to(point) <= tolerance

        for segment in segments:
            count = HIT_SAMPLES_CURVE if segment.is_curve else HIT_SAMPLES_LINE
            samples = segment.sample(count)
            for a, b in zip(samples, samples[1:]):
                if point_to_segment_distance(point, a, b) <= tolerance:
                    return True

        if filled and self.closed:
            return self.contains_point(x, y)
        return False

    # ------------------------------------------------------------------
    # Construction and serialization
    # ------------------------------------------------------------------

    @classmethod
    def from_points(
        cls,
        points: Iterable[Vec2],
        closed: bool = False,
        fill_rule: FillRule = FillRule.NONZERO,
    ) -> "Path":
        """Polyline of corner anchors."""
        return cls([AnchorPoint(p.x, p.y) for p in points], closed, fill_rule)

    @classmethod
    def from_curves(cls, curves: Sequence[BezierCurve], closed: bool = False) -> "Path":
        """Join consecutive curves into a path.

        Curves are assumed to share endpoints. Joints whose handles are
        collinear and opposed become SMOOTH anchors, the rest CORNER. Handles
        that coincide with their anchor are dropped so straight pieces become
        lines. When closed and the last curve returns to the first point, the
        two endpoints merge into one anchor.

        Args:
            curves: Quadratic or cubic curves in order
            closed: Whether the resulting path is closed

        Returns:
            New path
        """
        cubics = [c.to_cubic() if isinstance(c, QuadraticBezier) else c for c in curves]
        path = cls(closed=closed)
        if not cubics:
            return path

        def handle(anchor: Vec2, control: Vec2) -> Vec2 | None:
            return None if control.distance_to(anchor) < COINCIDENT_EPSILON else control

        first = cubics[0]
        anchors = [AnchorPoint(first.p0.x, first.p0.y, handle_out=handle(first.p0, first.p1))]
        for i, curve in enumerate(cubics):
            anchor = AnchorPoint(curve.p3.x, curve.p3.y, handle_in=handle(curve.p3, curve.p2))
            if i + 1 < len(cubics):
                nxt = cubics[i + 1]
                anchor.set_handle_out(handle(curve.p3, nxt.p1))
            anchors.append(anchor)

        if closed and len(anchors) > 2 and (
            anchors[-1].position.distance_to(anchors[0].position) < COINCIDENT_EPSILON
        ):
            last = anchors.pop()
            anchors[0].set_handle_in(last.handle_in)

        for anchor in anchors:
            h_in = anchor.handle_in
            h_out = anchor.handle_out
            if h_in is None or h_out is None:
                continue
            a = h_in - anchor.position
            b = h_out - anchor.position
            scale = a.length() * b.length()
            if scale > 0 and abs(a.cross(b)) <= 1e-6 * scale and a.dot(b) < 0:
                anchor.set_type(AnchorType.SMOOTH)

        path._anchors = anchors
        return path

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain structure.

        Returns:
            Dictionary with anchors, segment index pairs, closed flag and fill rule
        """
        n = len(self._anchors)
        return {
            "anchors": [a.to_dict() for a in self._anchors],
            "segments": [[i, (i + 1) % n] for i in range(len(self.segments()))],
            "closed": self.closed,
            "fill_rule": self.fill_rule.value,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Path":
        """Rebuild a path from its plain structure.

        The optional "segments" list must reference existing anchors and follow
        the anchor chain, since segments are derived from anchor order.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            Path instance

        Raises:
            PathStructureError: If the structure is malformed
        """
        if not isinstance(data, dict):
            raise PathStructureError("Path must be an object")

        raw_anchors = data.get("anchors")
        if raw_anchors is None:
            raise PathStructureError("Path is missing 'anchors'")
        if not isinstance(raw_anchors, list):
            raise PathStructureError("Path 'anchors' must be a list")

        anchors = []
        for index, raw in enumerate(raw_anchors):
            try:
                anchors.append(AnchorPoint.from_dict(raw))
            except PathStructureError as e:
                raise PathStructureError(f"Anchor {index}: {e}") from e

        closed = data.get("closed", False)
        if not isinstance(closed, bool):
            raise PathStructureError("Path 'closed' must be a boolean")

        rule_tag = data.get("fill_rule", FillRule.NONZERO.value)
        try:
            fill_rule = FillRule(rule_tag)
        except ValueError:
            raise PathStructureError(f"Unknown fill rule '{rule_tag}'") from None

        path = cls(anchors, closed, fill_rule)
        if "segments" in data:
            _validate_segments(data["segments"], len(anchors), closed)
        return path

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"Path({len(self._anchors)} anchors, {state}, {self.fill_rule.value})"


def _validate_segments(raw: Any, anchor_count: int, closed: bool) -> None:
    if not isinstance(raw, list):
        raise PathStructureError("Path 'segments' must be a list")

    expected = anchor_count if closed else max(0, anchor_count - 1)
    if len(raw) != expected:
        raise PathStructureError(
            f"Path has {anchor_count} anchors and expects {expected} segments, got {len(raw)}"
        )

    for index, pair in enumerate(raw):
        if (
            not isinstance(pair, list | tuple)
            or len(pair) != 2
            or not all(isinstance(v, int) and not isinstance(v, bool) for v in pair)
        ):
            raise PathStructureError(f"Segment {index} must be a pair of anchor indices")
        start, end = pair
        for ref in (start, end):
            if not 0 <= ref < anchor_count:
                raise PathStructureError(
                    f"Segment {index} references missing anchor {ref} "
                    f"(path has {anchor_count} anchors)"
                )
        if start != index or end != (index + 1) % anchor_count:
            raise PathStructureError(
                f"Segment {index} joins anchors {start}->{end}, expected "
                f"{index}->{(index + 1) % anchor_count}"
            )

