"""Two-dimensional vector and bounding box primitives.

This module defines the leaf value types used throughout asciistrator:
- Vec2: An immutable 2D point/vector with the usual arithmetic
- BoundingBox: An axis-aligned box used for bounds and hit-test rejection
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Vec2:
    """A point or direction in 2D space.

    Immutable and hashable for use in sets/dicts.

    Attributes:
        x: X coordinate
        y: Y coordinate
    """

    x: float
    y: float

    @staticmethod
    def zero() -> "Vec2":
        return Vec2(0.0, 0.0)

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec2":
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Vec2") -> float:
        """Z component of the 3D cross product (signed parallelogram area)."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalize(self) -> "Vec2":
        """Unit vector in the same direction, or the zero vector for zero length."""
        length = self.length()
        if length == 0:
            return Vec2(0.0, 0.0)
        return Vec2(self.x / length, self.y / length)

    def lerp(self, other: "Vec2", t: float) -> "Vec2":
        """Linear interpolation towards another vector.

        Args:
            other: Target vector (returned at t=1)
            t: Interpolation parameter

        Returns:
            Interpolated vector
        """
        return Vec2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def project(self, onto: "Vec2") -> "Vec2":
        """Projection of this vector onto another (zero when onto is zero)."""
        denom = onto.length_squared()
        if denom == 0:
            return Vec2(0.0, 0.0)
        return onto * (self.dot(onto) / denom)

    def reject(self, onto: "Vec2") -> "Vec2":
        """Component of this vector perpendicular to another."""
        return self - self.project(onto)

    def distance_to(self, other: "Vec2") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_squared_to(self, other: "Vec2") -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def perpendicular(self) -> "Vec2":
        """Vector rotated by +90 degrees."""
        return Vec2(-self.y, self.x)

    def angle(self) -> float:
        """Angle in radians measured from the positive x axis."""
        return math.atan2(self.y, self.x)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Vec2":
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Left edge
        min_y: Top edge (smallest y)
        max_x: Right edge
        max_y: Bottom edge (largest y)
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: Iterable[Vec2]) -> "BoundingBox":
        """Smallest box containing all points.

        Args:
            points: Points to enclose

        Returns:
            Bounding box, or the zero box when no points are given
        """
        pts = list(points)
        if not pts:
            return cls(0.0, 0.0, 0.0, 0.0)
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Vec2:
        return Vec2((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def expand(self, margin: float) -> "BoundingBox":
        return BoundingBox(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def to_dict(self) -> dict[str, Any]:
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }
