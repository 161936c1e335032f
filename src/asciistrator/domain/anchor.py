"""Anchor points and path-level enums.

This module defines the vertex type of a path:
- AnchorType: How the two control handles of an anchor relate
- FillRule: Which points a closed path encloses
- AnchorPoint: A path vertex with optional incoming/outgoing handles
"""

from enum import Enum
from typing import Any

from asciistrator.domain.vector import Vec2
from asciistrator.exceptions import PathStructureError

# Stored handles this close to their mirrored positions are kept as written
COUPLING_TOLERANCE = 1e-9


class AnchorType(Enum):
    """Handle coupling at an anchor.

    - CORNER: Handles move independently
    - SMOOTH: Handles stay collinear through the anchor, lengths independent
    - SYMMETRIC: Handles stay collinear with equal lengths
    """

    CORNER = "corner"
    SMOOTH = "smooth"
    SYMMETRIC = "symmetric"


class FillRule(Enum):
    """Fill rule for closed paths."""

    NONZERO = "nonzero"
    EVENODD = "evenodd"


def parse_number(value: Any, field_name: str) -> float:
    """Coerce a structural field to float, rejecting non-numeric input.

    Args:
        value: Raw field value
        field_name: Field name used in the error message

    Returns:
        Value as float

    Raises:
        PathStructureError: If the value is not a real number
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise PathStructureError(
            f"Field '{field_name}' must be a number, got {type(value).__name__}"
        )
    return float(value)


def parse_point(data: Any, field_name: str) -> Vec2:
    """Read an {"x", "y"} mapping as a Vec2.

    Raises:
        PathStructureError: If the mapping is missing coordinates
    """
    if not isinstance(data, dict):
        raise PathStructureError(f"Field '{field_name}' must be an object with x and y")
    for key in ("x", "y"):
        if key not in data:
            raise PathStructureError(f"Field '{field_name}' is missing '{key}'")
    return Vec2(
        parse_number(data["x"], f"{field_name}.x"),
        parse_number(data["y"], f"{field_name}.y"),
    )


class AnchorPoint:
    """A path vertex with optional Bezier control handles.

    Handles are stored as absolute positions. For SMOOTH and SYMMETRIC anchors
    the handles are coupled: whenever one handle is set, the opposite handle is
    recomputed so both stay collinear through the anchor (and, for SYMMETRIC,
    equally long). All writes go through the setters below, which funnel into
    a single mirroring routine.

    A SMOOTH anchor whose opposite handle is absent keeps it absent, since the
    opposite length is unknown. Clearing one handle of a SYMMETRIC anchor clears
    both.

    Attributes:
        x: X coordinate
        y: Y coordinate
        anchor_type: Handle coupling mode
        handle_in: Absolute position of the incoming handle, or None
        handle_out: Absolute position of the outgoing handle, or None
    """

    __slots__ = ("_position", "_type", "_handle_in", "_handle_out")

    def __init__(
        self,
        x: float,
        y: float,
        anchor_type: AnchorType = AnchorType.CORNER,
        handle_in: Vec2 | None = None,
        handle_out: Vec2 | None = None,
    ) -> None:
        self._position = Vec2(float(x), float(y))
        self._type = anchor_type
        self._handle_in = handle_in
        self._handle_out = handle_out
        self._mirror("in" if handle_in is not None else "out")

    @property
    def x(self) -> float:
        return self._position.x

    @property
    def y(self) -> float:
        return self._position.y

    @property
    def position(self) -> Vec2:
        return self._position

    @property
    def anchor_type(self) -> AnchorType:
        return self._type

    @property
    def handle_in(self) -> Vec2 | None:
        return self._handle_in

    @property
    def handle_out(self) -> Vec2 | None:
        return self._handle_out

    def _mirror(self, source: str) -> None:
        """Recompute the handle opposite to ``source`` ("in" or "out")."""
        if self._type is AnchorType.CORNER:
            return

        src = self._handle_in if source == "in" else self._handle_out
        other = self._handle_out if source == "in" else self._handle_in

        if src is None:
            if self._type is AnchorType.SYMMETRIC:
                self._handle_in = None
                self._handle_out = None
            return

        offset = src - self._position
        if self._type is AnchorType.SYMMETRIC:
            mirrored = self._position - offset
        else:
            if other is None:
                return
            src_length = offset.length()
            if src_length == 0:
                return
            other_length = other.distance_to(self._position)
            mirrored = self._position - offset * (other_length / src_length)

        if source == "in":
            self._handle_out = mirrored
        else:
            self._handle_in = mirrored

    def _is_coupled(self, tolerance: float) -> bool:
        """Whether mirroring would move neither handle by more than tolerance."""
        mirrored = self.copy()
        mirrored._mirror("in" if self._handle_in is not None else "out")
        for current, expected in (
            (self._handle_in, mirrored._handle_in),
            (self._handle_out, mirrored._handle_out),
        ):
            if current is None or expected is None:
                if current is not expected:
                    return False
            elif current.distance_to(expected) > tolerance:
                return False
        return True

    def set_handle_in(
self, handle: Vec2 | None) -> None:
        """Set the incoming handle, updating the outgoing one when coupled."""
        self._handle_in = handle
        self._mirror("in")

    def set_handle_out(self, handle: Vec2 | None) -> None:
        """Set the outgoing handle, updating the incoming one when coupled."""
        self._handle_out = handle
        self._mirror("out")

    def set_type(self, anchor_type: AnchorType) -> None:
        """Change the coupling mode.

        Switching to SMOOTH or SYMMETRIC re-derives the outgoing handle from the
        incoming one (or the reverse when only the outgoing handle exists).
        """
        self._type = anchor_type
        self._mirror("in" if self._handle_in is not None else "out")

    def make_corner(self) -> None:
        self.set_type(AnchorType.CORNER)

    def make_smooth(self) -> None:
        self.set_type(AnchorType.SMOOTH)

    def make_symmetric(self) -> None:
        self.set_type(AnchorType.SYMMETRIC)

    def move_to(self, x: float, y: float) -> None:
        """Move the anchor, carrying both handles along."""
        self.translate(x - self._position.x, y - self._position.y)

    def translate(self, dx: float, dy: float) -> None:
        delta = Vec2(dx, dy)
        self._position = self._position + delta
        if self._handle_in is not None:
            self._handle_in = self._handle_in + delta
        if self._handle_out is not None:
            self._handle_out = self._handle_out + delta

    def clear_handles(self) -> None:
        self._handle_in = None
        self._handle_out = None

    def has_handles(self) -> bool:
        return self._handle_in is not None or self._handle_out is not None

    def copy(self) -> "AnchorPoint":
        clone = AnchorPoint.__new__(AnchorPoint)
        clone._position = self._position
        clone._type = self._type
        clone._handle_in = self._handle_in
        clone._handle_out = self._handle_out
        return clone

    def swapped(self) -> "AnchorPoint":
        """Copy with incoming and outgoing handles exchanged (for reversal)."""
        clone = self.copy()
        clone._handle_in, clone._handle_out = self._handle_out, self._handle_in
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain structure.

        Returns:
            Dictionary with type tag, coordinates and optional handles
        """
        return {
            "type": self._type.value,
            "x": self._position.x,
            "y": self._position.y,
            "handle_in": self._handle_in.to_dict() if self._handle_in else None,
            "handle_out": self._handle_out.to_dict() if self._handle_out else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AnchorPoint":
        """Rebuild an anchor from its plain structure.

        Handles that already satisfy the coupling of the stored type are kept as
        written; otherwise they are re-mirrored like the constructor does.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            AnchorPoint instance

        Raises:
            PathStructureError: If the structure is malformed
        """
        if not isinstance(data, dict):
            raise PathStructureError("Anchor must be an object")
        for key in ("x", "y"):
            if key not in data:
                raise PathStructureError(f"Anchor is missing '{key}'")

        type_tag = data.get("type", AnchorType.CORNER.value)
        try:
            anchor_type = AnchorType(type_tag)
        except ValueError:
            raise PathStructureError(f"Unknown anchor type '{type_tag}'") from None

        handle_in = data.get("handle_in")
        handle_out = data.get("handle_out")
        anchor = cls(
            parse_number(data["x"], "x"),
            parse_number(data["y"], "y"),
            AnchorType.CORNER,
            handle_in=parse_point(handle_in, "handle_in") if handle_in is not None else None,
            handle_out=(
                parse_point(handle_out, "handle_out") if handle_out is not None else None
            ),
        )
        anchor._type = anchor_type
        if not anchor._is_coupled(COUPLING_TOLERANCE):
            anchor._mirror("in" if anchor._handle_in is not None else "out")
        return anchor

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnchorPoint):
            return NotImplemented
        return (
            self._position == other._position
            and self._type is other._type
            and self._handle_in == other._handle_in
            and self._handle_out == other._handle_out
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"AnchorPoint(x={self.x!r}, y={self.y!r}, type={self._type.value}, "
            f"handle_in={self._handle_in!r}, handle_out={self._handle_out!r})"
        )
