"""Tests for domain models to verify they work correctly."""

import math

import pytest

from asciistrator.domain import AnchorPoint, AnchorType, BoundingBox, Cell, Vec2
from asciistrator.exceptions import PathStructureError


class TestVec2:
    """Tests for Vec2 class."""

    def test_arithmetic(self) -> None:
        """Test vector arithmetic operators."""
        a = Vec2(3.0, 4.0)
        b = Vec2(1.0, 2.0)
        assert a + b == Vec2(4.0, 6.0)
        assert a - b == Vec2(2.0, 2.0)
        assert a * 2 == Vec2(6.0, 8.0)
        assert 2 * a == Vec2(6.0, 8.0)
        assert a / 2 == Vec2(1.5, 2.0)
        assert -a == Vec2(-3.0, -4.0)

    def test_products_and_length(self) -> None:
        a = Vec2(3.0, 4.0)
        assert a.length() == 5.0
        assert a.length_squared() == 25.0
        assert a.dot(Vec2(1.0, 0.0)) == 3.0
        assert Vec2(1.0, 0.0).cross(Vec2(0.0, 1.0)) == 1.0

    def test_normalize_zero_vector(self) -> None:
        """Test that normalizing the zero vector yields the zero vector."""
        assert Vec2.zero().normalize() == Vec2.zero()
        n = Vec2(0.0, 10.0).normalize()
        assert n == Vec2(0.0, 1.0)

    def test_project_and_reject(self) -> None:
        v = Vec2(2.0, 3.0)
        assert v.project(Vec2(5.0, 0.0)) == Vec2(2.0, 0.0)
        assert v.reject(Vec2(5.0, 0.0)) == Vec2(0.0, 3.0)
        assert v.project(Vec2.zero()) == Vec2.zero()

    def test_perpendicular_and_angle(self) -> None:
        assert Vec2(1.0, 0.0).perpendicular() == Vec2(-0.0, 1.0)
        assert math.isclose(Vec2(0.0, 1.0).angle(), math.pi / 2)

    def test_lerp_and_distance(self) -> None:
        a = Vec2(0.0, 0.0)
        b = Vec2(10.0, 0.0)
        assert a.lerp(b, 0.25) == Vec2(2.5, 0.0)
        assert a.distance_to(b) == 10.0
        assert a.distance_squared_to(b) == 100.0

    def test_serialization(self) -> None:
        """Test vector serialization and deserialization."""
        v = Vec2(1.5, -2.0)
        assert Vec2.from_dict(v.to_dict()) == v
        assert v.to_tuple() == (1.5, -2.0)

    def test_immutable(self) -> None:
        v = Vec2(1.0, 2.0)
        with pytest.raises(AttributeError):
            v.x = 3.0  # type: ignore


class TestBoundingBox:
    """Tests for BoundingBox class."""

    def test_from_points(self) -> None:
        box = BoundingBox.from_points([Vec2(1, 5), Vec2(-2, 3), Vec2(4, -1)])
        assert box.to_tuple() == (-2, -1, 4, 5)
        assert box.width == 6
        assert box.height == 6
        assert box.center == Vec2(1.0, 2.0)

    def test_empty_is_zero_box(self) -> None:
        assert BoundingBox.from_points([]).to_tuple() == (0.0, 0.0, 0.0, 0.0)

    def test_union_expand_contains(self) -> None:
        a = BoundingBox(0, 0, 1, 1)
        b = BoundingBox(2, 2, 3, 3)
        assert a.union(b).to_tuple() == (0, 0, 3, 3)
        grown = a.expand(1.0)
        assert grown.to_tuple() == (-1.0, -1.0, 2.0, 2.0)
        assert grown.contains(-1.0, 2.0)
        assert not a.contains(1.5, 0.5)


class TestAnchorPoint:
    """Tests for AnchorPoint handle coupling."""

    def test_corner_handles_independent(self) -> None:
        """Test that corner handles move independently."""
        anchor = AnchorPoint(0, 0, handle_in=Vec2(-5, 0), handle_out=Vec2(0, 3))
        anchor.set_handle_in(Vec2(-1, -1))
        assert anchor.handle_in == Vec2(-1, -1)
        assert anchor.handle_out == Vec2(0, 3)

    def test_symmetric_mirrors_both_ways(self) -> None:
        """Test symmetric anchors keep handles opposite and equally long."""
        anchor = AnchorPoint(10, 10, AnchorType.SYMMETRIC)
        anchor.set_handle_in(Vec2(5, 10))
        assert anchor.handle_out == Vec2(15, 10)

        anchor.set_handle_out(Vec2(10, 20))
        assert anchor.handle_in == Vec2(10, 0)

    def test_symmetric_clear_clears_both(self) -> None:
        anchor = AnchorPoint(0, 0, AnchorType.SYMMETRIC, handle_in=Vec2(-2, 0))
        assert anchor.handle_out == Vec2(2, 0)
        anchor.set_handle_in(None)
        assert anchor.handle_in is None
        assert anchor.handle_out is None

    def test_smooth_keeps_opposite_length(self) -> None:
        """Test smooth anchors keep collinearity but not length."""
        anchor = AnchorPoint(
            0, 0, AnchorType.CORNER, handle_in=Vec2(-2, 0), handle_out=Vec2(0, 6)
        )
        anchor.make_smooth()
        out = anchor.handle_out
        assert out is not None
        assert math.isclose(out.x, 6.0)
        assert math.isclose(out.y, 0.0, abs_tol=1e-12)

        anchor.set_handle_out(Vec2(0, 3))
        hin = anchor.handle_in
        assert hin is not None
        assert math.isclose(hin.x, 0.0, abs_tol=1e-12)
        assert math.isclose(hin.y, -2.0)

    def test_smooth_without_opposite_handle(self) -> None:
        anchor = AnchorPoint(0, 0, AnchorType.SMOOTH)
        anchor.set_handle_in(Vec2(-4, 0))
        assert anchor.handle_out is None

    def test_invariant_holds_after_every_setter(self) -> None:
        """Test the mirror invariant after a sequence of edits."""
        anchor = AnchorPoint(3, 4, AnchorType.SYMMETRIC, handle_in=Vec2(0, 0))
        for handle in (Vec2(1, 7), Vec2(-3, 2), Vec2(9, 9)):
            anchor.set_handle_out(handle)
            assert anchor.handle_in is not None
            midpoint = (anchor.handle_in + anchor.handle_out) / 2
            assert math.isclose(midpoint.x, 3.0)
            assert math.isclose(midpoint.y, 4.0)
        anchor.move_to(0, 0)
        midpoint = (anchor.handle_in + anchor.handle_out) / 2
        assert midpoint == Vec2(0.0, 0.0)

    def test_translate_carries_handles(self) -> None:
        anchor = AnchorPoint(0, 0, handle_in=Vec2(-1, 0), handle_out=Vec2(1, 0))
        anchor.translate(5, 5)
        assert anchor.position == Vec2(5, 5)
        assert anchor.handle_in == Vec2(4, 5)
        assert anchor.handle_out == Vec2(6, 5)

    def test_copy_is_independent(self) -> None:
        anchor = AnchorPoint(1, 1, handle_out=Vec2(2, 2))
        clone = anchor.copy()
        clone.translate(1, 0)
        assert anchor.position == Vec2(1, 1)
        assert clone == AnchorPoint(2, 1, handle_out=Vec2(3, 2))

    def test_swapped_exchanges_handles(self) -> None:
        anchor = AnchorPoint(0, 0, handle_in=Vec2(-1, 0), handle_out=Vec2(0, 1))
        swapped = anchor.swapped()
        assert swapped.handle_in == Vec2(0, 1)
        assert swapped.handle_out == Vec2(-1, 0)

    def test_serialization_preserves_type(self) -> None:
        """Test anchor serialization and deserialization."""
        anchor = AnchorPoint(2, 3, AnchorType.SMOOTH, handle_in=Vec2(0, 3), handle_out=Vec2(5, 3))
        restored = AnchorPoint.from_dict(anchor.to_dict())
        assert restored == anchor
        assert restored.anchor_type is AnchorType.SMOOTH

    def test_smooth_round_trip_is_exact(self) -> None:
        """Test a coupled SMOOTH anchor comes back bit-for-bit."""
        anchor = AnchorPoint(
            0.1,
            0.7,
            AnchorType.SMOOTH,
            handle_in=Vec2(-1.3, 0.2),
            handle_out=Vec2(math.pi, 3.0),
        )
        anchor.set_handle_in(Vec2(-math.sqrt(2), math.e / 7))
        restored = AnchorPoint.from_dict(anchor.to_dict())
        assert restored == anchor

    def test_uncoupled_smooth_handles_are_mirrored(self) -> None:
        data = {
            "type": "smooth",
            "x": 0,
            "y": 0,
            "handle_in": {"x": -1, "y": 0},
            "handle_out": {"x": 0, "y": 2},
        }
        restored = AnchorPoint.from_dict(data)
        assert restored.handle_in == Vec2(-1, 0)
        assert restored.handle_out == Vec2(2, 0)

    @pytest.mark.parametrize(
        "data",
        [
            "not an anchor",
            {"x": 1},
            {"x": "1", "y": 2},
            {"x": True, "y": 2},
            {"x": 1, "y": 2, "type": "wavy"},
            {"x": 1, "y": 2, "handle_in": {"x": 0}},
        ],
    )
    def test_malformed_input_rejected(self, data: object) -> None:
        with pytest.raises(PathStructureError):
            AnchorPoint.from_dict(data)


class TestCell:
    """Tests for Cell class."""

    def test_serialization(self) -> None:
        cell = Cell(3, 4, "─", "red")
        assert Cell.from_dict(cell.to_dict()) == cell

    def test_default_color(self) -> None:
        assert Cell(0, 0, "x").color is None
