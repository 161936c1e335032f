"""Tests for rasterization into character cells."""

import math

import pytest

from asciistrator.config import LineStyle
from asciistrator.core.charsets import (
    arc_glyph,
    box_glyphs,
    char_for_density,
    fill_pattern,
)
from asciistrator.core.curves import QuadraticBezier, create_ellipse
from asciistrator.core.path import Path
from asciistrator.core.rasterizer import (
    bresenham_line,
    corner_glyph,
    ellipse_glyph,
    fill_ellipse,
    fill_polygon,
    fill_rect,
    line_glyph,
    rasterize_arc,
    rasterize_circle,
    rasterize_curve,
    rasterize_ellipse,
    rasterize_line,
    rasterize_path,
    rasterize_polyline,
    rasterize_rect,
)
from asciistrator.domain import Cell, FillRule, Vec2


def _grid(cells: list[Cell]) -> dict[tuple[int, int], str]:
    return {(c.x, c.y): c.char for c in cells}


class TestLines:
    """Tests for straight strokes."""

    def test_horizontal_line(self) -> None:
        """Test a ten-cell horizontal line yields eleven horizontal cells."""
        cells = rasterize_line((0, 0), (10, 0))
        assert len(cells) == 11
        assert [c.x for c in cells] == list(range(11))
        assert all(c.y == 0 for c in cells)
        assert all(c.char == "─" for c in cells)

    def test_bresenham(self) -> None:
        assert bresenham_line(0, 0, 3, 1) == [(0, 0), (1, 0), (2, 1), (3, 1)]
        assert bresenham_line(2, 2, 2, 2) == [(2, 2)]
        assert bresenham_line(3, 0, 0, 0) == [(3, 0), (2, 0), (1, 0), (0, 0)]

    def test_bresenham_is_connected(self) -> None:
        points = bresenham_line(0, 0, 7, -13)
        for (x0, y0), (x1, y1) in zip(points, points[1:]):
            assert max(abs(x1 - x0), abs(y1 - y0)) == 1
        assert points[-1] == (7, -13)

    @pytest.mark.parametrize(
        ("dx", "dy", "expected"),
        [
            (10, 0, "─"),
            (0, 10, "│"),
            (0, 0, "│"),
            (10, 1, "─"),
            (1, 10, "│"),
            (10, 10, "\\"),
            (-10, -10, "\\"),
            (10, -10, "/"),
            (-10, 10, "/"),
        ],
    )
    def test_line_glyph(self, dx: int, dy: int, expected: str) -> None:
        assert line_glyph(dx, dy) == expected

    def test_line_style_and_color(self) -> None:
        cells = rasterize_line(Vec2(0, 0), Vec2(0, 2), LineStyle.DOUBLE, "red")
        assert [c.char for c in cells] == ["║", "║", "║"]
        assert all(c.color == "red" for c in cells)


class TestConics:
    """Tests for circles and ellipses."""

    def test_circle_radius_five(self) -> None:
        """Test the radius 5 circle is symmetric and stays near the radius."""
        cells = rasterize_circle((0, 0), 5)
        positions = {(c.x, c.y) for c in cells}
        assert len(positions) == len(cells)
        for x, y in positions:
            assert (-y, x) in positions
            assert (y, x) in positions
            assert 4.5 <= (x * x + y * y) ** 0.5 <= 5.5

    def test_circle_glyphs(self) -> None:
        grid = _grid(rasterize_circle((10, 10), 5))
        assert grid[(10, 5)] == "─"
        assert grid[(10, 15)] == "─"
        assert grid[(5, 10)] == "│"
        assert grid[(15, 10)] == "│"
        assert grid[(13, 14)] == "╯"
        assert grid[(7, 6)] == "╭"

    def test_circle_degenerate(self) -> None:
        assert rasterize_circle((0, 0), 0) == []
        assert rasterize_circle((0, 0), 0.4) == []

    def test_ellipse(self) -> None:
        positions = {(c.x, c.y) for c in rasterize_ellipse((0, 0), 4, 2)}
        assert {(4, 0), (-4, 0), (0, 2), (0, -2)} <= positions
        for x, y in positions:
            assert (-x, y) in positions
            assert (x, -y) in positions

    def test_ellipse_equal_radii_is_circle(self) -> None:
        assert _grid(rasterize_ellipse((0, 0), 3, 3)) == _grid(rasterize_circle((0, 0), 3))

    def test_flat_ellipse_is_line(self) -> None:
        cells = rasterize_ellipse((5, 5), 3, 0)
        assert sorted((c.x, c.y) for c in cells) == [(x, 5) for x in range(2, 9)]
        assert rasterize_ellipse((5, 5), 0, 0) == []

    def test_ellipse_glyph_quadrants(self) -> None:
        assert ellipse_glyph(3, 1, 4, 2) == "╯"
        assert ellipse_glyph(-3, 1, 4, 2) == "╰"
        assert ellipse_glyph(3, -1, 4, 2) == "╮"
        assert ellipse_glyph(-3, -1, 4, 2) == "╭"
        assert ellipse_glyph(0, 2, 4, 2) == "─"
        assert ellipse_glyph(4, 0, 4, 2) == "│"
        assert ellipse_glyph(3, 1, 4, 2, LineStyle.ASCII) == "/"


class TestFills:
    """Tests for rectangle, ellipse and polygon fills."""

    def test_fill_rect(self) -> None:
        assert len(fill_rect(0, 0, 5, 3)) == 15
        inset = fill_rect(0, 0, 5, 3, inset=True)
        assert sorted((c.x, c.y) for c in inset) == [(1, 1), (2, 1), (3, 1)]

    def test_fill_ellipse(self) -> None:
        cells = fill_ellipse((0, 0), 2, 1, char="#")
        assert len(cells) == 7
        assert all(c.char == "#" for c in cells)
        assert fill_ellipse((0, 0), 1, 1, inset=True) == [Cell(0, 0, "█")]

    def test_fill_square(self) -> None:
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        assert len(fill_polygon(square)) == 100
        inset = fill_polygon(square, inset=True)
        assert len(inset) == 81
        assert {(c.x, c.y) for c in inset} == {(x, y) for x in range(1, 10) for y in range(1, 10)}

    def test_fill_rules(self) -> None:
        """Test a doubly wound loop is filled by nonzero but not even-odd."""
        ring = [(0, 0), (8, 0), (8, 8), (0, 8)]
        twice = ring + ring
        nonzero = {(c.x, c.y) for c in fill_polygon(ring, fill_rule=FillRule.NONZERO)}
        evenodd = {(c.x, c.y) for c in fill_polygon(ring, fill_rule=FillRule.EVENODD)}
        assert nonzero == evenodd
        assert {(c.x, c.y) for c in fill_polygon(twice, fill_rule=FillRule.NONZERO)} == nonzero
        assert fill_polygon(twice, fill_rule=FillRule.EVENODD) == []

    def test_fill_degenerate(self) -> None:
        assert fill_polygon([(0, 0), (5, 5)]) == []


class TestPolylines:
    """Tests for joined strokes and corner glyphs."""

    @pytest.mark.parametrize(
        ("in_dir", "out_dir", "expected"),
        [
            ((1, 0), (0, 1), "┐"),
            ((0, 1), (-1, 0), "┘"),
            ((-1, 0), (0, -1), "└"),
            ((0, -1), (1, 0), "┌"),
            ((1, 0), (0, -1), "┘"),
            ((0, 1), (1, 0), "└"),
            ((1, 0), (1, 0), None),
            ((1, 1), (0, 1), None),
        ],
    )
    def test_corner_glyph(self, in_dir: tuple[int, int], out_dir: tuple[int, int], expected: str | None) -> None:
        assert corner_glyph(in_dir, out_dir) == expected

    def test_rect(self) -> None:
        grid = _grid(rasterize_rect(0, 0, 5, 3))
        assert len(grid) == 12
        assert grid[(0, 0)] == "┌"
        assert grid[(4, 0)] == "┐"
        assert grid[(4, 2)] == "┘"
        assert grid[(0, 2)] == "└"
        assert grid[(2, 0)] == "─"
        assert grid[(0, 1)] == "│"

    def test_rounded_rect(self) -> None:
        grid = _grid(rasterize_rect(0, 0, 4, 4, LineStyle.ROUNDED))
        assert [grid[(0, 0)], grid[(3, 0)], grid[(3, 3)], grid[(0, 3)]] == ["╭", "╮", "╯", "╰"]

    def test_thin_rect_is_line(self) -> None:
        cells = rasterize_rect(0, 0, 5, 1)
        assert [c.char for c in cells] == ["─"] * 5
        assert rasterize_rect(0, 0, 0, 3) == []

    def test_polyline_shares_vertices(self) -> None:
        cells = rasterize_polyline([(0, 0), (4, 0), (4, 3)])
        grid = _grid(cells)
        assert len(cells) == len(grid) == 8
        assert grid[(4, 0)] == "┐"
        assert grid[(0, 0)] == "─"
        assert grid[(4, 3)] == "│"

    def test_polyline_degenerate(self) -> None:
        assert rasterize_polyline([]) == []
        assert rasterize_polyline([(1.2, 1.1), (0.9, 0.8)]) == [Cell(1, 1, "─")]

    def test_curve(self) -> None:
        cells = rasterize_curve(QuadraticBezier(Vec2(0, 0), Vec2(10, 10), Vec2(20, 0)))
        positions = {(c.x, c.y) for c in cells}
        assert (0, 0) in positions
        assert (20, 0) in positions
        assert max(y for _, y in positions) == 5

    def test_arc_endpoints(self) -> None:
        """Test a half arc runs between its end angles on the lower side."""
        positions = {(c.x, c.y) for c in rasterize_arc((10, 10), 5, 0, math.pi)}
        assert (15, 10) in positions
        assert (5, 10) in positions
        assert (10, 15) in positions
        assert min(y for _, y in positions) == 10

    def test_arc_aspect_ratio(self) -> None:
        cells = rasterize_arc((20, 10), 5, 0, 2 * math.pi, aspect_ratio=2.0)
        xs = [c.x for c in cells]
        ys = [c.y for c in cells]
        assert (min(xs), max(xs)) == (10, 30)
        assert (min(ys), max(ys)) == (5, 15)

    def test_arc_degenerate(self) -> None:
        assert rasterize_arc((0, 0), 0, 0, math.pi) == []
        assert rasterize_arc((0, 0), -2, 0, math.pi) == []


class TestPaths:
    """Tests for whole-path rasterization."""

    def test_filled_stroked_square(self) -> None:
        square = Path.from_points(
            [Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)], closed=True
        )
        cells = rasterize_path(square, fill=True, fill_char="░")
        fill_cells = [c for c in cells if c.char == "░"]
        assert len(fill_cells) == 81
        assert len(cells) == 81 + 40
        # Fill comes before stroke
        assert cells[0].char == "░"
        assert cells[-1].char != "░"

    def test_curved_fill_avoids_stroke(self) -> None:
        """Test a filled ellipse path never paints fill under its outline."""
        ellipse = Path.from_curves(create_ellipse(Vec2(20, 10), 15, 8), closed=True)
        cells = rasterize_path(ellipse, fill=True, fill_char="#")
        fill = {(c.x, c.y) for c in cells if c.char == "#"}
        stroke = {(c.x, c.y) for c in cells if c.char != "#"}
        assert fill
        assert not fill & stroke
        assert len(cells) == len(fill) + len(stroke)

    def test_fill_only_is_not_inset(self) -> None:
        square = Path.from_points(
            [Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)], closed=True
        )
        cells = rasterize_path(square, stroke=False, fill=True)
        assert len(cells) == 100

    def test_open_path_never_fills(self) -> None:
        path = Path().move_to(0, 0).line_to(5, 0).line_to(5, 5)
        cells = rasterize_path(path, fill=True)
        assert all(c.char != "█" for c in cells)


class TestCharsets:
    """Tests for glyph tables."""

    def test_box_glyphs(self) -> None:
        assert box_glyphs("double").horizontal == "═"
        assert box_glyphs(LineStyle.HEAVY).top_left == "┏"
        assert box_glyphs(LineStyle.ASCII).cross == "+"

    def test_arc_glyph(self) -> None:
        assert arc_glyph("top_left") == "╭"
        assert arc_glyph("top_left", "ascii") == "/"

    def test_fill_pattern(self) -> None:
        assert fill_pattern("light") == "░"
        assert fill_pattern("x") == "x"
        with pytest.raises(ValueError):
            fill_pattern("plaid")

    def test_char_for_density(self) -> None:
        assert char_for_density(0.0) == " "
        assert char_for_density(1.0) == "@"
        assert char_for_density(2.0) == "@"
        assert char_for_density(0.5, "blocks") == "▒"
