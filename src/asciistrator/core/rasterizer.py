"""Rasterization of continuous geometry into character cells.

The grid grows rightwards in x and downwards in y. Every function returns a
list of Cell records and never writes to a buffer; overlapping cells are
resolved by whoever draws them (last write wins in AsciiBuffer).

Key functions:
- bresenham_line, line_glyph, rasterize_line: Straight strokes
- rasterize_circle: Midpoint circle with 8-way symmetry
- rasterize_ellipse, ellipse_glyph: Two-region midpoint ellipse
- fill_rect, fill_ellipse, fill_polygon: Scanline fills over bounding boxes
- corner_glyph, rasterize_polyline, rasterize_rect: Joined strokes with corners
- rasterize_arc: Sampled circular arcs
- rasterize_curve, rasterize_path: Flattened curves and whole paths
- without_cells: Drop fill cells a stroke already covers

Degenerate input (zero radius, fewer points than a shape needs) returns an
empty list or the single cell that input describes instead of raising.
"""

import math
from collections.abc import Sequence

from asciistrator.config import LineStyle
from asciistrator.core.charsets import arc_glyph, box_glyphs
from asciistrator.core.curves import MAX_SUBDIVISION_DEPTH, BezierCurve
from asciistrator.core.geometry import (
    point_in_polygon,
    point_to_segment_distance,
    winding_number,
)
from asciistrator.core.path import Path
from asciistrator.domain import Cell, FillRule, Vec2

PointLike = Vec2 | tuple[float, float]

# Fill cells this close to an outline edge are left to the stroke
INSET_DISTANCE = 0.5

UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)

_CORNERS = {
    frozenset((DOWN, RIGHT)): "top_left",
    frozenset((DOWN, LEFT)): "top_right",
    frozenset((UP, RIGHT)): "bottom_left",
    frozenset((UP, LEFT)): "bottom_right",
}


def _round(value: float) -> int:
    """Round half up, so grid positions do not depend on banker's rounding."""
    return math.floor(value + 0.5)


def _xy(point: PointLike) -> tuple[float, float]:
    if isinstance(point, Vec2):
        return point.x, point.y
    return float(point[0]), float(point[1])


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def bresenham_line(x0: float, y0: float, x1: float, y1: float) -> list[tuple[int, int]]:
    """Grid points of a line from (x0, y0) to (x1, y1), both ends included.

    Endpoints are rounded to the nearest cell first.

    Args:
        x0: Start x
        y0: Start y
        x1: End x
        y1: End y

    Returns:
        Ordered (x, y) grid points

    Examples:
        >>> bresenham_line(0, 0, 3, 1)
        [(0, 0), (1, 0), (2, 1), (3, 1)]
    """
    x, y = _round(x0), _round(y0)
    x_end, y_end = _round(x1), _round(y1)

    dx = abs(x_end - x)
    dy = -abs(y_end - y)
    sx = 1 if x < x_end else -1
    sy = 1 if y < y_end else -1
    err = dx + dy

    points = []
    while True:
        points.append((x, y))
        if x == x_end and y == y_end:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
    return points


def line_glyph(dx: float, dy: float, style: LineStyle = LineStyle.SINGLE) -> str:
    """Stroke glyph for a segment direction.

    Angles within 22.5 degrees of horizontal use the horizontal glyph, those
    between 67.5 and 112.5 degrees the vertical one. Everything else is a
    diagonal: backslash when x and y step the same way (down-right on screen),
    slash when they step opposite ways.

    Args:
        dx: Horizontal extent of the segment
        dy: Vertical extent (positive is down)
        style: Line style

    Returns:
        Single glyph
    """
    glyphs = box_glyphs(style)
    if dx == 0:
        return glyphs.vertical
    if dy == 0:
        return glyphs.horizontal

    angle = math.degrees(math.atan2(abs(dy), abs(dx)))
    if angle < 22.5:
        return glyphs.horizontal
    if angle > 67.5:
        return glyphs.vertical
    return glyphs.diagonal_down if _sign(dx) == _sign(dy) else glyphs.diagonal_up


def rasterize_line(
    start: PointLike,
    end: PointLike,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
) -> list[Cell]:
    """Cells of a straight stroke, one per Bresenham point."""
    x0, y0 = _xy(start)
    x1, y1 = _xy(end)
    char = line_glyph(x1 - x0, y1 - y0, style)
    return [Cell(x, y, char, color) for x, y in bresenham_line(x0, y0, x1, y1)]


def ellipse_glyph(
    x: float,
    y: float,
    rx: float,
    ry: float,
    style: LineStyle = LineStyle.SINGLE,
) -> str:
    """Glyph for the outline point (x, y) of an ellipse centered at the origin.

    The tangent direction is (-y * rx^2, x * ry^2). Near-horizontal and
    near-vertical tangents map to straight glyphs; the rest use the arc glyph
    of their quadrant.

    Args:
        x: Offset from the center
        y: Offset from the center (positive is down)
        rx: Horizontal radius
        ry: Vertical radius
        style: Line style

    Returns:
        Single glyph
    """
    glyphs = box_glyphs(style)
    tx = -y * rx * rx
    ty = x * ry * ry
    if tx == 0 and ty == 0:
        return glyphs.horizontal

    angle = math.degrees(math.atan2(abs(ty), abs(tx)))
    if angle < 22.5:
        return glyphs.horizontal
    if angle > 67.5:
        return glyphs.vertical

    vertical = "bottom" if y > 0 else "top"
    horizontal = "right" if x > 0 else "left"
    return arc_glyph(f"{vertical}_{horizontal}", style)


def rasterize_circle(
    center: PointLike,
    radius: float,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
) -> list[Cell]:
    """Midpoint circle outline using 8-way symmetry.

    Args:
        center: Circle center (rounded to a cell)
        radius: Radius in cells (rounded)
        style: Line style
        color: Cell color

    Returns:
        Outline cells without duplicates, or [] for a radius under one cell
    """
    cx, cy = (_round(v) for v in _xy(center))
    r = _round(radius)
    if r <= 0:
        return []

    cells: dict[tuple[int, int], Cell] = {}

    def plot(px: int, py: int) -> None:
        for ox, oy in (
            (px, py), (-px, py), (px, -py), (-px, -py),
            (py, px), (-py, px), (py, -px), (-py, -px),
        ):
            key = (cx + ox, cy + oy)
            if key not in cells:
                cells[key] = Cell(key[0], key[1], ellipse_glyph(ox, oy, r, r, style), color)

    x = 0
    y = r
    d = 3 - 2 * r
    while x <= y:
        plot(x, y)
        if d < 0:
            d += 4 * x + 6
        else:
            d += 4 * (x - y) + 10
            y -= 1
        x += 1

    return list(cells.values())


def rasterize_ellipse(
    center: PointLike,
    rx: float,
    ry: float,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
) -> list[Cell]:
    """Midpoint ellipse outline (two regions, 4-way symmetry).

    Region 1 covers the part where the slope is shallower than -1 and steps
    in x; region 2 steps in y down to the horizontal axis. Equal radii
    delegate to rasterize_circle.

    Args:
        center: Ellipse center (rounded to a cell)
        rx: Horizontal radius (rounded)
        ry: Vertical radius (rounded)
        style: Line style
        color: Cell color

    Returns:
        Outline cells without duplicates
    """
    cx, cy = (_round(v) for v in _xy(center))
    rx_i = _round(rx)
    ry_i = _round(ry)
    if rx_i <= 0 and ry_i <= 0:
        return []
    if rx_i <= 0 or ry_i <= 0:
        # Flat ellipse collapses to a line through the center
        return rasterize_line(
            (cx - max(rx_i, 0), cy - max(ry_i, 0)),
            (cx + max(rx_i, 0), cy + max(ry_i, 0)),
            style,
            color,
        )
    if rx_i == ry_i:
        return rasterize_circle((cx, cy), rx_i, style, color)

    cells: dict[tuple[int, int], Cell] = {}

    def plot(px: int, py: int) -> None:
        for ox, oy in ((px, py), (-px, py), (px, -py), (-px, -py)):
            key = (cx + ox, cy + oy)
            if key not in cells:
                glyph = ellipse_glyph(ox, oy, rx_i, ry_i, style)
                cells[key] = Cell(key[0], key[1], glyph, color)

    rx2 = rx_i * rx_i
    ry2 = ry_i * ry_i
    x = 0
    y = ry_i
    px = 0
    py = 2 * rx2 * y

    p = _round(ry2 - rx2 * ry_i + 0.25 * rx2)
    while px < py:
        plot(x, y)
        x += 1
        px += 2 * ry2
        if p < 0:
            p += ry2 + px
        else:
            y -= 1
            py -= 2 * rx2
            p += ry2 + px - py

    p = _round(ry2 * (x + 0.5) ** 2 + rx2 * (y - 1) ** 2 - rx2 * ry2)
    while y >= 0:
        plot(x, y)
        y -= 1
        py -= 2 * rx2
        if p > 0:
            p += rx2 - py
        else:
            x += 1
            px += 2 * ry2
            p += rx2 - py + px

    return list(cells.values())


def fill_ellipse(
    center: PointLike,
    rx: float,
    ry: float,
    char: str = "█",
    color: str | None = None,
    inset: bool = False,
) -> list[Cell]:
    """Cells inside an axis-aligned ellipse (algebraic test).

    Args:
        center: Ellipse center
        rx: Horizontal radius
        ry: Vertical radius
        char: Fill character
        color: Cell color
        inset: Shrink both radii by one cell to stay inside a stroked outline

    Returns:
        Fill cells in row order
    """
    cx, cy = (_round(v) for v in _xy(center))
    rx_i = _round(rx) - (1 if inset else 0)
    ry_i = _round(ry) - (1 if inset else 0)
    if rx_i < 0 or ry_i < 0:
        return []

    rx2 = rx_i * rx_i
    ry2 = ry_i * ry_i
    cells = []
    for y in range(-ry_i, ry_i + 1):
        for x in range(-rx_i, rx_i + 1):
            if x * x * ry2 + y * y * rx2 <= rx2 * ry2:
                cells.append(Cell(cx + x, cy + y, char, color))
    return cells


def fill_rect(
    x: float,
    y: float,
    width: float,
    height: float,
    char: str = "█",
    color: str | None = None,
    inset: bool = False,
) -> list[Cell]:
    """Cells covering a rectangle whose top-left cell is (x, y).

    With inset, the outermost ring of cells is left for the stroke.
    """
    left = _round(x)
    top = _round(y)
    right = left + _round(width) - 1
    bottom = top + _round(height) - 1
    if inset:
        left, top, right, bottom = left + 1, top + 1, right - 1, bottom - 1

    return [
        Cell(cx, cy, char, color)
        for cy in range(top, bottom + 1)
        for cx in range(left, right + 1)
    ]


def fill_polygon(
    points: Sequence[PointLike],
    char: str = "█",
    color: str | None = None,
    fill_rule: FillRule = FillRule.EVENODD,
    inset: bool = False,
) -> list[Cell]:
    """Scanline fill of a closed polygon.

    Every integer grid point in the bounding box is tested by ray casting
    (crossing parity for EVENODD, winding number for NONZERO).

    Args:
        points: Polygon vertices (implicitly closed)
        char: Fill character
        color: Cell color
        fill_rule: Containment rule
        inset: Skip cells within half a cell of an edge, which the stroke covers

    Returns:
        Fill cells in row order, or [] for fewer than three vertices
    """
    polygon = [Vec2(*_xy(p)) for p in points]
    if len(polygon) < 3:
        return []

    min_x = math.floor(min(p.x for p in polygon))
    max_x = math.ceil(max(p.x for p in polygon))
    min_y = math.floor(min(p.y for p in polygon))
    max_y = math.ceil(max(p.y for p in polygon))

    edges = list(zip(polygon, polygon[1:] + polygon[:1]))
    cells = []
    for gy in range(min_y, max_y + 1):
        for gx in range(min_x, max_x + 1):
            point = Vec2(gx, gy)
            if fill_rule is FillRule.EVENODD:
                inside = point_in_polygon(point, polygon)
            else:
                inside = winding_number(point, polygon) != 0
            if not inside:
                continue
            if inset and any(
                point_to_segment_distance(point, a, b) <= INSET_DISTANCE for a, b in edges
            ):
                continue
            cells.append(Cell(gx, gy, char, color))
    return cells


def without_cells(cells: Sequence[Cell], covered: Sequence[Cell]) -> list[Cell]:
    """Cells whose grid position is not taken by any cell in covered."""
    taken = {(c.x, c.y) for c in covered}
    return [c for c in cells if (c.x, c.y) not in taken]


def corner_glyph(
    in_dir: tuple[int, int],
    out_dir: tuple[int, int],
    style: LineStyle = LineStyle.SINGLE,
) -> str | None:
    """Corner glyph joining an incoming and an outgoing step direction.

    The stroke arrives from the side opposite in_dir and leaves towards
    out_dir; the glyph connects those two sides. Straight runs, reversals and
    diagonal steps have no corner glyph.

    Args:
        in_dir: (sign dx, sign dy) of the incoming segment
        out_dir: (sign dx, sign dy) of the outgoing segment
        style: Line style

    Returns:
        Corner glyph, or None

    Examples:
        >>> corner_glyph((1, 0), (0, 1))
        '┐'
    """
    came_from = (-in_dir[0], -in_dir[1])
    corner = _CORNERS.get(frozenset((came_from, out_dir)))
    if corner is None:
        return None
    return getattr(box_glyphs(style), corner)


def rasterize_polyline(
    points: Sequence[PointLike],
    closed: bool = False,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
) -> list[Cell]:
    """Stroke a connected polyline, substituting corner glyphs at turns.

    Vertices are rounded to cells and consecutive duplicates dropped. Shared
    vertices produce a single cell, and right-angle turns between
    axis-aligned segments get a directional corner glyph in place of the
    stroke glyph written there.

    Args:
        points: Polyline vertices
        closed: Join the last vertex back to the first
        style: Line style
        color: Cell color

    Returns:
        Stroke cells, one per grid position
    """
    vertices: list[tuple[int, int]] = []
    for p in points:
        x, y = _xy(p)
        cell = (_round(x), _round(y))
        if not vertices or vertices[-1] != cell:
            vertices.append(cell)
    if closed and len(vertices) > 1 and vertices[0] == vertices[-1]:
        vertices.pop()

    if not vertices:
        return []
    if len(vertices) == 1:
        x, y = vertices[0]
        return [Cell(x, y, box_glyphs(style).horizontal, color)]

    closed = closed and len(vertices) > 2
    chain = vertices + [vertices[0]] if closed else vertices

    chars: dict[tuple[int, int], str] = {}
    for (x0, y0), (x1, y1) in zip(chain, chain[1:]):
        glyph = line_glyph(x1 - x0, y1 - y0, style)
        for point in bresenham_line(x0, y0, x1, y1):
            chars[point] = glyph

    n = len(vertices)
    indices = range(n) if closed else range(1, n - 1)
    for i in indices:
        prev_v = vertices[i - 1]
        vertex = vertices[i]
        next_v = vertices[(i + 1) % n]
        in_dir = (_sign(vertex[0] - prev_v[0]), _sign(vertex[1] - prev_v[1]))
        out_dir = (_sign(next_v[0] - vertex[0]), _sign(next_v[1] - vertex[1]))
        glyph = corner_glyph(in_dir, out_dir, style)
        if glyph is not None:
            chars[vertex] = glyph

    return [Cell(x, y, char, color) for (x, y), char in chars.items()]


def rasterize_arc(
    center: PointLike,
    radius: float,
    start_angle: float,
    end_angle: float,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
    aspect_ratio: float = 1.0,
) -> list[Cell]:
    """Stroke a circular arc as a sampled polyline.

    Angles are in radians and measured towards +y, which points down the
    grid. The horizontal radius is scaled by aspect_ratio so an arc drawn with
    a ratio of 2 looks round in a terminal whose cells are twice as tall as
    they are wide.

    Args:
        center: Arc center
        radius: Vertical radius in cells
        start_angle: Angle of the first point
        end_angle: Angle of the last point
        style: Line style
        color: Cell color
        aspect_ratio: Horizontal stretch applied to the radius

    Returns:
        Stroke cells running from start_angle to end_angle
    """
    if radius <= 0:
        return []
    cx, cy = _xy(center)
    rx = radius * aspect_ratio
    sweep = end_angle - start_angle
    segments = max(10, math.ceil(abs(sweep) * radius / 2))
    points = [
        Vec2(
            cx + rx * math.cos(start_angle + sweep * i / segments),
            cy + radius * math.sin(start_angle + sweep * i / segments),
        )
        for i in range(segments + 1)
    ]
    return rasterize_polyline(points, style=style, color=color)


def rasterize_rect(
    x: float,
    y: float,
    width: float,
    height: float,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
) -> list[Cell]:
    """Box outline whose top-left cell is (x, y).

    The rounded style produces arc corners. A rectangle one cell thin
    degenerates to a straight line.
    """
    left = _round(x)
    top = _round(y)
    w = _round(width)
    h = _round(height)
    if w <= 0 or h <= 0:
        return []

    right = left + w - 1
    bottom = top + h - 1
    if w == 1 or h == 1:
        return rasterize_line((left, top), (right, bottom), style, color)

    corners = [(left, top), (right, top), (right, bottom), (left, bottom)]
    return rasterize_polyline(corners, closed=True, style=style, color=color)


def rasterize_curve(
    curve: BezierCurve,
    tolerance: float = 0.5,
    style: LineStyle = LineStyle.SINGLE,
    color: str | None = None,
    max_depth: int = MAX_SUBDIVISION_DEPTH,
) -> list[Cell]:
    """Stroke a Bezier curve by flattening it into a polyline."""
    return rasterize_polyline(curve.flatten(tolerance, max_depth), False, style, color)


def rasterize_path(
    path: Path,
    stroke: bool = True,
    fill: bool = False,
    style: LineStyle = LineStyle.SINGLE,
    stroke_color: str | None = None,
    fill_char: str = "█",
    fill_color: str | None = None,
    tolerance: float = 0.5,
    inset: bool = True,
    max_depth: int = MAX_SUBDIVISION_DEPTH,
) -> list[Cell]:
    """Rasterize a path's fill and stroke.

    Fill cells come first so the stroke paints over them when drawn in order.
    The fill follows the path's fill rule and is inset only when stroked; an
    inset fill never shares a cell with the stroke.

    Args:
        path: Path to draw
        stroke: Draw the outline
        fill: Fill the interior (closed paths only)
        style: Stroke line style
        stroke_color: Stroke cell color
        fill_char: Fill character
        fill_color: Fill cell color
        tolerance: Flattening tolerance for curved segments
        inset: Keep the fill off a stroked outline
        max_depth: Subdivision limit when flattening curved segments

    Returns:
        Fill cells followed by stroke cells
    """
    outline = [a.position for a in path.flatten(tolerance, max_depth)]
    stroke_cells = rasterize_polyline(outline, path.closed, style, stroke_color) if stroke else []

    cells: list[Cell] = []
    if fill and path.closed and len(outline) >= 3:
        inset_fill = inset and stroke
        fill_cells = fill_polygon(outline, fill_char, fill_color, path.fill_rule, inset=inset_fill)
        if inset_fill:
            fill_cells = without_cells(fill_cells, stroke_cells)
        cells.extend(fill_cells)
    cells.extend(stroke_cells)
    return cells
