"""Core geometry and rasterization algorithms for asciistrator.

This module contains the core algorithms for:

- Bezier curve evaluation, subdivision, measurement and offsetting
- Paths of anchors and segments (building, hit testing, simplification)
- Least-squares cubic curve fitting through point sequences
- Rasterization of lines, circles, ellipses, polygons and paths into cells
- Scene rendering with optional parallel workers

All geometry functions are pure and safe for use in worker processes.

Key functions:
- fit_cubic_beziers: Fit cubic curves through a point sequence
- rasterize_line: Bresenham line with direction-aware glyphs
- rasterize_circle / rasterize_ellipse: Midpoint algorithms with arc glyphs
- fill_polygon: Scanline fill honoring a fill rule
- rasterize_path: Fill then stroke a path
- rasterize_shape: Top-level picklable worker function

Key classes:
- QuadraticBezier / CubicBezier: Curve segments
- Path: Sequence of anchors forming an open or closed contour
- Shape: A path with paint settings
- SceneRenderer: Renders shape lists into cells or a buffer
"""

from asciistrator.core.charsets import (
    BoxGlyphs,
    arc_glyph,
    box_glyphs,
    char_for_density,
    fill_pattern,
)
from asciistrator.core.curves import (
    MAX_SUBDIVISION_DEPTH,
    BezierCurve,
    CubicBezier,
    NearestPoint,
    QuadraticBezier,
    create_arc,
    create_circle,
    create_ellipse,
    curve_from_points,
)
from asciistrator.core.fitting import fit_cubic_beziers, fit_path
from asciistrator.core.geometry import (
    nearest_point_on_segment,
    point_in_polygon,
    point_to_segment_distance,
    rdp_simplify,
    winding_number,
)
from asciistrator.core.path import Path, PathSegment
from asciistrator.core.rasterizer import (
    bresenham_line,
    corner_glyph,
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
    without_cells,
)
from asciistrator.core.renderer import RenderResult, SceneRenderer, rasterize_shape
from asciistrator.core.shape import Shape, ShapeKind

__all__ = [
    "MAX_SUBDIVISION_DEPTH",
    # Curves
    "BezierCurve",
    # Charsets
    "BoxGlyphs",
    "CubicBezier",
    "NearestPoint",
    # Paths
    "Path",
    "PathSegment",
    "QuadraticBezier",
    # Rendering
    "RenderResult",
    "SceneRenderer",
    "Shape",
    "ShapeKind",
    "arc_glyph",
    "box_glyphs",
    # Rasterizer
    "bresenham_line",
    "char_for_density",
    "corner_glyph",
    "create_arc",
    "create_circle",
    "create_ellipse",
    "curve_from_points",
    "fill_ellipse",
    "fill_pattern",
    "fill_polygon",
    "fill_rect",
    # Fitting
    "fit_cubic_beziers",
    "fit_path",
    "line_glyph",
    # Geometry
    "nearest_point_on_segment",
    "point_in_polygon",
    "point_to_segment_distance",
    "rasterize_arc",
    "rasterize_circle",
    "rasterize_curve",
    "rasterize_ellipse",
    "rasterize_line",
    "rasterize_path",
    "rasterize_polyline",
    "rasterize_rect",
    "rasterize_shape",
    "rdp_simplify",
    "winding_number",
    "without_cells",
]
