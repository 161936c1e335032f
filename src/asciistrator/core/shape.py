"""Drawable shapes: a path plus how to paint it.

Rectangles and ellipses keep their defining parameters so they can be drawn
with the dedicated box and midpoint-ellipse rasterizers; everything else is
drawn from its path.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from asciistrator.config import LineStyle
from asciistrator.core.curves import MAX_SUBDIVISION_DEPTH, create_ellipse
from asciistrator.core.path import Path
from asciistrator.core.rasterizer import (
    fill_ellipse,
    fill_rect,
    rasterize_ellipse,
    rasterize_path,
    rasterize_rect,
    without_cells,
)
from asciistrator.domain import Cell, Vec2
from asciistrator.domain.anchor import parse_number
from asciistrator.exceptions import PathStructureError

_RECT_PARAMS = ("x", "y", "width", "height")
_ELLIPSE_PARAMS = ("cx", "cy", "rx", "ry")


class ShapeKind(Enum):
    """How a shape is rasterized."""

    PATH = "path"
    RECTANGLE = "rectangle"
    ELLIPSE = "ellipse"


@dataclass
class Shape:
    """A path with stroke and fill settings.

    Attributes:
        path: Outline geometry
        kind: Rasterization strategy
        params: Defining parameters for RECTANGLE and ELLIPSE shapes
        name: Optional caller-supplied identifier
        stroke: Draw the outline
        fill: Fill the interior
        style: Stroke line style
        stroke_color: Stroke cell color
        fill_char: Fill character
        fill_color: Fill cell color
    """

    path: Path
    kind: ShapeKind = ShapeKind.PATH
    params: dict[str, float] = field(default_factory=dict)
    name: str | None = None
    stroke: bool = True
    fill: bool = False
    style: LineStyle = LineStyle.SINGLE
    stroke_color: str | None = None
    fill_char: str = "█"
    fill_color: str | None = None

    @classmethod
    def rectangle(cls, x: float, y: float, width: float, height: float, **kwargs: Any) -> "Shape":
        """Axis-aligned box whose top-left cell is (x, y)."""
        right = x + width - 1
        bottom = y + height - 1
        path = Path.from_points(
            [Vec2(x, y), Vec2(right, y), Vec2(right, bottom), Vec2(x, bottom)],
            closed=True,
        )
        params = {"x": x, "y": y, "width": width, "height": height}
        return cls(path, ShapeKind.RECTANGLE, params, **kwargs)

    @classmethod
    def ellipse(cls, cx: float, cy: float, rx: float, ry: float, **kwargs: Any) -> "Shape":
        """Axis-aligned ellipse centered at (cx, cy)."""
        path = Path.from_curves(create_ellipse(Vec2(cx, cy), rx, ry), closed=True)
        params = {"cx": cx, "cy": cy, "rx": rx, "ry": ry}
        return cls(path, ShapeKind.ELLIPSE, params, **kwargs)

    @classmethod
    def polygon(cls, points: list[Vec2], closed: bool = True, **kwargs: Any) -> "Shape":
        return cls(Path.from_points(points, closed=closed), **kwargs)

    @classmethod
    def line(cls, x0: float, y0: float, x1: float, y1: float, **kwargs: Any) -> "Shape":
        return cls(Path().move_to(x0, y0).line_to(x1, y1), **kwargs)

    @property
    def label(self) -> str:
        return self.name or self.kind.value

    def is_visible(self) -> bool:
        """True when the shape would emit any cells."""
        return (self.stroke or self.fill) and not self.path.is_empty()

    def rasterize(
        self,
        tolerance: float = 0.5,
        inset: bool = True,
        max_depth: int = MAX_SUBDIVISION_DEPTH,
    ) -> list[Cell]:
        """Fill cells followed by stroke cells.

        Args:
            tolerance: Flattening tolerance for curved paths
            inset: Keep fills off a stroked outline
            max_depth: Subdivision limit when flattening curved paths

        Returns:
            Cells in painting order
        """
        inset_fill = inset and self.stroke

        if self.kind is ShapeKind.RECTANGLE:
            x, y, w, h = (self.params[k] for k in _RECT_PARAMS)
            cells = []
            if self.fill:
                cells.extend(fill_rect(x, y, w, h, self.fill_char, self.fill_color, inset_fill))
            if self.stroke:
                cells.extend(rasterize_rect(x, y, w, h, self.style, self.stroke_color))
            return cells

        if self.kind is ShapeKind.ELLIPSE:
            cx, cy, rx, ry = (self.params[k] for k in _ELLIPSE_PARAMS)
            center = (cx, cy)
            stroke_cells = (
                rasterize_ellipse(center, rx, ry, self.style, self.stroke_color)
                if self.stroke
                else []
            )
            cells = []
            if self.fill:
                fill_cells = fill_ellipse(
                    center, rx, ry, self.fill_char, self.fill_color, inset_fill
                )
                if inset_fill:
                    fill_cells = without_cells(fill_cells, stroke_cells)
                cells.extend(fill_cells)
            cells.extend(stroke_cells)
            return cells

        return rasterize_path(
            self.path,
            stroke=self.stroke,
            fill=self.fill,
            style=self.style,
            stroke_color=self.stroke_color,
            fill_char=self.fill_char,
            fill_color=self.fill_color,
            tolerance=tolerance,
            inset=inset,
            max_depth=max_depth,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain structure for IPC and shape files."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "params": dict(self.params),
            "path": self.path.to_dict(),
            "stroke": self.stroke,
            "fill": self.fill,
            "style": self.style.value,
            "stroke_color": self.stroke_color,
            "fill_char": self.fill_char,
            "fill_color": self.fill_color,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Shape":
        """Rebuild a shape from its plain structure.

        Rectangles and ellipses are rebuilt from their parameters, so their
        "path" entry may be omitted.

        Raises:
            PathStructureError: If the structure is malformed
        """
        if not isinstance(data, dict):
            raise PathStructureError("Shape must be an object")

        kind_tag = data.get("kind", ShapeKind.PATH.value)
        try:
            kind = ShapeKind(kind_tag)
        except ValueError:
            raise PathStructureError(f"Unknown shape kind '{kind_tag}'") from None

        style_tag = data.get("style", LineStyle.SINGLE.value)
        try:
            style = LineStyle(style_tag)
        except ValueError:
            raise PathStructureError(f"Unknown line style '{style_tag}'") from None

        fill_char = data.get("fill_char", "█")
        if not isinstance(fill_char, str) or len(fill_char) != 1:
            raise PathStructureError("Shape 'fill_char' must be a single character")

        options = {
            "name": data.get("name"),
            "stroke": bool(data.get("stroke", True)),
            "fill": bool(data.get("fill", False)),
            "style": style,
            "stroke_color": data.get("stroke_color"),
            "fill_char": fill_char,
            "fill_color": data.get("fill_color"),
        }

        if kind is ShapeKind.PATH:
            if "path" not in data:
                raise PathStructureError("Shape is missing 'path'")
            return cls(Path.from_dict(data["path"]), **options)

        raw_params = data.get("params")
        if not isinstance(raw_params, dict):
            raise PathStructureError(f"{kind.value} shape is missing 'params'")
        names = _RECT_PARAMS if kind is ShapeKind.RECTANGLE else _ELLIPSE_PARAMS
        values = []
        for key in names:
            if key not in raw_params:
                raise PathStructureError(f"{kind.value} shape is missing param '{key}'")
            values.append(parse_number(raw_params[key], f"params.{key}"))

        if kind is ShapeKind.RECTANGLE:
            return cls.rectangle(*values, **options)
        return cls.ellipse(*values, **options)
