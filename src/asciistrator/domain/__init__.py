"""Domain models for asciistrator.

This module contains the value types shared by the geometry core and the
rasterizer. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable for inter-process communication (parallel rendering)

Key classes:
- Vec2: A 2D point/vector
- BoundingBox: Axis-aligned bounds
- AnchorPoint: A path vertex with coupled control handles
- AnchorType: corner, smooth or symmetric handle coupling
- FillRule: nonzero or evenodd containment
- Cell: A character placed on the grid
"""

from asciistrator.domain.anchor import AnchorPoint, AnchorType, FillRule
from asciistrator.domain.cell import Cell
from asciistrator.domain.vector import BoundingBox, Vec2

__all__: list[str] = [
    # Enums
    "AnchorType",
    "FillRule",
    # Core types
    "Vec2",
    "BoundingBox",
    "AnchorPoint",
    "Cell",
]
