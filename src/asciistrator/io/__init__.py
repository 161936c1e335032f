"""Input/output layer for asciistrator.

This module connects the geometry core to the outside world: the character
buffer cells are drawn into, path data strings, and JSON shape files.

Key responsibilities:
- Composite rasterizer cells into a character grid (last write wins)
- Parse and write SVG-style path data
- Load and save shapes as JSON

Key classes:
- AsciiBuffer: Character grid with colors
- ShapeReader: Load shapes from a file
- ShapeWriter: Save shapes to a file
"""

from asciistrator.io.buffer import AsciiBuffer
from asciistrator.io.path_data import parse_path, parse_path_data, to_path_data
from asciistrator.io.shapes import ShapeReader, ShapeWriter, read_shapes, write_shapes

__all__ = [
    "AsciiBuffer",
    "ShapeReader",
    "ShapeWriter",
    "parse_path",
    "parse_path_data",
    "read_shapes",
    "to_path_data",
    "write_shapes",
]
