"""Character buffer that rasterizer cells are drawn into.

This module provides the AsciiBuffer class, a fixed-size grid of characters
and colors with a last-write-wins overwrite policy and a flood fill for
regions bounded by already drawn strokes.
"""

import math
from collections.abc import Iterable

from asciistrator.domain import Cell


class AsciiBuffer:
    """A width x height grid of characters.

    Writes outside the grid are ignored. A later write to a cell replaces the
    earlier one, so drawing shapes in order behaves like a painter's
    algorithm.

    Example:
        buffer = AsciiBuffer(20, 5)
        buffer.draw(rasterize_line((0, 2), (19, 2)))
        print(buffer.to_string())
    """

    def __init__(self, width: int, height: int, fill_char: str = " ") -> None:
        """Initialize an empty buffer.

        Args:
            width: Number of columns
            height: Number of rows
            fill_char: Character of empty cells
        """
        if width < 0 or height < 0:
            raise ValueError(f"Buffer size must be non-negative, got {width}x{height}")
        self.width = width
        self.height = height
        self.fill_char = fill_char
        self._chars: list[list[str]] = []
        self._colors: list[list[str | None]] = []
        self.clear()

    def clear(self) -> None:
        """Reset every cell to the fill character with no color."""
        self._chars = [[self.fill_char] * self.width for _ in range(self.height)]
        self._colors = [[None] * self.width for _ in range(self.height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_char(self, x: int, y: int, char: str, color: str | None = None) -> bool:
        """Write a character.

        Returns:
            True if the cell was inside the grid
        """
        if not self.in_bounds(x, y):
            return False
        self._chars[y][x] = char
        self._colors[y][x] = color
        return True

    def get_char(self, x: int, y: int) -> str | None:
        """Character at (x, y), or None outside the grid."""
        if not self.in_bounds(x, y):
            return None
        return self._chars[y][x]

    def get_color(self, x: int, y: int) -> str | None:
        if not self.in_bounds(x, y):
            return None
        return self._colors[y][x]

    def draw(self, cells: Iterable[Cell]) -> int:
        """Write cells in order.

        Args:
            cells: Rasterizer output

        Returns:
            Number of cells that landed inside the grid
        """
        written = 0
        for cell in cells:
            if self.set_char(cell.x, cell.y, cell.char, cell.color):
                written += 1
        return written

    def flood_fill(
        self,
        x: float,
        y: float,
        char: str,
        color: str | None = None,
        target: str | None = None,
    ) -> int:
        """Replace the 4-connected region of matching characters around (x, y).

        Args:
            x: Seed column (rounded to a cell)
            y: Seed row (rounded to a cell)
            char: Replacement character
            color: Color of the replaced cells
            target: Character to replace; defaults to the one at the seed

        Returns:
            Number of cells filled (0 for a seed outside the grid or when the
            target already is the replacement character)
        """
        sx, sy = math.floor(x + 0.5), math.floor(y + 0.5)
        if not self.in_bounds(sx, sy):
            return 0
        if target is None:
            target = self._chars[sy][sx]
        if target == char:
            return 0

        filled = 0
        stack = [(sx, sy)]
        while stack:
            cx, cy = stack.pop()
            if not self.in_bounds(cx, cy) or self._chars[cy][cx] != target:
                continue
            self._chars[cy][cx] = char
            self._colors[cy][cx] = color
            filled += 1
            stack.extend(((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)))
        return filled

    def rows(self) -> list[list[tuple[str, str | None]]]:
        """Rows of (char, color) pairs, top to bottom."""
        return [
            list(zip(chars, colors, strict=True))
            for chars, colors in zip(self._chars, self._colors, strict=True)
        ]

    def to_lines(self, trim: bool = False) -> list[str]:
        """Rows as strings, optionally with trailing fill characters removed."""
        lines = ["".join(row) for row in self._chars]
        if trim:
            lines = [line.rstrip(self.fill_char) for line in lines]
        return lines

    def to_string(self, trim: bool = False) -> str:
        return "\n".join(self.to_lines(trim))
