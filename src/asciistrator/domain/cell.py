"""Grid cell emitted by the rasterizer."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Cell:
    """A character placed on the integer grid.

    The grid grows rightwards in x and downwards in y, as on a terminal.
    Cells carry no overwrite policy; the buffer they are drawn into decides.

    Attributes:
        x: Column
        y: Row
        char: Single glyph
        color: Optional color name
    """

    x: int
    y: int
    char: str
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "char": self.char, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Cell":
        return cls(
            x=int(data["x"]),
            y=int(data["y"]),
            char=data["char"],
            color=data.get("color"),
        )
