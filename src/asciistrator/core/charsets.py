"""Glyph tables used by the rasterizer.

Box-drawing glyphs are grouped per LineStyle. Diagonals are shared by every
style because box-drawing fonts have no diagonal strokes of their own.
"""

from dataclasses import dataclass

from asciistrator.config import LineStyle


@dataclass(frozen=True, slots=True)
class BoxGlyphs:
    """Stroke and corner glyphs of one line style.

    Corner names describe where the corner sits on a box: top_left joins a
    stroke going right with one going down.
    """

    horizontal: str
    vertical: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str
    cross: str
    diagonal_down: str = "\\"
    diagonal_up: str = "/"


BOX_GLYPHS: dict[LineStyle, BoxGlyphs] = {
    LineStyle.SINGLE: BoxGlyphs("─", "│", "┌", "┐", "└", "┘", "┼"),
    LineStyle.DOUBLE: BoxGlyphs("═", "║", "╔", "╗", "╚", "╝", "╬"),
    LineStyle.ROUNDED: BoxGlyphs("─", "│", "╭", "╮", "╰", "╯", "┼"),
    LineStyle.HEAVY: BoxGlyphs("━", "┃", "┏", "┓", "┗", "┛", "╋"),
    LineStyle.DASHED: BoxGlyphs("┄", "┆", "┌", "┐", "└", "┘", "┼"),
    LineStyle.ASCII: BoxGlyphs("-", "|", "+", "+", "+", "+", "+"),
}

# Quarter-arc glyphs keyed by the corner of the curve they draw
ARC_GLYPHS = {
    "top_left": "╭",
    "top_right": "╮",
    "bottom_left": "╰",
    "bottom_right": "╯",
}

# ASCII has no arcs; curved strokes fall back to the diagonals
ASCII_ARC_GLYPHS = {
    "top_left": "/",
    "top_right": "\\",
    "bottom_left": "\\",
    "bottom_right": "/",
}

FILL_PATTERNS = {
    "light": "░",
    "medium": "▒",
    "dark": "▓",
    "solid": "█",
}

# Light to dark
DENSITY_PALETTES = {
    "minimal": " .:-=+*#%@",
    "standard": " .'`^\",:;Il!i><~+_-?][}{1)(|/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$",
    "blocks": " ░▒▓█",
    "simple": " .+*#",
    "binary": " █",
    "dots": " ·∙●◉⬤",
}


def box_glyphs(style: LineStyle | str) -> BoxGlyphs:
    """Glyph set for a line style (accepts the enum or its value)."""
    return BOX_GLYPHS[LineStyle(style)]


def arc_glyph(corner: str, style: LineStyle | str = LineStyle.SINGLE) -> str:
    """Quarter-arc glyph for a corner name, ASCII-safe for the ascii style."""
    if LineStyle(style) is LineStyle.ASCII:
        return ASCII_ARC_GLYPHS[corner]
    return ARC_GLYPHS[corner]


def fill_pattern(name: str) -> str:
    """Fill character by pattern name; single characters pass through."""
    if name in FILL_PATTERNS:
        return FILL_PATTERNS[name]
    if len(name) == 1:
        return name
    raise ValueError(f"Unknown fill pattern '{name}'")


def char_for_density(density: float, palette: str = "minimal") -> str:
    """Character whose visual weight matches a density in [0, 1].

    Args:
        density: 0 for empty, 1 for darkest; clamped to the range
        palette: Palette name from DENSITY_PALETTES

    Returns:
        Palette character

    Examples:
        >>> char_for_density(0.0)
        ' '
        >>> char_for_density(1.0)
        '@'
    """
    chars = DENSITY_PALETTES[palette]
    density = max(0.0, min(1.0, density))
    return chars[round(density * (len(chars) - 1))]
