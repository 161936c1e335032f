"""Parser for SVG-style path data strings.

Supports the commands M, L, H, V, C, Q and Z in absolute (upper case) and
relative (lower case) form. Extra coordinate pairs after M are treated as
implicit line-to commands, as in SVG.

Key functions:
- parse_path_data: One Path per subpath
- parse_path: Exactly one Path
- to_path_data: Path data for one or more paths
"""

import re

from asciistrator.core.curves import format_point
from asciistrator.core.path import Path
from asciistrator.domain import Vec2
from asciistrator.exceptions import PathDataError

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<cmd>[MmLlHhVvCcQqZz])|(?P<num>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?))\s*,?"
)

_ARG_COUNTS = {"M": 2, "L": 2, "H": 1, "V": 1, "C": 6, "Q": 4, "Z": 0}


def _tokenize(data: str) -> list[str | float]:
    tokens: list[str | float] = []
    pos = 0
    data = data.strip()
    while pos < len(data):
        match = _TOKEN_RE.match(data, pos)
        if match is None or match.end() == pos:
            raise PathDataError(data, f"unexpected character {data[pos]!r} at {pos}")
        if match.group("cmd"):
            tokens.append(match.group("cmd"))
        else:
            tokens.append(float(match.group("num")))
        pos = match.end()
    return tokens


def _finish(path: Path) -> None:
    """Merge a closing anchor that repeats the first one."""
    anchors = path.anchors
    if not path.closed or len(anchors) < 3:
        return
    first, last = anchors[0], anchors[-1]
    if first.position != last.position:
        return
    path.remove_anchor(len(anchors) - 1)
    if last.handle_in is not None:
        first.set_handle_in(last.handle_in)


def parse_path_data(data: str) -> list[Path]:
    """Parse path data into paths, one per subpath.

    Args:
        data: Path data such as "M 0 0 L 10 0 Q 15 5 10 10 Z"

    Returns:
        Paths in order of appearance (empty for blank input)

    Raises:
        PathDataError: If the data is malformed

    Examples:
        >>> [len(p) for p in parse_path_data("M0 0 L10 0 L10 10 Z")]
        [3]
    """
    tokens = _tokenize(data)
    if not tokens:
        return []
    if not isinstance(tokens[0], str) or tokens[0] not in "Mm":
        raise PathDataError(data, "path data must start with a move-to command")

    paths: list[Path] = []
    current: Path | None = None
    pos = Vec2(0.0, 0.0)
    start = Vec2(0.0, 0.0)
    command = ""
    i = 0

    while i < len(tokens):
        token = tokens[i]
        if isinstance(token, str):
            command = token
            i += 1
        elif command in ("", "Z", "z"):
            raise PathDataError(data, f"number {token:g} without a command")

        upper = command.upper()
        relative = command.islower()

        if upper == "Z":
            if current is None:
                raise PathDataError(data, "close-path before any move-to")
            current.close_path()
            _finish(current)
            pos = start
            current = None
            continue

        count = _ARG_COUNTS[upper]
        args = tokens[i : i + count]
        if len(args) < count or not all(isinstance(a, float) for a in args):
            raise PathDataError(data, f"command {command} expects {count} numbers")
        i += count
        values = [float(a) for a in args]

        if upper == "M":
            target = Vec2(*values)
            if relative:
                target = target + pos
            current = Path().move_to(target.x, target.y)
            paths.append(current)
            pos = start = target
            # Coordinate pairs after a move-to are line-tos
            command = "l" if relative else "L"
            continue

        if current is None:
            # Drawing after Z continues from the subpath start
            current = Path().move_to(start.x, start.y)
            paths.append(current)

        base = pos if relative else Vec2(0.0, 0.0)
        if upper == "L":
            pos = base + Vec2(*values)
            current.line_to(pos.x, pos.y)
        elif upper == "H":
            pos = Vec2(values[0] + (pos.x if relative else 0.0), pos.y)
            current.line_to(pos.x, pos.y)
        elif upper == "V":
            pos = Vec2(pos.x, values[0] + (pos.y if relative else 0.0))
            current.line_to(pos.x, pos.y)
        elif upper == "C":
            c1 = base + Vec2(values[0], values[1])
            c2 = base + Vec2(values[2], values[3])
            pos = base + Vec2(values[4], values[5])
            current.bezier_curve_to(c1.x, c1.y, c2.x, c2.y, pos.x, pos.y)
        elif upper == "Q":
            c = base + Vec2(values[0], values[1])
            pos = base + Vec2(values[2], values[3])
            current.quadratic_curve_to(c.x, c.y, pos.x, pos.y)

    return paths


def parse_path(data: str) -> Path:
    """Parse path data that must describe exactly one subpath.

    Raises:
        PathDataError: If the data is malformed or has several subpaths
    """
    paths = parse_path_data(data)
    if len(paths) != 1:
        raise PathDataError(data, f"expected one subpath, found {len(paths)}")
    return paths[0]


def _subpath_data(path: Path) -> str:
    anchors = path.anchors
    if not anchors:
        return ""

    parts = [f"M {format_point(anchors[0].position)}"]
    segments = path.segments()
    for index, segment in enumerate(segments):
        closing = path.closed and index == len(segments) - 1
        if segment.is_line:
            if not closing:
                parts.append(f"L {format_point(segment.end.position)}")
            continue
        curve = segment.to_curve()
        controls = " ".join(format_point(p) for p in (curve.p1, curve.p2, curve.p3))
        parts.append(f"C {controls}")
    if path.closed:
        parts.append("Z")
    return " ".join(parts)


def to_path_data(paths: Path | list[Path]) -> str:
    """Write paths as absolute path data.

    Straight segments become L commands and curved ones C commands; a
    closing line is left to Z. parse_path_data reads the result back to the
    same anchor positions and handles. Anchor types are not encoded.

    Args:
        paths: A path or a list of paths (one subpath each)

    Returns:
        Path data, empty for empty paths

    Examples:
        >>> to_path_data(parse_path("M0 0 L10 0 L10 10 Z"))
        'M 0 0 L 10 0 L 10 10 Z'
    """
    if isinstance(paths, Path):
        paths = [paths]
    return " ".join(data for data in (_subpath_data(p) for p in paths) if data)
