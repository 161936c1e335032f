"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and the rendered canvas itself.
"""

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.style import Style
from rich.table import Table
from rich.text import Text

from asciistrator.io import AsciiBuffer

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for shape rendering.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Asciistrator[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator."""
    console.print(f"\n{SYM_STEP} {message}")


def print_scene_info(source: str, shape_count: int, width: int, height: int) -> None:
    """Print what is about to be rendered.

    Args:
        source: Shape file path or a description of inline input
        shape_count: Number of shapes in the scene
        width: Canvas width in cells
        height: Canvas height in cells
    """
    # Use Text to safely handle paths with special characters
    line = Text("  ")
    line.append(source)
    console.print(line)
    console.print(f"  {shape_count:,} shapes {SYM_DOT} {width}x{height} canvas")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_success(
    output_path: str | None,
    total_time_s: float,
    rendered: int,
    cells: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path the canvas was written to (None when printed)
        total_time_s: Total rendering time in seconds
        rendered: Number of shapes rendered
        cells: Number of cells emitted
        errors: Number of errors encountered
        avg_time_ms: Average rasterization time per shape in milliseconds
        min_time_ms: Minimum rasterization time per shape in milliseconds
        max_time_ms: Maximum rasterization time per shape in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    if output_path is not None:
        line = Text("  ")
        line.append(output_path, style="bold")
        console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {rendered} shapes {SYM_DOT} {cells:,} cells {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )

    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.1f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.1f}-{max_time_ms:.1f}ms range)"
        console.print(f"  {timing_str}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {escape(message)}")
    if details:
        console.print(f"  {escape(details)}")


def print_cancellation_notice() -> None:
    console.print(f"\n{SYM_DOT} Cancelling... waiting for in-progress shapes")


def _cell_style(color: str | None) -> Style | None:
    if color is None:
        return None
    try:
        return Style.parse(color)
    except StyleSyntaxError:
        return None


def canvas_text(buffer: AsciiBuffer, trim: bool = True) -> Text:
    """Build a styled Text from a buffer, one line per row."""
    text = Text(no_wrap=True)
    for row_index, row in enumerate(buffer.rows()):
        if row_index:
            text.append("\n")
        if trim:
            while row and row[-1] == (buffer.fill_char, None):
                row.pop()
        for char, color in row:
            text.append(char, style=_cell_style(color) or "")
    return text


def print_canvas(buffer: AsciiBuffer) -> None:
    """Print the buffer with cell colors applied."""
    console.print(canvas_text(buffer), soft_wrap=True)


def print_shape_table(rows: list[dict[str, object]]) -> None:
    """Print a table describing shapes.

    Args:
        rows: One dict per shape with name, kind, anchors, segments,
            closed, length and bounds entries
    """
    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Anchors", justify="right")
    table.add_column("Segs", justify="right")
    table.add_column("Closed")
    table.add_column("Length", justify="right")
    table.add_column("Bounds")

    for index, row in enumerate(rows):
        table.add_row(
            str(index),
            str(row["name"]),
            str(row["kind"]),
            str(row["anchors"]),
            str(row["segments"]),
            SYM_OK if row["closed"] else SYM_DOT,
            f"{row['length']:.1f}",
            str(row["bounds"]),
        )

    console.print(table)
