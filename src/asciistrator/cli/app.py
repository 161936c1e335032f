"""CLI application entry point for asciistrator.

This module provides the main CLI interface using Typer.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from asciistrator import __version__
from asciistrator.cli.output import (
    console,
    create_progress,
    print_canvas,
    print_cancellation_notice,
    print_error,
    print_header,
    print_processing_info,
    print_scene_info,
    print_shape_table,
    print_step,
    print_success,
)
from asciistrator.config import (
    AsciistratorSettings,
    GeometryConfig,
    LineStyle,
    LoggingConfig,
    ProcessingConfig,
    RasterConfig,
)
from asciistrator.core import SceneRenderer, Shape
from asciistrator.exceptions import AsciistratorError, ShapeFileLoadError
from asciistrator.io import AsciiBuffer, ShapeReader, parse_path_data

app = typer.Typer(
    name="asciistrator",
    help="Render vector paths and shapes as box-drawing character art.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Asciistrator[/bold blue] v{__version__}")
        raise typer.Exit()


@app.command()
def render(
    shapes_file: Annotated[
        Path | None,
        typer.Argument(
            help="JSON shape file to render",
            show_default=False,
        ),
    ] = None,
    path_data: Annotated[
        list[str] | None,
        typer.Option(
            "--path",
            "-d",
            help="Inline path data (e.g. \"M 0 0 L 10 0\"), may be repeated",
        ),
    ] = None,
    width: Annotated[
        int | None,
        typer.Option("--width", "-W", help="Canvas width in cells", min=1, max=1000),
    ] = None,
    height: Annotated[
        int | None,
        typer.Option("--height", "-H", help="Canvas height in cells", min=1, max=1000),
    ] = None,
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Curve flattening tolerance in cells",
            min=0.01,
            max=10.0,
        ),
    ] = 0.5,
    max_depth: Annotated[
        int,
        typer.Option(
            "--max-depth",
            help="Subdivision limit when flattening curves",
            min=1,
            max=32,
        ),
    ] = 16,
    style: Annotated[
        str,
        typer.Option(
            "--style",
            "-s",
            help="Line style for inline paths (single|double|rounded|heavy|dashed|ascii)",
        ),
    ] = "single",
    fill: Annotated[
        bool,
        typer.Option("--fill", "-f", help="Fill inline paths"),
    ] = False,
    fill_char: Annotated[
        str,
        typer.Option("--fill-char", help="Fill character for inline paths"),
    ] = "█",
    color: Annotated[
        str | None,
        typer.Option("--color", "-c", help="Stroke color for inline paths (any rich color name)"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto, 1 = in-process)",
            min=1,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the canvas to a text file"),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write detailed logs to file"),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option("--log-level", help="Logging level (DEBUG|INFO|WARNING|ERROR)"),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose console output"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Print only the canvas"),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Render shapes to a character canvas.

    Shapes come from a JSON shape file, from --path options, or both. Shapes
    are drawn in order, so later shapes overwrite earlier ones.

    Example:
        asciistrator render --path "M 2 1 L 30 1 L 30 8 Z" --width 34 --height 10
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if shapes_file is None and not path_data:
        print_error(
            "Nothing to render",
            details="Provide a shape file, one or more --path options, or both.",
        )
        raise typer.Exit(code=1)

    try:
        line_style = LineStyle(style.lower())
    except ValueError:
        print_error(
            f"Invalid style: {style}",
            details="Valid values: " + ", ".join(s.value for s in LineStyle),
        )
        raise typer.Exit(code=1)

    try:
        shapes: list[Shape] = []
        canvas_size: tuple[int, int] | None = None

        if shapes_file is not None:
            reader = ShapeReader(shapes_file)
            reader.load()
            canvas_size = reader.canvas_size
            shapes.extend(reader.iter_shapes())

        default_width, default_height = canvas_size or (
            RasterConfig().canvas_width,
            RasterConfig().canvas_height,
        )

        try:
            settings = AsciistratorSettings(
                geometry=GeometryConfig(
                    flatten_tolerance=tolerance, max_subdivision_depth=max_depth
                ),
                raster=RasterConfig(
                    line_style=line_style,
                    fill_char=fill_char,
                    stroke_color=color,
                    canvas_width=width or default_width,
                    canvas_height=height or default_height,
                ),
                processing=ProcessingConfig(max_workers=workers),
                logging=LoggingConfig(
                    log_file=log_file,
                    log_level=log_level if not quiet else "WARNING",
                ),
            )
        except ValidationError as e:
            print_error("Invalid options", details=str(e))
            raise typer.Exit(code=1) from None

        raster = settings.raster
        for data in path_data or []:
            for path in parse_path_data(data):
                shapes.append(
                    Shape(
                        path,
                        fill=fill,
                        style=raster.line_style,
                        stroke_color=raster.stroke_color,
                        fill_char=raster.fill_char,
                        fill_color=raster.fill_color,
                    )
                )

        canvas_width = settings.raster.canvas_width
        canvas_height = settings.raster.canvas_height

        if not quiet:
            print_header(__version__)
            source = str(shapes_file) if shapes_file is not None else "inline path data"
            print_scene_info(source, len(shapes), canvas_width, canvas_height)
            if verbose:
                for shape in shapes:
                    console.print(f"  {shape.label}: {len(shape.path)} anchors")

        renderer = SceneRenderer(settings)

        try:
            if not quiet and len(shapes) > 1:
                import os

                print_step("Rendering")
                print_processing_info(workers or os.cpu_count() or 1, is_auto=workers is None)
                with create_progress() as progress:
                    task_id = progress.add_task(
                        f"Rendering {len(shapes)} shapes",
                        total=len(shapes),
                    )

                    def update_progress(completed: int, *_: object) -> None:
                        progress.update(task_id, completed=completed)

                    result = renderer.render(
                        shapes, max_workers=workers, progress_callback=update_progress
                    )
            else:
                result = renderer.render(shapes, max_workers=workers)
        except KeyboardInterrupt:
            if not quiet:
                print_cancellation_notice()
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        buffer = AsciiBuffer(canvas_width, canvas_height)
        buffer.draw(result.cells)
        stats = result.stats

        if output is not None:
            try:
                output.write_text(buffer.to_string(trim=True) + "\n", encoding="utf-8")
            except OSError as e:
                print_error(f"Could not write output: {e}")
                raise typer.Exit(code=1) from None
        else:
            if not quiet:
                print_step("Canvas")
            print_canvas(buffer)

        if not quiet:
            print_success(
                output_path=str(output) if output is not None else None,
                total_time_s=stats.duration_seconds,
                rendered=stats.rendered_count,
                cells=stats.cells_emitted,
                errors=stats.error_count,
                avg_time_ms=stats.avg_shape_time_ms,
                min_time_ms=stats.min_shape_time_ms,
                max_time_ms=stats.max_shape_time_ms,
            )
            if verbose:
                for shape_name, error in stats.errors:
                    console.print(f"  [red]{shape_name}[/red]: {error}")

    except ShapeFileLoadError as e:
        print_error(f"Could not load shapes: {e.reason}")
        raise typer.Exit(code=1)
    except AsciistratorError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def inspect(
    shapes_file: Annotated[
        Path,
        typer.Argument(help="JSON shape file to inspect", show_default=False),
    ],
    length_tolerance: Annotated[
        float | None,
        typer.Option(
            "--length-tolerance",
            help="Chord-sum tolerance for path length (default: per curve degree)",
            min=0.0001,
            max=1.0,
        ),
    ] = None,
) -> None:
    """Describe the shapes in a shape file.

    Prints anchors, segments, closed flag, length and bounds per shape.
    """
    geometry = GeometryConfig(length_tolerance=length_tolerance)
    try:
        reader = ShapeReader(shapes_file)
        reader.load()
        rows = []
        for shape in reader.iter_shapes():
            bounds = shape.path.local_bounds()
            rows.append(
                {
                    "name": shape.name or "",
                    "kind": shape.kind.value,
                    "anchors": len(shape.path),
                    "segments": len(shape.path.segments()),
                    "closed": shape.path.closed,
                    "length": shape.path.length(
                        geometry.length_tolerance, geometry.max_subdivision_depth
                    ),
                    "bounds": ", ".join(f"{v:g}" for v in bounds.to_tuple()),
                }
            )
    except ShapeFileLoadError as e:
        print_error(f"Could not load shapes: {e.reason}")
        raise typer.Exit(code=1)

    console.print(f"\n[bold]{len(rows)} shapes[/bold] in {shapes_file}\n")
    print_shape_table(rows)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
