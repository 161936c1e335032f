"""Scene rendering with optional parallel rasterization.

Shapes are independent, so each one can be rasterized in a worker process.
Results are merged back in shape order, which keeps the painter's order of
the scene regardless of which worker finishes first.

Key components:
- rasterize_shape: Top-level picklable function for parallel execution
- SceneRenderer: Orchestrates rasterization of a list of shapes
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import Future, ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

import structlog

from asciistrator.config import AsciistratorSettings
from asciistrator.core.curves import MAX_SUBDIVISION_DEPTH
from asciistrator.core.shape import Shape
from asciistrator.domain import Cell
from asciistrator.exceptions import ShapeRenderError
from asciistrator.io.buffer import AsciiBuffer
from asciistrator.utils import RenderLogger, RenderStats, configure_logging


def rasterize_shape(shape_dict: dict[str, Any], config_dict: dict[str, Any]) -> dict[str, Any]:
    """Rasterize a single serialized shape.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.

    Args:
        shape_dict: Serialized shape (from Shape.to_dict())
        config_dict: {"flatten_tolerance": float, "max_subdivision_depth": int,
            "inset_fill": bool}

    Returns:
        Dictionary containing either:
        - Success: {"cells": [cell_dict, ...], "duration_ms": float}
        - Error: {"error": str, "shape_name": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        shape = Shape.from_dict(shape_dict)
        cells = shape.rasterize(
            tolerance=config_dict.get("flatten_tolerance", 0.5),
            inset=config_dict.get("inset_fill", True),
            max_depth=config_dict.get("max_subdivision_depth", MAX_SUBDIVISION_DEPTH),
        )
        return {
            "cells": [cell.to_dict() for cell in cells],
            "duration_ms": (time.time() - start_time) * 1000,
        }

    except Exception as e:
        name = shape_dict.get("name") if isinstance(shape_dict, dict) else None
        return {
            "error": str(e),
            "shape_name": name or "unnamed",
            "traceback": traceback.format_exc(),
            "duration_ms": (time.time() - start_time) * 1000,
        }


@dataclass
class RenderResult:
    """Cells of a rendered scene in painting order, plus run statistics."""

    cells: list[Cell] = field(default_factory=list)
    stats: RenderStats = field(default_factory=RenderStats)


class SceneRenderer:
    """Rasterizes shapes, in parallel when it pays off.

    Example:
        renderer = SceneRenderer(get_default_settings())
        buffer = renderer.render_to_buffer(shapes, 40, 12)
        print(buffer.to_string())
    """

    def __init__(
        self,
        settings: AsciistratorSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            settings: Application settings
            logger: Logger to use; logging is configured from settings if None
        """
        self.settings = settings
        if logger is None:
            logger = configure_logging(
                log_file=settings.logging.log_file,
                console_level=settings.logging.log_level,
                file_level=settings.logging.file_log_level,
            )
        self.logger = logger

    def _config_dict(self) -> dict[str, Any]:
        return {
            "flatten_tolerance": self.settings.geometry.flatten_tolerance,
            "max_subdivision_depth": self.settings.geometry.max_subdivision_depth,
            "inset_fill": self.settings.raster.inset_fill,
        }

    def render(
        self,
        shapes: list[Shape],
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, str, bool], None] | None = None,
        strict: bool = False,
    ) -> RenderResult:
        """Rasterize shapes into a single cell list.

        Args:
            shapes: Shapes in painting order
            max_workers: Worker processes (None = settings, 1 = in-process)
            progress_callback: Optional callback(completed, total, shape_name, success)
            strict: Raise on the first failed shape instead of skipping it

        Returns:
            RenderResult with cells in shape order and statistics

        Raises:
            ShapeRenderError: If strict and a shape failed
            KeyboardInterrupt: If rendering is cancelled by user
        """
        render_logger = RenderLogger(self.logger)
        stats = render_logger.stats
        stats.start_time = time.time()

        if max_workers is None:
            max_workers = self.settings.processing.max_workers

        tasks: list[tuple[int, Shape]] = []
        for index, shape in enumerate(shapes):
            if shape.is_visible():
                tasks.append((index, shape))
            else:
                render_logger.log_shape_skipped(shape.label, "nothing to draw")

        self.logger.info(
            "Starting render",
            shapes=len(shapes),
            to_render=len(tasks),
            max_workers=max_workers,
        )

        if max_workers == 1 or len(tasks) <= 1:
            results = self._render_serial(tasks, render_logger, progress_callback)
        else:
            results = self._render_parallel(tasks, max_workers, render_logger, progress_callback)

        cells: list[Cell] = []
        failures: list[tuple[str, str]] = []
        for index, shape in tasks:
            result = results.get(index)
            if result is None:
                continue
            if "error" in result:
                failures.append((result["shape_name"], result["error"]))
                continue
            cells.extend(Cell.from_dict(c) for c in result["cells"])

        stats.end_time = time.time()
        self.logger.info(
            "Render complete",
            rendered=stats.rendered_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            cells=len(cells),
            duration_seconds=round(stats.duration_seconds, 3),
        )

        if strict and failures:
            raise ShapeRenderError(*failures[0])

        return RenderResult(cells=cells, stats=stats)

    def _record(
        self,
        render_logger: RenderLogger,
        label: str,
        result: dict[str, Any],
    ) -> bool:
        if "error" in result:
            render_logger.log_shape_error(
                shape_name=result["shape_name"],
                error=ShapeRenderError(result["shape_name"], result["error"]),
                traceback=result.get("traceback"),
            )
            return False
        render_logger.log_shape_complete(
            shape_name=label,
            cells=len(result["cells"]),
            duration_ms=result.get("duration_ms", 0.0),
        )
        return True

    def _render_serial(
        self,
        tasks: list[tuple[int, Shape]],
        render_logger: RenderLogger,
        progress_callback: Callable[[int, int, str, bool], None] | None,
    ) -> dict[int, dict[str, Any]]:
        config_dict = self._config_dict()
        results: dict[int, dict[str, Any]] = {}
        total = len(tasks)

        for completed, (index, shape) in enumerate(tasks, start=1):
            render_logger.log_shape_start(shape.label)
            result = rasterize_shape(shape.to_dict(), config_dict)
            results[index] = result
            success = self._record(render_logger, shape.label, result)
            if progress_callback is not None:
                progress_callback(completed, total, shape.label, success)

        return results

    def _render_parallel(
        self,
        tasks: list[tuple[int, Shape]],
        max_workers: int | None,
        render_logger: RenderLogger,
        progress_callback: Callable[[int, int, str, bool], None] | None,
    ) -> dict[int, dict[str, Any]]:
        config_dict = self._config_dict()
        results: dict[int, dict[str, Any]] = {}
        stats = render_logger.stats
        total = len(tasks)
        completed = 0
        pending_futures: dict[Future, tuple[int, str]] = {}

        self.logger.info("Starting parallel rendering", shape_count=total, max_workers=max_workers)

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index, shape in tasks:
                future = executor.submit(rasterize_shape, shape.to_dict(), config_dict)
                pending_futures[future] = (index, shape.label)

            try:
                for future in as_completed(list(pending_futures)):
                    index, label = pending_futures.pop(future)

                    try:
                        result = future.result()
                    except Exception as e:
                        # Executor-level error
                        result = {
                            "error": str(e),
                            "shape_name": label,
                            "traceback": traceback.format_exc(),
                            "duration_ms": 0.0,
                        }

                    results[index] = result
                    success = self._record(render_logger, label, result)

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, label, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()
                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)
                executor.shutdown(wait=True, cancel_futures=True)
                raise

        return results

    def render_to_buffer(
        self,
        shapes: list[Shape],
        width: int | None = None,
        height: int | None = None,
        max_workers: int | None = None,
    ) -> AsciiBuffer:
        """Render shapes into a new buffer.

        Args:
            shapes: Shapes in painting order
            width: Buffer width (settings canvas width if None)
            height: Buffer height (settings canvas height if None)
            max_workers: Worker processes (None = settings)

        Returns:
            Buffer with every shape drawn
        """
        buffer = AsciiBuffer(
            width if width is not None else self.settings.raster.canvas_width,
            height if height is not None else self.settings.raster.canvas_height,
        )
        buffer.draw(self.render(shapes, max_workers=max_workers).cells)
        return buffer
