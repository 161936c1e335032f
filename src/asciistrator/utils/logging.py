"""Logging utilities for Asciistrator."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Marks handlers installed by configure_logging so repeated calls replace them
_HANDLER_TAG = "_asciistrator_handler"


@dataclass
class RenderStats:
    """Statistics from a rendering run."""

    rendered_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    cells_emitted: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    shape_timings_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None
    was_cancelled: bool = False
    cancelled_count: int = 0

    @property
    def duration_seconds(self) -> float:
        """Calculate rendering duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_shape_time_ms(self) -> float | None:
        if not self.shape_timings_ms:
            return None
        return sum(self.shape_timings_ms) / len(self.shape_timings_ms)

    @property
    def min_shape_time_ms(self) -> float | None:
        return min(self.shape_timings_ms) if self.shape_timings_ms else None

    @property
    def max_shape_time_ms(self) -> float | None:
        return max(self.shape_timings_ms) if self.shape_timings_ms else None


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structured logging to the console and an optional file.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        setattr(file_handler, _HANDLER_TAG, True)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(console_handler, _HANDLER_TAG, True)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("asciistrator")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class RenderLogger:
    """Logger for tracking per-shape rendering events and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = RenderStats()

    def log_shape_start(self, shape_name: str) -> None:
        """Log start of shape rasterization."""
        self._logger.debug("Rendering shape", shape=shape_name)

    def log_shape_complete(
        self,
        shape_name: str,
        cells: int,
        duration_ms: float,
    ) -> None:
        """Log successful shape rasterization."""
        self._logger.info(
            "Shape rendered",
            shape=shape_name,
            cells=cells,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.rendered_count += 1
        self._stats.cells_emitted += cells
        self._stats.shape_timings_ms.append(duration_ms)

    def log_shape_skipped(self, shape_name: str, reason: str) -> None:
        """Log skipped shape."""
        self._logger.debug("Shape skipped", shape=shape_name, reason=reason)
        self._stats.skipped_count += 1

    def log_shape_error(
        self,
        shape_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log shape rasterization error."""
        self._logger.error(
            "Shape rendering failed",
            shape=shape_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((shape_name, str(error)))

    @property
    def stats(self) -> RenderStats:
        """Get current rendering statistics."""
        return self._stats
