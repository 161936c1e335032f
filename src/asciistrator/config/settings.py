"""Configuration settings for Asciistrator."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class LineStyle(str, Enum):
    """Glyph family used for strokes."""

    SINGLE = "single"
    DOUBLE = "double"
    ROUNDED = "rounded"
    HEAVY = "heavy"
    DASHED = "dashed"
    ASCII = "ascii"


class GeometryConfig(BaseModel):
    """Configuration for curve geometry operations.

    Distances are measured in grid cells, so a tolerance of 0.5 keeps the
    approximation within half a character of the true curve.
    """

    flatten_tolerance: float = Field(
        default=0.5,
        ge=0.01,
        le=10.0,
        description="Maximum deviation when flattening curves into polylines",
    )
    length_tolerance: float | None = Field(
        default=None,
        ge=0.0001,
        le=1.0,
        description="Chord-sum tolerance for arc length (None = per-curve default)",
    )
    max_subdivision_depth: int = Field(
        default=16,
        ge=1,
        le=32,
        description="Recursion limit for flatten and length subdivision",
    )


class RasterConfig(BaseModel):
    """Configuration for rasterization to the character grid."""

    line_style: LineStyle = Field(
        default=LineStyle.SINGLE,
        description="Glyph family for strokes",
    )
    fill_char: str = Field(
        default="█",
        min_length=1,
        max_length=1,
        description="Character used for filled regions",
    )
    stroke_color: str | None = Field(
        default=None,
        description="Color attached to stroke cells",
    )
    fill_color: str | None = Field(
        default=None,
        description="Color attached to fill cells",
    )
    inset_fill: bool = Field(
        default=True,
        description="Keep fills one cell inside stroked outlines",
    )
    canvas_width: int = Field(
        default=80,
        ge=1,
        le=1000,
        description="Canvas width in cells",
    )
    canvas_height: int = Field(
        default=24,
        ge=1,
        le=1000,
        description="Canvas height in cells",
    )


class ProcessingConfig(BaseModel):
    """Configuration for scene rendering."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto, 1 = in-process)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class AsciistratorSettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    raster: RasterConfig = Field(default_factory=RasterConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> AsciistratorSettings:
    """Get default application settings."""
    return AsciistratorSettings()
