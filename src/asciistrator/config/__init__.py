"""Configuration management for asciistrator.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- LineStyle: Glyph family for strokes
- GeometryConfig: Tolerances and recursion limits for curve geometry
- RasterConfig: Stroke and fill settings for the character grid
- ProcessingConfig: Scene rendering settings
- LoggingConfig: Logging settings
- AsciistratorSettings: Main application settings
"""

from asciistrator.config.settings import (
    AsciistratorSettings,
    GeometryConfig,
    LineStyle,
    LoggingConfig,
    ProcessingConfig,
    RasterConfig,
    get_default_settings,
)

__all__ = [
    "AsciistratorSettings",
    "GeometryConfig",
    "LineStyle",
    "LoggingConfig",
    "ProcessingConfig",
    "RasterConfig",
    "get_default_settings",
]
