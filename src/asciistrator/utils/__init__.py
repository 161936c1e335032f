"""Utility functions for asciistrator.

This module provides utility functions including:

- Structured logging setup and configuration
- Per-shape rendering statistics
"""

from asciistrator.utils.logging import (
    RenderLogger,
    RenderStats,
    configure_logging,
)

__all__ = [
    "RenderLogger",
    "RenderStats",
    "configure_logging",
]
