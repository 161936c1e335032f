"""Command-line interface for asciistrator.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Render shape files and inline path data to the terminal or a text file
- Progress bars for multi-shape scenes
- Verbose/quiet output modes
- Shape file inspection
"""

from asciistrator.cli.app import cli, main

__all__ = ["cli", "main"]
