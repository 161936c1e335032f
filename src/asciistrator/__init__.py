"""Asciistrator - Vector curve geometry rendered as character grids.

Asciistrator is the geometry core of an ASCII vector-graphics editor. It models
paths as quadratic and cubic Bezier curves joined at anchor points, fits curves
through freehand point sequences, and rasterizes the resulting geometry into
character cells on an integer grid.

Example:
    $ asciistrator render --path "M 2 2 L 30 2 L 30 10 Z" --width 40 --height 12

This will print the outline of a triangle drawn with box-drawing characters.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
