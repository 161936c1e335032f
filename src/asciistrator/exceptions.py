"""Exception hierarchy for Asciistrator.

Geometry and rasterization routines never raise for well-formed numeric input;
degenerate cases return documented defaults. The exceptions below are reserved
for boundaries where structured input enters the core.
"""


class AsciistratorError(Exception):
    """Base exception for all Asciistrator errors."""

    pass


class PathError(AsciistratorError):
    """Errors related to path construction or reconstruction."""

    pass


class PathStructureError(PathError):
    """Malformed structural input while rebuilding a path or anchor."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class PathDataError(PathError):
    """Invalid path data string."""

    def __init__(self, data: str, reason: str) -> None:
        self.data = data
        self.reason = reason
        preview = data if len(data) <= 40 else data[:37] + "..."
        super().__init__(f"Invalid path data '{preview}': {reason}")


class ShapeFileError(AsciistratorError):
    """Errors related to loading or saving shape files."""

    pass


class ShapeFileLoadError(ShapeFileError):
    """Error loading a shape file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load shapes from '{path}': {reason}")


class ShapeFileSaveError(ShapeFileError):
    """Error saving a shape file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save shapes to '{path}': {reason}")


class RenderError(AsciistratorError):
    """Errors raised while rendering shapes to a character grid."""

    pass


class ShapeRenderError(RenderError):
    """Error rasterizing a specific shape."""

    def __init__(self, shape_name: str, reason: str) -> None:
        self.shape_name = shape_name
        self.reason = reason
        super().__init__(f"Error rendering shape '{shape_name}': {reason}")
