"""Reading and writing shape files.

A shape file is a JSON document holding a list of Shape records, either as
the top-level value or under a "shapes" key alongside optional canvas size:

    {"width": 40, "height": 12, "shapes": [{"kind": "rectangle", ...}]}
"""

import json
from collections.abc import Iterator
from pathlib import Path as FilePath
from typing import Any

from asciistrator.core.shape import Shape
from asciistrator.exceptions import PathError, ShapeFileLoadError, ShapeFileSaveError


class ShapeReader:
    """Loads shapes from a JSON shape file.

    Example:
        reader = ShapeReader(Path("scene.json"))
        reader.load()
        for shape in reader.iter_shapes():
            print(shape.label)
    """

    def __init__(self, file_path: FilePath) -> None:
        """Initialize the shape reader.

        Args:
            file_path: Path to the JSON shape file
        """
        self._file_path = file_path
        self._records: list[Any] | None = None
        self._canvas: tuple[int, int] | None = None

    def load(self) -> None:
        """Read and decode the file.

        Raises:
            ShapeFileLoadError: If the file is missing or not a shape document
        """
        if not self._file_path.exists():
            raise ShapeFileLoadError(str(self._file_path), "file not found")

        try:
            document = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ShapeFileLoadError(str(self._file_path), str(e)) from e
        except json.JSONDecodeError as e:
            raise ShapeFileLoadError(str(self._file_path), f"invalid JSON: {e}") from e

        if isinstance(document, dict):
            records = document.get("shapes")
            width = document.get("width")
            height = document.get("height")
            if isinstance(width, int) and isinstance(height, int):
                self._canvas = (width, height)
        else:
            records = document

        if not isinstance(records, list):
            raise ShapeFileLoadError(str(self._file_path), "expected a list of shapes")
        self._records = records

    def _require_loaded(self) -> list[Any]:
        if self._records is None:
            raise RuntimeError("Shape file not loaded. Call load() first.")
        return self._records

    @property
    def shape_count(self) -> int:
        return len(self._require_loaded())

    @property
    def canvas_size(self) -> tuple[int, int] | None:
        """(width, height) declared by the file, if any."""
        self._require_loaded()
        return self._canvas

    def iter_shapes(self) -> Iterator[Shape]:
        """Iterate over the shapes in file order.

        Raises:
            ShapeFileLoadError: If a record is not a valid shape
        """
        for index, record in enumerate(self._require_loaded()):
            try:
                yield Shape.from_dict(record)
            except PathError as e:
                raise ShapeFileLoadError(str(self._file_path), f"shape {index}: {e}") from e

    def read_all(self) -> list[Shape]:
        return list(self.iter_shapes())


class ShapeWriter:
    """Saves shapes to a JSON shape file."""

    def __init__(self, file_path: FilePath) -> None:
        self._file_path = file_path

    def save(
        self,
        shapes: list[Shape],
        canvas_size: tuple[int, int] | None = None,
    ) -> None:
        """Write shapes to the file.

        Args:
            shapes: Shapes to save
            canvas_size: Optional (width, height) stored with the shapes

        Raises:
            ShapeFileSaveError: If the file cannot be written
        """
        document: dict[str, Any] = {"shapes": [shape.to_dict() for shape in shapes]}
        if canvas_size is not None:
            document["width"], document["height"] = canvas_size

        try:
            self._file_path.write_text(
                json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except OSError as e:
            raise ShapeFileSaveError(str(self._file_path), str(e)) from e


def read_shapes(file_path: FilePath) -> list[Shape]:
    """Load every shape from a shape file."""
    reader = ShapeReader(file_path)
    reader.load()
    return reader.read_all()


def write_shapes(file_path: FilePath, shapes: list[Shape]) -> None:
    """Save shapes to a shape file."""
    ShapeWriter(file_path).save(shapes)
