from __future__ import annotations

from pydantic import BaseModel, Field

from connex.engine.errors import LevelErrorReason, MalformedLevelError
from connex.puzzle.types import Coord, Direction

# --- Level ---
class Level(BaseModel):
    """Level data: board dimensions, row-major shape ids, optional initial rotations."""
    name: str | None = None
    topology: str = "square"
    width: int
    height: int
    shapes: list[str]
    rotations: list[int] | None = None

    @classmethod
    def from_cell_map(
        cls,
        width: int,
        height: int,
        cells: dict[Coord, str],
        rotations: dict[Coord, int] | None = None,
        topology: str = "square",
        name: str | None = None,
    ) -> Level:
        """Build a level from a ``{(row, col): shape_id}`` mapping.

        Every cell of the ``width x height`` grid must be present exactly once.
        """
        if width <= 0 or height <= 0:
            raise MalformedLevelError(
                f"Board dimensions must be positive, got {width}x{height}",
                LevelErrorReason.INVALID_DIMENSIONS,
                (width, height),
            )

        for coord in list(cells) + list(rotations or {}):
            row, col = coord
            if not (0 <= row < height and 0 <= col < width):
                raise MalformedLevelError(
                    f"Cell {coord} lies outside a {width}x{height} board",
                    LevelErrorReason.UNEXPECTED_CELL,
                    coord,
                )

        shapes: list[str] = []
        for row in range(height):
            for col in range(width):
                shape_id = cells.get((row, col))
                if shape_id is None:
                    raise MalformedLevelError(
                        f"Cell {(row, col)} has no shape",
                        LevelErrorReason.MISSING_CELL,
                        (row, col),
                    )
                shapes.append(shape_id)

        flat_rotations = None
        if rotations is not None:
            flat_rotations = [
                rotations.get((row, col), 0)
                for row in range(height)
                for col in range(width)
            ]

        return cls(
            name=name,
            topology=topology,
            width=width,
            height=height,
            shapes=shapes,
            rotations=flat_rotations,
        )


# --- Rendering views ---
class CellView(BaseModel):
    row: int
    col: int
    shape_id: str
    kind: str
    rotation: int
    period: int
    ports: list[Direction]
    mismatched: bool = False


class BoardView(BaseModel):
    topology: str
    width: int
    height: int
    cells: list[CellView]
    solved: bool | None = None


# --- Event ---
class Event(BaseModel):
    event_type: str
    payload: dict = Field(default_factory=dict)
