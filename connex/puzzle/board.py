"""Board state: a fixed grid of rotatable tiles.

Cells are stored row-major in flat lists; index = row * width + col. Adjacency
is computed from coordinates and the topology's offset table once, at
construction, since dimensions never change afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from connex.engine.errors import (
    LevelErrorReason,
    MalformedLevelError,
    OutOfBoundsError,
)
from connex.engine.models import BoardView, CellView, Level
from connex.puzzle.tiles import TileShape, effective_ports
from connex.puzzle.types import Coord, Direction, Topology

if TYPE_CHECKING:
    from connex.engine.registry import TopologyRegistry

logger = logging.getLogger(__name__)

# neighbors[index][k] is the neighbour index in topology.directions[k], or None
NeighborTable = tuple[tuple[int | None, ...], ...]


def build_neighbor_table(topology: Topology, width: int, height: int) -> NeighborTable:
    table = []
    for row in range(height):
        for col in range(width):
            entry = []
            for direction in topology.directions:
                n_row, n_col = topology.step((row, col), direction)
                if 0 <= n_row < height and 0 <= n_col < width:
                    entry.append(n_row * width + n_col)
                else:
                    entry.append(None)
            table.append(tuple(entry))
    return tuple(table)


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of a board at one moment: what the evaluator consumes."""

    topology: Topology
    width: int
    height: int
    shape_ids: tuple[str, ...]
    rotations: tuple[int, ...]
    ports: tuple[frozenset[Direction], ...]
    neighbors: NeighborTable

    def __len__(self) -> int:
        return len(self.ports)

    def coord(self, index: int) -> Coord:
        return divmod(index, self.width)

    def index(self, coord: Coord) -> int:
        row, col = coord
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise OutOfBoundsError(f"Cell {coord} is outside the board", coord)
        return row * self.width + col

    def ports_at(self, coord: Coord) -> frozenset[Direction]:
        return self.ports[self.index(coord)]


class Board:
    """Grid of tile instances (shape + rotation step).

    ``rotate`` is the only operation that changes tile state.
    """

    def __init__(
        self,
        topology: Topology,
        width: int,
        height: int,
        shapes: list[TileShape],
        rotations: list[int] | None = None,
    ) -> None:
        if width <= 0 or height <= 0:
            raise MalformedLevelError(
                f"Board dimensions must be positive, got {width}x{height}",
                LevelErrorReason.INVALID_DIMENSIONS,
                (width, height),
            )
        if len(shapes) != width * height:
            raise MalformedLevelError(
                f"Expected {width * height} cells for a {width}x{height} board, got {len(shapes)}",
                LevelErrorReason.DIMENSION_MISMATCH,
                len(shapes),
            )
        if rotations is not None and len(rotations) != len(shapes):
            raise MalformedLevelError(
                f"Expected {len(shapes)} rotations, got {len(rotations)}",
                LevelErrorReason.ROTATION_MISMATCH,
                len(rotations),
            )

        self.topology = topology
        self.width = width
        self.height = height
        self._shapes: list[TileShape] = list(shapes)
        if rotations is None:
            self._rotations = [0] * len(shapes)
        else:
            self._rotations = [r % s.period for r, s in zip(rotations, self._shapes)]
        self._neighbors = build_neighbor_table(topology, width, height)

    @classmethod
    def from_level(cls, level: Level, registry: TopologyRegistry | None = None) -> Board:
        """Construct a board from level data, raising MalformedLevelError on inconsistencies."""
        if registry is None:
            from connex.engine.registry import default_registry

            registry = default_registry

        if not registry.has(level.topology):
            raise MalformedLevelError(
                f"Unknown topology: {level.topology}",
                LevelErrorReason.UNKNOWN_TOPOLOGY,
                level.topology,
            )
        topology = registry.get(level.topology)
        catalog = registry.shapes(level.topology)

        shapes: list[TileShape] = []
        for i, shape_id in enumerate(level.shapes):
            shape = catalog.get(shape_id)
            if shape is None:
                raise MalformedLevelError(
                    f"Shape '{shape_id}' at cell {i} is not in the {level.topology} catalog",
                    LevelErrorReason.UNKNOWN_SHAPE,
                    shape_id,
                )
            shapes.append(shape)

        board = cls(topology, level.width, level.height, shapes, level.rotations)
        logger.debug(
            f"Built {level.width}x{level.height} {level.topology} board"
            f"{f' for level {level.name!r}' if level.name else ''}"
        )
        return board

    # ------------------------------------------------------------------ #
    #  Coordinates
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return len(self._shapes)

    def in_bounds(self, coord: Coord) -> bool:
        row, col = coord
        return 0 <= row < self.height and 0 <= col < self.width

    def index(self, coord: Coord) -> int:
        if not self.in_bounds(coord):
            raise OutOfBoundsError(
                f"Cell {coord} is outside the {self.width}x{self.height} board", coord
            )
        return coord[0] * self.width + coord[1]

    def coord(self, index: int) -> Coord:
        return divmod(index, self.width)

    def coords(self) -> Iterator[Coord]:
        for row in range(self.height):
            for col in range(self.width):
                yield row, col

    def neighbor(self, coord: Coord, direction: Direction) -> Coord | None:
        """Adjacent cell in ``direction``, or None at the board edge."""
        index = self.index(coord)
        if not self.topology.has_direction(direction):
            return None
        n = self._neighbors[index][self.topology.direction_order(direction)]
        return None if n is None else self.coord(n)

    @property
    def neighbor_table(self) -> NeighborTable:
        return self._neighbors

    # ------------------------------------------------------------------ #
    #  Tile state
    # ------------------------------------------------------------------ #

    def shape_at(self, coord: Coord) -> TileShape:
        return self._shapes[self.index(coord)]

    def rotation_at(self, coord: Coord) -> int:
        return self._rotations[self.index(coord)]

    def ports_at(self, coord: Coord) -> frozenset[Direction]:
        index = self.index(coord)
        return effective_ports(self._shapes[index], self._rotations[index])

    def ports_by_index(self, index: int) -> frozenset[Direction]:
        return effective_ports(self._shapes[index], self._rotations[index])

    def rotate(self, coord: Coord, delta: int = 1) -> None:
        """Advance the tile at ``coord`` by ``delta`` clockwise steps (negative turns back)."""
        index = self.index(coord)
        shape = self._shapes[index]
        self._rotations[index] = (self._rotations[index] + delta) % shape.period
        logger.debug(f"Rotated {shape.shape_id} at {coord} by {delta} -> {self._rotations[index]}")

    def rotations(self) -> list[int]:
        return list(self._rotations)

    def restore(self, rotations: list[int]) -> None:
        """Replace every rotation at once, e.g. to resume a saved game."""
        if len(rotations) != len(self._shapes):
            raise MalformedLevelError(
                f"Expected {len(self._shapes)} rotations, got {len(rotations)}",
                LevelErrorReason.ROTATION_MISMATCH,
                len(rotations),
            )
        self._rotations = [r % s.period for r, s in zip(rotations, self._shapes)]

    # ------------------------------------------------------------------ #
    #  Views
    # ------------------------------------------------------------------ #

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            topology=self.topology,
            width=self.width,
            height=self.height,
            shape_ids=tuple(s.shape_id for s in self._shapes),
            rotations=tuple(self._rotations),
            ports=tuple(
                effective_ports(s, r) for s, r in zip(self._shapes, self._rotations)
            ),
            neighbors=self._neighbors,
        )

    def view(self, mismatched: set[Coord] | frozenset[Coord] = frozenset(), solved: bool | None = None) -> BoardView:
        """Render-oriented description of every cell."""
        order = self.topology.direction_order
        cells = []
        for index, (shape, rotation) in enumerate(zip(self._shapes, self._rotations)):
            row, col = self.coord(index)
            cells.append(CellView(
                row=row,
                col=col,
                shape_id=shape.shape_id,
                kind=shape.kind.value,
                rotation=rotation,
                period=shape.period,
                ports=sorted(effective_ports(shape, rotation), key=order),
                mismatched=(row, col) in mismatched,
            ))
        return BoardView(
            topology=self.topology.name,
            width=self.width,
            height=self.height,
            cells=cells,
            solved=solved,
        )

    def to_level(self, name: str | None = None) -> Level:
        return Level(
            name=name,
            topology=self.topology.name,
            width=self.width,
            height=self.height,
            shapes=[s.shape_id for s in self._shapes],
            rotations=list(self._rotations),
        )
