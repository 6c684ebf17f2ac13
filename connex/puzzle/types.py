"""Grid topologies: directions, neighbour offsets and inverse directions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# (row, col)
Coord = tuple[int, int]


class Direction(str, Enum):
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


@dataclass(frozen=True)
class Topology:
    """A grid topology.

    ``directions`` is the fixed clockwise cyclic order used for rotation;
    one rotation step moves every port to the next direction in it.
    """

    name: str
    directions: tuple[Direction, ...]
    offsets: dict[Direction, tuple[int, int]]
    inverse: dict[Direction, Direction]
    _order: dict[Direction, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        order: dict[Direction, int] = {}
        for i, direction in enumerate(self.directions):
            order.setdefault(direction, i)
        object.__setattr__(self, "_order", order)

    def __hash__(self) -> int:
        return hash((self.name, self.directions))

    @property
    def size(self) -> int:
        return len(self.directions)

    def has_direction(self, direction: Direction) -> bool:
        return direction in self.offsets

    def rotate_direction(self, direction: Direction, steps: int) -> Direction:
        """Rotate a single direction clockwise by ``steps`` (negative = counter-clockwise)."""
        idx = self._order[direction]
        return self.directions[(idx + steps) % self.size]

    def opposite(self, direction: Direction) -> Direction:
        return self.inverse[direction]

    def step(self, coord: Coord, direction: Direction) -> Coord:
        """Coordinate one step away, ignoring board bounds."""
        d_row, d_col = self.offsets[direction]
        return coord[0] + d_row, coord[1] + d_col

    def direction_order(self, direction: Direction) -> int:
        return self._order[direction]


SQUARE = Topology(
    name="square",
    directions=(Direction.N, Direction.E, Direction.S, Direction.W),
    offsets={
        Direction.N: (-1, 0),
        Direction.E: (0, 1),
        Direction.S: (1, 0),
        Direction.W: (0, -1),
    },
    inverse={
        Direction.N: Direction.S,
        Direction.E: Direction.W,
        Direction.S: Direction.N,
        Direction.W: Direction.E,
    },
)

# Pointy-top hexes in axial coordinates: row is r, col is q.
# A width x height board is a parallelogram of cells.
HEX = Topology(
    name="hex",
    directions=(
        Direction.NE, Direction.E, Direction.SE,
        Direction.SW, Direction.W, Direction.NW,
    ),
    offsets={
        Direction.NE: (-1, 1),
        Direction.E: (0, 1),
        Direction.SE: (1, 0),
        Direction.SW: (1, -1),
        Direction.W: (0, -1),
        Direction.NW: (-1, 0),
    },
    inverse={
        Direction.NE: Direction.SW,
        Direction.E: Direction.W,
        Direction.SE: Direction.NW,
        Direction.SW: Direction.NE,
        Direction.W: Direction.E,
        Direction.NW: Direction.SE,
    },
)


def key_to_coord(key: str) -> Coord:
    row, col = key.split(",")
    return int(row), int(col)
