"""Tile shape catalogs and rotation of connector ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from connex.puzzle.types import HEX, SQUARE, Direction, Topology


class ShapeKind(str, Enum):
    BLANK = "blank"
    ENDPOINT = "endpoint"
    STRAIGHT = "straight"
    CORNER = "corner"
    TEE = "tee"
    CROSS = "cross"
    # hex only
    BEND = "bend"
    ARC = "arc"
    FORK = "fork"
    CLAW = "claw"


def rotate_ports(
    topology: Topology,
    ports: frozenset[Direction],
    steps: int,
) -> frozenset[Direction]:
    """Rotate a port set clockwise by ``steps`` along the topology's cyclic order."""
    if steps % topology.size == 0:
        return ports
    return frozenset(topology.rotate_direction(d, steps) for d in ports)


def _smallest_period(topology: Topology, ports: frozenset[Direction]) -> int:
    for steps in range(1, topology.size + 1):
        if rotate_ports(topology, ports, steps) == ports:
            return steps
    return topology.size


@dataclass(frozen=True)
class TileShape:
    """Static definition of a connector shape.

    ``ports`` are the open sides in the reference (zero) rotation. Shapes are
    shared by every tile that uses them and never change.
    """

    shape_id: str
    kind: ShapeKind
    topology: Topology
    ports: frozenset[Direction]
    period: int = field(init=False)
    _rotated: tuple[frozenset[Direction], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        period = _smallest_period(self.topology, self.ports)
        object.__setattr__(self, "period", period)
        object.__setattr__(
            self,
            "_rotated",
            tuple(rotate_ports(self.topology, self.ports, s) for s in range(period)),
        )

    @property
    def is_blank(self) -> bool:
        return not self.ports


def effective_ports(shape: TileShape, rotation_step: int) -> frozenset[Direction]:
    """Open directions of ``shape`` after ``rotation_step`` clockwise steps."""
    return shape._rotated[rotation_step % shape.period]


def rotation_period(shape: TileShape) -> int:
    """Number of distinct rotation states before the port set repeats."""
    return shape.period


def _catalog(topology: Topology, entries: list[tuple[str, ShapeKind, list[Direction]]]) -> list[TileShape]:
    return [
        TileShape(shape_id=shape_id, kind=kind, topology=topology, ports=frozenset(ports))
        for shape_id, kind, ports in entries
    ]


N, E, S, W = Direction.N, Direction.E, Direction.S, Direction.W
NE, SE, SW, NW = Direction.NE, Direction.SE, Direction.SW, Direction.NW

SQUARE_SHAPES: list[TileShape] = _catalog(SQUARE, [
    ("blank", ShapeKind.BLANK, []),
    ("endpoint", ShapeKind.ENDPOINT, [N]),
    ("straight", ShapeKind.STRAIGHT, [N, S]),
    ("corner", ShapeKind.CORNER, [N, E]),
    # Missing side is N in the reference rotation
    ("tee", ShapeKind.TEE, [E, S, W]),
    ("cross", ShapeKind.CROSS, [N, E, S, W]),
])

HEX_SHAPES: list[TileShape] = _catalog(HEX, [
    ("blank", ShapeKind.BLANK, []),
    ("endpoint", ShapeKind.ENDPOINT, [NE]),
    ("bend", ShapeKind.BEND, [NE, E]),
    ("arc", ShapeKind.ARC, [NE, SE]),
    ("straight", ShapeKind.STRAIGHT, [NE, SW]),
    ("fork", ShapeKind.FORK, [NE, SE, W]),
    ("claw", ShapeKind.CLAW, [NE, E, SE]),
    ("cross", ShapeKind.CROSS, [NE, E, SE, SW, W, NW]),
])

SHAPE_CATALOGS: dict[str, list[TileShape]] = {
    SQUARE.name: SQUARE_SHAPES,
    HEX.name: HEX_SHAPES,
}
