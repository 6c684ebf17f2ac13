from __future__ import annotations

import pytest

from connex.engine.models import Level
from connex.engine.registry import create_default_registry
from connex.puzzle.board import Board
from connex.puzzle.levels import parse_level

# 2x4 ring of corners and horizontal straights
RING_SOLVED = "2,4\n7--9\n1--3\n"


@pytest.fixture
def registry():
    """A fresh registry with the built-in square and hex topologies."""
    return create_default_registry()


@pytest.fixture
def ring_board() -> Board:
    return Board.from_level(parse_level(RING_SOLVED, name="ring"))


@pytest.fixture
def line_level() -> Level:
    """1x3 row: endpoint, straight, endpoint, aligned into one line."""
    return Level(
        name="line",
        width=3,
        height=1,
        shapes=["endpoint", "straight", "endpoint"],
        rotations=[1, 1, 3],
    )


@pytest.fixture
def hex_triangle_level() -> Level:
    """2x2 hex parallelogram: three bends form a closed triangle, one blank."""
    return Level(
        name="triangle",
        topology="hex",
        width=2,
        height=2,
        shapes=["bend", "bend", "bend", "blank"],
        rotations=[1, 3, 5, 0],
    )
