from __future__ import annotations

from connex.engine.errors import (
    ConnexError,
    LevelErrorReason,
    MalformedLevelError,
    OutOfBoundsError,
)
from connex.engine.game import Game
from connex.engine.models import BoardView, CellView, Event, Level
from connex.engine.registry import TopologyRegistry, default_registry
from connex.puzzle.board import Board, BoardSnapshot
from connex.puzzle.evaluator import (
    Evaluation,
    IncrementalEvaluator,
    MatchGraph,
    build_match_graph,
    evaluate,
    is_solved,
)
from connex.puzzle.levels import format_level, load_level, parse_level
from connex.puzzle.tiles import ShapeKind, TileShape, effective_ports, rotation_period
from connex.puzzle.types import HEX, SQUARE, Coord, Direction, Topology

__all__ = [
    "Board",
    "BoardSnapshot",
    "BoardView",
    "CellView",
    "ConnexError",
    "Coord",
    "Direction",
    "Evaluation",
    "Event",
    "Game",
    "HEX",
    "IncrementalEvaluator",
    "Level",
    "LevelErrorReason",
    "MalformedLevelError",
    "MatchGraph",
    "OutOfBoundsError",
    "SQUARE",
    "ShapeKind",
    "TileShape",
    "Topology",
    "TopologyRegistry",
    "build_match_graph",
    "default_registry",
    "effective_ports",
    "evaluate",
    "format_level",
    "is_solved",
    "load_level",
    "parse_level",
    "rotation_period",
]
