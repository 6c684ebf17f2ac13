from __future__ import annotations

from enum import Enum
from typing import Any


class LevelErrorReason(str, Enum):
    INVALID_DIMENSIONS = "invalid_dimensions"
    DIMENSION_MISMATCH = "dimension_mismatch"
    ROTATION_MISMATCH = "rotation_mismatch"
    UNKNOWN_SHAPE = "unknown_shape"
    UNKNOWN_TOPOLOGY = "unknown_topology"
    MISSING_CELL = "missing_cell"
    UNEXPECTED_CELL = "unexpected_cell"
    PARSE_ERROR = "parse_error"
    INVALID_DATA = "invalid_data"


class ConnexError(Exception):
    """Base class for puzzle engine errors."""
    pass


class MalformedLevelError(ConnexError):
    """Level data is inconsistent and cannot be turned into a board."""

    def __init__(self, message: str, reason: LevelErrorReason, detail: Any = None):
        self.message = message
        self.reason = reason
        self.detail = detail
        super().__init__(message)


class OutOfBoundsError(ConnexError):
    """A coordinate outside the board was used."""

    def __init__(self, message: str, coord: tuple[int, int]):
        self.message = message
        self.coord = coord
        super().__init__(message)
