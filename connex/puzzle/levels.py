"""Level decoding: the compact square text format and dict/JSON level data.

Text format (square boards only)::

    <height>,<width>
    <one character per cell, row-major; line breaks are ignored>

Characters (the digits follow a numeric keypad: the digit's position on the
pad shows which sides connect)::

    ' '            blank
    ^ > v <        endpoint facing N, E, S, W
    /  -           straight, vertical / horizontal
    1 7 9 3        corner joining N+E, E+S, S+W, W+N
    8 6 2 4        tee with the N, E, S, W side closed
    5              cross
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from connex.config import settings
from connex.engine.errors import LevelErrorReason, MalformedLevelError
from connex.engine.models import Level
from connex.puzzle.tiles import SQUARE_SHAPES, effective_ports
from connex.puzzle.types import SQUARE, key_to_coord

# char -> (shape_id, rotation step)
LEVEL_CHARS: dict[str, tuple[str, int]] = {
    " ": ("blank", 0),
    "^": ("endpoint", 0),
    ">": ("endpoint", 1),
    "v": ("endpoint", 2),
    "<": ("endpoint", 3),
    "/": ("straight", 0),
    "-": ("straight", 1),
    "1": ("corner", 0),
    "7": ("corner", 1),
    "9": ("corner", 2),
    "3": ("corner", 3),
    "8": ("tee", 0),
    "6": ("tee", 1),
    "2": ("tee", 2),
    "4": ("tee", 3),
    "5": ("cross", 0),
}

_DIGITS = re.compile(r"[0-9]+")

_SHAPE_LOOKUP = {s.shape_id: s for s in SQUARE_SHAPES}

# (shape_id, effective ports) -> char, so any equivalent rotation encodes the same way
_CHAR_LOOKUP = {
    (shape_id, effective_ports(_SHAPE_LOOKUP[shape_id], rotation)): char
    for char, (shape_id, rotation) in LEVEL_CHARS.items()
}


def parse_level(text: str, name: str | None = None) -> Level:
    """Decode a square level from its text form."""
    lines = text.splitlines()
    if not lines:
        raise MalformedLevelError("Missing size line", LevelErrorReason.PARSE_ERROR)

    header = lines[0].split(",")
    if len(header) != 2:
        raise MalformedLevelError(
            f"Size line must be '<height>,<width>', got {lines[0]!r}",
            LevelErrorReason.PARSE_ERROR,
            lines[0],
        )
    # Plain ASCII digits only: no signs or padding
    if not all(_DIGITS.fullmatch(part) for part in header):
        raise MalformedLevelError(
            f"Size line must hold two integers, got {lines[0]!r}",
            LevelErrorReason.PARSE_ERROR,
            lines[0],
        )
    height, width = int(header[0]), int(header[1])

    if height <= 0 or width <= 0:
        raise MalformedLevelError(
            f"Board dimensions must be positive, got {width}x{height}",
            LevelErrorReason.INVALID_DIMENSIONS,
            (width, height),
        )

    shapes: list[str] = []
    rotations: list[int] = []
    for line in lines[1:]:
        for ch in line:
            entry = LEVEL_CHARS.get(ch)
            if entry is None:
                raise MalformedLevelError(
                    f"Invalid block char: {ch!r}",
                    LevelErrorReason.PARSE_ERROR,
                    ch,
                )
            shapes.append(entry[0])
            rotations.append(entry[1])

    if len(shapes) != height * width:
        raise MalformedLevelError(
            f"Expected {height * width} cells for a {width}x{height} board, got {len(shapes)}",
            LevelErrorReason.DIMENSION_MISMATCH,
            len(shapes),
        )

    return Level(
        name=name,
        topology=SQUARE.name,
        width=width,
        height=height,
        shapes=shapes,
        rotations=rotations,
    )


def format_level(level: Level) -> str:
    """Encode a square level in the text form, one board row per line."""
    if level.topology != SQUARE.name:
        raise MalformedLevelError(
            f"Only square levels have a text form, got {level.topology}",
            LevelErrorReason.UNKNOWN_TOPOLOGY,
            level.topology,
        )
    if len(level.shapes) != level.width * level.height:
        raise MalformedLevelError(
            f"Expected {level.width * level.height} cells, got {len(level.shapes)}",
            LevelErrorReason.DIMENSION_MISMATCH,
            len(level.shapes),
        )

    if level.rotations is not None and len(level.rotations) != len(level.shapes):
        raise MalformedLevelError(
            f"Expected {len(level.shapes)} rotations, got {len(level.rotations)}",
            LevelErrorReason.ROTATION_MISMATCH,
            len(level.rotations),
        )

    rotations = level.rotations if level.rotations is not None else [0] * len(level.shapes)
    chars: list[str] = []
    for shape_id, rotation in zip(level.shapes, rotations):
        shape = _SHAPE_LOOKUP.get(shape_id)
        if shape is None:
            raise MalformedLevelError(
                f"Shape '{shape_id}' is not in the square catalog",
                LevelErrorReason.UNKNOWN_SHAPE,
                shape_id,
            )
        chars.append(_CHAR_LOOKUP[(shape_id, effective_ports(shape, rotation))])

    rows = [
        "".join(chars[row * level.width:(row + 1) * level.width])
        for row in range(level.height)
    ]
    return "\n".join([f"{level.height},{level.width}", *rows]) + "\n"


def load_level(data: str | bytes | dict) -> Level:
    """Decode level data from a JSON string or an already-parsed dict.

    Besides the flat ``shapes`` list, a ``cells`` mapping of ``"row,col"``
    keys to shape ids is accepted (with an optional ``"row,col"`` keyed
    ``rotations`` mapping).
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedLevelError(
                f"Level is not valid JSON: {e}", LevelErrorReason.PARSE_ERROR
            ) from e

    if not isinstance(data, dict):
        raise MalformedLevelError(
            "Level data must be an object", LevelErrorReason.INVALID_DATA
        )

    data = {"topology": settings.default_topology, **data}

    if "cells" in data:
        return _load_cell_map(data)

    try:
        return Level.model_validate(data)
    except ValidationError as e:
        raise MalformedLevelError(
            f"Invalid level data: {e.error_count()} error(s)",
            LevelErrorReason.INVALID_DATA,
            e.errors(),
        ) from e


def _load_cell_map(data: dict) -> Level:
    try:
        cells = {key_to_coord(k): v for k, v in data["cells"].items()}
        rotations = None
        if data.get("rotations") is not None:
            rotations = {key_to_coord(k): int(v) for k, v in data["rotations"].items()}
        width = int(data["width"])
        height = int(data["height"])
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedLevelError(
            f"Invalid cell map: {e}", LevelErrorReason.INVALID_DATA
        ) from e

    try:
        return Level.from_cell_map(
            width=width,
            height=height,
            cells=cells,
            rotations=rotations,
            topology=data["topology"],
            name=data.get("name"),
        )
    except ValidationError as e:
        raise MalformedLevelError(
            f"Invalid level data: {e.error_count()} error(s)",
            LevelErrorReason.INVALID_DATA,
            e.errors(),
        ) from e
