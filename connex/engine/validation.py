from __future__ import annotations

from connex.puzzle.tiles import TileShape
from connex.puzzle.types import Topology


def validate_topology(topology: Topology, shapes: list[TileShape]) -> list[str]:
    """Run sanity checks on a topology and its shape catalog. Returns list of errors (empty = OK)."""
    errors: list[str] = []

    if not topology.directions:
        errors.append(f"Topology '{topology.name}' has no directions")
        return errors  # Can't proceed without directions

    if len(set(topology.directions)) != len(topology.directions):
        errors.append("Directions must be unique")

    for direction in topology.directions:
        if direction not in topology.offsets:
            errors.append(f"Missing offset for {direction.value}")
        if direction not in topology.inverse:
            errors.append(f"Missing inverse for {direction.value}")

    if errors:
        return errors

    for direction in topology.directions:
        inverse = topology.inverse[direction]
        if topology.inverse.get(inverse) != direction:
            errors.append(f"Inverse of {direction.value} does not map back")
            continue
        d_row, d_col = topology.offsets[direction]
        if topology.offsets[inverse] != (-d_row, -d_col):
            errors.append(f"Offset of {inverse.value} is not the negation of {direction.value}")
        if (d_row, d_col) == (0, 0):
            errors.append(f"Offset of {direction.value} does not move")

    # Verify shapes belong to this topology
    seen: set[str] = set()
    for shape in shapes:
        if shape.shape_id in seen:
            errors.append(f"Duplicate shape id: {shape.shape_id}")
        seen.add(shape.shape_id)
        if shape.topology != topology:
            errors.append(f"Shape '{shape.shape_id}' is defined for topology '{shape.topology.name}'")
        stray = [d.value for d in shape.ports if not topology.has_direction(d)]
        if stray:
            errors.append(f"Shape '{shape.shape_id}' has ports outside the topology: {stray}")

    return errors
