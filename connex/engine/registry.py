from __future__ import annotations

import logging

from connex.engine.validation import validate_topology
from connex.puzzle.tiles import SHAPE_CATALOGS, TileShape
from connex.puzzle.types import HEX, SQUARE, Topology

logger = logging.getLogger(__name__)


class TopologyRegistry:
    """Registers grid topologies together with their closed shape catalogs."""

    def __init__(self) -> None:
        self._topologies: dict[str, Topology] = {}
        self._shapes: dict[str, dict[str, TileShape]] = {}

    def register(self, topology: Topology, shapes: list[TileShape]) -> None:
        name = topology.name
        if name in self._topologies:
            raise ValueError(f"Topology '{name}' already registered")
        errors = validate_topology(topology, shapes)
        if errors:
            logger.warning(f"Rejected topology '{name}': {'; '.join(errors)}")
            raise ValueError(f"Invalid topology '{name}': {'; '.join(errors)}")
        self._topologies[name] = topology
        self._shapes[name] = {s.shape_id: s for s in shapes}
        logger.debug(f"Registered topology '{name}' with {len(shapes)} shapes")

    def get(self, name: str) -> Topology:
        if name not in self._topologies:
            raise KeyError(f"Unknown topology: {name}")
        return self._topologies[name]

    def shapes(self, name: str) -> dict[str, TileShape]:
        if name not in self._shapes:
            raise KeyError(f"Unknown topology: {name}")
        return self._shapes[name]

    def has(self, name: str) -> bool:
        return name in self._topologies

    def list_topologies(self) -> list[dict]:
        return [
            {
                "name": t.name,
                "directions": [d.value for d in t.directions],
                "shapes": sorted(self._shapes[t.name]),
            }
            for t in self._topologies.values()
        ]


def create_default_registry() -> TopologyRegistry:
    registry = TopologyRegistry()
    for topology in (SQUARE, HEX):
        registry.register(topology, SHAPE_CATALOGS[topology.name])
    return registry


default_registry = create_default_registry()
