"""Tests for the topology registry and topology validation."""

import pytest

from connex.engine.registry import TopologyRegistry, default_registry
from connex.engine.validation import validate_topology
from connex.puzzle.tiles import HEX_SHAPES, SQUARE_SHAPES, ShapeKind, TileShape
from connex.puzzle.types import HEX, SQUARE, Direction, Topology

# Square grid whose inverse table is wrong for E/W
BROKEN = Topology(
    name="broken",
    directions=(Direction.N, Direction.E, Direction.S, Direction.W),
    offsets={
        Direction.N: (-1, 0),
        Direction.E: (0, 1),
        Direction.S: (1, 0),
        Direction.W: (0, -1),
    },
    inverse={
        Direction.N: Direction.S,
        Direction.E: Direction.E,
        Direction.S: Direction.N,
        Direction.W: Direction.E,
    },
)


class TestValidateTopology:
    def test_builtin_topologies_are_valid(self):
        assert validate_topology(SQUARE, SQUARE_SHAPES) == []
        assert validate_topology(HEX, HEX_SHAPES) == []

    def test_bad_inverse_is_reported(self):
        errors = validate_topology(BROKEN, [])
        assert "Inverse of W does not map back" in errors
        assert "Offset of E is not the negation of E" in errors

    def test_missing_offset_is_reported(self):
        topology = Topology(
            name="partial",
            directions=(Direction.N, Direction.S),
            offsets={Direction.N: (-1, 0)},
            inverse={Direction.N: Direction.S, Direction.S: Direction.N},
        )
        assert validate_topology(topology, []) == ["Missing offset for S"]

    def test_empty_topology(self):
        topology = Topology(name="empty", directions=(), offsets={}, inverse={})
        assert validate_topology(topology, []) == ["Topology 'empty' has no directions"]

    def test_shapes_from_other_topology_are_reported(self):
        errors = validate_topology(SQUARE, HEX_SHAPES[:2])
        assert any("defined for topology 'hex'" in e for e in errors)
        assert any("ports outside the topology" in e for e in errors)

    def test_duplicate_shape_ids_are_reported(self):
        twin = TileShape(shape_id="corner", kind=ShapeKind.CORNER, topology=SQUARE,
                         ports=frozenset({Direction.S, Direction.W}))
        errors = validate_topology(SQUARE, SQUARE_SHAPES + [twin])
        assert errors == ["Duplicate shape id: corner"]


class TestTopologyRegistry:
    def test_register_and_get(self):
        registry = TopologyRegistry()
        registry.register(SQUARE, SQUARE_SHAPES)
        assert registry.get("square") is SQUARE
        assert registry.has("square")
        assert set(registry.shapes("square")) == {s.shape_id for s in SQUARE_SHAPES}

    def test_register_twice_raises(self):
        registry = TopologyRegistry()
        registry.register(SQUARE, SQUARE_SHAPES)
        with pytest.raises(ValueError, match="already registered"):
            registry.register(SQUARE, SQUARE_SHAPES)

    def test_invalid_topology_rejected(self):
        registry = TopologyRegistry()
        with pytest.raises(ValueError, match="Invalid topology 'broken'"):
            registry.register(BROKEN, [])
        assert not registry.has("broken")

    def test_unknown_name_raises(self):
        registry = TopologyRegistry()
        with pytest.raises(KeyError):
            registry.get("square")
        with pytest.raises(KeyError):
            registry.shapes("square")

    def test_default_registry_lists_builtins(self):
        listed = {t["name"]: t for t in default_registry.list_topologies()}
        assert set(listed) == {"square", "hex"}
        assert listed["square"]["directions"] == ["N", "E", "S", "W"]
        assert "fork" in listed["hex"]["shapes"]
