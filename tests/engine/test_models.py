"""Tests for level and view models."""

import pytest

from connex.engine.errors import LevelErrorReason, MalformedLevelError, OutOfBoundsError
from connex.engine.models import BoardView, Event, Level


class TestLevelFromCellMap:
    def test_builds_row_major_shapes(self):
        cells = {(0, 0): "corner", (0, 1): "tee", (1, 0): "blank", (1, 1): "cross"}
        level = Level.from_cell_map(2, 2, cells, name="grid")
        assert level.shapes == ["corner", "tee", "blank", "cross"]
        assert level.rotations is None
        assert level.name == "grid"

    def test_partial_rotations_default_to_zero(self):
        cells = {(0, 0): "corner", (0, 1): "tee"}
        level = Level.from_cell_map(2, 1, cells, rotations={(0, 1): 2})
        assert level.rotations == [0, 2]

    def test_missing_cell(self):
        with pytest.raises(MalformedLevelError) as exc:
            Level.from_cell_map(2, 1, {(0, 1): "blank"})
        assert exc.value.reason == LevelErrorReason.MISSING_CELL
        assert exc.value.detail == (0, 0)

    def test_cell_outside_board(self):
        cells = {(0, 0): "blank", (3, 0): "blank"}
        with pytest.raises(MalformedLevelError) as exc:
            Level.from_cell_map(1, 1, cells)
        assert exc.value.reason == LevelErrorReason.UNEXPECTED_CELL

    def test_rotation_outside_board(self):
        with pytest.raises(MalformedLevelError) as exc:
            Level.from_cell_map(1, 1, {(0, 0): "blank"}, rotations={(0, 5): 1})
        assert exc.value.reason == LevelErrorReason.UNEXPECTED_CELL

    def test_non_positive_size(self):
        with pytest.raises(MalformedLevelError) as exc:
            Level.from_cell_map(0, 1, {})
        assert exc.value.reason == LevelErrorReason.INVALID_DIMENSIONS


class TestSerialization:
    def test_level_json_round_trip(self, line_level):
        assert Level.model_validate_json(line_level.model_dump_json()) == line_level

    def test_board_view_json(self, ring_board):
        view = ring_board.view(solved=True)
        data = view.model_dump(mode="json")
        assert data["solved"] is True
        assert data["cells"][0]["ports"] == ["E", "S"]
        assert BoardView.model_validate(data) == view

    def test_event_payload_defaults_empty(self):
        assert Event(event_type="puzzle_solved").payload == {}


class TestErrors:
    def test_out_of_bounds_carries_coord(self):
        error = OutOfBoundsError("nope", (9, 9))
        assert error.coord == (9, 9)
        assert str(error) == "nope"

    def test_malformed_level_carries_reason(self):
        error = MalformedLevelError("bad", LevelErrorReason.UNKNOWN_SHAPE, "spiral")
        assert error.reason is LevelErrorReason.UNKNOWN_SHAPE
        assert error.reason.value == "unknown_shape"
        assert error.detail == "spiral"
