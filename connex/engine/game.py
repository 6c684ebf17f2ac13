from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from connex.config import settings
from connex.engine.models import BoardView, Event, Level
from connex.puzzle.board import Board, BoardSnapshot
from connex.puzzle.evaluator import Evaluation, IncrementalEvaluator, evaluate
from connex.puzzle.levels import parse_level
from connex.puzzle.types import Coord

if TYPE_CHECKING:
    from connex.engine.registry import TopologyRegistry

logger = logging.getLogger(__name__)

# Event types
TILE_ROTATED = "tile_rotated"
PUZZLE_SOLVED = "puzzle_solved"
PUZZLE_UNSOLVED = "puzzle_unsolved"
GAME_RESET = "game_reset"
GAME_RESTORED = "game_restored"

Listener = Callable[[Event], None]


class Game:
    """
    Owns one board for a front end's event loop.

    Responsibilities:
    - Build the board from level data
    - Apply rotations and keep the evaluation current after each one
    - Report rotations and solved/unsolved transitions as events
    - Save/resume through rotation lists

    Single writer: callers serialize rotate/reset/restore calls.
    """

    def __init__(
        self,
        level: Level,
        registry: TopologyRegistry | None = None,
        incremental: bool | None = None,
        verify: bool | None = None,
    ) -> None:
        self.registry = registry
        self._incremental = settings.incremental_evaluation if incremental is None else incremental
        self._verify = settings.verify_incremental if verify is None else verify
        self._listeners: list[Listener] = []
        self._load(level)

    @classmethod
    def from_text(cls, text: str, name: str | None = None, **kwargs) -> Game:
        return cls(parse_level(text, name=name), **kwargs)

    def _load(self, level: Level) -> None:
        # A rejected level leaves the session untouched
        board = Board.from_level(level, self.registry)
        self.level = level
        self.board = board
        self._evaluator = IncrementalEvaluator(board) if self._incremental else None
        self._evaluation: Evaluation | None = None
        self._solved = self._is_solved_now()

    # ------------------------------------------------------------------ #
    #  Listeners
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, events: list[Event]) -> list[Event]:
        for event in events:
            for listener in list(self._listeners):
                listener(event)
        return events

    # ------------------------------------------------------------------ #
    #  Commands
    # ------------------------------------------------------------------ #

    def rotate(self, coord: Coord, delta: int = 1) -> list[Event]:
        """Rotate the tile at ``coord`` and return the resulting events."""
        self.board.rotate(coord, delta)
        if self._evaluator is not None:
            self._evaluator.update(coord)

        events = [Event(
            event_type=TILE_ROTATED,
            payload={
                "row": coord[0],
                "col": coord[1],
                "delta": delta,
                "rotation": self.board.rotation_at(coord),
            },
        )]
        events.extend(self._refresh())
        return self._emit(events)

    def reset(self, level: Level | None = None) -> list[Event]:
        """Reload the current level (or switch to ``level``)."""
        was_solved = self._solved
        self._load(level or self.level)
        logger.info(f"Reset game{f' to level {self.level.name!r}' if self.level.name else ''}")
        events = [Event(event_type=GAME_RESET, payload={"name": self.level.name})]
        events.extend(self._transition_events(was_solved))
        return self._emit(events)

    def restore(self, rotations: list[int]) -> list[Event]:
        """Resume from saved rotations."""
        was_solved = self._solved
        self.board.restore(rotations)
        if self._evaluator is not None:
            self._evaluator.rebuild()
        self._evaluation = None
        self._solved = self._is_solved_now()
        events = [Event(event_type=GAME_RESTORED)]
        events.extend(self._transition_events(was_solved))
        return self._emit(events)

    # ------------------------------------------------------------------ #
    #  Queries
    # ------------------------------------------------------------------ #

    def is_solved(self) -> bool:
        return self._solved

    def evaluation(self) -> Evaluation:
        if self._evaluation is None:
            self._evaluation = self._compute_evaluation()
        return self._evaluation

    def snapshot(self) -> BoardSnapshot:
        return self.board.snapshot()

    def view(self) -> BoardView:
        evaluation = self.evaluation()
        return self.board.view(mismatched=evaluation.mismatched, solved=evaluation.solved)

    def rotations(self) -> list[int]:
        return self.board.rotations()

    # ------------------------------------------------------------------ #
    #  Internal
    # ------------------------------------------------------------------ #

    def _refresh(self) -> list[Event]:
        was_solved = self._solved
        self._evaluation = None
        self._solved = self._is_solved_now()
        return self._transition_events(was_solved)

    def _transition_events(self, was_solved: bool) -> list[Event]:
        if self._solved == was_solved:
            return []
        if self._solved:
            logger.info(f"Puzzle solved{f': {self.level.name}' if self.level.name else ''}")
            return [Event(event_type=PUZZLE_SOLVED)]
        return [Event(event_type=PUZZLE_UNSOLVED)]

    def _is_solved_now(self) -> bool:
        if self._evaluator is None or self._verify:
            return self.evaluation().solved
        return self._evaluator.is_solved()

    def _compute_evaluation(self) -> Evaluation:
        if self._evaluator is None:
            return evaluate(self.board.snapshot())

        result = self._evaluator.evaluation()
        if self._verify:
            full = evaluate(self.board.snapshot())
            if full != result:
                logger.error(
                    f"Incremental evaluation diverged from full recomputation "
                    f"(solved {result.solved} vs {full.solved}, "
                    f"{len(result.dangling)} vs {len(full.dangling)} dangling ports); "
                    f"rebuilding"
                )
                self._evaluator.rebuild()
                return full
        return result
