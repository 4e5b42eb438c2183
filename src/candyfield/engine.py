"""Public entry points: build a board, play moves, ask whether the level is over.

Wires an esper World and the event bus to the board systems, the same way
the interactive front end wires its systems, and turns the events a move
produces into a single MoveResult for the caller. Renderers and sound
players subscribe to the board's event bus (``cells_dirty``, ``sound_cue``).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from esper import World

from candyfield.constants import DEFAULT_SEED
from candyfield.events.bus import (
    EVENT_MOVE_RESOLVED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EventBus,
)
from candyfield.levels import LevelRegistry, default_level_registry, ensure_default_levels_registered
from candyfield.systems.board import BoardSystem, LayoutCell
from candyfield.systems.board_ops import (
    Position,
    begin_move,
    dirty_cells_since_move,
    get_code,
    get_progress,
    level_lost,
    level_won,
)
from candyfield.systems.match_resolution import MatchResolutionSystem
from candyfield.systems.move import MoveSystem
from candyfield.tiles import Tile, decode_tile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MoveResult:
    accepted: bool
    score_delta: int = 0
    dirty_cells: List[Tuple[int, int, int]] = field(default_factory=list)
    jelly_remaining: int = 0
    moves_remaining: int = 0
    reason: Optional[str] = None


class GameBoard:
    """One level in play: the ECS world, its event bus and its systems.

    Calls to apply_move on one board must not overlap.
    """

    def __init__(self, world: World, event_bus: EventBus, board_system: BoardSystem):
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.move_system = MoveSystem(world, event_bus)
        self.match_resolution_system = MatchResolutionSystem(world, event_bus)
        self._outcome: dict = {}
        self.event_bus.subscribe(EVENT_TILE_SWAP_INVALID, self._on_rejected)
        self.event_bus.subscribe(EVENT_MOVE_RESOLVED, self._on_resolved)

    def _on_rejected(self, sender, **kwargs):
        if kwargs.get('world') is self.world:
            self._outcome = dict(kwargs, accepted=False)

    def _on_resolved(self, sender, **kwargs):
        if kwargs.get('world') is self.world:
            self._outcome = dict(kwargs, accepted=True)

    @property
    def score(self) -> int:
        return get_progress(self.world).score

    @property
    def moves_remaining(self) -> int:
        return get_progress(self.world).moves_remaining

    @property
    def jelly_remaining(self) -> int:
        return get_progress(self.world).jelly_remaining

    def code_at(self, pos: Position) -> int:
        return get_code(self.world, pos)

    def tile_at(self, pos: Position) -> Tile:
        return decode_tile(get_code(self.world, pos))

    def apply_move(self, src: Position, dst: Position) -> MoveResult:
        begin_move(self.world)
        self._outcome = {}
        self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, world=self.world, src=tuple(src), dst=tuple(dst))
        outcome = self._outcome
        progress = get_progress(self.world)
        if not outcome.get('accepted'):
            return MoveResult(
                accepted=False,
                jelly_remaining=progress.jelly_remaining,
                moves_remaining=progress.moves_remaining,
                reason=outcome.get('reason'),
            )
        return MoveResult(
            accepted=True,
            score_delta=outcome['score_delta'],
            dirty_cells=dirty_cells_since_move(self.world),
            jelly_remaining=progress.jelly_remaining,
            moves_remaining=progress.moves_remaining,
        )


def new_board(
    layout: Sequence[Sequence[LayoutCell]],
    moves_budget: int,
    seed: int = DEFAULT_SEED,
    *,
    event_bus: EventBus | None = None,
    populate: bool = True,
) -> GameBoard:
    """Create a board for a background layout and fill it with candies.

    With ``populate=False`` every playable cell starts empty, which lets
    callers (and tests) lay out candies by hand.
    """
    event_bus = event_bus or EventBus()
    world = World()
    board_system = BoardSystem(world, event_bus, layout, moves_budget, seed=seed, populate=populate)
    logger.debug("New %dx%d board, %d moves, seed %#06x", len(layout), len(layout[0]), moves_budget, seed)
    return GameBoard(world, event_bus, board_system)


def new_board_for_level(
    number: int,
    seed: int = DEFAULT_SEED,
    *,
    registry: LevelRegistry | None = None,
    event_bus: EventBus | None = None,
) -> GameBoard:
    if registry is None:
        ensure_default_levels_registered()
        registry = default_level_registry
    level = registry.get(number)
    return new_board(level.layout, level.moves, seed, event_bus=event_bus)


def apply_move(board: GameBoard, src: Position, dst: Position) -> MoveResult:
    return board.apply_move(src, dst)


def is_won(board: GameBoard) -> bool:
    return level_won(board.world)


def is_lost(board: GameBoard) -> bool:
    return level_lost(board.world)
