import logging
from typing import List, Tuple

from esper import World

from candyfield.errors import InvariantViolation
from candyfield.events.bus import (
    CUE_DESWIRL,
    CUE_EXPLOSION,
    CUE_RESHUFFLE,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_LEVEL_LOST,
    EVENT_LEVEL_WON,
    EVENT_MATCH_FOUND,
    EVENT_MOVE_RESOLVED,
    EVENT_SOUND_CUE,
    EVENT_TILE_SWAP_VALID,
    EventBus,
    combo_cue,
)
from candyfield.systems.board_ops import (
    count_jelly,
    flush_dirty,
    get_progress,
    get_turn_state,
    level_lost,
    level_won,
    marked_positions,
)
from candyfield.systems.gravity import SettleReport, apply_gravity, explode_marked
from candyfield.systems.match import resolve_all_runs
from candyfield.systems.reshuffle import reshuffle, reshuffle_needed

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Runs an accepted swap to completion.

    Explodes what the swap marked, lets the board settle, keeps resolving
    chain-reaction runs until none are left, books the move and reshuffles a
    board that has no legal move left. Everything happens synchronously
    inside the ``tile_swap_valid`` handler.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self.on_swap_valid)

    def on_swap_valid(self, sender, **kwargs):
        if kwargs.get('world') is not self.world:
            return
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        state = get_turn_state(self.world)
        state.cascade_depth = 1
        flush_dirty(self.world, self.event_bus, phase="swap")
        positions = marked_positions(self.world)
        self.event_bus.emit(EVENT_MATCH_FOUND, world=self.world, positions=positions, depth=1)
        self.event_bus.emit(EVENT_SOUND_CUE, world=self.world, cue=CUE_EXPLOSION)
        self._settle()
        while resolve_all_runs(self.world):
            state.cascade_depth += 1
            positions = marked_positions(self.world)
            self.event_bus.emit(EVENT_CASCADE_STEP, world=self.world, depth=state.cascade_depth, positions=positions)
            self.event_bus.emit(EVENT_MATCH_FOUND, world=self.world, positions=positions, depth=state.cascade_depth)
            self.event_bus.emit(EVENT_SOUND_CUE, world=self.world, cue=combo_cue(state.cascade_depth))
            self._settle()
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, world=self.world, depth=state.cascade_depth)
        leftover = marked_positions(self.world)
        if leftover:
            raise InvariantViolation(f"Cells still marked after cascade: {leftover}")

        progress = get_progress(self.world)
        progress.moves_remaining -= 1
        progress.jelly_remaining = count_jelly(self.world)
        logger.debug(
            "Move %s -> %s resolved in %d step(s); score %d, moves %d, jelly %d",
            src, dst, state.cascade_depth, progress.score,
            progress.moves_remaining, progress.jelly_remaining,
        )

        if reshuffle_needed(self.world):
            attempts = reshuffle(self.world)
            self.event_bus.emit(EVENT_BOARD_RESHUFFLED, world=self.world, attempts=attempts)
            self.event_bus.emit(EVENT_SOUND_CUE, world=self.world, cue=CUE_RESHUFFLE)
            flush_dirty(self.world, self.event_bus, phase="reshuffle")

        self.event_bus.emit(
            EVENT_MOVE_RESOLVED,
            world=self.world,
            src=src,
            dst=dst,
            score_delta=progress.score - state.score_at_start,
            moves_remaining=progress.moves_remaining,
            jelly_remaining=progress.jelly_remaining,
        )
        # A level is won when a move clears its last jelly, not before.
        if level_won(self.world) and state.jelly_at_start > 0:
            progress.finished = True
            self.event_bus.emit(
                EVENT_LEVEL_WON, world=self.world, score=progress.score, moves_remaining=progress.moves_remaining,
            )
        elif level_lost(self.world):
            progress.finished = True
            self.event_bus.emit(
                EVENT_LEVEL_LOST, world=self.world, score=progress.score, jelly_remaining=progress.jelly_remaining,
            )

    def _settle(self) -> SettleReport:
        report = explode_marked(self.world)
        for _ in report.swirls_removed:
            self.event_bus.emit(EVENT_SOUND_CUE, world=self.world, cue=CUE_DESWIRL)
        flush_dirty(self.world, self.event_bus, phase="explode")
        apply_gravity(self.world, report)
        flush_dirty(self.world, self.event_bus, phase="settle")
        return report
