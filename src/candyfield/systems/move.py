from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from esper import World

from candyfield.events.bus import (
    CUE_SPECIAL_CREATED,
    CUE_SWAP_INVALID,
    EVENT_COMBO_TRIGGERED,
    EVENT_SOUND_CUE,
    EVENT_SPECIAL_CREATED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from candyfield.systems.board_ops import (
    Position,
    background_at,
    get_code,
    get_progress,
    get_turn_state,
    in_bounds,
    is_adjacent,
    level_over,
    marked_positions,
    swap_codes,
    touch,
)
from candyfield.systems.match import has_run_at, scan_horizontal, scan_vertical
from candyfield.systems.special import classify_special
from candyfield.systems.trigger import colourbomb_match, stripes_match
from candyfield.tiles import (
    candy_match,
    is_colour,
    is_colourbomb,
    is_empty,
    is_plain,
    is_striped,
)

logger = logging.getLogger(__name__)

REASON_NOT_PERMITTED = "not_permitted"
REASON_NO_MATCH = "no_match"
REASON_LEVEL_OVER = "level_over"


@dataclass(slots=True)
class SwapResolution:
    """What a swap attempt did to the board."""
    success: bool
    reason: Optional[str] = None
    combos: List[str] = field(default_factory=list)
    specials: List[Tuple[Position, int]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success


def permitted_swap(world: World, old: Position, new: Position) -> bool:
    """Legality gate shared by real moves and solvability checks."""
    if not (in_bounds(world, old) and in_bounds(world, new) and is_adjacent(old, new)):
        return False
    a = get_code(world, old)
    b = get_code(world, new)
    # Two plain candies of one colour: swapping changes nothing.
    if is_plain(a) and is_plain(b) and candy_match(a, b):
        return False
    if is_colour(a) != is_colour(b):
        if not (is_colourbomb(a) or is_colourbomb(b) or is_empty(a) or is_empty(b)):
            return False
    for pos in (old, new):
        background = background_at(world, pos)
        if background.caged or background.swirl or background.hole:
            return False
    return True


def _combo_possible(a: int, b: int) -> bool:
    if is_striped(a) and is_striped(b):
        return True
    if is_colourbomb(a):
        return is_colour(b) or is_colourbomb(b)
    if is_colourbomb(b):
        return is_colour(a)
    return False


def successful_move(world: World, old: Position, new: Position) -> SwapResolution:
    """Swap, resolve combos and runs at both endpoints, or roll back.

    On failure the board is left exactly as it was.
    """
    if not permitted_swap(world, old, new):
        return SwapResolution(success=False, reason=REASON_NOT_PERMITTED)
    swap_codes(world, old, new, notify=False)
    resolution = SwapResolution(success=False)
    if stripes_match(world, old, new):
        resolution.combos.append("stripes")
    if colourbomb_match(world, old, new):
        resolution.combos.append("colourbomb")
    matched = False
    for endpoint in (new, old):
        code = get_code(world, endpoint)
        h = scan_horizontal(world, endpoint, code, apply=True)
        v = scan_vertical(world, endpoint, code, apply=True)
        if h >= 3 or v >= 3:
            matched = True
        special = classify_special(world, endpoint, h, v)
        if special is not None:
            resolution.specials.append((endpoint, special))
    if not (matched or resolution.combos):
        # Undo the move.
        swap_codes(world, old, new, notify=False)
        resolution.reason = REASON_NO_MATCH
        return resolution
    touch(world, old)
    touch(world, new)
    resolution.success = True
    return resolution


def move_is_possible(world: World, old: Position, new: Position) -> bool:
    """Probe whether a swap would be accepted, leaving the board untouched."""
    if not permitted_swap(world, old, new):
        return False
    swap_codes(world, old, new, notify=False)
    try:
        if _combo_possible(get_code(world, old), get_code(world, new)):
            return True
        return has_run_at(world, new) or has_run_at(world, old)
    finally:
        swap_codes(world, old, new, notify=False)


class MoveSystem:
    """Validates swap requests and resolves the swap itself."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        # Boards sharing a bus only answer requests for their own world.
        if kwargs.get('world') is not self.world:
            return
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        src, dst = tuple(src), tuple(dst)
        if level_over(self.world):
            self._reject(src, dst, REASON_LEVEL_OVER)
            return
        state = get_turn_state(self.world)
        progress = get_progress(self.world)
        state.score_at_start = progress.score
        state.jelly_at_start = progress.jelly_remaining
        resolution = successful_move(self.world, src, dst)
        if not resolution:
            self._reject(src, dst, resolution.reason)
            return
        logger.debug("Swap %s -> %s accepted (combos=%s)", src, dst, resolution.combos)
        for kind in resolution.combos:
            self.event_bus.emit(EVENT_COMBO_TRIGGERED, world=self.world, kind=kind, positions=marked_positions(self.world))
        for position, code in resolution.specials:
            self.event_bus.emit(EVENT_SPECIAL_CREATED, world=self.world, position=position, code=code)
            self.event_bus.emit(EVENT_SOUND_CUE, world=self.world, cue=CUE_SPECIAL_CREATED)
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, world=self.world, src=src, dst=dst)

    def _reject(self, src: Position, dst: Position, reason: Optional[str]) -> None:
        logger.debug("Swap %s -> %s rejected: %s", src, dst, reason)
        self.event_bus.emit(EVENT_SOUND_CUE, world=self.world, cue=CUE_SWAP_INVALID)
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, world=self.world, src=src, dst=dst, reason=reason)
