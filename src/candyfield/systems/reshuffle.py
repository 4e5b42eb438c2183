from __future__ import annotations

import logging
from typing import List

from esper import World

from candyfield.constants import COLOUR_DRAW_LIMIT, EMPTY_TILE, REDRAW_ATTEMPTS, RESHUFFLE_ATTEMPTS
from candyfield.errors import DeadBoardError
from candyfield.rng import Lfsr
from candyfield.systems.board_ops import (
    Position,
    background_at,
    get_code,
    get_rng,
    in_bounds,
    iter_positions,
    set_code,
    swap_codes,
)
from candyfield.systems.match import find_runs, scan_horizontal, scan_vertical
from candyfield.systems.move import move_is_possible
from candyfield.tiles import is_colour

logger = logging.getLogger(__name__)


def reshuffle_needed(world: World) -> bool:
    """True only when no adjacent pair on the board makes a legal move."""
    for row, col in iter_positions(world):
        for other in ((row, col + 1), (row + 1, col)):
            if in_bounds(world, other) and move_is_possible(world, (row, col), other):
                return False
    return True


def board_is_live(world: World) -> bool:
    return not find_runs(world) and not reshuffle_needed(world)


def movable_candies(world: World) -> List[Position]:
    """Colour-bearing candies free to change place, in row-major order."""
    return [
        pos
        for pos in iter_positions(world)
        if is_colour(get_code(world, pos)) and not background_at(world, pos).anchored
    ]


def draw_candy(world: World, pos: Position, rng: Lfsr) -> int:
    """Fill pos with a random colour, redrawing while it would complete a run."""
    for _ in range(COLOUR_DRAW_LIMIT):
        color = rng.color()
        set_code(world, pos, color)
        if scan_horizontal(world, pos, color) < 3 and scan_vertical(world, pos, color) < 3:
            break
    return get_code(world, pos)


def _permute(world: World, rng: Lfsr) -> None:
    cells = movable_candies(world)
    for index, pos in enumerate(cells):
        target = index + rng.randrange(len(cells) - index)
        if target != index:
            swap_codes(world, pos, cells[target])


def _redraw(world: World, rng: Lfsr) -> None:
    cells = movable_candies(world)
    for pos in cells:
        set_code(world, pos, EMPTY_TILE)
    for pos in cells:
        draw_candy(world, pos, rng)


def reshuffle(
    world: World,
    *,
    attempts: int = RESHUFFLE_ATTEMPTS,
    redraws: int = REDRAW_ATTEMPTS,
) -> int:
    """Relocate movable candies until the board has a move and no run.

    Permutations are tried first; if none works the candies are redrawn.
    Returns the number of attempts used.
    """
    rng = get_rng(world)
    for attempt in range(1, attempts + 1):
        _permute(world, rng)
        if board_is_live(world):
            logger.debug("Board reshuffled in %d attempt(s)", attempt)
            return attempt
    logger.warning("No live permutation after %d reshuffles; redrawing candies", attempts)
    for attempt in range(1, redraws + 1):
        _redraw(world, rng)
        if board_is_live(world):
            return attempts + attempt
    raise DeadBoardError("Unable to reshuffle board into a state with a legal move")
