"""Cascade engine.

Exploding a special candy can set off others; propagation uses an explicit
work-list with the per-cell marked flag as the visited set, so a chain can
never revisit a cell nor recurse without bound.
"""
from __future__ import annotations

import logging
from typing import List

from esper import World

from candyfield.constants import COLOUR_COUNT, SCORE_COMBO, SCORE_TRIGGER
from candyfield.errors import InvariantViolation
from candyfield.systems.board_ops import (
    Position,
    award,
    board_dimensions,
    get_code,
    in_bounds,
    is_marked,
    iter_positions,
    mark,
)
from candyfield.tiles import (
    candy_match,
    is_colour,
    is_colourbomb,
    is_empty,
    is_horizontal_striped,
    is_striped,
    is_swirl,
    is_vertical_striped,
    is_wrapped,
)

logger = logging.getLogger(__name__)


def _blast_area(world: World, pos: Position) -> List[Position]:
    """Cells a special candy at pos sets off; empty for anything else."""
    rows, cols = board_dimensions(world)
    row, col = pos
    code = get_code(world, pos)
    if is_horizontal_striped(code):
        return [(row, c) for c in range(cols)]
    if is_vertical_striped(code):
        return [(r, col) for r in range(rows)]
    if is_wrapped(code):
        return [
            (r, c)
            for r in range(max(row - 1, 0), min(row + 2, rows))
            for c in range(max(col - 1, 0), min(col + 2, cols))
        ]
    return []


def trigger(world: World, pos: Position, reference_color: int) -> int:
    """Explode the cell at pos and everything it sets off.

    Returns the number of cells newly marked (each scores one point).
    Colourbombs reached this way detonate ``reference_color``.
    """
    pending: List[Position] = [pos]
    triggered = 0
    while pending:
        cell = pending.pop()
        if not in_bounds(world, cell):
            raise InvariantViolation(f"Trigger reached {cell}, outside the board")
        if is_marked(world, cell):
            continue
        mark(world, cell)
        award(world, SCORE_TRIGGER)
        triggered += 1
        code = get_code(world, cell)
        if is_empty(code) or is_swirl(code):
            continue
        if is_colourbomb(code):
            explode_a_colour(world, reference_color)
            continue
        area = [target for target in _blast_area(world, cell) if not is_marked(world, target)]
        # Reversed so cells pop off the work-list in board order.
        pending.extend(reversed(area))
    return triggered


def explode_a_colour(world: World, color: int) -> List[Position]:
    """Mark every cell matching color, without setting off the cells it marks."""
    exploded: List[Position] = []
    for pos in iter_positions(world):
        if is_marked(world, pos):
            continue
        if candy_match(get_code(world, pos), color):
            mark(world, pos)
            exploded.append(pos)
    return exploded


def stripes_match(world: World, old: Position, new: Position) -> bool:
    """Two striped candies swapped together clear both rows and both columns."""
    old_code = get_code(world, old)
    new_code = get_code(world, new)
    if not (is_striped(old_code) and is_striped(new_code)):
        return False
    rows, cols = board_dimensions(world)
    sweeps = (
        ([(old[0], c) for c in range(cols)], old_code),
        ([(r, new[1]) for r in range(rows)], new_code),
        ([(new[0], c) for c in range(cols)], new_code),
        ([(r, old[1]) for r in range(rows)], old_code),
    )
    for line, reference in sweeps:
        for cell in line:
            trigger(world, cell, reference)
    award(world, SCORE_COMBO)
    logger.debug("Stripe combo at %s/%s", old, new)
    return True


def colourbomb_match(world: World, old: Position, new: Position) -> bool:
    """A colourbomb swapped with a candy detonates that candy's colour."""
    old_code = get_code(world, old)
    new_code = get_code(world, new)
    if is_colourbomb(old_code) and is_colourbomb(new_code):
        trigger(world, old, new_code)
        trigger(world, new, old_code)
        for color in range(COLOUR_COUNT):
            explode_a_colour(world, color)
    elif is_colourbomb(old_code) and is_colour(new_code):
        trigger(world, old, new_code)
    elif is_colourbomb(new_code) and is_colour(old_code):
        trigger(world, new, old_code)
    else:
        return False
    award(world, SCORE_COMBO)
    logger.debug("Colourbomb combo at %s/%s", old, new)
    return True
