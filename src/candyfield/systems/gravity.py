from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from esper import World

from candyfield.constants import EMPTY_TILE, SCORE_CAGE, SCORE_JELLY, SCORE_SWIRL
from candyfield.systems.board_ops import (
    Position,
    award,
    background_at,
    board_dimensions,
    get_code,
    get_rng,
    marked_positions,
    neighbours,
    reset_marks,
    set_code,
    touch,
)
from candyfield.tiles import is_empty, is_swirl

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SettleReport:
    exploded: List[Position] = field(default_factory=list)
    cages_removed: List[Position] = field(default_factory=list)
    swirls_removed: List[Position] = field(default_factory=list)
    jelly_reduced: List[Position] = field(default_factory=list)
    moved: int = 0
    refilled: List[Position] = field(default_factory=list)


def explode_marked(world: World, report: SettleReport | None = None) -> SettleReport:
    """Clear every marked cell and apply its background side effects."""
    report = report or SettleReport()
    for pos in marked_positions(world):
        background = background_at(world, pos)
        # Swirls only go when a neighbour explodes, never by being hit.
        if not is_swirl(get_code(world, pos)):
            set_code(world, pos, EMPTY_TILE)
        report.exploded.append(pos)
        if background.caged:
            background.caged = False
            award(world, SCORE_CAGE)
            report.cages_removed.append(pos)
            touch(world, pos)
        for neighbour in neighbours(world, pos):
            neighbour_bg = background_at(world, neighbour)
            if neighbour_bg.swirl:
                # One hop only: a cleared swirl does not clear further swirls.
                neighbour_bg.swirl = False
                set_code(world, neighbour, EMPTY_TILE)
                award(world, SCORE_SWIRL)
                report.swirls_removed.append(neighbour)
        if background.jelly in (1, 2):
            background.jelly -= 1
            award(world, SCORE_JELLY)
            report.jelly_reduced.append(pos)
            touch(world, pos)
    reset_marks(world)
    return report


def _source_above(world: World, pos: Position) -> Optional[Position]:
    """Nearest non-hole cell above pos; candies fall straight through holes."""
    row, col = pos
    row -= 1
    while row >= 0 and background_at(world, (row, col)).hole:
        row -= 1
    if row < 0:
        return None
    return row, col


def apply_gravity(world: World, report: SettleReport | None = None) -> SettleReport:
    """Compact columns and refill from the top until nothing moves.

    Holes stay empty. Caged and swirl cells are anchored: they never fall and
    nothing falls through them, so a gap directly below one waits until the
    blocker is cleared.
    """
    report = report or SettleReport()
    rng = get_rng(world)
    rows, cols = board_dimensions(world)
    movement = True
    while movement:
        movement = False
        for col in range(cols):
            for row in range(rows - 1, -1, -1):
                pos = (row, col)
                background = background_at(world, pos)
                if background.hole or background.anchored or not is_empty(get_code(world, pos)):
                    continue
                source = _source_above(world, pos)
                if source is None:
                    set_code(world, pos, rng.color())
                    report.refilled.append(pos)
                    movement = True
                    continue
                if background_at(world, source).anchored:
                    continue
                source_code = get_code(world, source)
                if is_empty(source_code):
                    continue
                set_code(world, pos, source_code)
                set_code(world, source, EMPTY_TILE)
                report.moved += 1
                movement = True
    return report


def settle(world: World) -> SettleReport:
    report = explode_marked(world)
    apply_gravity(world, report)
    logger.debug(
        "Settled %d explosions, %d falls, %d refills",
        len(report.exploded), report.moved, len(report.refilled),
    )
    return report
