from __future__ import annotations

from typing import Optional

from esper import World

from candyfield.constants import (
    COLOURBOMB_TILE,
    H_TILES,
    SCORE_COLOURBOMB,
    SCORE_PLAIN_MATCH,
    SCORE_STRIPED,
    SCORE_WRAPPED,
    V_TILES,
    WRAP_TILES,
)
from candyfield.systems.board_ops import Position, award, get_code, set_code
from candyfield.tiles import colour_of


def classify_special(world: World, pos: Position, h: int, v: int) -> Optional[int]:
    """Turn a swap endpoint into a special candy when its runs qualify.

    h and v are the endpoint's horizontal and vertical run lengths, already
    resolved. The new special overwrites the exploded cell unmarked, so it
    outlives the cascade that created it. Returns the new code, if any.
    """
    color = colour_of(get_code(world, pos))
    if h >= 5 or v >= 5:
        code, points = COLOURBOMB_TILE, SCORE_COLOURBOMB
    elif h >= 3 and v >= 3:
        code, points = WRAP_TILES + color, SCORE_WRAPPED
    elif h >= 4:
        code, points = H_TILES + color, SCORE_STRIPED
    elif v >= 4:
        code, points = V_TILES + color, SCORE_STRIPED
    else:
        if h >= 3 or v >= 3:
            award(world, SCORE_PLAIN_MATCH)
        return None
    set_code(world, pos, code)
    award(world, points)
    return code
