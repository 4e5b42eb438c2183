from __future__ import annotations

from typing import Dict, Sequence, Tuple

from candyfield.constants import (
    CAGE_TILE,
    COLOURBOMB_TILE,
    EMPTY_TILE,
    GRID_COLS,
    GRID_ROWS,
    H_TILES,
    SWIRL_TILE,
    V_TILES,
    WRAP_TILES,
)
from candyfield.engine import GameBoard, new_board
from candyfield.events.bus import EventBus
from candyfield.systems.board_ops import begin_move, set_code

Position = Tuple[int, int]

_PREFIXES = {"V": V_TILES, "H": H_TILES, "W": WRAP_TILES}
_SYMBOLS = {"B": COLOURBOMB_TILE, "S": SWIRL_TILE, "C": CAGE_TILE, ".": EMPTY_TILE}


def code(token: str) -> int:
    """Tile code from a short token: 0-5 plain, V3/H3/W3 specials, B bomb, S swirl, C cage, . empty."""
    if token in _SYMBOLS:
        return _SYMBOLS[token]
    if token[0] in _PREFIXES:
        return _PREFIXES[token[0]] + int(token[1:])
    return int(token)


def dead_pattern(rows: int = GRID_ROWS, cols: int = GRID_COLS) -> list[list[int]]:
    """Diagonal stripes of colours 3-5: no runs and no move that makes one."""
    return [[(r + c) % 3 + 3 for c in range(cols)] for r in range(rows)]


def blank_layout(rows: int = GRID_ROWS, cols: int = GRID_COLS, *, jelly_at: Position | None = None) -> list[list[int]]:
    layout = [[0] * cols for _ in range(rows)]
    if jelly_at is None:
        # One jelly far from the action, so clearing it is never a side effect.
        jelly_at = (rows - 1, cols - 1)
    layout[jelly_at[0]][jelly_at[1]] = 1
    return layout


def board_from_codes(
    codes: Sequence[Sequence[int]],
    layout: Sequence[Sequence[int]] | None = None,
    *,
    moves: int = 30,
    event_bus: EventBus | None = None,
) -> GameBoard:
    rows, cols = len(codes), len(codes[0])
    board = new_board(layout or blank_layout(rows, cols), moves, event_bus=event_bus, populate=False)
    for r in range(rows):
        for c in range(cols):
            set_code(board.world, (r, c), codes[r][c])
    begin_move(board.world)
    return board


def board_from_rows(rows: Sequence[str], layout=None, **kwargs) -> GameBoard:
    return board_from_codes([[code(token) for token in row.split()] for row in rows], layout, **kwargs)


def board_with(overrides: Dict[Position, str], layout=None, **kwargs) -> GameBoard:
    """The dead pattern with a few cells replaced."""
    codes = dead_pattern()
    for (r, c), token in overrides.items():
        codes[r][c] = code(token)
    return board_from_codes(codes, layout, **kwargs)
