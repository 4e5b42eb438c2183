from __future__ import annotations

from typing import List

from esper import World

from candyfield.systems.board_ops import Position, board_dimensions, get_code, iter_positions
from candyfield.systems.trigger import trigger
from candyfield.tiles import candy_match


def _run_extent(world: World, pos: Position, color_code: int, step: Position) -> List[Position]:
    """Cells matching color_code walking from pos (exclusive) in direction step."""
    rows, cols = board_dimensions(world)
    row, col = pos
    dr, dc = step
    found: List[Position] = []
    row, col = row + dr, col + dc
    while 0 <= row < rows and 0 <= col < cols and candy_match(get_code(world, (row, col)), color_code):
        found.append((row, col))
        row, col = row + dr, col + dc
    return found


def _scan(world: World, pos: Position, color_code: int, apply: bool, forward: Position, backward: Position) -> int:
    # Forward (right/down) extent is always resolved before the backward one.
    after = _run_extent(world, pos, color_code, forward)
    before = _run_extent(world, pos, color_code, backward)
    length = len(after) + len(before) + 1
    if apply and length >= 3:
        for cell in [pos] + after + before:
            trigger(world, cell, color_code)
    return length


def scan_horizontal(world: World, pos: Position, color_code: int, apply: bool = False) -> int:
    """Length of the horizontal run through pos for color_code.

    The cell at pos itself always counts, whatever it holds. With ``apply`` a
    run of three or more is handed to the trigger engine cell by cell.
    """
    return _scan(world, pos, color_code, apply, (0, 1), (0, -1))


def scan_vertical(world: World, pos: Position, color_code: int, apply: bool = False) -> int:
    return _scan(world, pos, color_code, apply, (1, 0), (-1, 0))


def has_run_at(world: World, pos: Position) -> bool:
    code = get_code(world, pos)
    return scan_horizontal(world, pos, code) >= 3 or scan_vertical(world, pos, code) >= 3


def find_runs(world: World) -> List[List[Position]]:
    """Every maximal horizontal or vertical run of three or more matching candies."""
    rows, cols = board_dimensions(world)
    runs: List[List[Position]] = []
    for r in range(rows):
        run: List[Position] = [(r, 0)]
        for c in range(1, cols + 1):
            if c < cols and candy_match(get_code(world, (r, c)), get_code(world, run[0])):
                run.append((r, c))
                continue
            if len(run) >= 3:
                runs.append(run)
            run = [(r, c)]
    for c in range(cols):
        run = [(0, c)]
        for r in range(1, rows + 1):
            if r < rows and candy_match(get_code(world, (r, c)), get_code(world, run[0])):
                run.append((r, c))
                continue
            if len(run) >= 3:
                runs.append(run)
            run = [(r, c)]
    return runs


def resolve_all_runs(world: World) -> bool:
    """Trigger every run on the board; True if any run of three or more existed."""
    success = False
    for pos in iter_positions(world):
        code = get_code(world, pos)
        if scan_horizontal(world, pos, code, apply=True) >= 3:
            success = True
        if scan_vertical(world, pos, code, apply=True) >= 3:
            success = True
    return success
