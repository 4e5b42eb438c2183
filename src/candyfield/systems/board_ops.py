from __future__ import annotations

from typing import Iterator, List, NamedTuple, Tuple

from esper import World

from candyfield.components.board import Board
from candyfield.components.board_position import BoardPosition
from candyfield.components.candy import Candy
from candyfield.components.cell_background import CellBackground
from candyfield.components.dirty_cells import DirtyCells
from candyfield.components.level_progress import LevelProgress
from candyfield.components.rng_state import RngState
from candyfield.components.turn_state import TurnState
from candyfield.constants import CODE_MASK, MARKED
from candyfield.events.bus import EVENT_CELLS_DIRTY, EventBus
from candyfield.rng import Lfsr

Position = Tuple[int, int]

ORTHOGONAL: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class BoardSnapshot(NamedTuple):
    """Immutable copy of everything a move can change."""
    codes: Tuple[Tuple[int, ...], ...]
    backgrounds: Tuple[Tuple[int, ...], ...]
    score: int
    moves_remaining: int
    jelly_remaining: int
    rng_state: int


def get_board_entity(world: World) -> int:
    for entity, _ in world.get_component(Board):
        return entity
    raise RuntimeError("Board entity not found")


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board entity not found")


def get_progress(world: World) -> LevelProgress:
    return world.component_for_entity(get_board_entity(world), LevelProgress)


def get_rng(world: World) -> Lfsr:
    return world.component_for_entity(get_board_entity(world), RngState).lfsr


def get_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    board_entity = get_board_entity(world)
    if not world.has_component(board_entity, TurnState):
        world.add_component(board_entity, TurnState())
    return world.component_for_entity(board_entity, TurnState)


def board_dimensions(world: World) -> Tuple[int, int]:
    board = get_board(world)
    return board.rows, board.cols


def in_bounds(world: World, pos: Position) -> bool:
    rows, cols = board_dimensions(world)
    return 0 <= pos[0] < rows and 0 <= pos[1] < cols


def iter_positions(world: World) -> Iterator[Position]:
    """Row-major walk over every cell."""
    rows, cols = board_dimensions(world)
    for row in range(rows):
        for col in range(cols):
            yield row, col


def neighbours(world: World, pos: Position) -> List[Position]:
    row, col = pos
    return [
        (row + dr, col + dc)
        for dr, dc in ORTHOGONAL
        if in_bounds(world, (row + dr, col + dc))
    ]


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def _cell_entity(world: World, pos: Position) -> int:
    entity = get_board(world).cells.get(pos)
    if entity is None:
        raise KeyError(f"No cell at {pos}")
    return entity


def candy_at(world: World, pos: Position) -> Candy:
    return world.component_for_entity(_cell_entity(world, pos), Candy)


def background_at(world: World, pos: Position) -> CellBackground:
    return world.component_for_entity(_cell_entity(world, pos), CellBackground)


def get_code(world: World, pos: Position) -> int:
    """Foreground code without the marked bit."""
    return candy_at(world, pos).tile_code


def set_code(world: World, pos: Position, code: int) -> None:
    """Overwrite the foreground (clearing any mark) and flag the cell dirty."""
    candy_at(world, pos).code = code & CODE_MASK
    touch(world, pos)


def is_marked(world: World, pos: Position) -> bool:
    return candy_at(world, pos).marked


def mark(world: World, pos: Position) -> None:
    candy_at(world, pos).code |= MARKED


def marked_positions(world: World) -> List[Position]:
    return [pos for pos in iter_positions(world) if is_marked(world, pos)]


def reset_marks(world: World) -> None:
    for entity, _ in world.get_component(BoardPosition):
        world.component_for_entity(entity, Candy).code &= CODE_MASK


def swap_codes(world: World, a: Position, b: Position, *, notify: bool = True) -> None:
    """Exchange two foregrounds; backgrounds never move."""
    candy_a = candy_at(world, a)
    candy_b = candy_at(world, b)
    candy_a.code, candy_b.code = candy_b.code, candy_a.code
    if notify:
        touch(world, a)
        touch(world, b)


def award(world: World, points: int) -> None:
    get_progress(world).score += points


def count_jelly(world: World) -> int:
    total = 0
    for entity, _ in world.get_component(BoardPosition):
        background = world.component_for_entity(entity, CellBackground)
        if 0 < background.jelly and not background.hole:
            total += 1
    return total


def touch(world: World, pos: Position) -> None:
    world.component_for_entity(get_board_entity(world), DirtyCells).add(pos)


def dirty_cells_since_move(world: World) -> List[Tuple[int, int, int]]:
    dirty = world.component_for_entity(get_board_entity(world), DirtyCells)
    return [(row, col, get_code(world, (row, col))) for row, col in dirty.since_move]


def begin_move(world: World) -> None:
    dirty = world.component_for_entity(get_board_entity(world), DirtyCells)
    dirty.pending.clear()
    dirty.since_move.clear()


def flush_dirty(world: World, event_bus: EventBus, phase: str) -> List[Position]:
    """Notify the renderer of every cell touched since the last flush."""
    dirty = world.component_for_entity(get_board_entity(world), DirtyCells)
    if not dirty.pending:
        return []
    positions = list(dirty.pending)
    dirty.pending.clear()
    event_bus.emit(
        EVENT_CELLS_DIRTY,
        world=world,
        phase=phase,
        cells=[(row, col, get_code(world, (row, col))) for row, col in positions],
        backgrounds=[(row, col, background_at(world, (row, col)).to_code()) for row, col in positions],
    )
    return positions


def snapshot(world: World) -> BoardSnapshot:
    rows, cols = board_dimensions(world)
    codes = tuple(
        tuple(candy_at(world, (row, col)).code for col in range(cols)) for row in range(rows)
    )
    backgrounds = tuple(
        tuple(background_at(world, (row, col)).to_code() for col in range(cols)) for row in range(rows)
    )
    progress = get_progress(world)
    return BoardSnapshot(
        codes=codes,
        backgrounds=backgrounds,
        score=progress.score,
        moves_remaining=progress.moves_remaining,
        jelly_remaining=progress.jelly_remaining,
        rng_state=get_rng(world).state,
    )


def level_won(world: World) -> bool:
    return get_progress(world).jelly_remaining == 0


def level_lost(world: World) -> bool:
    progress = get_progress(world)
    return progress.moves_remaining <= 0 and progress.jelly_remaining > 0


def level_over(world: World) -> bool:
    """True once a move has won or lost the level, or no moves are left."""
    progress = get_progress(world)
    return progress.finished or progress.moves_remaining <= 0
