import logging
from typing import Sequence, Union

from esper import World

from candyfield.components.board import Board
from candyfield.components.board_position import BoardPosition
from candyfield.components.candy import Candy
from candyfield.components.cell_background import CellBackground
from candyfield.components.dirty_cells import DirtyCells
from candyfield.components.level_progress import LevelProgress
from candyfield.components.rng_state import RngState
from candyfield.components.turn_state import TurnState
from candyfield.constants import DEFAULT_SEED, EMPTY_TILE, REDRAW_ATTEMPTS, SWIRL_TILE
from candyfield.errors import DeadBoardError
from candyfield.events.bus import EventBus
from candyfield.rng import Lfsr
from candyfield.systems.board_ops import background_at, begin_move, count_jelly, iter_positions, set_code
from candyfield.systems.reshuffle import board_is_live, draw_candy

logger = logging.getLogger(__name__)

LayoutCell = Union[int, CellBackground]


class BoardSystem:
    """Creates the board entity and one entity per cell, then fills it.

    ``layout`` holds one background per cell, either packed integers (bits
    0-1 jelly, bit 2 cage, bit 3 swirl) or CellBackground instances.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        layout: Sequence[Sequence[LayoutCell]],
        moves: int,
        *,
        seed: int = DEFAULT_SEED,
        populate: bool = True,
    ):
        self.world = world
        self.event_bus = event_bus
        rows = len(layout)
        cols = len(layout[0]) if rows else 0
        if rows == 0 or cols == 0:
            raise ValueError("Board layout must have at least one cell")
        if any(len(row) != cols for row in layout):
            raise ValueError("Board layout rows must all have the same length")
        if moves < 0:
            raise ValueError("Moves budget must not be negative")
        board = Board(rows=rows, cols=cols)
        self.board_entity = self.world.create_entity(
            board,
            LevelProgress(moves_remaining=moves),
            RngState(lfsr=Lfsr(seed)),
            DirtyCells(),
            TurnState(),
        )
        for r in range(rows):
            for c in range(cols):
                background = self._background_for(layout[r][c])
                code = SWIRL_TILE if background.swirl else EMPTY_TILE
                board.cells[(r, c)] = self.world.create_entity(
                    BoardPosition(row=r, col=c), Candy(code=code), background
                )
        progress = self.world.component_for_entity(self.board_entity, LevelProgress)
        progress.jelly_remaining = count_jelly(self.world)
        if populate:
            self._init_board()
        begin_move(self.world)

    @staticmethod
    def _background_for(cell: LayoutCell) -> CellBackground:
        if isinstance(cell, CellBackground):
            return CellBackground(jelly=cell.jelly, caged=cell.caged, swirl=cell.swirl)
        return CellBackground.from_code(int(cell))

    def _init_board(self, attempts: int = REDRAW_ATTEMPTS) -> None:
        """Draw candies row-major, avoiding runs, until the board has a legal move."""
        rng = self.world.component_for_entity(self.board_entity, RngState).lfsr
        fillable = [
            pos
            for pos in iter_positions(self.world)
            if not (background_at(self.world, pos).hole or background_at(self.world, pos).swirl)
        ]
        for attempt in range(1, attempts + 1):
            for pos in fillable:
                set_code(self.world, pos, EMPTY_TILE)
            for pos in fillable:
                draw_candy(self.world, pos, rng)
            if board_is_live(self.world):
                logger.debug("Board populated in %d attempt(s)", attempt)
                return
        raise DeadBoardError("Unable to populate board with a legal move")
