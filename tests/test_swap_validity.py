from candyfield.engine import apply_move
from candyfield.events.bus import CUE_SWAP_INVALID, EVENT_CELLS_DIRTY, EVENT_SOUND_CUE, EVENT_TILE_SWAP_INVALID
from candyfield.systems.board_ops import snapshot
from candyfield.systems.move import REASON_NO_MATCH, REASON_NOT_PERMITTED, permitted_swap, successful_move

from helpers import blank_layout, board_with


def _layout_with(**cells):
    layout = blank_layout()
    for name, value in cells.items():
        r, c = int(name[1]), int(name[2])
        layout[r][c] = value
    return layout


def test_same_colour_plain_candies_cannot_swap():
    board = board_with({(0, 0): "2", (0, 1): "2"})
    assert not permitted_swap(board.world, (0, 0), (0, 1))


def test_same_colour_special_and_plain_can_swap():
    board = board_with({(0, 0): "2", (0, 1): "H2"})
    assert permitted_swap(board.world, (0, 0), (0, 1))


def test_colour_with_colourbomb_or_empty_can_swap():
    board = board_with({(0, 0): "2", (0, 1): "B", (1, 0): "."})
    assert permitted_swap(board.world, (0, 0), (0, 1))
    assert permitted_swap(board.world, (0, 0), (1, 0))


def test_colour_with_other_non_colour_cannot_swap():
    board = board_with({(0, 0): "2", (0, 1): "C"})
    assert not permitted_swap(board.world, (0, 0), (0, 1))


def test_anchored_and_hole_cells_cannot_swap():
    layout = _layout_with(c00=4, c11=8, c22=3)
    board = board_with({(1, 1): "S", (2, 2): "."}, layout)
    world = board.world
    assert not permitted_swap(world, (0, 0), (0, 1))
    assert not permitted_swap(world, (1, 1), (1, 2))
    assert not permitted_swap(world, (2, 2), (2, 3))


def test_non_adjacent_or_outside_cells_cannot_swap():
    board = board_with({})
    world = board.world
    assert not permitted_swap(world, (0, 0), (1, 1))
    assert not permitted_swap(world, (0, 0), (0, 2))
    assert not permitted_swap(world, (0, 8), (0, 9))
    assert not permitted_swap(world, (3, 3), (3, 3))


def test_swap_without_match_rolls_back():
    board = board_with({})
    before = snapshot(board.world)
    resolution = successful_move(board.world, (4, 4), (4, 5))
    assert not resolution
    assert resolution.reason == REASON_NO_MATCH
    assert snapshot(board.world) == before


def test_swirl_swap_is_refused_and_board_unchanged():
    layout = _layout_with(c44=8, c45=8)
    board = board_with({(4, 4): "S", (4, 5): "S"}, layout)
    cues = []
    dirty = []
    board.event_bus.subscribe(EVENT_SOUND_CUE, lambda sender, **kw: cues.append(kw['cue']))
    board.event_bus.subscribe(EVENT_CELLS_DIRTY, lambda sender, **kw: dirty.append(kw))
    before = snapshot(board.world)
    result = apply_move(board, (4, 4), (4, 5))
    assert not result.accepted
    assert result.reason == REASON_NOT_PERMITTED
    assert result.score_delta == 0 and result.dirty_cells == []
    assert snapshot(board.world) == before
    assert cues == [CUE_SWAP_INVALID]
    assert dirty == []


def test_rejected_move_reports_reason_on_bus():
    board = board_with({})
    reasons = []
    board.event_bus.subscribe(EVENT_TILE_SWAP_INVALID, lambda sender, **kw: reasons.append(kw['reason']))
    result = apply_move(board, (0, 0), (0, 1))
    assert not result.accepted
    assert result.reason == REASON_NO_MATCH
    assert result.moves_remaining == 30
    assert reasons == [REASON_NO_MATCH]
