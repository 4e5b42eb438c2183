from candyfield.engine import apply_move, is_lost, is_won
from candyfield.events.bus import (
    CUE_EXPLOSION,
    CUE_RESHUFFLE,
    CUE_SPECIAL_CREATED,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CELLS_DIRTY,
    EVENT_LEVEL_LOST,
    EVENT_LEVEL_WON,
    EVENT_SOUND_CUE,
    EventBus,
)
from candyfield.systems.board_ops import background_at, marked_positions, snapshot
from candyfield.systems.match import find_runs
from candyfield.systems.move import REASON_LEVEL_OVER, REASON_NO_MATCH
from candyfield.systems.reshuffle import reshuffle_needed
from candyfield.tiles import Colorbomb

from helpers import blank_layout, board_from_rows, board_with

FIVE_IN_ROW = {
    (0, 0): "0", (0, 1): "0", (0, 2): "1", (0, 3): "0", (0, 4): "0",
    (1, 2): "0",
}


def _record(board, name, key=None):
    seen = []
    board.event_bus.subscribe(name, lambda sender, **kw: seen.append(kw[key] if key else kw))
    return seen


def test_five_in_row_leaves_colourbomb_and_scores():
    board = board_with(FIVE_IN_ROW)
    cues = _record(board, EVENT_SOUND_CUE, 'cue')
    phases = _record(board, EVENT_CELLS_DIRTY, 'phase')
    result = apply_move(board, (1, 2), (0, 2))
    assert result.accepted
    assert result.reason is None
    assert result.score_delta >= 20 + 5
    assert result.moves_remaining == 29
    assert board.tile_at((0, 2)) == Colorbomb()
    assert (0, 2, 26) in result.dirty_cells
    assert CUE_SPECIAL_CREATED in cues and CUE_EXPLOSION in cues
    assert phases[:3] == ["swap", "explode", "settle"]


def test_no_runs_or_marks_after_accepted_move():
    board = board_with(FIVE_IN_ROW)
    apply_move(board, (1, 2), (0, 2))
    assert find_runs(board.world) == []
    assert marked_positions(board.world) == []


def test_stripe_combo_through_move():
    board = board_with({(4, 4): "H3", (4, 5): "V4"})
    result = apply_move(board, (4, 4), (4, 5))
    assert result.accepted
    assert result.score_delta >= 25 + 3
    assert find_runs(board.world) == []


def test_clearing_last_jelly_wins():
    board = board_with(
        {(0, 2): "0", (0, 3): "0", (0, 4): "1", (1, 4): "0"},
        blank_layout(jelly_at=(0, 2)),
    )
    won = _record(board, EVENT_LEVEL_WON)
    assert board.jelly_remaining == 1
    result = apply_move(board, (1, 4), (0, 4))
    assert result.accepted
    assert background_at(board.world, (0, 2)).jelly == 0
    assert result.jelly_remaining == 0
    assert result.score_delta >= 3 + 5 + 10
    assert is_won(board)
    assert len(won) == 1


def test_running_out_of_moves_loses_and_ends_level():
    board = board_with(FIVE_IN_ROW, moves=1)
    lost = _record(board, EVENT_LEVEL_LOST)
    result = apply_move(board, (1, 2), (0, 2))
    assert result.accepted and result.moves_remaining == 0
    assert is_lost(board) and not is_won(board)
    assert len(lost) == 1
    score = board.score
    again = apply_move(board, (0, 0), (1, 0))
    assert not again.accepted
    assert again.reason == REASON_LEVEL_OVER
    assert board.score == score


def test_won_level_rejects_moves():
    # The only jelly sits under the first candy of the run.
    board = board_with(FIVE_IN_ROW, blank_layout(jelly_at=(0, 0)))
    apply_move(board, (1, 2), (0, 2))
    assert is_won(board)
    result = apply_move(board, (0, 0), (1, 0))
    assert result.reason == REASON_LEVEL_OVER


def test_dead_board_after_cascade_is_reshuffled():
    # Row 0 is caged, so the gaps the move leaves in row 1 are never refilled
    # and the settled board has no move left.
    layout = [
        [4, 4, 4, 4, 4],
        [0, 0, 0, 0, 0],
        [0, 0, 0, 0, 1],
    ]
    board = board_from_rows(
        [
            "3 4 3 4 3",
            "2 4 0 0 1",
            "0 0 1 5 1",
        ],
        layout,
        moves=10,
    )
    reshuffles = _record(board, EVENT_BOARD_RESHUFFLED, 'attempts')
    cues = _record(board, EVENT_SOUND_CUE, 'cue')
    result = apply_move(board, (1, 2), (2, 2))
    assert result.accepted
    assert result.score_delta == 3 + 5
    assert len(reshuffles) == 1 and reshuffles[0] >= 1
    assert CUE_RESHUFFLE in cues
    assert not reshuffle_needed(board.world)
    assert find_runs(board.world) == []
    # The caged row never moves.
    assert [board.code_at((0, c)) for c in range(5)] == [3, 4, 3, 4, 3]


def test_board_without_jelly_is_playable():
    board = board_with(FIVE_IN_ROW, [[0] * 9 for _ in range(9)])
    won = _record(board, EVENT_LEVEL_WON)
    result = apply_move(board, (1, 2), (0, 2))
    assert result.accepted, result.reason
    assert board.tile_at((0, 2)) == Colorbomb()
    assert result.score_delta >= 20 + 5
    assert result.moves_remaining == 29
    # Nothing was cleared to win, so the level goes on.
    assert won == []
    again = apply_move(board, (4, 4), (4, 5))
    assert again.reason == REASON_NO_MATCH


def test_board_without_jelly_stops_when_moves_run_out():
    board = board_with(FIVE_IN_ROW, [[0] * 9 for _ in range(9)], moves=1)
    assert apply_move(board, (1, 2), (0, 2)).accepted
    assert not is_lost(board)
    result = apply_move(board, (4, 4), (4, 5))
    assert result.reason == REASON_LEVEL_OVER
    assert result.moves_remaining == 0


def test_boards_sharing_a_bus_play_independently():
    bus = EventBus()
    a = board_with(FIVE_IN_ROW, event_bus=bus)
    b = board_with(FIVE_IN_ROW, event_bus=bus)
    untouched = snapshot(b.world)
    result = apply_move(a, (1, 2), (0, 2))
    assert result.accepted
    assert snapshot(b.world) == untouched
    assert b.moves_remaining == 30

    rejected = apply_move(b, (4, 4), (4, 5))
    assert rejected.reason == REASON_NO_MATCH
    assert a.moves_remaining == 29
    second = apply_move(b, (1, 2), (0, 2))
    assert second.accepted
    assert b.tile_at((0, 2)) == Colorbomb()
    assert (a.moves_remaining, b.moves_remaining) == (29, 29)
