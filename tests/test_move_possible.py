from candyfield.engine import apply_move, is_lost, is_won, new_board_for_level
from candyfield.systems.board_ops import in_bounds, iter_positions, marked_positions, snapshot
from candyfield.systems.match import find_runs
from candyfield.systems.move import move_is_possible


def _pairs(world):
    for row, col in iter_positions(world):
        for other in ((row, col + 1), (row + 1, col)):
            if in_bounds(world, other):
                yield (row, col), other


def test_move_check_never_mutates_board():
    for number in (1, 2, 3):
        board = new_board_for_level(number)
        before = snapshot(board.world)
        first = [move_is_possible(board.world, a, b) for a, b in _pairs(board.world)]
        assert snapshot(board.world) == before
        second = [move_is_possible(board.world, a, b) for a, b in _pairs(board.world)]
        assert first == second
        assert any(first)


def test_move_check_agrees_with_apply_move():
    board = new_board_for_level(2, seed=0x5EED)
    for _ in range(12):
        if is_won(board) or is_lost(board):
            break
        move = next((a, b) for a, b in _pairs(board.world) if move_is_possible(board.world, a, b))
        result = apply_move(board, *move)
        assert result.accepted, move
        assert find_runs(board.world) == []
        assert marked_positions(board.world) == []


def test_same_seed_same_game():
    boards = [new_board_for_level(3, seed=0x0BAD) for _ in range(2)]
    assert snapshot(boards[0].world) == snapshot(boards[1].world)
    for _ in range(5):
        moves = [
            next((a, b) for a, b in _pairs(board.world) if move_is_possible(board.world, a, b))
            for board in boards
        ]
        assert moves[0] == moves[1]
        results = [apply_move(board, *move) for board, move in zip(boards, moves)]
        assert results[0] == results[1]
        if is_won(boards[0]) or is_lost(boards[0]):
            break
    assert snapshot(boards[0].world) == snapshot(boards[1].world)
