from candyfield.engine import GameBoard, MoveResult, apply_move, is_lost, is_won, new_board, new_board_for_level

__all__ = [
    "GameBoard",
    "MoveResult",
    "apply_move",
    "is_lost",
    "is_won",
    "new_board",
    "new_board_for_level",
]
