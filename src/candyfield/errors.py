class InvariantViolation(RuntimeError):
    """Raised when the cascade machinery observes an impossible board state."""


class DeadBoardError(RuntimeError):
    """Raised when no amount of reshuffling yields a board with a legal move."""
