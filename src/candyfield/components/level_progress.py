from dataclasses import dataclass

@dataclass(slots=True)
class LevelProgress:
    """Score and win/loss counters for the level being played.

    ``finished`` is set once a move ends the level.
    """
    moves_remaining: int
    jelly_remaining: int = 0
    score: int = 0
    finished: bool = False
