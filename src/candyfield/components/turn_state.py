from dataclasses import dataclass


@dataclass(slots=True)
class TurnState:
    """Tracks the move currently being resolved."""

    cascade_depth: int = 0
    score_at_start: int = 0
    jelly_at_start: int = 0
