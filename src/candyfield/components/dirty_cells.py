from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(slots=True)
class DirtyCells:
    """Cells touched since the renderer was last notified.

    ``pending`` is flushed after each phase; ``since_move`` accumulates for the
    whole move so the caller gets a single list back.
    """
    pending: Dict[Tuple[int, int], None] = field(default_factory=dict)
    since_move: Dict[Tuple[int, int], None] = field(default_factory=dict)

    def add(self, pos: Tuple[int, int]) -> None:
        self.pending[pos] = None
        self.since_move[pos] = None
