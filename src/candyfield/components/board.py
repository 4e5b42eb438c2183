from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    # (row, col) -> cell entity, filled once when the board is created.
    cells: Dict[Tuple[int, int], int] = field(default_factory=dict)
