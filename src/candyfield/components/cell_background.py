from dataclasses import dataclass

from candyfield.constants import BG_CAGE, BG_JELLY_MASK, BG_SWIRL, HOLE_JELLY

@dataclass(slots=True)
class CellBackground:
    """Background layer of a cell; never moves when candies swap or fall.

    jelly: 0-2 layers of jelly, or 3 for a hole no candy may occupy.
    """
    jelly: int = 0
    caged: bool = False
    swirl: bool = False

    @property
    def hole(self) -> bool:
        return self.jelly == HOLE_JELLY

    @property
    def anchored(self) -> bool:
        return self.caged or self.swirl

    @classmethod
    def from_code(cls, code: int) -> "CellBackground":
        return cls(jelly=code & BG_JELLY_MASK, caged=bool(code & BG_CAGE), swirl=bool(code & BG_SWIRL))

    def to_code(self) -> int:
        return self.jelly | (BG_CAGE if self.caged else 0) | (BG_SWIRL if self.swirl else 0)
