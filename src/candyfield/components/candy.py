from dataclasses import dataclass

from candyfield.constants import CODE_MASK, EMPTY_TILE, MARKED

@dataclass(slots=True)
class Candy:
    """Per-cell foreground.

    ``code`` is the packed tile code; bit 0x80 is the transient "marked for
    explosion" flag used as the visited set while a cascade resolves.
    """
    code: int = EMPTY_TILE

    @property
    def marked(self) -> bool:
        return bool(self.code & MARKED)

    @property
    def tile_code(self) -> int:
        return self.code & CODE_MASK
