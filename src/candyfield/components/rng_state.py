from dataclasses import dataclass, field

from candyfield.rng import Lfsr

@dataclass(slots=True)
class RngState:
    """The board's single random source, shared by population, refill and reshuffle."""
    lfsr: Lfsr = field(default_factory=Lfsr)
