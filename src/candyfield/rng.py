"""Deterministic 16-bit LFSR used for candy generation and reshuffles."""
from __future__ import annotations

from dataclasses import dataclass

from candyfield.constants import COLOUR_COUNT, DEFAULT_SEED


@dataclass(slots=True)
class Lfsr:
    """Fibonacci LFSR with taps at bits 0, 2, 3 and 5.

    The all-zero state is a fixed point of the feedback function, so a zero
    seed is rejected.
    """

    state: int = DEFAULT_SEED

    def __post_init__(self) -> None:
        self.state &= 0xFFFF
        if self.state == 0:
            raise ValueError("LFSR seed must be non-zero")

    def draw(self) -> int:
        s = self.state
        bit = (s ^ (s >> 2) ^ (s >> 3) ^ (s >> 5)) & 1
        self.state = (s >> 1) | (bit << 15)
        return self.state

    def color(self) -> int:
        while True:
            value = self.draw() & 7
            if value < COLOUR_COUNT:
                return value

    def randrange(self, n: int) -> int:
        """Uniform integer in [0, n) by rejection sampling on masked draws."""
        if n <= 0:
            raise ValueError("randrange() needs a positive bound")
        if n == 1:
            return 0
        mask = (1 << (n - 1).bit_length()) - 1
        while True:
            value = self.draw() & mask
            if value < n:
                return value
