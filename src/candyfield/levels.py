"""Level definitions: background layouts and move budgets, by level number.

Layouts are written as text, one string per row, one whitespace-separated
token per cell. A token combines any of:

    .   nothing          1 / 2   jelly layers
    #   hole             C       cage
    S   swirl

so ``"2C"`` is a caged cell over two layers of jelly.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from candyfield.constants import BG_CAGE, BG_SWIRL, DEFAULT_MOVES, HOLE_JELLY

Layout = Tuple[Tuple[int, ...], ...]


def _parse_token(token: str) -> int:
    code = 0
    jelly = 0
    for char in token:
        if char == ".":
            continue
        if char in "12":
            jelly = int(char)
        elif char == "#":
            jelly = HOLE_JELLY
        elif char == "C":
            code |= BG_CAGE
        elif char == "S":
            code |= BG_SWIRL
        else:
            raise ValueError(f"Unknown layout symbol {char!r} in token {token!r}")
    return code | jelly


def parse_layout(rows: Sequence[str]) -> Layout:
    layout = tuple(tuple(_parse_token(token) for token in row.split()) for row in rows)
    if not layout or not layout[0]:
        raise ValueError("Layout must have at least one cell")
    width = len(layout[0])
    for index, row in enumerate(layout):
        if len(row) != width:
            raise ValueError(f"Layout row {index} has {len(row)} cells, expected {width}")
    return layout


@dataclass(frozen=True, slots=True)
class LevelDefinition:
    number: int
    layout: Layout
    moves: int = DEFAULT_MOVES


class LevelRegistry:
    """In-memory collection of level definitions."""

    def __init__(self) -> None:
        self._levels: dict[int, LevelDefinition] = {}

    def register(self, level: LevelDefinition) -> None:
        if level.number in self._levels:
            raise ValueError(f"Level {level.number} already registered")
        self._levels[level.number] = level

    def get(self, number: int) -> LevelDefinition:
        try:
            return self._levels[number]
        except KeyError as exc:
            raise KeyError(f"Level {number} is not registered") from exc

    def has(self, number: int) -> bool:
        return number in self._levels

    def all(self) -> Iterable[LevelDefinition]:
        return tuple(self._levels[number] for number in sorted(self._levels))


default_level_registry = LevelRegistry()


def ensure_default_levels_registered() -> None:
    for level in _DEFAULT_LEVELS:
        if not default_level_registry.has(level.number):
            default_level_registry.register(level)


_DEFAULT_LEVELS = (
    LevelDefinition(
        number=1,
        moves=30,
        layout=parse_layout([
            ". . . . . . . . .",
            ". . . . . . . . .",
            ". . . . . . . . .",
            ". . . . . . . . .",
            ". . . . . . . . .",
            ". . . . . . . . .",
            ". . . . . . . . .",
            "1 1 . . . . . 1 1",
            "2 2 2 2 2 2 2 2 2",
        ]),
    ),
    LevelDefinition(
        number=2,
        moves=25,
        layout=parse_layout([
            "# # . . . . . # #",
            "# . . . . . . . #",
            ". . 1 1 1 1 1 . .",
            ". . 1 C C C 1 . .",
            ". . 1 C 2 C 1 . .",
            ". . 1 C C C 1 . .",
            ". . 1 1 1 1 1 . .",
            "# . . . . . . . #",
            "# # . . . . . # #",
        ]),
    ),
    LevelDefinition(
        number=3,
        moves=35,
        layout=parse_layout([
            ". . . . . . . . .",
            ". . . . . . . . .",
            "S S S . . . S S S",
            ". . . . . . . . .",
            "1 1 1 1 # 1 1 1 1",
            "1 1 1 1 # 1 1 1 1",
            "2 2 2 2 # 2 2 2 2",
            "S S . . . . . S S",
            "2 2 2 2 2 2 2 2 2",
        ]),
    ),
)
