"""Candy taxonomy.

Foreground cells are packed integers: ranges of six codes per candy kind keep
the colour in ``code % 6``. The tagged variants below are what the public API
hands out; the packed form stays internal to the systems.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from candyfield.constants import (
    CAGE_TILE,
    CODE_MASK,
    COLOUR_COUNT,
    COLOURBOMB_TILE,
    EMPTY_TILE,
    H_TILES,
    NON_COLOUR_TILES,
    PLAIN_TILES,
    SWIRL_TILE,
    V_TILES,
    WRAP_TILES,
)


@dataclass(frozen=True, slots=True)
class Color:
    index: int


@dataclass(frozen=True, slots=True)
class StripedH:
    color: int


@dataclass(frozen=True, slots=True)
class StripedV:
    color: int


@dataclass(frozen=True, slots=True)
class Wrapped:
    color: int


@dataclass(frozen=True, slots=True)
class Colorbomb:
    pass


@dataclass(frozen=True, slots=True)
class Swirl:
    pass


@dataclass(frozen=True, slots=True)
class Cage:
    pass


@dataclass(frozen=True, slots=True)
class Empty:
    pass


Tile = Union[Color, StripedH, StripedV, Wrapped, Colorbomb, Swirl, Cage, Empty]


def strip(code: int) -> int:
    return code & CODE_MASK


def is_colour(code: int) -> bool:
    return strip(code) < NON_COLOUR_TILES


def is_plain(code: int) -> bool:
    return PLAIN_TILES <= strip(code) < V_TILES


def is_vertical_striped(code: int) -> bool:
    return V_TILES <= strip(code) < H_TILES


def is_horizontal_striped(code: int) -> bool:
    return H_TILES <= strip(code) < WRAP_TILES


def is_striped(code: int) -> bool:
    return V_TILES <= strip(code) < WRAP_TILES


def is_wrapped(code: int) -> bool:
    return WRAP_TILES <= strip(code) < NON_COLOUR_TILES


def is_colourbomb(code: int) -> bool:
    return strip(code) == COLOURBOMB_TILE


def is_empty(code: int) -> bool:
    return strip(code) == EMPTY_TILE


def is_swirl(code: int) -> bool:
    return strip(code) == SWIRL_TILE


def colour_of(code: int) -> int:
    return strip(code) % COLOUR_COUNT


def candy_match(a: int, b: int) -> bool:
    """True when both codes carry a colour and the colours agree."""
    a, b = strip(a), strip(b)
    if a >= NON_COLOUR_TILES or b >= NON_COLOUR_TILES:
        return False
    return a % COLOUR_COUNT == b % COLOUR_COUNT


def decode_tile(code: int) -> Tile:
    code = strip(code)
    if code < V_TILES:
        return Color(code)
    if code < H_TILES:
        return StripedV(code % COLOUR_COUNT)
    if code < WRAP_TILES:
        return StripedH(code % COLOUR_COUNT)
    if code < NON_COLOUR_TILES:
        return Wrapped(code % COLOUR_COUNT)
    if code == SWIRL_TILE:
        return Swirl()
    if code == CAGE_TILE:
        return Cage()
    if code == COLOURBOMB_TILE:
        return Colorbomb()
    if code == EMPTY_TILE:
        return Empty()
    raise ValueError(f"Unknown tile code {code}")


def encode_tile(tile: Tile) -> int:
    if isinstance(tile, Color):
        return PLAIN_TILES + _checked_colour(tile.index)
    if isinstance(tile, StripedV):
        return V_TILES + _checked_colour(tile.color)
    if isinstance(tile, StripedH):
        return H_TILES + _checked_colour(tile.color)
    if isinstance(tile, Wrapped):
        return WRAP_TILES + _checked_colour(tile.color)
    if isinstance(tile, Colorbomb):
        return COLOURBOMB_TILE
    if isinstance(tile, Swirl):
        return SWIRL_TILE
    if isinstance(tile, Cage):
        return CAGE_TILE
    if isinstance(tile, Empty):
        return EMPTY_TILE
    raise ValueError(f"Unknown tile {tile!r}")


def _checked_colour(index: int) -> int:
    if not 0 <= index < COLOUR_COUNT:
        raise ValueError(f"Colour index {index} out of range")
    return index
