from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# Every payload carries ``world``, the esper World of the board involved, so
# boards sharing one bus can tell their events apart.

# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: world, src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: world, src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: world, src=(r,c), dst=(r,c), reason=str
EVENT_COMBO_TRIGGERED = "combo_triggered"          # payload: world, kind=str, positions=[(r,c),...]
EVENT_SPECIAL_CREATED = "special_created"          # payload: world, position=(r,c), code=int
EVENT_MATCH_FOUND = "match_found"                  # payload: world, positions=[(r,c),...], depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: world, depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: world, depth=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: world, attempts=int
EVENT_CELLS_DIRTY = "cells_dirty"                  # payload: world, phase=str, cells=[(r,c,code)], backgrounds=[(r,c,packed)]


# ============================================================================
# LEVEL PROGRESS
# ============================================================================
EVENT_MOVE_RESOLVED = "move_resolved"      # payload: world, src, dst, score_delta=int, moves_remaining=int, jelly_remaining=int
EVENT_LEVEL_WON = "level_won"              # payload: world, score=int, moves_remaining=int
EVENT_LEVEL_LOST = "level_lost"            # payload: world, score=int, jelly_remaining=int


# ============================================================================
# PRESENTATION
# ============================================================================
EVENT_SOUND_CUE = "sound_cue"              # payload: world, cue=str

CUE_EXPLOSION = "explosion"
CUE_DESWIRL = "deswirl"
CUE_SPECIAL_CREATED = "special_created"
CUE_RESHUFFLE = "reshuffle"
CUE_SWAP_INVALID = "swap_invalid"


def combo_cue(depth: int) -> str:
    return f"combo-{depth}"
