GRID_ROWS = 9
GRID_COLS = 9

# ============================================================================
# FOREGROUND TILE CODES
# ============================================================================
COLOUR_COUNT = 6
PLAIN_TILES = 0        # 0-5 plain candy
V_TILES = 6            # 6-11 vertical-striped
H_TILES = 12           # 12-17 horizontal-striped
WRAP_TILES = 18        # 18-23 wrapped
SWIRL_TILE = 24
CAGE_TILE = 25
COLOURBOMB_TILE = 26
EMPTY_TILE = 31

# Codes at or above this value carry no colour.
NON_COLOUR_TILES = SWIRL_TILE
# Transient "marked for explosion" bit, or'ed into the foreground code.
MARKED = 0x80
CODE_MASK = 0x7F

# ============================================================================
# BACKGROUND
# ============================================================================
HOLE_JELLY = 3
# Packed layout form: bits 0-1 jelly level, bit 2 cage, bit 3 swirl.
BG_JELLY_MASK = 0x03
BG_CAGE = 0x04
BG_SWIRL = 0x08

# ============================================================================
# SCORING
# ============================================================================
SCORE_TRIGGER = 1
SCORE_COMBO = 3
SCORE_PLAIN_MATCH = 5
SCORE_STRIPED = 10
SCORE_WRAPPED = 20
SCORE_COLOURBOMB = 20
SCORE_CAGE = 20
SCORE_SWIRL = 10
SCORE_JELLY = 10

# ============================================================================
# RNG & RESHUFFLE
# ============================================================================
DEFAULT_SEED = 0xACE1
# Permutation attempts before reshuffle falls back to redrawing colours.
RESHUFFLE_ATTEMPTS = 64
# Redraw attempts (reshuffle fallback and initial population) before giving up.
REDRAW_ATTEMPTS = 200
DEFAULT_MOVES = 30
# Colour draws per cell before population accepts a run and retries the board.
COLOUR_DRAW_LIMIT = 64
