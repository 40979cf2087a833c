GRID_ROWS = 8
GRID_COLS = 8
TOKEN_KINDS = 7

# Shortest run that counts as a match.
MIN_MATCH_LENGTH = 3

# Scoring: every cleared token is worth BASE_POINTS_PER_TOKEN, every token beyond
# MIN_MATCH_LENGTH in the same run adds LENGTH_BONUS_PER_TOKEN on top.
BASE_POINTS_PER_TOKEN = 50
LENGTH_BONUS_PER_TOKEN = 25

# How many fresh boards a reshuffle may generate while looking for one with a legal move.
RESHUFFLE_ATTEMPTS = 100

# Animation pacing (seconds) used by the optional phase timer.
SWAP_DURATION = 0.15
FADE_DURATION = 0.3
FALL_BASE_DURATION = 0.1
FALL_PER_ROW_DURATION = 0.05
REFILL_DURATION = 0.35
