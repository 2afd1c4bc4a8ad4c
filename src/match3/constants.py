GRID_ROWS = 8
GRID_COLS = 8

# Number of distinct tile kinds dealt onto the board (kinds are 0..TILE_KINDS-1).
TILE_KINDS = 5
# Points awarded per matched tile in every cascade step.
SCORE_PER_TILE = 10

# Rotation budget for a session; each 90 degree turn consumes one unit.
MAX_ROTATIONS = 5
ROTATION_STEP = 90

# Retry ceilings. Exhausting any of them degrades to a best-effort board.
GENERATION_ATTEMPTS = 100  # whole-board attempts during initial generation
GENERATION_DRAWS = 50      # random draws per cell before forcing the next kind
SHUFFLE_ATTEMPTS = 50      # reshuffles before giving up on a clean arrangement

MIN_MATCH = 3

# Display names for the first kinds; anything beyond falls back to "kind<N>".
KIND_NAMES = ('red', 'green', 'blue', 'yellow', 'purple')
