BOARD_WIDTH = 10
BOARD_HEIGHT = 10

# Smallest connected group the flood-fill strategy accepts.
MIN_MATCH = 2
# Default radius for blast cells when the table does not give one.
BLAST_RADIUS = 2

TARGET_SCORE = 500
MAX_MOVES = 30

# First-class cell type occupying cleared slots; never matched, never selectable.
EMPTY_TYPE = "empty"

# Strategy names accepted in cell-type tables.
STRATEGY_EQUALS = "equals"
STRATEGY_EXPLOSION = "explosion"
