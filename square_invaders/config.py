"""
Game Configuration
===================
Fixed constants for the simulation and the terminal front end.
"""


# =============================================================================
# SCREEN
# =============================================================================

WIDTH = 400
HEIGHT = 400

# Bodies may drift this far past the edge before they count as off-screen
SCREEN_MARGIN = 40


# =============================================================================
# ENTITY SIZES
# =============================================================================

PLAYER_SIZE = 15
INVADER_SIZE = 15
BULLET_SIZE = 3


# =============================================================================
# MOVEMENT
# =============================================================================

PLAYER_STEP = 2.0
INVADER_SPEED = 0.3

# Patrol sweeps while the offset stays inside [PATROL_MIN, PATROL_MAX]
PATROL_MIN = 0.0
PATROL_MAX = 29.0

PLAYER_BULLET_VELOCITY = (0.0, -7.0)
INVADER_BULLET_VELOCITY_Y = 2.0
INVADER_BULLET_SPREAD = 0.5  # velocity_x drawn from [-spread, spread)


# =============================================================================
# SPAWNING
# =============================================================================

# An invader fires when a uniform [0, 1) draw exceeds this
INVADER_FIRE_THRESHOLD = 0.995

INVADER_COUNT = 24
INVADER_COLUMNS = 8
INVADER_ROWS = 3
INVADER_ORIGIN = 30
INVADER_SPACING = 30


# =============================================================================
# FRONT END
# =============================================================================

TICK_INTERVAL = 0.020  # seconds
MAX_TICKS_PER_FRAME = 4
KEY_HOLD_TICKS = 12

MIN_WIDTH = 40
MIN_HEIGHT = 20
HUD_ROWS = 3
