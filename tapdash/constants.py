"""
Screen dimensions, colors, font sizes, round and target tuning knobs,
leaderboard settings, and file locations.
"""

import os

WIDTH, HEIGHT = 960, 540
FPS = 60
BG_COLOR = (18, 16, 32)
TEXT_COLOR = (235, 235, 235)
NEON_COLOR = (255, 80, 200)
ZONE_COLOR = (34, 30, 58)
ZONE_BORDER = (90, 80, 140)
NORMAL_COLOR = (60, 230, 120)
HAZARD_COLOR = (240, 60, 60)
P1_COLOR = (90, 200, 255)
P2_COLOR = (255, 200, 90)
HUD_PADDING = 12
FONT_NAME = "freesansbold.ttf"

# Font Size Constants
FONT_SIZE_SMALL = 14
FONT_SIZE_MEDIUM = 16
FONT_SIZE_LARGE = 28

# Round Settings
ROUND_SECONDS = 30
TICK_INTERVAL_MS = 1000
SPAWN_INTERVAL_MS = 800

# Target Settings
HAZARD_CHANCE = 0.12
TARGET_BASE_LIFE_MS = 900
TARGET_LIFE_JITTER_MS = 300        # lifetime drawn from [base, base + jitter]
TARGET_RADIUS = 28

# Safe interior rectangle (percent of the tap area) to avoid edge clipping
SAFE_X_RANGE = (15.0, 85.0)
SAFE_Y_RANGE = (20.0, 80.0)

# Scoring
HIT_REWARD = 10
HAZARD_PENALTY = 50

# Slots
SLOT_IDS = ("p1", "p2")

# Leaderboard
LEADERBOARD_KEY = "tapdash_lb"
LEADERBOARD_CAPACITY = 10
LEADERBOARD_SHOWN = 5

# Log file and persistent state
LOG_FILE = os.path.join(os.path.dirname(os.path.dirname(__file__)), "log.md")
STATE_DIR_ENV = "TAPDASH_STATE_DIR"
DEFAULT_STATE_DIR = os.path.join(os.path.expanduser("~"), ".tapdash")
