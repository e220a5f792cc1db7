from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DRAFTS_DIR = PROJECT_ROOT / "data" / "drafts"

# Seat limits
MIN_PLAYERS = 2
MAX_PLAYERS = 8
WINSTON_PLAYERS = 2

# Default draft settings
DEFAULT_PACKS_PER_PLAYER = 3
DEFAULT_CARDS_PER_PACK = 14
DEFAULT_REVIEW_PERIOD_SECONDS = 60
WINSTON_PILE_COUNT = 3
WINSTON_MIN_CARDS = 3

# Deck building
MIN_DECK_SIZE = 40
SUGGESTED_LAND_COUNT = 17
EVEN_LAND_SPLIT = {"W": 4, "U": 3, "B": 4, "R": 3, "G": 3}

# Seconds on the clock keyed by cards left in the pack (1 card = auto-pick)
DEFAULT_TIMER_SCHEDULE = {
    14: 40,
    13: 40,
    12: 30,
    11: 30,
    10: 25,
    9: 25,
    8: 20,
    7: 20,
    6: 10,
    5: 10,
    4: 5,
    3: 5,
    2: 5,
    1: 0,
}
DEFAULT_TIMER_SECONDS = 5

TIMER_MULTIPLIERS = {
    "relaxed": 1.5,
    "competitive": 1.0,
    "speed": 0.5,
    "none": float("inf"),
}
