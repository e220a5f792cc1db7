# Bot identity
BOT_USER_ID_PREFIX = "00000000-0000-0000-0000-0000000000"
BOT_NAMES = [
    "Jace",
    "Liliana",
    "Chandra",
    "Nissa",
    "Gideon",
    "Ajani",
    "Teferi",
    "Vivien",
    "Sorin",
    "Elspeth",
]

# Card scoring
RARITY_SCORES = {
    "mythic": 40,
    "rare": 30,
    "uncommon": 15,
    "common": 5,
}
COLOR_COMMITMENT_THRESHOLD = 4  # picks before choosing colors
THIRD_COLOR_RATIO = 0.6  # third color must reach 60% of the second
OFF_COLOR_MULTIPLIER = 0.1
CREATURE_TARGET_RATIO = 0.6  # ~60% creatures, 40% spells
BALANCE_BONUS = 1.3
TIE_BAND = 0.95  # pick among cards within 95% of the top score

# Winston take thresholds on a pile's average card score
WINSTON_LAST_PILE_THRESHOLD = 5
WINSTON_THRESHOLDS_BY_SIZE = [  # (minimum pile size, average score to beat)
    (3, 8),
    (2, 15),
    (1, 25),
]

# Runner safety caps
MAX_STANDARD_ITERATIONS = 500
MAX_WINSTON_ITERATIONS = 200

# Cards dealt into a simulated Winston draft
SIMULATED_WINSTON_POOL_SIZE = 90
