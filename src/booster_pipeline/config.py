from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
BOOSTER_DATA_DIR = DATA_DIR / "boosters"

# Booster collation tables and the card catalog, one CSV each
FILE_NAMES = {
    "products": "booster_products.csv",
    "configs": "booster_configs.csv",
    "config_slots": "booster_config_slots.csv",
    "sheets": "booster_sheets.csv",
    "sheet_cards": "sheet_cards.csv",
    "cards": "cards.csv",
    "sets": "sets.csv",
}

REQUIRED_COLUMNS = {
    "products": ["id", "code", "set_code"],
    "configs": ["id", "product_id", "weight"],
    "config_slots": ["config_id", "sheet_id", "count"],
    "sheets": ["id", "product_id", "name", "total_weight"],
    "sheet_cards": ["sheet_id", "set_code", "collector_number", "weight", "is_foil"],
    "cards": ["set_code", "collector_number", "scryfall_id", "name", "rarity"],
    "sets": ["code", "name", "released_at"],
}

# Product codes tried for a set, in preference order
PRODUCT_CODE_SUFFIXES = ["-play", "-draft", ""]

# Sets released on or after March of the Machine use play boosters
PLAY_BOOSTER_CUTOFF = "2023-04-21"

# Draw retry limits before falling back to an exhaustive scan
SHEET_DRAW_ATTEMPTS = 50
TEMPLATE_DRAW_ATTEMPTS = 100

# Rarity roll weights for the built-in templates
RARE_MYTHIC_WEIGHTS = [6, 1]
WILDCARD_WEIGHTS = [70, 20, 8, 2]

# Name of the special pool holding basic lands
LAND_POOL = "land"
