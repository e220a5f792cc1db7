"""CSV ingestion for booster collation tables and the card catalog.

Booster data is stored relationally across five tables:

- ``booster_products``: one row per product (``mkm-play``, ``neo-draft`` ...)
- ``booster_configs``: weighted pack layouts for each product
- ``booster_config_slots``: sheet and card count for each layout slot
- ``booster_sheets``: print sheets belonging to a product
- ``sheet_cards``: weighted card entries on each sheet

Alongside them ``cards.csv`` carries card metadata keyed by set code and
collector number, and ``sets.csv`` the release dates used to pick a pack era.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from src.booster_pipeline.config import (
    BOOSTER_DATA_DIR,
    FILE_NAMES,
    PRODUCT_CODE_SUFFIXES,
    REQUIRED_COLUMNS,
)
from src.booster_pipeline.models import (
    BoosterConfig,
    BoosterProductData,
    BoosterSheet,
    CardIdentifier,
    ConfigSlot,
    SetInfo,
    SheetCard,
    card_key,
)
from src.draft_engine.draft_state import MANA_COLORS, CardReference, Rarity

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "t", "1", "yes", "y"}

# Identifier columns that must keep leading zeros ("007")
_STRING_COLUMNS = {
    "code": str,
    "set_code": str,
    "collector_number": str,
    "name": str,
    "scryfall_id": str,
}


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


def _parse_bool(value) -> bool:
    if pd.isna(value):
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_STRINGS


def _parse_colors(value) -> tuple:
    """Accept "W,U", "WU" or "" and keep only the five mana colors."""
    if pd.isna(value):
        return ()
    return tuple(c for c in str(value).upper() if c in MANA_COLORS)


def _parse_rarity(value) -> Rarity:
    normalized = str(value).strip().lower()
    try:
        return Rarity(normalized)
    except ValueError:
        # "special" and "bonus" printings draft as rares
        return Rarity.RARE


def _optional_str(value) -> Optional[str]:
    if pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


class CardCatalog:
    """Card metadata indexed by ``set:collector_number``."""

    def __init__(self, cards_df: pd.DataFrame):
        self._by_key: Dict[str, CardReference] = {}
        self._by_set: Dict[str, List[CardReference]] = {}

        has_booster_flag = "booster" in cards_df.columns
        for row in cards_df.itertuples(index=False):
            card = CardReference(
                scryfall_id=row.scryfall_id,
                name=row.name,
                rarity=_parse_rarity(row.rarity),
                colors=_parse_colors(getattr(row, "colors", None)),
                cmc=float(getattr(row, "cmc", 0.0) or 0.0),
                image_uri=_optional_str(getattr(row, "image_uri", None)) or "",
                small_image_uri=_optional_str(getattr(row, "small_image_uri", None)) or "",
                type_line=_optional_str(getattr(row, "type_line", None)),
            )
            self._by_key[card_key(row.set_code, row.collector_number)] = card
            if not has_booster_flag or _parse_bool(row.booster):
                self._by_set.setdefault(row.set_code, []).append(card)

    def __len__(self) -> int:
        return len(self._by_key)

    def lookup(self, identifiers: Iterable[CardIdentifier]) -> Dict[str, CardReference]:
        """Resolve identifiers to cards; unknown identifiers are left out."""
        found = {}
        for ident in identifiers:
            card = self._by_key.get(ident.key)
            if card is not None:
                found[ident.key] = card
        return found

    def name_lookup(self, identifiers: Iterable[CardIdentifier]) -> Dict[str, str]:
        """Display names for the identifiers the catalog knows."""
        return {key: card.name for key, card in self.lookup(identifiers).items()}

    def cards_for_set(self, set_code: str) -> List[CardReference]:
        """Booster-legal cards of a set."""
        return list(self._by_set.get(set_code.lower(), []))


class BoosterDataIngester:
    """Reads booster collation CSVs into product data for pack generation.

    Tables are read lazily and cached for the lifetime of the ingester.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir else BOOSTER_DATA_DIR
        self._tables: Dict[str, pd.DataFrame] = {}

    def _resolve_path(self, file_key: str) -> Path:
        """Build the full file path for a given file key, raising if missing."""
        filepath = self.data_dir / FILE_NAMES[file_key]
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def _read_table(self, file_key: str) -> pd.DataFrame:
        if file_key in self._tables:
            return self._tables[file_key]

        filepath = self._resolve_path(file_key)
        logger.info("Reading %s: %s", file_key, filepath.name)

        try:
            df = pd.read_csv(filepath, dtype=_STRING_COLUMNS, skip_blank_lines=True)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise IngestionError(f"Failed to read {filepath}: {e}") from e

        missing = [c for c in REQUIRED_COLUMNS[file_key] if c not in df.columns]
        if missing:
            raise IngestionError(f"{filepath.name} is missing columns: {missing}")

        # Clean string columns
        for col in df.columns:
            if pd.api.types.is_string_dtype(df[col]):
                df[col] = df[col].str.strip()
        if "set_code" in df.columns:
            df["set_code"] = df["set_code"].str.lower()
        if file_key in ("products", "sets"):
            df["code"] = df["code"].str.lower()

        # Drop rows with a blank required field
        df = df.dropna(subset=REQUIRED_COLUMNS[file_key]).reset_index(drop=True)

        self._tables[file_key] = df
        logger.info("Loaded %d rows from %s", len(df), filepath.name)
        return df

    def _numeric(self, df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
        df = df.copy()
        for col in columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        return df.dropna(subset=columns)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------
    def read_products(self) -> pd.DataFrame:
        return self._numeric(self._read_table("products"), ["id"])

    def read_configs(self) -> pd.DataFrame:
        return self._numeric(self._read_table("configs"), ["id", "product_id", "weight"])

    def read_config_slots(self) -> pd.DataFrame:
        return self._numeric(
            self._read_table("config_slots"), ["config_id", "sheet_id", "count"]
        )

    def read_sheets(self) -> pd.DataFrame:
        return self._numeric(
            self._read_table("sheets"), ["id", "product_id", "total_weight"]
        )

    def read_sheet_cards(self) -> pd.DataFrame:
        return self._numeric(self._read_table("sheet_cards"), ["sheet_id", "weight"])

    def read_sets(self) -> pd.DataFrame:
        return self._read_table("sets")

    # ------------------------------------------------------------------
    # Product assembly
    # ------------------------------------------------------------------
    def _find_product(
        self, set_code: str, product_code: Optional[str]
    ) -> Optional[pd.Series]:
        products = self.read_products()
        code = set_code.lower()
        if product_code:
            candidates = [product_code.lower()]
        else:
            candidates = [f"{code}{suffix}" for suffix in PRODUCT_CODE_SUFFIXES]

        for candidate in candidates:
            match = products[products["code"] == candidate]
            if not match.empty:
                return match.iloc[0]
        return None

    def load_product_data(
        self, set_code: str, product_code: Optional[str] = None
    ) -> Optional[BoosterProductData]:
        """Load collation data for a set.

        Tries product codes ``{set}-play``, ``{set}-draft`` and ``{set}`` in
        that order unless ``product_code`` names one explicitly.

        Returns:
            BoosterProductData, or None when no product, config or sheet
            exists for the set.
        """
        product = self._find_product(set_code, product_code)
        if product is None:
            logger.info("No booster product for set %s", set_code)
            return None

        product_id = int(product["id"])
        configs = self.read_configs()
        configs = configs[configs["product_id"] == product_id]
        sheets = self.read_sheets()
        sheets = sheets[sheets["product_id"] == product_id]

        if configs.empty or sheets.empty:
            logger.warning(
                "Product %s has %d configs and %d sheets, skipping",
                product["code"], len(configs), len(sheets),
            )
            return None

        sheet_ids = set(sheets["id"].astype(int))
        sheet_cards = self.read_sheet_cards()
        sheet_cards = sheet_cards[sheet_cards["sheet_id"].astype(int).isin(sheet_ids)]

        cards_by_sheet: Dict[int, List[SheetCard]] = {}
        identifiers: Dict[str, CardIdentifier] = {}
        for row in sheet_cards.itertuples(index=False):
            entry = SheetCard(
                set_code=row.set_code,
                collector_number=row.collector_number,
                weight=float(row.weight),
                is_foil=_parse_bool(row.is_foil),
            )
            cards_by_sheet.setdefault(int(row.sheet_id), []).append(entry)
            identifiers.setdefault(
                entry.key, CardIdentifier(entry.set_code, entry.collector_number)
            )

        sheet_map = {
            int(row.id): BoosterSheet(
                id=int(row.id),
                name=row.name,
                total_weight=float(row.total_weight),
                cards=tuple(cards_by_sheet.get(int(row.id), [])),
            )
            for row in sheets.itertuples(index=False)
        }

        config_ids = set(configs["id"].astype(int))
        slots = self.read_config_slots()
        slots = slots[slots["config_id"].astype(int).isin(config_ids)]
        slots_by_config: Dict[int, List[ConfigSlot]] = {}
        for row in slots.itertuples(index=False):
            slots_by_config.setdefault(int(row.config_id), []).append(
                ConfigSlot(sheet_id=int(row.sheet_id), count=int(row.count))
            )

        booster_configs = tuple(
            BoosterConfig(
                id=int(row.id),
                weight=float(row.weight),
                slots=tuple(slots_by_config.get(int(row.id), [])),
            )
            for row in configs.itertuples(index=False)
        )

        logger.info(
            "Loaded product %s: %d configs, %d sheets, %d distinct cards",
            product["code"], len(booster_configs), len(sheet_map), len(identifiers),
        )
        return BoosterProductData(
            product_id=product_id,
            code=product["code"],
            set_code=product["set_code"],
            configs=booster_configs,
            sheets=sheet_map,
            all_card_identifiers=tuple(identifiers.values()),
        )

    # ------------------------------------------------------------------
    # Sets and cards
    # ------------------------------------------------------------------
    def read_set_info(self, set_code: str) -> Optional[SetInfo]:
        """Name and release date of a set, or None if unknown."""
        sets = self.read_sets()
        match = sets[sets["code"] == set_code.lower()]
        if match.empty:
            return None
        row = match.iloc[0]
        return SetInfo(code=row["code"], name=row["name"], released_at=row["released_at"])

    def read_card_catalog(self) -> CardCatalog:
        """Load ``cards.csv`` into a lookup keyed by set and collector number.

        Raises:
            FileNotFoundError: If ``cards.csv`` is missing.
            IngestionError: If it cannot be parsed.
        """
        df = self._read_table("cards")
        if "cmc" in df.columns:
            df = df.copy()
            df["cmc"] = pd.to_numeric(df["cmc"], errors="coerce").fillna(0.0)
        catalog = CardCatalog(df)
        logger.info("Card catalog holds %d printings", len(catalog))
        return catalog
