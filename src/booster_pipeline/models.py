"""Data models for booster collation and pack skeletons."""

from dataclasses import dataclass, field
from typing import Dict, Tuple


def card_key(set_code: str, collector_number: str) -> str:
    """Identifier key used by sheets and card lookups, e.g. ``"mkm:123"``."""
    return f"{set_code}:{collector_number}"


@dataclass(frozen=True)
class CardIdentifier:
    """A printing addressed by set code and collector number."""

    set_code: str
    collector_number: str

    @property
    def key(self) -> str:
        return card_key(self.set_code, self.collector_number)


@dataclass(frozen=True)
class SheetCard:
    """One weighted entry on a print sheet."""

    set_code: str
    collector_number: str
    weight: float
    is_foil: bool = False

    @property
    def key(self) -> str:
        return card_key(self.set_code, self.collector_number)


@dataclass(frozen=True)
class BoosterSheet:
    id: int
    name: str
    total_weight: float
    cards: Tuple[SheetCard, ...] = ()


@dataclass(frozen=True)
class ConfigSlot:
    """Draw ``count`` cards from sheet ``sheet_id``."""

    sheet_id: int
    count: int


@dataclass(frozen=True)
class BoosterConfig:
    """One possible pack layout; a product picks among its configs by weight."""

    id: int
    weight: float
    slots: Tuple[ConfigSlot, ...] = ()


@dataclass(frozen=True)
class BoosterProductData:
    """Everything needed to collate packs for one booster product."""

    product_id: int
    code: str
    set_code: str
    configs: Tuple[BoosterConfig, ...]
    sheets: Dict[int, BoosterSheet] = field(default_factory=dict)
    all_card_identifiers: Tuple[CardIdentifier, ...] = ()


@dataclass(frozen=True)
class PackCardSkeleton:
    """A drawn card before its metadata is resolved."""

    set_code: str
    collector_number: str
    is_foil: bool = False

    @property
    def key(self) -> str:
        return card_key(self.set_code, self.collector_number)


@dataclass(frozen=True)
class SetInfo:
    code: str
    name: str
    released_at: str  # ISO date, e.g. "2024-02-09"
