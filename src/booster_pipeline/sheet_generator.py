"""Sheet-based pack generation from booster collation data.

Generation runs in two phases. Skeletons are drawn from the print sheets as
bare ``set:collector_number`` identifiers, then resolved against a card map.
Splitting them lets a caller look up metadata for only the cards that were
actually drawn.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set

from src.booster_pipeline.config import SHEET_DRAW_ATTEMPTS
from src.booster_pipeline.models import (
    BoosterProductData,
    BoosterSheet,
    CardIdentifier,
    PackCardSkeleton,
    SheetCard,
)
from src.draft_engine.draft_state import CardReference
from src.draft_engine.rng import RandomSource, resolve_rng, weighted_random_index

logger = logging.getLogger(__name__)

Skeleton = List[PackCardSkeleton]


def _dedup_key(card: SheetCard, name_lookup: Optional[Mapping[str, str]]) -> str:
    """Card name when known, so reprints of one card count as duplicates."""
    if name_lookup:
        return name_lookup.get(card.key, card.key)
    return card.key


def draw_from_sheet(
    sheet: BoosterSheet,
    used_keys: Set[str],
    rng: Optional[RandomSource] = None,
    name_lookup: Optional[Mapping[str, str]] = None,
) -> Optional[SheetCard]:
    """Weighted draw of a card not yet used from this sheet.

    Re-rolls on a used card up to ``SHEET_DRAW_ATTEMPTS`` times, then scans
    the sheet in order. Returns None when every card has been used.
    """
    rng = resolve_rng(rng)

    for _ in range(SHEET_DRAW_ATTEMPTS):
        roll = rng.random() * sheet.total_weight
        for card in sheet.cards:
            roll -= card.weight
            if roll <= 0:
                if _dedup_key(card, name_lookup) not in used_keys:
                    return card
                break

    for card in sheet.cards:
        if _dedup_key(card, name_lookup) not in used_keys:
            return card

    return None


def generate_sheet_pack_skeleton(
    data: BoosterProductData,
    rng: Optional[RandomSource] = None,
    name_lookup: Optional[Mapping[str, str]] = None,
) -> Skeleton:
    """Draw one pack: pick a config by weight, then fill each of its slots."""
    rng = resolve_rng(rng)
    config = data.configs[weighted_random_index([c.weight for c in data.configs], rng)]

    pack: Skeleton = []
    used_by_sheet: Dict[int, Set[str]] = {}

    for slot in config.slots:
        sheet = data.sheets.get(slot.sheet_id)
        if sheet is None:
            logger.warning(
                "Config %d of %s references unknown sheet %d",
                config.id, data.code, slot.sheet_id,
            )
            continue

        used = used_by_sheet.setdefault(sheet.id, set())
        for _ in range(slot.count):
            drawn = draw_from_sheet(sheet, used, rng, name_lookup)
            if drawn is None:
                logger.warning("Sheet %s exhausted in %s", sheet.name, data.code)
                break
            used.add(_dedup_key(drawn, name_lookup))
            pack.append(
                PackCardSkeleton(
                    set_code=drawn.set_code,
                    collector_number=drawn.collector_number,
                    is_foil=drawn.is_foil,
                )
            )

    return pack


def generate_all_sheet_pack_skeletons(
    data: BoosterProductData,
    player_count: int,
    packs_per_player: int,
    rng: Optional[RandomSource] = None,
    name_lookup: Optional[Mapping[str, str]] = None,
) -> List[Skeleton]:
    total_packs = player_count * packs_per_player
    return [
        generate_sheet_pack_skeleton(data, rng, name_lookup)
        for _ in range(total_packs)
    ]


def collect_skeleton_identifiers(skeletons: Sequence[Skeleton]) -> List[CardIdentifier]:
    """Distinct identifiers across all skeletons, in first-drawn order."""
    seen: Dict[str, CardIdentifier] = {}
    for pack in skeletons:
        for card in pack:
            if card.key not in seen:
                seen[card.key] = CardIdentifier(card.set_code, card.collector_number)
    return list(seen.values())


def resolve_pack_skeletons(
    skeletons: Sequence[Skeleton],
    card_map: Mapping[str, CardReference],
) -> List[List[CardReference]]:
    """Turn skeletons into packs; identifiers missing from ``card_map`` are dropped."""
    packs = []
    for pack in skeletons:
        resolved = []
        for card in pack:
            ref = card_map.get(card.key)
            if ref is None:
                logger.warning("Card not found in card map: %s", card.key)
                continue
            resolved.append(ref.with_foil() if card.is_foil else ref)
        packs.append(resolved)
    return packs


def _names_from_map(card_map: Mapping[str, CardReference]) -> Dict[str, str]:
    return {key: card.name for key, card in card_map.items()}


def generate_sheet_pack(
    data: BoosterProductData,
    card_map: Mapping[str, CardReference],
    rng: Optional[RandomSource] = None,
) -> List[CardReference]:
    """Draw and resolve one pack against a card map fetched up front."""
    skeleton = generate_sheet_pack_skeleton(data, rng, _names_from_map(card_map))
    return resolve_pack_skeletons([skeleton], card_map)[0]


def generate_all_sheet_packs(
    data: BoosterProductData,
    card_map: Mapping[str, CardReference],
    player_count: int,
    packs_per_player: int,
    rng: Optional[RandomSource] = None,
) -> List[List[CardReference]]:
    skeletons = generate_all_sheet_pack_skeletons(
        data, player_count, packs_per_player, rng, _names_from_map(card_map)
    )
    return resolve_pack_skeletons(skeletons, card_map)
