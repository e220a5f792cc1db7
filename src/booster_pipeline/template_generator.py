"""Template-based pack generation from rarity-grouped card pools.

Used when a set has no collation data: each template slot rolls a rarity,
then draws a card of that rarity that is not already in the pack.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Set

from src.booster_pipeline.config import LAND_POOL, TEMPLATE_DRAW_ATTEMPTS
from src.booster_pipeline.pack_templates import PackSlot, PackTemplate
from src.draft_engine.draft_state import CardReference, Rarity
from src.draft_engine.rng import (
    RandomSource,
    random_index,
    resolve_rng,
    shuffle_cards,
    weighted_random_index,
)

logger = logging.getLogger(__name__)

CardPool = Mapping[str, Sequence[CardReference]]

__all__ = [
    "CardPool",
    "generate_all_packs",
    "generate_cube_packs",
    "generate_pack",
    "group_cards_by_rarity",
    "shuffle_cards",
    "weighted_random_index",
]


def group_cards_by_rarity(cards: Sequence[CardReference]) -> Dict[str, List[CardReference]]:
    """Split cards into rarity pools; basic lands go to the ``land`` pool only."""
    grouped: Dict[str, List[CardReference]] = {
        rarity.value: [] for rarity in Rarity
    }
    grouped[LAND_POOL] = []

    for card in cards:
        if card.is_basic_land:
            grouped[LAND_POOL].append(card)
        else:
            grouped[card.rarity.value].append(card)

    return grouped


def _pick_rarity(slot: PackSlot, rng: RandomSource) -> Rarity:
    if slot.rarity_weights and len(slot.rarity_weights) == len(slot.rarity_pool):
        return slot.rarity_pool[weighted_random_index(slot.rarity_weights, rng)]
    return slot.rarity_pool[random_index(len(slot.rarity_pool), rng)]


def _pick_card_from_pool(
    pool: Sequence[CardReference],
    used_ids: Set[str],
    allow_duplicates: bool,
    rng: RandomSource,
) -> CardReference:
    """Random draw that avoids cards already in the pack.

    Falls back to a shuffled scan, and finally to a duplicate when every
    card in the pool is already used.
    """
    if allow_duplicates:
        return pool[random_index(len(pool), rng)]

    for _ in range(TEMPLATE_DRAW_ATTEMPTS):
        card = pool[random_index(len(pool), rng)]
        if card.scryfall_id not in used_ids:
            return card

    for card in shuffle_cards(pool, rng):
        if card.scryfall_id not in used_ids:
            return card

    logger.warning("Pool of %d cards exhausted, accepting a duplicate", len(pool))
    return pool[random_index(len(pool), rng)]


def _slot_pools(slot: PackSlot, rarity: Rarity, card_pool: CardPool) -> List[Sequence[CardReference]]:
    """Pools to try for a slot, best first."""
    pools = []
    if slot.special_pool:
        pools.append(card_pool.get(slot.special_pool) or [])
    pools.append(card_pool.get(rarity.value) or [])
    pools.extend(card_pool.get(r.value) or [] for r in slot.rarity_pool)
    return pools


def generate_pack(
    card_pool: CardPool,
    template: PackTemplate,
    rng: Optional[RandomSource] = None,
) -> List[CardReference]:
    """Generate a single pack, one card per template slot.

    A slot whose pools are all empty is skipped, so a pack from a thin card
    pool can come out short.
    """
    rng = resolve_rng(rng)
    pack: List[CardReference] = []
    used_ids: Set[str] = set()

    for slot in template.slots:
        rarity = _pick_rarity(slot, rng)
        pool = next((p for p in _slot_pools(slot, rarity, card_pool) if p), None)
        if pool is None:
            logger.warning(
                "No cards for slot %d (%s) in template %s",
                slot.position, slot.name, template.id,
            )
            continue

        card = _pick_card_from_pool(pool, used_ids, slot.allow_duplicates, rng)
        if not slot.allow_duplicates:
            used_ids.add(card.scryfall_id)
        pack.append(card.with_foil() if slot.is_foil else card)

    return pack


def generate_all_packs(
    card_pool: CardPool,
    template: PackTemplate,
    player_count: int,
    packs_per_player: int,
    rng: Optional[RandomSource] = None,
) -> List[List[CardReference]]:
    """``player_count * packs_per_player`` independent packs."""
    total_packs = player_count * packs_per_player
    packs = [generate_pack(card_pool, template, rng) for _ in range(total_packs)]
    logger.info("Generated %d packs from template %s", total_packs, template.id)
    return packs


def generate_cube_packs(
    cube_cards: Sequence[CardReference],
    player_count: int,
    packs_per_player: int,
    cards_per_pack: int,
    rng: Optional[RandomSource] = None,
) -> List[List[CardReference]]:
    """Shuffle a cube list and deal it into packs of ``cards_per_pack``.

    A cube smaller than the draft needs yields fewer (or shorter) packs.
    """
    total_packs = player_count * packs_per_player
    available = shuffle_cards(cube_cards, rng)[: total_packs * cards_per_pack]

    packs = []
    for i in range(total_packs):
        pack = available[i * cards_per_pack:(i + 1) * cards_per_pack]
        if pack:
            packs.append(pack)

    if len(packs) < total_packs:
        logger.warning(
            "Cube of %d cards fills only %d of %d packs",
            len(cube_cards), len(packs), total_packs,
        )
    return packs
