"""Pack generation for a draft.

Tries the set's real collation data first and falls back to the rarity
templates when the set has no booster product on file.
"""

import logging
from typing import List, Optional, Sequence

from src.booster_pipeline.ingestion import BoosterDataIngester, CardCatalog, IngestionError
from src.booster_pipeline.pack_templates import (
    PackEra,
    PackTemplate,
    get_pack_era,
    get_template_for_set,
)
from src.booster_pipeline.sheet_generator import (
    collect_skeleton_identifiers,
    generate_all_sheet_pack_skeletons,
    resolve_pack_skeletons,
)
from src.booster_pipeline.template_generator import generate_all_packs, group_cards_by_rarity
from src.draft_engine.draft_state import CardReference
from src.draft_engine.rng import RandomSource

logger = logging.getLogger(__name__)

Packs = List[List[CardReference]]


def strip_non_foil_basic_lands(packs: Packs) -> Packs:
    """Drop basic lands from packs unless they are foil."""
    return [
        [card for card in pack if card.is_foil or not card.is_basic_land]
        for pack in packs
    ]


def _sheet_packs(
    set_code: str,
    player_count: int,
    packs_per_player: int,
    ingester: BoosterDataIngester,
    catalog: CardCatalog,
    rng: Optional[RandomSource],
    product_code: Optional[str],
) -> Optional[Packs]:
    try:
        data = ingester.load_product_data(set_code, product_code)
    except FileNotFoundError as e:
        logger.info("No booster tables available (%s), using templates", e)
        return None
    if data is None:
        return None

    name_lookup = catalog.name_lookup(data.all_card_identifiers)
    skeletons = generate_all_sheet_pack_skeletons(
        data, player_count, packs_per_player, rng, name_lookup
    )
    card_map = catalog.lookup(collect_skeleton_identifiers(skeletons))
    if not card_map:
        logger.warning("None of the cards drawn for %s are in the catalog", data.code)
        return None

    logger.info("Generated %d packs for %s from sheets", len(skeletons), data.code)
    return resolve_pack_skeletons(skeletons, card_map)


def _template_packs(
    set_code: str,
    player_count: int,
    packs_per_player: int,
    ingester: BoosterDataIngester,
    catalog: CardCatalog,
    rng: Optional[RandomSource],
    custom_templates: Optional[Sequence[PackTemplate]],
) -> Packs:
    cards = catalog.cards_for_set(set_code)
    if not cards:
        raise IngestionError(f"No booster cards found for set {set_code}")

    try:
        set_info = ingester.read_set_info(set_code)
    except FileNotFoundError:
        set_info = None
    if set_info is None:
        logger.warning("No release date for %s, assuming play boosters", set_code)
        era = PackEra.PLAY_BOOSTER
    else:
        era = get_pack_era(set_info.released_at)

    template = get_template_for_set(set_code, era, custom_templates)
    return generate_all_packs(
        group_cards_by_rarity(cards), template, player_count, packs_per_player, rng
    )


def generate_packs_for_set(
    set_code: str,
    player_count: int,
    packs_per_player: int,
    ingester: BoosterDataIngester,
    catalog: Optional[CardCatalog] = None,
    rng: Optional[RandomSource] = None,
    keep_basic_lands: bool = False,
    product_code: Optional[str] = None,
    custom_templates: Optional[Sequence[PackTemplate]] = None,
) -> Packs:
    """Generate ``player_count * packs_per_player`` packs for one set.

    Args:
        set_code: Set to open, e.g. ``"mkm"``.
        ingester: Source of collation tables and set metadata.
        catalog: Card metadata; read from the ingester when omitted.
        keep_basic_lands: Keep non-foil basic lands in the packs.
        product_code: Force a booster product instead of the
            play/draft/set lookup order.
        custom_templates: Template overrides for the fallback path.

    Raises:
        IngestionError: If the set has neither collation data nor cards.
    """
    if catalog is None:
        catalog = ingester.read_card_catalog()

    packs = _sheet_packs(
        set_code, player_count, packs_per_player, ingester, catalog, rng, product_code
    )
    if packs is None:
        logger.info("Falling back to template packs for %s", set_code)
        packs = _template_packs(
            set_code, player_count, packs_per_player, ingester, catalog, rng,
            custom_templates,
        )

    return packs if keep_basic_lands else strip_non_foil_basic_lands(packs)


def generate_mixed_packs(
    set_codes: Sequence[str],
    player_count: int,
    ingester: BoosterDataIngester,
    catalog: Optional[CardCatalog] = None,
    rng: Optional[RandomSource] = None,
    keep_basic_lands: bool = False,
) -> Packs:
    """One round per set code, ``player_count`` packs each, in round order."""
    if catalog is None:
        catalog = ingester.read_card_catalog()
    all_packs: Packs = []
    for set_code in set_codes:
        all_packs.extend(
            generate_packs_for_set(
                set_code, player_count, 1, ingester, catalog, rng,
                keep_basic_lands=keep_basic_lands,
            )
        )
    return all_packs
