from src.booster_pipeline.generate_packs import (
    generate_mixed_packs,
    generate_packs_for_set,
    strip_non_foil_basic_lands,
)
from src.booster_pipeline.ingestion import BoosterDataIngester, CardCatalog, IngestionError
from src.booster_pipeline.models import (
    BoosterConfig,
    BoosterProductData,
    BoosterSheet,
    CardIdentifier,
    ConfigSlot,
    PackCardSkeleton,
    SetInfo,
    SheetCard,
)
from src.booster_pipeline.pack_templates import (
    DRAFT_BOOSTER_TEMPLATE,
    PLAY_BOOSTER_TEMPLATE,
    PackEra,
    PackSlot,
    PackTemplate,
    get_pack_era,
    get_template_for_set,
)
from src.booster_pipeline.sheet_generator import (
    collect_skeleton_identifiers,
    draw_from_sheet,
    generate_all_sheet_pack_skeletons,
    generate_all_sheet_packs,
    generate_sheet_pack,
    generate_sheet_pack_skeleton,
    resolve_pack_skeletons,
)
from src.booster_pipeline.template_generator import (
    generate_all_packs,
    generate_cube_packs,
    generate_pack,
    group_cards_by_rarity,
    shuffle_cards,
    weighted_random_index,
)

__all__ = [
    "BoosterConfig",
    "BoosterDataIngester",
    "BoosterProductData",
    "BoosterSheet",
    "CardCatalog",
    "CardIdentifier",
    "ConfigSlot",
    "DRAFT_BOOSTER_TEMPLATE",
    "IngestionError",
    "PLAY_BOOSTER_TEMPLATE",
    "PackCardSkeleton",
    "PackEra",
    "PackSlot",
    "PackTemplate",
    "SetInfo",
    "SheetCard",
    "collect_skeleton_identifiers",
    "draw_from_sheet",
    "generate_all_packs",
    "generate_all_sheet_pack_skeletons",
    "generate_all_sheet_packs",
    "generate_cube_packs",
    "generate_mixed_packs",
    "generate_pack",
    "generate_packs_for_set",
    "generate_sheet_pack",
    "generate_sheet_pack_skeleton",
    "get_pack_era",
    "get_template_for_set",
    "group_cards_by_rarity",
    "resolve_pack_skeletons",
    "shuffle_cards",
    "strip_non_foil_basic_lands",
    "weighted_random_index",
]
