"""Rarity-slot pack templates and era selection."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from src.booster_pipeline.config import (
    LAND_POOL,
    PLAY_BOOSTER_CUTOFF,
    RARE_MYTHIC_WEIGHTS,
    WILDCARD_WEIGHTS,
)
from src.draft_engine.draft_state import Rarity


class PackEra(str, Enum):
    PLAY_BOOSTER = "play_booster"
    DRAFT_BOOSTER = "draft_booster"


@dataclass(frozen=True)
class PackSlot:
    """One card position in a pack.

    ``rarity_weights``, when given, must line up with ``rarity_pool``;
    otherwise the rarity is chosen uniformly.
    """

    position: int
    name: str
    rarity_pool: Tuple[Rarity, ...]
    rarity_weights: Optional[Tuple[float, ...]] = None
    allow_duplicates: bool = False
    is_foil: bool = False
    special_pool: Optional[str] = None


@dataclass(frozen=True)
class PackTemplate:
    id: str
    era: PackEra
    slots: Tuple[PackSlot, ...]
    set_code: Optional[str] = None

    def __len__(self) -> int:
        return len(self.slots)


_ALL_RARITIES = (Rarity.COMMON, Rarity.UNCOMMON, Rarity.RARE, Rarity.MYTHIC)


def _slots(*slot_fields) -> Tuple[PackSlot, ...]:
    """Number slots from 1 in the order given."""
    return tuple(
        PackSlot(position=i, **fields) for i, fields in enumerate(slot_fields, start=1)
    )


def _commons(count: int):
    return [dict(name="common", rarity_pool=(Rarity.COMMON,))] * count


def _uncommons(count: int):
    return [dict(name="uncommon", rarity_pool=(Rarity.UNCOMMON,))] * count


_RARE_SLOT = dict(
    name="rare_mythic",
    rarity_pool=(Rarity.RARE, Rarity.MYTHIC),
    rarity_weights=tuple(RARE_MYTHIC_WEIGHTS),
)
_LAND_SLOT = dict(name="land", rarity_pool=(Rarity.COMMON,), special_pool=LAND_POOL)
_WILDCARD_SLOT = dict(
    name="wildcard", rarity_pool=_ALL_RARITIES, rarity_weights=tuple(WILDCARD_WEIGHTS)
)

# 14 playable cards; slot 7 stands in for the paper "List" slot
PLAY_BOOSTER_TEMPLATE = PackTemplate(
    id="default_play_booster",
    era=PackEra.PLAY_BOOSTER,
    slots=_slots(
        *_commons(7),
        *_uncommons(3),
        _RARE_SLOT,
        _LAND_SLOT,
        _WILDCARD_SLOT,
        dict(_WILDCARD_SLOT, is_foil=True),
    ),
)

DRAFT_BOOSTER_TEMPLATE = PackTemplate(
    id="default_draft_booster",
    era=PackEra.DRAFT_BOOSTER,
    slots=_slots(
        *_commons(10),
        *_uncommons(3),
        _RARE_SLOT,
        _LAND_SLOT,
    ),
)


def get_pack_era(released_at: str) -> PackEra:
    """Play boosters from March of the Machine onward, draft boosters before."""
    if released_at >= PLAY_BOOSTER_CUTOFF:
        return PackEra.PLAY_BOOSTER
    return PackEra.DRAFT_BOOSTER


def get_template_for_set(
    set_code: str,
    era: PackEra,
    custom_templates: Optional[Sequence[PackTemplate]] = None,
) -> PackTemplate:
    """A caller-supplied template for the set wins; otherwise the era default."""
    for template in custom_templates or ():
        if template.set_code and template.set_code.lower() == set_code.lower():
            return template

    if PackEra(era) == PackEra.PLAY_BOOSTER:
        return PLAY_BOOSTER_TEMPLATE
    return DRAFT_BOOSTER_TEMPLATE
