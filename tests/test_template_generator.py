"""Tests for template-based and cube pack generation."""

import random

import pytest

from src.booster_pipeline.pack_templates import (
    DRAFT_BOOSTER_TEMPLATE,
    PLAY_BOOSTER_TEMPLATE,
    PackEra,
    PackSlot,
    PackTemplate,
    get_pack_era,
    get_template_for_set,
)
from src.booster_pipeline.template_generator import (
    generate_all_packs,
    generate_cube_packs,
    generate_pack,
    group_cards_by_rarity,
)
from src.draft_engine.draft_state import CardReference, Rarity


# ── Helpers ──────────────────────────────────────────────────────────

def _make_cards(rarity, count, prefix=None, type_line="Creature - Bear"):
    prefix = prefix or rarity.value[0]
    return [
        CardReference(
            scryfall_id=f"{prefix}{i}",
            name=f"{rarity.value} {i}",
            rarity=rarity,
            type_line=type_line,
        )
        for i in range(count)
    ]


def _make_set_cards():
    return (
        _make_cards(Rarity.COMMON, 40)
        + _make_cards(Rarity.UNCOMMON, 20)
        + _make_cards(Rarity.RARE, 10)
        + _make_cards(Rarity.MYTHIC, 4)
        + _make_cards(Rarity.COMMON, 5, prefix="land", type_line="Basic Land - Forest")
    )


# ── Templates ────────────────────────────────────────────────────────


class TestTemplates:
    def test_play_booster_has_fourteen_slots(self):
        assert len(PLAY_BOOSTER_TEMPLATE) == 14
        assert [s.position for s in PLAY_BOOSTER_TEMPLATE.slots] == list(range(1, 15))
        assert PLAY_BOOSTER_TEMPLATE.slots[-1].is_foil

    def test_draft_booster_has_fifteen_slots(self):
        assert len(DRAFT_BOOSTER_TEMPLATE) == 15

    @pytest.mark.parametrize(
        "released_at, era",
        [
            ("2024-02-09", PackEra.PLAY_BOOSTER),
            ("2023-04-21", PackEra.PLAY_BOOSTER),
            ("2023-02-10", PackEra.DRAFT_BOOSTER),
        ],
    )
    def test_era_by_release_date(self, released_at, era):
        assert get_pack_era(released_at) == era

    def test_custom_template_wins(self):
        custom = PackTemplate(id="custom", era=PackEra.PLAY_BOOSTER, slots=(), set_code="MKM")
        assert get_template_for_set("mkm", PackEra.PLAY_BOOSTER, [custom]) is custom
        assert get_template_for_set("otj", PackEra.PLAY_BOOSTER, [custom]) is PLAY_BOOSTER_TEMPLATE

    def test_era_default(self):
        assert get_template_for_set("khm", PackEra.DRAFT_BOOSTER) is DRAFT_BOOSTER_TEMPLATE


# ── Rarity pools ─────────────────────────────────────────────────────


class TestGroupCardsByRarity:
    def test_basic_lands_only_in_land_pool(self):
        grouped = group_cards_by_rarity(_make_set_cards())
        assert len(grouped["common"]) == 40
        assert len(grouped["land"]) == 5
        assert len(grouped["mythic"]) == 4

    def test_empty_pools_present(self):
        grouped = group_cards_by_rarity([])
        assert set(grouped) == {"common", "uncommon", "rare", "mythic", "land"}


# ── Pack generation ──────────────────────────────────────────────────


class TestGeneratePack:
    def test_play_booster_size_and_uniqueness(self):
        pool = group_cards_by_rarity(_make_set_cards())
        pack = generate_pack(pool, PLAY_BOOSTER_TEMPLATE, random.Random(1))
        assert len(pack) == 14
        ids = [c.scryfall_id for c in pack]
        assert len(ids) == len(set(ids))

    def test_land_slot_draws_basic_land(self):
        pool = group_cards_by_rarity(_make_set_cards())
        pack = generate_pack(pool, DRAFT_BOOSTER_TEMPLATE, random.Random(2))
        assert pack[14].is_basic_land

    def test_rare_slot_weighting(self, zero_rng):
        pool = group_cards_by_rarity(_make_set_cards())
        template = PackTemplate(
            id="rare", era=PackEra.PLAY_BOOSTER, slots=(PLAY_BOOSTER_TEMPLATE.slots[10],)
        )
        assert generate_pack(pool, template, zero_rng)[0].rarity == Rarity.RARE

    def test_foil_slot_marks_card(self):
        pool = group_cards_by_rarity(_make_set_cards())
        pack = generate_pack(pool, PLAY_BOOSTER_TEMPLATE, random.Random(3))
        assert pack[-1].is_foil
        assert not any(c.is_foil for c in pack[:-1])

    def test_missing_rarity_falls_back_to_other_slot_rarity(self, zero_rng):
        pool = group_cards_by_rarity(_make_cards(Rarity.MYTHIC, 3))
        template = PackTemplate(
            id="rare", era=PackEra.PLAY_BOOSTER, slots=(PLAY_BOOSTER_TEMPLATE.slots[10],)
        )
        assert generate_pack(pool, template, zero_rng)[0].rarity == Rarity.MYTHIC

    def test_empty_slot_is_skipped(self):
        pool = group_cards_by_rarity(_make_cards(Rarity.COMMON, 20))
        template = PackTemplate(
            id="t",
            era=PackEra.DRAFT_BOOSTER,
            slots=(
                PackSlot(position=1, name="common", rarity_pool=(Rarity.COMMON,)),
                PackSlot(position=2, name="rare", rarity_pool=(Rarity.RARE,)),
            ),
        )
        assert len(generate_pack(pool, template, random.Random(0))) == 1

    def test_small_pool_accepts_duplicate(self, zero_rng):
        pool = group_cards_by_rarity(_make_cards(Rarity.COMMON, 1))
        template = PackTemplate(
            id="t",
            era=PackEra.DRAFT_BOOSTER,
            slots=tuple(
                PackSlot(position=i, name="common", rarity_pool=(Rarity.COMMON,))
                for i in (1, 2)
            ),
        )
        pack = generate_pack(pool, template, zero_rng)
        assert [c.scryfall_id for c in pack] == ["c0", "c0"]


class TestGenerateAllPacks:
    def test_pack_count(self):
        pool = group_cards_by_rarity(_make_set_cards())
        packs = generate_all_packs(pool, PLAY_BOOSTER_TEMPLATE, 4, 3, random.Random(5))
        assert len(packs) == 12
        assert all(len(p) == 14 for p in packs)


class TestGenerateCubePacks:
    def test_deals_without_repeats(self):
        cube = _make_cards(Rarity.RARE, 60)
        packs = generate_cube_packs(cube, 2, 3, 10, random.Random(9))
        assert len(packs) == 6
        ids = [c.scryfall_id for pack in packs for c in pack]
        assert len(ids) == len(set(ids)) == 60

    def test_small_cube_yields_fewer_packs(self):
        cube = _make_cards(Rarity.RARE, 25)
        packs = generate_cube_packs(cube, 2, 3, 10, random.Random(9))
        assert [len(p) for p in packs] == [10, 10, 5]
