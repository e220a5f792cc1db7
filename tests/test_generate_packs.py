"""Tests for set pack generation - sheets first, templates as fallback."""

import random

import pytest

from src.booster_pipeline.generate_packs import (
    generate_mixed_packs,
    generate_packs_for_set,
    strip_non_foil_basic_lands,
)
from src.booster_pipeline.ingestion import BoosterDataIngester, IngestionError
from src.booster_pipeline.pack_templates import PackEra, PackSlot, PackTemplate
from src.draft_engine.draft_state import CardReference, Rarity


@pytest.fixture
def ingester(booster_dir):
    return BoosterDataIngester(booster_dir)


def _land(foil=False):
    return CardReference(
        scryfall_id="forest",
        name="Forest",
        rarity=Rarity.COMMON,
        type_line="Basic Land - Forest",
        is_foil=foil,
    )


class TestStripBasicLands:
    def test_keeps_foil_basics(self):
        bear = CardReference(scryfall_id="bear", name="Bear", rarity=Rarity.COMMON)
        packs = strip_non_foil_basic_lands([[bear, _land(), _land(foil=True)]])
        assert [(c.name, c.is_foil) for c in packs[0]] == [("Bear", False), ("Forest", True)]


class TestSheetPath:
    def test_packs_follow_config(self, ingester):
        packs = generate_packs_for_set("tst", 2, 3, ingester, rng=random.Random(1))
        assert len(packs) == 6
        for pack in packs:
            assert len(pack) == 4
            assert pack[3].name in {"Serra Angel", "Shivan Dragon"}

    def test_foil_sheet_entry(self, ingester, sequence_rng):
        # Roll 0.9 of weight 3 lands on the foil mythic
        packs = generate_packs_for_set("tst", 2, 1, ingester, rng=sequence_rng([0.9]))
        assert packs[0][-1].name == "Shivan Dragon"
        assert packs[0][-1].is_foil

    def test_commons_unique_within_pack(self, ingester):
        packs = generate_packs_for_set("tst", 4, 3, ingester, rng=random.Random(3))
        for pack in packs:
            names = [c.name for c in pack[:3]]
            assert len(set(names)) == 3


class TestTemplateFallback:
    def test_set_without_product(self, ingester):
        packs = generate_packs_for_set("old", 2, 1, ingester, rng=random.Random(2))
        assert len(packs) == 2
        # Draft booster era: 15 slots minus the stripped basic land
        assert all(len(p) == 14 for p in packs)
        assert not any(c.is_basic_land for p in packs for c in p)

    def test_keep_basic_lands(self, ingester):
        packs = generate_packs_for_set(
            "old", 2, 1, ingester, rng=random.Random(2), keep_basic_lands=True
        )
        assert all(len(p) == 15 for p in packs)
        assert all(p[14].name == "Island" for p in packs)

    def test_missing_booster_tables(self, ingester, tmp_path):
        catalog = ingester.read_card_catalog()
        empty = BoosterDataIngester(tmp_path)
        packs = generate_packs_for_set("old", 2, 1, empty, catalog, random.Random(4))
        # No release date on file means the 14-slot play booster
        assert all(len(p) == 13 for p in packs)

    def test_custom_template(self, ingester):
        template = PackTemplate(
            id="mini",
            era=PackEra.DRAFT_BOOSTER,
            set_code="old",
            slots=(PackSlot(position=1, name="rare", rarity_pool=(Rarity.RARE,)),),
        )
        packs = generate_packs_for_set(
            "old", 2, 2, ingester, rng=random.Random(5), custom_templates=[template]
        )
        assert [[c.name for c in p] for p in packs] == [["Old Rare"]] * 4

    def test_unknown_set(self, ingester):
        with pytest.raises(IngestionError):
            generate_packs_for_set("zzz", 2, 1, ingester)


class TestMixedPacks:
    def test_one_round_per_set(self, ingester):
        packs = generate_mixed_packs(["tst", "old"], 2, ingester, rng=random.Random(6))
        assert [len(p) for p in packs] == [4, 4, 14, 14]
