"""Tests for sheet-based pack generation."""

import random

from src.booster_pipeline.models import (
    BoosterConfig,
    BoosterProductData,
    BoosterSheet,
    CardIdentifier,
    ConfigSlot,
    PackCardSkeleton,
    SheetCard,
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
from src.draft_engine.draft_state import CardReference, Rarity


# ── Helpers ──────────────────────────────────────────────────────────

def _make_sheet(sheet_id, numbers, weight=1.0, is_foil=False, name=None):
    cards = tuple(
        SheetCard(set_code="tst", collector_number=str(n), weight=weight, is_foil=is_foil)
        for n in numbers
    )
    return BoosterSheet(
        id=sheet_id,
        name=name or f"sheet-{sheet_id}",
        total_weight=weight * len(cards),
        cards=cards,
    )


def _make_product(configs=None, sheets=None):
    sheets = sheets or {
        1: _make_sheet(1, range(1, 21), name="common"),
        2: _make_sheet(2, range(21, 31), name="uncommon"),
        3: _make_sheet(3, range(31, 36), name="rare"),
    }
    configs = configs or (
        BoosterConfig(
            id=1,
            weight=1,
            slots=(ConfigSlot(1, 10), ConfigSlot(2, 3), ConfigSlot(3, 1)),
        ),
    )
    return BoosterProductData(
        product_id=1, code="tst-play", set_code="tst", configs=configs, sheets=sheets
    )


def _make_card_map(numbers, name_for=None):
    name_for = name_for or (lambda n: f"Card {n}")
    return {
        f"tst:{n}": CardReference(
            scryfall_id=f"id-{n}", name=name_for(n), rarity=Rarity.COMMON
        )
        for n in numbers
    }


# ── Drawing ──────────────────────────────────────────────────────────


class TestDrawFromSheet:
    def test_weighted_draw(self, sequence_rng):
        sheet = BoosterSheet(
            id=1,
            name="s",
            total_weight=10,
            cards=(
                SheetCard("tst", "1", 9),
                SheetCard("tst", "2", 1),
            ),
        )
        assert draw_from_sheet(sheet, set(), sequence_rng([0.0])).collector_number == "1"
        assert draw_from_sheet(sheet, set(), sequence_rng([0.95])).collector_number == "2"

    def test_rerolls_past_used(self, sequence_rng):
        sheet = _make_sheet(1, [1, 2])
        drawn = draw_from_sheet(sheet, {"tst:1"}, sequence_rng([0.0, 0.9]))
        assert drawn.collector_number == "2"

    def test_scan_after_attempts(self, zero_rng):
        sheet = _make_sheet(1, [1, 2, 3])
        drawn = draw_from_sheet(sheet, {"tst:1", "tst:2"}, zero_rng)
        assert drawn.collector_number == "3"

    def test_exhausted_sheet(self, zero_rng):
        sheet = _make_sheet(1, [1])
        assert draw_from_sheet(sheet, {"tst:1"}, zero_rng) is None

    def test_name_lookup_blocks_reprints(self, zero_rng):
        sheet = _make_sheet(1, [1, 2, 3])
        names = {"tst:1": "Shock", "tst:2": "Shock", "tst:3": "Bolt"}
        drawn = draw_from_sheet(sheet, {"Shock"}, zero_rng, names)
        assert drawn.collector_number == "3"


class TestGenerateSkeleton:
    def test_slot_counts(self):
        pack = generate_sheet_pack_skeleton(_make_product(), random.Random(4))
        assert len(pack) == 14
        numbers = [int(c.collector_number) for c in pack]
        assert all(1 <= n <= 20 for n in numbers[:10])
        assert all(31 <= n <= 35 for n in numbers[13:])

    def test_no_duplicates_within_sheet(self):
        pack = generate_sheet_pack_skeleton(_make_product(), random.Random(11))
        keys = [c.key for c in pack]
        assert len(keys) == len(set(keys))

    def test_config_chosen_by_weight(self, zero_rng):
        configs = (
            BoosterConfig(id=1, weight=3, slots=(ConfigSlot(3, 1),)),
            BoosterConfig(id=2, weight=1, slots=(ConfigSlot(1, 2),)),
        )
        pack = generate_sheet_pack_skeleton(_make_product(configs=configs), zero_rng)
        assert len(pack) == 1

    def test_foil_flag_carried(self, zero_rng):
        sheets = {1: _make_sheet(1, [1], is_foil=True)}
        configs = (BoosterConfig(id=1, weight=1, slots=(ConfigSlot(1, 1),)),)
        pack = generate_sheet_pack_skeleton(_make_product(configs, sheets), zero_rng)
        assert pack == [PackCardSkeleton("tst", "1", is_foil=True)]

    def test_unknown_sheet_skipped(self, zero_rng):
        configs = (BoosterConfig(id=1, weight=1, slots=(ConfigSlot(99, 2), ConfigSlot(3, 1))),)
        pack = generate_sheet_pack_skeleton(_make_product(configs=configs), zero_rng)
        assert len(pack) == 1

    def test_short_sheet_yields_short_pack(self, zero_rng):
        sheets = {1: _make_sheet(1, [1, 2])}
        configs = (BoosterConfig(id=1, weight=1, slots=(ConfigSlot(1, 5),)),)
        pack = generate_sheet_pack_skeleton(_make_product(configs, sheets), zero_rng)
        assert len(pack) == 2

    def test_cross_sheet_duplicates_allowed(self, zero_rng):
        sheets = {1: _make_sheet(1, [1]), 2: _make_sheet(2, [1])}
        configs = (BoosterConfig(id=1, weight=1, slots=(ConfigSlot(1, 1), ConfigSlot(2, 1))),)
        pack = generate_sheet_pack_skeleton(_make_product(configs, sheets), zero_rng)
        assert [c.key for c in pack] == ["tst:1", "tst:1"]

    def test_all_skeletons(self):
        packs = generate_all_sheet_pack_skeletons(_make_product(), 3, 2, random.Random(1))
        assert len(packs) == 6


# ── Resolution ───────────────────────────────────────────────────────


class TestResolveSkeletons:
    def test_missing_identifiers_dropped(self):
        skeletons = [[PackCardSkeleton("tst", "1"), PackCardSkeleton("tst", "999")]]
        packs = resolve_pack_skeletons(skeletons, _make_card_map([1]))
        assert [c.scryfall_id for c in packs[0]] == ["id-1"]

    def test_foil_applied(self):
        skeletons = [[PackCardSkeleton("tst", "1", is_foil=True)]]
        packs = resolve_pack_skeletons(skeletons, _make_card_map([1]))
        assert packs[0][0].is_foil

    def test_collect_identifiers_distinct(self):
        skeletons = [
            [PackCardSkeleton("tst", "1"), PackCardSkeleton("tst", "2")],
            [PackCardSkeleton("tst", "1")],
        ]
        assert collect_skeleton_identifiers(skeletons) == [
            CardIdentifier("tst", "1"),
            CardIdentifier("tst", "2"),
        ]


class TestGenerateSheetPacks:
    def test_single_pack(self):
        pack = generate_sheet_pack(_make_product(), _make_card_map(range(1, 36)), random.Random(2))
        assert len(pack) == 14

    def test_reprints_deduplicated_by_name(self, zero_rng):
        sheets = {1: _make_sheet(1, [1, 2, 3])}
        configs = (BoosterConfig(id=1, weight=1, slots=(ConfigSlot(1, 2),)),)
        card_map = _make_card_map([1, 2, 3], lambda n: "Shock" if n < 3 else "Bolt")
        pack = generate_sheet_pack(_make_product(configs, sheets), card_map, zero_rng)
        assert sorted(c.name for c in pack) == ["Bolt", "Shock"]

    def test_all_packs(self):
        packs = generate_all_sheet_packs(
            _make_product(), _make_card_map(range(1, 36)), 2, 3, random.Random(8)
        )
        assert len(packs) == 6
        assert all(len(p) == 14 for p in packs)
