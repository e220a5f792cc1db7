"""Tests for Winston draft - piles, stack and turn order."""

import pytest

from src.draft_engine.draft_controller import count_cards_in_play
from src.draft_engine.draft_initializer import (
    add_player,
    complete_draft,
    confirm_draft,
    create_draft,
    start_draft,
)
from src.draft_engine.draft_rules import (
    ConfigurationError,
    LifecycleError,
    ReferentialError,
)
from src.draft_engine.draft_state import CardReference, DraftFormat, Rarity
from src.draft_engine.winston import (
    initialize_winston,
    is_winston_complete,
    winston_look_at_pile,
    winston_pass_pile,
    winston_take_pile,
)


# ── Helpers ──────────────────────────────────────────────────────────

def _make_cards(count, prefix="w"):
    return [
        CardReference(
            scryfall_id=f"{prefix}{i}", name=f"Card {prefix}{i}", rarity=Rarity.COMMON
        )
        for i in range(count)
    ]


def _make_confirmed(player_count=2, format="winston"):
    draft = create_draft(player_count=player_count, format=format)
    for i in range(player_count):
        draft = add_player(draft, f"u{i}", f"Player {i}")
    return confirm_draft(draft)


def _make_started(player_count=2, format="winston"):
    draft = _make_confirmed(player_count, format)
    if draft.format == DraftFormat.WINSTON:
        return start_draft(draft, [])
    packs = [_make_cards(3, prefix=f"p{i}-") for i in range(player_count)]
    return start_draft(draft, packs)


def _make_winston(card_count=20, rng=None):
    return initialize_winston(_make_started(), _make_cards(card_count), rng)


def _total_cards(draft):
    return count_cards_in_play(draft) + draft.winston_state.card_count()


# ── Initialize ───────────────────────────────────────────────────────


class TestInitializeWinston:
    def test_three_piles_of_one(self):
        state = _make_winston(20).winston_state
        assert [len(p) for p in state.piles] == [1, 1, 1]
        assert len(state.stack) == 17
        assert state.active_pile == 0
        assert state.active_player_index == 0

    def test_shuffle_is_injected(self, zero_rng):
        # A constant 0.0 roll makes the shuffle deterministic
        first = _make_winston(10, zero_rng).winston_state
        second = _make_winston(10, zero_rng).winston_state
        assert first == second

    def test_all_cards_placed(self):
        state = _make_winston(20).winston_state
        ids = {c.scryfall_id for c in state.stack}
        ids |= {c.scryfall_id for pile in state.piles for c in pile}
        assert ids == {f"w{i}" for i in range(20)}

    def test_requires_winston_format(self):
        with pytest.raises(ConfigurationError):
            initialize_winston(_make_started(format="standard"), _make_cards(20))

    def test_requires_two_players(self):
        with pytest.raises(ConfigurationError):
            initialize_winston(_make_started(player_count=3), _make_cards(20))

    def test_requires_three_cards(self):
        with pytest.raises(ConfigurationError):
            initialize_winston(_make_started(), _make_cards(2))

    def test_requires_started_draft(self):
        with pytest.raises(LifecycleError):
            initialize_winston(_make_confirmed(), _make_cards(20))


# ── Look ─────────────────────────────────────────────────────────────


class TestLookAtPile:
    def test_active_pile(self):
        draft = _make_winston()
        assert winston_look_at_pile(draft, 0) == draft.winston_state.piles[0]

    def test_wrong_pile(self):
        with pytest.raises(ReferentialError):
            winston_look_at_pile(_make_winston(), 1)

    def test_out_of_range(self):
        with pytest.raises(ReferentialError):
            winston_look_at_pile(_make_winston(), 3)

    def test_no_winston_state(self):
        with pytest.raises(LifecycleError):
            winston_look_at_pile(_make_started(), 0)


# ── Take and pass ────────────────────────────────────────────────────


class TestTakePile:
    def test_take_first_pile(self):
        draft = _make_winston(20)
        pile = draft.winston_state.piles[0]
        updated = winston_take_pile(draft)
        state = updated.winston_state

        assert updated.seats[0].pool == pile
        assert len(state.stack) == 16
        assert len(state.piles[0]) == 1
        assert state.active_player_index == 1
        assert state.active_pile == 0

    def test_take_conserves_cards(self):
        draft = _make_winston(20)
        for _ in range(4):
            draft = winston_take_pile(draft)
            assert _total_cards(draft) == 20
            assert all(len(s.pool) == len(s.picks) for s in draft.seats)

    def test_take_with_empty_stack_leaves_empty_pile(self):
        draft = _make_winston(3)
        updated = winston_take_pile(draft)
        assert updated.winston_state.piles[0] == ()

    def test_take_after_completion_rejected(self):
        draft = complete_draft(_make_winston(20))
        with pytest.raises(LifecycleError):
            winston_take_pile(draft)


class TestPassPile:
    def test_pass_grows_pile_and_moves_on(self):
        draft = _make_winston(20)
        updated = winston_pass_pile(draft)
        state = updated.winston_state
        assert len(state.piles[0]) == 2
        assert len(state.stack) == 16
        assert state.active_pile == 1
        assert state.active_player_index == 0

    def test_passing_last_pile_draws_blind(self):
        draft = _make_winston(20)
        for _ in range(3):
            draft = winston_pass_pile(draft)
        state = draft.winston_state
        assert [len(p) for p in state.piles] == [2, 2, 2]
        assert len(state.stack) == 13
        assert len(draft.seats[0].pool) == 1
        assert state.active_player_index == 1
        assert state.active_pile == 0

    def test_pass_conserves_cards(self):
        draft = _make_winston(20)
        for _ in range(5):
            draft = winston_pass_pile(draft)
            assert _total_cards(draft) == 20
            assert all(len(s.pool) == len(s.picks) for s in draft.seats)

    def test_pass_after_completion_rejected(self):
        draft = complete_draft(_make_winston(20))
        with pytest.raises(LifecycleError):
            winston_pass_pile(draft)


class TestWinstonComplete:
    def test_not_complete_initially(self):
        assert not is_winston_complete(_make_winston())

    def test_no_state(self):
        assert not is_winston_complete(_make_started())

    def test_take_every_pile_until_empty(self):
        draft = _make_winston(6)
        for _ in range(20):
            if is_winston_complete(draft):
                break
            state = draft.winston_state
            if state.piles[state.active_pile]:
                draft = winston_take_pile(draft)
            else:
                draft = winston_pass_pile(draft)
            assert all(len(s.pool) == len(s.picks) for s in draft.seats)
        assert is_winston_complete(draft)
        assert sum(len(s.pool) for s in draft.seats) == 6
