"""Deck building - moving cards between zones, basic lands and submission."""

import logging
from dataclasses import replace
from typing import Dict, Optional, Sequence, Tuple

from src.draft_engine.config import (
    EVEN_LAND_SPLIT,
    MIN_DECK_SIZE,
    SUGGESTED_LAND_COUNT,
)
from src.draft_engine.draft_rules import (
    ConfigurationError,
    LifecycleError,
    ReferentialError,
    require_seat,
    require_status,
)
from src.draft_engine.draft_state import (
    MANA_COLORS,
    BasicLandCounts,
    CardReference,
    Draft,
    DraftSeat,
    DraftStatus,
    utc_now,
)

logger = logging.getLogger(__name__)


def _remove_card(
    zone: Tuple[CardReference, ...], card_id: str, zone_name: str
) -> Tuple[CardReference, Tuple[CardReference, ...]]:
    for index, card in enumerate(zone):
        if card.scryfall_id == card_id:
            return card, zone[:index] + zone[index + 1:]
    raise ReferentialError(f"Card {card_id} not found in {zone_name}")


def _building_seat(draft: Draft, seat_position: int) -> DraftSeat:
    require_status(draft, [DraftStatus.DECK_BUILDING], "edit deck")
    seat = require_seat(draft, seat_position)
    if seat.deck is None or seat.sideboard is None:
        raise LifecycleError("Deck building not initialized for this seat")
    return seat


def move_card_to_deck(draft: Draft, seat_position: int, card_id: str) -> Draft:
    seat = _building_seat(draft, seat_position)
    card, sideboard = _remove_card(seat.sideboard, card_id, "sideboard")
    return draft.replace_seat(
        replace(seat, deck=seat.deck + (card,), sideboard=sideboard)
    )


def move_card_to_sideboard(draft: Draft, seat_position: int, card_id: str) -> Draft:
    seat = _building_seat(draft, seat_position)
    card, deck = _remove_card(seat.deck, card_id, "deck")
    return draft.replace_seat(
        replace(seat, deck=deck, sideboard=seat.sideboard + (card,))
    )


def set_basic_lands(
    draft: Draft, seat_position: int, lands: BasicLandCounts
) -> Draft:
    require_status(draft, [DraftStatus.DECK_BUILDING], "set basic lands")
    seat = require_seat(draft, seat_position)
    if any(lands.get(color) < 0 for color in MANA_COLORS):
        raise ConfigurationError("Basic land counts cannot be negative")
    return draft.replace_seat(replace(seat, basic_lands=lands))


def suggest_land_counts(pool: Sequence[CardReference]) -> BasicLandCounts:
    """
    Split 17 basic lands in proportion to the colors seen in the pool.

    Floors each color's exact share, then hands the leftover lands to the
    colors with the largest fractional remainders (present colors only).
    A pool with no colored cards gets an even five-way split.
    """
    color_counts: Dict[str, int] = {color: 0 for color in MANA_COLORS}
    for card in pool:
        for color in card.colors:
            if color in color_counts:
                color_counts[color] += 1

    total_symbols = sum(color_counts.values())
    if total_symbols == 0:
        return BasicLandCounts(**EVEN_LAND_SPLIT)

    lands: Dict[str, int] = {}
    fractional = []
    for color in MANA_COLORS:
        exact = color_counts[color] / total_symbols * SUGGESTED_LAND_COUNT
        lands[color] = int(exact)
        fractional.append((exact - lands[color], color))

    remaining = SUGGESTED_LAND_COUNT - sum(lands.values())
    for _, color in sorted(fractional, key=lambda item: item[0], reverse=True):
        if remaining <= 0:
            break
        if color_counts[color] > 0:
            lands[color] += 1
            remaining -= 1

    return BasicLandCounts(**lands)


def submit_deck(draft: Draft, seat_position: int, now: Optional[str] = None) -> Draft:
    """Mark a seat's deck as final; the last submission completes the draft."""
    require_status(draft, [DraftStatus.DECK_BUILDING], "submit deck")
    seat = require_seat(draft, seat_position)
    updated = draft.replace_seat(replace(seat, has_submitted_deck=True))

    if all(s.has_submitted_deck for s in updated.seats):
        logger.info("All decks submitted, draft %s complete", draft.id)
        return replace(
            updated, status=DraftStatus.COMPLETE, completed_at=now or utc_now()
        )
    return updated


def unsubmit_deck(draft: Draft, seat_position: int) -> Draft:
    """Retract a submission, reopening deck building if the draft had completed."""
    require_status(
        draft, [DraftStatus.DECK_BUILDING, DraftStatus.COMPLETE], "unsubmit deck"
    )
    seat = require_seat(draft, seat_position)
    if not seat.has_submitted_deck:
        raise LifecycleError(f"Seat {seat_position} has not submitted a deck")
    updated = draft.replace_seat(replace(seat, has_submitted_deck=False))

    if draft.status == DraftStatus.COMPLETE:
        logger.info("Seat %d reopened deck building on draft %s", seat_position, draft.id)
        return replace(updated, status=DraftStatus.DECK_BUILDING, completed_at=None)
    return updated


def is_deck_valid(seat: DraftSeat) -> bool:
    """Deck plus basic lands reaches the 40-card minimum."""
    deck_cards = len(seat.deck) if seat.deck else 0
    return deck_cards + seat.basic_lands.total() >= MIN_DECK_SIZE
