"""Draft controller - the pick, pass and queue protocol for pack drafts.

Two passing styles share the same seats:

* **Batch** (``make_pick`` + ``pass_current_packs``): everyone picks in
  lockstep, then all packs move one seat at once.
* **Individual** (``make_pick_and_pass``): a pack moves as soon as its holder
  picks. A seat that already holds a pack queues new arrivals first-in,
  first-out.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from src.draft_engine.draft_rules import (
    CapacityError,
    ReferentialError,
    ValidationError,
    get_next_seat,
    get_pass_direction,
    require_seat,
    require_status,
)
from src.draft_engine.draft_state import (
    CardReference,
    Draft,
    DraftSeat,
    DraftStatus,
    PackState,
    utc_now,
)
from src.draft_engine.rng import RandomSource, random_index

logger = logging.getLogger(__name__)


def _take_card(
    seat: DraftSeat, card_id: str
) -> Tuple[CardReference, Tuple[CardReference, ...]]:
    """Split the seat's current pack into (picked card, remaining cards)."""
    if seat.current_pack is None:
        raise ReferentialError(f"Seat {seat.position} has no current pack")
    cards = seat.current_pack.cards
    for index, card in enumerate(cards):
        if card.scryfall_id == card_id:
            return card, cards[:index] + cards[index + 1:]
    raise ReferentialError(f"Card {card_id} not found in current pack")


# ------------------------------------------------------------------
# Batch mode
# ------------------------------------------------------------------

def make_pick(
    draft: Draft, seat_position: int, card_id: str, now: Optional[str] = None
) -> Draft:
    """Pick a card, leaving the shrunk pack with the seat until the next pass.

    Raises:
        LifecycleError: If the draft is not active.
        ReferentialError: If the seat, its pack, or the card does not exist.
    """
    require_status(draft, [DraftStatus.ACTIVE], "make pick")
    seat = require_seat(draft, seat_position)
    picked, remaining = _take_card(seat, card_id)
    pack = seat.current_pack

    seat = seat.add_cards(
        (picked,),
        pack_number=draft.current_pack,
        pick_in_pack=pack.pick_number,
        now=now,
    )
    seat = replace(
        seat,
        current_pack=(
            replace(pack, cards=remaining, pick_number=pack.pick_number + 1)
            if remaining
            else None
        ),
        queued_card_id=None,
    )

    logger.debug(
        "Seat %d picks %s (pack %d, pick %d)",
        seat_position, picked.name, draft.current_pack, pack.pick_number,
    )
    return draft.replace_seat(seat)


def pass_current_packs(draft: Draft) -> Draft:
    """Hand every non-empty current pack to the next seat simultaneously."""
    require_status(draft, [DraftStatus.ACTIVE], "pass packs")

    direction = get_pass_direction(draft.current_pack)
    total_seats = len(draft.seats)

    destinations = {}
    for seat in draft.seats:
        if seat.current_pack is not None and seat.current_pack.cards:
            dest = get_next_seat(seat.position, direction, total_seats)
            destinations[dest] = seat.current_pack

    seats = tuple(
        replace(
            seat,
            current_pack=destinations.get(seat.position),
            queued_card_id=None,
        )
        for seat in draft.seats
    )
    return replace(draft, seats=seats)


def all_players_have_picked(draft: Draft) -> bool:
    """True when every pack in play sits at the same pick number.

    Packs advance their pick number as they are picked from, so a seat that
    has not picked yet leaves its pack one step behind the rest.
    """
    packs = [s.current_pack for s in draft.seats if s.current_pack is not None]
    if not packs:
        return True
    if len({p.pick_number for p in packs}) != 1:
        return False
    return len(packs) == len(draft.seats)


def is_pack_complete(pack: PackState) -> bool:
    return len(pack.cards) == 0


def is_round_complete(draft: Draft) -> bool:
    """Batch-mode round end: nobody holds a pack."""
    return all(s.current_pack is None for s in draft.seats)


# ------------------------------------------------------------------
# Individual mode
# ------------------------------------------------------------------

def deliver_pack(
    seat: DraftSeat, pack: PackState, now: Optional[str] = None
) -> DraftSeat:
    """Hand a pack to a seat: install it if the hands are free, else queue it."""
    if seat.current_pack is None:
        return replace(seat, current_pack=pack, pack_received_at=now or utc_now())
    return replace(seat, pack_queue=seat.pack_queue + (pack,))


def promote_from_queue(seat: DraftSeat, now: Optional[str] = None) -> DraftSeat:
    """Move the oldest queued pack into the seat's hands if they are empty."""
    if seat.current_pack is not None or not seat.pack_queue:
        return seat
    next_pack, rest = seat.pack_queue[0], seat.pack_queue[1:]
    return replace(
        seat,
        current_pack=next_pack,
        pack_received_at=now or utc_now(),
        pack_queue=rest,
        queued_card_id=None,
    )


def make_pick_and_pass(
    draft: Draft, seat_position: int, card_id: str, now: Optional[str] = None
) -> Draft:
    """Pick a card and forward the rest of the pack immediately.

    The pack travels in the direction of its own round, so a straggler still
    holding a round-1 pack passes it left even after round 2 has opened.
    """
    require_status(draft, [DraftStatus.ACTIVE], "make pick")
    seat = require_seat(draft, seat_position)
    picked, remaining = _take_card(seat, card_id)
    pack = seat.current_pack
    now = now or utc_now()

    pack_number = pack.round
    seat = seat.add_cards(
        (picked,),
        pack_number=pack_number,
        pick_in_pack=pack.pick_number,
        now=now,
    )
    seat = replace(seat, current_pack=None, queued_card_id=None)
    updated = draft.replace_seat(seat)

    if remaining:
        passed = replace(pack, cards=remaining, pick_number=pack.pick_number + 1)
        direction = get_pass_direction(pack_number)
        dest = get_next_seat(seat_position, direction, len(draft.seats))
        updated = updated.replace_seat(
            deliver_pack(updated.seats[dest], passed, now)
        )
        logger.debug(
            "Seat %d picks %s and passes %s to seat %d",
            seat_position, picked.name, pack.id, dest,
        )
    else:
        logger.debug(
            "Seat %d takes last card %s from %s", seat_position, picked.name, pack.id
        )

    return updated.replace_seat(
        promote_from_queue(updated.seats[seat_position], now)
    )


def is_individual_round_complete(draft: Draft) -> bool:
    """No seat holds or queues a pack from the current round."""
    current = draft.current_pack
    for seat in draft.seats:
        if seat.current_pack is not None and seat.current_pack.round == current:
            return False
        if any(pack.round == current for pack in seat.pack_queue):
            return False
    return True


def advance_to_next_pack(
    draft: Draft,
    next_packs: Sequence[Sequence[CardReference]],
    now: Optional[str] = None,
) -> Draft:
    """Open the next round, delivering fresh pack *i* to seat *i*."""
    require_status(draft, [DraftStatus.ACTIVE], "advance to next pack")

    next_pack_number = draft.current_pack + 1
    if next_pack_number > draft.config.packs_per_player:
        raise CapacityError("No more packs to advance to")
    if next_packs is None or len(next_packs) < len(draft.seats):
        raise CapacityError(f"Need {len(draft.seats)} packs for next round")

    now = now or utc_now()
    seats = []
    for i, seat in enumerate(draft.seats):
        pack = PackState(
            id=f"pack-{i}-{next_pack_number - 1}",
            origin_seat=i,
            cards=tuple(next_packs[i]),
            pick_number=1,
            round=next_pack_number,
        )
        seats.append(deliver_pack(seat, pack, now))

    logger.info("Draft %s opens pack %d", draft.id, next_pack_number)
    return replace(draft, current_pack=next_pack_number, seats=tuple(seats))


# ------------------------------------------------------------------
# Timeouts and queued picks
# ------------------------------------------------------------------

def auto_pick_card(
    cards: Sequence[CardReference],
    queued_card_id: Optional[str] = None,
    rng: Optional[RandomSource] = None,
) -> CardReference:
    """Choose the card to take when a pick timer runs out.

    The seat's queued card wins if it is still in the pack; otherwise one of
    the highest-rarity cards, chosen at random.
    """
    if not cards:
        raise ValidationError("Cannot auto-pick from empty card list")

    if queued_card_id:
        for card in cards:
            if card.scryfall_id == queued_card_id:
                return card

    top_rank = max(card.rarity.rank for card in cards)
    top_cards = [card for card in cards if card.rarity.rank == top_rank]
    return top_cards[random_index(len(top_cards), rng)]


def queue_pick(draft: Draft, seat_position: int, card_id: str) -> Draft:
    """Remember the card to auto-pick if the seat's timer expires."""
    seat = require_seat(draft, seat_position)
    if seat.current_pack is None or seat.current_pack.find_card(card_id) is None:
        raise ReferentialError("Queued card is not in current pack")
    return draft.replace_seat(replace(seat, queued_card_id=card_id))


def clear_queued_pick(draft: Draft, seat_position: int) -> Draft:
    seat = require_seat(draft, seat_position)
    return draft.replace_seat(replace(seat, queued_card_id=None))


def count_cards_in_play(draft: Draft) -> int:
    """Cards held in packs, queues and pools across all seats."""
    total = 0
    for seat in draft.seats:
        if seat.current_pack is not None:
            total += len(seat.current_pack.cards)
        total += sum(len(pack.cards) for pack in seat.pack_queue)
        total += len(seat.pool)
    return total
