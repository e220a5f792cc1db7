"""Draft lifecycle - creation, seating and status transitions."""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from src.draft_engine.draft_rules import (
    CapacityError,
    ConfigurationError,
    ReferentialError,
    require_status,
    validate_player_count,
)
from src.draft_engine.draft_state import (
    CardReference,
    Draft,
    DraftConfig,
    DraftFormat,
    DraftSeat,
    DraftStatus,
    PackState,
    PacingMode,
    TimerPreset,
    utc_now,
)
from src.draft_engine.config import (
    DEFAULT_CARDS_PER_PACK,
    DEFAULT_PACKS_PER_PLAYER,
    DEFAULT_REVIEW_PERIOD_SECONDS,
    MIN_PLAYERS,
)

logger = logging.getLogger(__name__)


def create_draft(
    player_count: int,
    format: DraftFormat = DraftFormat.STANDARD,
    pacing_mode: PacingMode = PacingMode.REALTIME,
    draft_id: Optional[str] = None,
    host_id: str = "",
    group_id: Optional[str] = None,
    packs_per_player: int = DEFAULT_PACKS_PER_PLAYER,
    cards_per_pack: int = DEFAULT_CARDS_PER_PACK,
    timer_preset: TimerPreset = TimerPreset.COMPETITIVE,
    deck_building_enabled: bool = True,
    pick_history_public: bool = False,
    review_period_seconds: int = DEFAULT_REVIEW_PERIOD_SECONDS,
    async_deadline_minutes: Optional[int] = None,
    set_code: Optional[str] = None,
    set_name: Optional[str] = None,
    cube_list: Optional[Sequence[str]] = None,
    now: Optional[str] = None,
) -> Draft:
    """
    Create a new draft in ``proposed`` status with no seats.

    Args:
        player_count: Number of seats at the table (2-8)
        format: "standard", "winston" or "cube"
        pacing_mode: "realtime" or "async"
        packs_per_player: Rounds in the draft (usually 3)
        cards_per_pack: 14 for play boosters, 15 for draft boosters
        timer_preset: "relaxed", "competitive", "speed" or "none"

    Returns:
        Draft ready for players to join

    Raises:
        ConfigurationError: If any numeric setting is out of range
    """
    validate_player_count(player_count)
    if packs_per_player < 1:
        raise ConfigurationError("packs_per_player must be at least 1")
    if cards_per_pack < 1:
        raise ConfigurationError("cards_per_pack must be at least 1")

    config = DraftConfig(
        player_count=player_count,
        packs_per_player=packs_per_player,
        cards_per_pack=cards_per_pack,
        timer_preset=TimerPreset(timer_preset),
        deck_building_enabled=deck_building_enabled,
        pick_history_public=pick_history_public,
        review_period_seconds=review_period_seconds,
        async_deadline_minutes=async_deadline_minutes,
        set_code=set_code,
        set_name=set_name,
        cube_list=tuple(cube_list) if cube_list is not None else None,
    )
    draft = Draft.create_new(
        config=config,
        format=format,
        pacing_mode=pacing_mode,
        draft_id=draft_id,
        host_id=host_id,
        group_id=group_id,
        now=now,
    )

    logger.info(
        "Created %s draft %s: %d players, %d packs of %d",
        draft.format.value,
        draft.id,
        player_count,
        packs_per_player,
        cards_per_pack,
    )
    return draft


# ------------------------------------------------------------------
# Seating
# ------------------------------------------------------------------

def add_player(draft: Draft, user_id: str, display_name: str) -> Draft:
    """Seat a player at the next free position."""
    require_status(draft, [DraftStatus.PROPOSED], "add player")
    if len(draft.seats) >= draft.config.player_count:
        raise CapacityError("Draft is full")
    if any(s.user_id == user_id for s in draft.seats):
        raise CapacityError(f"Player {user_id} is already in the draft")

    seat = DraftSeat(
        position=len(draft.seats),
        user_id=user_id,
        display_name=display_name,
    )
    logger.info("Seat %d: %s joined draft %s", seat.position, display_name, draft.id)
    return replace(draft, seats=draft.seats + (seat,))


def remove_player(draft: Draft, user_id: str) -> Draft:
    """Remove a player and re-pack the remaining positions from zero."""
    require_status(draft, [DraftStatus.PROPOSED], "remove player")
    if not any(s.user_id == user_id for s in draft.seats):
        raise ReferentialError(f"Player {user_id} not found in draft")

    remaining = [s for s in draft.seats if s.user_id != user_id]
    seats = tuple(replace(s, position=i) for i, s in enumerate(remaining))
    logger.info("Player %s left draft %s", user_id, draft.id)
    return replace(draft, seats=seats)


# ------------------------------------------------------------------
# Lifecycle
# ------------------------------------------------------------------

def confirm_draft(draft: Draft) -> Draft:
    require_status(draft, [DraftStatus.PROPOSED], "confirm draft")
    if len(draft.seats) < MIN_PLAYERS:
        raise CapacityError(f"Need at least {MIN_PLAYERS} players to confirm")
    logger.info("Draft %s confirmed with %d seats", draft.id, len(draft.seats))
    return replace(draft, status=DraftStatus.CONFIRMED)


def start_draft(
    draft: Draft,
    packs: Sequence[Sequence[CardReference]],
    now: Optional[str] = None,
) -> Draft:
    """Open the first round: pack *i* goes to seat *i*.

    The caller keeps the remaining rounds and hands them over through
    ``advance_to_next_pack``. Winston drafts take no packs here and are
    seeded afterwards with ``initialize_winston``.
    """
    require_status(draft, [DraftStatus.CONFIRMED], "start draft")
    now = now or utc_now()

    if draft.format == DraftFormat.WINSTON:
        logger.info("Winston draft %s started", draft.id)
        return replace(draft, status=DraftStatus.ACTIVE, started_at=now)

    seat_count = len(draft.seats)
    if len(packs) < seat_count:
        raise CapacityError(
            f"Expected at least {seat_count} packs (one per player), "
            f"got {len(packs)}"
        )

    seats = tuple(
        replace(
            seat,
            current_pack=PackState(
                id=f"pack-{i}-0",
                origin_seat=i,
                cards=tuple(packs[i]),
                pick_number=1,
                round=1,
            ),
            pack_queue=(),
            pack_received_at=now,
        )
        for i, seat in enumerate(draft.seats)
    )

    logger.info("Draft %s started: %d packs opened", draft.id, seat_count)
    return replace(
        draft,
        status=DraftStatus.ACTIVE,
        started_at=now,
        current_pack=1,
        seats=seats,
    )


def transition_to_deck_building(
    draft: Draft, now: Optional[str] = None
) -> Draft:
    """Move every pool into its deck, or complete at once if deck building is off."""
    require_status(draft, [DraftStatus.ACTIVE], "transition to deck building")

    if not draft.config.deck_building_enabled:
        return complete_draft(draft, now=now)

    seats = tuple(
        replace(seat, deck=tuple(seat.pool), sideboard=())
        for seat in draft.seats
    )
    logger.info("Draft %s entering deck building", draft.id)
    return replace(draft, status=DraftStatus.DECK_BUILDING, seats=seats)


def complete_draft(draft: Draft, now: Optional[str] = None) -> Draft:
    require_status(
        draft, [DraftStatus.ACTIVE, DraftStatus.DECK_BUILDING], "complete draft"
    )
    logger.info("Draft %s complete", draft.id)
    return replace(
        draft, status=DraftStatus.COMPLETE, completed_at=now or utc_now()
    )


def finish_draft(draft: Draft, now: Optional[str] = None) -> Draft:
    """End the picking phase: deck building when enabled, completion otherwise."""
    return transition_to_deck_building(draft, now=now)
