"""Draft rule enforcement - domain errors, status guards, seating and timers."""

import logging
import math
from datetime import datetime, timedelta
from typing import Iterable, Optional

from src.draft_engine.config import (
    DEFAULT_TIMER_SCHEDULE,
    DEFAULT_TIMER_SECONDS,
    MAX_PLAYERS,
    MIN_PLAYERS,
    TIMER_MULTIPLIERS,
)
from src.draft_engine.draft_state import (
    Draft,
    DraftSeat,
    DraftStatus,
    PassDirection,
    TimerPreset,
)

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when an operation violates draft rules."""

    pass


class LifecycleError(ValidationError):
    """The draft is in the wrong status for the requested transition."""


class CapacityError(ValidationError):
    """Too many players, or too few packs / players for the operation."""


class ReferentialError(ValidationError):
    """A referenced seat, card, zone or pile does not exist where expected."""


class ConfigurationError(ValidationError):
    """Draft configuration or seed data is out of bounds."""


def require_status(
    draft: Draft, allowed: Iterable[DraftStatus], action: str
) -> None:
    """Raise LifecycleError unless the draft is in one of ``allowed``."""
    allowed = tuple(allowed)
    if draft.status not in allowed:
        logger.warning(
            "Rejected %s on draft %s in %s status",
            action, draft.id, draft.status.value,
        )
        raise LifecycleError(
            f"Cannot {action} in {draft.status.value} status"
        )


def require_seat(draft: Draft, position: int) -> DraftSeat:
    """Get the seat at ``position`` or raise ReferentialError."""
    seat = draft.get_seat(position)
    if seat is None:
        raise ReferentialError(f"Invalid seat position: {position}")
    return seat


def validate_player_count(player_count: int) -> None:
    if player_count < MIN_PLAYERS or player_count > MAX_PLAYERS:
        raise ConfigurationError(
            f"player_count must be between {MIN_PLAYERS} and {MAX_PLAYERS} "
            f"(got {player_count})"
        )


# ------------------------------------------------------------------
# Seating
# ------------------------------------------------------------------

def get_pass_direction(pack_number: int) -> PassDirection:
    """Odd rounds pass left, even rounds pass right."""
    return PassDirection.LEFT if pack_number % 2 == 1 else PassDirection.RIGHT


def get_next_seat(
    current_position: int, direction: PassDirection, total_seats: int
) -> int:
    """Neighbouring seat in ``direction``, wrapping around the table."""
    if direction == PassDirection.LEFT:
        return (current_position + 1) % total_seats
    return (current_position - 1 + total_seats) % total_seats


# ------------------------------------------------------------------
# Timers
# ------------------------------------------------------------------

def get_pick_timer(cards_remaining: int, preset: TimerPreset) -> float:
    """Seconds allowed for a pick with ``cards_remaining`` cards in the pack.

    Returns ``math.inf`` for the ``none`` preset. Counts outside the
    schedule fall back to a 5 second base.
    """
    preset = TimerPreset(preset)
    if preset == TimerPreset.NONE:
        return math.inf
    base = DEFAULT_TIMER_SCHEDULE.get(cards_remaining, DEFAULT_TIMER_SECONDS)
    return math.ceil(base * TIMER_MULTIPLIERS[preset.value])


def get_pick_deadline(
    seat: DraftSeat, preset: TimerPreset
) -> Optional[datetime]:
    """When the seat's current pick times out, or None if it never does."""
    if seat.current_pack is None or seat.pack_received_at is None:
        return None
    seconds = get_pick_timer(len(seat.current_pack.cards), preset)
    if math.isinf(seconds):
        return None
    received = datetime.fromisoformat(seat.pack_received_at)
    return received + timedelta(seconds=seconds)
