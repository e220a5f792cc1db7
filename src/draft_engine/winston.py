"""Winston draft - two players, one shared stack and three face-up piles."""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from src.draft_engine.config import (
    WINSTON_MIN_CARDS,
    WINSTON_PILE_COUNT,
    WINSTON_PLAYERS,
)
from src.draft_engine.draft_rules import (
    ConfigurationError,
    LifecycleError,
    ReferentialError,
    require_status,
)
from src.draft_engine.draft_state import (
    CardReference,
    Draft,
    DraftFormat,
    DraftStatus,
    WinstonState,
    utc_now,
)
from src.draft_engine.rng import RandomSource, shuffle_cards

logger = logging.getLogger(__name__)

# Winston has no packs; every pick is recorded as pack 1
WINSTON_PACK_NUMBER = 1


def _require_winston_state(draft: Draft) -> WinstonState:
    if draft.winston_state is None:
        raise LifecycleError("No Winston state")
    return draft.winston_state


def _replace_pile(
    piles: Tuple[Tuple[CardReference, ...], ...],
    index: int,
    cards: Tuple[CardReference, ...],
) -> Tuple[Tuple[CardReference, ...], ...]:
    return tuple(cards if i == index else pile for i, pile in enumerate(piles))


def _other_player(index: int) -> int:
    return 1 - index


def initialize_winston(
    draft: Draft,
    all_cards: Sequence[CardReference],
    rng: Optional[RandomSource] = None,
) -> Draft:
    """Shuffle the card pool into three one-card piles and a stack.

    Raises:
        ConfigurationError: If the draft is not a two-player Winston draft
            or fewer than three cards are supplied.
        LifecycleError: If the draft has not been started.
    """
    require_status(draft, [DraftStatus.ACTIVE], "seed Winston piles")
    if draft.format != DraftFormat.WINSTON:
        raise ConfigurationError("initialize_winston only works for Winston drafts")
    if len(draft.seats) != WINSTON_PLAYERS:
        raise ConfigurationError(
            f"Winston draft requires exactly {WINSTON_PLAYERS} players"
        )
    if len(all_cards) < WINSTON_MIN_CARDS:
        raise ConfigurationError(
            f"Need at least {WINSTON_MIN_CARDS} cards for Winston draft"
        )

    shuffled = shuffle_cards(all_cards, rng)
    piles = tuple((card,) for card in shuffled[:WINSTON_PILE_COUNT])
    stack = tuple(shuffled[WINSTON_PILE_COUNT:])

    logger.info(
        "Winston draft %s seeded: %d cards, %d on the stack",
        draft.id, len(shuffled), len(stack),
    )
    return replace(
        draft,
        winston_state=WinstonState(
            stack=stack, piles=piles, active_pile=0, active_player_index=0
        ),
    )


def winston_look_at_pile(draft: Draft, pile_index: int) -> Tuple[CardReference, ...]:
    """Return the cards of the pile the active player is examining."""
    state = _require_winston_state(draft)
    if pile_index < 0 or pile_index >= WINSTON_PILE_COUNT:
        raise ReferentialError("Pile index must be 0, 1, or 2")
    if state.active_pile != pile_index:
        raise ReferentialError(
            f"Must look at pile {state.active_pile}, not {pile_index}"
        )
    return state.piles[pile_index]


def winston_take_pile(draft: Draft, now: Optional[str] = None) -> Draft:
    """Active player takes the current pile; the pile is refilled from the stack."""
    require_status(draft, [DraftStatus.ACTIVE], "take a Winston pile")
    state = _require_winston_state(draft)
    if state.active_pile is None:
        raise LifecycleError("No active pile to take")

    taken = state.piles[state.active_pile]
    seat = draft.seats[state.active_player_index]
    seat = seat.add_cards(taken, pack_number=WINSTON_PACK_NUMBER, now=now or utc_now())

    stack = state.stack
    refill, stack = stack[:1], stack[1:]
    piles = _replace_pile(state.piles, state.active_pile, refill)

    logger.debug(
        "Seat %d takes Winston pile %d (%d cards)",
        seat.position, state.active_pile, len(taken),
    )
    return replace(
        draft.replace_seat(seat),
        winston_state=WinstonState(
            stack=stack,
            piles=piles,
            active_pile=0,
            active_player_index=_other_player(state.active_player_index),
        ),
    )


def winston_pass_pile(draft: Draft, now: Optional[str] = None) -> Draft:
    """Grow the current pile by one card and move on.

    Passing the last pile makes the active player draw the top of the stack
    blind, and the turn goes to the other player.
    """
    require_status(draft, [DraftStatus.ACTIVE], "pass a Winston pile")
    state = _require_winston_state(draft)
    if state.active_pile is None:
        raise LifecycleError("No active pile")

    stack = state.stack
    piles = state.piles
    if stack:
        grown = piles[state.active_pile] + stack[:1]
        piles = _replace_pile(piles, state.active_pile, grown)
        stack = stack[1:]

    if state.active_pile < WINSTON_PILE_COUNT - 1:
        return replace(
            draft,
            winston_state=replace(
                state, stack=stack, piles=piles, active_pile=state.active_pile + 1
            ),
        )

    updated = draft
    if stack:
        blind, stack = stack[:1], stack[1:]
        seat = draft.seats[state.active_player_index]
        updated = draft.replace_seat(
            seat.add_cards(blind, pack_number=WINSTON_PACK_NUMBER, now=now or utc_now())
        )
        logger.debug("Seat %d draws blind from the stack", seat.position)

    return replace(
        updated,
        winston_state=WinstonState(
            stack=stack,
            piles=piles,
            active_pile=0,
            active_player_index=_other_player(state.active_player_index),
        ),
    )


def is_winston_complete(draft: Draft) -> bool:
    """The stack and all three piles are empty at the same time."""
    if draft.winston_state is None:
        return False
    return draft.winston_state.card_count() == 0
