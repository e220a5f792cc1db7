"""Bot runner - plays every bot seat forward until a human has to act."""

import logging
from dataclasses import replace
from typing import Optional, Sequence

from src.bot_drafter.bot_drafter import BotDrafter, is_bot_user_id
from src.bot_drafter.config import MAX_STANDARD_ITERATIONS, MAX_WINSTON_ITERATIONS
from src.bot_drafter.models import WinstonDecision
from src.draft_engine.deck_builder import submit_deck, suggest_land_counts
from src.draft_engine.draft_controller import (
    advance_to_next_pack,
    is_individual_round_complete,
    make_pick_and_pass,
)
from src.draft_engine.draft_initializer import finish_draft
from src.draft_engine.draft_state import CardReference, Draft, DraftStatus
from src.draft_engine.winston import (
    is_winston_complete,
    winston_pass_pile,
    winston_take_pile,
)

logger = logging.getLogger(__name__)


class BotRunner:
    """Drives bot seats through pack and Winston drafts.

    Each run is synchronous and capped, and returns a new ``Draft``. Once
    picking ends the bots submit their whole pool as a deck.
    """

    def __init__(self, drafter: Optional[BotDrafter] = None):
        self.drafter = drafter or BotDrafter()

    # ------------------------------------------------------------------
    # Pack drafts
    # ------------------------------------------------------------------

    def run_bot_picks(
        self,
        draft: Draft,
        all_packs: Optional[Sequence[Sequence[CardReference]]] = None,
        now: Optional[str] = None,
    ) -> Draft:
        """Pick for bots holding packs until none do.

        Args:
            draft: An active pack draft.
            all_packs: Every pack of the draft in round order, used to open
                the next round when the current one empties.
        """
        updated = draft

        for _ in range(MAX_STANDARD_ITERATIONS):
            bot_seat = next(
                (
                    s for s in updated.seats
                    if is_bot_user_id(s.user_id)
                    and s.current_pack is not None
                    and s.current_pack.cards
                ),
                None,
            )
            if bot_seat is None:
                break

            card = self.drafter.pick_card(bot_seat.current_pack.cards, bot_seat.pool)
            updated = make_pick_and_pass(updated, bot_seat.position, card.scryfall_id, now)

            if is_individual_round_complete(updated):
                updated = self._complete_round(updated, all_packs, now)
                if updated.status != DraftStatus.ACTIVE:
                    break
        else:
            logger.warning(
                "Bot picks for draft %s stopped after %d iterations",
                draft.id, MAX_STANDARD_ITERATIONS,
            )

        if updated.status == DraftStatus.DECK_BUILDING:
            updated = self.submit_bot_decks(updated, now)
        return updated

    def _complete_round(
        self,
        draft: Draft,
        all_packs: Optional[Sequence[Sequence[CardReference]]],
        now: Optional[str],
    ) -> Draft:
        seat_count = len(draft.seats)
        if draft.current_pack < draft.config.packs_per_player and all_packs:
            start = draft.current_pack * seat_count
            next_packs = all_packs[start:start + seat_count]
            if len(next_packs) >= seat_count:
                return advance_to_next_pack(draft, next_packs, now)
            logger.warning(
                "Only %d packs left for round %d of draft %s, ending picks",
                len(next_packs), draft.current_pack + 1, draft.id,
            )
        return finish_draft(draft, now)

    # ------------------------------------------------------------------
    # Winston
    # ------------------------------------------------------------------

    def run_winston_bot_turns(self, draft: Draft, now: Optional[str] = None) -> Draft:
        """Play Winston turns while the active player is a bot.

        With the stack empty a pass can never change the piles, so a bot
        facing a non-empty pile then always takes it.
        """
        updated = draft

        for _ in range(MAX_WINSTON_ITERATIONS):
            state = updated.winston_state
            if state is None or is_winston_complete(updated):
                break
            seat = updated.seats[state.active_player_index]
            if not is_bot_user_id(seat.user_id) or state.active_pile is None:
                break

            pile = state.piles[state.active_pile]
            if pile and not state.stack:
                decision = WinstonDecision.TAKE
            else:
                decision = self.drafter.winston_decision(pile, seat.pool, state.active_pile)

            if decision == WinstonDecision.TAKE:
                updated = winston_take_pile(updated, now)
            else:
                updated = winston_pass_pile(updated, now)

            if is_winston_complete(updated):
                updated = finish_draft(updated, now)
                break
        else:
            logger.warning(
                "Winston bot turns for draft %s stopped after %d iterations",
                draft.id, MAX_WINSTON_ITERATIONS,
            )

        if updated.status == DraftStatus.DECK_BUILDING:
            updated = self.submit_bot_decks(updated, now)
        return updated

    # ------------------------------------------------------------------
    # Deck submission
    # ------------------------------------------------------------------

    def submit_bot_decks(self, draft: Draft, now: Optional[str] = None) -> Draft:
        """Submit each bot's full pool as its deck with suggested lands."""
        updated = draft
        for seat in draft.seats:
            if not is_bot_user_id(seat.user_id) or seat.has_submitted_deck:
                continue
            built = replace(
                seat,
                deck=tuple(seat.pool),
                sideboard=(),
                basic_lands=suggest_land_counts(seat.pool),
            )
            updated = submit_deck(updated.replace_seat(built), seat.position, now)
            logger.debug("Bot %s submitted a %d-card deck", seat.display_name, len(seat.pool))
        return updated
