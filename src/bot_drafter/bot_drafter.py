"""Heuristic bot drafter for simulated seats.

Scores are recomputed from the pool on every call:

* **Before commitment** (fewer than four picks) a card is worth its rarity.
* **After commitment** the bot settles on two or three colors from its pool.
  Off-color cards keep 10% of their value, and whichever of creatures or
  spells is under the ~60% creature target gets a 30% bonus.

The pick is then drawn at random among cards within 95% of the best score.
"""

import logging
from typing import Dict, List, Optional, Sequence

from src.bot_drafter.config import (
    BALANCE_BONUS,
    BOT_NAMES,
    BOT_USER_ID_PREFIX,
    COLOR_COMMITMENT_THRESHOLD,
    CREATURE_TARGET_RATIO,
    OFF_COLOR_MULTIPLIER,
    RARITY_SCORES,
    THIRD_COLOR_RATIO,
    TIE_BAND,
    WINSTON_LAST_PILE_THRESHOLD,
    WINSTON_THRESHOLDS_BY_SIZE,
)
from src.bot_drafter.models import PickScore, WinstonDecision
from src.draft_engine.draft_state import CardReference
from src.draft_engine.rng import RandomSource, random_index, resolve_rng

logger = logging.getLogger(__name__)

_LAST_PILE = 2


def bot_user_id(bot_index: int) -> str:
    """Reserved user id for bot ``bot_index``, e.g. ``...000000000003``."""
    return f"{BOT_USER_ID_PREFIX}{bot_index:02d}"


def is_bot_user_id(user_id: str) -> bool:
    return user_id.startswith(BOT_USER_ID_PREFIX)


def bot_display_name(bot_index: int) -> str:
    return BOT_NAMES[bot_index % len(BOT_NAMES)]


def _color_counts(pool: Sequence[CardReference]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for card in pool:
        for color in card.colors:
            counts[color] = counts.get(color, 0) + 1
    return counts


def _matches_colors(card: CardReference, colors: Sequence[str]) -> bool:
    # Colorless cards fit any deck
    if not card.colors:
        return True
    return any(color in colors for color in card.colors)


class BotDrafter:
    """Picks cards and makes Winston decisions for bot seats.

    Holds no draft state; the only thing it keeps is its random source.
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        self.rng = resolve_rng(rng)

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def choose_committed_colors(self, pool: Sequence[CardReference]) -> List[str]:
        """Top two colors of the pool, or three when the third is close behind."""
        ranked = sorted(_color_counts(pool).items(), key=lambda kv: kv[1], reverse=True)
        if not ranked:
            return []

        if len(ranked) >= 3 and ranked[2][1] >= ranked[1][1] * THIRD_COLOR_RATIO:
            num_colors = 3
        else:
            num_colors = min(2, len(ranked))
        return [color for color, _ in ranked[:num_colors]]

    def committed_colors(self, pool: Sequence[CardReference]) -> Optional[List[str]]:
        """None until the pool reaches the commitment threshold."""
        if len(pool) < COLOR_COMMITMENT_THRESHOLD:
            return None
        return self.choose_committed_colors(pool)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score_card(
        self,
        card: CardReference,
        pool: Sequence[CardReference],
        committed_colors: Optional[Sequence[str]],
    ) -> float:
        score = float(RARITY_SCORES.get(card.rarity.value, RARITY_SCORES["common"]))

        if committed_colors is None:
            return score

        if not _matches_colors(card, committed_colors):
            score *= OFF_COLOR_MULTIPLIER

        if pool:
            creatures = sum(1 for c in pool if c.is_creature)
            ratio = creatures / len(pool)
            if card.is_creature and ratio < CREATURE_TARGET_RATIO:
                score *= BALANCE_BONUS
            elif not card.is_creature and ratio > CREATURE_TARGET_RATIO:
                score *= BALANCE_BONUS

        return score

    def score_pack(
        self, pack: Sequence[CardReference], pool: Sequence[CardReference]
    ) -> List[PickScore]:
        """Every card in the pack with its score, best first."""
        colors = self.committed_colors(pool)
        scored = [PickScore(card, self.score_card(card, pool, colors)) for card in pack]
        return sorted(scored, key=lambda s: s.score, reverse=True)

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def pick_card(
        self, pack: Sequence[CardReference], pool: Sequence[CardReference]
    ) -> CardReference:
        """Choose a card from ``pack`` given the bot's current ``pool``.

        Raises:
            ValueError: If the pack is empty.
        """
        if not pack:
            raise ValueError("Cannot pick from empty pack")
        if len(pack) == 1:
            return pack[0]

        scored = self.score_pack(pack, pool)
        top_score = scored[0].score
        tied = [s for s in scored if s.score >= top_score * TIE_BAND]
        return tied[random_index(len(tied), self.rng)].card

    def winston_decision(
        self,
        pile: Sequence[CardReference],
        pool: Sequence[CardReference],
        pile_index: int,
    ) -> WinstonDecision:
        """Take or pass a Winston pile based on its average card score.

        The last pile has a low bar because passing it means a blind draw.
        """
        if not pile:
            return WinstonDecision.PASS

        colors = self.committed_colors(pool)
        average = sum(self.score_card(card, pool, colors) for card in pile) / len(pile)

        if pile_index == _LAST_PILE:
            take = average > WINSTON_LAST_PILE_THRESHOLD
        else:
            take = any(
                len(pile) >= min_size and average > threshold
                for min_size, threshold in WINSTON_THRESHOLDS_BY_SIZE
            )
        return WinstonDecision.TAKE if take else WinstonDecision.PASS
