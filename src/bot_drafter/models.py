"""Data models for the bot drafter."""

from dataclasses import dataclass
from enum import Enum

from src.draft_engine.draft_state import CardReference


class WinstonDecision(str, Enum):
    TAKE = "take"
    PASS = "pass"


@dataclass(frozen=True)
class PickScore:
    """A card with the score the bot gave it for the current pick."""

    card: CardReference
    score: float
