"""Draft state data models - immutable values threaded through the engine."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple
import uuid

from src.draft_engine.config import (
    DEFAULT_CARDS_PER_PACK,
    DEFAULT_PACKS_PER_PLAYER,
    DEFAULT_REVIEW_PERIOD_SECONDS,
)

MANA_COLORS = ("W", "U", "B", "R", "G")


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


class Rarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"

    @property
    def rank(self) -> int:
        """0 for common up to 3 for mythic."""
        return _RARITY_RANK[self]


_RARITY_RANK = {
    Rarity.COMMON: 0,
    Rarity.UNCOMMON: 1,
    Rarity.RARE: 2,
    Rarity.MYTHIC: 3,
}


class DraftFormat(str, Enum):
    STANDARD = "standard"
    WINSTON = "winston"
    CUBE = "cube"


class PacingMode(str, Enum):
    REALTIME = "realtime"
    ASYNC = "async"


class DraftStatus(str, Enum):
    PROPOSED = "proposed"
    CONFIRMED = "confirmed"
    ACTIVE = "active"
    DECK_BUILDING = "deck_building"
    COMPLETE = "complete"


class TimerPreset(str, Enum):
    RELAXED = "relaxed"
    COMPETITIVE = "competitive"
    SPEED = "speed"
    NONE = "none"


class PassDirection(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class CardReference:
    """A single card as seen by the engine (display metadata only)."""

    scryfall_id: str
    name: str
    rarity: Rarity
    colors: Tuple[str, ...] = ()
    cmc: float = 0.0
    image_uri: str = ""
    small_image_uri: str = ""
    type_line: Optional[str] = None
    is_foil: bool = False

    def __post_init__(self):
        # Catalog rows and JSON snapshots hand over plain strings
        object.__setattr__(self, "rarity", Rarity(self.rarity))

    def with_foil(self) -> "CardReference":
        return replace(self, is_foil=True)

    @property
    def is_creature(self) -> bool:
        return bool(self.type_line) and "creature" in self.type_line.lower()

    @property
    def is_basic_land(self) -> bool:
        return bool(self.type_line) and self.type_line.startswith("Basic Land")


@dataclass(frozen=True)
class PackState:
    """One physical pack in flight."""

    id: str
    origin_seat: int
    cards: Tuple[CardReference, ...]
    pick_number: int = 1  # 1-based pick within this pack
    round: int = 1

    def find_card(self, card_id: str) -> Optional[CardReference]:
        for card in self.cards:
            if card.scryfall_id == card_id:
                return card
        return None


@dataclass(frozen=True)
class DraftPick:
    """Represents a single pick in a seat's history."""

    pick_number: int  # overall pick number for the seat
    pack_number: int
    pick_in_pack: int
    card_id: str
    card_name: str
    timestamp: str

    @classmethod
    def create(
        cls,
        pick_number: int,
        pack_number: int,
        pick_in_pack: int,
        card: CardReference,
        now: Optional[str] = None,
    ) -> "DraftPick":
        return cls(
            pick_number=pick_number,
            pack_number=pack_number,
            pick_in_pack=pick_in_pack,
            card_id=card.scryfall_id,
            card_name=card.name,
            timestamp=now or utc_now(),
        )


@dataclass(frozen=True)
class BasicLandCounts:
    W: int = 0
    U: int = 0
    B: int = 0
    R: int = 0
    G: int = 0

    def get(self, color: str) -> int:
        return getattr(self, color)

    def total(self) -> int:
        return sum(self.get(color) for color in MANA_COLORS)

    def to_dict(self) -> dict:
        return {color: self.get(color) for color in MANA_COLORS}


@dataclass(frozen=True)
class DraftSeat:
    """One participant at the table."""

    position: int
    user_id: str
    display_name: str
    current_pack: Optional[PackState] = None
    pack_queue: Tuple[PackState, ...] = ()
    pack_received_at: Optional[str] = None
    picks: Tuple[DraftPick, ...] = ()
    pool: Tuple[CardReference, ...] = ()
    queued_card_id: Optional[str] = None
    deck: Optional[Tuple[CardReference, ...]] = None
    sideboard: Optional[Tuple[CardReference, ...]] = None
    basic_lands: BasicLandCounts = field(default_factory=BasicLandCounts)
    has_submitted_deck: bool = False

    def add_cards(
        self,
        cards: Tuple[CardReference, ...],
        pack_number: int,
        pick_in_pack: Optional[int] = None,
        now: Optional[str] = None,
    ) -> "DraftSeat":
        """Return a copy with ``cards`` appended to both pool and pick history.

        When ``pick_in_pack`` is omitted each card is numbered by its overall
        position in the seat's history (Winston has no packs to count).
        """
        timestamp = now or utc_now()
        new_picks = []
        for offset, card in enumerate(cards):
            overall = len(self.picks) + offset + 1
            new_picks.append(
                DraftPick.create(
                    pick_number=overall,
                    pack_number=pack_number,
                    pick_in_pack=overall if pick_in_pack is None else pick_in_pack,
                    card=card,
                    now=timestamp,
                )
            )
        return replace(
            self,
            picks=self.picks + tuple(new_picks),
            pool=self.pool + tuple(cards),
        )


@dataclass(frozen=True)
class DraftConfig:
    """Draft configuration settings."""

    player_count: int
    packs_per_player: int = DEFAULT_PACKS_PER_PLAYER
    cards_per_pack: int = DEFAULT_CARDS_PER_PACK
    timer_preset: TimerPreset = TimerPreset.COMPETITIVE
    deck_building_enabled: bool = True
    pick_history_public: bool = False
    review_period_seconds: int = DEFAULT_REVIEW_PERIOD_SECONDS
    async_deadline_minutes: Optional[int] = None
    set_code: Optional[str] = None
    set_name: Optional[str] = None
    cube_list: Optional[Tuple[str, ...]] = None

    def total_cards(self) -> int:
        """Cards in circulation for a pack-based draft."""
        return self.player_count * self.packs_per_player * self.cards_per_pack


@dataclass(frozen=True)
class WinstonState:
    """Shared stack plus exactly three face-up piles."""

    stack: Tuple[CardReference, ...]
    piles: Tuple[
        Tuple[CardReference, ...],
        Tuple[CardReference, ...],
        Tuple[CardReference, ...],
    ]
    active_pile: Optional[int] = 0
    active_player_index: int = 0

    def card_count(self) -> int:
        return len(self.stack) + sum(len(pile) for pile in self.piles)


@dataclass(frozen=True)
class Draft:
    """Aggregate root - the complete state of one draft."""

    id: str
    format: DraftFormat
    pacing_mode: PacingMode
    status: DraftStatus
    config: DraftConfig
    host_id: str = ""
    group_id: Optional[str] = None
    seats: Tuple[DraftSeat, ...] = ()
    current_pack: int = 1
    winston_state: Optional[WinstonState] = None
    created_at: str = ""
    started_at: Optional[str] = None
    completed_at: Optional[str] = None

    @classmethod
    def create_new(
        cls,
        config: DraftConfig,
        format: DraftFormat = DraftFormat.STANDARD,
        pacing_mode: PacingMode = PacingMode.REALTIME,
        draft_id: Optional[str] = None,
        host_id: str = "",
        group_id: Optional[str] = None,
        now: Optional[str] = None,
    ) -> "Draft":
        """Factory method for a fresh, seatless draft in ``proposed`` status."""
        return cls(
            id=draft_id or str(uuid.uuid4()),
            format=DraftFormat(format),
            pacing_mode=PacingMode(pacing_mode),
            status=DraftStatus.PROPOSED,
            config=config,
            host_id=host_id,
            group_id=group_id,
            created_at=now or utc_now(),
        )

    def get_seat(self, position: int) -> Optional[DraftSeat]:
        """Get a seat by position, or None if out of range."""
        if 0 <= position < len(self.seats):
            return self.seats[position]
        return None

    def replace_seat(self, seat: DraftSeat) -> "Draft":
        """Return a copy with the seat at ``seat.position`` swapped out."""
        seats = tuple(
            seat if s.position == seat.position else s for s in self.seats
        )
        return replace(self, seats=seats)
