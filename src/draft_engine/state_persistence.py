"""State persistence - save and load draft snapshots to/from JSON files.

Each draft lives in ``draft_<id>.json`` together with a monotonically
increasing version number. Saves are compare-and-swap against that version,
so two writers racing on the same draft cannot silently overwrite each other.
"""

import fcntl
import json
import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from src.draft_engine.config import DRAFTS_DIR
from src.draft_engine.draft_state import (
    BasicLandCounts,
    CardReference,
    Draft,
    DraftConfig,
    DraftFormat,
    DraftPick,
    DraftSeat,
    DraftStatus,
    PackState,
    PacingMode,
    Rarity,
    TimerPreset,
    WinstonState,
)

logger = logging.getLogger(__name__)

PendingPacks = Tuple[Tuple[CardReference, ...], ...]


class VersionConflictError(Exception):
    """The stored draft changed since the caller last read it."""

    def __init__(self, draft_id: str, expected: Optional[int], actual: Optional[int]):
        super().__init__(
            f"Draft {draft_id} is at version {actual}, expected {expected}"
        )
        self.draft_id = draft_id
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class StoredDraft:
    """A loaded snapshot: the draft, its version and any unopened packs."""

    draft: Draft
    version: int
    pending_packs: PendingPacks = ()


# ------------------------------------------------------------------
# Snapshot codec
# ------------------------------------------------------------------

def _card_to_dict(card: CardReference) -> Dict[str, Any]:
    return {
        "scryfall_id": card.scryfall_id,
        "name": card.name,
        "rarity": card.rarity.value,
        "colors": list(card.colors),
        "cmc": card.cmc,
        "image_uri": card.image_uri,
        "small_image_uri": card.small_image_uri,
        "type_line": card.type_line,
        "is_foil": card.is_foil,
    }


def _card_from_dict(data: Dict[str, Any]) -> CardReference:
    return CardReference(
        scryfall_id=data["scryfall_id"],
        name=data["name"],
        rarity=Rarity(data["rarity"]),
        colors=tuple(data.get("colors", ())),
        cmc=data.get("cmc", 0.0),
        image_uri=data.get("image_uri", ""),
        small_image_uri=data.get("small_image_uri", ""),
        type_line=data.get("type_line"),
        is_foil=data.get("is_foil", False),
    )


def _cards_to_list(cards: Optional[Sequence[CardReference]]) -> Optional[List[Dict]]:
    if cards is None:
        return None
    return [_card_to_dict(card) for card in cards]


def _cards_from_list(
    data: Optional[Sequence[Dict[str, Any]]]
) -> Optional[Tuple[CardReference, ...]]:
    if data is None:
        return None
    return tuple(_card_from_dict(card) for card in data)


def _pack_to_dict(pack: Optional[PackState]) -> Optional[Dict[str, Any]]:
    if pack is None:
        return None
    return {
        "id": pack.id,
        "origin_seat": pack.origin_seat,
        "cards": _cards_to_list(pack.cards),
        "pick_number": pack.pick_number,
        "round": pack.round,
    }


def _pack_from_dict(data: Optional[Dict[str, Any]]) -> Optional[PackState]:
    if data is None:
        return None
    return PackState(
        id=data["id"],
        origin_seat=data["origin_seat"],
        cards=_cards_from_list(data["cards"]),
        pick_number=data.get("pick_number", 1),
        round=data.get("round", 1),
    )


def _seat_to_dict(seat: DraftSeat) -> Dict[str, Any]:
    return {
        "position": seat.position,
        "user_id": seat.user_id,
        "display_name": seat.display_name,
        "current_pack": _pack_to_dict(seat.current_pack),
        "pack_queue": [_pack_to_dict(pack) for pack in seat.pack_queue],
        "pack_received_at": seat.pack_received_at,
        "picks": [
            {
                "pick_number": pick.pick_number,
                "pack_number": pick.pack_number,
                "pick_in_pack": pick.pick_in_pack,
                "card_id": pick.card_id,
                "card_name": pick.card_name,
                "timestamp": pick.timestamp,
            }
            for pick in seat.picks
        ],
        "pool": _cards_to_list(seat.pool),
        "queued_card_id": seat.queued_card_id,
        "deck": _cards_to_list(seat.deck),
        "sideboard": _cards_to_list(seat.sideboard),
        "basic_lands": seat.basic_lands.to_dict(),
        "has_submitted_deck": seat.has_submitted_deck,
    }


def _seat_from_dict(data: Dict[str, Any]) -> DraftSeat:
    # Snapshots written before async passing existed lack the queue fields
    return DraftSeat(
        position=data["position"],
        user_id=data["user_id"],
        display_name=data["display_name"],
        current_pack=_pack_from_dict(data.get("current_pack")),
        pack_queue=tuple(_pack_from_dict(p) for p in data.get("pack_queue") or ()),
        pack_received_at=data.get("pack_received_at"),
        picks=tuple(DraftPick(**pick) for pick in data.get("picks", ())),
        pool=_cards_from_list(data.get("pool", ())),
        queued_card_id=data.get("queued_card_id"),
        deck=_cards_from_list(data.get("deck")),
        sideboard=_cards_from_list(data.get("sideboard")),
        basic_lands=BasicLandCounts(**data.get("basic_lands", {})),
        has_submitted_deck=data.get("has_submitted_deck", False),
    )


def _config_to_dict(config: DraftConfig) -> Dict[str, Any]:
    return {
        "player_count": config.player_count,
        "packs_per_player": config.packs_per_player,
        "cards_per_pack": config.cards_per_pack,
        "timer_preset": config.timer_preset.value,
        "deck_building_enabled": config.deck_building_enabled,
        "pick_history_public": config.pick_history_public,
        "review_period_seconds": config.review_period_seconds,
        "async_deadline_minutes": config.async_deadline_minutes,
        "set_code": config.set_code,
        "set_name": config.set_name,
        "cube_list": list(config.cube_list) if config.cube_list is not None else None,
    }


def _config_from_dict(data: Dict[str, Any]) -> DraftConfig:
    values = dict(data)
    values["timer_preset"] = TimerPreset(values.get("timer_preset", "competitive"))
    if values.get("cube_list") is not None:
        values["cube_list"] = tuple(values["cube_list"])
    return DraftConfig(**values)


def draft_to_dict(draft: Draft) -> Dict[str, Any]:
    """Convert a Draft to a JSON-serializable dict."""
    winston = draft.winston_state
    return {
        "id": draft.id,
        "host_id": draft.host_id,
        "group_id": draft.group_id,
        "format": draft.format.value,
        "pacing_mode": draft.pacing_mode.value,
        "status": draft.status.value,
        "config": _config_to_dict(draft.config),
        "seats": [_seat_to_dict(seat) for seat in draft.seats],
        "current_pack": draft.current_pack,
        "winston_state": (
            {
                "stack": _cards_to_list(winston.stack),
                "piles": [_cards_to_list(pile) for pile in winston.piles],
                "active_pile": winston.active_pile,
                "active_player_index": winston.active_player_index,
            }
            if winston is not None
            else None
        ),
        "created_at": draft.created_at,
        "started_at": draft.started_at,
        "completed_at": draft.completed_at,
    }


def draft_from_dict(data: Dict[str, Any]) -> Draft:
    """Reconstruct a Draft from a dict produced by ``draft_to_dict``."""
    winston_data = data.get("winston_state")
    winston = None
    if winston_data is not None:
        winston = WinstonState(
            stack=_cards_from_list(winston_data["stack"]),
            piles=tuple(_cards_from_list(pile) for pile in winston_data["piles"]),
            active_pile=winston_data.get("active_pile"),
            active_player_index=winston_data.get("active_player_index", 0),
        )

    return Draft(
        id=data["id"],
        host_id=data.get("host_id", ""),
        group_id=data.get("group_id"),
        format=DraftFormat(data["format"]),
        pacing_mode=PacingMode(data.get("pacing_mode", "realtime")),
        status=DraftStatus(data["status"]),
        config=_config_from_dict(data["config"]),
        seats=tuple(_seat_from_dict(seat) for seat in data.get("seats", ())),
        current_pack=data.get("current_pack", 1),
        winston_state=winston,
        created_at=data.get("created_at", ""),
        started_at=data.get("started_at"),
        completed_at=data.get("completed_at"),
    )


# ------------------------------------------------------------------
# File storage
# ------------------------------------------------------------------

class StatePersistence:
    """Handles saving and loading draft snapshots to/from JSON files."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = Path(storage_dir) if storage_dir else DRAFTS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _draft_path(self, draft_id: str) -> Path:
        return self.storage_dir / f"draft_{draft_id}.json"

    def _lock_path(self, draft_id: str) -> Path:
        return self.storage_dir / f".draft_{draft_id}.lock"

    @contextmanager
    def _draft_lock(self, draft_id: str) -> Iterator[None]:
        """Exclusive per-draft lock shared by every writer of the directory."""
        with open(self._lock_path(draft_id), "a", encoding="utf-8") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read_file(self, filepath: Path) -> Optional[Dict[str, Any]]:
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Corrupt draft file %s: %s", filepath, e)
            return None

    def current_version(self, draft_id: str) -> Optional[int]:
        """Stored version of a draft, or None if it has never been saved."""
        filepath = self._draft_path(draft_id)
        if not filepath.exists():
            return None
        data = self._read_file(filepath)
        if data is None:
            return None
        return data.get("version", 0)

    def save_draft(
        self,
        draft: Draft,
        expected_version: Optional[int] = None,
        pending_packs: Optional[Sequence[Sequence[CardReference]]] = None,
    ) -> int:
        """Save a draft if nobody else has saved it since ``expected_version``.

        Args:
            draft: The draft snapshot to persist.
            expected_version: Version the caller loaded, or None for a draft
                that has never been saved.
            pending_packs: Packs generated up front for later rounds.

        Returns:
            The new stored version.

        Raises:
            VersionConflictError: If the stored version differs from
                ``expected_version``.
        """
        payload = {
            "version": None,
            "draft": draft_to_dict(draft),
            "pending_packs": [
                _cards_to_list(pack) for pack in (pending_packs or ())
            ],
        }
        filepath = self._draft_path(draft.id)

        # The version check and the rename must not interleave with another writer
        with self._draft_lock(draft.id):
            actual = self.current_version(draft.id)
            if actual != expected_version:
                logger.warning(
                    "Version conflict saving draft %s: expected %s, found %s",
                    draft.id, expected_version, actual,
                )
                raise VersionConflictError(draft.id, expected_version, actual)

            new_version = (actual or 0) + 1
            payload["version"] = new_version

            fd, tmp_name = tempfile.mkstemp(
                dir=self.storage_dir, prefix=f".{filepath.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                os.replace(tmp_name, filepath)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise

        logger.info(
            "Saved draft %s (status %s, version %d) to %s",
            draft.id, draft.status.value, new_version, filepath,
        )
        return new_version

    def load_draft(self, draft_id: str) -> Optional[StoredDraft]:
        """Load a draft snapshot.

        Returns:
            StoredDraft if found and readable, None otherwise.
        """
        filepath = self._draft_path(draft_id)
        if not filepath.exists():
            logger.warning("Draft file not found: %s", filepath)
            return None

        data = self._read_file(filepath)
        if data is None:
            return None

        try:
            draft = draft_from_dict(data["draft"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Corrupt draft file %s: %s", filepath, e)
            return None

        pending = tuple(
            _cards_from_list(pack) for pack in data.get("pending_packs") or ()
        )
        logger.info("Loaded draft %s from %s", draft_id, filepath)
        return StoredDraft(
            draft=draft, version=data.get("version", 0), pending_packs=pending
        )

    def list_saved_drafts(self) -> List[Dict[str, Any]]:
        """List all saved drafts with metadata.

        Returns:
            List of dicts with draft_id, created_at, status, format,
            player_count and version. Sorted by created_at descending.
        """
        drafts = []

        for filepath in self.storage_dir.glob("draft_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                draft = data["draft"]
                drafts.append(
                    {
                        "draft_id": draft["id"],
                        "created_at": draft.get("created_at", ""),
                        "status": draft["status"],
                        "format": draft["format"],
                        "player_count": len(draft.get("seats", [])),
                        "version": data.get("version", 0),
                    }
                )
            except (json.JSONDecodeError, OSError, KeyError, TypeError) as e:
                logger.warning("Skipping corrupt draft file %s: %s", filepath, e)
                continue

        return sorted(drafts, key=lambda x: x["created_at"], reverse=True)

    def delete_draft(self, draft_id: str) -> bool:
        """Delete a saved draft file.

        Returns:
            True if deleted, False if not found.
        """
        filepath = self._draft_path(draft_id)
        with self._draft_lock(draft_id):
            if not filepath.exists():
                return False
            filepath.unlink()
        logger.info("Deleted draft %s", draft_id)
        return True
