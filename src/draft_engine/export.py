"""Decklist export - plain text and Cockatrice XML projections of a deck."""

from typing import Dict, List, Sequence
from xml.sax.saxutils import escape

from src.draft_engine.draft_state import BasicLandCounts, CardReference

LAND_NAMES = {
    "W": "Plains",
    "U": "Island",
    "B": "Swamp",
    "R": "Mountain",
    "G": "Forest",
}

DEFAULT_DECK_NAME = "Booster Draft"

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def _aggregate_cards(cards: Sequence[CardReference]) -> Dict[str, int]:
    """Count cards by name, keeping first-seen order."""
    counts: Dict[str, int] = {}
    for card in cards:
        counts[card.name] = counts.get(card.name, 0) + 1
    return counts


def _add_lands(counts: Dict[str, int], lands: BasicLandCounts) -> None:
    for color, land_name in LAND_NAMES.items():
        count = lands.get(color)
        if count > 0:
            counts[land_name] = counts.get(land_name, 0) + count


def _format_card_lines(counts: Dict[str, int]) -> List[str]:
    return [f"{count} {name}" for name, count in counts.items()]


def format_deck_list_text(
    deck: Sequence[CardReference],
    sideboard: Sequence[CardReference],
    lands: BasicLandCounts,
) -> str:
    """Format a decklist with main deck (basic lands included) and sideboard."""
    main_counts = _aggregate_cards(deck)
    _add_lands(main_counts, lands)

    lines = ["// Main Deck"]
    lines.extend(_format_card_lines(main_counts))

    if sideboard:
        lines.append("")
        lines.append("// Sideboard")
        lines.extend(_format_card_lines(_aggregate_cards(sideboard)))

    return "\n".join(lines)


def format_pool_text(pool: Sequence[CardReference]) -> str:
    """Flat "<count> <name>" list with no deck/sideboard split."""
    return "\n".join(_format_card_lines(_aggregate_cards(pool)))


def _xml_card_lines(counts: Dict[str, int]) -> str:
    return "\n".join(
        f'      <card number="{count}" name="{escape(name, _XML_ENTITIES)}"/>'
        for name, count in counts.items()
    )


def format_cockatrice_xml(
    deck: Sequence[CardReference],
    sideboard: Sequence[CardReference],
    lands: BasicLandCounts,
    deck_name: str = DEFAULT_DECK_NAME,
) -> str:
    """Generate a Cockatrice ``.cod`` deck file."""
    main_counts = _aggregate_cards(deck)
    _add_lands(main_counts, lands)
    side_counts = _aggregate_cards(sideboard)

    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<cockatrice_deck version="1">',
            f"  <deckname>{escape(deck_name, _XML_ENTITIES)}</deckname>",
            '  <zone name="main">',
            _xml_card_lines(main_counts),
            "  </zone>",
            '  <zone name="side">',
            _xml_card_lines(side_counts),
            "  </zone>",
            "</cockatrice_deck>",
        ]
    )
