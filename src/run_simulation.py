"""Run a complete all-bot draft from booster data.

Usage:
    python -m src.run_simulation <set_code> [data_dir] [players] [format] [cube_file]

Examples:
    python -m src.run_simulation mkm
    python -m src.run_simulation mkm /path/to/csvs 8
    python -m src.run_simulation neo /path/to/csvs 2 winston
    python -m src.run_simulation - /path/to/csvs 8 cube my_cube.txt
"""

import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from src.booster_pipeline.generate_packs import generate_packs_for_set
from src.booster_pipeline.ingestion import BoosterDataIngester
from src.booster_pipeline.template_generator import generate_cube_packs
from src.bot_drafter.bot_drafter import BotDrafter, bot_display_name, bot_user_id
from src.bot_drafter.bot_runner import BotRunner
from src.bot_drafter.config import SIMULATED_WINSTON_POOL_SIZE
from src.draft_engine.config import DEFAULT_CARDS_PER_PACK, DEFAULT_PACKS_PER_PLAYER
from src.draft_engine.draft_initializer import (
    add_player,
    confirm_draft,
    create_draft,
    start_draft,
)
from src.draft_engine.draft_state import (
    CardReference,
    Draft,
    DraftFormat,
    Rarity,
)
from src.draft_engine.export import format_deck_list_text
from src.draft_engine.rng import shuffle_cards
from src.draft_engine.state_persistence import StatePersistence
from src.draft_engine.winston import initialize_winston
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _cube_cards(cube_list: Sequence[str]) -> List[CardReference]:
    """Cube entries are bare names; give each a synthetic id."""
    return [
        CardReference(scryfall_id=f"cube-{i}", name=name, rarity=Rarity.COMMON)
        for i, name in enumerate(cube_list)
    ]


def read_cube_list(path: Path) -> List[str]:
    """One card name per line; blank lines are skipped."""
    with open(path, "r", encoding="utf-8") as f:
        names = [line.strip() for line in f]
    return [name for name in names if name]


def run_simulation(
    set_code: Optional[str],
    data_dir: Optional[Path] = None,
    player_count: int = 8,
    draft_format: str = "standard",
    cube_list: Optional[Sequence[str]] = None,
    seed: Optional[int] = None,
    storage_dir: Optional[Path] = None,
) -> Draft:
    """Draft with bots in every seat and save the finished draft.

    Args:
        set_code: Set to open; unused for cube drafts.
        data_dir: Directory holding the booster and card CSVs.
        player_count: Seats at the table.
        draft_format: "standard", "winston" or "cube".
        cube_list: Card names for a cube draft.
        seed: Seed for a reproducible run.
        storage_dir: Where the draft snapshot is written.

    Returns:
        The completed draft.
    """
    rng = random.Random(seed)
    draft_format = DraftFormat(draft_format)
    ingester = BoosterDataIngester(data_dir)
    all_packs: List[List[CardReference]] = []
    winston_pool: List[CardReference] = []

    logger.info("Step 1/3: Generating cards for %s draft...", draft_format.value)
    if draft_format == DraftFormat.WINSTON:
        catalog = ingester.read_card_catalog()
        pool = shuffle_cards(catalog.cards_for_set(set_code), rng)
        winston_pool = pool[:SIMULATED_WINSTON_POOL_SIZE]
    elif draft_format == DraftFormat.CUBE:
        if not cube_list:
            raise ValueError("Cube draft needs a cube list")
        all_packs = generate_cube_packs(
            _cube_cards(cube_list), player_count, DEFAULT_PACKS_PER_PLAYER,
            DEFAULT_CARDS_PER_PACK, rng,
        )
    else:
        all_packs = generate_packs_for_set(
            set_code, player_count, DEFAULT_PACKS_PER_PLAYER, ingester, rng=rng
        )

    # Play boosters and older draft boosters differ in size
    cards_per_pack = len(all_packs[0]) if all_packs else DEFAULT_CARDS_PER_PACK
    draft = create_draft(
        player_count=player_count,
        format=draft_format,
        cards_per_pack=cards_per_pack,
        set_code=set_code,
        cube_list=cube_list,
    )
    for i in range(player_count):
        draft = add_player(draft, bot_user_id(i), bot_display_name(i))
    draft = confirm_draft(draft)

    runner = BotRunner(BotDrafter(rng))

    logger.info("Step 2/3: Running bot picks...")
    if draft_format == DraftFormat.WINSTON:
        draft = start_draft(draft, [])
        draft = initialize_winston(draft, winston_pool, rng)
        draft = runner.run_winston_bot_turns(draft)
    else:
        draft = start_draft(draft, all_packs[:player_count])
        draft = runner.run_bot_picks(draft, all_packs)

    logger.info("Step 3/3: Saving draft %s (%s)...", draft.id, draft.status.value)
    persistence = StatePersistence(storage_dir)
    persistence.save_draft(draft)

    for seat in draft.seats:
        logger.info("  %s: %d cards drafted", seat.display_name, len(seat.pool))
    return draft


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    set_code = sys.argv[1]
    data_dir = Path(sys.argv[2]) if len(sys.argv) > 2 else None
    players = int(sys.argv[3]) if len(sys.argv) > 3 else 8
    draft_format = sys.argv[4] if len(sys.argv) > 4 else "standard"
    cube_list = read_cube_list(Path(sys.argv[5])) if len(sys.argv) > 5 else None
    if draft_format == DraftFormat.CUBE.value:
        set_code = None

    try:
        result = run_simulation(set_code, data_dir, players, draft_format, cube_list)
        for seat in result.seats:
            print(f"== {seat.display_name} ==")
            print(format_deck_list_text(seat.deck or seat.pool, seat.sideboard or (), seat.basic_lands))
            print()
    except Exception:
        logger.exception("Simulation failed")
        sys.exit(1)
