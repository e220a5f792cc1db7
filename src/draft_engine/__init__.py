from src.draft_engine.deck_builder import (
    is_deck_valid,
    move_card_to_deck,
    move_card_to_sideboard,
    set_basic_lands,
    submit_deck,
    suggest_land_counts,
    unsubmit_deck,
)
from src.draft_engine.draft_controller import (
    advance_to_next_pack,
    all_players_have_picked,
    auto_pick_card,
    clear_queued_pick,
    count_cards_in_play,
    deliver_pack,
    is_individual_round_complete,
    is_pack_complete,
    is_round_complete,
    make_pick,
    make_pick_and_pass,
    pass_current_packs,
    promote_from_queue,
    queue_pick,
)
from src.draft_engine.draft_initializer import (
    add_player,
    complete_draft,
    confirm_draft,
    create_draft,
    finish_draft,
    remove_player,
    start_draft,
    transition_to_deck_building,
)
from src.draft_engine.draft_rules import (
    CapacityError,
    ConfigurationError,
    LifecycleError,
    ReferentialError,
    ValidationError,
    get_next_seat,
    get_pass_direction,
    get_pick_deadline,
    get_pick_timer,
)
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
    PassDirection,
    Rarity,
    TimerPreset,
    WinstonState,
)
from src.draft_engine.export import (
    format_cockatrice_xml,
    format_deck_list_text,
    format_pool_text,
)
from src.draft_engine.state_persistence import (
    StatePersistence,
    StoredDraft,
    VersionConflictError,
    draft_from_dict,
    draft_to_dict,
)
from src.draft_engine.winston import (
    initialize_winston,
    is_winston_complete,
    winston_look_at_pile,
    winston_pass_pile,
    winston_take_pile,
)

__all__ = [
    "BasicLandCounts",
    "CapacityError",
    "CardReference",
    "ConfigurationError",
    "Draft",
    "DraftConfig",
    "DraftFormat",
    "DraftPick",
    "DraftSeat",
    "DraftStatus",
    "LifecycleError",
    "PackState",
    "PacingMode",
    "PassDirection",
    "Rarity",
    "ReferentialError",
    "StatePersistence",
    "StoredDraft",
    "TimerPreset",
    "ValidationError",
    "VersionConflictError",
    "WinstonState",
    "add_player",
    "advance_to_next_pack",
    "all_players_have_picked",
    "auto_pick_card",
    "clear_queued_pick",
    "complete_draft",
    "confirm_draft",
    "count_cards_in_play",
    "create_draft",
    "deliver_pack",
    "draft_from_dict",
    "draft_to_dict",
    "finish_draft",
    "format_cockatrice_xml",
    "format_deck_list_text",
    "format_pool_text",
    "get_next_seat",
    "get_pass_direction",
    "get_pick_deadline",
    "get_pick_timer",
    "initialize_winston",
    "is_deck_valid",
    "is_individual_round_complete",
    "is_pack_complete",
    "is_round_complete",
    "is_winston_complete",
    "make_pick",
    "make_pick_and_pass",
    "move_card_to_deck",
    "move_card_to_sideboard",
    "pass_current_packs",
    "promote_from_queue",
    "queue_pick",
    "remove_player",
    "set_basic_lands",
    "start_draft",
    "submit_deck",
    "suggest_land_counts",
    "transition_to_deck_building",
    "unsubmit_deck",
    "winston_look_at_pile",
    "winston_pass_pile",
    "winston_take_pile",
]
