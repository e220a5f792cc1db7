from src.bot_drafter.bot_drafter import (
    BotDrafter,
    bot_display_name,
    bot_user_id,
    is_bot_user_id,
)
from src.bot_drafter.bot_runner import BotRunner
from src.bot_drafter.models import PickScore, WinstonDecision

__all__ = [
    "BotDrafter",
    "BotRunner",
    "PickScore",
    "WinstonDecision",
    "bot_display_name",
    "bot_user_id",
    "is_bot_user_id",
]
