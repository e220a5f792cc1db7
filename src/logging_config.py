import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE_NAME = "draft_engine.log"

# Loggers that emit a line per pick, capped at INFO
NOISY_LOGGERS = [
    "src.draft_engine.draft_controller",
    "src.bot_drafter.bot_runner",
]


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Send draft engine logs to the console and a rotating file.

    The file always records DEBUG; the console follows ``log_level``.
    Calling this again once the root logger has handlers does nothing.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    log_dir = Path(log_dir) if log_dir else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    console_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger.setLevel(logging.DEBUG)

    # 5MB per file, keep 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / LOG_FILE_NAME, maxBytes=5 * 1024 * 1024, backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(console_level, logging.INFO))

    logging.getLogger(__name__).info(
        "Logging initialized (console=%s, file=%s)", log_level, log_dir / LOG_FILE_NAME
    )
