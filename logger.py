from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path


_LOGGER_NAME = "algo-commit-bot"
_FORMAT = "[%(asctime)s] [%(levelname)s] [%(module)s] %(message)s"


class _IsoFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        dt = datetime.fromtimestamp(record.created)
        return dt.isoformat(timespec="seconds")


def get_logger() -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if getattr(logger, "_commit_bot_configured", False):
        return logger

    logger.setLevel(logging.INFO)
    logger.propagate = False

    logs_dir = Path(__file__).resolve().parent / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"run-{datetime.now().date().isoformat()}.log"

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(_IsoFormatter(_FORMAT))
    logger.addHandler(file_handler)

    # Also echo to stderr.
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setLevel(logging.INFO)
    stream_handler.setFormatter(_IsoFormatter(_FORMAT))
    logger.addHandler(stream_handler)

    logger._commit_bot_configured = True  # type: ignore[attr-defined]
    return logger
