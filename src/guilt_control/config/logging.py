from __future__ import annotations

import logging
from typing import Any, Iterable

# APScheduler logs every job execution at INFO; one line a minute is noise.
NOISY_LOGGERS = ("apscheduler",)


def setup_logging(level: str = "INFO", *, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_event(logger: logging.Logger, level: int, event: str, *, exc_info: bool = False, **fields: Any) -> None:
    """Log ``event k=v k=v`` with fields in call order."""
    parts = [event] + [f"{k}={v}" for k, v in fields.items()]
    logger.log(level, " ".join(parts), exc_info=exc_info)
