"""Logging configuration helpers."""

import logging

_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def resolve_log_level(level: str | int) -> int:
    """Map a level name such as ``"debug"`` to its numeric value.

    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach one stream handler to the room_editor logger and set its level.

    Repeated calls only adjust the level.
    """
    logger = logging.getLogger("room_editor")
    logger.setLevel(resolve_log_level(level))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
