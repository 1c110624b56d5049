"""Logging configuration helpers."""

import logging

LOGGER_NAME = "nutritrack"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the nutritrack logger.

    Repeated calls only adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    logger.setLevel(resolved)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
