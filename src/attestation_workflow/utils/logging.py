"""Logging setup for scripts and applications embedding the engine."""

import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a timestamped root handler.

    Args:
        level: Level name such as "DEBUG" or "INFO". Unknown names fall
            back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
