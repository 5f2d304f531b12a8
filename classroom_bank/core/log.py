"""Logging bootstrap."""

import logging

from classroom_bank.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else settings.logging.level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
