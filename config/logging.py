# Path: config/logging.py
# Purpose: Configure process-wide logging from application settings.
# Layer: config.
# Details: Called once by entrypoints (server, scripts) before the pipeline is built.

from __future__ import annotations

import logging

from .settings import AppSettings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(settings: AppSettings) -> None:
    """Configure the root logger using the level from ``settings``."""

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
