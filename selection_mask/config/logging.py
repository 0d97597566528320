"""
Logging setup for hosts and the demo notebook.

The package itself only logs through ``logging.getLogger(__name__)``; nothing
is configured on import.
"""

from __future__ import annotations

import logging
from typing import Optional

from .settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# PNG encoding logs every chunk at DEBUG
_QUIET_LOGGERS = ("PIL",)


def configure_logging(level: Optional[str] = None) -> int:
    """
    Configure the root logger.

    Args:
        level: Level name such as "debug". Defaults to the
               SELECTION_MASK_LOG_LEVEL setting; unknown names fall back to INFO.

    Returns:
        The numeric level applied
    """
    name = (level or get_settings().log_level).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    for quiet in _QUIET_LOGGERS:
        logging.getLogger(quiet).setLevel(max(numeric, logging.INFO))
    return numeric
