"""
Logging setup for the client and its command line front end.
"""

import logging
from typing import Optional

from galactavista.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the client.

    Args:
        level: Log level name, defaults to the configured ``log_level``
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)

    # httpx logs every request at INFO
    if level_name != "DEBUG":
        logging.getLogger("httpx").setLevel(logging.WARNING)
