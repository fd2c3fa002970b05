import logging
from typing import Optional

from .config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging for a host process embedding the engine.

    Safe to call more than once; basicConfig is a no-op once handlers exist.
    """
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    logger = logging.getLogger("appliance_care")
    logger.debug("Logging configured")
    return logger
