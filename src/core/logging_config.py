"""
Logging setup shared by the API and the upload CLI.
"""
import logging
from typing import Optional
from src.core import config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once.

    Args:
        level: Log level name, defaults to settings.log_level
    """
    logging.basicConfig(
        level=(level or config.settings.log_level).upper(),
        format=LOG_FORMAT,
    )
    # botocore is very chatty at DEBUG
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
