"""
Logging setup for the API process.
"""

import logging

from app.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure the root logger once for the whole process."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    root.setLevel(level.upper())

    # SQLAlchemy has its own echo switch
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
