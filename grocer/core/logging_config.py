# grocer/core/logging_config.py
import logging
import sys
from typing import Optional

import structlog

from .settings import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure structlog on top of stdlib logging.
    Pricing events go as JSON to stdout; call once from the embedding app.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Module-wide logger, importable everywhere
logger = structlog.get_logger("grocer")
