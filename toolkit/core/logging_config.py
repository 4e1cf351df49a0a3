# toolkit/core/logging_config.py
import logging
import os
import sys

import structlog


def setup_logging(level: str | None = None) -> None:
    """
    Configure structlog + standaard logging.
    Logs gaan als JSON naar stdout. The toolkit itself only emits debug events,
    so hosts see them by passing level="DEBUG" (or TOOLKIT_LOG_LEVEL=DEBUG).
    """
    level_name = (level or os.getenv("TOOLKIT_LOG_LEVEL", "INFO")).upper()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level_name, logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# Globale logger voor de host-applicatie
logger = structlog.get_logger("toolkit")
