import logging
from collections import deque
from typing import Deque, Optional, Tuple

import structlog

LOG_BUFFER: Deque[Tuple[int, str]] = deque(maxlen=5000)
LEVEL_STYLE = {
    logging.DEBUG: "dim",
    logging.INFO: "",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}

LOG_FORMAT = "%(asctime)s  %(levelname)s  %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class UILogHandler(logging.Handler):
    """Collects formatted records into LOG_BUFFER for the terminal log panel."""

    def emit(self, record):
        msg = self.format(record)
        LOG_BUFFER.append((record.levelno, msg))


def get_ui_log_handler() -> UILogHandler:
    uih = UILogHandler()
    uih.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    return uih


def configure_logging(
    *,
    level: int = logging.INFO,
    handler: Optional[logging.Handler] = None,
    json: bool = False,
) -> logging.Logger:
    """Route structlog through the stdlib `factor_finder` logger.

    The terminal UI passes a UILogHandler; the API renders JSON to stderr.
    """
    renderer = (
        structlog.processors.JSONRenderer(indent=2)
        if json
        else structlog.processors.KeyValueRenderer(key_order=["event"], drop_missing=True)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    logger = logging.getLogger("factor_finder")
    logger.setLevel(level)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def event_logger() -> logging.Logger:
    """Logger that the UI uses to echo algorithm Log events."""
    return logging.getLogger("factor_finder.events")
