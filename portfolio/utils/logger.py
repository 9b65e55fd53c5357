import logging
import sys

from portfolio.config import settings

# Client libraries that log every HTTP request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest")


def setup_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Console logger for the API; safe to call more than once per name."""
    logger = logging.getLogger(name)
    level = level.upper()

    if not logger.handlers:
        logger.setLevel(level)
        logger.propagate = False

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(handler)

        for noisy in QUIET_LOGGERS:
            logging.getLogger(noisy).setLevel(logging.WARNING)

    return logger

logger = setup_logger("portfolio", settings.LOG_LEVEL)
