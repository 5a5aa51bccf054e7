"""
Logging setup for eval runs.

All output goes through loguru. Records from the standard library loggers used
by httpx and the OpenAI SDK are routed into it too, held at WARNING so a run's
progress lines are not buried under one request line per embedding call.
"""

import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)

QUIET_LOGGERS = ("httpx", "httpcore", "openai")


class InterceptHandler(logging.Handler):
    """Forwards standard library log records to loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # report the original call site, not this handler
        frame, depth = logging.currentframe(), 2
        while frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO"):
    """Replace loguru's default sink with a stdout sink at ``level``."""
    level = level.upper()

    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level, colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in QUIET_LOGGERS:
        client_logger = logging.getLogger(name)
        client_logger.handlers = [InterceptHandler()]
        client_logger.propagate = False
        client_logger.setLevel(logging.WARNING)

    logger.debug(f"Logging initialized at {level}")
