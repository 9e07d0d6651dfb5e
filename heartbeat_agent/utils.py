"""Logging helpers for the heartbeat agent."""

import logging
import sys


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure logging for the agent.

    Args:
        debug: Enable debug-level logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if debug else logging.INFO

    logger = logging.getLogger("heartbeat-agent")
    logger.setLevel(level)

    # Called again from the signal handler; keep a single handler
    if not logger.handlers:
        formatter = logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
