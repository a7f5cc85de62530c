"""Logging configuration for PingX."""

import logging
import os
import sys


def configure_logging() -> None:
    """Configure application-wide logging.

    Respects PINGX_LOG_LEVEL environment variable (default: WARNING).
    Logs to stderr with timestamp, level, module name, and message.

    The default is WARNING rather than INFO because replies are printed to the
    terminal as they arrive; INFO records such as "Run started" would land
    between the reply lines. Spawn failures (WARNING) still show.

    Environment Variables:
        PINGX_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                         Default is WARNING.

    Examples:
        # Debug level for troubleshooting probe parsing
        $ PINGX_LOG_LEVEL=DEBUG pingx -c 3 example.com
    """
    # Get log level from environment, default to WARNING
    log_level_str = os.environ.get("PINGX_LOG_LEVEL", "WARNING").upper()

    # Map string to logging constant
    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(log_level_str, logging.WARNING)

    # Configure root logger
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.info("Logging configured: level=%s", logging.getLevelName(log_level))
