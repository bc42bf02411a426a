"""Logging configuration for the client."""

import logging
import sys

from eurovote.config import Settings


def setup_logging(settings: Settings) -> None:
    """Configure client logging.

    Args:
        settings: Client settings
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("eurovote").setLevel(level)

    logger = logging.getLogger(__name__)
    logger.debug(
        f"Logging configured: environment={settings.environment}, level={logging.getLevelName(level)}"
    )

