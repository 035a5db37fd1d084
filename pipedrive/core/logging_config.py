"""
Centralized logging configuration.

The library only creates module loggers; applications decide whether
to call ``setup_logging`` for console or file output.
"""

import logging
import sys
from urllib.parse import quote_plus
from typing import Optional
from pathlib import Path


def setup_logging(
    level: str = 'INFO',
    format_string: Optional[str] = None,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for an application using the client.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Custom format string (uses default if None)
        log_file: Optional log file path
    """
    if format_string is None:
        format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format=format_string,
        handlers=handlers,
        force=True
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def configure_from_settings(settings) -> None:
    """
    Configure logging from settings object.

    Args:
        settings: Settings object with log_level and log_format
    """
    setup_logging(
        level=settings.log_level,
        format_string=settings.log_format
    )


def redact_token(url: str, token: Optional[str]) -> str:
    """Replace the API token in a URL before it is written to a log."""
    if not token:
        return url
    for form in {token, quote_plus(token)}:
        url = url.replace(form, "***")
    return url
