"""Utility functions for link-keepalive."""

import sys
import logging
from typing import Optional
from urllib.parse import urlparse


LOG_FORMAT = '[%(asctime)s] [%(levelname)s] %(message)s'


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None):
    """
    Set up logging configuration.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        log_file: Optional log file path
    """
    logging.addLevelName(logging.WARNING, 'WARN')

    # INFO and DEBUG go to stdout, WARN and ERROR to stderr
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)

    handlers = [stdout_handler, stderr_handler]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    # httpx logs every request at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)


def format_bytes(size: int) -> str:
    """
    Format bytes to human readable string.

    Args:
        size: Size in bytes

    Returns:
        Formatted string (e.g., '1.5 MB')
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0
    return f"{size:.1f} PB"


def validate_url(url: str) -> bool:
    """
    Validate if string is a syntactically valid absolute URL.

    Args:
        url: URL string to validate

    Returns:
        True if valid URL, False otherwise
    """
    if any(char.isspace() for char in url):
        return False

    try:
        result = urlparse(url)
        # Accessing the port validates it
        result.port
        return all([result.scheme, result.netloc])
    except ValueError:
        return False
