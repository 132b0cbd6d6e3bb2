"""
Utility Functions

Helper utilities for log analysis operations.
"""

import re
import logging
from datetime import datetime, tzinfo
from typing import List, Optional

from .patterns import IPV4_TOKEN

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60000

_LINE_BREAK = re.compile(r'\r?\n')


# === Text Processing ===

def split_lines(text: Optional[str]) -> List[str]:
    """Split log text on LF or CRLF, dropping empty lines."""
    if not text:
        return []
    return [line for line in _LINE_BREAK.split(text) if line]


def first_ipv4(text: str) -> Optional[str]:
    """Return the first IPv4-looking token in text."""
    match = IPV4_TOKEN.search(text)
    return match.group(0) if match else None


# === Time Utilities ===

def epoch_ms(timestamp: datetime) -> int:
    """Milliseconds since the Unix epoch."""
    return int(timestamp.timestamp() * 1000)


def minute_bucket(timestamp: datetime) -> int:
    """Whole minutes since the Unix epoch."""
    return epoch_ms(timestamp) // MS_PER_MINUTE


def is_night_hour(
    timestamp: datetime,
    start_hour: int = 0,
    end_hour: int = 5,
    tz: Optional[tzinfo] = None,
) -> bool:
    """
    Check if timestamp falls in the [start_hour, end_hour) night window.

    The hour is read in the timestamp's own offset unless tz is given.
    """
    if tz is not None:
        timestamp = timestamp.astimezone(tz)
    return start_hour <= timestamp.hour < end_hour


def local_timezone() -> tzinfo:
    """Timezone of the host running the analysis."""
    return datetime.now().astimezone().tzinfo


# === Logging Setup ===

def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_str: str = None,
):
    """Configure logging for the application."""
    if format_str is None:
        format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handlers = [logging.StreamHandler()]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=handlers,
    )
