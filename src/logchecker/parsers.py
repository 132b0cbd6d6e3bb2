"""
Log Parsers Module

Classifies raw log lines into structured entries. Recognizes the
Apache/Nginx combined access-log format and SSH/PAM authentication
failures, falling back to best-effort field extraction for anything else.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, List, Any, Callable, FrozenSet, Iterable, Iterator

from .patterns import (
    COMBINED_LOG,
    COMBINED_TIMESTAMP,
    MONTHS,
    AUTH_FAILURE,
    STATUS_TOKEN,
    QUOTED_AGENT,
)
from .utils import first_ipv4

logger = logging.getLogger(__name__)

FAILED_LOGIN = "failed_login"


@dataclass(frozen=True)
class LogEntry:
    """Represents a parsed log line."""

    raw: str
    source_ip: Optional[str] = None
    status_code: Optional[int] = None
    timestamp: Optional[datetime] = None
    method: Optional[str] = None
    path: Optional[str] = None
    user_agent: Optional[str] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    line_number: int = 0

    @property
    def is_failed_login(self) -> bool:
        return FAILED_LOGIN in self.tags

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "raw": self.raw,
            "source_ip": self.source_ip,
            "status_code": self.status_code,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "method": self.method,
            "path": self.path,
            "user_agent": self.user_agent,
            "tags": sorted(self.tags),
            "line_number": self.line_number,
        }


def parse_combined_timestamp(value: str) -> Optional[datetime]:
    """
    Parse a combined-log timestamp such as ``10/Oct/2000:13:55:36 -0700``.

    Every field has a fixed width and months use English abbreviations
    regardless of locale. Returns a timezone-aware datetime, or None when
    the value is malformed.
    """
    match = COMBINED_TIMESTAMP.fullmatch(value)
    month = MONTHS.get(match.group('month')) if match else None
    if month is None:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None

    offset = match.group('offset')
    sign = -1 if offset[0] == '-' else 1
    try:
        tz = timezone(sign * timedelta(hours=int(offset[1:3]), minutes=int(offset[3:5])))
        return datetime(
            int(match.group('year')),
            month,
            int(match.group('day')),
            int(match.group('hour')),
            int(match.group('minute')),
            int(match.group('second')),
            tzinfo=tz,
        )
    except ValueError:
        logger.debug(f"Unparseable timestamp: {value!r}")
        return None


# === Matchers ===
#
# Each matcher returns a LogEntry when it recognizes the line, None otherwise.

def match_combined(line: str, line_number: int = 0) -> Optional[LogEntry]:
    """Apache/Nginx combined access-log line."""
    match = COMBINED_LOG.match(line)
    if not match:
        return None

    data = match.groupdict()

    return LogEntry(
        raw=line,
        source_ip=data['ip'],
        status_code=int(data['status']),
        timestamp=parse_combined_timestamp(data['timestamp']),
        method=data['method'],
        path=data['path'],
        user_agent=data['user_agent'],
        line_number=line_number,
    )


def match_auth_failure(line: str, line_number: int = 0) -> Optional[LogEntry]:
    """Failed SSH/PAM/login authentication."""
    if not AUTH_FAILURE.search(line):
        return None

    return LogEntry(
        raw=line,
        source_ip=first_ipv4(line),
        tags=frozenset({FAILED_LOGIN}),
        line_number=line_number,
    )


def match_generic(line: str, line_number: int = 0) -> LogEntry:
    """Best-effort extraction for lines in no known format. Always matches."""
    status_match = STATUS_TOKEN.search(line)
    agent_match = QUOTED_AGENT.search(line)

    return LogEntry(
        raw=line,
        source_ip=first_ipv4(line),
        status_code=int(status_match.group(1)) if status_match else None,
        user_agent=agent_match.group(0) if agent_match else None,
        line_number=line_number,
    )


MATCHERS: List[Callable[[str, int], Optional[LogEntry]]] = [
    match_combined,
    match_auth_failure,
    match_generic,
]


def classify(line: str, line_number: int = 0) -> LogEntry:
    """
    Classify a single log line.

    Matchers are tried in priority order and the first match wins.

    Args:
        line: One non-empty line, without its line terminator
        line_number: Position of the line in its input

    Returns:
        Parsed LogEntry; never raises
    """
    for matcher in MATCHERS:
        entry = matcher(line, line_number)
        if entry is not None:
            return entry

    # match_generic always returns an entry
    return LogEntry(raw=line, line_number=line_number)


def parse_lines(lines: Iterable[str]) -> Iterator[LogEntry]:
    """Classify non-empty lines, numbering them from 1."""
    line_number = 0
    for line in lines:
        if not line:
            continue
        line_number += 1
        yield classify(line, line_number)
