"""
Aggregator Module

Builds per-address counters from parsed log entries in a single pass.
The counters feed the threshold rules in the detectors module.
"""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import List, Dict, Set, Tuple, Iterable, Optional

from .parsers import LogEntry
from .anomalies import Anomaly, AnomalyType
from .patterns import ERROR_STATUS_CODES, FAILED_LOGIN_PHRASE
from .utils import minute_bucket, is_night_hour

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "unknown"


@dataclass
class AggregateState:
    """Counters collected over one analysis run."""

    failed_logins: Dict[str, int] = field(default_factory=dict)
    errors: Dict[str, int] = field(default_factory=dict)
    requests_per_minute: Dict[Tuple[str, int], int] = field(default_factory=dict)
    night_activity: Dict[str, int] = field(default_factory=dict)
    user_agents: Set[str] = field(default_factory=set)
    http_errors: List[Anomaly] = field(default_factory=list)

    def peak_per_minute(self) -> Dict[str, int]:
        """
        Busiest single minute per address.

        Addresses are returned in first-seen order.
        """
        peaks: Dict[str, int] = {}
        for (ip, _bucket), count in self.requests_per_minute.items():
            if count > peaks.get(ip, 0):
                peaks[ip] = count
        return peaks

    def merge(self, other: "AggregateState") -> "AggregateState":
        """
        Combine two shards into a new state.

        Counts and minute buckets are summed, user agents are unioned and
        per-line anomalies keep self's entries first.
        """
        merged = AggregateState(
            failed_logins=dict(self.failed_logins),
            errors=dict(self.errors),
            requests_per_minute=dict(self.requests_per_minute),
            night_activity=dict(self.night_activity),
            user_agents=self.user_agents | other.user_agents,
            http_errors=self.http_errors + other.http_errors,
        )
        _add_counts(merged.failed_logins, other.failed_logins)
        _add_counts(merged.errors, other.errors)
        _add_counts(merged.requests_per_minute, other.requests_per_minute)
        _add_counts(merged.night_activity, other.night_activity)
        return merged


def _add_counts(target: Dict, source: Dict):
    for key, count in source.items():
        target[key] = target.get(key, 0) + count


def _increment(counter: Dict, key):
    counter[key] = counter.get(key, 0) + 1


class Aggregator:
    """
    Single-pass accumulator over log entries.

    Example:
        >>> aggregator = Aggregator()
        >>> for entry in entries:
        ...     aggregator.add(entry)
        >>> state = aggregator.state
    """

    def __init__(self, night_tz: Optional[tzinfo] = None):
        self.state = AggregateState()
        self.entries_seen = 0
        # None reads the hour in each line's own offset
        self.night_tz = night_tz

    def add(self, entry: LogEntry):
        """Fold one entry into the counters."""
        self.entries_seen += 1
        state = self.state
        ip = entry.source_ip or UNKNOWN_SOURCE

        if entry.is_failed_login or FAILED_LOGIN_PHRASE.search(entry.raw):
            _increment(state.failed_logins, ip)

        if entry.status_code in ERROR_STATUS_CODES:
            _increment(state.errors, ip)
            state.http_errors.append(Anomaly(
                type=AnomalyType.HTTP_ERROR,
                message=f"HTTP {entry.status_code} from {ip}",
                source_line=entry.raw,
            ))

        if entry.user_agent:
            state.user_agents.add(entry.user_agent)

        if entry.timestamp is not None and entry.source_ip:
            _increment(
                state.requests_per_minute,
                (entry.source_ip, minute_bucket(entry.timestamp)),
            )
            if is_night_hour(entry.timestamp, tz=self.night_tz):
                _increment(state.night_activity, entry.source_ip)

    def add_all(self, entries: Iterable[LogEntry]) -> AggregateState:
        for entry in entries:
            self.add(entry)
        return self.state


def aggregate(entries: Iterable[LogEntry], night_tz: Optional[tzinfo] = None) -> AggregateState:
    """Aggregate entries into a fresh AggregateState."""
    aggregator = Aggregator(night_tz=night_tz)
    state = aggregator.add_all(entries)
    logger.debug(
        f"Aggregated {aggregator.entries_seen} entries: "
        f"{len(state.failed_logins)} failed-login sources, "
        f"{len(state.errors)} error sources, "
        f"{len(state.user_agents)} user agents"
    )
    return state
