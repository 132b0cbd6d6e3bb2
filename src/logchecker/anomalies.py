"""
Anomalies Module

Defines the findings produced by log analysis.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Iterable, Optional


class AnomalyType(Enum):
    """Kinds of findings."""
    HTTP_ERROR = "HTTP Error"
    BRUTE_FORCE = "Brute Force"
    ERROR_SPIKE = "Error Spike"
    SUSPICIOUS_UA = "Suspicious UA"
    RATE_SPIKE = "Rate Spike"
    OFF_HOURS = "Off-hours Activity"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Anomaly:
    """A single finding."""

    type: AnomalyType
    message: str
    source_line: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert anomaly to dictionary."""
        return {
            "type": self.type.value,
            "message": self.message,
            "source_line": self.source_line,
        }


def summarize_by_type(anomalies: Iterable[Anomaly]) -> Dict[str, int]:
    """Count anomalies per type label, in order of first appearance."""
    counts: Dict[str, int] = {}
    for anomaly in anomalies:
        label = anomaly.type.value
        counts[label] = counts.get(label, 0) + 1
    return counts
