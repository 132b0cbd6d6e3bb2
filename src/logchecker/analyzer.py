"""
Log Analyzer Module

Main orchestrator for log analysis: classify lines, aggregate counters,
evaluate rules.
"""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import List, Dict, Any, Iterable, Optional

from .parsers import LogEntry, parse_lines
from .aggregator import AggregateState, aggregate
from .anomalies import Anomaly, AnomalyType, summarize_by_type
from .detectors import RuleEngine
from .utils import split_lines

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Complete analysis result."""

    entries: List[LogEntry] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        """Anomaly count per type, in order of first appearance."""
        return summarize_by_type(self.anomalies)

    def get_by_type(self, anomaly_type: AnomalyType) -> List[Anomaly]:
        return [a for a in self.anomalies if a.type == anomaly_type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary(),
            "anomalies": [a.to_dict() for a in self.anomalies],
            "entries": [e.to_dict() for e in self.entries],
        }


class LogAnalyzer:
    """
    Main log analysis orchestrator.

    Example:
        >>> analyzer = LogAnalyzer()
        >>> result = analyzer.analyze(text)
        >>> print(f"Found {len(result.anomalies)} anomalies")
    """

    def __init__(self, engine: RuleEngine = None, night_tz: Optional[tzinfo] = None):
        """
        Args:
            engine: Rules to evaluate; defaults to the standard set
            night_tz: Zone for the off-hours window; None uses each
                line's own offset
        """
        self.engine = engine or RuleEngine()
        self.night_tz = night_tz

    def _evaluate(self, entries: List[LogEntry], state: AggregateState) -> AnalysisResult:
        anomalies = list(state.http_errors)
        anomalies.extend(self.engine.evaluate(state))

        logger.info(f"Analysis complete: {len(entries)} entries, {len(anomalies)} anomalies")

        return AnalysisResult(entries=entries, anomalies=anomalies)

    def analyze(self, text: Optional[str]) -> AnalysisResult:
        """
        Analyze a block of log text.

        Args:
            text: Full log contents; LF or CRLF line endings

        Returns:
            AnalysisResult with one entry per non-empty line
        """
        entries = list(parse_lines(split_lines(text)))
        return self._evaluate(entries, aggregate(entries, self.night_tz))

    def analyze_many(self, texts: Iterable[Optional[str]]) -> AnalysisResult:
        """
        Analyze several inputs as one data set.

        Each text is aggregated on its own and the shards are merged
        before the rules run.
        """
        entries: List[LogEntry] = []
        state = AggregateState()

        for text in texts:
            shard = list(parse_lines(split_lines(text)))
            state = state.merge(aggregate(shard, self.night_tz))
            entries.extend(shard)

        return self._evaluate(entries, state)


def analyze(text: Optional[str]) -> AnalysisResult:
    """Analyze log text with the default rule set."""
    return LogAnalyzer().analyze(text)
