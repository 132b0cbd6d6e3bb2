"""
Log Checker

Quick anomaly insights for HTTP access logs and SSH authentication logs:
brute-force logins, HTTP error spikes, automation user-agents, request
rate spikes and off-hours activity.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .parsers import LogEntry, classify, parse_lines
from .anomalies import Anomaly, AnomalyType, summarize_by_type
from .aggregator import AggregateState, Aggregator, aggregate
from .detectors import (
    BaseRule,
    BruteForceRule,
    ErrorSpikeRule,
    SuspiciousAgentRule,
    RateSpikeRule,
    OffHoursRule,
    RuleEngine,
)
from .analyzer import LogAnalyzer, AnalysisResult, analyze
from .reporters import Reporter, JSONReporter, CSVReporter, ConsoleReporter

__all__ = [
    # Parsers
    "LogEntry",
    "classify",
    "parse_lines",
    # Anomalies
    "Anomaly",
    "AnomalyType",
    "summarize_by_type",
    # Aggregation
    "AggregateState",
    "Aggregator",
    "aggregate",
    # Rules
    "BaseRule",
    "BruteForceRule",
    "ErrorSpikeRule",
    "SuspiciousAgentRule",
    "RateSpikeRule",
    "OffHoursRule",
    "RuleEngine",
    # Core
    "LogAnalyzer",
    "AnalysisResult",
    "analyze",
    # Reporters
    "Reporter",
    "JSONReporter",
    "CSVReporter",
    "ConsoleReporter",
]
