"""
Reporters Module

Renders analysis results as console text, JSON or CSV.
"""

import json
import csv
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from .analyzer import AnalysisResult
from .anomalies import AnomalyType

logger = logging.getLogger(__name__)


class Reporter(ABC):
    """Abstract base class for reporters."""

    @abstractmethod
    def generate(self, result: AnalysisResult) -> str:
        """Generate report content."""
        pass

    def save(self, result: AnalysisResult, filepath: str):
        """Save report to file."""
        content = self.generate(result)
        Path(filepath).write_text(content, encoding='utf-8')
        logger.info(f"Report saved to {filepath}")


class JSONReporter(Reporter):
    """Generates JSON reports."""

    def __init__(self, include_entries: bool = True):
        self.include_entries = include_entries

    def generate(self, result: AnalysisResult) -> str:
        data = result.to_dict()
        if not self.include_entries:
            data.pop("entries")
        return json.dumps(data, indent=2, default=str)


class CSVReporter(Reporter):
    """Generates CSV reports of anomalies."""

    def generate(self, result: AnalysisResult) -> str:
        output = io.StringIO()

        fieldnames = ['type', 'message', 'source_line']

        writer = csv.DictWriter(output, fieldnames=fieldnames)
        writer.writeheader()

        for anomaly in result.anomalies:
            writer.writerow(anomaly.to_dict())

        return output.getvalue()


class ConsoleReporter(Reporter):
    """Generates console-friendly output."""

    COLORS = {
        AnomalyType.BRUTE_FORCE: '\033[91m',
        AnomalyType.RATE_SPIKE: '\033[91m',
        AnomalyType.ERROR_SPIKE: '\033[93m',
        AnomalyType.SUSPICIOUS_UA: '\033[93m',
        AnomalyType.OFF_HOURS: '\033[94m',
        AnomalyType.HTTP_ERROR: '\033[96m',
        'reset': '\033[0m',
        'bold': '\033[1m',
        'dim': '\033[2m',
    }

    def __init__(self, use_colors: bool = True, max_anomalies: int = 50):
        self.use_colors = use_colors
        self.max_anomalies = max_anomalies

    def _color(self, text: str, color) -> str:
        if not self.use_colors:
            return text
        return f"{self.COLORS.get(color, '')}{text}{self.COLORS['reset']}"

    def generate(self, result: AnalysisResult) -> str:
        lines = []

        lines.append("")
        lines.append(self._color("=" * 60, 'bold'))
        lines.append(self._color("  LOG CHECK REPORT", 'bold'))
        lines.append(self._color("=" * 60, 'bold'))
        lines.append("")
        lines.append(f"  Lines analyzed:   {len(result.entries):,}")
        lines.append(f"  Anomalies found:  {len(result.anomalies):,}")
        lines.append("")

        if not result.anomalies:
            lines.append("  No anomalies detected.")
            lines.append("")
            return "\n".join(lines)

        lines.append(self._color("  SUMMARY", 'bold'))
        lines.append("-" * 40)
        for label, count in result.summary().items():
            lines.append(f"  {label + ':':<22}{count:>6}")
        lines.append("")

        lines.append(self._color("  ANOMALIES", 'bold'))
        lines.append("-" * 40)
        for anomaly in result.anomalies[:self.max_anomalies]:
            label = self._color(f"[{anomaly.type.value}]", anomaly.type)
            lines.append(f"  {label} {anomaly.message}")
            if anomaly.source_line:
                lines.append(f"      {self._color(anomaly.source_line, 'dim')}")

        if len(result.anomalies) > self.max_anomalies:
            lines.append(f"  ... and {len(result.anomalies) - self.max_anomalies} more anomalies")

        lines.append("")

        return "\n".join(lines)


def get_reporter(format: str) -> Reporter:
    """Get reporter by format name."""
    reporters = {
        'json': JSONReporter,
        'csv': CSVReporter,
        'console': ConsoleReporter,
    }

    reporter_class = reporters.get(format.lower())
    if not reporter_class:
        raise ValueError(f"Unknown format: {format}")

    return reporter_class()
