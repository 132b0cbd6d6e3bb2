"""
Anomaly Detectors Module

Threshold rules evaluated over the aggregate counters of one analysis
run. Each rule is an independent pass over the same state.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Dict, Optional

from .aggregator import AggregateState
from .anomalies import Anomaly, AnomalyType
from .patterns import is_automation_agent

logger = logging.getLogger(__name__)

# Standard evaluation order
DEFAULT_RULES = ["bruteforce", "errorspike", "useragent", "ratespike", "offhours"]


class BaseRule(ABC):
    """Abstract base class for detection rules."""

    name: str = "base"
    description: str = "Base rule"

    @abstractmethod
    def evaluate(self, state: AggregateState) -> List[Anomaly]:
        """
        Evaluate the rule against aggregate counters.

        Args:
            state: Counters from the aggregation pass

        Returns:
            Anomalies found, possibly empty
        """
        pass


class CountThresholdRule(BaseRule):
    """
    Fires once per address whose count reaches a threshold.

    Subclasses pick the counter and word the message.
    """

    anomaly_type: AnomalyType
    default_threshold: int = 0

    def __init__(self, threshold: Optional[int] = None):
        self.threshold = self.default_threshold if threshold is None else threshold

    @abstractmethod
    def counts(self, state: AggregateState) -> Dict[str, int]:
        pass

    @abstractmethod
    def format_message(self, ip: str, count: int) -> str:
        pass

    def triggers(self, count: int) -> bool:
        return count >= self.threshold

    def evaluate(self, state: AggregateState) -> List[Anomaly]:
        anomalies = []
        for ip, count in self.counts(state).items():
            if self.triggers(count):
                logger.debug(f"{self.name}: {ip} at {count} (threshold {self.threshold})")
                anomalies.append(Anomaly(
                    type=self.anomaly_type,
                    message=self.format_message(ip, count),
                ))
        return anomalies


class BruteForceRule(CountThresholdRule):
    """Repeated authentication failures from one source."""

    name = "bruteforce"
    description = "Brute Force Detector"
    anomaly_type = AnomalyType.BRUTE_FORCE
    default_threshold = 6

    def counts(self, state: AggregateState) -> Dict[str, int]:
        return state.failed_logins

    def format_message(self, ip: str, count: int) -> str:
        return f"{count} failed logins from {ip}"


class ErrorSpikeRule(CountThresholdRule):
    """Many HTTP error responses served to one source."""

    name = "errorspike"
    description = "HTTP Error Spike Detector"
    anomaly_type = AnomalyType.ERROR_SPIKE
    default_threshold = 12

    def counts(self, state: AggregateState) -> Dict[str, int]:
        return state.errors

    def format_message(self, ip: str, count: int) -> str:
        return f"{count} HTTP errors from {ip}"


class RateSpikeRule(CountThresholdRule):
    """
    Request bursts within a single minute.

    Unlike the other count rules the threshold is exclusive: a source
    must go above it.
    """

    name = "ratespike"
    description = "Request Rate Spike Detector"
    anomaly_type = AnomalyType.RATE_SPIKE
    default_threshold = 120

    def counts(self, state: AggregateState) -> Dict[str, int]:
        return state.peak_per_minute()

    def triggers(self, count: int) -> bool:
        return count > self.threshold

    def format_message(self, ip: str, count: int) -> str:
        return f"{ip} peaked at {count} req/min"


class OffHoursRule(CountThresholdRule):
    """Sustained activity between midnight and 05:00."""

    name = "offhours"
    description = "Off-hours Activity Detector"
    anomaly_type = AnomalyType.OFF_HOURS
    default_threshold = 100

    def counts(self, state: AggregateState) -> Dict[str, int]:
        return state.night_activity

    def format_message(self, ip: str, count: int) -> str:
        return f"{count} requests between 00:00–05:00 from {ip}"


class SuspiciousAgentRule(BaseRule):
    """Scripting tools and scanners among the observed user agents."""

    name = "useragent"
    description = "Suspicious User-Agent Detector"

    MESSAGE = "Automation/tool user-agents detected (curl/wget/Postman/etc.)"

    def evaluate(self, state: AggregateState) -> List[Anomaly]:
        if any(is_automation_agent(agent) for agent in state.user_agents):
            return [Anomaly(type=AnomalyType.SUSPICIOUS_UA, message=self.MESSAGE)]
        return []


class RuleEngine(BaseRule):
    """Runs a fixed sequence of rules and concatenates their findings."""

    name = "engine"
    description = "Rule Engine"

    def __init__(self, rules: List[BaseRule] = None):
        """
        Initialize with list of rules.

        Args:
            rules: Rules in evaluation order; defaults to the standard set
        """
        if rules is None:
            rules = [
                BruteForceRule(),
                ErrorSpikeRule(),
                SuspiciousAgentRule(),
                RateSpikeRule(),
                OffHoursRule(),
            ]

        self.rules = rules

    @classmethod
    def with_thresholds(
        cls,
        brute_force: Optional[int] = None,
        error_spike: Optional[int] = None,
        rate_spike: Optional[int] = None,
        off_hours: Optional[int] = None,
        names: Optional[List[str]] = None,
    ) -> "RuleEngine":
        """
        Build an engine from named rules with some thresholds overridden.

        Args:
            names: Rules to run; defaults to the standard set. Selected
                rules always run in the standard order.

        Raises:
            ValueError: If a rule name is unknown
        """
        overrides = {
            'bruteforce': brute_force,
            'errorspike': error_spike,
            'ratespike': rate_spike,
            'offhours': off_hours,
        }
        selected = {get_rule(name).name for name in names} if names else set(DEFAULT_RULES)

        rules = []
        for name in DEFAULT_RULES:
            if name not in selected:
                continue
            rule = get_rule(name)
            if overrides.get(name) is not None:
                rule.threshold = overrides[name]
            rules.append(rule)
        return cls(rules)

    def evaluate(self, state: AggregateState) -> List[Anomaly]:
        anomalies = []
        for rule in self.rules:
            found = rule.evaluate(state)
            if found:
                logger.info(f"Rule {rule.name} raised {len(found)} anomalies")
            anomalies.extend(found)
        return anomalies


def get_rule(name: str) -> BaseRule:
    """Get rule by name."""
    rules = {
        'bruteforce': BruteForceRule,
        'errorspike': ErrorSpikeRule,
        'useragent': SuspiciousAgentRule,
        'ratespike': RateSpikeRule,
        'offhours': OffHoursRule,
    }

    rule_class = rules.get(name.lower())
    if not rule_class:
        raise ValueError(f"Unknown rule: {name}")

    return rule_class()
