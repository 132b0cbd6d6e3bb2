"""
Log Patterns Module

Contains the regex signatures used to recognize log dialects and the
keyword lists the detection rules match against.
"""

import re
from typing import Dict, FrozenSet, List, Pattern


# === Format Signatures ===

# Apache/Nginx combined log format:
# %h %l %u [%t] "%m %U %H" %>s %b "%{Referer}i" "%{User-agent}i"
COMBINED_LOG: Pattern = re.compile(
    r'^(?P<ip>\S+) \S+ \S+ '                        # Address, ident, user
    r'\[(?P<timestamp>[^\]]+)\] '                   # Timestamp
    r'"(?P<method>[A-Z]+) (?P<path>[^"]*?) [^"]*" '  # Request line
    r'(?P<status>[0-9]{3}) '                        # Status code
    r'(?:[0-9]+|-) '                                # Size
    r'"[^"]*" '                                     # Referer
    r'"(?P<user_agent>[^"]*)"'                      # User-agent
)

# 10/Oct/2000:13:55:36 -0700
COMBINED_TIMESTAMP: Pattern = re.compile(
    r'(?P<day>[0-9]{2})/(?P<month>[A-Za-z]{3})/(?P<year>[0-9]{4}):'
    r'(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2}) '
    r'(?P<offset>[+-][0-9]{4})'
)

MONTHS: Dict[str, int] = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}

# sshd / PAM / login(1) failure messages
AUTH_FAILURE: Pattern = re.compile(
    r'(?:Failed password|authentication failure|Invalid user|Login incorrect)',
    re.IGNORECASE
)

# Free-text "failed login" mentions outside the known auth dialects
FAILED_LOGIN_PHRASE: Pattern = re.compile(r'failed login', re.IGNORECASE)


# === Generic Field Extraction ===

# ASCII digits only; octet ranges are deliberately not checked
IPV4_TOKEN: Pattern = re.compile(r'\b[0-9]{1,3}(?:\.[0-9]{1,3}){3}\b', re.ASCII)

STATUS_TOKEN: Pattern = re.compile(r'\s([0-9]{3})\s')

KNOWN_AGENT_PREFIXES: List[str] = [
    "Mozilla",
    "curl",
    "Wget",
    "Postman",
    "python-requests",
    "Go-http-client",
    "sqlmap",
]

QUOTED_AGENT: Pattern = re.compile(
    r'"(?P<user_agent>(?:%s)[^"]*)"' % "|".join(
        re.escape(prefix) for prefix in KNOWN_AGENT_PREFIXES
    ),
    re.IGNORECASE
)


# === Detection Keywords ===

ERROR_STATUS_CODES: FrozenSet[int] = frozenset({403, 404, 500, 502, 503})

AUTOMATION_AGENTS: List[str] = [
    "curl",
    "wget",
    "postman",
    "python-requests",
    "go-http-client",
    "sqlmap",
]

AUTOMATION_AGENT: Pattern = re.compile(
    "|".join(re.escape(agent) for agent in AUTOMATION_AGENTS),
    re.IGNORECASE
)


def is_automation_agent(user_agent: str) -> bool:
    """Check if a user-agent string belongs to a scripting tool or scanner."""
    return bool(AUTOMATION_AGENT.search(user_agent))
