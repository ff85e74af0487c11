"""Shared constants for discovery and collection.

Reason categories are free-form strings on the wire. The values here are
the ones the platform UI groups on; collectors may still send their own.
"""

from __future__ import annotations

from enum import Enum


class ReasonType(str, Enum):
    """Well-known categories for a negative discovery result."""
    INSUFFICIENT_PRIVILEGES = "Insufficient Privileges"
    INVALID_CREDENTIALS = "Invalid Credentials"
    MISSING_CREDENTIALS = "Missing Credentials"
    MISSING_PROCESS = "Missing Process"
    MISSING_COMMAND = "Missing Command"
    NO_HTTP_RESPONSE = "No http(s) response"
    MISSING_CONFIG = "Missing configuration item"
    INVALID_CONFIG = "Invalid configuration value"
    TIMEOUT = "Timeout"


class MetricType(str, Enum):
    """Counter vs gauge semantics, in short and long form."""
    C = "c"
    G = "g"
    COUNTER = "counter"
    GAUGE = "gauge"


class Severity(str, Enum):
    """Event severities, ordered from 0 (clear) to 5 (critical)."""
    CLEAR = "clear"
    UNKNOWN = "unknown"
    MINOR = "minor"
    WARNING = "warning"
    MAJOR = "major"
    CRITICAL = "critical"


COUNTER = MetricType.C.value
GAUGE = MetricType.G.value

METRIC_TYPES = tuple(t.value for t in MetricType)
SEVERITIES = tuple(s.value for s in Severity)
MAX_NUMERIC_SEVERITY = len(SEVERITIES) - 1
