"""marsdk exceptions."""

from __future__ import annotations


class MarsdkError(Exception):
    """Base exception for marsdk errors."""


class InvalidRecordError(MarsdkError, ValueError):
    """A telemetry record failed validation and must not be sent."""
