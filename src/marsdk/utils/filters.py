"""Include/exclude filter matching for collector configuration.

Filters come from user config as plain strings. Each one is either a
literal (equality match), ``/regex/`` (matches when the regex searches
successfully) or ``!/regex/`` (matches when the regex does NOT match).
"""

from __future__ import annotations

import logging
import re
from typing import Any

logger = logging.getLogger("marsdk.filters")

_REGEX_FILTER = re.compile(r"^(!)?/(.*)/$")


def matches_any_filter(value: str, patterns: Any) -> bool:
    """Return True if ``value`` satisfies at least one filter in ``patterns``.

    Non-list ``patterns`` never match. Filters whose regex does not
    compile are logged and skipped.
    """
    if not isinstance(patterns, list):
        return False

    for pattern in patterns:
        match = _REGEX_FILTER.match(pattern) if isinstance(pattern, str) else None
        if match is None:
            if value == pattern:
                logger.debug("%s has equality with %s", value, pattern)
                return True
            continue

        negated, expression = match.group(1) is not None, match.group(2)
        try:
            regex = re.compile(expression)
        except re.error as exc:
            logger.warning(
                "Failed to construct a regular expression from %s %s",
                expression, exc,
            )
            continue

        found = regex.search(value) is not None
        if negated and not found:
            logger.debug("%s matches regex !/%s/", value, expression)
            return True
        if negated:
            logger.debug("%s excluded by not regex !/%s/", value, expression)
        elif found:
            logger.debug("%s matches regex /%s/", value, expression)
            return True
        else:
            logger.debug("%s does not match regex /%s/", value, expression)
    return False


def pass_filter(value: str, patterns: list[str]) -> bool:
    """True unless ``value`` matches any of the regex ``patterns``."""
    if not patterns:
        return True
    return re.search("|".join(patterns), value) is None
