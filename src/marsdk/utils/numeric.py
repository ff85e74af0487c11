"""Numeric and hex string helpers.

``parse_float`` follows the leading-prefix rules collectors have always
relied on: ``"12.5ms"`` is 12.5, ``"abc"`` parses to nothing. ``is_hex``
only accepts the canonical rendering of a hex number, so ``"0x0f"`` and
``"0xFF"`` are rejected while ``"0xf"`` and ``"0xff"`` are accepted.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Optional

_FLOAT_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?))"
)

_SIZE_MULTIPLIERS = {
    "": 1,
    "b": 1,
    "bi": 1,
    "bytes": 1,
    "k": 1024,
    "kb": 1024,
    "ki": 1024,
    "kib": 1024,
    "m": 1024 ** 2,
    "mb": 1024 ** 2,
    "mi": 1024 ** 2,
    "mib": 1024 ** 2,
    "g": 1024 ** 3,
    "gb": 1024 ** 3,
    "gi": 1024 ** 3,
    "gib": 1024 ** 3,
}


def is_number(value: Any) -> bool:
    """True for int/float values; bools are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_float(text: str) -> Optional[float]:
    """Parse the leading decimal number in ``text``.

    Returns None when no number prefix is present.
    """
    match = _FLOAT_PREFIX.match(text)
    if match is None:
        return None
    token = match.group(1)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def is_hex(value: Any) -> bool:
    """True iff ``value`` is a ``0x``-prefixed, canonically rendered hex string."""
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    digits = value[2:]
    try:
        parsed = int(digits, 16)
    except ValueError:
        return False
    return format(parsed, "x") == digits


def to_hex(num: Any) -> str:
    """Render an integral number as a lowercase ``0x`` hex string."""
    integral = is_number(num) and (isinstance(num, int) or num.is_integer())
    if not integral:
        raise ValueError(
            "to_hex must be called with an integral numeric value, "
            f"input value [{num}] invalid"
        )
    return f"0x{int(num):x}"


def parse_human_size(text: str) -> int:
    """Convert a human readable size such as ``"10Mb"`` or ``"5 kbps"`` to bytes.

    Multipliers are binary (1024). Unknown suffixes count as bytes.
    """
    cleaned = text.replace("ps", "", 1)
    suffix = re.sub(r"[. 0-9]", "", cleaned).lower()
    number = re.sub(r"[^0-9.]", "", cleaned)
    value = float(number) if number else 0.0
    return int(value * _SIZE_MULTIPLIERS.get(suffix, 1) + 0.5)


def json_to_kv(
    obj: dict[str, Any],
    func: Callable[[str, Any], Any],
    prefix: str = "",
) -> list[Any]:
    """Flatten the numeric leaves of nested JSON into ``func(key, value)`` results.

    Nested keys are joined with ``_``: {"a": {"b": 1}} -> func("a_b", 1).
    The Mongo ``"$numberlong"`` marker is passed through under its own key.
    """
    out: list[Any] = []
    _collect_kv(obj, func, prefix, out)
    return out


def _collect_kv(
    obj: dict[str, Any], func: Callable[[str, Any], Any], prefix: str, out: list[Any]
) -> None:
    for key, value in obj.items():
        if value == "$numberlong":
            out.append(func(key, value))
            continue
        path = f"{prefix}_{key}" if prefix else str(key)
        if is_number(value):
            out.append(func(path, value))
        elif isinstance(value, dict):
            _collect_kv(value, func, path, out)
        elif isinstance(value, list):
            _collect_kv(dict(enumerate(value)), func, path, out)
