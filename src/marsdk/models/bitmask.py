"""Bitmask: named boolean flags carried as a metric datapoint."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from marsdk.exceptions import InvalidRecordError
from marsdk.models.base import FrozenRecord, RecordBuilder


class BitmaskRecord(FrozenRecord):
    """Frozen bitmask: parallel ``keys`` and ``values`` lists."""
    keys: list[str]
    values: list[bool]


class Bitmask(RecordBuilder):
    """Builder for a Bitmask metric value.

    Keys label each bit and need not be unique; order is significant and
    shared with ``values``.
    """

    wire_fields = (("keys", "keys"), ("values", "values"))
    record_model = BitmaskRecord

    def __init__(self):
        self.keys: Optional[list[Any]] = None
        self.values: Optional[list[Any]] = None

    def set_keys(self, keys: list[Any]) -> Bitmask:
        self.keys = keys
        return self

    def set_values(self, values: list[Any]) -> Bitmask:
        self.values = values
        return self

    def add_value(self, key: Any, value: Any) -> Bitmask:
        """Append one key/bit pair."""
        if self.keys is None:
            self.keys = []
        if self.values is None:
            self.values = []
        self.keys.append(key)
        self.values.append(value)
        return self

    @classmethod
    def from_mapping(cls, flags: Mapping[str, Any]) -> Bitmask:
        """Build a Bitmask from an ordered ``{label: bit}`` mapping."""
        bitmask = cls()
        for key, value in flags.items():
            bitmask.add_value(key, value)
        return bitmask

    def validate(self) -> None:
        keys, values = self.keys, self.values
        if not (
            isinstance(keys, list)
            and isinstance(values, list)
            and len(keys) > 0
            and len(keys) == len(values)
        ):
            raise InvalidRecordError(
                "A Bitmask `value` object must contain `keys` and `values` "
                "lists of equal length"
            )
        if any(not isinstance(k, str) for k in keys):
            raise InvalidRecordError("Bitmask `keys` must be strings")
        if any(not isinstance(v, bool) for v in values):
            raise InvalidRecordError("Bitmask `values` must be booleans")
