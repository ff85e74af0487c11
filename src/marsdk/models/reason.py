"""Reason: why a MAR's discovery came out the way it did."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from marsdk.exceptions import InvalidRecordError
from marsdk.models.base import FrozenRecord, RecordBuilder


class ReasonRecord(FrozenRecord):
    recoverable: bool
    msg: str
    type: str


class Reason(RecordBuilder):
    """Insight into a failed (or partial) discovery.

    ``recoverable`` says whether user intervention (credentials, config,
    installing a command) would let discovery succeed. ``type`` is a
    free-form category such as ``ReasonType.MISSING_CREDENTIALS``.
    """

    wire_fields = (("recoverable", "recoverable"), ("msg", "msg"), ("type", "type"))
    record_model = ReasonRecord

    def __init__(self):
        self.recoverable: Optional[Any] = None
        self.msg: Optional[Any] = None
        self.type: Optional[Any] = None

    def set_recoverable(self, recoverable: bool) -> Reason:
        self.recoverable = recoverable
        return self

    def set_msg(self, msg: str) -> Reason:
        self.msg = msg
        return self

    def set_type(self, type_: Union[str, Enum]) -> Reason:
        self.type = type_.value if isinstance(type_, Enum) else type_
        return self

    def validate(self) -> None:
        if self.recoverable is None:
            raise InvalidRecordError("Field `recoverable` must be set")
        if not isinstance(self.recoverable, bool):
            raise InvalidRecordError("Field `recoverable` must be a boolean")

        for name in ("msg", "type"):
            value = getattr(self, name)
            if value is None or value == "":
                raise InvalidRecordError(f"Field `{name}` must be set to a string")
            if not isinstance(value, str):
                raise InvalidRecordError(f"Field `{name}` must be a string")
