"""DiscoveryResult: which moobs of a MAR should run."""

from __future__ import annotations

from typing import Any, Optional

from marsdk.exceptions import InvalidRecordError
from marsdk.models.base import FrozenRecord, RecordBuilder
from marsdk.models.reason import Reason, ReasonRecord

_MOOB_RULE = "all moobs must be non-empty strings"


class DiscoveryRecord(FrozenRecord):
    moobs: Optional[list[str]] = None
    reasonDetail: Optional[ReasonRecord] = None
    active: bool


class DiscoveryResult(RecordBuilder):
    """Discovery outcome for a MAR.

    An active result must name at least one moob to run. An inactive one
    usually carries a Reason explaining how to enable it.
    """

    wire_fields = (
        ("moobs", "moobs"),
        ("reason_detail", "reasonDetail"),
        ("active", "active"),
    )
    record_model = DiscoveryRecord

    def __init__(self):
        self.moobs: Optional[list[Any]] = None
        self.reason_detail: Optional[Any] = None
        self.active: Optional[Any] = None

    def set_moob(self, moob: Optional[str]) -> DiscoveryResult:
        """Add a moob; None is ignored."""
        if moob is not None:
            if self.moobs is None:
                self.moobs = []
            self.moobs.append(moob)
        return self

    def set_reason(self, reason: Optional[Reason]) -> DiscoveryResult:
        self.reason_detail = reason
        return self

    def set_active(self, active: bool) -> DiscoveryResult:
        self.active = active
        return self

    def validate(self) -> None:
        if self.active is None:
            raise InvalidRecordError("Field `active` unset but required")
        if not isinstance(self.active, bool):
            raise InvalidRecordError("Field `active` must be a boolean")

        if self.active:
            if not self.moobs:
                raise InvalidRecordError(
                    "No moobs provided for active DiscoveryResult, "
                    "must set at least one moob with `set_moob`"
                )
            for moob in self.moobs:
                if moob is None:
                    raise InvalidRecordError(
                        f"null moob provided for active DiscoveryResult, {_MOOB_RULE}"
                    )
                if not isinstance(moob, str):
                    raise InvalidRecordError(
                        f"non-string moob: {moob!r} for active DiscoveryResult, "
                        f"{_MOOB_RULE}"
                    )
                if not moob:
                    raise InvalidRecordError(
                        f"empty moob provided for active DiscoveryResult, {_MOOB_RULE}"
                    )

        if self.reason_detail is not None:
            if type(self.reason_detail) is not Reason:
                raise InvalidRecordError("reason must be of type `Reason`")
            self.reason_detail.validate()

    def _record_values(self) -> dict[str, Any]:
        values = self.present_fields()
        if self.reason_detail is not None:
            values["reasonDetail"] = self.reason_detail.build()
        return values
