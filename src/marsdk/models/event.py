"""Event: a single alert-worthy occurrence sent upstream by a MAR.

Events are deduplicated into incidents upstream, keyed on ``dedupe_key``
when one is given.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Union

from pydantic import Field, JsonValue, StrictFloat, StrictInt

from marsdk.constants import MAX_NUMERIC_SEVERITY, SEVERITIES, Severity
from marsdk.exceptions import InvalidRecordError
from marsdk.models.base import FrozenRecord, RecordBuilder
from marsdk.utils.numeric import is_number

Number = Union[StrictInt, StrictFloat]


class EventRecord(FrozenRecord):
    severity: Union[StrictInt, StrictFloat, str]
    source: str
    check: str
    description: str
    time: Optional[Number] = None
    utc_offset: Optional[str] = None
    dedupe_key: Optional[str] = None
    manager: Optional[str] = None
    service: Optional[list[str]] = None
    alias: Optional[str] = None
    class_: Optional[str] = Field(default=None, alias="class")
    tags: Optional[dict[str, JsonValue]] = None


class Event(RecordBuilder):
    """Builder for an event.

    ``severity`` is either an integer 0-5 or one of ``clear``, ``unknown``,
    ``minor``, ``warning``, ``major``, ``critical`` (any case).
    ``check`` names what failed, e.g. ``"cpu load"``, and ``class_``
    categorizes the event (Storage, Network, ...). The wire field for
    ``class_`` is ``class``.
    """

    wire_fields = (
        ("severity", "severity"),
        ("source", "source"),
        ("check", "check"),
        ("description", "description"),
        ("time", "time"),
        ("utc_offset", "utc_offset"),
        ("dedupe_key", "dedupe_key"),
        ("manager", "manager"),
        ("service", "service"),
        ("alias", "alias"),
        ("class_", "class"),
        ("tags", "tags"),
    )
    record_model = EventRecord

    def __init__(self):
        self.severity: Optional[Any] = None
        self.source: Optional[Any] = None
        self.check: Optional[Any] = None
        self.description: Optional[Any] = None
        self.time: Optional[Any] = None
        self.utc_offset: Optional[Any] = None
        self.dedupe_key: Optional[Any] = None
        self.manager: Optional[Any] = None
        self.service: Optional[Any] = None
        self.alias: Optional[Any] = None
        self.class_: Optional[Any] = None
        self.tags: Optional[Any] = None

    def set_severity(self, severity: Union[str, int, Severity]) -> Event:
        """Set the severity, lower-casing strings. Range checks wait for validate()."""
        if isinstance(severity, str):
            severity = severity.lower()
        self.severity = severity
        return self

    def set_source(self, source: str) -> Event:
        self.source = source
        return self

    def set_check(self, check: str) -> Event:
        self.check = check
        return self

    def set_description(self, description: str) -> Event:
        self.description = description
        return self

    def set_time(self, time: Union[int, float]) -> Event:
        self.time = time
        return self

    def set_utc_offset(self, utc_offset: str) -> Event:
        """UTC offset of the event, such as ``-01:00``."""
        self.utc_offset = utc_offset
        return self

    def set_dedupe_key(self, dedupe_key: str) -> Event:
        self.dedupe_key = dedupe_key
        return self

    def set_manager(self, manager: str) -> Event:
        self.manager = manager
        return self

    def set_service(self, service: list[str]) -> Event:
        """Services impacted by this event."""
        self.service = service
        return self

    def set_alias(self, alias: str) -> Event:
        self.alias = alias
        return self

    def set_class(self, class_: str) -> Event:
        self.class_ = class_
        return self

    def set_tags(self, tags: dict[str, Any]) -> Event:
        self.tags = tags
        return self

    @classmethod
    def from_dict(cls, source: Mapping[str, Any]) -> Event:
        """Build an Event from the keys present in ``source``.

        ``dedup_key`` is accepted as an alias of ``dedupe_key`` and wins
        when both are given.
        """
        setters = {wire: f"set_{wire}" for _, wire in cls.wire_fields}
        setters["dedup_key"] = "set_dedupe_key"
        return cls._apply(source, setters)

    def validate(self) -> None:
        self._validate_severity()

        for name in ("source", "check", "description"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise InvalidRecordError(f"`{name}` must be set to a non-empty string")

        finite_time = is_number(self.time) and math.isfinite(self.time)
        if self.time is not None and not finite_time:
            raise InvalidRecordError("`time` must be a number")

        for name in ("utc_offset", "dedupe_key", "manager"):
            _check_optional_string(getattr(self, name), name)

        if self.service is not None and not (
            isinstance(self.service, list)
            and self.service
            and all(isinstance(s, str) for s in self.service)
        ):
            raise InvalidRecordError("`service` must be a non-empty list of strings")

        _check_optional_string(self.alias, "alias")
        _check_optional_string(self.class_, "class")

        if self.tags is not None and not isinstance(self.tags, dict):
            raise InvalidRecordError("`tags` must be a JSON object")

    def _validate_severity(self) -> None:
        severity = self.severity
        if severity is None:
            raise InvalidRecordError(
                f"`severity` must be set to one of [{','.join(SEVERITIES)}] "
                f"or an integer between 0 and {MAX_NUMERIC_SEVERITY}"
            )
        if isinstance(severity, str):
            if severity not in SEVERITIES:
                raise InvalidRecordError(
                    f"string `severity` must be set to one of [{','.join(SEVERITIES)}]"
                )
        elif is_number(severity):
            integral = isinstance(severity, int) or severity.is_integer()
            if not integral or not 0 <= severity <= MAX_NUMERIC_SEVERITY:
                raise InvalidRecordError(
                    "numeric `severity` must be an integer between 0 and "
                    f"{MAX_NUMERIC_SEVERITY}"
                )
        else:
            raise InvalidRecordError("`severity` must be a string or a number")


def _check_optional_string(value: Any, name: str) -> None:
    if value is not None and not isinstance(value, str):
        raise InvalidRecordError(f"`{name}` must be a string")
