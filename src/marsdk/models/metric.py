"""Metric: one timeseries datapoint produced by a MAR.

The datapoint (``data``) is a number, a boolean, a canonical hex string
such as ``"0x1f"``, or a Bitmask. Every string passed to ``set_data`` is
parsed as a float, so ``Metric().set_data("10.5").data == 10.5``, a hex
string parses to 0.0, and an unparseable string leaves ``data`` as None,
which validation then rejects. Hex data is assigned to ``data`` directly.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import JsonValue, StrictBool, StrictFloat, StrictInt, StrictStr

from marsdk.constants import METRIC_TYPES, MetricType
from marsdk.exceptions import InvalidRecordError
from marsdk.models.base import FrozenRecord, RecordBuilder
from marsdk.models.bitmask import Bitmask, BitmaskRecord
from marsdk.utils.numeric import is_hex, is_number, parse_float

Number = Union[StrictInt, StrictFloat]

DATA_REQUIRED = (
    "A Bitmask, Number, Hex String, or Boolean value for field `data` is required"
)

class MetricRecord(FrozenRecord):
    data: Union[BitmaskRecord, StrictBool, StrictInt, StrictFloat, StrictStr]
    metric: str
    source: Optional[str] = None
    key: Optional[str] = None
    time: Optional[Number] = None
    description: Optional[str] = None
    utc_offset: Optional[str] = None
    additional_data: JsonValue = None
    tags: Optional[dict[str, JsonValue]] = None
    type: Optional[str] = None
    unit: Optional[str] = None
    window: Optional[Number] = None


class Metric(RecordBuilder):
    """Builder for a metric datapoint.

    Only ``data`` and ``metric`` are required. ``time`` defaults to now
    and ``utc_offset`` to the local zone on the platform side when unset.
    ``window`` is the anti-datalake aggregation window for this series.
    """

    wire_fields = (
        ("data", "data"),
        ("metric", "metric"),
        ("source", "source"),
        ("key", "key"),
        ("time", "time"),
        ("description", "description"),
        ("utc_offset", "utc_offset"),
        ("additional_data", "additional_data"),
        ("tags", "tags"),
        ("type", "type"),
        ("unit", "unit"),
        ("window", "window"),
    )
    record_model = MetricRecord

    def __init__(self):
        self.data: Optional[Any] = None
        self.metric: Optional[Any] = None
        self.source: Optional[Any] = None
        self.key: Optional[Any] = None
        self.time: Optional[Any] = None
        self.description: Optional[Any] = None
        self.utc_offset: Optional[Any] = None
        self.additional_data: Optional[Any] = None
        self.tags: Optional[dict[str, Any]] = None
        self.type: Optional[Any] = None
        self.unit: Optional[Any] = None
        self.window: Optional[Any] = None

    def set_data(self, data: Any) -> Metric:
        """Set the datapoint, parsing any string to a float (None if unparseable)."""
        if isinstance(data, str):
            data = parse_float(data)
        self.data = data
        return self

    def set_metric(self, metric: str) -> Metric:
        self.metric = metric
        return self

    def set_source(self, source: str) -> Metric:
        self.source = source
        return self

    def set_key(self, key: str) -> Metric:
        """Sub-key of the series, e.g. the core for a ``cpu`` metric."""
        self.key = key
        return self

    def set_time(self, time: Union[int, float]) -> Metric:
        self.time = time
        return self

    def set_description(self, description: str) -> Metric:
        self.description = description
        return self

    def set_utc_offset(self, utc_offset: str) -> Metric:
        self.utc_offset = utc_offset
        return self

    def set_additional_data(self, additional_data: Any) -> Metric:
        self.additional_data = additional_data
        return self

    def set_tags(self, tags: dict[str, Any]) -> Metric:
        self.tags = tags
        return self

    def set_tag(self, key: str, value: Any) -> Metric:
        if self.tags is None:
            self.tags = {}
        self.tags[key] = value
        return self

    def set_type(self, type_: Union[str, MetricType]) -> Metric:
        self.type = type_.value if isinstance(type_, Enum) else type_
        return self

    def set_unit(self, unit: str) -> Metric:
        self.unit = unit
        return self

    def set_window(self, window: Union[int, float]) -> Metric:
        self.window = window
        return self

    def counter(self) -> Metric:
        return self.set_type(MetricType.COUNTER)

    def gauge(self) -> Metric:
        return self.set_type(MetricType.GAUGE)

    @classmethod
    def from_dict(cls, source: Mapping[str, Any]) -> Metric:
        """Build a Metric from the keys present in ``source``."""
        return cls._apply(source, {
            attr: f"set_{attr}" for attr, _ in cls.wire_fields
        })

    def validate(self) -> None:
        data = self.data
        if isinstance(data, Bitmask):
            data.validate()
        elif not _is_valid_datapoint(data):
            raise InvalidRecordError(DATA_REQUIRED)

        if not isinstance(self.metric, str):
            raise InvalidRecordError("A string value for field `metric` is required")

        for name in ("source", "key"):
            _check_optional_string(self, name)
        if self.time is not None and not _is_finite_number(self.time):
            raise InvalidRecordError("`time` must be a number")
        for name in ("description", "utc_offset"):
            _check_optional_string(self, name)
        if self.type is not None and self.type not in METRIC_TYPES:
            raise InvalidRecordError(
                "`type` must be one of [`c`, `g`, `counter`, `gauge`]"
            )
        _check_optional_string(self, "unit")
        if self.window is not None and not _is_finite_number(self.window):
            raise InvalidRecordError("`window` must be a number")

    def _record_values(self) -> dict[str, Any]:
        values = self.present_fields()
        if isinstance(self.data, Bitmask):
            values["data"] = self.data.build()
        return values


def _is_valid_datapoint(data: Any) -> bool:
    if isinstance(data, bool):
        return True
    if is_number(data):
        return math.isfinite(data)
    return is_hex(data)


def _is_finite_number(value: Any) -> bool:
    return is_number(value) and math.isfinite(value)


def _check_optional_string(metric: Metric, name: str) -> None:
    value = getattr(metric, name)
    if value is not None and not isinstance(value, str):
        raise InvalidRecordError(f"`{name}` must be a string")
