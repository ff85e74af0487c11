"""Tests for Metric normalization and validation."""

import math

import pytest

from marsdk.constants import MetricType
from marsdk.exceptions import InvalidRecordError
from marsdk.models.bitmask import Bitmask
from marsdk.models.metric import DATA_REQUIRED, Metric, MetricRecord


def _metric(**overrides) -> Metric:
    fields = {"metric": "valid.metric", "source": "localhost", "data": 10}
    fields.update(overrides)
    return Metric.from_dict(fields)


class TestSetData:

    def test_numeric_string(self):
        metric = Metric().set_data("10.05").set_metric("valid.metric").set_source("pytest")
        assert metric.data == 10.05
        metric.validate()

    def test_pi(self):
        assert Metric().set_data("3.14").data == 3.14

    def test_invalid_string(self):
        metric = Metric().set_data("notanumber").set_metric("valid.metric")
        assert metric.data is None
        with pytest.raises(InvalidRecordError) as exc:
            metric.validate()
        assert str(exc.value) == DATA_REQUIRED

    @pytest.mark.parametrize("text,expected", [
        ("42", 42.0),
        ("  -1.5e3", -1500.0),
        ("12.5ms", 12.5),
        (".5", 0.5),
        ("Infinity", math.inf),
    ])
    def test_leading_number_prefix(self, text, expected):
        assert Metric().set_data(text).data == expected

    @pytest.mark.parametrize("text", ["0x1f", "0xff", "0xFF"])
    def test_hex_strings_are_float_parsed(self, text):
        assert Metric().set_data(text).data == 0.0

    def test_non_ascii_digits_do_not_parse(self):
        assert Metric().set_data("\u0663").data is None

    @pytest.mark.parametrize("value", [True, False, 7, 2.5])
    def test_non_strings_untouched(self, value):
        assert Metric().set_data(value).data is value

    def test_bitmask_untouched(self):
        bitmask = Bitmask().add_value("up", True)
        assert Metric().set_data(bitmask).data is bitmask


class TestMetricValidate:

    def test_valid_full_metric(self):
        metric = (
            Metric()
            .set_metric("valid.metric.1")
            .set_source("localhost")
            .set_data(10)
            .set_description("A test metric")
            .set_key("disk1")
            .set_time(1602650044)
            .set_utc_offset("pst")
            .set_unit("mb")
            .set_window(100)
            .counter()
        )
        metric.validate()

    def test_valid_partial_metric(self):
        Metric().set_metric("valid.metric.1").set_source("localhost").set_data(True).validate()

    def test_missing_metric_name(self):
        metric = Metric().set_source("localhost").set_data(True)
        with pytest.raises(InvalidRecordError, match="A string value for field `metric` is required"):
            metric.validate()

    def test_data_checked_before_name(self):
        with pytest.raises(InvalidRecordError, match="field `data`"):
            Metric().validate()

    def test_hex_data(self):
        _metric(data="0x1f").validate()

    def test_nan_rejected(self):
        with pytest.raises(InvalidRecordError, match="field `data`"):
            _metric(data=math.nan).validate()

    @pytest.mark.parametrize("data", [math.inf, -math.inf])
    def test_infinite_data_rejected(self, data):
        with pytest.raises(InvalidRecordError, match="field `data`"):
            _metric(data=data).validate()

    def test_infinite_parsed_data_rejected(self):
        with pytest.raises(InvalidRecordError, match="field `data`"):
            _metric().set_data("Infinity").validate()

    @pytest.mark.parametrize("data", [[1], {"a": 1}, "0x0f"])
    def test_unsupported_data(self, data):
        metric = _metric()
        metric.data = data
        with pytest.raises(InvalidRecordError, match="field `data`"):
            metric.validate()

    def test_bitmask_failure_propagates(self):
        metric = _metric(data=Bitmask().add_value("a", 1))
        with pytest.raises(InvalidRecordError, match="Bitmask `values` must be booleans"):
            metric.validate()

    def test_valid_bitmask(self):
        _metric(data=Bitmask().add_value("a", True)).validate()

    def test_invalid_type(self):
        metric = _metric(data=True).set_type("aldsf")
        with pytest.raises(InvalidRecordError, match=r"`type` must be one of \[`c`, `g`, `counter`, `gauge`\]"):
            metric.validate()

    @pytest.mark.parametrize("type_", ["c", "g", "counter", "gauge", MetricType.GAUGE])
    def test_valid_types(self, type_):
        _metric().set_type(type_).validate()

    @pytest.mark.parametrize("field,value", [
        ("source", 1),
        ("key", 1),
        ("time", "1602650044"),
        ("time", True),
        ("time", math.inf),
        ("description", False),
        ("utc_offset", 0),
        ("unit", 3),
        ("window", "100"),
        ("window", math.nan),
    ])
    def test_optional_field_types(self, field, value):
        metric = _metric()
        setattr(metric, field, value)
        with pytest.raises(InvalidRecordError, match=f"`{field}`"):
            metric.validate()

    def test_first_failing_field_in_declaration_order(self):
        metric = _metric()
        metric.window = "x"
        metric.source = 1
        with pytest.raises(InvalidRecordError, match="`source`"):
            metric.validate()

    def test_validate_twice_does_not_mutate(self):
        metric = _metric(data="12", tags={"a": "b"})
        before = dict(vars(metric))
        metric.validate()
        metric.validate()
        assert vars(metric) == before


class TestMetricFromDict:

    def test_only_present_keys(self):
        metric = Metric.from_dict({"metric": "m", "data": 1})
        assert metric.present_fields() == {"data": 1, "metric": "m"}
        assert metric.source is None

    def test_string_data_goes_through_setter(self):
        assert Metric.from_dict({"data": "2.5"}).data == 2.5

    def test_set_tag_creates_mapping(self):
        metric = Metric().set_tag("env", "prod").set_tag("zone", 3)
        assert metric.tags == {"env": "prod", "zone": 3}


class TestMetricWire:

    def test_declaration_order(self):
        metric = Metric().set_unit("mb").set_source("localhost").set_metric("good").set_data(False)
        assert list(metric.to_wire()) == ["data", "metric", "source", "unit"]

    def test_unset_fields_omitted(self):
        assert _metric().to_wire() == {"data": 10, "metric": "valid.metric", "source": "localhost"}

    def test_bitmask_serialized(self):
        wire = _metric(data=Bitmask().add_value("a", True).add_value("b", False)).to_wire()
        assert wire["data"] == {"keys": ["a", "b"], "values": [True, False]}

    def test_bool_stays_bool(self):
        record = _metric(data=True).build()
        assert isinstance(record, MetricRecord)
        assert record.data is True

    def test_additional_data_json(self):
        wire = _metric(additional_data={"nested": [1, None, "x"]}).to_wire()
        assert wire["additional_data"] == {"nested": [1, None, "x"]}

    def test_unserializable_additional_data(self):
        with pytest.raises(InvalidRecordError, match="could not be frozen"):
            _metric(additional_data={"when": object()}).build()
