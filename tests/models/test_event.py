"""Tests for Event normalization and validation."""

from datetime import datetime

import pytest

from marsdk.constants import Severity
from marsdk.exceptions import InvalidRecordError
from marsdk.models.event import Event

SETTER_FIELDS = [
    "source",
    "check",
    "description",
    "time",
    "utc_offset",
    "dedupe_key",
    "manager",
    "service",
    "alias",
    "tags",
]


@pytest.fixture
def valid_config() -> dict:
    return {
        "severity": "clear",
        "source": "source",
        "check": "check",
        "description": "description",
        "time": 2137891238912,
        "utc_offset": "utc_offset",
        "dedupe_key": "dedupe_key",
        "manager": "manager",
        "service": ["service"],
        "alias": "alias",
        "class": "class",
        "tags": {"mytag": "mytag"},
    }


class TestEventSetters:

    def test_severity_string_lowercased(self):
        assert Event().set_severity("StrIng").severity == "string"

    def test_severity_other_types_pass_through(self):
        event = Event()
        assert event.set_severity(99).severity == 99
        assert event.set_severity(True).severity is True

    def test_severity_enum(self):
        assert Event().set_severity(Severity.MAJOR).severity == "major"

    @pytest.mark.parametrize("field", SETTER_FIELDS)
    def test_setter(self, field):
        event = getattr(Event(), f"set_{field}")("value")
        assert getattr(event, field) == "value"

    @pytest.mark.parametrize("field", SETTER_FIELDS)
    def test_from_dict(self, field):
        assert getattr(Event.from_dict({field: "value"}), field) == "value"

    def test_class_accessor(self):
        assert Event().set_class("Storage").class_ == "Storage"
        assert Event.from_dict({"class": "Network"}).class_ == "Network"

    def test_dedup_key_alias(self):
        assert Event.from_dict({"dedup_key": "dedupe_key"}).dedupe_key == "dedupe_key"

    def test_dedup_key_wins(self):
        event = Event.from_dict({"dedup_key": "alias", "dedupe_key": "canonical"})
        assert event.dedupe_key == "alias"

    def test_from_dict_round_trip(self, valid_config):
        event = Event.from_dict(valid_config)
        for field, value in valid_config.items():
            attr = "class_" if field == "class" else field
            assert getattr(event, attr) == value


class TestEventValidate:

    def test_valid_config(self, valid_config):
        Event.from_dict(valid_config).validate()

    def test_empty_config(self):
        with pytest.raises(InvalidRecordError):
            Event.from_dict({}).validate()

    def test_without_optional_fields(self, valid_config):
        for field in ["time", "utc_offset", "dedupe_key", "manager",
                      "service", "alias", "class", "tags"]:
            del valid_config[field]
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("severity", ["CLEAR", "unknown", "Minor", "warning", "major", "critical"])
    def test_string_severities(self, valid_config, severity):
        valid_config["severity"] = severity
        Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("severity", [0, 1, 2, 3, 4, 5, 3.0])
    def test_numeric_severities(self, valid_config, severity):
        valid_config["severity"] = severity
        Event.from_dict(valid_config).validate()

    def test_severity_unknown_string(self, valid_config):
        valid_config["severity"] = "guava"
        with pytest.raises(InvalidRecordError, match="string `severity`"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("severity", [77, -77, 7.7, 6, -1])
    def test_severity_out_of_range(self, valid_config, severity):
        valid_config["severity"] = severity
        with pytest.raises(InvalidRecordError, match="numeric `severity`"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("severity", [datetime.now(), True, ["minor"]])
    def test_severity_wrong_type(self, valid_config, severity):
        valid_config["severity"] = severity
        with pytest.raises(InvalidRecordError, match="severity"):
            Event.from_dict(valid_config).validate()

    def test_severity_missing(self, valid_config):
        del valid_config["severity"]
        with pytest.raises(InvalidRecordError, match="`severity` must be set"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("field", ["source", "check", "description"])
    @pytest.mark.parametrize("value", [77, False, ""])
    def test_required_strings(self, valid_config, field, value):
        valid_config[field] = value
        with pytest.raises(InvalidRecordError, match=f"`{field}` must be set to a non-empty string"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("value", ["77", False, float("inf"), float("nan")])
    def test_time(self, valid_config, value):
        valid_config["time"] = value
        with pytest.raises(InvalidRecordError, match="time"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("field", ["utc_offset", "dedupe_key", "manager", "alias", "class"])
    @pytest.mark.parametrize("value", [77, False])
    def test_optional_strings(self, valid_config, field, value):
        valid_config[field] = value
        with pytest.raises(InvalidRecordError, match=f"`{field}` must be a string"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("value", [77, [], [False], "service"])
    def test_service(self, valid_config, value):
        valid_config["service"] = value
        with pytest.raises(InvalidRecordError, match="service"):
            Event.from_dict(valid_config).validate()

    @pytest.mark.parametrize("value", [77, False, ["tag"], datetime.now()])
    def test_tags(self, valid_config, value):
        valid_config["tags"] = value
        with pytest.raises(InvalidRecordError, match="tags"):
            Event.from_dict(valid_config).validate()

    def test_validate_twice_does_not_mutate(self, valid_config):
        event = Event.from_dict(valid_config)
        before = dict(vars(event))
        event.validate()
        event.validate()
        assert vars(event) == before


class TestEventWire:

    def test_class_wire_name(self):
        event = (
            Event()
            .set_severity("warning")
            .set_source("test")
            .set_description("test")
            .set_check("test")
            .set_class("class")
        )
        assert event.to_wire() == {
            "severity": "warning",
            "source": "test",
            "check": "test",
            "description": "test",
            "class": "class",
        }

    def test_full_round_trip(self, valid_config):
        assert Event.from_dict(valid_config).to_wire() == valid_config

    def test_declaration_order(self, valid_config):
        shuffled = dict(reversed(list(valid_config.items())))
        assert list(Event.from_dict(shuffled).to_wire()) == list(valid_config)
