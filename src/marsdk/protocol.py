"""Line protocol between a collector and its parent process.

The parent writes one JSON document to the collector's stdin::

    {"config": {...}, "credentials": {...}}

The collector answers on stdout with one JSON object per line, each
tagged by ``type``: ``log``, ``config``, ``result``, ``discovery``,
``metrics`` or ``events``. Records are validated before they are
written; invalid ones are dropped with a diagnostic ``log`` line.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from typing import Any, Callable, Optional, TextIO

from pydantic import BaseModel

from marsdk.config import settings
from marsdk.exceptions import InvalidRecordError
from marsdk.models.base import RecordBuilder
from marsdk.models.discovery import DiscoveryResult
from marsdk.models.event import Event
from marsdk.models.metric import Metric
from marsdk.utils.logging import configure_logging, encode_line, format_log_line
from marsdk.utils.process import get_mar_dir

logger = logging.getLogger("marsdk.protocol")

Reader = Callable[[], Optional[str]]

STDIN_PARSE_WARNING = "Unable to parse collector config via stdin"


def read_stdin() -> Optional[str]:
    """Read all of stdin, or None when no input is attached."""
    stdin = sys.stdin
    if not settings.read_stdin or stdin is None or stdin.closed:
        return None
    try:
        if stdin.isatty():
            return None
        return stdin.read()
    except (OSError, ValueError) as exc:
        logger.debug("stdin is not readable: %s", exc)
        return None


def json_parse(value: Any) -> Any:
    """Parse ``value`` if it is a JSON string, otherwise return it untouched."""
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _encode_default(value: Any) -> Any:
    if isinstance(value, RecordBuilder):
        return value.to_wire()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class CollectorInput:
    """Config and credentials injected on stdin, read once per process.

    The first call to ``config()`` or ``credentials()`` reads and parses all
    of stdin; every later call is served from the cached result. Concurrent
    first callers share a single read.
    """

    def __init__(
        self,
        reader: Optional[Reader] = None,
        warn: Optional[Callable[[str], None]] = None,
    ):
        self._reader = reader or read_stdin
        self._warn = warn or logger.warning
        self._lock = threading.Lock()
        self._loaded = False
        self._payload: dict[str, Any] = {}

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> dict[str, Any]:
        """Return the parsed stdin document, reading it on first use."""
        if not self._loaded:
            with self._lock:
                if not self._loaded:
                    self._payload = self._read()
                    self._loaded = True
        return self._payload

    def _read(self) -> dict[str, Any]:
        raw = self._reader()
        if raw is None:
            return {}
        try:
            payload = json.loads(raw)
        except ValueError:
            self._warn(STDIN_PARSE_WARNING)
            return {}
        if not isinstance(payload, dict):
            self._warn(STDIN_PARSE_WARNING)
            return {}
        return payload

    def section(self, name: str) -> dict[str, Any]:
        value = self.load().get(name)
        return value if isinstance(value, dict) else {}

    def config(self) -> dict[str, Any]:
        return self.section("config")

    def credentials(self) -> dict[str, Any]:
        return self.section("credentials")

    def reset(self) -> None:
        """Forget the cached input so the next access reads again."""
        with self._lock:
            self._loaded = False
            self._payload = {}


class Transport:
    """Writes protocol lines for one collector process.

    ``stream`` defaults to whatever ``sys.stdout`` is at write time.
    ``reader`` replaces the stdin read, mainly for tests.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        reader: Optional[Reader] = None,
    ):
        self._stream = stream
        self.collector_input = CollectorInput(reader, warn=self.warn)

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, line: str) -> None:
        stream = self.stream
        stream.write(line + "\n")
        stream.flush()

    def write(self, payload: dict[str, Any]) -> None:
        self.write_line(encode_line(payload, default=_encode_default))

    def _write_value(self, kind: str, value: Any) -> None:
        try:
            self.write({"type": kind, "value": value})
        except ValueError as exc:
            self.debug(f"Received {kind} that cannot be encoded - {exc}, skipping")

    # Logging

    def log(self, level: str, msg: Any) -> None:
        """Emit a ``log`` line; non-string messages are JSON-encoded first."""
        self.write_line(format_log_line(level, msg))

    def debug(self, msg: Any) -> None:
        self.log("debug", msg)

    def info(self, msg: Any) -> None:
        self.log("info", msg)

    def warn(self, msg: Any) -> None:
        self.log("warn", msg)

    def error(self, msg: Any) -> None:
        self.log("error", msg)

    # Collector input

    def get_config(self, name: Optional[str] = None) -> Any:
        """Collector config from stdin.

        When stdin carried no config and ``name`` is given, falls back to
        ``<config dir>/<name>.conf`` next to the collector script.
        """
        config = self.collector_input.config()
        if config or name is None:
            return config
        return self._read_config_file(name)

    def get_credentials(self) -> dict[str, Any]:
        return self.collector_input.credentials()

    def _read_config_file(self, name: str) -> Any:
        path = os.path.join(
            settings.resolve_config_dir(get_mar_dir()), f"{name}.conf"
        )
        try:
            with open(path, encoding="utf-8") as fh:
                content = fh.read()
        except OSError as exc:
            self.debug(f"No config file at {path}: {exc}")
            return {}
        return json_parse(content)

    # Senders

    def export_config(self, conf: Any) -> None:
        """Hand config back to the parent, which persists it after the run."""
        if conf is None:
            self.debug("Received null conf, skipping")
            return
        self._write_value("config", json_parse(conf))

    def send_result(self, datum: Any) -> None:
        if datum is None:
            self.debug("Received null datum, skipping")
            return
        self._write_value("result", json_parse(datum))

    def send_discovery(self, discovery: Any) -> None:
        """Send one DiscoveryResult; anything invalid drops the whole send."""
        if discovery is None:
            self.debug("Received null discovery result")
            return
        if type(discovery) is not DiscoveryResult:
            self.error(
                "Received invalid data in `send_discovery`, value must be a "
                f"`DiscoveryResult` but received: {type(discovery).__name__}"
            )
            return
        try:
            value = discovery.to_wire()
        except InvalidRecordError as exc:
            self.error(f"Received malformed Discovery Result - {exc}, cannot send")
            return
        self.write({"type": "discovery", "value": value})

    def send_metrics(self, metrics: Any) -> None:
        """Send a Metric or a batch of them.

        Invalid elements are dropped one by one. Nothing is written when no
        metric survives. Per-metric tags are not sent.
        """
        if metrics is None:
            self.debug("Received null metrics, skipping")
            return
        value = []
        for metric in _as_list(json_parse(metrics)):
            if not isinstance(metric, Metric):
                self.debug("Received element that was not a `Metric`, skipping it")
                continue
            try:
                wire = metric.to_wire()
            except InvalidRecordError as exc:
                self.debug(f"Received malformed metric - {exc}, skipping")
                continue
            wire.pop("tags", None)
            value.append(wire)
        if value:
            self.write({"type": "metrics", "value": value})

    def send_events(self, events: Any) -> None:
        """Send an Event or a batch of them.

        Invalid elements are dropped one by one. Unlike metrics, the
        ``events`` line is written even when the batch ends up empty.
        """
        if events is None:
            self.debug("Received null events, skipping")
            return
        value = []
        for event in _as_list(json_parse(events)):
            if not isinstance(event, Event):
                self.debug("Received element that was not an `Event`, skipping it")
                continue
            try:
                value.append(event.to_wire())
            except InvalidRecordError as exc:
                self.debug(f"Received malformed event - {exc}, skipping")
        self.write({"type": "events", "value": value})


_transport: Optional[Transport] = None
_transport_lock = threading.Lock()


def get_transport() -> Transport:
    """Process-wide transport used by the module-level helpers."""
    global _transport
    if _transport is None:
        with _transport_lock:
            if _transport is None:
                _transport = Transport()
    return _transport


def set_transport(transport: Optional[Transport]) -> None:
    """Replace the process-wide transport; None restores a fresh default."""
    global _transport
    with _transport_lock:
        _transport = transport


def log(level: str, msg: Any) -> None:
    get_transport().log(level, msg)


def debug(msg: Any) -> None:
    get_transport().debug(msg)


def info(msg: Any) -> None:
    get_transport().info(msg)


def warn(msg: Any) -> None:
    get_transport().warn(msg)


def error(msg: Any) -> None:
    get_transport().error(msg)


def get_config(name: Optional[str] = None) -> Any:
    return get_transport().get_config(name)


def get_credentials() -> dict[str, Any]:
    return get_transport().get_credentials()


def export_config(conf: Any) -> None:
    get_transport().export_config(conf)


def send_result(datum: Any) -> None:
    get_transport().send_result(datum)


def send_discovery(discovery: Any) -> None:
    get_transport().send_discovery(discovery)


def send_metrics(metrics: Any) -> None:
    get_transport().send_metrics(metrics)


def send_events(events: Any) -> None:
    get_transport().send_events(events)


configure_logging(settings.log_level, sink=lambda line: get_transport().write_line(line))
