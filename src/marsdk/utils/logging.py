"""Protocol-framed logging for collector processes.

Every log line a collector writes to stdout must be a ``log`` record the
parent process can route: ``{"type": "log", "level": ..., "msg": ...}``.
"""

import logging
import json
import sys
from typing import Callable, Optional

# Levels understood by the parent process.
PROTOCOL_LEVELS = ("debug", "info", "warn", "error")


def to_protocol_level(levelno: int) -> str:
    """Map a stdlib logging level to the nearest protocol level."""
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    return "debug"


def encode_line(payload, default=None) -> str:
    """Serialize one protocol record as compact JSON, without the newline.

    Raises ValueError for NaN or infinite floats, which JSON cannot carry.
    """
    return json.dumps(payload, separators=(",", ":"), default=default, allow_nan=False)


def format_log_line(level: str, msg) -> str:
    """Build a ``log`` line, JSON-encoding non-string messages first."""
    if isinstance(msg, str):
        message = msg
    else:
        try:
            message = encode_line(msg, default=str)
        except ValueError:
            message = str(msg)
    return encode_line({"type": "log", "level": level, "msg": message})


class ProtocolFormatter(logging.Formatter):
    """Emit log records as protocol ``log`` lines."""

    def format(self, record):
        message = record.getMessage()
        if record.exc_info and record.exc_info[0] is not None:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return format_log_line(to_protocol_level(record.levelno), message)


class ProtocolHandler(logging.Handler):
    """Hand formatted lines to ``sink``, or to the current ``sys.stdout``."""

    def __init__(self, sink: Optional[Callable[[str], None]] = None):
        super().__init__()
        self.sink = sink

    def emit(self, record):
        try:
            line = self.format(record)
            if self.sink is not None:
                self.sink(line)
            else:
                sys.stdout.write(line + "\n")
                sys.stdout.flush()
        except Exception:
            self.handleError(record)


def configure_logging(level="debug", name="marsdk", sink=None):
    """Route the ``name`` logger tree to stdout as protocol log lines."""
    handler = ProtocolHandler(sink)
    handler.setFormatter(ProtocolFormatter())
    root = logging.getLogger(name)
    for existing in list(root.handlers):
        if isinstance(existing, ProtocolHandler):
            root.removeHandler(existing)
    root.setLevel(getattr(logging, level.upper(), logging.DEBUG))
    root.addHandler(handler)
    root.propagate = False
    return root
