"""Pytest configuration for the marsdk test suite."""

import io
import os

# Ensure test environment variables are set before any imports
os.environ.setdefault("MARSDK_READ_STDIN", "false")
os.environ.setdefault("MARSDK_LOG_LEVEL", "debug")

import json

import pytest

from marsdk.protocol import Transport, set_transport


class CapturedTransport(Transport):
    """Transport writing into memory, with helpers to read lines back."""

    def __init__(self, stdin=None):
        super().__init__(stream=io.StringIO(), reader=lambda: stdin)

    @property
    def raw_lines(self) -> list[str]:
        return self.stream.getvalue().splitlines(keepends=True)

    @property
    def lines(self) -> list[dict]:
        return [json.loads(line) for line in self.raw_lines]


@pytest.fixture(autouse=True)
def fresh_transport():
    """Each test gets its own process-wide transport."""
    set_transport(None)
    yield
    set_transport(None)


@pytest.fixture
def transport():
    captured = CapturedTransport()
    set_transport(captured)
    return captured
