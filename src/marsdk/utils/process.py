"""Process and command helpers for collectors.

Thin wrappers around ``subprocess`` that answer the usual discovery
questions: is a command installed, is a process running, what did a
command print.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

logger = logging.getLogger("marsdk.process")

IS_WINDOWS = sys.platform.startswith("win")
IS_LINUX = sys.platform.startswith("linux")
IS_MACOS = sys.platform == "darwin"


@dataclass
class CommandResult:
    """Outcome of a finished command."""
    exit_status: Optional[int]
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0


def has_command(name: str) -> bool:
    """True if ``name`` is an executable path or resolvable on PATH."""
    if os.path.exists(name):
        return os.access(name, os.X_OK)
    return shutil.which(name) is not None


def is_process_running(name: str) -> bool:
    """True if a process called ``name`` is currently running."""
    if IS_WINDOWS:
        image = f"{name.replace('.exe', '')}.exe"
        command = f'TASKLIST /FI "STATUS eq RUNNING" | FIND "{image}"'
    else:
        command = f"pgrep {name}"
    try:
        completed = subprocess.run(
            command, shell=True, capture_output=True, check=False,
        )
    except OSError as exc:
        logger.debug("Process lookup for %s failed: %s", name, exc)
        return False
    return completed.returncode == 0


def run_command(cmd: str, args: Sequence[str] = ()) -> CommandResult:
    """Run ``cmd`` with ``args`` through the shell and capture its output."""
    command_line = " ".join([cmd, *args])
    completed = subprocess.run(
        command_line, shell=True, capture_output=True, text=True, check=False,
    )
    return CommandResult(
        exit_status=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )


def register_scheduled(func: Callable[[], object]) -> None:
    """Run ``func`` and exit if the first CLI argument names it.

    Lets one collector script expose several entry points on different
    schedules. The matched argument is removed from ``sys.argv`` first.
    """
    if len(sys.argv) > 1 and sys.argv[1] == func.__name__:
        del sys.argv[1]
        func()
        sys.exit(0)


def get_mar_dir() -> str:
    """Directory the running collector script lives in."""
    return os.path.dirname(os.path.abspath(sys.argv[0]))
