"""
PROCWARDEN - Process Abstraction

Provides abstraction layer for ending the process and for reading facts
about it. This allows mocking in tests, where really exiting would end the
test run.
"""

import logging
import os
import sys
import threading
import time
from datetime import datetime
from typing import List, Optional, Protocol

import psutil

from procwarden.infrastructure.logging_setup import flush_logging

logger = logging.getLogger(__name__)


class ProcessExiter(Protocol):
    """Protocol for terminating the current process."""

    def exit(self, code: int) -> None:
        """Terminate with the given exit code."""
        ...


class OsProcessExit:
    """
    Real process exit.

    Uses os._exit so that the process ends immediately, even when called
    from a thread other than the main one and with shutdown workers still
    running.
    """

    def exit(self, code: int) -> None:
        flush_logging()
        for stream in (sys.stdout, sys.stderr):
            try:
                stream.flush()
            except (OSError, ValueError):
                pass
        os._exit(code)


class MockProcessExit:
    """Mock process exit for testing; records codes instead of exiting."""

    def __init__(self):
        self._codes: List[int] = []
        self._exited = threading.Event()
        self.exit_time: Optional[float] = None

    def exit(self, code: int) -> None:
        self._codes.append(code)
        self.exit_time = time.monotonic()
        self._exited.set()

    @property
    def codes(self) -> List[int]:
        return list(self._codes)

    @property
    def exited(self) -> bool:
        return self._exited.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait until exit() has been called."""
        return self._exited.wait(timeout)


def describe_process(argv: Optional[List[str]] = None) -> List[str]:
    """
    Collect startup banner lines about the current process.

    Args:
        argv: Command line to report (defaults to sys.argv)

    Returns:
        Lines with start time, PID, working directory, user and command line
    """
    argv = sys.argv if argv is None else argv
    proc = psutil.Process()

    try:
        started = datetime.fromtimestamp(proc.create_time()).astimezone().isoformat()
    except psutil.Error as e:
        started = f"not available: {e}"

    try:
        cwd = proc.cwd()
    except psutil.Error as e:
        cwd = f"not available: {e}"

    try:
        uids, gids = proc.uids(), proc.gids()
        user = f"{proc.username()} [{uids.real}:{gids.real}]"
    except AttributeError:
        # uids()/gids() only exist on POSIX
        user = _username(proc)
    except (psutil.Error, KeyError) as e:
        user = f"not available: {e}"

    lines = [
        f"  Start Time: {started}",
        f"  Process ID: {proc.pid}",
        f" Working Dir: {cwd}",
        f"        User: {user}",
        f"Command Line: {argv[0] if argv else ''}",
    ]
    for i, arg in enumerate(argv[1:], start=1):
        lines.append(f"              {i:2d}) {arg}")

    return lines


def log_process_info(argv: Optional[List[str]] = None, log: Optional[logging.Logger] = None) -> None:
    """Write the process banner (start time, PID, cwd, user, command line) at INFO level."""
    log = log or logger
    for line in describe_process(argv):
        log.info(line)


def _username(proc: psutil.Process) -> str:
    try:
        return proc.username()
    except (psutil.Error, KeyError) as e:
        return f"not available: {e}"
