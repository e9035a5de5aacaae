"""
PROCWARDEN - Process Lifecycle Coordinator

Common startup and termination handling for Python programs.

Libraries register work to run at startup (register_startup) and at
termination (register_shutdown). The program calls init() once near the
top of main and shutdown() when done:

    import procwarden

    procwarden.register_startup(lambda: ...)
    procwarden.register_shutdown(lambda: ..., procwarden.TimeAllowance(0.5))

    def main():
        procwarden.init(procwarden.quiet(), procwarden.standard_signals())
        try:
            ...
        finally:
            procwarden.shutdown()

The module-level functions operate on one process-wide Lifecycle, created
on first use.
"""

import threading
from typing import List, Optional

from procwarden.config.options import (
    InitOption,
    add_flag_parsers,
    config_file,
    flag_parser,
    log_dir,
    log_spam,
    pid_file,
    quiet,
    standard_signals,
)
from procwarden.core.errors import ConfigurationError, ProcwardenError, UsageError
from procwarden.core.shutdown import OnAbort, OnShutdown, ShutdownOption, TimeAllowance
from procwarden.core.utils import command_name
from procwarden.lifecycle import Lifecycle

_default: Optional[Lifecycle] = None
_default_lock = threading.Lock()


def get_lifecycle() -> Lifecycle:
    """Return the process-wide Lifecycle, creating it on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Lifecycle()
        return _default


def register_startup(fn) -> bool:
    return get_lifecycle().register_startup(fn)


def register_shutdown(fn, *options: ShutdownOption) -> bool:
    return get_lifecycle().register_shutdown(fn, *options)


def init(*options: InitOption) -> None:
    get_lifecycle().init(*options)


def init_cli() -> None:
    get_lifecycle().init_cli()


def shutdown() -> None:
    get_lifecycle().shutdown()


def abort(message: str = "") -> None:
    get_lifecycle().abort(message)


def shutdown_on(*signals: int) -> None:
    get_lifecycle().shutdown_on(*signals)


def args() -> List[str]:
    return get_lifecycle().args()


def arg(i: int) -> str:
    return get_lifecycle().arg(i)


def arg_default(i: int, default: str) -> str:
    return get_lifecycle().arg_default(i, default)


def arg_list(i: int) -> Optional[List[str]]:
    return get_lifecycle().arg_list(i)


__all__ = [
    "ConfigurationError",
    "InitOption",
    "Lifecycle",
    "OnAbort",
    "OnShutdown",
    "ProcwardenError",
    "ShutdownOption",
    "TimeAllowance",
    "UsageError",
    "abort",
    "add_flag_parsers",
    "arg",
    "arg_default",
    "arg_list",
    "args",
    "command_name",
    "config_file",
    "flag_parser",
    "get_lifecycle",
    "init",
    "init_cli",
    "log_dir",
    "log_spam",
    "pid_file",
    "quiet",
    "register_shutdown",
    "register_startup",
    "shutdown",
    "shutdown_on",
    "standard_signals",
]
