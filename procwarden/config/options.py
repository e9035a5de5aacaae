"""
PROCWARDEN - Init Options

Options that alter the behavior of init().

Each option may carry two hooks: an `init` hook that runs before the
command line is parsed (the place to add flags) and a `setup` hook that
runs after parsing (the place to read them).
"""

import argparse
from dataclasses import dataclass
from typing import Callable, Optional

from procwarden.config.flags import FlagsGroup
from procwarden.config.settings import InitConfig

PIDFILE_FLAG = "pidfile"


@dataclass
class InitContext:
    """State shared between init options while init() runs."""

    config: InitConfig
    flags: FlagsGroup
    config_file: Optional[str] = None


ConfigHook = Callable[[InitContext], None]


@dataclass(frozen=True)
class InitOption:
    """An option for init(). Build these with the factory functions below."""

    init: Optional[ConfigHook] = None  # Before flag parsing
    setup: Optional[ConfigHook] = None  # After flag parsing


def flag_parser(parser: argparse.ArgumentParser) -> InitOption:
    """Make parser the primary parser of the program's flags group."""
    return InitOption(init=lambda ctx: ctx.flags.set_primary(parser))


def add_flag_parsers(*parsers: argparse.ArgumentParser) -> InitOption:
    """
    Add parsers whose arguments are merged into the program's command line.

    Useful for libraries and frameworks that define their own flags.
    """

    def _add(ctx: InitContext) -> None:
        for parser in parsers:
            ctx.flags.add_parser(parser)

    return InitOption(init=_add)


def log_spam(spam: bool) -> InitOption:
    """Enable or disable the process banner at the top of the log."""

    def _set(ctx: InitContext) -> None:
        ctx.config.log_spam = spam

    return InitOption(setup=_set)


def log_dir(path: str) -> InitOption:
    """Set the log directory (a --log_dir flag still takes precedence)."""

    def _set(ctx: InitContext) -> None:
        ctx.config.log_dir = path

    return InitOption(setup=_set)


def quiet() -> InitOption:
    """Disable logging altogether."""

    def _set(ctx: InitContext) -> None:
        ctx.config.log_spam = False
        ctx.config.log_files = False

    return InitOption(setup=_set)


def standard_signals() -> InitOption:
    """
    Shut down on SIGHUP, SIGINT or SIGTERM.

    For finer control see register_shutdown and shutdown_on.
    """

    def _set(ctx: InitContext) -> None:
        ctx.config.standard_signals = True

    return InitOption(setup=_set)


def pid_file(default: str) -> InitOption:
    """
    Write the process ID to a file, removing it again on shutdown.

    Also adds a --pidfile flag so the path can be changed on invocation.
    """

    def _add_flag(ctx: InitContext) -> None:
        ctx.flags.add_flag(f"--{PIDFILE_FLAG}", metavar="PATH", help=f"Path to file where PID is written (default: {default})")

    def _set(ctx: InitContext) -> None:
        value, given = ctx.flags.lookup(PIDFILE_FLAG)
        ctx.config.pidfile = value if given else default

    return InitOption(init=_add_flag, setup=_set)


def config_file(path: str) -> InitOption:
    """Load InitConfig values from a YAML or JSON file."""

    def _set(ctx: InitContext) -> None:
        ctx.config_file = path

    return InitOption(init=_set)
