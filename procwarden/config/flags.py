"""
PROCWARDEN - Command Line Flags

Merges the argument parsers contributed by the host program and by
libraries into one parser, adds the standard logging flags and keeps the
positional arguments left over after parsing.
"""

import argparse
import logging
from typing import Any, List, Optional, Sequence, Tuple

from procwarden.config.settings import parse_bool

logger = logging.getLogger(__name__)

LOG_DIR_FLAG = "log_dir"
LOG_FILES_FLAG = "logfiles"
LOG_TO_STDERR_FLAG = "logtostderr"
VERBOSITY_FLAG = "verbosity"


def _standard_parser() -> argparse.ArgumentParser:
    # SUPPRESS defaults: a flag shows up in the namespace only when given
    parser = argparse.ArgumentParser(add_help=False)
    group = parser.add_argument_group("logging")
    group.add_argument(f"--{LOG_DIR_FLAG}", default=argparse.SUPPRESS, help="Directory for log files")
    group.add_argument(
        f"--{LOG_FILES_FLAG}",
        type=parse_bool,
        default=argparse.SUPPRESS,
        metavar="BOOL",
        help="Write log files",
    )
    group.add_argument(
        f"--{LOG_TO_STDERR_FLAG}",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Log to stderr",
    )
    group.add_argument(
        "-v",
        f"--{VERBOSITY_FLAG}",
        type=int,
        default=argparse.SUPPRESS,
        metavar="LEVEL",
        help="Verbosity level (1 or more enables debug logging)",
    )
    return parser


class FlagsGroup:
    """
    Group of argument parsers parsed together as one command line.

    The primary parser supplies prog and description; any additional
    parsers contribute their arguments as parents.
    """

    def __init__(self):
        self._primary: Optional[argparse.ArgumentParser] = None
        self._extra: List[argparse.ArgumentParser] = []
        self._own = argparse.ArgumentParser(add_help=False)
        self._namespace: Optional[argparse.Namespace] = None
        self._args: List[str] = []

    def set_primary(self, parser: argparse.ArgumentParser) -> None:
        self._primary = parser

    def add_parser(self, parser: argparse.ArgumentParser) -> None:
        self._extra.append(parser)

    def add_flag(self, *names: str, **kwargs: Any) -> None:
        """Add a flag owned by the library itself (e.g. --pidfile)."""
        kwargs.setdefault("default", argparse.SUPPRESS)
        self._own.add_argument(*names, **kwargs)

    def build(self, prog: Optional[str] = None) -> argparse.ArgumentParser:
        """
        Build the merged parser.

        Args:
            prog: Program name when no primary parser is set
        """
        parents = [p for p in (self._primary, *self._extra) if p is not None]
        parents += [self._own, _standard_parser()]

        return argparse.ArgumentParser(
            prog=self._primary.prog if self._primary else prog,
            description=self._primary.description if self._primary else None,
            parents=parents,
            conflict_handler="resolve",
        )

    def parse(self, argv: Sequence[str], prog: Optional[str] = None) -> argparse.Namespace:
        """
        Parse a command line.

        Unknown options are an error (argparse exits with status 2); other
        leftovers become the positional arguments.

        Args:
            argv: Arguments without the program name
            prog: Program name for usage messages
        """
        parser = self.build(prog)
        namespace, rest = parser.parse_known_args(list(argv))

        unknown = [a for a in rest if a.startswith("-") and a != "-"]
        if unknown:
            parser.error(f"unrecognized arguments: {' '.join(unknown)}")

        self._namespace = namespace
        self._args = rest
        logger.debug(f"Parsed flags: {vars(namespace)} args: {rest}")
        return namespace

    @property
    def parsed(self) -> bool:
        return self._namespace is not None

    @property
    def namespace(self) -> argparse.Namespace:
        return self._namespace if self._namespace is not None else argparse.Namespace()

    def lookup(self, name: str) -> Tuple[Any, bool]:
        """
        Look up a flag value.

        Returns:
            (value, True) if the flag was given on the command line,
            (None, False) otherwise
        """
        if self._namespace is not None and hasattr(self._namespace, name):
            return getattr(self._namespace, name), True
        return None, False

    # Positional argument helpers

    def args(self) -> List[str]:
        return list(self._args)

    def arg(self, i: int) -> str:
        """Positional argument i, or "" when there is none."""
        if 0 <= i < len(self._args):
            return self._args[i]
        return ""

    def arg_default(self, i: int, default: str) -> str:
        value = self.arg(i)
        return value if value else default

    def arg_list(self, i: int) -> Optional[List[str]]:
        """Positional arguments from index i on, or None when fewer than i exist."""
        if len(self._args) >= i:
            return self._args[i:]
        return None
