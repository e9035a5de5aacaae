"""
PROCWARDEN - Termination Actions

Defines the unit of cleanup work run on shutdown or abort, and the closed
set of options that may be given when registering one.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from procwarden.core.types import TerminationMode
from procwarden.core.utils import func_id

DEFAULT_ALLOWANCE = 0.1  # seconds

ShutdownFunc = Callable[[], None]


@dataclass
class TerminationAction:
    """A registered unit of cleanup work."""

    callback: ShutdownFunc
    allowance: float = DEFAULT_ALLOWANCE
    on_shutdown: bool = True
    on_abort: bool = True
    name: str = ""

    def applies_to(self, mode: TerminationMode) -> bool:
        """
        Check whether this action runs for the given termination mode.

        Args:
            mode: Requested termination mode

        Returns:
            True if the action is in scope for that mode
        """
        if mode is TerminationMode.SHUTDOWN:
            return self.on_shutdown
        return self.on_abort


class ShutdownOption:
    """Base class for registration options. See OnShutdown, OnAbort, TimeAllowance."""

    def apply(self, builder: "TerminationActionBuilder") -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class OnShutdown(ShutdownOption):
    """Run the action on a clean shutdown (and not on abort, unless OnAbort is also given)."""

    def apply(self, builder: "TerminationActionBuilder") -> None:
        builder.on_shutdown = True


@dataclass(frozen=True)
class OnAbort(ShutdownOption):
    """Run the action on abort (and not on shutdown, unless OnShutdown is also given)."""

    def apply(self, builder: "TerminationActionBuilder") -> None:
        builder.on_abort = True


@dataclass(frozen=True)
class TimeAllowance(ShutdownOption):
    """Replace the default 100ms allowance for the action."""

    seconds: float

    def __post_init__(self):
        if self.seconds < 0:
            raise ValueError(f"time allowance must not be negative: {self.seconds}")

    def apply(self, builder: "TerminationActionBuilder") -> None:
        builder.allowance = self.seconds


class TerminationActionBuilder:
    """
    Collects registration options for a single callback.

    Scope flags start unset; if no option sets either one, the built
    action applies to both shutdown and abort.
    """

    def __init__(self, callback: ShutdownFunc):
        if not callable(callback):
            raise TypeError(f"shutdown callback must be callable, got {type(callback).__name__}")
        self.callback = callback
        self.allowance = DEFAULT_ALLOWANCE
        self.on_shutdown = False
        self.on_abort = False

    def apply(self, options: Iterable[ShutdownOption]) -> "TerminationActionBuilder":
        for option in options:
            if not isinstance(option, ShutdownOption):
                raise TypeError(f"not a shutdown option: {option!r}")
            option.apply(self)
        return self

    def build(self, name: Optional[str] = None) -> TerminationAction:
        on_shutdown, on_abort = self.on_shutdown, self.on_abort
        if not on_shutdown and not on_abort:
            on_shutdown = on_abort = True

        return TerminationAction(
            callback=self.callback,
            allowance=self.allowance,
            on_shutdown=on_shutdown,
            on_abort=on_abort,
            name=name or func_id(self.callback),
        )


def build_action(callback: ShutdownFunc, *options: ShutdownOption) -> TerminationAction:
    """Build a TerminationAction from a callback and registration options."""
    return TerminationActionBuilder(callback).apply(options).build()
