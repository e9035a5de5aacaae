"""
PROCWARDEN - Action Registry

Holds the startup and termination actions registered by participating
subsystems, plus the one-shot flags that close each list.
"""

import logging
import threading
from typing import Callable, List

from procwarden.core.errors import UsageError
from procwarden.core.shutdown import ShutdownFunc, ShutdownOption, build_action, TerminationAction
from procwarden.core.utils import func_id

logger = logging.getLogger(__name__)

StartupFunc = Callable[[], None]


class ActionRegistry:
    """
    Registry for startup and termination actions.

    Both lists are append-only and keep registration order. A single lock
    guards the lists and the started/finalized flags, so a registration and
    a finalization check never interleave. The lock is never held while
    actions run.
    """

    def __init__(self):
        self._startup: List[StartupFunc] = []
        self._termination: List[TerminationAction] = []
        self._started = False
        self._finalized = False
        self._lock = threading.Lock()

    def register_startup(self, action: StartupFunc) -> bool:
        """
        Register a function to run at startup.

        Args:
            action: Zero-argument callable

        Returns:
            True if registered, False if startup already ran
        """
        with self._lock:
            if self._started:
                logger.error(f"Startup function {func_id(action)} not registered after startup has run")
                return False
            self._startup.append(action)

        logger.debug(f"Registered startup function: {func_id(action)}")
        return True

    def register_termination(self, callback: ShutdownFunc, *options: ShutdownOption) -> bool:
        """
        Register a function to run at shutdown and/or abort.

        Args:
            callback: Zero-argument callable
            *options: OnShutdown, OnAbort and/or TimeAllowance

        Returns:
            True if registered, False if termination has already begun
        """
        action = build_action(callback, *options)

        with self._lock:
            if self._finalized:
                logger.error(f"Cannot register shutdown function {action.name} after shutdown has begun")
                return False
            self._termination.append(action)

        logger.debug(
            f"Registered shutdown function: {action.name} "
            f"(allowance={action.allowance:.3f}s, shutdown={action.on_shutdown}, abort={action.on_abort})"
        )
        return True

    def mark_started(self) -> List[StartupFunc]:
        """
        Close the startup list.

        Returns:
            Startup actions in registration order

        Raises:
            UsageError: If startup was already claimed
        """
        with self._lock:
            if self._started:
                raise UsageError("init() called multiple times!")
            self._started = True
            return list(self._startup)

    def finalize(self) -> bool:
        """
        Close the termination list.

        Returns:
            True for the first caller only
        """
        with self._lock:
            if self._finalized:
                return False
            self._finalized = True
            return True

    @property
    def started(self) -> bool:
        with self._lock:
            return self._started

    @property
    def finalized(self) -> bool:
        with self._lock:
            return self._finalized

    def startup_actions(self) -> List[StartupFunc]:
        with self._lock:
            return list(self._startup)

    def termination_actions(self) -> List[TerminationAction]:
        with self._lock:
            return list(self._termination)
