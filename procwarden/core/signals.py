"""
PROCWARDEN - Signal Bridge

Maps OS termination signals onto a clean shutdown.
"""

import logging
import signal
import threading
from typing import Callable, Dict, List, Optional

from procwarden.core.orchestrator import TerminationOrchestrator

logger = logging.getLogger(__name__)

SignalInstaller = Callable[[int, object], object]


def standard_signal_set() -> List[signal.Signals]:
    """SIGHUP, SIGINT and SIGTERM, as far as the platform provides them."""
    names = ("SIGHUP", "SIGINT", "SIGTERM")
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


class SignalBridge:
    """
    Installs signal handlers that request a shutdown.

    Delivery after termination has begun is harmless: the orchestrator
    ignores every request but the first.
    """

    def __init__(self, orchestrator: TerminationOrchestrator, install: Optional[SignalInstaller] = None):
        """
        Initialize signal bridge.

        Args:
            orchestrator: Orchestrator receiving shutdown requests
            install: Handler installer with the signature of signal.signal
        """
        self._orchestrator = orchestrator
        self._install = install or signal.signal
        self._previous: Dict[int, object] = {}

    def bridge(self, *signals: int) -> None:
        """
        Call shutdown() on the orchestrator when any of the signals arrive.

        The handler starts shutdown() on its own thread and returns at once.
        Signal handlers run on the main thread between bytecodes, possibly
        while that thread holds the registry lock, so shutdown() must not run
        inside the handler.

        Args:
            *signals: Signal numbers to bridge
        """

        def handler(signum, frame) -> None:
            logger.info(f"Signal {_signal_name(signum)} received → shutting down")
            threading.Thread(target=self._orchestrator.shutdown, name="procwarden-signal", daemon=True).start()

        self._install_all(signals, handler)

    def standard(self, *signals: int) -> None:
        """
        Install soft handlers (SIGHUP, SIGINT, SIGTERM unless given).

        On first delivery the default dispositions are restored, so a second
        signal kills the process outright, and shutdown() runs on its own
        thread so the handler returns immediately.

        Args:
            *signals: Signal numbers to bridge instead of the standard set
        """
        targets = list(signals) or standard_signal_set()
        fired = threading.Event()

        def handler(signum, frame) -> None:
            if fired.is_set():
                return
            fired.set()
            logger.info(f"Signal {_signal_name(signum)} received → shutting down now")
            for sig in targets:
                self._install(sig, signal.SIG_DFL)
            threading.Thread(target=self._orchestrator.shutdown, name="procwarden-signal", daemon=True).start()

        self._install_all(targets, handler)

    def restore(self) -> None:
        """Reinstate the handlers that were in place before bridging."""
        for sig, previous in self._previous.items():
            self._install(sig, previous)
        self._previous.clear()

    def _install_all(self, signals, handler) -> None:
        for sig in signals:
            try:
                previous = self._install(sig, handler)
            except (OSError, ValueError) as e:
                logger.debug(f"Cannot handle signal {_signal_name(sig)}: {e}")
                continue
            self._previous.setdefault(sig, previous)
            logger.debug(f"Shutdown bridged to signal {_signal_name(sig)}")


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)
