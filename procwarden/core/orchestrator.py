"""
PROCWARDEN - Termination Orchestrator

Runs the registered termination actions exactly once and ends the process.
"""

import logging
import sys
import threading
from typing import List, Optional

from procwarden.core.budget import applicable_actions, compute_budget
from procwarden.core.registry import ActionRegistry
from procwarden.core.shutdown import TerminationAction
from procwarden.core.types import OrchestratorState, TerminationRequest
from procwarden.infrastructure.process import OsProcessExit, ProcessExiter

logger = logging.getLogger(__name__)


class TerminationOrchestrator:
    """
    Coordinates shutdown and abort of the process.

    The first caller of shutdown() or abort() finalizes the registry, runs
    the applicable actions in reverse registration order on a worker thread
    and waits for them for at most the computed budget before exiting.
    Every later or concurrent caller returns immediately.

    Termination actions are not cancelled when the budget runs out; they are
    abandoned and die with the process. Exceptions raised by an action are
    not caught here: they end the worker thread and the process exits early.
    """

    def __init__(
        self,
        registry: ActionRegistry,
        exiter: Optional[ProcessExiter] = None,
        stderr=None,
    ):
        """
        Initialize orchestrator.

        Args:
            registry: Registry holding the termination actions
            exiter: Process exit adapter (defaults to a real os._exit)
            stderr: Stream for abort messages (defaults to sys.stderr at exit time)
        """
        self._registry = registry
        self._exiter = exiter or OsProcessExit()
        self._stderr = stderr
        self._state = OrchestratorState.IDLE
        self._state_lock = threading.Lock()

    @property
    def state(self) -> OrchestratorState:
        with self._state_lock:
            return self._state

    def shutdown(self) -> None:
        """Terminate cleanly with exit code 0."""
        self.terminate(TerminationRequest.shutdown())

    def abort(self, message: str = "") -> None:
        """
        Terminate abnormally with exit code 1.

        Args:
            message: If not empty, written to stderr just before exit
        """
        self.terminate(TerminationRequest.abort(message))

    def terminate(self, request: TerminationRequest) -> None:
        """
        Run the termination sequence for a request.

        Args:
            request: Shutdown or abort request
        """
        # Closing the registry and leaving IDLE happen as one step, so a
        # reader never sees a finalized registry with an IDLE orchestrator
        with self._state_lock:
            won = self._registry.finalize()
            if won:
                self._state = OrchestratorState.FINALIZING
        if not won:
            logger.debug(f"Ignoring {request.mode.value} request; termination already in progress")
            return

        actions = applicable_actions(request.mode, self._registry.termination_actions())
        budget = compute_budget(actions)
        logger.info(f"Starting {request.mode.value} sequence: {len(actions)} action(s), budget {budget:.3f}s")

        if actions:
            self._race(actions, budget)

        logger.info(f"{request.mode.value.capitalize()} sequence finished; exiting with code {request.exit_code}")

        self._set_state(OrchestratorState.TERMINATED)

        if request.message:
            stream = self._stderr or sys.stderr
            print(request.message, file=stream, flush=True)

        self._exiter.exit(request.exit_code)

    def _race(self, actions: List[TerminationAction], budget: float) -> None:
        """Wait for the worker to finish or the budget to elapse, whichever comes first."""
        done = threading.Event()
        worker = threading.Thread(
            target=self._run_actions,
            args=(actions, done),
            name="procwarden-shutdown",
            daemon=True,
        )
        worker.start()

        if not done.wait(budget):
            logger.warning(f"Shutdown budget of {budget:.3f}s elapsed; abandoning remaining actions")

    def _run_actions(self, actions: List[TerminationAction], done: threading.Event) -> None:
        try:
            # Reverse order (LIFO - last registered, first run)
            for action in reversed(actions):
                logger.debug(f"calling shutdown func: {action.name}")
                action.callback()
        finally:
            done.set()

    def _set_state(self, state: OrchestratorState) -> None:
        with self._state_lock:
            self._state = state
