"""
PROCWARDEN - Core Types

Common types and dataclasses used throughout the library.
"""

from dataclasses import dataclass
from enum import Enum


class TerminationMode(Enum):
    """How the process is being terminated."""

    SHUTDOWN = "shutdown"  # Clean exit, code 0
    ABORT = "abort"  # Abnormal exit, code 1


class OrchestratorState(Enum):
    """Lifecycle states of the termination orchestrator."""

    IDLE = "idle"
    FINALIZING = "finalizing"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class TerminationRequest:
    """A single request to terminate the process."""

    mode: TerminationMode
    exit_code: int
    message: str = ""

    @classmethod
    def shutdown(cls) -> "TerminationRequest":
        return cls(mode=TerminationMode.SHUTDOWN, exit_code=0)

    @classmethod
    def abort(cls, message: str = "") -> "TerminationRequest":
        """
        Create an abort request.

        Args:
            message: Text written to stderr just before exit (may be empty)

        Returns:
            TerminationRequest with exit code 1
        """
        return cls(mode=TerminationMode.ABORT, exit_code=1, message=message)
