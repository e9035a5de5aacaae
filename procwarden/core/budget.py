"""
PROCWARDEN - Shutdown Budget

Selects the termination actions that apply to a mode and computes how long
the orchestrator waits for them.
"""

from typing import Iterable, List

from procwarden.core.shutdown import TerminationAction
from procwarden.core.types import TerminationMode

# Extra time on top of the summed allowances, for scheduling jitter
FUDGE_FACTOR = 0.2


def applicable_actions(mode: TerminationMode, actions: Iterable[TerminationAction]) -> List[TerminationAction]:
    """
    Filter actions to those in scope for a termination mode.

    Args:
        mode: Requested termination mode
        actions: Actions in registration order

    Returns:
        Applicable actions, still in registration order
    """
    return [action for action in actions if action.applies_to(mode)]


def compute_budget(actions: Iterable[TerminationAction]) -> float:
    """
    Total wait time in seconds for the given (already filtered) actions.

    Args:
        actions: Applicable actions only

    Returns:
        Sum of allowances plus FUDGE_FACTOR of that sum
    """
    total = sum(action.allowance for action in actions)
    return total + total * FUDGE_FACTOR
