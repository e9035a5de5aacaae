"""
PROCWARDEN - Startup Runner

Runs registered startup functions once, in registration order.
"""

import logging
from typing import Callable, Optional

from procwarden.core.registry import ActionRegistry
from procwarden.core.utils import func_id

logger = logging.getLogger(__name__)


class StartupRunner:
    """
    Executes the startup list of a registry exactly once.

    Startup functions run synchronously on the caller's thread with no time
    limit. A startup function that cannot initialize its subsystem should
    raise; the exception propagates to the caller of run_once().
    """

    def __init__(self, registry: ActionRegistry):
        self._registry = registry

    def run_once(self, prepare: Optional[Callable[[], None]] = None) -> None:
        """
        Run all registered startup functions.

        Args:
            prepare: Optional hook run after the once-only check and before
                any startup function

        Raises:
            UsageError: If called more than once
        """
        actions = self._registry.mark_started()

        if prepare is not None:
            prepare()

        logger.debug(f"Running {len(actions)} startup function(s)")
        for action in actions:
            logger.debug(f"calling startup func: {func_id(action)}")
            action()
