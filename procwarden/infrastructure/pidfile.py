"""
PROCWARDEN - PID File

Writes the process ID to a file and removes it again on shutdown.
"""

import logging
import os
from typing import Callable, Optional

from .filesystem import FileSystemAdapter

logger = logging.getLogger(__name__)


class PIDFile:
    """Manages the PID file of the running process."""

    def __init__(self, path: str, fs: FileSystemAdapter, pid: Optional[int] = None):
        self._path = path
        self._fs = fs
        self._pid = os.getpid() if pid is None else pid

    @property
    def path(self) -> str:
        return self._path

    def write(self) -> bool:
        """
        Write the PID file.

        Returns:
            True if written, False if writing failed (the failure is logged)
        """
        try:
            self._fs.write(self._path, f"{self._pid}\n")
        except OSError as e:
            logger.error(f"writing pid file {self._path!r}: {e}")
            return False

        logger.debug(f"Wrote pid {self._pid} to {self._path!r}")
        return True

    def remove(self) -> None:
        """Remove the PID file, logging a warning if that fails."""
        try:
            self._fs.remove(self._path)
        except OSError as e:
            logger.warning(f"pidfile {self._path!r} not removed on shutdown: {e}")

    def install(self, register_shutdown: Callable[[Callable[[], None]], object]) -> bool:
        """
        Write the PID file and register its removal.

        Args:
            register_shutdown: Registration function for termination actions

        Returns:
            True if the file was written and removal registered
        """
        if not self._path:
            return False

        if not self.write():
            return False

        register_shutdown(self.remove)
        return True
