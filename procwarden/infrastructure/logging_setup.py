"""
PROCWARDEN - Logging Setup

Configures the root logger for a program according to its InitConfig.
"""

import logging
import os
import sys
from typing import List, Optional

from procwarden.config.settings import InitConfig, find_env_default
from procwarden.infrastructure.filesystem import FileSystemAdapter, RealFileSystem

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname).1s %(process)d %(threadName)s %(name)s] %(message)s"


def setup_logging(
    config: InitConfig,
    program: str,
    fs: Optional[FileSystemAdapter] = None,
    root: Optional[logging.Logger] = None,
) -> List[logging.Handler]:
    """
    Install log handlers on the root logger.

    Args:
        config: Init configuration (log_dir, log_files, log_to_stderr, verbosity)
        program: Program name, used for the log file name
        fs: Filesystem adapter used to create the log directory
        root: Logger to configure (defaults to the root logger)

    Returns:
        Handlers that were installed (empty when logging is disabled)
    """
    fs = fs or RealFileSystem()
    root = root if root is not None else logging.getLogger()
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = []
    to_stderr = config.log_to_stderr
    fallback_error: Optional[OSError] = None

    if not config.log_dir:
        config.log_dir = find_env_default("/tmp", "PROCWARDEN_LOGDIR", "TMP", "TEMP")

    if config.log_files:
        log_path = os.path.join(config.log_dir, f"{program or 'python'}.log")
        try:
            if config.make_log_dir:
                fs.makedirs(config.log_dir)
            handlers.append(logging.FileHandler(log_path))
        except OSError as e:
            # Fall back to stderr rather than losing log output
            to_stderr = True
            fallback_error = e

    if to_stderr:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if handlers:
        root.setLevel(logging.DEBUG if config.verbosity >= 1 else logging.INFO)

    if fallback_error is not None:
        logger.warning(f"Cannot write log files to {config.log_dir!r}, logging to stderr: {fallback_error}")

    return handlers


def flush_logging(root: Optional[logging.Logger] = None) -> None:
    """Flush every handler on the root logger."""
    root = root if root is not None else logging.getLogger()
    for handler in list(root.handlers):
        try:
            handler.flush()
        except (OSError, ValueError):
            pass

