"""
PROCWARDEN - Lifecycle

Wires the registry, startup runner, termination orchestrator and signal
bridge of one process together with flags, logging and the PID file.
"""

import logging
import sys
import time
from typing import List, Optional, Sequence

from procwarden.config.flags import LOG_DIR_FLAG, LOG_FILES_FLAG, LOG_TO_STDERR_FLAG, VERBOSITY_FLAG, FlagsGroup
from procwarden.config.options import InitContext, InitOption, quiet
from procwarden.config.settings import InitConfig
from procwarden.core.orchestrator import TerminationOrchestrator
from procwarden.core.registry import ActionRegistry, StartupFunc
from procwarden.core.shutdown import ShutdownFunc, ShutdownOption
from procwarden.core.signals import SignalBridge, SignalInstaller
from procwarden.core.startup import StartupRunner
from procwarden.core.types import OrchestratorState
from procwarden.core.utils import command_name
from procwarden.infrastructure.filesystem import FileSystemAdapter, RealFileSystem
from procwarden.infrastructure.logging_setup import flush_logging, setup_logging
from procwarden.infrastructure.pidfile import PIDFile
from procwarden.infrastructure.process import ProcessExiter, log_process_info

logger = logging.getLogger(__name__)


class Lifecycle:
    """
    Startup and termination coordinator for one process.

    Libraries register startup and shutdown functions; the host program
    calls init() once near the top of its main function and shutdown() (or
    abort()) when it is done.

    Example:
        lifecycle = Lifecycle()
        lifecycle.register_startup(connect_database)
        lifecycle.register_shutdown(close_database, TimeAllowance(0.5))

        lifecycle.init(standard_signals())
        try:
            run()
        finally:
            lifecycle.shutdown()
    """

    def __init__(
        self,
        exiter: Optional[ProcessExiter] = None,
        fs: Optional[FileSystemAdapter] = None,
        argv: Optional[Sequence[str]] = None,
        signal_installer: Optional[SignalInstaller] = None,
        stderr=None,
    ):
        """
        Initialize lifecycle.

        Args:
            exiter: Process exit adapter (defaults to os._exit)
            fs: Filesystem adapter for log directory and PID file
            argv: Command line including program name (defaults to sys.argv at init())
            signal_installer: Replacement for signal.signal
            stderr: Stream for abort messages (defaults to sys.stderr)
        """
        self._registry = ActionRegistry()
        self._runner = StartupRunner(self._registry)
        self._orchestrator = TerminationOrchestrator(self._registry, exiter=exiter, stderr=stderr)
        self._signals = SignalBridge(self._orchestrator, install=signal_installer)
        self._fs = fs or RealFileSystem()
        self._argv = list(argv) if argv is not None else None
        self._flags = FlagsGroup()
        self._config: Optional[InitConfig] = None

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def orchestrator(self) -> TerminationOrchestrator:
        return self._orchestrator

    @property
    def state(self) -> OrchestratorState:
        return self._orchestrator.state

    @property
    def config(self) -> Optional[InitConfig]:
        """Effective configuration, available once init() has run."""
        return self._config

    @property
    def flags(self) -> FlagsGroup:
        return self._flags

    # Registration

    def register_startup(self, fn: StartupFunc) -> bool:
        """
        Register a function to run during init().

        Startup functions should be light; a subsystem that cannot
        initialize should raise, which stops the program.

        Returns:
            False (and logs an error) if init() has already run
        """
        return self._registry.register_startup(fn)

    def register_shutdown(self, fn: ShutdownFunc, *options: ShutdownOption) -> bool:
        """
        Register a function to run on shutdown, abort or a bridged signal.

        With no options this is the same as passing OnShutdown(), OnAbort()
        and TimeAllowance(0.1). Giving only one of OnShutdown/OnAbort
        restricts the function to that mode.

        Returns:
            False (and logs an error) if termination has already begun
        """
        return self._registry.register_termination(fn, *options)

    # Startup

    def init(self, *options: InitOption) -> None:
        """
        Parse flags, set up logging and run all startup functions.

        May only be called once.

        Raises:
            UsageError: If called more than once
        """
        self._runner.run_once(prepare=lambda: self._prepare(options))

    def init_cli(self) -> None:
        """init() with logging disabled, for command line tools."""
        self.init(quiet())

    def _prepare(self, options: Sequence[InitOption]) -> None:
        argv = self._argv if self._argv is not None else list(sys.argv)
        program = command_name(argv)

        ctx = InitContext(config=InitConfig(), flags=self._flags)
        for option in options:
            if option.init is not None:
                option.init(ctx)

        ctx.config = InitConfig.load(ctx.config_file)

        self._flags.parse(argv[1:], prog=program)

        for option in options:
            if option.setup is not None:
                option.setup(ctx)

        config = ctx.config
        self._apply_flags(config)
        config.validate()
        self._config = config

        if config.standard_signals:
            self._signals.standard()

        if config.log_files or config.log_to_stderr:
            setup_logging(config, program, fs=self._fs)
            if config.log_spam:
                log_process_info(argv)

        if config.pidfile:
            PIDFile(config.pidfile, self._fs).install(self.register_shutdown)

        self.register_shutdown(_flush_logs)

    def _apply_flags(self, config: InitConfig) -> None:
        # Explicit command line flags override every other source
        value, given = self._flags.lookup(LOG_DIR_FLAG)
        if given:
            config.log_dir = value
        value, given = self._flags.lookup(LOG_FILES_FLAG)
        if given:
            config.log_files = value
        value, given = self._flags.lookup(LOG_TO_STDERR_FLAG)
        if given:
            config.log_to_stderr = value
        value, given = self._flags.lookup(VERBOSITY_FLAG)
        if given:
            config.verbosity = value

    # Termination

    def shutdown(self) -> None:
        """Run shutdown functions (within their time budget) and exit with code 0."""
        self._orchestrator.shutdown()

    def abort(self, message: str = "") -> None:
        """Run abort functions (within their time budget), print message to stderr and exit with code 1."""
        self._orchestrator.abort(message)

    def shutdown_on(self, *signals: int) -> None:
        """Call shutdown() when the process receives any of the given signals."""
        self._signals.bridge(*signals)

    # Positional arguments

    def args(self) -> List[str]:
        return self._flags.args()

    def arg(self, i: int) -> str:
        return self._flags.arg(i)

    def arg_default(self, i: int, default: str) -> str:
        return self._flags.arg_default(i, default)

    def arg_list(self, i: int) -> Optional[List[str]]:
        return self._flags.arg_list(i)


def _flush_logs() -> None:
    flush_logging()
    time.sleep(0.005)
