"""
Unit tests for the signal bridge.
"""

import signal

import pytest

from procwarden.core.orchestrator import TerminationOrchestrator
from procwarden.core.registry import ActionRegistry
from procwarden.core.signals import SignalBridge, standard_signal_set
from procwarden.infrastructure.process import MockProcessExit


class FakeInstaller:
    """Records handlers instead of touching the process signal table."""

    def __init__(self):
        self.handlers = {}

    def __call__(self, sig, handler):
        previous = self.handlers.get(sig, signal.SIG_DFL)
        self.handlers[sig] = handler
        return previous


def make_bridge():
    registry = ActionRegistry()
    exiter = MockProcessExit()
    orchestrator = TerminationOrchestrator(registry, exiter=exiter)
    installer = FakeInstaller()
    return registry, SignalBridge(orchestrator, install=installer), installer, exiter


class TestBridge:
    """Tests for SignalBridge.bridge."""

    def test_signal_triggers_shutdown(self):
        registry, bridge, installer, exiter = make_bridge()
        calls = []
        registry.register_termination(lambda: calls.append("cleanup"))

        bridge.bridge(signal.SIGTERM)
        installer.handlers[signal.SIGTERM](signal.SIGTERM, None)

        assert exiter.wait(timeout=2.0)
        assert calls == ["cleanup"]
        assert exiter.codes == [0]

    def test_second_signal_is_noop(self):
        registry, bridge, installer, exiter = make_bridge()
        calls = []
        registry.register_termination(lambda: calls.append("cleanup"))

        bridge.bridge(signal.SIGINT, signal.SIGTERM)
        installer.handlers[signal.SIGINT](signal.SIGINT, None)
        installer.handlers[signal.SIGTERM](signal.SIGTERM, None)

        assert exiter.wait(timeout=2.0)
        assert calls == ["cleanup"]
        assert exiter.codes == [0]

    def test_handler_returns_while_registry_lock_is_held(self):
        registry, bridge, installer, exiter = make_bridge()
        calls = []
        registry.register_termination(lambda: calls.append("cleanup"))

        bridge.bridge(signal.SIGTERM)
        # A signal can land while the main thread is inside a registry call
        with registry._lock:
            installer.handlers[signal.SIGTERM](signal.SIGTERM, None)
            assert not exiter.wait(timeout=0.05)

        assert exiter.wait(timeout=2.0)
        assert calls == ["cleanup"]
        assert exiter.codes == [0]

    def test_restore(self):
        _, bridge, installer, _ = make_bridge()

        bridge.bridge(signal.SIGTERM)
        bridge.restore()

        assert installer.handlers[signal.SIGTERM] is signal.SIG_DFL

    def test_uninstallable_signal_is_skipped(self):
        registry = ActionRegistry()
        orchestrator = TerminationOrchestrator(registry, exiter=MockProcessExit())

        def refuse(sig, handler):
            raise ValueError("signal only works in main thread")

        # Should not raise
        SignalBridge(orchestrator, install=refuse).bridge(signal.SIGTERM)

    @pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="SIGUSR1 not available")
    def test_real_signal_delivery(self):
        registry = ActionRegistry()
        exiter = MockProcessExit()
        bridge = SignalBridge(TerminationOrchestrator(registry, exiter=exiter))
        calls = []
        registry.register_termination(lambda: calls.append("cleanup"))

        bridge.bridge(signal.SIGUSR1)
        try:
            signal.raise_signal(signal.SIGUSR1)
            assert exiter.wait(timeout=2.0)
        finally:
            bridge.restore()

        assert calls == ["cleanup"]
        assert exiter.codes == [0]


class TestStandardSignals:
    """Tests for SignalBridge.standard."""

    def test_standard_signal_set(self):
        sigs = standard_signal_set()

        assert signal.SIGINT in sigs
        assert signal.SIGTERM in sigs

    def test_standard_handler_shuts_down_on_thread(self):
        registry, bridge, installer, exiter = make_bridge()
        calls = []
        registry.register_termination(lambda: calls.append("cleanup"))

        bridge.standard()
        installer.handlers[signal.SIGINT](signal.SIGINT, None)

        assert exiter.wait(timeout=2.0)
        assert calls == ["cleanup"]
        assert exiter.codes == [0]

    def test_standard_handler_restores_defaults(self):
        _, bridge, installer, exiter = make_bridge()

        bridge.standard(signal.SIGINT, signal.SIGTERM)
        installer.handlers[signal.SIGTERM](signal.SIGTERM, None)
        exiter.wait(timeout=2.0)

        assert installer.handlers[signal.SIGINT] is signal.SIG_DFL
        assert installer.handlers[signal.SIGTERM] is signal.SIG_DFL
