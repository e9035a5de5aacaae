"""
Unit tests for infrastructure components.
"""

import logging
import os

import pytest

from procwarden.config.settings import InitConfig
from procwarden.infrastructure.filesystem import MockFileSystem, RealFileSystem
from procwarden.infrastructure.logging_setup import flush_logging, setup_logging
from procwarden.infrastructure.pidfile import PIDFile
from procwarden.infrastructure import process
from procwarden.infrastructure.process import MockProcessExit, OsProcessExit, describe_process, log_process_info


class TestMockFileSystem:
    """Tests for MockFileSystem."""

    def test_exists_returns_false_for_nonexistent_file(self):
        fs = MockFileSystem()
        assert fs.exists("/nonexistent.txt") is False

    def test_write_and_read(self):
        fs = MockFileSystem()
        fs.write("/test.txt", "Hello, World!")
        assert fs.read("/test.txt") == "Hello, World!"

    def test_remove(self):
        fs = MockFileSystem()
        fs.write("/test.txt", "content")
        fs.remove("/test.txt")
        assert fs.exists("/test.txt") is False

    def test_remove_nonexistent_raises_error(self):
        fs = MockFileSystem()
        with pytest.raises(FileNotFoundError):
            fs.remove("/nonexistent.txt")

    def test_read_only(self):
        fs = MockFileSystem(read_only=True)
        with pytest.raises(PermissionError):
            fs.write("/test.txt", "content")
        with pytest.raises(PermissionError):
            fs.makedirs("/logs")

    def test_makedirs(self):
        fs = MockFileSystem()
        fs.makedirs("/var/log/app")
        assert fs.exists("/var/log/app")


class TestRealFileSystem:
    """Tests for RealFileSystem."""

    def test_write_read_remove(self, tmp_path):
        fs = RealFileSystem()
        path = str(tmp_path / "file.txt")

        fs.write(path, "content")
        assert fs.read(path) == "content"

        fs.remove(path)
        assert not fs.exists(path)

    def test_makedirs_is_idempotent(self, tmp_path):
        fs = RealFileSystem()
        path = str(tmp_path / "a" / "b")

        fs.makedirs(path)
        fs.makedirs(path)

        assert os.path.isdir(path)


class TestPIDFile:
    """Tests for PIDFile."""

    def test_write(self):
        fs = MockFileSystem()
        pidfile = PIDFile("/run/app.pid", fs, pid=4242)

        assert pidfile.write() is True
        assert fs.read("/run/app.pid") == "4242\n"

    def test_defaults_to_current_pid(self):
        fs = MockFileSystem()
        PIDFile("/run/app.pid", fs).write()

        assert fs.read("/run/app.pid") == f"{os.getpid()}\n"

    def test_write_failure_is_logged(self, caplog):
        fs = MockFileSystem(read_only=True)

        with caplog.at_level(logging.ERROR):
            assert PIDFile("/run/app.pid", fs).write() is False

        assert "writing pid file" in caplog.text

    def test_install_registers_removal(self):
        fs = MockFileSystem()
        registered = []
        pidfile = PIDFile("/run/app.pid", fs, pid=1)

        assert pidfile.install(registered.append) is True
        assert fs.exists("/run/app.pid")

        registered[0]()
        assert not fs.exists("/run/app.pid")

    def test_install_failure_registers_nothing(self):
        fs = MockFileSystem(read_only=True)
        registered = []

        assert PIDFile("/run/app.pid", fs).install(registered.append) is False
        assert registered == []

    def test_remove_missing_file_warns(self, caplog):
        fs = MockFileSystem()

        with caplog.at_level(logging.WARNING):
            PIDFile("/run/app.pid", fs).remove()

        assert "not removed on shutdown" in caplog.text


class TestMockProcessExit:
    """Tests for MockProcessExit."""

    def test_records_codes(self):
        exiter = MockProcessExit()

        assert not exiter.exited
        exiter.exit(1)

        assert exiter.exited
        assert exiter.codes == [1]
        assert exiter.exit_time is not None

    def test_wait_times_out(self):
        assert MockProcessExit().wait(timeout=0.01) is False


class TestOsProcessExit:
    """Tests for OsProcessExit."""

    def test_flushes_logging_before_exit(self, monkeypatch):
        events = []
        monkeypatch.setattr(process, "flush_logging", lambda: events.append("flush"))
        monkeypatch.setattr(process.os, "_exit", lambda code: events.append(("exit", code)))

        OsProcessExit().exit(3)

        assert events == ["flush", ("exit", 3)]


class TestDescribeProcess:
    """Tests for the process banner."""

    def test_banner_lines(self):
        lines = describe_process(["/usr/bin/tool", "--flag", "value"])

        assert lines[0].startswith("  Start Time: ")
        assert lines[1] == f"  Process ID: {os.getpid()}"
        assert lines[2].startswith(" Working Dir: ")
        assert lines[3].startswith("        User: ")
        assert lines[4] == "Command Line: /usr/bin/tool"
        assert lines[5] == "               1) --flag"
        assert lines[6] == "               2) value"

    def test_username_failure_without_uids(self, monkeypatch):
        class WindowsLikeProcess:
            pid = 7

            def create_time(self):
                return 0.0

            def cwd(self):
                return "/srv"

            def username(self):
                raise KeyError("uid 1234 not in passwd")

        monkeypatch.setattr(process.psutil, "Process", WindowsLikeProcess)

        lines = describe_process(["tool"])

        assert lines[3].startswith("        User: not available: ")
        assert "1234" in lines[3]

    def test_log_process_info(self, caplog):
        with caplog.at_level(logging.INFO):
            log_process_info(["tool"])

        assert "Process ID" in caplog.text


class TestSetupLogging:
    """Tests for setup_logging."""

    def make_root(self):
        root = logging.getLogger("procwarden-test-root")
        root.handlers.clear()
        root.propagate = False
        return root

    def test_disabled_installs_nothing(self):
        root = self.make_root()
        config = InitConfig(log_files=False, log_dir="/tmp")

        assert setup_logging(config, "tool", root=root) == []
        assert root.handlers == []

    def test_log_file(self, tmp_path):
        root = self.make_root()
        config = InitConfig(log_dir=str(tmp_path / "logs"))

        handlers = setup_logging(config, "tool", root=root)
        try:
            root.info("hello")
            flush_logging(root)

            assert len(handlers) == 1
            assert "hello" in (tmp_path / "logs" / "tool.log").read_text()
            assert root.level == logging.INFO
        finally:
            for handler in handlers:
                handler.close()
                root.removeHandler(handler)

    def test_verbosity_enables_debug(self):
        root = self.make_root()
        config = InitConfig(log_files=False, log_to_stderr=True, verbosity=1, log_dir="/tmp")

        handlers = setup_logging(config, "tool", root=root)
        try:
            assert len(handlers) == 1
            assert root.level == logging.DEBUG
        finally:
            for handler in handlers:
                root.removeHandler(handler)

    def test_unwritable_log_dir_falls_back_to_stderr(self):
        root = self.make_root()
        config = InitConfig(log_dir="/logs")

        handlers = setup_logging(config, "tool", fs=MockFileSystem(read_only=True), root=root)
        try:
            assert len(handlers) == 1
            assert isinstance(handlers[0], logging.StreamHandler)
            assert not isinstance(handlers[0], logging.FileHandler)
        finally:
            for handler in handlers:
                root.removeHandler(handler)

    def test_empty_log_dir_resolved_from_env(self, monkeypatch):
        monkeypatch.setenv("PROCWARDEN_LOGDIR", "/var/log/env")
        root = self.make_root()
        config = InitConfig(log_files=False)

        setup_logging(config, "tool", root=root)

        assert config.log_dir == "/var/log/env"
