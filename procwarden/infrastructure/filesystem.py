"""
PROCWARDEN - Filesystem Abstraction

Provides abstraction layer for the few file operations the library
performs (PID files, log directories).
This allows mocking in tests and makes the code more testable.
"""

import os
from typing import Dict, Protocol, Set


class FileSystemAdapter(Protocol):
    """Protocol for filesystem operations."""

    def exists(self, path: str) -> bool:
        """Check if a path exists."""
        ...

    def read(self, path: str) -> str:
        """Read file contents as string."""
        ...

    def write(self, path: str, content: str) -> None:
        """Write string content to file, replacing it."""
        ...

    def remove(self, path: str) -> None:
        """Remove a file; raises FileNotFoundError if missing."""
        ...

    def makedirs(self, path: str) -> None:
        """Create a directory and its parents if needed."""
        ...


class RealFileSystem:
    """Real filesystem implementation."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read(self, path: str) -> str:
        with open(path, "r") as f:
            return f.read()

    def write(self, path: str, content: str) -> None:
        with open(path, "w") as f:
            f.write(content)

    def remove(self, path: str) -> None:
        os.remove(path)

    def makedirs(self, path: str) -> None:
        os.makedirs(path, mode=0o777, exist_ok=True)


class MockFileSystem:
    """Mock filesystem for testing."""

    def __init__(self, read_only: bool = False):
        self._files: Dict[str, str] = {}
        self._dirs: Set[str] = set()
        self.read_only = read_only

    def exists(self, path: str) -> bool:
        return path in self._files or path in self._dirs

    def read(self, path: str) -> str:
        if path not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path]

    def write(self, path: str, content: str) -> None:
        if self.read_only:
            raise PermissionError(f"Read-only filesystem: {path}")
        self._files[path] = content

    def remove(self, path: str) -> None:
        if path not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        if self.read_only:
            raise PermissionError(f"Read-only filesystem: {path}")
        del self._files[path]

    def makedirs(self, path: str) -> None:
        if self.read_only:
            raise PermissionError(f"Read-only filesystem: {path}")
        self._dirs.add(path)
