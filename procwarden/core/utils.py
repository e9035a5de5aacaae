"""
PROCWARDEN - Utility Functions

Common utility functions used across the library.
"""

import functools
import os
import sys
from typing import Callable


def func_id(fn: Callable) -> str:
    """
    Build a readable identifier for a callable.

    Args:
        fn: Function, method, partial or callable object

    Returns:
        Module-qualified name such as "pkg.mod.Class.method"
    """
    if isinstance(fn, functools.partial):
        return f"partial({func_id(fn.func)})"

    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None)
    if name is None:
        # Callable instance
        name = type(fn).__qualname__

    module = getattr(fn, "__module__", None)
    if module:
        return f"{module}.{name}"
    return name


def command_name(argv=None) -> str:
    """
    Base name of the running program.

    Args:
        argv: Argument vector to inspect (defaults to sys.argv)

    Returns:
        Base name of argv[0], or "" when argv is empty
    """
    argv = sys.argv if argv is None else argv
    if not argv:
        return ""
    return os.path.basename(argv[0])
