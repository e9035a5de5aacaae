"""
PROCWARDEN - Custom Exception Classes

Defines the exception hierarchy for the library.
All custom exceptions inherit from ProcwardenError.
"""


class ProcwardenError(Exception):
    """Base exception for all procwarden errors."""

    pass


class UsageError(ProcwardenError):
    """Raised when the library is driven in a way its contract forbids."""

    pass


class ConfigurationError(ProcwardenError):
    """Raised when there are configuration issues."""

    pass
