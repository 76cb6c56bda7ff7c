"""
Error taxonomy for the prerequisite checker.

A missing tool is NOT an error: it is the Absent outcome of a probe and
never surfaces as an exception. The classes below cover what remains:

    RemediationError        installer could not be invoked (per item, logged)
    EnvironmentWriteError   user-scope variable write failed (per item, logged)
    FatalPreconditionError  the shell itself is unusable (aborts the run)
    ConfigError             toolcheck.yml is unreadable or invalid
"""

from __future__ import annotations


class ToolcheckError(Exception):
    """Base class for all toolcheck errors."""


class RemediationError(ToolcheckError):
    """Raised when an installer command cannot be launched."""


class EnvironmentWriteError(ToolcheckError):
    """Raised when a user-scope environment variable cannot be written."""


class FatalPreconditionError(ToolcheckError):
    """Raised when basic shell primitives cannot run on this machine."""


class ConfigError(ToolcheckError):
    """Raised when toolcheck configuration is invalid or unreadable."""
