"""
Environment providers — the checker's only view of the machine.
"""

from toolcheck.adapters.base import EnvironmentProvider, Scope
from toolcheck.adapters.mock import FakeEnvironment, FakeInstaller
from toolcheck.adapters.system import SystemEnvironment

__all__ = [
    "EnvironmentProvider",
    "FakeEnvironment",
    "FakeInstaller",
    "Scope",
    "SystemEnvironment",
]
