"""
Requirement model — one named external tool the build depends on.

A Requirement is pure declaration: how to find the tool, how to ask it
for its identity, and which package-manager commands would install it.
It never runs anything itself.
"""

from __future__ import annotations

import subprocess
from typing import Literal

from pydantic import BaseModel, Field

Severity = Literal["required", "optional"]

# Package managers in default preference order
PACKAGE_MANAGERS: tuple[str, ...] = ("winget", "choco", "scoop")


class Remediation(BaseModel):
    """A package-manager-specific install command for a Requirement."""

    manager: str                    # winget, choco, scoop, ...
    command: list[str]              # argv, first item is the manager's CLI

    @property
    def text(self) -> str:
        """The literal, copy-pasteable command line."""
        return subprocess.list2cmdline(self.command)


class Requirement(BaseModel):
    """A named tool whose presence is checked.

    ``install_dirs`` are vendor default locations scanned when ``cli``
    does not resolve on the search path. Entries may use ``%VAR%`` and
    ``~``; the environment provider expands them.

    ``env_var`` names a user-scope variable that must point at the
    directory holding ``cli`` (e.g. ``LIBCLANG_PATH``).
    """

    id: str
    name: str
    cli: str
    version_args: list[str] = Field(default_factory=lambda: ["--version"])
    install_dirs: list[str] = Field(default_factory=list)
    env_var: str | None = None
    remediation: list[Remediation] = Field(default_factory=list)
    severity: Severity = "required"

    @property
    def required(self) -> bool:
        """Whether absence of this tool fails the overall check."""
        return self.severity == "required"

    def remediation_for(self, manager: str) -> Remediation | None:
        """Look up the install command for a given package manager."""
        for rem in self.remediation:
            if rem.manager == manager:
                return rem
        return None
