"""
Environment provider — the protocol between the checker and the machine.

Everything the checker knows about the machine comes through this
interface: the search path, process invocation, and environment
variables. The checker core never calls ``shutil``, ``subprocess`` or
``os.environ`` directly, so it can be driven against a fake machine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal

Scope = Literal["process", "user"]


class EnvironmentProvider(ABC):
    """Abstract base class for environment providers.

    Read operations (``resolve_executable``, ``find_in_dir``,
    ``run_capture``, ``get_env_var``) must not change machine state.
    Only ``run_install``, ``set_env_var`` and ``prepend_search_path``
    mutate, and only the fix step calls the first two.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The provider identifier (e.g. 'system', 'fake')."""

    @property
    @abstractmethod
    def is_windows(self) -> bool:
        """Whether executables follow Windows naming (``.exe``, ``.cmd``)."""

    @abstractmethod
    def shell_ok(self) -> bool:
        """Check that basic shell primitives run. Never raises."""

    @abstractmethod
    def expand(self, path: str) -> str:
        """Expand ``%VAR%`` references and a leading ``~`` in a path."""

    @abstractmethod
    def resolve_executable(self, name: str) -> str | None:
        """Resolve an executable on the current search path."""

    @abstractmethod
    def find_in_dir(self, directory: str, name: str) -> str | None:
        """Look for an executable inside one (already expanded) directory."""

    @abstractmethod
    def run_capture(self, cmd: str, args: list[str]) -> tuple[int, str]:
        """Run a command and return ``(exit_code, output)``.

        May raise ``OSError`` or ``subprocess.SubprocessError``; callers
        that probe are responsible for classifying those as absence.
        """

    @abstractmethod
    def run_install(self, command: list[str]) -> int:
        """Run an installer command synchronously and return its exit code.

        Raises:
            RemediationError: If the command cannot be launched at all.
        """

    @abstractmethod
    def get_env_var(self, scope: Scope, name: str) -> str | None:
        """Read an environment variable at process or user scope."""

    @abstractmethod
    def set_env_var(self, scope: Scope, name: str, value: str) -> None:
        """Write an environment variable at process or user scope.

        Raises:
            EnvironmentWriteError: If the write fails.
        """

    @abstractmethod
    def prepend_search_path(self, directory: str) -> None:
        """Put a directory in front of the in-process search path."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
