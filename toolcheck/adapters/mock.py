"""
Fake environment — in-memory machine for tests and dry runs.

Simulates a Windows host: a search path, a set of executable files,
canned probe output, per-scope environment variables and installers
that drop new executables when they succeed. Every mutation is logged
so tests can assert on side effects.
"""

from __future__ import annotations

import ntpath
import subprocess
from dataclasses import dataclass, field

from toolcheck.adapters.base import EnvironmentProvider, Scope
from toolcheck.core.errors import EnvironmentWriteError, RemediationError

_WIN_EXTS = (".exe", ".cmd", ".bat", "")


@dataclass
class FakeInstaller:
    """Scripted behavior of one installer command."""

    exit_code: int = 0
    creates: dict[str, str] = field(default_factory=dict)   # exe path -> banner, any exit code
    launch_error: bool = False


class FakeEnvironment(EnvironmentProvider):
    """In-memory environment provider.

    By default the machine has a working shell, an empty search path
    and no tools. Use ``add_tool`` to place executables.
    """

    def __init__(
        self,
        search_path: list[str] | None = None,
        process_env: dict[str, str] | None = None,
        user_env: dict[str, str] | None = None,
        shell_ok: bool = True,
    ):
        self.search_path: list[str] = list(search_path or [])
        self.process_env: dict[str, str] = dict(process_env or {})
        self.user_env: dict[str, str] = dict(user_env or {})
        self.files: set[str] = set()
        self.outputs: dict[str, tuple[int, str]] = {}
        self._shell_ok = shell_ok
        self._installers: dict[str, FakeInstaller] = {}
        self._write_failures: set[str] = set()

        self.probe_log: list[list[str]] = []
        self.install_log: list[list[str]] = []
        self.env_writes: list[tuple[str, str, str]] = []
        self.path_prepends: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def is_windows(self) -> bool:
        return True

    # ── Scenario setup ──────────────────────────────────────────

    def add_tool(
        self,
        path: str,
        output: str = "",
        exit_code: int = 0,
        on_path: bool = False,
    ) -> None:
        """Place an executable and script its version probe."""
        self.files.add(path)
        self.outputs[path] = (exit_code, output)
        if on_path:
            directory = ntpath.dirname(path)
            if directory not in self.search_path:
                self.search_path.append(directory)

    def set_installer(self, command: list[str], installer: FakeInstaller) -> None:
        """Script the outcome of an installer command."""
        self._installers[subprocess.list2cmdline(command)] = installer

    def fail_env_writes(self, name: str) -> None:
        """Make user-scope writes of ``name`` raise."""
        self._write_failures.add(name)

    # ── Provider protocol ───────────────────────────────────────

    def shell_ok(self) -> bool:
        return self._shell_ok

    def expand(self, path: str) -> str:
        out = path
        for key, value in self.process_env.items():
            out = out.replace(f"%{key}%", value)
        if out.startswith("~"):
            out = self.process_env.get("USERPROFILE", r"C:\Users\dev") + out[1:]
        return out

    def resolve_executable(self, name: str) -> str | None:
        for directory in self.search_path:
            found = self.find_in_dir(directory, name)
            if found:
                return found
        return None

    def find_in_dir(self, directory: str, name: str) -> str | None:
        for ext in _WIN_EXTS:
            candidate = ntpath.join(directory, name + ext)
            if candidate in self.files:
                return candidate
        return None

    def run_capture(self, cmd: str, args: list[str]) -> tuple[int, str]:
        self.probe_log.append([cmd, *args])
        if cmd not in self.files:
            raise FileNotFoundError(cmd)
        return self.outputs.get(cmd, (0, ""))

    def run_install(self, command: list[str]) -> int:
        self.install_log.append(list(command))
        installer = self._installers.get(subprocess.list2cmdline(command))
        if installer is None:
            return 1
        if installer.launch_error:
            raise RemediationError(f"Cannot run {command[0]}")
        for path, banner in installer.creates.items():
            self.add_tool(path, banner)
        return installer.exit_code

    def get_env_var(self, scope: Scope, name: str) -> str | None:
        source = self.process_env if scope == "process" else self.user_env
        return source.get(name) or None

    def set_env_var(self, scope: Scope, name: str, value: str) -> None:
        if scope == "user" and name in self._write_failures:
            raise EnvironmentWriteError(f"Access denied writing {name}")
        target = self.process_env if scope == "process" else self.user_env
        target[name] = value
        self.env_writes.append((scope, name, value))

    def prepend_search_path(self, directory: str) -> None:
        if directory in self.search_path:
            return
        self.search_path.insert(0, directory)
        self.path_prepends.append(directory)

    def reset_logs(self) -> None:
        """Clear call logs, keep machine state."""
        self.probe_log.clear()
        self.install_log.clear()
        self.env_writes.clear()
        self.path_prepends.clear()
