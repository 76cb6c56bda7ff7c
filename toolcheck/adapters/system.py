"""
System environment — the real machine behind the provider protocol.

Search-path lookups and probes go through ``shutil.which`` and
``subprocess.run`` against a private copy of the environment mapping,
so in-process PATH changes are visible to later probes in the same run.

User-scope variables live in ``HKCU\\Environment`` on Windows and in
``~/.profile`` elsewhere.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import sys
from collections.abc import MutableMapping
from pathlib import Path

from toolcheck.adapters.base import EnvironmentProvider, Scope
from toolcheck.core.errors import EnvironmentWriteError, RemediationError
from toolcheck.core.observability.logging_config import TRANSCRIPT_LOGGER

logger = logging.getLogger(__name__)
transcript = logging.getLogger(TRANSCRIPT_LOGGER)

# Used when PATHEXT is unset
_DEFAULT_PATHEXT = ".COM;.EXE;.BAT;.CMD"

_WIN_VAR = re.compile(r"%([^%]+)%")
_PROFILE_EXPORT = re.compile(r'^\s*export\s+([A-Za-z_][A-Za-z0-9_]*)="?([^"\n]*)"?\s*$')

# HKCU subkey holding per-user environment variables
_USER_ENV_KEY = "Environment"


class SystemEnvironment(EnvironmentProvider):
    """Environment provider backed by the current machine.

    Args:
        environ: Environment mapping to read and update. Defaults to
            ``os.environ`` so that child processes inherit PATH changes.
        profile_path: Shell profile used for user-scope variables on
            non-Windows hosts (default: ``~/.profile``).
    """

    def __init__(
        self,
        environ: MutableMapping[str, str] | None = None,
        profile_path: Path | None = None,
    ):
        self._environ = environ if environ is not None else os.environ
        self._profile_path = profile_path or Path.home() / ".profile"

    @property
    def name(self) -> str:
        return "system"

    @property
    def is_windows(self) -> bool:
        return sys.platform == "win32"

    def shell_ok(self) -> bool:
        cmd = ["cmd", "/c", "echo ok"] if self.is_windows else ["sh", "-c", "echo ok"]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                env=dict(self._environ),
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Shell self-test failed: %s", e)
            return False
        return result.returncode == 0 and "ok" in result.stdout

    def expand(self, path: str) -> str:
        expanded = _WIN_VAR.sub(
            lambda m: self._environ.get(m.group(1), m.group(0)), path,
        )
        return os.path.expanduser(expanded)

    def resolve_executable(self, name: str) -> str | None:
        return shutil.which(name, path=self._environ.get("PATH", ""))

    def find_in_dir(self, directory: str, name: str) -> str | None:
        # Only the directory itself; shutil.which may also search the cwd
        if not os.path.isdir(directory):
            return None
        for candidate in self._candidate_names(name):
            path = os.path.join(directory, candidate)
            if os.path.isfile(path) and os.access(path, os.X_OK):
                return path
        return None

    def _candidate_names(self, name: str) -> list[str]:
        if not self.is_windows:
            return [name]
        pathext = self._environ.get("PATHEXT") or _DEFAULT_PATHEXT
        exts = [ext.lower() for ext in pathext.split(";") if ext]
        if os.path.splitext(name)[1].lower() in exts:
            return [name]
        return [name + ext for ext in exts]

    def run_capture(self, cmd: str, args: list[str]) -> tuple[int, str]:
        logger.debug("Probing: %s %s", cmd, " ".join(args))
        result = subprocess.run(
            [cmd, *args],
            capture_output=True,
            text=True,
            errors="replace",
            stdin=subprocess.DEVNULL,
            env=dict(self._environ),
        )
        # Some tools print their banner on stderr
        output = result.stdout if result.stdout.strip() else result.stderr
        transcript.debug("%s → exit %d\n%s", cmd, result.returncode, output.rstrip())
        return result.returncode, output or ""

    def run_install(self, command: list[str]) -> int:
        logger.info("Running installer: %s", subprocess.list2cmdline(command))
        try:
            result = subprocess.run(command, env=dict(self._environ))
        except (OSError, subprocess.SubprocessError) as e:
            raise RemediationError(f"Cannot run {command[0]}: {e}") from e
        return result.returncode

    # ── Environment variables ───────────────────────────────────

    def get_env_var(self, scope: Scope, name: str) -> str | None:
        if scope == "process":
            return self._environ.get(name) or None
        if self.is_windows:
            return _read_user_registry(name)
        return self._read_profile(name)

    def set_env_var(self, scope: Scope, name: str, value: str) -> None:
        if scope == "process":
            self._environ[name] = value
            return
        if self.is_windows:
            _write_user_registry(name, value)
        else:
            self._append_profile(name, value)
        logger.info("Set user environment variable %s=%s", name, value)

    def prepend_search_path(self, directory: str) -> None:
        current = self._environ.get("PATH", "")
        entries = current.split(os.pathsep) if current else []
        if directory in entries:
            return
        self._environ["PATH"] = os.pathsep.join([directory, *entries])
        logger.debug("Prepended %s to PATH", directory)

    # ── POSIX profile helpers ───────────────────────────────────

    def _read_profile(self, name: str) -> str | None:
        try:
            text = self._profile_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read %s: %s", self._profile_path, e)
            return None
        value = None
        for line in text.splitlines():
            m = _PROFILE_EXPORT.match(line)
            if m and m.group(1) == name:
                value = m.group(2)  # last assignment wins
        return value or None

    def _append_profile(self, name: str, value: str) -> None:
        try:
            with self._profile_path.open("a", encoding="utf-8") as fh:
                fh.write(f'\nexport {name}="{value}"\n')
        except OSError as e:
            raise EnvironmentWriteError(
                f"Cannot write {name} to {self._profile_path}: {e}"
            ) from e


# ── Windows registry helpers ────────────────────────────────────


def _read_user_registry(name: str) -> str | None:
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, _USER_ENV_KEY) as k:
            value, _ = winreg.QueryValueEx(k, name)
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Cannot read HKCU\\%s\\%s: %s", _USER_ENV_KEY, name, e)
        return None
    return str(value) or None


def _write_user_registry(name: str, value: str) -> None:
    import winreg

    try:
        with winreg.OpenKey(
            winreg.HKEY_CURRENT_USER, _USER_ENV_KEY, 0, winreg.KEY_SET_VALUE,
        ) as k:
            winreg.SetValueEx(k, name, 0, winreg.REG_EXPAND_SZ, value)
    except OSError as e:
        raise EnvironmentWriteError(
            f"Cannot write HKCU\\{_USER_ENV_KEY}\\{name}: {e}"
        ) from e
    _broadcast_environment_change()


def _broadcast_environment_change() -> None:
    """Tell running shells (Explorer) that user variables changed."""
    import ctypes

    HWND_BROADCAST = 0xFFFF
    WM_SETTINGCHANGE = 0x001A
    SMTO_ABORTIFHUNG = 0x0002
    result = ctypes.c_ulong()
    ok = ctypes.windll.user32.SendMessageTimeoutW(
        HWND_BROADCAST, WM_SETTINGCHANGE, 0, "Environment",
        SMTO_ABORTIFHUNG, 5000, ctypes.byref(result),
    )
    if not ok:
        logger.debug("WM_SETTINGCHANGE broadcast timed out")
