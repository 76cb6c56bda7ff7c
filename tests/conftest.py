"""
Shared test fixtures — a fake Windows machine with the build toolchain.
"""

from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from toolcheck.adapters.mock import FakeEnvironment

WINDOWS_ENV = {
    "ProgramFiles": r"C:\Program Files",
    "ProgramFiles(x86)": r"C:\Program Files (x86)",
    "LOCALAPPDATA": r"C:\Users\dev\AppData\Local",
    "USERPROFILE": r"C:\Users\dev",
}

# cli -> (default install location, version banner)
TOOLS = {
    "git": (r"C:\Program Files\Git\cmd\git.exe", "git version 2.44.0.windows.1"),
    "rustc": (r"C:\Users\dev\.cargo\bin\rustc.exe", "rustc 1.77.0 (aedd173a2 2024-03-17)"),
    "cargo": (r"C:\Users\dev\.cargo\bin\cargo.exe", "cargo 1.77.0 (3fe68eabf 2024-02-29)"),
    "clang": (r"C:\Program Files\LLVM\bin\clang.exe", "clang version 17.0.6\nTarget: x86_64-pc-windows-msvc"),
    "cmake": (r"C:\Program Files\CMake\bin\cmake.exe", "cmake version 3.29.0\n\nCMake suite maintained by Kitware"),
    "node": (r"C:\Program Files\nodejs\node.exe", "v20.11.1"),
    "pnpm": (r"C:\Users\dev\AppData\Local\pnpm\pnpm.exe", "8.15.4"),
    "vswhere": (
        r"C:\Program Files (x86)\Microsoft Visual Studio\Installer\vswhere.exe",
        "17.9.2",
    ),
    "makensis": (r"C:\Program Files (x86)\NSIS\makensis.exe", "v3.09"),
}

WINGET = r"C:\Users\dev\AppData\Local\Microsoft\WindowsApps\winget.exe"
LLVM_BIN = r"C:\Program Files\LLVM\bin"


@pytest.fixture
def make_env() -> Callable[..., FakeEnvironment]:
    """Factory for a fake machine.

    Args (all keyword):
        missing: cli names that are not installed at all.
        on_path: whether installed tools are on PATH (default True);
            when False they only exist in their default install dirs.
        libclang: whether LIBCLANG_PATH is set at user scope.
        winget: whether winget is available.
    """

    def _make(
        missing: Iterable[str] = (),
        on_path: bool = True,
        libclang: bool = True,
        winget: bool = False,
    ) -> FakeEnvironment:
        user_env = {"LIBCLANG_PATH": LLVM_BIN} if libclang else {}
        env = FakeEnvironment(
            search_path=[r"C:\Windows\System32"],
            process_env=dict(WINDOWS_ENV),
            user_env=user_env,
        )
        skip = set(missing)
        for cli, (path, banner) in TOOLS.items():
            if cli in skip:
                continue
            env.add_tool(path, banner, on_path=on_path)
        if winget:
            env.add_tool(WINGET, "v1.7.10861", on_path=True)
        env.reset_logs()
        return env

    return _make


@pytest.fixture
def full_env(make_env) -> FakeEnvironment:
    """Every tool installed, on PATH, with LIBCLANG_PATH set."""
    return make_env()


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch) -> Path:
    """Run from an empty directory so no toolcheck.yml is discovered."""
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work
