"""
Built-in requirement catalog — what a Windows build of the app needs.

Pure data, no logic. Order matters: requirements are probed and
reported in declaration order.

Install directories use ``%VAR%`` and ``~`` references; the
environment provider expands them at probe time.
"""

from __future__ import annotations

from typing import Any

from toolcheck.core.models.requirement import Requirement


def _winget(package_id: str) -> dict[str, Any]:
    return {
        "manager": "winget",
        "command": [
            "winget", "install", "--id", package_id, "-e",
            "--accept-source-agreements", "--accept-package-agreements",
        ],
    }


def _choco(package: str) -> dict[str, Any]:
    return {"manager": "choco", "command": ["choco", "install", package, "-y"]}


def _scoop(package: str) -> dict[str, Any]:
    return {"manager": "scoop", "command": ["scoop", "install", package]}


CATALOG: list[dict[str, Any]] = [

    # ── Source control ──────────────────────────────────────────

    {
        "id": "git",
        "name": "Git",
        "cli": "git",
        "install_dirs": [r"%ProgramFiles%\Git\cmd"],
        "remediation": [_winget("Git.Git"), _choco("git"), _scoop("git")],
    },

    # ── Native toolchain ────────────────────────────────────────

    {
        "id": "rust",
        "name": "Rust toolchain",
        "cli": "rustc",
        "install_dirs": [r"~\.cargo\bin"],
        "remediation": [
            _winget("Rustlang.Rustup"), _choco("rustup.install"), _scoop("rustup"),
        ],
    },
    {
        "id": "cargo",
        "name": "Cargo",
        "cli": "cargo",
        "install_dirs": [r"~\.cargo\bin"],
        "remediation": [
            _winget("Rustlang.Rustup"), _choco("rustup.install"), _scoop("rustup"),
        ],
    },
    {
        "id": "llvm",
        "name": "LLVM/Clang",
        "cli": "clang",
        "install_dirs": [r"%ProgramFiles%\LLVM\bin"],
        # bindgen locates libclang.dll through this variable
        "env_var": "LIBCLANG_PATH",
        "remediation": [_winget("LLVM.LLVM"), _choco("llvm"), _scoop("llvm")],
    },
    {
        "id": "cmake",
        "name": "CMake",
        "cli": "cmake",
        "install_dirs": [r"%ProgramFiles%\CMake\bin"],
        "remediation": [_winget("Kitware.CMake"), _choco("cmake"), _scoop("cmake")],
    },

    # ── Frontend ────────────────────────────────────────────────

    {
        "id": "node",
        "name": "Node.js",
        "cli": "node",
        "install_dirs": [r"%ProgramFiles%\nodejs"],
        "remediation": [
            _winget("OpenJS.NodeJS.LTS"), _choco("nodejs-lts"), _scoop("nodejs-lts"),
        ],
    },
    {
        "id": "pnpm",
        "name": "pnpm",
        "cli": "pnpm",
        "install_dirs": [r"%LOCALAPPDATA%\pnpm"],
        "remediation": [_winget("pnpm.pnpm"), _choco("pnpm"), _scoop("pnpm")],
    },

    # ── Bundling (informational) ────────────────────────────────

    {
        "id": "msvc",
        "name": "Visual Studio Build Tools",
        "cli": "vswhere",
        "version_args": [
            "-latest", "-products", "*", "-property", "catalog_productDisplayVersion",
        ],
        "install_dirs": [r"%ProgramFiles(x86)%\Microsoft Visual Studio\Installer"],
        "remediation": [
            _winget("Microsoft.VisualStudio.2022.BuildTools"),
            _choco("visualstudio2022buildtools"),
        ],
        "severity": "optional",
    },
    {
        "id": "nsis",
        "name": "NSIS",
        "cli": "makensis",
        "version_args": ["/VERSION"],
        "install_dirs": [r"%ProgramFiles(x86)%\NSIS"],
        "remediation": [_winget("NSIS.NSIS"), _choco("nsis")],
        "severity": "optional",
    },
]


def default_catalog() -> list[Requirement]:
    """Build a fresh list of Requirement models from ``CATALOG``."""
    return [Requirement.model_validate(entry) for entry in CATALOG]
