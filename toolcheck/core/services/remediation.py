"""
Remediation service — turn absent requirements into install commands.

Read-only: builds copy-pasteable command text and picks which
installer the fix step would run. Nothing here executes a command.
"""

from __future__ import annotations

import ntpath
import subprocess

from toolcheck.adapters.base import EnvironmentProvider
from toolcheck.core.models.report import RemediationBlock, RequirementOutcome
from toolcheck.core.models.requirement import Remediation, Requirement


def remediation_blocks(
    catalog: list[Requirement],
    outcomes: list[RequirementOutcome],
    managers: list[str],
) -> list[RemediationBlock]:
    """Group install commands for absent requirements by package manager.

    Managers follow the preference order, commands follow catalog order.
    Requirements sharing an installer (rustc and cargo) yield one command.
    """
    absent = {o.id for o in outcomes if not o.present}
    blocks: list[RemediationBlock] = []

    for manager in managers:
        commands: list[str] = []
        for req in catalog:
            if req.id not in absent:
                continue
            rem = req.remediation_for(manager)
            if rem and rem.text not in commands:
                commands.append(rem.text)
        if commands:
            blocks.append(RemediationBlock(manager=manager, commands=commands))

    return blocks


def select_installer(
    req: Requirement,
    managers: list[str],
    env: EnvironmentProvider,
) -> Remediation | None:
    """First remediation, in preference order, whose manager CLI resolves."""
    for manager in managers:
        rem = req.remediation_for(manager)
        if rem and env.resolve_executable(rem.command[0]):
            return rem
    return None


def env_var_value(outcome: RequirementOutcome) -> str:
    """Directory the requirement's variable should point at."""
    assert outcome.path is not None
    # ntpath splits on both separators
    return ntpath.dirname(outcome.path)


def env_var_hints(
    outcomes: list[RequirementOutcome],
    env: EnvironmentProvider,
) -> list[str]:
    """Commands that would set each missing variable for the current user."""
    hints: list[str] = []
    for outcome in outcomes:
        if not outcome.env_var_missing:
            continue
        assert outcome.env_var is not None
        value = env_var_value(outcome)
        if env.is_windows:
            hints.append(subprocess.list2cmdline(["setx", outcome.env_var, value]))
        else:
            hints.append(f'export {outcome.env_var}="{value}"')
    return hints
