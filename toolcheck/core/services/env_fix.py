"""
Fix service — the only place that changes the machine.

Two passes, both strictly sequential:

    fix_installs   run one package-manager installer per absent required
                   tool, then re-probe that tool
    fix_env_vars   write the user-scope variable a present tool expects

Failures are captured in FixAttempt records and logged. They never
abort the pass and never turn a present tool absent.
"""

from __future__ import annotations

import logging

from toolcheck.adapters.base import EnvironmentProvider
from toolcheck.core.errors import EnvironmentWriteError, RemediationError
from toolcheck.core.models.report import FixAttempt, RequirementOutcome
from toolcheck.core.models.requirement import Requirement
from toolcheck.core.services.probe import probe
from toolcheck.core.services.remediation import env_var_value, select_installer

logger = logging.getLogger(__name__)


def fix_installs(
    catalog: list[Requirement],
    outcomes: list[RequirementOutcome],
    env: EnvironmentProvider,
    managers: list[str],
) -> tuple[list[RequirementOutcome], list[FixAttempt]]:
    """Attempt one install per absent hard-required requirement.

    Each installer runs at most once per call. When two requirements
    share an installer (rustc and cargo), the second one is only
    re-probed.

    Returns:
        (updated outcomes in the same order, fix attempts)
    """
    by_id = {req.id: req for req in catalog}
    updated: list[RequirementOutcome] = []
    attempts: list[FixAttempt] = []
    ran: dict[str, int] = {}

    for outcome in outcomes:
        req = by_id[outcome.id]
        if outcome.present or not req.required:
            updated.append(outcome)
            continue

        rem = select_installer(req, managers, env)
        if rem is None:
            logger.warning("No available package manager can install %s", req.name)
            attempts.append(FixAttempt.skip(
                req.id, "install", reason="no available package manager",
            ))
            updated.append(outcome)
            continue

        if rem.text in ran:
            result = probe(req, env)
            if result.found_dir:
                env.prepend_search_path(result.found_dir)
            updated.append(result.outcome)
            if result.outcome.present:
                attempts.append(FixAttempt.success(
                    req.id, "install", command=rem.text,
                    exit_code=ran[rem.text], detail=result.outcome.detail,
                ))
            else:
                attempts.append(FixAttempt.skip(
                    req.id, "install", reason="installer already ran this pass",
                    command=rem.text,
                ))
            continue

        logger.info("Installing %s via %s", req.name, rem.manager)
        try:
            code = env.run_install(rem.command)
        except RemediationError as e:
            logger.warning("Install of %s failed: %s", req.name, e)
            ran[rem.text] = -1
            attempts.append(FixAttempt.failure(
                req.id, "install", detail=str(e), command=rem.text,
            ))
            updated.append(outcome)
            continue

        ran[rem.text] = code
        if code != 0:
            logger.warning("Installer for %s exited with code %d", req.name, code)

        # Re-verify regardless of exit code: some managers return
        # non-zero for "already installed"
        result = probe(req, env)
        if result.found_dir:
            env.prepend_search_path(result.found_dir)
        updated.append(result.outcome)

        if result.outcome.present:
            attempts.append(FixAttempt.success(
                req.id, "install", command=rem.text,
                exit_code=code, detail=result.outcome.detail,
            ))
        else:
            attempts.append(FixAttempt.failure(
                req.id, "install",
                detail=f"still absent after install (exit {code})",
                command=rem.text, exit_code=code,
            ))

    return updated, attempts


def fix_env_vars(
    outcomes: list[RequirementOutcome],
    env: EnvironmentProvider,
) -> tuple[list[RequirementOutcome], list[FixAttempt]]:
    """Set the expected variable for every present tool that lacks it.

    The user-scope write comes first; the process copy is only updated
    once it succeeded.

    Returns:
        (updated outcomes in the same order, fix attempts)
    """
    updated: list[RequirementOutcome] = []
    attempts: list[FixAttempt] = []

    for outcome in outcomes:
        if not outcome.env_var_missing:
            updated.append(outcome)
            continue

        assert outcome.env_var is not None
        value = env_var_value(outcome)
        command = f"{outcome.env_var}={value}"
        try:
            env.set_env_var("user", outcome.env_var, value)
        except EnvironmentWriteError as e:
            logger.warning("Could not set %s: %s", outcome.env_var, e)
            attempts.append(FixAttempt.failure(
                outcome.id, "env_var", detail=str(e), command=command,
            ))
            updated.append(outcome)
            continue

        env.set_env_var("process", outcome.env_var, value)
        attempts.append(FixAttempt.success(outcome.id, "env_var", command=command))
        updated.append(outcome.model_copy(update={"env_var_set": True}))

    return updated, attempts
