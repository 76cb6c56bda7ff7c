"""
Check use case — detect, optionally fix, re-verify, report.

``check`` is the core contract. ``run_check`` wraps it for entry
points: it loads toolcheck.yml, builds the catalog and turns the two
abort conditions (bad config, unusable shell) into an error result
instead of a traceback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from toolcheck.adapters.base import EnvironmentProvider
from toolcheck.core.config.loader import build_catalog, find_config_file, load_config
from toolcheck.core.data.catalog import default_catalog
from toolcheck.core.errors import ConfigError, FatalPreconditionError
from toolcheck.core.models.options import CheckOptions
from toolcheck.core.models.report import Report, RequirementOutcome
from toolcheck.core.models.requirement import PACKAGE_MANAGERS, Requirement
from toolcheck.core.services.env_fix import fix_env_vars, fix_installs
from toolcheck.core.services.probe import probe
from toolcheck.core.services.remediation import env_var_hints, remediation_blocks

logger = logging.getLogger(__name__)

# Exit code for conditions outside the checker's model
EXIT_FATAL = 2


def check(
    options: CheckOptions | None = None,
    provider: EnvironmentProvider | None = None,
    catalog: list[Requirement] | None = None,
    package_managers: list[str] | None = None,
) -> Report:
    """Check every requirement in the catalog and build a Report.

    Args:
        options: Check flags (default: report only, no fixes).
        provider: Environment provider (default: the real machine).
        catalog: Requirements in check order (default: built-in catalog).
        package_managers: Preference order for remediation and installs.

    Returns:
        Report with per-requirement outcomes and remediation.

    Raises:
        FatalPreconditionError: If the provider cannot run a shell.
    """
    options = options or CheckOptions()
    if provider is None:
        from toolcheck.adapters.system import SystemEnvironment

        provider = SystemEnvironment()
    if catalog is None:
        catalog = default_catalog()
    managers = list(package_managers or PACKAGE_MANAGERS)

    if not provider.shell_ok():
        raise FatalPreconditionError(
            f"The {provider.name} environment cannot run basic shell commands."
        )

    outcomes: list[RequirementOutcome] = []
    for req in catalog:
        result = probe(req, provider)
        if result.found_dir:
            provider.prepend_search_path(result.found_dir)
        state = "present" if result.outcome.present else "absent"
        logger.debug("%s: %s (%s)", req.name, state, result.outcome.detail)
        outcomes.append(result.outcome)

    report = Report()
    if options.auto_fix:
        outcomes, attempts = fix_installs(catalog, outcomes, provider, managers)
        report.fixes.extend(attempts)
    if options.fixes_env:
        outcomes, attempts = fix_env_vars(outcomes, provider)
        report.fixes.extend(attempts)

    report.outcomes = outcomes
    report.remediation = remediation_blocks(catalog, outcomes, managers)
    report.env_hints = env_var_hints(outcomes, provider)

    logger.info(
        "Checked %d requirement(s): %d missing, success=%s",
        len(outcomes), len(report.missing), report.success,
    )
    return report


@dataclass
class CheckRun:
    """Result of the check use case as seen by an entry point."""

    report: Report | None = None
    config_path: Path | None = None
    error: str | None = None
    exit_code: int = 0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.error:
            result["error"] = self.error
            return result
        assert self.report is not None
        result = self.report.to_dict()
        result["config_path"] = str(self.config_path) if self.config_path else None
        return result


@dataclass
class CatalogView:
    """The effective catalog after applying toolcheck.yml."""

    requirements: list[Requirement] = field(default_factory=list)
    package_managers: list[str] = field(default_factory=list)
    config_path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "package_managers": self.package_managers,
            "requirements": [req.model_dump() for req in self.requirements],
        }


def load_catalog(config_path: Path | None = None) -> CatalogView:
    """Load toolcheck.yml (if any) and build the effective catalog.

    Raises:
        ConfigError: If the configuration is invalid.
    """
    if config_path is None:
        config_path = find_config_file()
    config = load_config(config_path)
    return CatalogView(
        requirements=build_catalog(config),
        package_managers=list(config.package_managers),
        config_path=config_path,
    )


def run_check(
    options: CheckOptions | None = None,
    config_path: Path | None = None,
    provider: EnvironmentProvider | None = None,
) -> CheckRun:
    """Run the check with configuration loaded from disk.

    Never raises for config or precondition failures; those come back
    as ``error`` with ``exit_code == EXIT_FATAL``.
    """
    run = CheckRun()

    try:
        view = load_catalog(config_path)
    except ConfigError as e:
        run.error = str(e)
        run.exit_code = EXIT_FATAL
        return run
    run.config_path = view.config_path

    try:
        report = check(
            options=options,
            provider=provider,
            catalog=view.requirements,
            package_managers=view.package_managers,
        )
    except FatalPreconditionError as e:
        logger.error("Fatal: %s", e)
        run.error = str(e)
        run.exit_code = EXIT_FATAL
        return run

    run.report = report
    run.exit_code = report.exit_code
    return run
