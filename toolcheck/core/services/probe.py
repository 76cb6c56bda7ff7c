"""
Probe service — side-effect-free detection of one Requirement.

Resolution order:
    1. the executable on the provider's search path
    2. each of the requirement's well-known install directories

A resolved executable is then asked for its identity with
``version_args``. The tool is Present only if that probe exits 0 and
prints something. Every failure along the way is an Absent outcome,
never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from toolcheck.adapters.base import EnvironmentProvider
from toolcheck.core.models.report import RequirementOutcome
from toolcheck.core.models.requirement import Requirement

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    """Outcome of a probe plus where the tool was found.

    ``found_dir`` is set only when the tool is present AND was found in
    an install directory rather than on the search path. The caller
    decides whether to prepend it to the search path; the probe never
    does.
    """

    outcome: RequirementOutcome
    found_dir: str | None = None


def probe(req: Requirement, env: EnvironmentProvider) -> ProbeResult:
    """Classify one requirement as present or absent."""
    path = env.resolve_executable(req.cli)
    found_dir: str | None = None

    if path is None:
        for raw in req.install_dirs:
            directory = env.expand(raw)
            path = env.find_in_dir(directory, req.cli)
            if path:
                found_dir = directory
                logger.debug("%s found outside PATH in %s", req.cli, directory)
                break

    base = {
        "id": req.id,
        "name": req.name,
        "severity": req.severity,
        "env_var": req.env_var,
        "env_var_set": env_var_is_set(req, env),
    }

    if path is None:
        return ProbeResult(RequirementOutcome(**base, detail=f"{req.cli} not found"))

    try:
        code, output = env.run_capture(path, req.version_args)
    except Exception as e:
        logger.debug("Probe of %s failed: %s", path, e)
        return ProbeResult(
            RequirementOutcome(**base, path=path, detail=f"{req.cli} could not run"),
        )

    banner = first_line(output)
    if code != 0:
        detail = f"{req.cli} exited with code {code}"
    elif not banner:
        detail = f"{req.cli} printed no version"
    else:
        return ProbeResult(
            RequirementOutcome(**base, present=True, path=path, detail=banner),
            found_dir=found_dir,
        )

    return ProbeResult(RequirementOutcome(**base, path=path, detail=detail))


def env_var_is_set(req: Requirement, env: EnvironmentProvider) -> bool:
    """Whether the requirement's variable is set at process or user scope."""
    if req.env_var is None:
        return True
    return bool(
        env.get_env_var("process", req.env_var)
        or env.get_env_var("user", req.env_var)
    )


def first_line(output: str) -> str:
    """First non-blank line of probe output, stripped."""
    for line in output.splitlines():
        if line.strip():
            return line.strip()
    return ""
