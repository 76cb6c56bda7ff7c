"""
Domain models — Pydantic types for the prerequisite checker.

All models are re-exported here for convenient access:

    from toolcheck.core.models import Requirement, CheckOptions, Report
"""

from toolcheck.core.models.config import ToolcheckConfig
from toolcheck.core.models.options import CheckOptions
from toolcheck.core.models.report import (
    FixAttempt,
    RemediationBlock,
    Report,
    RequirementOutcome,
)
from toolcheck.core.models.requirement import Remediation, Requirement, Severity

__all__ = [
    # config.py
    "ToolcheckConfig",
    # options.py
    "CheckOptions",
    # report.py
    "FixAttempt",
    "RemediationBlock",
    "Report",
    "RequirementOutcome",
    # requirement.py
    "Remediation",
    "Requirement",
    "Severity",
]
