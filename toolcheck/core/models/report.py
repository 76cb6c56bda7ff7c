"""
Report models — the outcome of one check run.

Reports are derived per invocation and never persisted. They carry no
timestamps or durations: two runs against an unchanged machine must
produce identical reports.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from toolcheck.core.models.requirement import Severity


class RequirementOutcome(BaseModel):
    """Present/absent classification of one Requirement."""

    id: str
    name: str
    severity: Severity = "required"
    present: bool = False
    detail: str = ""                # version banner, or why it is absent
    path: str | None = None         # resolved executable
    env_var: str | None = None
    env_var_set: bool = True        # True when no variable is expected

    @property
    def required(self) -> bool:
        return self.severity == "required"

    @property
    def env_var_missing(self) -> bool:
        """Tool is usable but its expected variable is unset."""
        return self.present and self.env_var is not None and not self.env_var_set


class FixAttempt(BaseModel):
    """Record of one mutation attempted during a fix pass.

    Like an adapter receipt: failures are captured here, not raised.
    """

    requirement: str
    kind: Literal["install", "env_var"]
    status: Literal["ok", "skipped", "failed"] = "ok"
    command: str = ""
    exit_code: int | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, requirement: str, kind: str, **kwargs: Any) -> FixAttempt:
        """Create a success record."""
        return cls(requirement=requirement, kind=kind, status="ok", **kwargs)

    @classmethod
    def failure(
        cls, requirement: str, kind: str, detail: str, **kwargs: Any,
    ) -> FixAttempt:
        """Create a failure record."""
        return cls(
            requirement=requirement, kind=kind, status="failed",
            detail=detail, **kwargs,
        )

    @classmethod
    def skip(
        cls, requirement: str, kind: str, reason: str = "", **kwargs: Any,
    ) -> FixAttempt:
        """Create a skip record."""
        return cls(
            requirement=requirement, kind=kind, status="skipped",
            detail=reason, **kwargs,
        )


class RemediationBlock(BaseModel):
    """Install commands for every still-absent tool, for one manager."""

    manager: str
    commands: list[str] = Field(default_factory=list)


class Report(BaseModel):
    """Consolidated result of ``check()``."""

    outcomes: list[RequirementOutcome] = Field(default_factory=list)
    remediation: list[RemediationBlock] = Field(default_factory=list)
    env_hints: list[str] = Field(default_factory=list)
    fixes: list[FixAttempt] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        """True iff every hard-required item is present."""
        return all(o.present for o in self.outcomes if o.required)

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    @property
    def missing(self) -> list[RequirementOutcome]:
        """Absent outcomes, required and optional, in catalog order."""
        return [o for o in self.outcomes if not o.present]

    def get(self, requirement_id: str) -> RequirementOutcome | None:
        """Look up an outcome by requirement id."""
        for outcome in self.outcomes:
            if outcome.id == requirement_id:
                return outcome
        return None

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump()
        data["success"] = self.success
        data["exit_code"] = self.exit_code
        return data
