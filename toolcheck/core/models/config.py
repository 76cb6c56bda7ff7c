"""
Toolcheck configuration model — the optional toolcheck.yml.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from toolcheck.core.models.requirement import PACKAGE_MANAGERS, Requirement


class ToolcheckConfig(BaseModel):
    """Tuning applied on top of the built-in catalog.

    An empty config reproduces the built-in catalog exactly.
    """

    package_managers: list[str] = Field(default_factory=lambda: list(PACKAGE_MANAGERS))
    skip: list[str] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)
    requirements: list[Requirement] = Field(default_factory=list)

    @field_validator("package_managers")
    @classmethod
    def _managers_unique(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("package_managers must name at least one manager")
        dupes = sorted({m for m in value if value.count(m) > 1})
        if dupes:
            raise ValueError(f"duplicate package managers: {', '.join(dupes)}")
        return value
