"""
Check options — the single configuration object for one check run.
"""

from __future__ import annotations

from pydantic import BaseModel, model_validator


class CheckOptions(BaseModel):
    """Flags recognised by ``check()``.

    ``set_env_only`` is a strictly narrower fix mode than ``auto_fix``:
    it only writes environment variables and never runs an installer.
    The two are mutually exclusive.
    """

    quiet: bool = False
    auto_fix: bool = False
    set_env_only: bool = False

    @model_validator(mode="after")
    def _exclusive_fix_modes(self) -> CheckOptions:
        if self.auto_fix and self.set_env_only:
            raise ValueError("auto_fix and set_env_only are mutually exclusive")
        return self

    @property
    def fixes_env(self) -> bool:
        """Whether missing environment variables may be written."""
        return self.auto_fix or self.set_env_only
