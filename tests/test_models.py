"""
Tests for domain models — requirements, options, reports.
"""

import pytest
from pydantic import ValidationError

from toolcheck.core.data.catalog import CATALOG, default_catalog
from toolcheck.core.models import (
    CheckOptions,
    FixAttempt,
    Remediation,
    RemediationBlock,
    Report,
    Requirement,
    RequirementOutcome,
)
from toolcheck.core.models.requirement import PACKAGE_MANAGERS


class TestRequirement:
    def test_minimal_requirement(self):
        req = Requirement(id="git", name="Git", cli="git")
        assert req.version_args == ["--version"]
        assert req.install_dirs == []
        assert req.env_var is None
        assert req.remediation == []
        assert req.required

    def test_optional_severity(self):
        req = Requirement(id="nsis", name="NSIS", cli="makensis", severity="optional")
        assert not req.required

    def test_invalid_severity(self):
        with pytest.raises(ValidationError):
            Requirement(id="x", name="X", cli="x", severity="sometimes")

    def test_remediation_for(self):
        req = Requirement(
            id="git",
            name="Git",
            cli="git",
            remediation=[
                Remediation(manager="winget", command=["winget", "install", "Git.Git"]),
                Remediation(manager="scoop", command=["scoop", "install", "git"]),
            ],
        )
        assert req.remediation_for("scoop").command == ["scoop", "install", "git"]
        assert req.remediation_for("choco") is None


class TestRemediation:
    def test_text_is_literal_command(self):
        rem = Remediation(manager="choco", command=["choco", "install", "llvm", "-y"])
        assert rem.text == "choco install llvm -y"

    def test_text_quotes_spaces(self):
        rem = Remediation(manager="x", command=["setx", "LIBCLANG_PATH", r"C:\Program Files\LLVM\bin"])
        assert rem.text == r'setx LIBCLANG_PATH "C:\Program Files\LLVM\bin"'


class TestCheckOptions:
    def test_defaults_are_report_only(self):
        opts = CheckOptions()
        assert not opts.quiet
        assert not opts.auto_fix
        assert not opts.set_env_only
        assert not opts.fixes_env

    def test_fix_modes_are_exclusive(self):
        with pytest.raises(ValidationError, match="mutually exclusive"):
            CheckOptions(auto_fix=True, set_env_only=True)

    def test_autofix_also_fixes_env(self):
        assert CheckOptions(auto_fix=True).fixes_env
        assert CheckOptions(set_env_only=True).fixes_env


class TestRequirementOutcome:
    def test_env_var_missing_only_when_present(self):
        absent = RequirementOutcome(id="llvm", name="LLVM", env_var="LIBCLANG_PATH", env_var_set=False)
        assert not absent.env_var_missing

        present = absent.model_copy(update={"present": True})
        assert present.env_var_missing

    def test_no_env_var_never_missing(self):
        o = RequirementOutcome(id="git", name="Git", present=True)
        assert not o.env_var_missing


class TestFixAttempt:
    def test_success(self):
        f = FixAttempt.success("cmake", "install", command="winget install cmake")
        assert f.ok
        assert not f.failed

    def test_failure(self):
        f = FixAttempt.failure("cmake", "install", detail="exit 1")
        assert f.failed
        assert f.detail == "exit 1"

    def test_skip(self):
        f = FixAttempt.skip("cmake", "install", reason="no manager")
        assert f.status == "skipped"
        assert f.detail == "no manager"


class TestReport:
    def _report(self, *outcomes: RequirementOutcome) -> Report:
        return Report(outcomes=list(outcomes))

    def test_empty_report_succeeds(self):
        assert Report().success
        assert Report().exit_code == 0

    def test_required_absent_fails(self):
        r = self._report(
            RequirementOutcome(id="git", name="Git", present=True),
            RequirementOutcome(id="node", name="Node.js", present=False),
        )
        assert not r.success
        assert r.exit_code == 1
        assert [o.id for o in r.missing] == ["node"]

    def test_optional_absent_still_succeeds(self):
        r = self._report(
            RequirementOutcome(id="git", name="Git", present=True),
            RequirementOutcome(id="nsis", name="NSIS", severity="optional"),
        )
        assert r.success
        assert len(r.missing) == 1

    def test_get(self):
        r = self._report(RequirementOutcome(id="git", name="Git", present=True))
        assert r.get("git").present
        assert r.get("nope") is None

    def test_to_dict(self):
        r = Report(
            outcomes=[RequirementOutcome(id="node", name="Node.js")],
            remediation=[RemediationBlock(manager="winget", commands=["winget install node"])],
        )
        d = r.to_dict()
        assert d["success"] is False
        assert d["exit_code"] == 1
        assert d["remediation"][0]["manager"] == "winget"
        assert d["outcomes"][0]["id"] == "node"


class TestCatalog:
    def test_declaration_order(self):
        ids = [req.id for req in default_catalog()]
        assert ids == [
            "git", "rust", "cargo", "llvm", "cmake", "node", "pnpm", "msvc", "nsis",
        ]

    def test_ids_unique(self):
        ids = [entry["id"] for entry in CATALOG]
        assert len(ids) == len(set(ids))

    def test_fresh_instances_each_call(self):
        first = default_catalog()
        first[0].install_dirs.append(r"D:\elsewhere")
        second = default_catalog()
        assert r"D:\elsewhere" not in second[0].install_dirs

    def test_every_required_tool_has_winget_remediation(self):
        for req in default_catalog():
            if req.required:
                rem = req.remediation_for("winget")
                assert rem is not None, req.id
                assert rem.command[0] == "winget"

    def test_remediation_managers_known(self):
        for req in default_catalog():
            for rem in req.remediation:
                assert rem.manager in PACKAGE_MANAGERS
                assert rem.command[0] == rem.manager

    def test_llvm_expects_libclang_path(self):
        llvm = next(r for r in default_catalog() if r.id == "llvm")
        assert llvm.env_var == "LIBCLANG_PATH"
