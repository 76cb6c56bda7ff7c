"""
Tests for the probe service — present/absent classification.
"""

from toolcheck.adapters.mock import FakeEnvironment
from toolcheck.adapters.system import SystemEnvironment
from toolcheck.core.models.requirement import Requirement
from toolcheck.core.services.probe import env_var_is_set, first_line, probe

LLVM = Requirement(
    id="llvm",
    name="LLVM/Clang",
    cli="clang",
    install_dirs=[r"%ProgramFiles%\LLVM\bin"],
    env_var="LIBCLANG_PATH",
)


def _env() -> FakeEnvironment:
    return FakeEnvironment(process_env={"ProgramFiles": r"C:\Program Files"})


class TestProbe:
    def test_present_on_path(self):
        env = _env()
        env.add_tool(r"C:\LLVM\bin\clang.exe", "clang version 17.0.6\nTarget: x86_64", on_path=True)
        result = probe(LLVM, env)
        assert result.outcome.present
        assert result.outcome.detail == "clang version 17.0.6"
        assert result.outcome.path == r"C:\LLVM\bin\clang.exe"
        assert result.found_dir is None

    def test_present_in_install_dir(self):
        env = _env()
        env.add_tool(r"C:\Program Files\LLVM\bin\clang.exe", "clang version 17.0.6")
        result = probe(LLVM, env)
        assert result.outcome.present
        assert result.found_dir == r"C:\Program Files\LLVM\bin"

    def test_probe_does_not_touch_search_path(self):
        env = _env()
        env.add_tool(r"C:\Program Files\LLVM\bin\clang.exe", "clang version 17.0.6")
        probe(LLVM, env)
        assert env.path_prepends == []
        assert env.env_writes == []
        assert env.install_log == []

    def test_absent_everywhere(self):
        result = probe(LLVM, _env())
        assert not result.outcome.present
        assert result.outcome.path is None
        assert "not found" in result.outcome.detail

    def test_empty_version_output_is_absent(self):
        env = _env()
        env.add_tool(r"C:\LLVM\bin\clang.exe", "", on_path=True)
        result = probe(LLVM, env)
        assert not result.outcome.present
        assert result.outcome.path == r"C:\LLVM\bin\clang.exe"
        assert "no version" in result.outcome.detail

    def test_whitespace_only_output_is_absent(self):
        env = _env()
        env.add_tool(r"C:\LLVM\bin\clang.exe", "  \n\n", on_path=True)
        assert not probe(LLVM, env).outcome.present

    def test_nonzero_exit_is_absent(self):
        env = _env()
        env.add_tool(r"C:\LLVM\bin\clang.exe", "clang: error", exit_code=1, on_path=True)
        result = probe(LLVM, env)
        assert not result.outcome.present
        assert "code 1" in result.outcome.detail

    def test_install_dir_absent_tool_reports_no_found_dir(self):
        env = _env()
        env.add_tool(r"C:\Program Files\LLVM\bin\clang.exe", "", exit_code=1)
        result = probe(LLVM, env)
        assert not result.outcome.present
        assert result.found_dir is None

    def test_probe_exception_is_absent(self):
        class BrokenEnvironment(FakeEnvironment):
            def run_capture(self, cmd, args):
                raise PermissionError("access denied")

        env = BrokenEnvironment()
        env.add_tool(r"C:\LLVM\bin\clang.exe", "clang version 17", on_path=True)
        result = probe(LLVM, env)
        assert not result.outcome.present
        assert "could not run" in result.outcome.detail

    def test_unreadable_install_dir_is_absent(self):
        req = Requirement(
            id="x", name="X", cli="nothere", install_dirs=["/" + "a" * 5000],
        )
        env = SystemEnvironment(environ={"PATH": "/nonexistent"})
        result = probe(req, env)
        assert not result.outcome.present
        assert result.outcome.detail == "nothere not found"
        assert result.found_dir is None

    def test_custom_version_args(self):
        req = Requirement(id="nsis", name="NSIS", cli="makensis", version_args=["/VERSION"])
        env = _env()
        env.add_tool(r"C:\NSIS\makensis.exe", "v3.09", on_path=True)
        probe(req, env)
        assert env.probe_log == [[r"C:\NSIS\makensis.exe", "/VERSION"]]

    def test_carries_requirement_identity(self):
        req = LLVM.model_copy(update={"severity": "optional"})
        outcome = probe(req, _env()).outcome
        assert outcome.id == "llvm"
        assert outcome.name == "LLVM/Clang"
        assert outcome.severity == "optional"
        assert outcome.env_var == "LIBCLANG_PATH"

    def test_idempotent(self):
        env = _env()
        env.add_tool(r"C:\LLVM\bin\clang.exe", "clang version 17.0.6", on_path=True)
        assert probe(LLVM, env).outcome == probe(LLVM, env).outcome


class TestEnvVarIsSet:
    def test_no_variable_expected(self):
        req = Requirement(id="git", name="Git", cli="git")
        assert env_var_is_set(req, _env())

    def test_unset(self):
        assert not env_var_is_set(LLVM, _env())

    def test_user_scope(self):
        env = FakeEnvironment(user_env={"LIBCLANG_PATH": r"C:\LLVM\bin"})
        assert env_var_is_set(LLVM, env)

    def test_process_scope(self):
        env = FakeEnvironment(process_env={"LIBCLANG_PATH": r"C:\LLVM\bin"})
        assert env_var_is_set(LLVM, env)

    def test_empty_value_counts_as_unset(self):
        env = FakeEnvironment(user_env={"LIBCLANG_PATH": ""})
        assert not env_var_is_set(LLVM, env)


class TestFirstLine:
    def test_skips_blank_lines(self):
        assert first_line("\n\n  cmake version 3.29.0  \nmore") == "cmake version 3.29.0"

    def test_empty(self):
        assert first_line("") == ""
