# tests/adapters/test_subprocess_runner.py
import os
import sys
from pathlib import Path

import pytest

from crossbuild.adapters.platform_opener import HostPlatformOpener
from crossbuild.adapters.subprocess_runner import (
    NOT_FOUND_RETURNCODE,
    SubprocessCommandRunner,
)
from crossbuild.core.domain.models import ToolchainCommand


def script(code: str, **kwargs) -> ToolchainCommand:
    return ToolchainCommand(executable=sys.executable, args=("-c", code), **kwargs)


class TestSubprocessCommandRunner:

    def test_captures_output_and_status(self):
        result = SubprocessCommandRunner().run(
            script("import sys; print('hello'); sys.stderr.write('warn'); sys.exit(3)")
        )

        assert result.returncode == 3
        assert result.stdout.strip() == "hello"
        assert result.stderr == "warn"
        assert not result.ok

    def test_runs_in_working_directory(self, tmp_path):
        result = SubprocessCommandRunner().run(script("import os; print(os.getcwd())", cwd=tmp_path))

        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_environment_override(self):
        runner = SubprocessCommandRunner(env={"CROSSBUILD_PROBE": "42"})

        result = runner.run(script("import os; print(os.environ['CROSSBUILD_PROBE'])"))

        assert result.stdout.strip() == "42"

    def test_missing_executable_is_a_result_not_an_exception(self):
        command = ToolchainCommand(executable="crossbuild-no-such-tool-xyz")

        result = SubprocessCommandRunner().run(command)

        assert result.returncode == NOT_FOUND_RETURNCODE
        assert "not found" in result.stderr

    def test_locate(self):
        runner = SubprocessCommandRunner(env={"PATH": os.path.dirname(sys.executable)})

        assert runner.locate(os.path.basename(sys.executable)) is not None
        assert runner.locate("crossbuild-no-such-tool-xyz") is None


class TestHostPlatformOpener:

    @pytest.mark.parametrize("system,argv", [
        ("Linux", ["xdg-open", "app.html"]),
        ("Darwin", ["open", "app.html"]),
        ("Windows", ["cmd", "/c", "start", "", "app.html"]),
    ])
    def test_open_command_per_os(self, system, argv):
        command = HostPlatformOpener(system=system).open_command(Path("app.html"))
        assert command.argv == argv

    def test_defaults_to_the_host(self):
        assert HostPlatformOpener().system
