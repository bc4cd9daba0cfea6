# tests/core/test_launch_app.py
import pytest

from crossbuild.adapters.platform_opener import HostPlatformOpener
from crossbuild.core.domain.exceptions import ArtifactNotBuiltError, ExternalToolFailureError
from crossbuild.core.domain.models import Target
from crossbuild.core.use_cases.build_directory import BuildDirectory
from crossbuild.core.use_cases.launch_app import LaunchApp


@pytest.fixture
def directory(build_config):
    directory = BuildDirectory(build_config)
    directory.ensure()
    return directory


@pytest.fixture
def launcher(build_config, runner):
    return LaunchApp(build_config, runner, HostPlatformOpener(system="Linux"))


class TestLaunchApp:

    @pytest.mark.parametrize("target", list(Target))
    def test_nothing_built(self, launcher, runner, target):
        with pytest.raises(ArtifactNotBuiltError):
            launcher.execute(target)

        assert runner.calls == []

    def test_native_runs_in_build_directory(self, launcher, runner, directory):
        directory.native_executable.write_text("exe")

        launcher.execute(Target.NATIVE)

        (command,) = runner.calls
        assert command.executable == "./app"
        assert command.cwd == directory.root
        assert command.interactive

    def test_web_opens_page(self, launcher, runner, directory):
        directory.web_page.write_text("<html></html>")

        launcher.execute(Target.WEB)

        assert runner.calls[0].argv == ["xdg-open", str(directory.web_page)]

    def test_simulator_sequence(self, launcher, runner, directory, build_config):
        bundle = directory.app_bundle("ios")
        bundle.mkdir(parents=True)
        runner.respond("simple2d", "ok\n")

        result = launcher.execute(Target.IOS)

        assert [c.args for c in runner.calls] == [
            ("simulator", "--open", "iPhone XR"),
            ("simulator", "--install", str(bundle)),
            ("simulator", "--launch", build_config.app_bundle_id),
        ]
        assert result.stdout == "ok\nok\nok\n"

    def test_simulator_sequence_stops_at_first_failure(self, launcher, runner, directory):
        directory.app_bundle("tvos").mkdir(parents=True)
        runner.fail_when("simple2d", contains="--open")

        with pytest.raises(ExternalToolFailureError):
            launcher.execute(Target.TVOS)

        assert len(runner.calls) == 1
        assert runner.calls[0].args[-1] == "Apple TV 4K"
