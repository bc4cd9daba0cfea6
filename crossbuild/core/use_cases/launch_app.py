# crossbuild/core/use_cases/launch_app.py
import structlog

from crossbuild.core.domain.exceptions import ArtifactNotBuiltError
from crossbuild.core.domain.models import CommandResult, Target, ToolchainCommand
from crossbuild.core.ports.command_runner import ICommandRunner
from crossbuild.core.ports.platform_opener import IPlatformOpener
from crossbuild.core.use_cases.build_directory import BuildDirectory
from crossbuild.core.use_cases.toolchain import ToolchainInvoker
from crossbuild.shared.config import BuildConfig

logger = structlog.get_logger()


class LaunchApp:
    """
    Use Case: Starts a previously built app.

    Reads the same build directory the pipelines write to; nothing is
    spawned unless the target's final artifact exists.
    """

    def __init__(self, config: BuildConfig, runner: ICommandRunner, opener: IPlatformOpener):
        self.config = config
        self.directory = BuildDirectory(config)
        self.invoker = ToolchainInvoker(runner)
        self.opener = opener

    def execute(self, target: Target) -> CommandResult:
        artifact = self.directory.final_artifact(target)
        if not artifact.exists():
            logger.error("artifact_not_built", target=target.value, path=str(artifact))
            raise ArtifactNotBuiltError(target.value, artifact)

        logger.info("launching", target=target.value, artifact=str(artifact))

        if target == Target.NATIVE:
            command = ToolchainCommand(
                executable=f"./{artifact.name}",
                cwd=self.directory.root,
                interactive=True,
            )
            return self.invoker.run(command)

        if target == Target.WEB:
            return self.invoker.run(self.opener.open_command(artifact))

        return self._launch_on_simulator(target.value)

    def _launch_on_simulator(self, family: str) -> CommandResult:
        """Open the device, install the bundle, launch it. Stops at the first failure."""
        tool = self.config.project_tool
        sequence = [
            ("--open", self.config.simulator_device(family)),
            ("--install", str(self.directory.app_bundle(family))),
            ("--launch", self.config.app_bundle_id),
        ]

        output = []
        for flag, value in sequence:
            command = ToolchainCommand(executable=tool, args=("simulator", flag, value))
            output.append(self.invoker.run(command).stdout)
        return CommandResult(returncode=0, stdout="".join(output))
