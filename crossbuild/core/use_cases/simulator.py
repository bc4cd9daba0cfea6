# crossbuild/core/use_cases/simulator.py
from crossbuild.core.domain.models import CommandResult, ToolchainCommand
from crossbuild.core.ports.command_runner import ICommandRunner
from crossbuild.core.use_cases.toolchain import ToolchainInvoker
from crossbuild.shared.config import BuildConfig


class SimulatorControl:
    """Use Case: Passes device management commands straight to the project tool."""

    def __init__(self, config: BuildConfig, runner: ICommandRunner):
        self.tool = config.project_tool
        self.invoker = ToolchainInvoker(runner)

    def _run(self, *args: str, interactive: bool = False) -> CommandResult:
        command = ToolchainCommand(
            executable=self.tool,
            args=("simulator", *args),
            interactive=interactive,
        )
        return self.invoker.run(command)

    def list_devices(self) -> CommandResult:
        return self._run("--list")

    def booted(self) -> CommandResult:
        return self._run("--booted")

    def open(self, device: str) -> CommandResult:
        return self._run("--open", device)

    def install(self, app_path: str) -> CommandResult:
        return self._run("--install", app_path)

    def launch(self, bundle_id: str) -> CommandResult:
        return self._run("--launch", bundle_id)

    def log(self, errors_only: bool = False) -> CommandResult:
        # Streams until interrupted
        return self._run("--log-errors" if errors_only else "--log", interactive=True)
