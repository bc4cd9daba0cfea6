# crossbuild/core/ports/command_runner.py
from typing import Optional, Protocol

from crossbuild.core.domain.models import CommandResult, ToolchainCommand


class ICommandRunner(Protocol):
    """
    Port for spawning external toolchain processes.
    Implementations:
    - SubprocessCommandRunner (real processes)
    - Scripted fakes in the test suite (canned exit statuses, no toolchain needed)
    """

    def run(self, command: ToolchainCommand) -> CommandResult:
        """
        Runs the command to completion and returns its exit status.

        Captured commands return stdout/stderr in the result; interactive
        commands inherit the terminal and return empty streams.
        A missing executable is reported as a non-zero result, never raised.
        """
        ...

    def locate(self, executable: str) -> Optional[str]:
        """Returns the resolved path of an executable, or None if it is not available."""
        ...
