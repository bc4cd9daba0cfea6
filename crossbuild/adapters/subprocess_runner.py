# crossbuild/adapters/subprocess_runner.py
import os
import shutil
import subprocess
from typing import Dict, Optional

import structlog

from crossbuild.core.domain.models import CommandResult, ToolchainCommand
from crossbuild.core.ports.command_runner import ICommandRunner

logger = structlog.get_logger()

# Shell conventions for unrunnable commands
NOT_FOUND_RETURNCODE = 127
NOT_EXECUTABLE_RETURNCODE = 126


class SubprocessCommandRunner(ICommandRunner):
    """
    Concrete Command Runner spawning real processes.

    Blocks until the child exits; there is no timeout, so a hung toolchain
    hangs the build.
    """

    def __init__(self, env: Optional[Dict[str, str]] = None):
        self.env = env

    def _environment(self) -> Dict[str, str]:
        env = os.environ.copy()
        if self.env:
            env.update(self.env)
        return env

    def run(self, command: ToolchainCommand) -> CommandResult:
        cwd = str(command.cwd) if command.cwd else None
        logger.debug("process_spawn", cmd=command.display, cwd=cwd, interactive=command.interactive)

        try:
            if command.interactive:
                proc = subprocess.run(command.argv, cwd=cwd, env=self._environment(), check=False)
                return CommandResult(returncode=proc.returncode)

            proc = subprocess.run(
                command.argv,
                cwd=cwd,
                env=self._environment(),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError:
            return CommandResult(
                returncode=NOT_FOUND_RETURNCODE,
                stderr=f"{command.executable}: command not found",
            )
        except PermissionError as e:
            return CommandResult(returncode=NOT_EXECUTABLE_RETURNCODE, stderr=str(e))

        return CommandResult(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )

    def locate(self, executable: str) -> Optional[str]:
        path = self._environment().get("PATH")
        return shutil.which(executable, path=path)
