# crossbuild/core/use_cases/toolchain.py
from typing import Iterable, Optional, Type

import structlog

from crossbuild.core.domain.exceptions import ExternalToolFailureError, ToolNotFoundError
from crossbuild.core.domain.models import CommandResult, PipelineState, ToolchainCommand
from crossbuild.core.ports.command_runner import ICommandRunner
from crossbuild.core.use_cases.build_directory import write_text_atomic
from crossbuild.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

STDERR_TAIL = 500


class ToolchainInvoker:
    """
    Runs external toolchain commands one at a time and turns their exit
    status into domain errors.
    """

    def __init__(self, runner: ICommandRunner):
        self.runner = runner

    def probe(self, tools: Iterable[str], purpose: str = "") -> None:
        """
        Fails fast if any tool is not on the search path.
        Has no side effects, so it runs before the build directory is touched.
        """
        for tool in tools:
            if self.runner.locate(tool) is None:
                logger.error("tool_not_found", tool=tool)
                raise ToolNotFoundError(tool, purpose)

    def run(
        self,
        command: ToolchainCommand,
        step: Optional[PipelineState] = None,
        failure: Type[ExternalToolFailureError] = ExternalToolFailureError,
    ) -> CommandResult:
        """
        Runs ``command`` to completion.

        Raises:
            ExternalToolFailureError (or ``failure``): non-zero exit, or a
                successful exit that left no declared output behind.
        """
        step_name = step.value if step else None

        with tracer.start_as_current_span("toolchain.run") as span:
            span.set_attribute("toolchain.executable", command.executable)
            if step_name:
                span.set_attribute("toolchain.step", step_name)

            logger.info("toolchain_command", step=step_name, cmd=command.display)
            result = self.runner.run(command)
            span.set_attribute("toolchain.returncode", result.returncode)

        if not result.ok:
            # Log tail for visibility; the full stream stays on the exception
            tail = (result.stderr.strip() or result.stdout.strip())[-STDERR_TAIL:]
            logger.error(
                "toolchain_command_failed",
                step=step_name,
                cmd=command.display,
                returncode=result.returncode,
                stderr=tail,
            )
            raise failure(command.display, result.returncode, step=step_name, stderr=result.stderr)

        if command.output_path is not None:
            if command.stdout_to_output:
                write_text_atomic(command.output_path, result.stdout)
            elif not command.output_path.exists():
                raise failure(
                    command.display,
                    result.returncode,
                    step=step_name,
                    detail=f"did not produce '{command.output_path}'",
                )

        return result
