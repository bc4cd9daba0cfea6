# crossbuild/core/use_cases/build_app.py
import time
from pathlib import Path
from typing import List

import structlog

from crossbuild.core.domain.exceptions import DomainError
from crossbuild.core.domain.models import (
    ALL_TARGETS,
    BuildOutcome,
    BuildRequest,
    CleanupScope,
    PipelineState,
    Target,
)
from crossbuild.core.ports.command_runner import ICommandRunner
from crossbuild.core.use_cases.build_directory import BuildDirectory
from crossbuild.core.use_cases.pipelines import PIPELINES, TargetPipeline, validate_request
from crossbuild.shared.config import BuildConfig

logger = structlog.get_logger()


class BuildApp:
    """
    Use Case: Builds a user's source file for one target, or for all of them.

    Responsibilities:
    1. Fix the debug flag into an immutable config for the pipeline.
    2. Pick the pipeline for the requested target.
    3. For `all`, isolate failures so every target is still attempted.
    4. Reset the build directory on an explicit clean.
    """

    def __init__(self, config: BuildConfig, runner: ICommandRunner):
        self.config = config
        self.runner = runner

    def pipeline_for(self, request: BuildRequest) -> TargetPipeline:
        config = self.config.model_copy(update={"debug": request.debug})
        return PIPELINES[request.target](config, self.runner)

    def execute(self, request: BuildRequest) -> BuildOutcome:
        """
        Runs a single target pipeline.

        Raises:
            DomainError: Whatever aborted the pipeline.
        """
        return self.pipeline_for(request).run(request)

    def execute_all(self, source_path: Path, debug: bool = False) -> List[BuildOutcome]:
        """
        Runs Native, Web, iOS and tvOS in sequence.

        A failing target is recorded and the next one still runs. An unusable
        source file is rejected once, up front, since every target would fail
        on it.
        """
        validate_request(BuildRequest(target=Target.NATIVE, source_path=source_path, debug=debug))

        outcomes = []
        for target in ALL_TARGETS:
            request = BuildRequest(target=target, source_path=source_path, debug=debug)
            pipeline = self.pipeline_for(request)
            started = time.time()
            try:
                outcomes.append(pipeline.run(request))
            except DomainError as e:
                logger.error("target_build_failed", target=target.value, error=e.message, code=e.code)
                outcomes.append(
                    BuildOutcome(
                        target=target,
                        state=PipelineState.ABORTED,
                        error=e.message,
                        error_code=e.code,
                        failed_step=pipeline.failed_step,
                        duration=time.time() - started,
                        history=list(pipeline.history),
                    )
                )

        failed = [o.target.value for o in outcomes if not o.ok]
        logger.info("build_all_finished", succeeded=len(outcomes) - len(failed), failed=failed)
        return outcomes

    def clean(self) -> List[Path]:
        """Full reset: every intermediate and final artifact of every target."""
        return BuildDirectory(self.config).cleanup(CleanupScope.FULL)
