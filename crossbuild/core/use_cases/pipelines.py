# crossbuild/core/use_cases/pipelines.py
import os
import shutil
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Type

import structlog

from crossbuild.core.domain.exceptions import (
    FileOperationError,
    InvalidRequestError,
    PlatformDependencyMissingError,
    ProjectBuildFailureError,
    ResourceMissingError,
)
from crossbuild.core.domain.models import (
    Artifact,
    ArtifactKind,
    BuildOutcome,
    BuildRequest,
    CleanupScope,
    CombinePart,
    PipelineState,
    Target,
    ToolchainCommand,
)
from crossbuild.core.ports.command_runner import ICommandRunner
from crossbuild.core.use_cases.assemble_library import LibraryAssembler
from crossbuild.core.use_cases.build_directory import BuildDirectory, write_text_atomic
from crossbuild.core.use_cases.combine_artifacts import ArtifactCombiner
from crossbuild.core.use_cases.rewrite_source import strip_library_import
from crossbuild.core.use_cases.toolchain import ToolchainInvoker
from crossbuild.shared.config import BuildConfig
from crossbuild.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


def validate_request(request: BuildRequest) -> None:
    """Rejects a request whose source file can't be read. Touches nothing."""
    path = request.source_path
    if not path.exists():
        raise InvalidRequestError(path, "no such file")
    if not path.is_file():
        raise InvalidRequestError(path, "not a regular file")
    if not os.access(path, os.R_OK):
        raise InvalidRequestError(path, "permission denied")


class TargetPipeline:
    """
    Base class for a per-target build.

    Every target walks the same fixed state sequence:
        init -> assemble_library -> compile_library -> rewrite_source
             -> compile_source -> combine -> final_build -> cleanup -> done
    Any domain error moves the run to `aborted`. Subclasses only fill in the
    per-target steps.

    Intermediate files are removed after every run, successful or not, once
    the build directory exists; debug mode keeps them for inspection.
    """

    target: Target
    purpose: str = "build applications"

    def __init__(self, config: BuildConfig, runner: ICommandRunner):
        self.config = config
        self.directory = BuildDirectory(config)
        self.invoker = ToolchainInvoker(runner)
        self.assembler = LibraryAssembler(config, self.directory)
        self.combiner = ArtifactCombiner()

        self.request: Optional[BuildRequest] = None
        self.state = PipelineState.INIT
        self.history: List[PipelineState] = []
        self.failed_step: Optional[PipelineState] = None

    # --- Variation Points ---

    def required_tools(self) -> Tuple[str, ...]:
        raise NotImplementedError

    def check_platform(self) -> None:
        """Verifies platform frameworks. Most targets need none."""

    def compile_library(self) -> None:
        raise NotImplementedError

    def compile_source(self) -> None:
        raise NotImplementedError

    def combine(self) -> None:
        raise NotImplementedError

    def final_build(self) -> None:
        raise NotImplementedError

    def final_artifact(self) -> Path:
        raise NotImplementedError

    def intermediate_paths(self) -> Dict[str, Path]:
        return {
            "library_bundle": self.directory.library_bundle,
            "source_bundle": self.directory.source_bundle,
        }

    # --- Shared Steps ---

    def assemble_library(self) -> None:
        self.assembler.assemble_library()

    def rewrite_source(self) -> None:
        text = strip_library_import(self.request.source_path, self.config.library_name)
        write_text_atomic(self.directory.source_bundle, text)

    def intermediates(self) -> List[Artifact]:
        return [
            Artifact(name=name, path=path, kind=ArtifactKind.INTERMEDIATE)
            for name, path in self.intermediate_paths().items()
        ]

    def steps(self) -> List[Tuple[PipelineState, Callable[[], None]]]:
        return [
            (PipelineState.ASSEMBLE_LIBRARY, self.assemble_library),
            (PipelineState.COMPILE_LIBRARY, self.compile_library),
            (PipelineState.REWRITE_SOURCE, self.rewrite_source),
            (PipelineState.COMPILE_SOURCE, self.compile_source),
            (PipelineState.COMBINE, self.combine),
            (PipelineState.FINAL_BUILD, self.final_build),
        ]

    # --- State Machine ---

    def _enter(self, state: PipelineState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug("pipeline_state", target=self.target.value, state=state.value)

    def preflight(self, request: BuildRequest) -> None:
        """Everything that can fail before the build directory is touched."""
        validate_request(request)
        self.check_platform()
        self.invoker.probe(self.required_tools(), self.purpose)

    def run(self, request: BuildRequest) -> BuildOutcome:
        """
        Executes the pipeline for ``request``.

        Returns:
            BuildOutcome describing the final artifact.

        Raises:
            DomainError: The first failure; later steps never run.
        """
        self.request = request
        started = time.time()
        self._enter(PipelineState.INIT)

        with tracer.start_as_current_span(f"pipeline.{self.target.value}") as span:
            span.set_attribute("build.target", self.target.value)
            span.set_attribute("build.debug", self.config.debug)
            logger.info(
                "pipeline_started",
                target=self.target.value,
                source=str(request.source_path),
                debug=self.config.debug,
            )

            try:
                self.preflight(request)
                try:
                    self.directory.ensure()
                except OSError as e:
                    raise FileOperationError(PipelineState.INIT.value, e) from e
            except Exception:
                self.failed_step = PipelineState.INIT
                self._enter(PipelineState.ABORTED)
                raise

            succeeded = False
            try:
                for state, step in self.steps():
                    self._enter(state)
                    with tracer.start_as_current_span(f"pipeline.step.{state.value}"):
                        try:
                            step()
                        except OSError as e:
                            raise FileOperationError(state.value, e) from e
                succeeded = True
            except Exception:
                self.failed_step = self.state
                raise
            finally:
                self._finish(succeeded)

        duration = time.time() - started
        artifact = self.final_artifact()
        logger.info(
            "pipeline_succeeded",
            target=self.target.value,
            artifact=str(artifact),
            duration=round(duration, 2),
        )
        return BuildOutcome(
            target=self.target,
            state=self.state,
            artifact=artifact,
            duration=duration,
            history=list(self.history),
        )

    def _finish(self, succeeded: bool) -> None:
        if self.config.debug:
            logger.info("intermediates_kept", target=self.target.value, root=str(self.directory.root))
        else:
            self._enter(PipelineState.CLEANUP)
            self.directory.cleanup(CleanupScope.INTERMEDIATE, self.intermediates())

        if succeeded:
            self._enter(PipelineState.DONE)
        else:
            self._enter(PipelineState.ABORTED)
            logger.error(
                "pipeline_aborted",
                target=self.target.value,
                failed_step=self.failed_step.value if self.failed_step else None,
            )


class BytecodePipeline(TargetPipeline):
    """Targets that compile both bundles to C with the bytecode compiler."""

    def _bytecode_command(self, symbol: str, source: Path, output: Path) -> ToolchainCommand:
        args = ["-g"] if self.config.debug else []
        args += [f"-B{symbol}", f"-o{output}", str(source)]
        return ToolchainCommand(
            executable=self.config.bytecode_compiler,
            args=tuple(args),
            output_path=output,
        )

    def compile_library(self) -> None:
        command = self._bytecode_command(
            f"{self.config.library_name}_lib",
            self.directory.library_bundle,
            self.directory.library_c_unit,
        )
        self.invoker.run(command, step=PipelineState.COMPILE_LIBRARY)

    def compile_source(self) -> None:
        command = self._bytecode_command(
            f"{self.config.library_name}_app",
            self.directory.source_bundle,
            self.directory.source_c_unit,
        )
        self.invoker.run(command, step=PipelineState.COMPILE_SOURCE)

    def compiled_parts(self, markers: Tuple[str, ...]) -> List[CombinePart]:
        """Flags, library unit, source unit, then the native runtime glue."""
        return [
            CombinePart(label="library", source=self.directory.library_c_unit, markers=markers),
            CombinePart(label="source", source=self.directory.source_c_unit),
            CombinePart(label="runtime_glue", source=self.config.native_glue),
        ]

    def intermediate_paths(self) -> Dict[str, Path]:
        paths = super().intermediate_paths()
        paths["library_c_unit"] = self.directory.library_c_unit
        paths["source_c_unit"] = self.directory.source_c_unit
        return paths


class NativePipeline(BytecodePipeline):
    target = Target.NATIVE
    purpose = "build native applications"

    def required_tools(self) -> Tuple[str, ...]:
        return (self.config.bytecode_compiler, self.config.c_compiler)

    def combine(self) -> None:
        markers = (f"#define {self.config.native_backend_flag} 1",)
        self.combiner.combine(self.compiled_parts(markers), self.directory.native_combined)

    def final_build(self) -> None:
        executable = self.directory.native_executable
        command = ToolchainCommand(
            executable=self.config.c_compiler,
            args=(
                str(self.directory.native_combined),
                *self.config.native_link_flags,
                "-o",
                str(executable),
            ),
            output_path=executable,
        )
        self.invoker.run(command, step=PipelineState.FINAL_BUILD)

    def final_artifact(self) -> Path:
        return self.directory.native_executable

    def intermediate_paths(self) -> Dict[str, Path]:
        paths = super().intermediate_paths()
        paths["native_combined"] = self.directory.native_combined
        return paths


class ApplePipeline(BytecodePipeline):
    """
    iOS / tvOS: the combined C file goes into a copy of the device family's
    Xcode project template, which the project tool then builds.
    """

    family: str

    @property
    def purpose(self) -> str:
        return f"build {self.family} applications"

    def required_tools(self) -> Tuple[str, ...]:
        return (self.config.bytecode_compiler, self.config.project_tool)

    def check_platform(self) -> None:
        framework = self.config.framework_path(self.family)
        if not framework.exists():
            logger.error("platform_dependency_missing", family=self.family, path=str(framework))
            raise PlatformDependencyMissingError(self.family, framework)

    def combine(self) -> None:
        template = self.config.project_template(self.family)
        if not template.is_dir():
            raise ResourceMissingError(template)
        shutil.copytree(template, self.directory.project_dir(self.family), dirs_exist_ok=True)

        markers = (
            f"#define {self.config.apple_family_flag} 1",
            f"#define {self.config.native_backend_flag} 1",
        )
        self.combiner.combine(self.compiled_parts(markers), self.directory.project_combined(self.family))

    def final_build(self) -> None:
        command = ToolchainCommand(
            executable=self.config.project_tool,
            args=("build", f"--{self.family}", str(self.directory.project_file(self.family))),
        )
        self.invoker.run(command, step=PipelineState.FINAL_BUILD, failure=ProjectBuildFailureError)

    def final_artifact(self) -> Path:
        return self.directory.app_bundle(self.family)


class IOSPipeline(ApplePipeline):
    target = Target.IOS
    family = "ios"


class TVOSPipeline(ApplePipeline):
    target = Target.TVOS
    family = "tvos"


class WebPipeline(TargetPipeline):
    """Transpiles every bundle to JavaScript; no bytecode step."""

    target = Target.WEB
    purpose = "build web applications"

    def required_tools(self) -> Tuple[str, ...]:
        return (self.config.transpiler,)

    def _transpile(self, source: Path, output: Path, step: PipelineState) -> None:
        command = ToolchainCommand(
            executable=self.config.transpiler,
            args=("--compile", "--no-opal", str(source)),
            output_path=output,
            stdout_to_output=True,
        )
        self.invoker.run(command, step=step)

    def compile_library(self) -> None:
        self._transpile(
            self.directory.library_bundle,
            self.directory.library_js_unit,
            PipelineState.COMPILE_LIBRARY,
        )

        shim = self.config.web_shim
        if not shim.is_file():
            raise ResourceMissingError(shim)
        shutil.copyfile(shim, self.directory.web_shim_source)
        self._transpile(
            self.directory.web_shim_source,
            self.directory.web_shim_js_unit,
            PipelineState.COMPILE_LIBRARY,
        )

    def compile_source(self) -> None:
        self._transpile(
            self.directory.source_bundle,
            self.directory.source_js_unit,
            PipelineState.COMPILE_SOURCE,
        )

    def combine(self) -> None:
        parts = [
            CombinePart(label="support_script", source=self.config.web_support_script),
            CombinePart(label="transpiler_runtime", source=self.config.transpiler_runtime),
            CombinePart(label="library", source=self.directory.library_js_unit),
            CombinePart(label="interop_shim", source=self.directory.web_shim_js_unit),
            CombinePart(label="source", source=self.directory.source_js_unit),
        ]
        self.combiner.combine(parts, self.directory.web_bundle)

    def final_build(self) -> None:
        template = self.config.html_template
        if not template.is_file():
            raise ResourceMissingError(template)
        shutil.copyfile(template, self.directory.web_page)

    def final_artifact(self) -> Path:
        return self.directory.web_bundle

    def intermediate_paths(self) -> Dict[str, Path]:
        paths = super().intermediate_paths()
        paths["library_js_unit"] = self.directory.library_js_unit
        paths["web_shim_source"] = self.directory.web_shim_source
        paths["web_shim_js_unit"] = self.directory.web_shim_js_unit
        paths["source_js_unit"] = self.directory.source_js_unit
        return paths


PIPELINES: Dict[Target, Type[TargetPipeline]] = {
    Target.NATIVE: NativePipeline,
    Target.WEB: WebPipeline,
    Target.IOS: IOSPipeline,
    Target.TVOS: TVOSPipeline,
}
