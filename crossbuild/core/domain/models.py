# crossbuild/core/domain/models.py
import shlex
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# --- Enums ---

class Target(str, Enum):
    """Platforms a source file can be built for."""
    NATIVE = "native"
    WEB = "web"
    IOS = "ios"
    TVOS = "tvos"

    @property
    def is_apple(self) -> bool:
        return self in (Target.IOS, Target.TVOS)

# Order in which `build --all` runs the pipelines.
ALL_TARGETS: Tuple[Target, ...] = (Target.NATIVE, Target.WEB, Target.IOS, Target.TVOS)

class PipelineState(str, Enum):
    """States of a single target pipeline run, in execution order."""
    INIT = "init"
    ASSEMBLE_LIBRARY = "assemble_library"
    COMPILE_LIBRARY = "compile_library"
    REWRITE_SOURCE = "rewrite_source"
    COMPILE_SOURCE = "compile_source"
    COMBINE = "combine"
    FINAL_BUILD = "final_build"
    CLEANUP = "cleanup"
    DONE = "done"
    ABORTED = "aborted"

class CleanupScope(str, Enum):
    INTERMEDIATE = "intermediate"
    FULL = "full"

class ArtifactKind(str, Enum):
    INTERMEDIATE = "intermediate"  # Safe to delete once the pipeline finishes
    FINAL = "final"                # Kept until an explicit full clean

# --- Entities ---

class BuildRequest(BaseModel):
    """One `build` invocation for one target."""
    model_config = ConfigDict(frozen=True)

    target: Target
    source_path: Path
    debug: bool = False

class Artifact(BaseModel):
    """A named file (or directory tree) inside the build directory."""
    model_config = ConfigDict(frozen=True)

    name: str
    path: Path
    kind: ArtifactKind

class ToolchainCommand(BaseModel):
    """
    An external process invocation.

    ``stdout_to_output`` marks tools that print their product instead of
    writing a file; the invoker stores stdout at ``output_path``.
    ``interactive`` commands inherit the terminal instead of being captured.
    """
    model_config = ConfigDict(frozen=True)

    executable: str
    args: Tuple[str, ...] = ()
    cwd: Optional[Path] = None
    output_path: Optional[Path] = None
    stdout_to_output: bool = False
    interactive: bool = False

    @property
    def argv(self) -> List[str]:
        return [self.executable, *self.args]

    @property
    def display(self) -> str:
        return shlex.join(self.argv)

class CommandResult(BaseModel):
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

class CombinePart(BaseModel):
    """
    One slot of a combined platform file.

    Content comes from ``source`` (a file) or ``text`` (a literal).
    ``markers`` are written, one per line, before the content.
    """
    model_config = ConfigDict(frozen=True)

    label: str
    source: Optional[Path] = None
    text: Optional[str] = None
    markers: Tuple[str, ...] = ()

class BuildOutcome(BaseModel):
    """Result of one target pipeline, as reported to the user."""
    target: Target
    state: PipelineState
    artifact: Optional[Path] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    failed_step: Optional[PipelineState] = None
    duration: float = 0.0
    history: List[PipelineState] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == PipelineState.DONE
