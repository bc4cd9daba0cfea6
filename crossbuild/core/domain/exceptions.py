# crossbuild/core/domain/exceptions.py
from pathlib import Path
from typing import Optional


class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    code = "domain_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Request Errors ---

class InvalidRequestError(DomainError):
    """Raised when the source file of a build request is missing or unreadable."""
    code = "invalid_request"

    def __init__(self, source_path: Path, reason: str):
        self.source_path = source_path
        super().__init__(f"Can't use source file '{source_path}': {reason}.")

# --- Environment Errors ---

class ToolNotFoundError(DomainError):
    """Raised when a required external tool is not on the search path."""
    code = "tool_not_found"

    def __init__(self, tool: str, purpose: str = ""):
        self.tool = tool
        detail = f", which is needed to {purpose}" if purpose else ""
        super().__init__(f"Can't find '{tool}'{detail}.")

class ResourceMissingError(DomainError):
    """Raised when a file of the library installation is absent."""
    code = "resource_missing"

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Library resource '{path}' is missing. The installation may be corrupt.")

class FileOperationError(DomainError):
    """Raised when the OS refuses a read, write or copy inside a pipeline step."""
    code = "file_operation_failed"

    def __init__(self, step: str, reason: OSError):
        self.step = step
        self.reason = reason
        where = f" '{reason.filename}'" if reason.filename else ""
        super().__init__(f"File operation on{where} failed during {step}: {reason.strerror or reason}.")

class PlatformDependencyMissingError(DomainError):
    """Raised when the platform framework of an Apple target is not installed."""
    code = "platform_dependency_missing"

    def __init__(self, family: str, path: Path):
        self.family = family
        self.path = path
        super().__init__(f"Simple 2D {family} framework not found at '{path}'. Install it and try again.")

# --- Process Errors ---

class ExternalToolFailureError(DomainError):
    """Raised when a spawned toolchain process exits non-zero."""
    code = "external_tool_failure"

    def __init__(
        self,
        command: str,
        returncode: int,
        step: Optional[str] = None,
        stderr: str = "",
        detail: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.step = step
        self.stderr = stderr
        where = f" during {step}" if step else ""
        reason = detail or f"exited with code {returncode}"
        super().__init__(f"'{command}'{where} {reason}.")

class ProjectBuildFailureError(ExternalToolFailureError):
    """Raised when the IDE project build of an Apple target fails."""
    code = "project_build_failure"

# --- State Errors ---

class ArtifactNotBuiltError(DomainError):
    """Raised when launching a target whose final artifact does not exist."""
    code = "artifact_not_built"

    def __init__(self, target: str, path: Path):
        self.target = target
        self.path = path
        super().__init__(f"No {target} app built (expected '{path}'). Run a build first.")
