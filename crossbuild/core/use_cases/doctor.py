# crossbuild/core/use_cases/doctor.py
from typing import List

from pydantic import BaseModel

from crossbuild.core.ports.command_runner import ICommandRunner
from crossbuild.shared.config import BuildConfig


class Check(BaseModel):
    name: str
    ok: bool
    detail: str = ""
    required: bool = True


class Doctor:
    """
    Use Case: System diagnostic.

    Looks at the toolchains, the library installation and the Apple
    frameworks without touching the build directory. Missing Apple
    frameworks only matter for iOS/tvOS builds, so they are not required.
    """

    def __init__(self, config: BuildConfig, runner: ICommandRunner):
        self.config = config
        self.runner = runner

    def check_tools(self) -> List[Check]:
        config = self.config
        tools = {
            "bytecode compiler": config.bytecode_compiler,
            "web transpiler": config.transpiler,
            "C compiler": config.c_compiler,
            "project tool": config.project_tool,
        }
        checks = []
        for role, tool in tools.items():
            location = self.runner.locate(tool)
            checks.append(Check(name=f"{role} ({tool})", ok=location is not None, detail=location or "not on PATH"))
        return checks

    def check_library(self) -> List[Check]:
        config = self.config
        paths = [config.module_path(m) for m in config.modules]
        paths += [
            config.native_glue,
            config.web_shim,
            config.web_support_script,
            config.transpiler_runtime,
            config.html_template,
            config.project_template("ios"),
            config.project_template("tvos"),
        ]
        missing = [p for p in paths if not p.exists()]
        checks = [Check(name=f"library {config.library_root}", ok=not missing, detail=f"{len(paths) - len(missing)}/{len(paths)} files")]
        checks += [Check(name=f"missing {p}", ok=False) for p in missing]
        return checks

    def check_frameworks(self) -> List[Check]:
        return [
            Check(
                name=f"{family} framework",
                ok=self.config.framework_path(family).exists(),
                detail=str(self.config.framework_path(family)),
                required=False,
            )
            for family in ("ios", "tvos")
        ]

    def execute(self) -> List[Check]:
        return self.check_tools() + self.check_library() + self.check_frameworks()

    @staticmethod
    def healthy(checks: List[Check]) -> bool:
        return all(c.ok for c in checks if c.required)
