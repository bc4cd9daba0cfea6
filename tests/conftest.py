# tests/conftest.py
from pathlib import Path
from typing import Dict, List, Optional, Set

import pytest

from crossbuild.core.domain.models import CommandResult, ToolchainCommand
from crossbuild.shared.config import LIBRARY_MODULES, BuildConfig
from crossbuild.shared.container import Container

DEFAULT_TOOLS = {"mrbc", "opal", "cc", "simple2d", "xdg-open", "open"}


class FakeCommandRunner:
    """
    Scripted stand-in for the subprocess runner.

    Records every command, pretends each tool wrote its declared output,
    and fails commands matching a configured rule.
    """

    def __init__(self, available: Optional[Set[str]] = None):
        self.available = set(DEFAULT_TOOLS if available is None else available)
        self.calls: List[ToolchainCommand] = []
        self.located: List[str] = []
        self._failures: List[Dict] = []
        self._stdout: Dict[str, str] = {}

    def fail_when(self, executable: str, contains: Optional[str] = None, returncode: int = 1, stderr: str = "boom"):
        self._failures.append(
            {"executable": executable, "contains": contains, "returncode": returncode, "stderr": stderr}
        )

    def respond(self, executable: str, stdout: str):
        self._stdout[executable] = stdout

    def locate(self, executable: str) -> Optional[str]:
        self.located.append(executable)
        return f"/usr/bin/{executable}" if executable in self.available else None

    def run(self, command: ToolchainCommand) -> CommandResult:
        self.calls.append(command)

        for rule in self._failures:
            if rule["executable"] != command.executable:
                continue
            if rule["contains"] and not any(rule["contains"] in arg for arg in command.args):
                continue
            return CommandResult(returncode=rule["returncode"], stderr=rule["stderr"])

        if command.stdout_to_output:
            return CommandResult(returncode=0, stdout=f"// {command.executable} {command.args[-1]}\n")

        if command.output_path is not None:
            command.output_path.parent.mkdir(parents=True, exist_ok=True)
            command.output_path.write_text(f"/* {command.executable} -> {command.output_path.name} */\n")

        return CommandResult(returncode=0, stdout=self._stdout.get(command.executable, ""))

    def executables(self) -> List[str]:
        return [c.executable for c in self.calls]


@pytest.fixture
def runner():
    return FakeCommandRunner()


@pytest.fixture
def library_root(tmp_path) -> Path:
    """A complete fake library installation."""
    root = tmp_path / "ruby2d"
    lib = root / "lib" / "ruby2d"
    for module in LIBRARY_MODULES:
        path = lib / f"{module}.rb"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"# module {module}\n")

    ext = root / "ext" / "ruby2d"
    ext.mkdir(parents=True)
    (ext / "ruby2d.c").write_text("/* runtime glue */\n")
    (ext / "ruby2d-opal.rb").write_text("# interop shim\n")

    assets = root / "assets"
    assets.mkdir()
    (assets / "simple2d.js").write_text("// support script\n")
    (assets / "opal.js").write_text("// transpiler runtime\n")
    (assets / "template.html").write_text("<html><script src='app.js'></script></html>\n")
    for family in ("ios", "tvos"):
        project = assets / family / "MyApp.xcodeproj"
        project.mkdir(parents=True)
        (project / "project.pbxproj").write_text(f"// {family} project\n")
    return root


@pytest.fixture
def frameworks_dir(tmp_path) -> Path:
    root = tmp_path / "Frameworks" / "Simple2D"
    for folder in ("iOS", "tvOS"):
        (root / folder / "Simple2D.framework").mkdir(parents=True)
    return root


@pytest.fixture
def build_config(tmp_path, library_root, frameworks_dir) -> BuildConfig:
    return BuildConfig(
        library_root=library_root,
        build_dir=tmp_path / "build",
        apple_frameworks_dir=frameworks_dir,
    )


@pytest.fixture
def source_file(tmp_path) -> Path:
    path = tmp_path / "app.rb"
    path.write_text(
        "require 'ruby2d'\n"
        "\n"
        "set title: 'Hello'\n"
        "Square.new(x: 10, y: 20, size: 25)\n"
        "show\n"
    )
    return path


@pytest.fixture(scope="function")
def container(build_config, runner):
    """
    Sets up the Dependency Injection Container for testing.
    Real toolchains and paths are replaced by the fixtures above.
    """
    container = Container()
    container.build_config.override(build_config)
    container.command_runner.override(runner)

    yield container

    container.reset_override()
