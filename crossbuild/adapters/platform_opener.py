# crossbuild/adapters/platform_opener.py
import platform
from pathlib import Path
from typing import Optional

from crossbuild.core.domain.models import ToolchainCommand
from crossbuild.core.ports.platform_opener import IPlatformOpener


class HostPlatformOpener(IPlatformOpener):
    """
    Opens files with the host's default handler.
    The OS family is resolved once, at construction.
    """

    def __init__(self, system: Optional[str] = None):
        self.system = system or platform.system()

    def open_command(self, path: Path) -> ToolchainCommand:
        if self.system == "Windows":
            # `start` is a cmd builtin; the empty string is the window title
            return ToolchainCommand(executable="cmd", args=("/c", "start", "", str(path)))
        if self.system == "Darwin":
            return ToolchainCommand(executable="open", args=(str(path),))
        return ToolchainCommand(executable="xdg-open", args=(str(path),))
