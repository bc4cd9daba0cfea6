# crossbuild/core/ports/platform_opener.py
from pathlib import Path
from typing import Protocol

from crossbuild.core.domain.models import ToolchainCommand


class IPlatformOpener(Protocol):
    """
    Port for handing a file to the host's default application.
    The host OS is resolved once, when the adapter is created.
    """

    def open_command(self, path: Path) -> ToolchainCommand:
        """Builds the command that opens ``path`` with its default handler."""
        ...
