# crossbuild/core/ports/__init__.py
"""
Core Ports (Interfaces).

Protocols the Infrastructure Adapters implement, so the build pipeline can
drive external toolchains and the host desktop without knowing how.
"""

from .command_runner import ICommandRunner
from .platform_opener import IPlatformOpener

__all__ = [
    "ICommandRunner",
    "IPlatformOpener",
]
