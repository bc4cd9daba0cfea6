# crossbuild/core/__init__.py
"""
Core Domain Layer.

The build pipeline and the build-directory lifecycle. It follows the
Hexagonal Architecture (Ports & Adapters) pattern:
- No direct process spawning; external tools are reached through ICommandRunner.
- No host-OS conditionals; opening files goes through IPlatformOpener.
- The filesystem is touched only inside the build directory and for reading
  the library installation and the user's source file.
"""
