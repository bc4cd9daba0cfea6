# crossbuild/__init__.py
"""
crossbuild - Multi-target build orchestrator for 2D applications.

Turns a single application source file plus the 2D library's own sources
into a native executable, a web bundle, or an iOS / tvOS simulator app.
The package follows Hexagonal Architecture (Ports & Adapters): the build
pipeline lives in ``crossbuild.core`` and reaches external toolchains only
through ports.
"""

__version__ = "1.0.0"
