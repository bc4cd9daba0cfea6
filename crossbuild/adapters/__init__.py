# crossbuild/adapters/__init__.py
"""
Infrastructure Adapters.

Concrete implementations of the Ports defined in `crossbuild.core.ports`:
- `subprocess_runner`: Secondary Adapter (Driven) - spawns the real toolchains.
- `platform_opener`: Secondary Adapter (Driven) - host "open this file" command.

Dependencies point INWARD: these modules depend on `crossbuild.core`, but
`crossbuild.core` never imports from here.
"""
