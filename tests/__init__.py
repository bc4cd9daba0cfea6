# tests/__init__.py
"""
Test Suite for crossbuild.

Organization:
- `core`: Pipelines, use cases and domain models against a scripted toolchain.
- `adapters`: The subprocess runner and host opener against the real OS.
- `test_cli.py`: The commander, wired through the DI container.
"""
