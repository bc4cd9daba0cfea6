# crossbuild/core/domain/__init__.py
"""
Domain Entities and Value Objects.

The vocabulary of a build: targets, requests, toolchain commands, artifacts,
pipeline states and the error taxonomy. No infrastructure logic lives here.
"""
