# crossbuild/shared/__init__.py
"""
Shared utilities package.

Cross-cutting concerns used by both the Core and the Adapters:
- Configuration management
- Structured logging
- Tracing (Observability)
- Dependency Injection wiring
"""
