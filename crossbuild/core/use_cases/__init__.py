# crossbuild/core/use_cases/__init__.py
"""
Core Use Cases (Application Logic).

The "Interactors" of the system. Each one orchestrates the domain models and
the ports for one user-facing action (build, launch, simulator passthrough,
doctor), plus the pipeline building blocks they share.
"""

from .build_app import BuildApp
from .doctor import Doctor
from .launch_app import LaunchApp
from .simulator import SimulatorControl

__all__ = [
    "BuildApp",
    "Doctor",
    "LaunchApp",
    "SimulatorControl",
]
