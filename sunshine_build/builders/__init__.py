"""
Builder components for the install steps
"""

from .base_builder import BaseBuilder, InstalledArtifacts, InstallStep
from .cmake_builder import CMakeBuilder
from .orchestrator import StepExecutor

__all__ = [
    "BaseBuilder",
    "CMakeBuilder",
    "InstalledArtifacts",
    "InstallStep",
    "StepExecutor",
]
