"""
Sunshine Build
A platform- and option-aware build orchestrator for the Sunshine game stream host
Supports Linux and macOS
"""

__version__ = "1.0.0"
__supported_platforms__ = ["linux", "macos"]

from .main import InstallRun

__all__ = ["InstallRun", "__version__", "__supported_platforms__"]
