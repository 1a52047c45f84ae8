"""
Platform detection and configuration
"""

import platform
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class OperatingSystem(str, Enum):
    """Operating systems a Sunshine install can target"""

    LINUX = "linux"
    MACOS = "macos"


INTEL_ARCHITECTURES = frozenset({"x86_64"})
"""Architectures treated as the legacy Intel CPU family"""

_ARCH_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


def normalize_architecture(machine: str) -> str:
    """Map machine names reported by different tools onto one spelling"""
    key = machine.strip().lower()
    return _ARCH_ALIASES.get(key, key)


class Platform(BaseModel):
    """The single target platform of an install run"""

    model_config = ConfigDict(frozen=True)

    system: OperatingSystem
    """Target operating system"""
    arch: str
    """Normalized CPU architecture (x86_64, arm64)"""

    @field_validator("arch")
    @classmethod
    def _normalize_arch(cls, value: str) -> str:
        normalized = normalize_architecture(value)
        if not normalized:
            raise ValueError("Architecture must not be empty")
        return normalized

    @property
    def is_linux(self) -> bool:
        return self.system is OperatingSystem.LINUX

    @property
    def is_macos(self) -> bool:
        return self.system is OperatingSystem.MACOS

    @property
    def is_intel(self) -> bool:
        return self.arch in INTEL_ARCHITECTURES

    def __str__(self) -> str:
        return f"{self.system.value} ({self.arch})"


class PlatformDetector:
    """Detects and provides information about the current platform"""

    SUPPORTED_PLATFORMS = [system.value for system in OperatingSystem]

    def detect(self) -> Platform:
        """
        Detect current platform and architecture

        Returns:
            Platform for the running machine

        Raises:
            ValueError: If the running operating system is not supported
        """
        return Platform(system=self._get_platform_name(), arch=self._get_architecture())

    def resolve(self, system: str = "auto", arch: str = "auto") -> Platform:
        """
        Build the run platform, auto-detecting whatever is not forced

        Args:
            system: Target platform (auto, linux, macos)
            arch: Target architecture (auto, x86_64, arm64)

        Returns:
            Platform for this run
        """
        if system == "auto":
            system = self._get_platform_name()
        elif system not in self.SUPPORTED_PLATFORMS:
            raise ValueError(f"Unsupported platform: {system}. "
                             f"Supported: {', '.join(self.SUPPORTED_PLATFORMS)}")
        if arch == "auto":
            arch = self._get_architecture()
        return Platform(system=system, arch=arch)

    def _get_platform_name(self) -> str:
        """Get normalized platform name"""
        system = platform.system().lower()

        if system == "linux":
            return "linux"
        elif system == "darwin":
            return "macos"
        raise ValueError(f"Unsupported platform: {system}. "
                         f"Supported: {', '.join(self.SUPPORTED_PLATFORMS)}")

    def _get_architecture(self) -> str:
        """Get normalized architecture of the running machine"""
        return normalize_architecture(platform.machine())


__all__ = ["OperatingSystem", "Platform", "PlatformDetector", "normalize_architecture", "INTEL_ARCHITECTURES"]
