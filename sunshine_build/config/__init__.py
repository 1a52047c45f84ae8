"""
Configuration management for the build orchestrator
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field

from ..catalog import Dependency
from ..options import BuildOption
from ..platform import OperatingSystem

CONFIG_DIR = Path(__file__).resolve().parent
"""Directory holding the YAML data tables shipped with the package"""


class PostInstallScript(BaseModel):
    """A helper script copied into the prefix after install"""

    model_config = ConfigDict(frozen=True)

    source: str
    """Path relative to the source directory"""
    target: str
    """Path relative to the install prefix"""


class CodesignRule(BaseModel):
    """When and how the installed binary gets an ad-hoc signature"""

    model_config = ConfigDict(frozen=True)

    platforms: Tuple[OperatingSystem, ...] = (OperatingSystem.MACOS,)
    architectures: Tuple[str, ...] = ("x86_64",)
    binary: str = "bin/sunshine"
    command: Tuple[str, ...] = ("codesign", "-s", "-", "--force", "--deep")


class VariantConfig(BaseModel):
    """One installable package variant of Sunshine"""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    version: str
    build_version: Optional[str] = None
    commit: Optional[str] = None
    branch: Optional[str] = None
    conflicts_with: Tuple[str, ...] = ()
    conflict_reason: Optional[str] = None
    build_system: str = "cmake"
    build_dir: str = "build"
    options: Tuple[str, ...] = ()
    """Names of the build options this variant accepts"""
    flags: Dict[str, str] = Field(default_factory=dict)
    """Base CMake cache entries, in order"""
    make_args: Tuple[str, ...] = ()
    install_binaries: Tuple[str, ...] = ()
    """Build-tree binaries copied into <prefix>/bin after make install"""
    binary: str = "bin/sunshine"
    """Main executable installed by the build system"""
    post_install_scripts: Dict[OperatingSystem, PostInstallScript] = Field(default_factory=dict)
    codesign: Optional[CodesignRule] = None
    self_test: Tuple[Tuple[str, ...], ...] = ()
    dependencies: Tuple[Dependency, ...] = ()

    def build_environment(self) -> List[Tuple[str, str]]:
        """Build identifiers exported to the toolchain, in a fixed order"""
        identifiers = [
            ("BRANCH", self.branch),
            ("BUILD_VERSION", self.build_version),
            ("COMMIT", self.commit),
        ]
        return [(name, value) for name, value in identifiers if value]


class PlatformConfig(BaseModel):
    """Adjustments applied after every option-driven flag"""

    model_config = ConfigDict(frozen=True)

    flags: Dict[str, str] = Field(default_factory=dict)


class ConfigLoader:
    """Loads and manages the orchestrator configuration"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration loader

        Args:
            config_dir: Directory containing configuration files
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR

        variants_config = self._load("variants.yaml")
        options_config = self._load("options.yaml")
        platforms_config = self._load("platforms.yaml")

        self.variants: Dict[str, VariantConfig] = {
            name: VariantConfig.model_validate({"name": name, **(data or {})})
            for name, data in variants_config.get("variants", {}).items()
        }
        self.options: List[BuildOption] = [
            BuildOption.model_validate(entry) for entry in options_config.get("options", [])
        ]
        self.platforms: Dict[OperatingSystem, PlatformConfig] = {
            OperatingSystem(name): PlatformConfig.model_validate(data or {})
            for name, data in platforms_config.get("platforms", {}).items()
        }

        known_options = {option.name for option in self.options}
        for variant in self.variants.values():
            missing = [name for name in variant.options if name not in known_options]
            if missing:
                raise ValueError(
                    f"Variant '{variant.name}' references unknown options: {', '.join(missing)}"
                )

    def _load(self, filename: str) -> Dict[str, Any]:
        path = self.config_dir / filename
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration file '{path}' must contain a mapping at the root")
        return data

    def get_variant_names(self) -> List[str]:
        return sorted(self.variants)

    def get_variant(self, name: str) -> VariantConfig:
        """
        Get configuration for a variant

        Args:
            name: Variant name

        Returns:
            Variant configuration
        """
        if name not in self.variants:
            raise ValueError(f"Unknown variant: {name}. "
                             f"Available: {', '.join(self.get_variant_names())}")
        return self.variants[name]

    def get_options(self, variant: VariantConfig) -> List[BuildOption]:
        """Options accepted by ``variant``, in the order options.yaml declares them"""
        return [option for option in self.options if option.name in variant.options]

    def get_platform_config(self, system: OperatingSystem) -> PlatformConfig:
        return self.platforms.get(system, PlatformConfig())


__all__ = ["CodesignRule", "ConfigLoader", "PlatformConfig", "PostInstallScript", "VariantConfig", "CONFIG_DIR"]
