"""
Build plan resolution: flags and environment for one install run
"""

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..config import PlatformConfig, VariantConfig
from ..options import OptionModel, ResolvedOptions
from ..platform import OperatingSystem, Platform


class BuildPlan(BaseModel):
    """Immutable flags and environment handed to the step executor"""

    model_config = ConfigDict(frozen=True)

    variant: str
    platform: Platform
    install_dir: Path
    flags: Tuple[Tuple[str, str], ...]
    env_items: Tuple[Tuple[str, str], ...] = ()

    @property
    def environment(self) -> Dict[str, str]:
        """A fresh copy of the environment assignments"""
        return dict(self.env_items)

    def flag(self, key: str) -> Optional[str]:
        for flag_key, value in self.flags:
            if flag_key == key:
                return value
        return None

    def cmake_args(self) -> List[str]:
        return [f"-D{key}={value}" for key, value in self.flags]


class BuildPlanResolver:
    """Combines variant, options and platform into a BuildPlan"""

    FLAG_VALUES = {True: "ON", False: "OFF"}

    def __init__(self,
                 variant: VariantConfig,
                 option_model: OptionModel,
                 platform_configs: Mapping[OperatingSystem, PlatformConfig],
                 install_dir: Path,
                 deps_prefix: Path,
                 base_environment: Optional[Mapping[str, str]] = None):
        """
        Initialize resolver

        Args:
            variant: Variant being built
            option_model: Options of that variant
            platform_configs: Platform adjustments keyed by operating system
            install_dir: Install prefix
            deps_prefix: Directory holding installed libraries
            base_environment: Pre-existing values that appended variables extend
        """
        self.variant = variant
        self.option_model = option_model
        self.platform_configs = platform_configs
        self.install_dir = Path(install_dir)
        self.deps_prefix = Path(deps_prefix)
        self.base_environment = dict(base_environment or {})

    def replace_variables(self, text: str) -> str:
        """Replace variables in configuration strings"""
        replacements = {
            "{install_dir}": str(self.install_dir),
            "{deps_prefix}": str(self.deps_prefix),
        }
        for key, value in replacements.items():
            text = text.replace(key, value)
        return text

    def build(self, platform: Platform, resolved: ResolvedOptions) -> BuildPlan:
        """
        Build the plan for one run

        Args:
            platform: Run platform
            resolved: Resolved option values

        Returns:
            BuildPlan for the run
        """
        flags: List[Tuple[str, str]] = [("CMAKE_INSTALL_PREFIX", str(self.install_dir))]
        for key, value in self.variant.flags.items():
            _set_flag(flags, key, self.replace_variables(value))

        environment: Dict[str, str] = {}
        for name, value in self.variant.build_environment():
            environment[name] = value

        values = resolved.as_dict()
        for option in self.option_model.options:
            enabled = values[option.name]
            if option.flag:
                _set_flag(flags, option.flag, self.FLAG_VALUES[enabled])
            if not enabled:
                continue
            for delta in option.environment:
                existing = environment.get(delta.name, self.base_environment.get(delta.name, ""))
                value = self.replace_variables(delta.value)
                environment[delta.name] = f"{existing}{delta.separator}{value}" if existing else value

        platform_config = self.platform_configs.get(platform.system, PlatformConfig())
        for key, value in platform_config.flags.items():
            _override_flag(flags, key, self.replace_variables(value))

        return BuildPlan(
            variant=self.variant.name,
            platform=platform,
            install_dir=self.install_dir,
            flags=tuple(flags),
            env_items=tuple(environment.items()),
        )


def _set_flag(flags: List[Tuple[str, str]], key: str, value: str) -> None:
    for index, (existing, _) in enumerate(flags):
        if existing == key:
            flags[index] = (key, value)
            return
    flags.append((key, value))


def _override_flag(flags: List[Tuple[str, str]], key: str, value: str) -> None:
    flags[:] = [(existing, current) for existing, current in flags if existing != key]
    flags.append((key, value))


__all__ = ["BuildPlan", "BuildPlanResolver"]
