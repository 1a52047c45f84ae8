"""
Base builder class that all builders inherit from
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..config import VariantConfig
from ..exceptions import StepFailure
from ..plan import BuildPlan


class InstallStep(BaseModel):
    """One unit of externally executed work"""

    model_config = ConfigDict(frozen=True)

    name: str
    command: Tuple[str, ...]
    cwd: Optional[Path] = None
    artifact: Optional[Path] = None
    """File the step places in the install prefix, if any"""


class InstalledArtifacts(BaseModel):
    """Outcome of a successful install"""

    model_config = ConfigDict(frozen=True)

    install_dir: Path
    paths: Tuple[Path, ...] = ()
    steps: Tuple[str, ...] = ()


class BaseBuilder(ABC):
    """Abstract base class for all builders"""

    def __init__(self,
                 plan: BuildPlan,
                 variant: VariantConfig,
                 source_dir: Path,
                 toolchain: Any,
                 logger: Any):
        """
        Initialize base builder

        Args:
            plan: Frozen build plan
            variant: Variant being built
            source_dir: Sunshine source checkout
            toolchain: Runner invoked once per install step
            logger: Logger instance
        """
        self.plan = plan
        self.variant = variant
        self.source_dir = Path(source_dir).resolve()
        self.install_dir = plan.install_dir
        self.build_dir = self.source_dir / variant.build_dir
        self.toolchain = toolchain
        self.logger = logger

    def replace_variables(self, text: str) -> str:
        """Replace variables in configuration strings"""
        replacements = {
            "{install_dir}": str(self.install_dir),
            "{source_dir}": str(self.source_dir),
            "{build_dir}": str(self.build_dir),
        }
        for key, value in replacements.items():
            text = text.replace(key, value)
        return text

    def run_step(self, step: InstallStep) -> None:
        """
        Run one step through the toolchain

        Raises:
            StepFailure: If the toolchain reports a non-zero status
        """
        status = self.toolchain.run(
            step.name,
            list(step.command),
            env=self.plan.environment,
            cwd=step.cwd,
        )
        if status != 0:
            self.logger.error(f"Command failed: {' '.join(step.command)}")
            raise StepFailure(step.name, status)

    @abstractmethod
    def configure(self) -> InstallStep:
        """Generate the native build configuration"""

    @abstractmethod
    def build(self) -> InstallStep:
        """Compile"""

    @abstractmethod
    def install(self) -> List[InstallStep]:
        """Install compiled artifacts into the prefix"""

    def install_binaries(self) -> List[InstallStep]:
        """Copy extra build-tree binaries such as the unit test runner into <prefix>/bin"""
        steps = []
        for relative in self.variant.install_binaries:
            source = self.build_dir / relative
            target = self.install_dir / "bin" / Path(relative).name
            steps.append(InstallStep(
                name=f"install {Path(relative).name}",
                command=("install", "-m", "0755", str(source), str(target)),
                artifact=target,
            ))
        return steps
