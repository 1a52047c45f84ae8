"""
Step executor that runs the ordered install steps
"""

from pathlib import Path
from typing import Any, List

from ..config import VariantConfig
from ..plan import BuildPlan
from .base_builder import BaseBuilder, InstalledArtifacts, InstallStep
from .cmake_builder import CMakeBuilder


class StepExecutor:
    """Chooses the install steps for a plan and runs them in order"""

    # Map build systems to builder classes
    BUILDER_MAP = {
        "cmake": CMakeBuilder,
    }

    def __init__(self,
                 variant: VariantConfig,
                 source_dir: Path,
                 toolchain: Any,
                 logger: Any):
        """
        Initialize step executor

        Args:
            variant: Variant being built
            source_dir: Sunshine source checkout
            toolchain: Runner invoked once per step
            logger: Logger instance
        """
        self.variant = variant
        self.source_dir = Path(source_dir)
        self.toolchain = toolchain
        self.logger = logger

    def get_builder(self, plan: BuildPlan) -> BaseBuilder:
        """
        Get appropriate builder for the variant

        Args:
            plan: Frozen build plan

        Returns:
            Builder instance
        """
        builder_class = self.BUILDER_MAP.get(self.variant.build_system)
        if not builder_class:
            raise ValueError(f"Unknown build system: {self.variant.build_system}")
        return builder_class(
            plan=plan,
            variant=self.variant,
            source_dir=self.source_dir,
            toolchain=self.toolchain,
            logger=self.logger,
        )

    def plan_steps(self, plan: BuildPlan) -> List[InstallStep]:
        """
        List the install steps for a plan, in execution order

        Args:
            plan: Frozen build plan

        Returns:
            configure, compile, install steps, then the platform post-install
            script and the signing step when they apply
        """
        builder = self.get_builder(plan)
        steps = [builder.configure(), builder.build(), *builder.install()]

        script = self.variant.post_install_scripts.get(plan.platform.system)
        if script is not None:
            target = plan.install_dir / script.target
            steps.append(InstallStep(
                name="install post-install script",
                command=("install", "-m", "0755", str(builder.source_dir / script.source), str(target)),
                artifact=target,
            ))

        rule = self.variant.codesign
        if (rule is not None
                and plan.platform.system in rule.platforms
                and plan.platform.arch in rule.architectures):
            steps.append(InstallStep(
                name="codesign",
                command=(*rule.command, str(plan.install_dir / rule.binary)),
            ))
        elif rule is not None:
            self.logger.debug(f"Skipping codesign on {plan.platform}")

        return steps

    def execute(self, plan: BuildPlan) -> InstalledArtifacts:
        """
        Run every step, stopping at the first failure

        Args:
            plan: Frozen build plan

        Returns:
            Artifacts placed in the install prefix

        Raises:
            StepFailure: From the first step whose command fails
        """
        builder = self.get_builder(plan)
        steps = self.plan_steps(plan)
        self.logger.info(f"Building {self.variant.name} {self.variant.version} for {plan.platform}...")

        for index, step in enumerate(steps, start=1):
            self.logger.info(f"[{index}/{len(steps)}] {step.name}")
            builder.run_step(step)

        self.logger.success(f"Successfully built {self.variant.name}")
        return InstalledArtifacts(
            install_dir=plan.install_dir,
            paths=tuple(step.artifact for step in steps if step.artifact is not None),
            steps=tuple(step.name for step in steps),
        )

    def self_test(self, install_dir: Path) -> bool:
        """
        Run the installed binaries and report whether they all exit cleanly

        Args:
            install_dir: Install prefix of the variant

        Returns:
            True if every self-test command exited with status 0
        """
        if not self.variant.self_test:
            self.logger.warning(f"{self.variant.name} declares no self-test commands")
            return True

        passed = True
        for command in self.variant.self_test:
            args = [arg.replace("{install_dir}", str(install_dir)) for arg in command]
            status = self.toolchain.run("self-test", args)
            if status == 0:
                self.logger.success(f"PASS: {' '.join(args)}")
            else:
                self.logger.error(f"FAIL ({status}): {' '.join(args)}")
                passed = False
        return passed
