#!/usr/bin/env python3
"""
Main entry point for the Sunshine build orchestrator
Supports Linux and macOS
"""

import argparse
import os
import sys
import traceback
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from . import constants
from .builders import InstalledArtifacts, StepExecutor
from .catalog import DependencyCatalog, DependencyKind, parse_kind
from .caveats import CaveatReporter
from .config import ConfigLoader
from .exceptions import SunshineBuildError, VerificationFailed
from .options import OptionModel, ResolvedOptions
from .plan import BuildPlan, BuildPlanResolver
from .platform import PlatformDetector
from .utils import InstallRegistry, LibraryRegistry, Logger, ToolchainRunner, Verifier
from .validation import PreconditionValidator, check_variant_conflicts


class InstallRun:
    """One install or self-test run of a Sunshine variant"""

    def __init__(self,
                 variant: Optional[str] = None,
                 source_dir: Optional[Path] = None,
                 install_dir: Optional[Path] = None,
                 platform: str = "auto",
                 arch: str = "auto",
                 verbose: bool = False,
                 dry_run: bool = False,
                 config: Optional[ConfigLoader] = None,
                 toolchain: Optional[Any] = None,
                 library_registry: Optional[Any] = None,
                 install_registry: Optional[InstallRegistry] = None,
                 deps_prefix: Optional[Path] = None,
                 base_environment: Optional[Mapping[str, str]] = None,
                 logger: Optional[Logger] = None):
        """
        Initialize the run

        Args:
            variant: Variant to build (defaults to SUNSHINE_BUILD_VARIANT)
            source_dir: Sunshine source checkout
            install_dir: Install prefix
            platform: Target platform (auto, linux, macos)
            arch: Target architecture (auto, x86_64, arm64)
            verbose: Enable verbose output
            dry_run: Log commands without running them
            config: Configuration loader
            toolchain: Runner for external commands
            library_registry: Answers ``is_installed(name)``
            install_registry: Registry of installed variants
            deps_prefix: Directory holding installed libraries
            base_environment: Environment that appended variables extend
            logger: Logger instance
        """
        self.verbose = verbose
        self.dry_run = dry_run
        self.logger = logger or Logger(verbose=verbose, log_file=constants.LOG_FILE)

        self.platform = PlatformDetector().resolve(platform, arch)
        self.logger.info(f"Platform: {self.platform}")

        self.config = config or ConfigLoader()
        self.variant = self.config.get_variant(variant or constants.DEFAULT_VARIANT)

        self.source_dir = Path(source_dir) if source_dir else Path.cwd()
        self.install_dir = Path(install_dir) if install_dir else (
            constants.INSTALL_ROOT / self.variant.name / self.variant.version
        )
        self.deps_prefix = Path(deps_prefix) if deps_prefix else constants.DEPS_PREFIX
        self.base_environment = dict(os.environ if base_environment is None else base_environment)

        self.option_model = OptionModel(self.config.get_options(self.variant))
        self.catalog = DependencyCatalog(self.variant.dependencies)

        self.toolchain = toolchain or ToolchainRunner(self.logger, dry_run=dry_run)
        self.libraries = library_registry or LibraryRegistry(self.deps_prefix)
        self.registry = install_registry or InstallRegistry(constants.STATE_DIR, constants.INSTALL_REGISTRY_FILE)
        self.executor = StepExecutor(
            variant=self.variant,
            source_dir=self.source_dir,
            toolchain=self.toolchain,
            logger=self.logger,
        )
        self.verifier = Verifier(self.logger)

    def resolve_options(self, requested: Mapping[str, Optional[bool]]) -> ResolvedOptions:
        return self.option_model.resolve(requested)

    def build_plan(self, resolved: ResolvedOptions) -> BuildPlan:
        resolver = BuildPlanResolver(
            variant=self.variant,
            option_model=self.option_model,
            platform_configs=self.config.platforms,
            install_dir=self.install_dir,
            deps_prefix=self.deps_prefix,
            base_environment=self.base_environment,
        )
        return resolver.build(self.platform, resolved)

    def install(self, requested: Optional[Mapping[str, Optional[bool]]] = None) -> InstalledArtifacts:
        """
        Resolve, validate, build and install the variant

        Args:
            requested: Option or switch name -> True/False/None

        Returns:
            Installed artifacts

        Raises:
            SunshineBuildError: From the first stage that fails
        """
        resolved = self.resolve_options(requested or {})
        for option in self.option_model.options:
            state = "enabled" if resolved.enabled(option.name) else "disabled"
            self.logger.info(f"{option.description or option.name}: {state}")

        for kind in DependencyKind:
            names = self.catalog.names_for(self.platform, kind)
            if names:
                self.logger.debug(f"{kind.value} dependencies: {', '.join(names)}")

        plan = self.build_plan(resolved)
        for name, value in plan.environment.items():
            self.logger.debug(f"Environment: {name}={value}")

        check_variant_conflicts(self.variant, self.registry.installed_variants())
        PreconditionValidator(self.option_model, self.libraries.is_installed, self.logger).validate(
            resolved, self.platform
        )

        artifacts = self.executor.execute(plan)

        if not self.dry_run:
            missing = self.verifier.get_missing_files(artifacts.paths)
            if missing:
                raise VerificationFailed(missing)
            self.registry.mark_installed(
                self.variant.name, self.variant.version, str(self.platform), self.install_dir
            )

        for block in CaveatReporter(self.install_dir).report(self.platform, resolved):
            self.logger.raw(block)
        return artifacts

    def self_test(self) -> bool:
        """Run the installed binaries; True if all exit cleanly"""
        if self.dry_run:
            self.logger.warning(f"Self-test of {self.variant.name} skipped: dry run executes no binaries")
            return True
        self.logger.info(f"Testing {self.variant.name} in {self.install_dir}...")
        return self.executor.self_test(self.install_dir)

    def list_dependencies(self, kind: Optional[DependencyKind] = None) -> List[str]:
        return self.catalog.names_for(self.platform, kind)

    def show_info(self) -> None:
        """Show orchestrator information"""
        from . import __version__

        print(f"\nSunshine Build v{__version__}")
        print(f"{'='*50}")
        print(f"Platform: {self.platform}")
        print(f"Variant: {self.variant.name} {self.variant.version}")
        print(f"Source Directory: {self.source_dir}")
        print(f"Install Directory: {self.install_dir}")

        print(f"\nOptions ({len(self.option_model.options)}):")
        for option in self.option_model.options:
            default = "on" if option.default else "off"
            switches = ", ".join(f"--{switch}" for switch in option.switches)
            print(f"  - {option.name:20} default {default:4} {switches}")

        print("\nDependencies:")
        for kind in DependencyKind:
            names = self.catalog.names_for(self.platform, kind)
            print(f"  {kind.value:12} {', '.join(names) if names else '-'}")

        installed = self.registry.installed_variants()
        print("\nInstalled variants:")
        if not installed:
            print("  (none)")
        for name in installed:
            info = self.registry.get_info(name) or {}
            print(f"  - {name:20} {info.get('version', '?')} in {info.get('install_dir', '?')}")


def _parse_option_switches(extras: List[str], parser: argparse.ArgumentParser) -> Dict[str, Optional[bool]]:
    """Turn --with-<x>/--without-<x> arguments into a requested-options mapping"""
    requested: Dict[str, Optional[bool]] = {}
    for extra in extras:
        if extra.startswith("--with-") or extra.startswith("--without-"):
            requested[extra[2:]] = True
        else:
            parser.error(f"unrecognized arguments: {extra}")
    return requested


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface"""
    parser = argparse.ArgumentParser(
        prog="sunshine-build",
        description="Sunshine build orchestrator - option-aware native build and install",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s install                          # Build and install with defaults
  %(prog)s install --with-static-boost      # Link Boost statically
  %(prog)s install --dry-run --with-docs    # Show the commands only
  %(prog)s test                             # Run the installed binaries
  %(prog)s deps --kind runtime              # List run-time dependencies
  %(prog)s info                             # Show orchestrator information
        """
    )

    parser.add_argument(
        "command",
        choices=["install", "test", "deps", "info"],
        help="Command to execute"
    )

    parser.add_argument(
        "--variant",
        default=constants.DEFAULT_VARIANT,
        help=f"Package variant to build (default: {constants.DEFAULT_VARIANT})"
    )

    parser.add_argument(
        "--platform",
        choices=["auto", "linux", "macos"],
        default="auto",
        help="Target platform (default: auto-detect)"
    )

    parser.add_argument(
        "--arch",
        choices=["auto", "x86_64", "arm64"],
        default="auto",
        help="Target architecture (default: auto-detect)"
    )

    parser.add_argument(
        "--source-dir",
        type=Path,
        help="Sunshine source checkout (default: current directory)"
    )

    parser.add_argument(
        "--install-dir",
        type=Path,
        help="Install prefix (default: <install root>/<variant>/<version>)"
    )

    parser.add_argument(
        "--kind",
        choices=["all"] + [kind.value for kind in DependencyKind],
        default="all",
        help="Dependency kind to list (use with deps command)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the install commands without running them"
    )

    args, extras = parser.parse_known_args(argv)
    requested = _parse_option_switches(extras, parser)
    if requested and args.command != "install":
        parser.error("build options are only accepted by the install command")

    try:
        run = InstallRun(
            variant=args.variant,
            source_dir=args.source_dir,
            install_dir=args.install_dir,
            platform=args.platform,
            arch=args.arch,
            verbose=args.verbose,
            dry_run=args.dry_run,
        )
    except (ValueError, FileNotFoundError) as e:
        print(f"Error initializing build orchestrator: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "install":
            run.install(requested)
            return 0

        elif args.command == "test":
            return 0 if run.self_test() else 1

        elif args.command == "deps":
            for name in run.list_dependencies(parse_kind(args.kind)):
                print(name)
            return 0

        elif args.command == "info":
            run.show_info()
            return 0

    except SunshineBuildError as e:
        run.logger.error(f"{e.stage.capitalize()} failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nBuild interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        run.logger.error(f"Build orchestrator error: {e}")
        if args.verbose:
            traceback.print_exc()
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())
