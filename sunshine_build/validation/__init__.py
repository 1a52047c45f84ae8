"""
Precondition checks that must pass before any build step runs
"""

from typing import Any, Callable, Iterable, List, Optional

from ..config import VariantConfig
from ..exceptions import PreconditionFailed, PreconditionFailure, VariantConflict
from ..options import OptionModel, ResolvedOptions
from ..platform import Platform


class PreconditionValidator:
    """Checks option preconditions against the installed library registry"""

    def __init__(self,
                 option_model: OptionModel,
                 is_installed: Callable[[str], bool],
                 logger: Optional[Any] = None):
        """
        Initialize validator

        Args:
            option_model: Options of the variant being built
            is_installed: Returns True when the named library is present
            logger: Logger instance
        """
        self.option_model = option_model
        self.is_installed = is_installed
        self.logger = logger

    def collect_failures(self, resolved: ResolvedOptions, platform: Platform) -> List[PreconditionFailure]:
        """Check every active option and return all unmet preconditions"""
        failures: List[PreconditionFailure] = []
        for name in resolved.active():
            option = self.option_model.get(name)
            for precondition in option.requires:
                if not precondition.applies_to(platform):
                    continue
                if self.is_installed(precondition.library):
                    if self.logger:
                        self.logger.debug(f"{option.name}: found {precondition.library}")
                    continue
                failures.append(PreconditionFailure(precondition.library, precondition.hint))
        return failures

    def validate(self, resolved: ResolvedOptions, platform: Platform) -> None:
        """
        Validate preconditions of the resolved options

        Args:
            resolved: Resolved option values
            platform: Run platform

        Raises:
            PreconditionFailed: Carrying every unmet precondition
        """
        failures = self.collect_failures(resolved, platform)
        if failures:
            raise PreconditionFailed(failures)


def check_variant_conflicts(variant: VariantConfig, installed: Iterable[str]) -> None:
    """
    Refuse to build a variant while a conflicting one is installed

    Args:
        variant: Variant about to be built
        installed: Names of variants already installed

    Raises:
        VariantConflict: If any installed variant conflicts with ``variant``
    """
    installed_names = set(installed)
    failures = []
    for other in variant.conflicts_with:
        if other not in installed_names:
            continue
        reason = variant.conflict_reason or f"{variant.name} conflicts with {other}"
        failures.append(PreconditionFailure(
            other,
            f"{reason}; uninstall {other} before installing {variant.name}",
        ))
    if failures:
        raise VariantConflict(failures)


__all__ = ["PreconditionValidator", "check_variant_conflicts"]
