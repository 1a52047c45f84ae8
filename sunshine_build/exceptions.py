"""Errors raised while resolving and running a Sunshine install"""

from typing import Iterable, List, NamedTuple


class SunshineBuildError(Exception):
    """Base class for all orchestration failures"""

    stage = "build"


class CatalogError(SunshineBuildError, ValueError):
    """Raised when the dependency catalog is internally inconsistent"""

    stage = "configuration"


class UnknownOption(SunshineBuildError):
    """Raised when a requested option is not recognized"""

    stage = "options"

    def __init__(self, names: Iterable[str], available: Iterable[str] = ()):
        self.names = sorted(names)
        self.available = sorted(available)
        message = f"Unknown option(s): {', '.join(self.names)}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        else:
            message += " (this variant has no build options)"
        super().__init__(message)


class OptionConflict(SunshineBuildError):
    """Raised when two explicit requests disagree about one option"""

    stage = "options"

    def __init__(self, option: str, first: str, second: str):
        self.option = option
        self.first = first
        self.second = second
        super().__init__(
            f"Options '{first}' and '{second}' conflict: both set '{option}' "
            "to different values"
        )


class PreconditionFailure(NamedTuple):
    """A single unmet precondition and how to fix it"""

    requirement: str
    hint: str


class PreconditionFailed(SunshineBuildError):
    """Raised when one or more option preconditions are not satisfied"""

    stage = "preconditions"

    def __init__(self, failures: List[PreconditionFailure]):
        self.failures = list(failures)
        lines = [f"- {failure.hint}" for failure in self.failures]
        super().__init__("Unmet build preconditions:\n" + "\n".join(lines))

    @property
    def missing(self) -> List[str]:
        """Names of the unmet requirements, in report order"""
        return [failure.requirement for failure in self.failures]


class VariantConflict(PreconditionFailed):
    """Raised when a conflicting package variant is already installed"""


class StepFailure(SunshineBuildError):
    """Raised when an external toolchain step exits with a failure status"""

    stage = "build"

    def __init__(self, step: str, status: int):
        self.step = step
        self.status = status
        super().__init__(f"Step '{step}' failed with exit status {status}")


class VerificationFailed(SunshineBuildError):
    """Raised when the steps succeeded but expected artifacts are missing"""

    stage = "verification"

    def __init__(self, missing: Iterable[str]):
        self.missing = [str(path) for path in missing]
        super().__init__(f"Missing installed artifacts: {', '.join(self.missing)}")


__all__ = [
    "SunshineBuildError",
    "CatalogError",
    "UnknownOption",
    "OptionConflict",
    "PreconditionFailure",
    "PreconditionFailed",
    "VariantConflict",
    "StepFailure",
    "VerificationFailed",
]
