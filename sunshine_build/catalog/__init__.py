"""
Dependency catalog: which packages a variant needs on each platform
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import CatalogError
from ..platform import OperatingSystem, Platform


class DependencyKind(str, Enum):
    """When a dependency has to be present"""

    BUILD = "build"
    RUNTIME = "runtime"
    RECOMMENDED = "recommended"


class Dependency(BaseModel):
    """A named package required by the build or by the installed binaries"""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: DependencyKind = DependencyKind.RUNTIME
    platforms: FrozenSet[OperatingSystem] = Field(default_factory=lambda: frozenset(OperatingSystem))
    """Platforms the dependency applies to"""

    def applies_to(self, platform: Platform) -> bool:
        return platform.system in self.platforms


KindFilter = Union[DependencyKind, Iterable[DependencyKind], None]


class DependencyCatalog:
    """Static lookup table of dependencies keyed by platform and kind"""

    def __init__(self, dependencies: Iterable[Dependency]):
        """
        Initialize the catalog

        Args:
            dependencies: Dependency entries, in any order

        Raises:
            CatalogError: If an entry applies to no platform or is declared twice
        """
        self._dependencies: Dict[Tuple[str, DependencyKind], Dependency] = {}
        for dependency in dependencies:
            if not dependency.platforms:
                raise CatalogError(f"Dependency '{dependency.name}' does not apply to any platform")
            key = (dependency.name, dependency.kind)
            if key in self._dependencies:
                raise CatalogError(
                    f"Dependency '{dependency.name}' is declared twice as {dependency.kind.value}"
                )
            self._dependencies[key] = dependency

    @classmethod
    def from_entries(cls, entries: Iterable[dict]) -> "DependencyCatalog":
        """Build a catalog from raw configuration mappings"""
        return cls(Dependency.model_validate(entry) for entry in entries)

    def __len__(self) -> int:
        return len(self._dependencies)

    def dependencies_for(self, platform: Platform, kinds: KindFilter = None) -> FrozenSet[Dependency]:
        """
        Look up the dependencies that apply to a platform

        Args:
            platform: Run platform
            kinds: A kind or iterable of kinds to keep (None keeps all)

        Returns:
            Set of matching dependencies
        """
        wanted = self._normalize_kinds(kinds)
        return frozenset(
            dependency for dependency in self._dependencies.values()
            if dependency.applies_to(platform) and dependency.kind in wanted
        )

    def names_for(self, platform: Platform, kinds: KindFilter = None) -> List[str]:
        """Sorted dependency names for display"""
        return sorted({dependency.name for dependency in self.dependencies_for(platform, kinds)})

    @staticmethod
    def _normalize_kinds(kinds: KindFilter) -> FrozenSet[DependencyKind]:
        if kinds is None:
            return frozenset(DependencyKind)
        if isinstance(kinds, DependencyKind):
            return frozenset({kinds})
        return frozenset(DependencyKind(kind) for kind in kinds)


def parse_kind(value: Optional[str]) -> Optional[DependencyKind]:
    """Parse a kind filter given on the command line"""
    if value is None or value == "all":
        return None
    return DependencyKind(value)


__all__ = ["Dependency", "DependencyKind", "DependencyCatalog", "parse_kind"]
