"""
Build option model: recognized toggles, their defaults and switch rules
"""

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import OptionConflict, UnknownOption
from ..platform import OperatingSystem, Platform


class OptionPrecondition(BaseModel):
    """An installed library an option needs before the build can start"""

    model_config = ConfigDict(frozen=True)

    library: str
    hint: str
    """Remediation text shown to the user"""
    platforms: FrozenSet[OperatingSystem] = Field(default_factory=lambda: frozenset(OperatingSystem))

    def applies_to(self, platform: Platform) -> bool:
        return platform.system in self.platforms


class EnvironmentDelta(BaseModel):
    """A value appended to an environment variable when an option is on"""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    separator: str = " "


class BuildOption(BaseModel):
    """A named boolean build toggle"""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    default: bool = False
    flag: Optional[str] = None
    """CMake cache entry receiving ON/OFF"""
    switches: Dict[str, bool] = Field(default_factory=dict)
    """Switch name -> value requested when the switch is given"""
    overriding_switch: Optional[str] = None
    """Switch that wins when explicit requests disagree"""
    requires: Tuple[OptionPrecondition, ...] = ()
    environment: Tuple[EnvironmentDelta, ...] = ()

    @model_validator(mode="after")
    def _check_switches(self) -> "BuildOption":
        if self.overriding_switch is not None and self.overriding_switch not in self.switches:
            raise ValueError(
                f"Option '{self.name}' overriding switch '{self.overriding_switch}' is not one of its switches"
            )
        if self.name in self.switches:
            raise ValueError(f"Option '{self.name}' cannot use its own name as a switch")
        return self

    def requested_value(self, key: str, value: bool) -> bool:
        """Translate an explicit request for ``key`` into this option's value"""
        if key == self.name:
            return value
        switch_value = self.switches[key]
        return switch_value if value else not switch_value


class ResolvedOptions(BaseModel):
    """Final option values of one run, in option-declared order"""

    model_config = ConfigDict(frozen=True)

    values: Tuple[Tuple[str, bool], ...] = ()
    explicit: FrozenSet[str] = frozenset()
    """Options the caller set explicitly"""

    def enabled(self, name: str) -> bool:
        for option_name, value in self.values:
            if option_name == name:
                return value
        raise KeyError(name)

    def active(self) -> List[str]:
        return [name for name, value in self.values if value]

    def as_dict(self) -> Dict[str, bool]:
        return dict(self.values)


class OptionModel:
    """The option set of one variant and the rules for resolving requests"""

    def __init__(self, options: Iterable[BuildOption]):
        self.options: List[BuildOption] = list(options)
        self._lookup: Dict[str, BuildOption] = {}
        for option in self.options:
            for key in (option.name, *option.switches):
                if key in self._lookup:
                    raise ValueError(f"Option name or switch '{key}' is declared more than once")
                self._lookup[key] = option

    def names(self) -> List[str]:
        """Every accepted request key: option names first, then switches"""
        return [option.name for option in self.options] + [
            switch for option in self.options for switch in option.switches
        ]

    def get(self, name: str) -> BuildOption:
        return self._lookup[name]

    def resolve(self, requested: Mapping[str, Optional[bool]]) -> ResolvedOptions:
        """
        Resolve requested values against declared defaults

        Args:
            requested: Option or switch name -> True/False, or None when absent

        Returns:
            Resolved option values

        Raises:
            UnknownOption: If any key is not a known option or switch
            OptionConflict: If two explicit requests disagree and neither overrides
        """
        unknown = [key for key in requested if key not in self._lookup]
        if unknown:
            raise UnknownOption(unknown, self.names())

        requests: Dict[str, List[Tuple[str, bool]]] = {}
        for key, value in requested.items():
            if value is None:
                continue
            option = self._lookup[key]
            requests.setdefault(option.name, []).append((key, option.requested_value(key, bool(value))))

        values: List[Tuple[str, bool]] = []
        for option in self.options:
            option_requests = requests.get(option.name)
            if not option_requests:
                values.append((option.name, option.default))
                continue
            values.append((option.name, self._pick(option, option_requests, requested)))

        return ResolvedOptions(values=tuple(values), explicit=frozenset(requests))

    @staticmethod
    def _pick(option: BuildOption,
              option_requests: List[Tuple[str, bool]],
              requested: Mapping[str, Optional[bool]]) -> bool:
        first_key, first_value = option_requests[0]
        for key, value in option_requests[1:]:
            if value == first_value:
                continue
            overriding = option.overriding_switch
            if overriding is not None and requested.get(overriding) is True:
                return option.requested_value(overriding, True)
            raise OptionConflict(option.name, first_key, key)
        return first_value


__all__ = ["BuildOption", "EnvironmentDelta", "OptionModel", "OptionPrecondition", "ResolvedOptions"]
