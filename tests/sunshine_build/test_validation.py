import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sunshine_build.exceptions import PreconditionFailed, VariantConflict
from sunshine_build.options import BuildOption, OptionModel, OptionPrecondition
from sunshine_build.platform import OperatingSystem
from sunshine_build.validation import PreconditionValidator, check_variant_conflicts


@pytest.fixture
def model(config):
    return OptionModel(config.get_options(config.get_variant("sunshine-beta")))


def test_static_boost_without_icu_fails(model, libraries, macos_arm):
    validator = PreconditionValidator(model, libraries.is_installed)

    with pytest.raises(PreconditionFailed) as excinfo:
        validator.validate(model.resolve({"static-boost": True}), macos_arm)

    assert excinfo.value.missing == ["icu4c"]
    assert excinfo.value.stage == "preconditions"
    assert "--without-static-boost" in str(excinfo.value)


def test_static_boost_with_icu_passes(model, libraries, logger, macos_arm):
    libraries.installed.add("icu4c")

    PreconditionValidator(model, libraries.is_installed, logger).validate(
        model.resolve({"with-static-boost": True}), macos_arm
    )

    assert libraries.queries == ["icu4c"]


def test_disabled_options_are_not_checked(model, libraries, linux):
    PreconditionValidator(model, libraries.is_installed).validate(model.resolve({}), linux)

    assert libraries.queries == []


def test_every_unmet_precondition_is_reported(libraries, linux):
    model = OptionModel([
        BuildOption(name="static-boost", default=True, requires=(
            OptionPrecondition(library="icu4c", hint="install icu4c"),
            OptionPrecondition(library="zstd", hint="install zstd"),
        )),
        BuildOption(name="docs", default=True, requires=(
            OptionPrecondition(library="doxygen", hint="install doxygen"),
        )),
    ])

    failures = PreconditionValidator(model, libraries.is_installed).collect_failures(model.resolve({}), linux)

    assert [failure.requirement for failure in failures] == ["icu4c", "zstd", "doxygen"]
    assert [failure.hint for failure in failures] == ["install icu4c", "install zstd", "install doxygen"]


def test_platform_restricted_precondition_is_skipped(libraries, linux, macos_arm):
    model = OptionModel([
        BuildOption(name="static-boost", default=True, requires=(
            OptionPrecondition(library="icu4c", hint="install icu4c", platforms={OperatingSystem.MACOS}),
        )),
    ])
    validator = PreconditionValidator(model, libraries.is_installed)

    validator.validate(model.resolve({}), linux)
    with pytest.raises(PreconditionFailed):
        validator.validate(model.resolve({}), macos_arm)


def test_conflicting_variant_blocks_install(config):
    beta = config.get_variant("sunshine-beta")

    with pytest.raises(VariantConflict) as excinfo:
        check_variant_conflicts(beta, ["sunshine"])

    assert isinstance(excinfo.value, PreconditionFailed)
    assert excinfo.value.missing == ["sunshine"]
    assert "uninstall sunshine before installing sunshine-beta" in str(excinfo.value)


def test_reinstalling_same_variant_is_not_a_conflict(config):
    check_variant_conflicts(config.get_variant("sunshine-beta"), ["sunshine-beta"])
    check_variant_conflicts(config.get_variant("sunshine"), [])
