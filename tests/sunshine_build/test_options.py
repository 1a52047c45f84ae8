import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sunshine_build.exceptions import OptionConflict, UnknownOption
from sunshine_build.options import BuildOption, OptionModel


@pytest.fixture
def model(config):
    return OptionModel(config.get_options(config.get_variant("sunshine-beta")))


def test_defaults_leave_every_option_off(model):
    resolved = model.resolve({})

    assert resolved.as_dict() == {"docs": False, "static-boost": False}
    assert resolved.active() == []
    assert resolved.explicit == frozenset()


def test_with_switches_turn_options_on(model):
    resolved = model.resolve({"with-docs": True, "with-static-boost": True})

    assert resolved.enabled("docs")
    assert resolved.enabled("static-boost")
    assert resolved.active() == ["docs", "static-boost"]


def test_without_switch_turns_option_off(model):
    resolved = model.resolve({"without-static-boost": True})

    assert resolved.enabled("static-boost") is False
    assert resolved.explicit == frozenset({"static-boost"})


def test_option_names_are_accepted_directly(model):
    resolved = model.resolve({"static-boost": True, "docs": False})

    assert resolved.as_dict() == {"docs": False, "static-boost": True}


def test_absent_values_fall_back_to_defaults(model):
    resolved = model.resolve({"with-docs": None, "static-boost": None})

    assert resolved.as_dict() == {"docs": False, "static-boost": False}
    assert resolved.explicit == frozenset()


def test_resolution_is_idempotent(model):
    requested = {"with-static-boost": True}

    assert model.resolve(requested) == model.resolve(requested)


def test_overriding_switch_wins_over_contradicting_request(model):
    resolved = model.resolve({"with-static-boost": True, "without-static-boost": True})

    assert resolved.enabled("static-boost") is False


def test_contradicting_requests_without_override_conflict(model):
    with pytest.raises(OptionConflict) as excinfo:
        model.resolve({"static-boost": True, "with-static-boost": False})

    assert excinfo.value.option == "static-boost"
    assert excinfo.value.stage == "options"


def test_agreeing_requests_do_not_conflict(model):
    resolved = model.resolve({"static-boost": True, "with-static-boost": True})

    assert resolved.enabled("static-boost")


def test_unknown_option_is_rejected(model):
    with pytest.raises(UnknownOption) as excinfo:
        model.resolve({"with-gui": True, "with-docs": True})

    assert excinfo.value.names == ["with-gui"]
    assert "with-docs" in excinfo.value.available
    assert "with-gui" in str(excinfo.value)


def test_variant_without_options_rejects_every_switch():
    model = OptionModel([])

    with pytest.raises(UnknownOption, match="no build options"):
        model.resolve({"with-docs": True})
    assert model.resolve({}).values == ()


def test_enabled_raises_for_undeclared_option(model):
    with pytest.raises(KeyError):
        model.resolve({}).enabled("tray")


def test_duplicate_switch_is_rejected():
    first = BuildOption(name="docs", switches={"with-docs": True})
    second = BuildOption(name="manual", switches={"with-docs": True})

    with pytest.raises(ValueError, match="with-docs"):
        OptionModel([first, second])


def test_overriding_switch_must_be_declared():
    with pytest.raises(ValueError):
        BuildOption(name="docs", switches={"with-docs": True}, overriding_switch="without-docs")


def test_option_name_cannot_double_as_switch():
    with pytest.raises(ValueError):
        BuildOption(name="docs", switches={"docs": True})
