import json
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from sunshine_build.utils import InstallRegistry, LibraryRegistry, Logger, ToolchainRunner, Verifier


def test_registry_round_trips_through_disk(tmp_path):
    registry = InstallRegistry(tmp_path / "state")
    assert registry.installed_variants() == []

    registry.mark_installed("sunshine-beta", "2025.102.32311", "linux (x86_64)", tmp_path / "prefix")

    reloaded = InstallRegistry(tmp_path / "state")
    assert reloaded.installed_variants() == ["sunshine-beta"]
    assert reloaded.is_installed("sunshine-beta")
    info = reloaded.get_info("sunshine-beta")
    assert info["version"] == "2025.102.32311"
    assert info["install_dir"] == str(tmp_path / "prefix")
    assert reloaded.get_info("sunshine") is None


def test_corrupted_registry_is_reported(tmp_path):
    (tmp_path / "installed_variants.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError, match="corrupted"):
        InstallRegistry(tmp_path)


def test_registry_must_hold_a_mapping(tmp_path):
    (tmp_path / "installed_variants.json").write_text(json.dumps(["sunshine"]), encoding="utf-8")

    with pytest.raises(ValueError):
        InstallRegistry(tmp_path)


def test_library_registry_checks_opt_directory(tmp_path):
    (tmp_path / "icu4c").mkdir()
    (tmp_path / "boost").write_text("", encoding="utf-8")
    libraries = LibraryRegistry(tmp_path)

    assert libraries.opt_prefix("icu4c") == tmp_path / "icu4c"
    assert libraries.is_installed("icu4c")
    assert not libraries.is_installed("boost")
    assert not libraries.is_installed("zstd")


def test_dry_run_does_not_execute(capsys):
    runner = ToolchainRunner(Logger(), dry_run=True)

    status = runner.run("compile", ["sunshine-build-no-such-tool", "-j"])

    assert status == 0
    assert "[DRY RUN] Would run: sunshine-build-no-such-tool -j" in capsys.readouterr().out


def test_missing_executable_maps_to_127(tmp_path):
    runner = ToolchainRunner(Logger())

    assert runner.run("configure", [str(tmp_path / "no-such-cmake")]) == ToolchainRunner.MISSING_EXECUTABLE == 127


def test_non_executable_tool_maps_to_126(tmp_path, capsys):
    tool = tmp_path / "cmake"
    tool.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    tool.chmod(0o644)
    runner = ToolchainRunner(Logger())

    assert runner.run("configure", [str(tool)]) == ToolchainRunner.NOT_EXECUTABLE == 126
    assert f"Cannot run {tool}" in capsys.readouterr().out


def test_missing_working_directory_is_not_reported_as_missing_command(tmp_path, capsys):
    missing = tmp_path / "build"
    runner = ToolchainRunner(Logger())

    assert runner.run("compile", [sys.executable, "-c", "pass"], cwd=missing) == 127
    out = capsys.readouterr().out
    assert str(missing) in out
    assert f"Cannot run {sys.executable}" not in out


def test_run_returns_exit_status_and_passes_environment(tmp_path):
    runner = ToolchainRunner(Logger())
    script = "import os, sys; sys.exit(0 if os.environ['COMMIT'] == 'abc' else 4)"

    assert runner.run("self-test", [sys.executable, "-c", script], env={"COMMIT": "abc"}, cwd=tmp_path) == 0
    assert runner.run("self-test", [sys.executable, "-c", script], env={"COMMIT": "def"}) == 4


def test_verifier_lists_missing_artifacts(tmp_path):
    present = tmp_path / "sunshine"
    present.write_text("", encoding="utf-8")
    missing = tmp_path / "test_sunshine"
    verifier = Verifier(Logger())

    assert verifier.get_missing_files([present, missing]) == [missing]
    assert verifier.verify([present])
    assert not verifier.verify([missing])


def test_logger_success_level_and_raw_output(capsys):
    logger = Logger()

    logger.success("built")
    logger.raw("Thanks for installing Sunshine!")
    logger.debug("hidden")

    out = capsys.readouterr().out
    assert "[SUCCESS] built" in out
    assert "Thanks for installing Sunshine!\n" in out
    assert "[INFO] Thanks" not in out
    assert "hidden" not in out


def test_verbose_logger_shows_debug(capsys):
    Logger(verbose=True).debug("cmake found")

    assert "[DEBUG] cmake found" in capsys.readouterr().out


def test_log_file_receives_debug_output(tmp_path):
    log_file = tmp_path / "build.log"
    logger = Logger(log_file=str(log_file))

    logger.debug("configure flags")
    for handler in logger.logger.handlers:
        handler.flush()

    assert "[DEBUG] configure flags" in log_file.read_text(encoding="utf-8")
