import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import sunshine_build.platform as platform_module
from sunshine_build.platform import OperatingSystem, Platform, PlatformDetector, normalize_architecture


@pytest.mark.parametrize("machine, expected", [
    ("x86_64", "x86_64"),
    ("AMD64", "x86_64"),
    ("x64", "x86_64"),
    ("aarch64", "arm64"),
    ("arm64", "arm64"),
    ("riscv64", "riscv64"),
])
def test_normalize_architecture(machine, expected):
    assert normalize_architecture(machine) == expected


def test_platform_normalizes_architecture():
    platform = Platform(system="linux", arch="amd64")

    assert platform.arch == "x86_64"
    assert platform.is_linux
    assert platform.is_intel
    assert str(platform) == "linux (x86_64)"


def test_apple_silicon_is_not_intel(macos_arm):
    assert macos_arm.is_macos
    assert not macos_arm.is_intel


def test_platform_is_immutable(linux):
    with pytest.raises(Exception):
        linux.arch = "arm64"


def test_resolve_forced_values():
    platform = PlatformDetector().resolve("macos", "x86_64")

    assert platform.system is OperatingSystem.MACOS
    assert platform.is_intel


def test_resolve_rejects_unsupported_system():
    with pytest.raises(ValueError, match="Unsupported platform"):
        PlatformDetector().resolve("windows", "x86_64")


def test_detect_maps_darwin_to_macos(monkeypatch):
    monkeypatch.setattr(platform_module.platform, "system", lambda: "Darwin")
    monkeypatch.setattr(platform_module.platform, "machine", lambda: "arm64")

    assert PlatformDetector().detect() == Platform(system="macos", arch="arm64")


def test_detect_rejects_windows(monkeypatch):
    monkeypatch.setattr(platform_module.platform, "system", lambda: "Windows")

    with pytest.raises(ValueError):
        PlatformDetector().detect()
