"""Constant variables"""

import os
import platform
import sys
from pathlib import Path


def _default_package_prefix() -> str:
    """Get the package manager prefix used when HOMEBREW_PREFIX is not set.

    Returns:
        str: Prefix that holds the ``opt`` and ``Cellar`` directories
    """
    if sys.platform == "darwin":
        if platform.machine().lower() in ("arm64", "aarch64"):
            return "/opt/homebrew"
        return "/usr/local"
    return "/home/linuxbrew/.linuxbrew"


_PACKAGE_PREFIX = os.getenv("HOMEBREW_PREFIX", _default_package_prefix())

# ##########
# User Configurable Options
# ##########

DEPS_PREFIX: Path = Path(os.getenv("SUNSHINE_BUILD_DEPS_PREFIX", os.path.join(_PACKAGE_PREFIX, "opt")))
"""Directory holding one ``<name>`` entry per installed library"""
INSTALL_ROOT: Path = Path(os.getenv("SUNSHINE_BUILD_INSTALL_ROOT", os.path.join(_PACKAGE_PREFIX, "Cellar")))
"""Default install prefixes are created as ``<INSTALL_ROOT>/<variant>/<version>``"""
STATE_DIR: Path = Path(os.getenv("SUNSHINE_BUILD_STATE_DIR",
                                 os.path.expanduser("~/.local/state/sunshine_build")))
"""Holds the registry of installed variants"""
DEFAULT_VARIANT: str = os.getenv("SUNSHINE_BUILD_VARIANT", "sunshine-beta")
"""Variant built when --variant is not given"""
LOG_FILE: str | None = os.getenv("SUNSHINE_BUILD_LOG_FILE") or None
"""Optional file receiving full debug output"""

# ##########
# Developer Options
# ##########

DOCS_URL: str = "https://docs.lizardbyte.dev/projects/sunshine/en/latest/"
"""Documentation link shown after install"""
INSTALL_REGISTRY_FILE: str = "installed_variants.json"
"""File name of the installed variant registry inside STATE_DIR"""
