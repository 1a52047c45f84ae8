"""
Utility modules for the build orchestrator
"""

import json
import logging
import os
import subprocess
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'SUCCESS': '\033[92m',  # Bright Green
        'RESET': '\033[0m'
    }

    def format(self, record):
        if getattr(record, 'raw', False):
            return record.getMessage()

        message = super().format(record)
        if sys.stdout.isatty():
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            return f"{color}{message}{self.COLORS['RESET']}"
        return message


class Logger:
    """Build orchestrator logger"""

    SUCCESS = 25  # Between INFO and WARNING

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger

        Args:
            verbose: Enable verbose output
            log_file: Optional log file path
        """
        self.verbose = verbose

        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger("sunshine_build")
        self.logger.setLevel(logging.DEBUG if verbose or log_file else logging.INFO)
        self.logger.propagate = False

        # Remove existing handlers
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

        if verbose:
            fmt = "%(asctime)s [%(levelname)s] %(message)s"
        else:
            fmt = "[%(levelname)s] %(message)s"

        console_handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S"))
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            self.logger.addHandler(file_handler)

    def debug(self, msg: str):
        self.logger.debug(msg)

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str):
        self.logger.error(msg)

    def success(self, msg: str):
        """Log success message"""
        self.logger.log(self.SUCCESS, msg)

    def raw(self, msg: str):
        """Log raw message without formatting"""
        record = self.logger.makeRecord(
            self.logger.name, logging.INFO, "", 0, msg, (), None
        )
        record.raw = True
        self.logger.handle(record)


class ToolchainRunner:
    """Runs external toolchain commands for install steps"""

    NOT_EXECUTABLE = 126
    MISSING_EXECUTABLE = 127

    def __init__(self, logger: Any, dry_run: bool = False):
        """
        Initialize runner

        Args:
            logger: Logger instance
            dry_run: If True, log commands instead of running them
        """
        self.logger = logger
        self.dry_run = dry_run

    def run(self,
            step: str,
            args: Sequence[str],
            env: Optional[Mapping[str, str]] = None,
            cwd: Optional[Path] = None) -> int:
        """
        Run one toolchain command

        Args:
            step: Install step the command belongs to
            args: Command and arguments
            env: Variables set on top of the current environment
            cwd: Working directory

        Returns:
            Exit status of the command
        """
        cmd_str = " ".join(str(arg) for arg in args)
        self.logger.debug(f"[{step}] Running: {cmd_str}")
        if cwd is not None:
            self.logger.debug(f"  in: {cwd}")
        for name, value in (env or {}).items():
            self.logger.debug(f"  {name}={value}")

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would run: {cmd_str}")
            return 0

        merged_env = os.environ.copy()
        merged_env.update(env or {})
        try:
            result = subprocess.run(
                [str(arg) for arg in args],
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                check=False,
            )
        except OSError as e:
            self.logger.error(f"Cannot run {e.filename or args[0]}: {e.strerror}")
            if isinstance(e, PermissionError):
                return self.NOT_EXECUTABLE
            return self.MISSING_EXECUTABLE
        return result.returncode


class LibraryRegistry:
    """Answers whether a library is installed under the dependency prefix"""

    def __init__(self, deps_prefix: Path):
        self.deps_prefix = Path(deps_prefix)

    def opt_prefix(self, name: str) -> Path:
        return self.deps_prefix / name

    def is_installed(self, name: str) -> bool:
        return self.opt_prefix(name).is_dir()


class InstallRegistry:
    """Records which package variants are installed"""

    def __init__(self, state_dir: Path, filename: str = "installed_variants.json"):
        """
        Initialize registry

        Args:
            state_dir: Directory to store the registry file
            filename: Registry file name
        """
        self.state_dir = Path(state_dir)
        self.registry_file = self.state_dir / filename
        self._lock = threading.RLock()
        self.registry_data = self._load_registry()

    def _load_registry(self) -> Dict[str, Any]:
        """Load registry from file"""
        if not self.registry_file.exists():
            return {}
        try:
            with open(self.registry_file, 'r', encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Installed variant registry is corrupted: {self.registry_file}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Installed variant registry must hold a mapping: {self.registry_file}")
        return data

    def _save_registry(self):
        """Save registry to file"""
        with self._lock:
            self.state_dir.mkdir(parents=True, exist_ok=True)
            with open(self.registry_file, 'w', encoding="utf-8") as f:
                json.dump(self.registry_data, f, indent=2)

    def installed_variants(self) -> List[str]:
        with self._lock:
            return sorted(self.registry_data)

    def is_installed(self, variant: str) -> bool:
        with self._lock:
            return variant in self.registry_data

    def mark_installed(self, variant: str, version: str, platform: str, install_dir: Path):
        """
        Mark a variant as installed

        Args:
            variant: Variant name
            version: Installed version
            platform: Platform description
            install_dir: Install prefix
        """
        with self._lock:
            self.registry_data[variant] = {
                "version": version,
                "platform": platform,
                "install_dir": str(install_dir),
                "timestamp": datetime.now().isoformat(),
            }
            self._save_registry()

    def get_info(self, variant: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self.registry_data.get(variant)


class Verifier:
    """Checks that installed artifacts exist"""

    def __init__(self, logger: Any):
        self.logger = logger

    def get_missing_files(self, paths: Iterable[Path]) -> List[Path]:
        """
        Get list of missing files

        Args:
            paths: Expected artifact paths

        Returns:
            Paths that do not exist
        """
        missing = []
        for path in paths:
            if Path(path).exists():
                self.logger.debug(f"  Found artifact: {path}")
            else:
                self.logger.error(f"  Artifact not found: {path}")
                missing.append(Path(path))
        return missing

    def verify(self, paths: Iterable[Path]) -> bool:
        return not self.get_missing_files(paths)


__all__ = ["ColoredFormatter", "Logger", "ToolchainRunner", "LibraryRegistry", "InstallRegistry", "Verifier"]
