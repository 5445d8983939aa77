"""
Configuration management for archmatrix.
"""

import os
import tomllib
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field

from archmatrix.core.discovery import find_workspace_root
from archmatrix.core.errors import ConfigurationError, PathNotFoundError
from archmatrix.core.planner import DEFAULT_PACKAGES, PackageSet

CONFIG_ENV_VAR = "ARCHMATRIX_CONFIG"
CONFIG_FILE_NAME = "archmatrix.toml"

PATH_KEYS = frozenset({"project_root", "config_file"})

# Types accepted for keys read from the config file.
FILE_KEY_TYPES = {
    "cargo": str,
    "packages": dict,
    "verbosity": int,
    "dry_run": bool,
    "log_file": str,
}


@dataclass
class Config:
    """Configuration for a matrix run (everything that is not read from CI variables)."""

    # Workspace root - discovered in __post_init__ if not given
    project_root: Optional[Path] = None
    config_file: Optional[Path] = None

    # Toolchain
    cargo: str = "cargo"

    # Manifest path overrides by package name (core_arch, std_detect, examples, workspace)
    packages: Dict[str, str] = field(default_factory=dict)

    # Run configuration
    verbosity: int = 0  # 0=minimal, 1=progress, 2=commands, 3=debug
    dry_run: bool = False
    log_file: Optional[Path] = None

    def __post_init__(self):
        if self.project_root is None:
            try:
                self.project_root = find_workspace_root()
            except Exception as e:
                raise ConfigurationError(
                    f"Could not discover workspace root: {e}. "
                    f"Pass --repo-root or set ARCHMATRIX_ROOT."
                ) from e
        else:
            self.project_root = Path(self.project_root).resolve()

        if not self.project_root.exists():
            raise PathNotFoundError(f"Project root does not exist: {self.project_root}")

        self._load_config_file()

        if not 0 <= self.verbosity <= 3:
            raise ValueError(f"verbosity must be between 0 and 3, got {self.verbosity}")
        if not isinstance(self.packages, dict):
            raise ConfigurationError(f"packages must be a table, got {type(self.packages).__name__}")
        if self.log_file is not None:
            self.log_file = Path(self.log_file)

    def _load_config_file(self) -> None:
        """Load defaults from archmatrix.toml if present."""
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            self.config_file = Path(env_path).resolve()
        elif self.config_file is None:
            self.config_file = self.project_root / CONFIG_FILE_NAME
        else:
            self.config_file = Path(self.config_file).resolve()

        if not self.config_file.exists():
            if env_path:
                raise PathNotFoundError(f"Config file not found: {self.config_file}")
            return

        try:
            data = tomllib.loads(self.config_file.read_text())
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Failed to read config file: {self.config_file}: {e}") from e

        table = data.get("archmatrix") or data.get("tool", {}).get("archmatrix", {})
        if not isinstance(table, dict):
            return

        for key, value in table.items():
            if key not in FILE_KEY_TYPES or value is None:
                continue
            expected = FILE_KEY_TYPES[key]
            # bool is an int subclass; `verbosity = true` is still a type error
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigurationError(
                    f"{self.config_file}: {key} must be {expected.__name__}, got {type(value).__name__}"
                )
            if key == "verbosity" and not 0 <= value <= 3:
                raise ConfigurationError(
                    f"{self.config_file}: verbosity must be between 0 and 3, got {value}"
                )
            if key == "packages":
                bad = [name for name, manifest in value.items() if not isinstance(manifest, str)]
                if bad:
                    raise ConfigurationError(
                        f"{self.config_file}: package manifest paths must be strings: {', '.join(bad)}"
                    )
            setattr(self, key, value)

    @property
    def package_set(self) -> PackageSet:
        try:
            return DEFAULT_PACKAGES.with_overrides(self.packages)
        except KeyError as e:
            raise ConfigurationError(f"Invalid [packages] entry in {self.config_file}: {e}") from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "project_root": str(self.project_root),
            "config_file": str(self.config_file) if self.config_file else None,
            "cargo": self.cargo,
            "packages": dict(self.packages),
            "verbosity": self.verbosity,
            "dry_run": self.dry_run,
            "log_file": str(self.log_file) if self.log_file else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create configuration from dictionary."""
        data = dict(data)
        for key in PATH_KEYS | {"log_file"}:
            if key in data and isinstance(data[key], str):
                data[key] = Path(data[key])
        return cls(**data)
