"""
Runtime Configuration

Central configuration for tree construction and logging.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from sparse_merkle.merkle.paths import PathOrder
from sparse_merkle.schemas.errors import ConfigurationError

load_dotenv()


ENV_PREFIX = "SMT_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(name: str, value: Any) -> bool:
    """Accept a bool or one of the usual true/false spellings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {value!r}",
        details={name: repr(value)},
    )


def _parse_log_level(value: Any) -> str:
    if isinstance(value, str) and value.strip().upper() in LOG_LEVELS:
        return value.strip().upper()
    raise ConfigurationError(
        f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}",
        details={"log_level": repr(value), "allowed": list(LOG_LEVELS)},
    )


@dataclass
class TreeConfig:
    """Configuration for one sparse Merkle tree."""
    depth: int = 256
    big_numbers: bool = False
    path_order: str = PathOrder.MSB_FIRST.value
    strict_deletes: bool = False
    hash_function: str = "sha256"

    def __post_init__(self):
        if isinstance(self.depth, bool) or not isinstance(self.depth, int) or self.depth < 1:
            raise ConfigurationError(
                f"Tree depth must be a positive integer, got {self.depth!r}",
                details={"depth": repr(self.depth)},
            )
        self.big_numbers = _parse_bool("big_numbers", self.big_numbers)
        self.strict_deletes = _parse_bool("strict_deletes", self.strict_deletes)
        self.path_order = PathOrder.parse(self.path_order).value


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    tree: TreeConfig = field(default_factory=TreeConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.log_level = _parse_log_level(self.log_level)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - SMT_DEPTH: Tree depth
        - SMT_BIG_NUMBERS: Use big-number hashes (true/false)
        - SMT_PATH_ORDER: Key bit order (msb/lsb)
        - SMT_STRICT_DELETES: Raise on deleting absent keys (true/false)
        - SMT_HASH_FUNCTION: Stock hash function name
        - SMT_LOG_LEVEL: Log level
        - SMT_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}DEPTH"):
            raw = os.getenv(f"{ENV_PREFIX}DEPTH", "")
            try:
                overrides.setdefault("tree", {})["depth"] = int(raw)
            except ValueError:
                raise ConfigurationError(
                    f"{ENV_PREFIX}DEPTH must be an integer, got {raw!r}"
                ) from None
        if os.getenv(f"{ENV_PREFIX}BIG_NUMBERS"):
            overrides.setdefault("tree", {})["big_numbers"] = os.getenv(f"{ENV_PREFIX}BIG_NUMBERS")
        if os.getenv(f"{ENV_PREFIX}PATH_ORDER"):
            overrides.setdefault("tree", {})["path_order"] = os.getenv(f"{ENV_PREFIX}PATH_ORDER")
        if os.getenv(f"{ENV_PREFIX}STRICT_DELETES"):
            overrides.setdefault("tree", {})["strict_deletes"] = os.getenv(
                f"{ENV_PREFIX}STRICT_DELETES"
            )
        if os.getenv(f"{ENV_PREFIX}HASH_FUNCTION"):
            overrides.setdefault("tree", {})["hash_function"] = os.getenv(f"{ENV_PREFIX}HASH_FUNCTION")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must hold a mapping: {path}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        tree_data = data.get("tree", {}) or {}
        try:
            tree = TreeConfig(**tree_data)
        except TypeError as e:
            raise ConfigurationError(f"Invalid tree configuration: {e}") from e

        return cls(
            tree=tree,
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        if "tree" in overrides:
            tree_data = {**self.to_dict()["tree"], **overrides["tree"]}
            new_config.tree = TreeConfig(**tree_data)

        if "log_level" in overrides:
            new_config.log_level = _parse_log_level(overrides["log_level"])
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "tree": {
                "depth": self.tree.depth,
                "big_numbers": self.tree.big_numbers,
                "path_order": self.tree.path_order,
                "strict_deletes": self.tree.strict_deletes,
                "hash_function": self.tree.hash_function,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
            "extra": self.extra,
        }


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set the default runtime configuration (None resets it)."""
    global _default_config
    _default_config = config
