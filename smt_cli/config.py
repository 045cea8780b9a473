"""
CLI Configuration

Locates and loads the YAML configuration used by the CLI.
Environment variables (SMT_* prefix) override file settings.
"""

from __future__ import annotations

from pathlib import Path

from sparse_merkle.config.runtime import RuntimeConfig


def default_config_paths() -> list[Path]:
    return [
        Path.cwd() / "smt.yaml",
        Path.cwd() / ".smt.yaml",
        Path.home() / ".config" / "smt" / "config.yaml",
    ]


def load_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration

    Raises:
        FileNotFoundError: If config_path is given but does not exist
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_yaml(config_path)
    else:
        for default_path in default_config_paths():
            if default_path.exists():
                config = RuntimeConfig.from_yaml(default_path)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return """# sparse-merkle configuration
tree:
  depth: 256
  big_numbers: false
  path_order: msb        # msb or lsb
  strict_deletes: false
  hash_function: sha256
log_level: INFO
log_file: null
"""
