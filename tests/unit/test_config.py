"""
Runtime Configuration Tests
Tests for sparse_merkle/config/runtime.py and smt_cli/config.py

Tests:
1. Defaults match the documented values
2. YAML files load, including partial and empty files
3. SMT_* environment variables override file settings
4. Invalid values raise ConfigurationError
"""
from pathlib import Path

import pytest

from smt_cli.config import get_default_config_template, load_config
from sparse_merkle.config import (
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)
from sparse_merkle.schemas.errors import ConfigurationError


class TestTreeConfig:
    """Tests for TreeConfig validation."""

    def test_defaults(self):
        config = TreeConfig()
        assert config.depth == 256
        assert config.big_numbers is False
        assert config.path_order == "msb"
        assert config.strict_deletes is False
        assert config.hash_function == "sha256"

    def test_path_order_normalized(self):
        assert TreeConfig(path_order="LSB").path_order == "lsb"

    def test_unknown_path_order(self):
        with pytest.raises(ConfigurationError):
            TreeConfig(path_order="sideways")

    @pytest.mark.parametrize("depth", [0, -5, "16", True])
    def test_invalid_depth(self, depth):
        with pytest.raises(ConfigurationError):
            TreeConfig(depth=depth)

    @pytest.mark.parametrize("text, expected", [
        ("false", False), ("no", False), ("0", False), ("True", True), ("on", True),
    ])
    def test_boolean_strings(self, text, expected):
        config = TreeConfig(big_numbers=text, strict_deletes=text)
        assert config.big_numbers is expected
        assert config.strict_deletes is expected

    @pytest.mark.parametrize("value", ["maybe", 1, None, [True]])
    def test_non_boolean_rejected(self, value):
        with pytest.raises(ConfigurationError, match="big_numbers"):
            TreeConfig(big_numbers=value)
        with pytest.raises(ConfigurationError, match="strict_deletes"):
            TreeConfig(strict_deletes=value)

    def test_quoted_false_keeps_hex_mode(self):
        from sparse_merkle.merkle import SparseMerkleTree

        config = RuntimeConfig.from_dict(
            {"tree": {"depth": 8, "big_numbers": "false", "strict_deletes": "no"}}
        )
        tree = SparseMerkleTree.from_config(config)

        assert tree.zero == "0"
        assert tree.strict_deletes is False


class TestRuntimeConfig:
    """Tests for RuntimeConfig loading."""

    def test_defaults(self):
        config = RuntimeConfig()
        assert config.tree.depth == 256
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"tree": {"depth": 32}})
        assert config.tree.depth == 32
        assert config.tree.big_numbers is False
        assert config.log_level == "INFO"

    def test_from_dict_unknown_tree_field(self):
        with pytest.raises(ConfigurationError, match="Invalid tree configuration"):
            RuntimeConfig.from_dict({"tree": {"width": 3}})

    def test_round_trip_dict(self):
        config = RuntimeConfig.from_dict({
            "tree": {"depth": 20, "big_numbers": True, "path_order": "lsb"},
            "log_level": "DEBUG",
            "extra": {"owner": "ops"},
        })
        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "smt.yaml"
        path.write_text("tree:\n  depth: 64\n  strict_deletes: true\nlog_level: WARNING\n")

        config = RuntimeConfig.from_yaml(path)

        assert config.tree.depth == 64
        assert config.tree.strict_deletes is True
        assert config.log_level == "WARNING"

    def test_from_empty_yaml(self, tmp_path):
        path = tmp_path / "smt.yaml"
        path.write_text("")
        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_from_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "smt.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError):
            RuntimeConfig.from_yaml(path)

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_log_level_normalized(self):
        assert RuntimeConfig.from_dict({"log_level": "debug"}).log_level == "DEBUG"

    @pytest.mark.parametrize("level", [10, "verbose", None])
    def test_invalid_log_level(self, level):
        with pytest.raises(ConfigurationError, match="log_level"):
            RuntimeConfig.from_dict({"log_level": level})

    def test_invalid_log_level_in_yaml(self, tmp_path):
        path = tmp_path / "smt.yaml"
        path.write_text("log_level: 10\n")
        with pytest.raises(ConfigurationError):
            RuntimeConfig.from_yaml(path)

    def test_template_parses(self, tmp_path):
        path = tmp_path / "smt.yaml"
        path.write_text(get_default_config_template())
        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()


class TestEnvOverrides:
    """Tests for SMT_* environment variables."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SMT_DEPTH", "40")
        monkeypatch.setenv("SMT_BIG_NUMBERS", "yes")
        monkeypatch.setenv("SMT_PATH_ORDER", "lsb")
        monkeypatch.setenv("SMT_STRICT_DELETES", "1")
        monkeypatch.setenv("SMT_LOG_LEVEL", "DEBUG")

        config = RuntimeConfig.from_env()

        assert config.tree.depth == 40
        assert config.tree.big_numbers is True
        assert config.tree.path_order == "lsb"
        assert config.tree.strict_deletes is True
        assert config.log_level == "DEBUG"

    def test_false_values(self, monkeypatch):
        monkeypatch.setenv("SMT_BIG_NUMBERS", "false")
        assert RuntimeConfig.from_env().tree.big_numbers is False

    def test_invalid_depth(self, monkeypatch):
        monkeypatch.setenv("SMT_DEPTH", "deep")
        with pytest.raises(ConfigurationError, match="SMT_DEPTH"):
            RuntimeConfig.from_env()

    def test_invalid_boolean(self, monkeypatch):
        monkeypatch.setenv("SMT_STRICT_DELETES", "sometimes")
        with pytest.raises(ConfigurationError, match="strict_deletes"):
            RuntimeConfig.from_env()

    def test_invalid_log_level_override(self, monkeypatch):
        monkeypatch.setenv("SMT_LOG_LEVEL", "loud")
        with pytest.raises(ConfigurationError, match="log_level"):
            RuntimeConfig().with_env_overrides()

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "smt.yaml"
        path.write_text("tree:\n  depth: 64\n  big_numbers: true\n")
        monkeypatch.setenv("SMT_DEPTH", "12")

        config = RuntimeConfig.from_yaml(path).with_env_overrides()

        assert config.tree.depth == 12
        assert config.tree.big_numbers is True

    def test_no_overrides_returns_same_object(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config

    def test_overrides_do_not_mutate_original(self, monkeypatch):
        config = RuntimeConfig()
        monkeypatch.setenv("SMT_LOG_LEVEL", "ERROR")

        updated = config.with_env_overrides()

        assert updated.log_level == "ERROR"
        assert config.log_level == "INFO"


class TestDefaultConfig:
    """Tests for the module-level default configuration."""

    def test_get_and_set(self):
        try:
            custom = RuntimeConfig.from_dict({"tree": {"depth": 9}})
            set_default_config(custom)
            assert get_default_config() is custom

            set_default_config(None)
            assert get_default_config().tree.depth == 256
        finally:
            set_default_config(None)


class TestCliConfigLoading:
    """Tests for smt_cli.config.load_config()."""

    @pytest.fixture(autouse=True)
    def _isolated_dirs(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))

    def test_no_files_gives_defaults(self):
        assert load_config() == RuntimeConfig()

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("tree:\n  depth: 10\n")
        assert load_config(path).tree.depth == 10

    def test_explicit_path_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_cwd_file_found(self, tmp_path):
        (tmp_path / "smt.yaml").write_text("tree:\n  depth: 11\n")
        assert load_config().tree.depth == 11

    def test_home_file_found(self, tmp_path):
        home_config = Path(tmp_path / "home" / ".config" / "smt" / "config.yaml")
        home_config.parent.mkdir(parents=True)
        home_config.write_text("log_level: ERROR\n")
        assert load_config().log_level == "ERROR"

    def test_env_applied_last(self, tmp_path, monkeypatch):
        (tmp_path / "smt.yaml").write_text("tree:\n  depth: 11\n")
        monkeypatch.setenv("SMT_DEPTH", "5")
        assert load_config().tree.depth == 5
