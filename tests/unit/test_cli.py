"""
CLI Tests
Tests for smt_cli/main.py and the command modules.

Commands are run in-process through main(argv) with the working
directory and HOME pointed at a temporary directory.
"""
import json
import logging

import pytest

from smt_cli.main import EXIT_RUNTIME_ERROR, EXIT_SUCCESS, main
from sparse_merkle.crypto.hashing import sha256_hex_hash


@pytest.fixture(autouse=True)
def _cli_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def entries_file(tmp_path):
    path = tmp_path / "entries.json"
    path.write_text(json.dumps({"1": "256", "6": "78"}))
    return path


def run_json(capsys, argv):
    code = main(argv)
    return code, json.loads(capsys.readouterr().out)


class TestDemo:
    """Tests for `smt demo`."""

    def test_text_output(self, capsys):
        assert main(["demo"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "init: root_hash=0" in out
        assert "add 2b -> 44: root_hash=44" in out
        assert "proofs_ok: true" in out

    def test_json_output(self, capsys):
        code, data = run_json(capsys, ["demo", "--json"])

        assert code == EXIT_SUCCESS
        assert data["depth"] == 8
        assert data["proofs_ok"] is True
        assert len(data["steps"]) == 6
        assert data["steps"][0]["root"] == ["0", "0"]
        assert data["steps"][1]["root_hash"] == "44"


class TestRoot:
    """Tests for `smt root`."""

    def test_json_output(self, capsys, entries_file):
        code, data = run_json(capsys, ["root", str(entries_file), "--depth", "3", "--json"])

        assert code == EXIT_SUCCESS
        assert data["depth"] == 3
        assert data["entries"] == 2
        assert data["root"] == ["256", "78"]
        assert data["root_hash"] == sha256_hex_hash("256", "78")

    def test_text_output(self, capsys, entries_file):
        assert main(["root", str(entries_file), "-d", "3"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "root: (256, 78)" in out
        assert "entries: 2" in out

    def test_yaml_entries_section(self, capsys, tmp_path):
        path = tmp_path / "entries.yaml"
        path.write_text('entries:\n  "2b": "44"\n')

        code, data = run_json(capsys, ["root", str(path), "--depth", "8", "--json"])

        assert code == EXIT_SUCCESS
        assert data["root_hash"] == "44"

    def test_big_numbers(self, capsys, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text(json.dumps({"5": 123, "0x10": "0x20"}))

        code, data = run_json(
            capsys, ["root", str(path), "--depth", "16", "--big-numbers", "--json"]
        )

        assert code == EXIT_SUCCESS
        assert data["entries"] == 2
        assert isinstance(data["root_hash"], int)

    def test_no_big_numbers_overrides_config(self, capsys, tmp_path, entries_file):
        (tmp_path / "smt.yaml").write_text("tree:\n  big_numbers: true\n")

        code, data = run_json(
            capsys, ["root", str(entries_file), "-d", "3", "--no-big-numbers", "--json"]
        )

        assert code == EXIT_SUCCESS
        assert data["root_hash"] == sha256_hex_hash("256", "78")

    def test_depth_from_config_file(self, capsys, tmp_path, entries_file):
        (tmp_path / "smt.yaml").write_text("tree:\n  depth: 3\n")

        code, data = run_json(capsys, ["root", str(entries_file), "--json"])

        assert code == EXIT_SUCCESS
        assert data["depth"] == 3

    def test_missing_entries_file(self, capsys, tmp_path):
        assert main(["root", str(tmp_path / "missing.json")]) == EXIT_RUNTIME_ERROR
        assert "Error" in capsys.readouterr().err

    def test_entries_not_a_mapping(self, capsys, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text("[1, 2, 3]")
        assert main(["root", str(path)]) == EXIT_RUNTIME_ERROR

    def test_key_too_large(self, capsys, entries_file):
        assert main(["root", str(entries_file), "--depth", "2"]) == EXIT_RUNTIME_ERROR
        assert "too big" in capsys.readouterr().err


class TestProve:
    """Tests for `smt prove`."""

    def test_membership(self, capsys, entries_file):
        code, data = run_json(capsys, ["prove", str(entries_file), "1", "-d", "3", "--json"])

        assert code == EXIT_SUCCESS
        assert data["membership"] is True
        assert data["valid"] is True
        assert data["value_hash"] == "256"
        assert data["siblings"] == ["78", "0", "0"]

    def test_non_membership(self, capsys, entries_file):
        code, data = run_json(capsys, ["prove", str(entries_file), "2", "-d", "3", "--json"])

        assert code == EXIT_SUCCESS
        assert data["membership"] is False
        assert data["value_hash"] == "0"
        assert data["valid"] is True

    def test_text_output(self, capsys, entries_file):
        assert main(["prove", str(entries_file), "6", "-d", "3"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "proof: membership" in out
        assert "valid: true" in out

    def test_lsb_order(self, capsys, entries_file):
        code, data = run_json(
            capsys,
            ["prove", str(entries_file), "6", "-d", "3", "--path-order", "lsb", "--json"],
        )
        assert code == EXIT_SUCCESS
        assert data["valid"] is True

    def test_invalid_key(self, capsys, entries_file):
        assert main(["prove", str(entries_file), "zz", "-d", "3"]) == EXIT_RUNTIME_ERROR


class TestConfigCommand:
    """Tests for `smt config`."""

    def test_show(self, capsys):
        code, data = run_json(capsys, ["config", "--show"])

        assert code == EXIT_SUCCESS
        assert data["tree"]["depth"] == 256
        assert data["tree"]["path_order"] == "msb"

    def test_show_env_override(self, capsys, monkeypatch):
        monkeypatch.setenv("SMT_DEPTH", "64")
        code, data = run_json(capsys, ["config", "--show"])
        assert data["tree"]["depth"] == 64

    def test_init(self, capsys, tmp_path):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (tmp_path / "smt.yaml").exists()

        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

    def test_bad_config_file(self, capsys, tmp_path):
        (tmp_path / "smt.yaml").write_text("tree:\n  depth: zero\n")
        assert main(["config", "--show"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err

    def test_non_integer_log_level(self, capsys, tmp_path, entries_file):
        (tmp_path / "smt.yaml").write_text("log_level: 10\n")
        assert main(["root", str(entries_file), "-d", "3"]) == EXIT_RUNTIME_ERROR
        assert "log_level" in capsys.readouterr().err

    def test_missing_explicit_config(self, capsys, tmp_path):
        assert main(["--config", str(tmp_path / "nope.yaml"), "demo"]) == EXIT_RUNTIME_ERROR


class TestMainDispatch:
    """Tests for argument handling."""

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out
