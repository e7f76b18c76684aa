"""Tests for config loader: env injection, YAML files, duplicate keys, file errors."""

import os
from pathlib import Path

import pytest
import yaml

from chaincfg.config.defaults import DEFAULT_CONFIG
from chaincfg.config.loader import (
    ConfigProvider,
    _substitute_env,
    load_config_file,
    provider_for,
)
from chaincfg.errors import ConfigFileError, DuplicateKeyError, ValidationError


def test_substitute_env_string(monkeypatch):
    monkeypatch.setenv("FOO", "bar")
    assert _substitute_env("hello ${FOO}") == "hello bar"
    assert _substitute_env("$FOO") == "bar"


def test_substitute_env_nested(monkeypatch):
    monkeypatch.setenv("KEY", "secret")
    data = {"a": "${KEY}", "b": [{"c": "$KEY"}]}
    out = _substitute_env(data)
    assert out["a"] == "secret"
    assert out["b"][0]["c"] == "secret"


def test_substitute_env_unset_left_as_written(monkeypatch):
    monkeypatch.delenv("CHAINCFG_UNSET_VAR", raising=False)
    assert _substitute_env("${CHAINCFG_UNSET_VAR}") == "${CHAINCFG_UNSET_VAR}"


def test_substitute_env_whole_reference_is_typed(monkeypatch):
    monkeypatch.setenv("RPC_PORT", "7545")
    monkeypatch.setenv("COLORS", "false")
    assert _substitute_env("${RPC_PORT}") == 7545
    assert _substitute_env("$COLORS") is False
    assert _substitute_env("port ${RPC_PORT}") == "port 7545"


def test_load_config_file_valid(config_file):
    cfg = load_config_file(config_file)
    assert list(cfg.networks) == ["dev", "staging"]
    assert cfg.networks["staging"].network_id == "5"
    assert cfg.networks["staging"].gas_limit == 8000000
    assert cfg.test_runner.use_colored_output is False
    assert cfg.compiler.optimizer_runs == 1000


def test_load_config_file_env_injection(tmp_path, monkeypatch):
    monkeypatch.setenv("NODE_HOST", "node.internal")
    monkeypatch.setenv("NODE_PORT", "9545")
    path = tmp_path / "chaincfg.yaml"
    path.write_text("""
networks:
  dev:
    host: ${NODE_HOST}
    port: ${NODE_PORT}
    gas: 7000000
""")
    cfg = load_config_file(path)
    assert cfg.networks["dev"].host == "node.internal"
    assert cfg.networks["dev"].port == 9545


def test_default_literal_yaml_round_trip(tmp_path):
    path = tmp_path / "chaincfg.yaml"
    path.write_text(yaml.safe_dump(DEFAULT_CONFIG))
    assert load_config_file(path).to_wire() == DEFAULT_CONFIG


def test_duplicate_network_in_yaml(tmp_path):
    path = tmp_path / "dup.yaml"
    path.write_text("""
networks:
  dev:
    host: localhost
    port: 8545
    gas: 7000000
  dev:
    host: 127.0.0.1
    port: 7545
    gas: 6000000
""")
    with pytest.raises(DuplicateKeyError) as exc_info:
        ConfigProvider.from_file(path)
    assert exc_info.value.key == "dev"
    assert "line 7" in str(exc_info.value)


def test_duplicate_nested_key_in_yaml(tmp_path):
    path = tmp_path / "dup.yaml"
    path.write_text("solc:\n  optimizer:\n    runs: 1\n    runs: 2\n")
    with pytest.raises(DuplicateKeyError):
        load_config_file(path)


def test_invalid_value_in_yaml_names_file_and_field(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("networks:\n  dev:\n    host: localhost\n    port: -1\n    gas: 7000000\n")
    with pytest.raises(ValidationError) as exc_info:
        load_config_file(path)
    assert str(path) in str(exc_info.value)
    assert "networks.dev.port" in str(exc_info.value)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigFileError):
        load_config_file(tmp_path / "nope.yaml")


def test_malformed_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("networks: [invalid")
    with pytest.raises(ConfigFileError):
        load_config_file(path)


def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConfigFileError):
        load_config_file(path)


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    cfg = load_config_file(path)
    assert dict(cfg.networks) == {}


def test_provider_for_prefers_explicit_path(config_file, tmp_path, monkeypatch):
    other = tmp_path / "other.yaml"
    other.write_text("{}")
    monkeypatch.setenv("CHAINCFG_CONFIG", str(other))
    assert provider_for(config_file).source == str(config_file)
    assert provider_for().source == str(other)


def test_provider_for_default_without_env():
    assert os.environ.get("CHAINCFG_CONFIG") is None
    assert provider_for().source == "<default>"


def test_substitute_env_keeps_non_plain_values(monkeypatch):
    monkeypatch.setenv("CHAIN_ID", "010")
    monkeypatch.setenv("NODE_HOST", "on")
    monkeypatch.setenv("FLAG", "yes")
    assert _substitute_env("${CHAIN_ID}") == "010"
    assert _substitute_env("${NODE_HOST}") == "on"
    assert _substitute_env("$FLAG") == "yes"


def test_env_values_preserved_in_file(tmp_path, monkeypatch):
    monkeypatch.setenv("CHAIN_ID", "010")
    monkeypatch.setenv("NODE_HOST", "on")
    path = tmp_path / "chaincfg.yaml"
    path.write_text("""
networks:
  dev:
    host: ${NODE_HOST}
    port: 8545
    network_id: ${CHAIN_ID}
    gas: 7000000
""")
    dev = load_config_file(path).networks["dev"]
    assert dev.network_id == "010"
    assert dev.host == "on"


def test_invalid_utf8_file(tmp_path):
    path = tmp_path / "latin.yaml"
    path.write_bytes(b"networks:\n  dev:\n    host: \xff\xfe\n")
    with pytest.raises(ConfigFileError) as exc_info:
        load_config_file(path)
    assert str(path) in str(exc_info.value)


def test_shipped_example_matches_default():
    example = Path(__file__).resolve().parent.parent / "config" / "chaincfg.yaml.example"
    assert load_config_file(example).to_wire() == DEFAULT_CONFIG
