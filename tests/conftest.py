"""Pytest fixtures: config literals, temp config files, cache and logging resets."""

import copy

import pytest
import structlog

from chaincfg.config.defaults import DEFAULT_CONFIG
from chaincfg.config.loader import CONFIG_ENV, reset_config_cache


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Each test starts with no cached config, no CHAINCFG_CONFIG and default structlog setup."""
    monkeypatch.delenv(CONFIG_ENV, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    structlog.reset_defaults()


@pytest.fixture
def literal():
    """Mutable deep copy of the built-in config literal."""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def config_file(tmp_path):
    """Temporary YAML config with two networks."""
    path = tmp_path / "chaincfg.yaml"
    path.write_text("""
networks:
  dev:
    host: "localhost"
    port: 8545
    network_id: "*"
    gas: 7000000
  staging:
    host: "rpc.staging.example"
    port: 443
    network_id: 5
    gas: 8000000
mocha:
  useColors: false
solc:
  optimizer:
    enabled: true
    runs: 1000
""")
    return path
