"""Configuration schemas, loading and validation."""

from chaincfg.config.loader import (
    ConfigProvider,
    get_config,
    load,
    load_config_file,
    reset_config_cache,
)
from chaincfg.config.schemas import (
    WILDCARD_NETWORK_ID,
    CompilerOptions,
    NetworkProfile,
    OptimizerSettings,
    RootConfig,
    TestRunnerOptions,
)

__all__ = [
    "ConfigProvider",
    "get_config",
    "load",
    "load_config_file",
    "reset_config_cache",
    "WILDCARD_NETWORK_ID",
    "CompilerOptions",
    "NetworkProfile",
    "OptimizerSettings",
    "RootConfig",
    "TestRunnerOptions",
]
