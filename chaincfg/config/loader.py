"""
Config loader: literal or YAML source, env variable injection, Pydantic validation.

- ConfigProvider.load() validates a literal mapping (the built-in default unless given one).
- ConfigProvider.from_file() reads the same structure from YAML; duplicate keys are rejected.
- Environment variable injection: ${ENV_VAR} replacement in YAML string values.
- get_config(): one long-lived instance; CHAINCFG_CONFIG env names the YAML file to read.
"""

from __future__ import annotations

import os
import re
from collections.abc import Hashable
from pathlib import Path
from typing import Any, Mapping

import structlog
import yaml
from pydantic import ValidationError as PydanticValidationError

from chaincfg.config.defaults import DEFAULT_CONFIG
from chaincfg.config.schemas import RootConfig
from chaincfg.errors import ConfigFileError, DuplicateKeyError, ValidationError

logger = structlog.get_logger(__name__)

CONFIG_ENV = "CHAINCFG_CONFIG"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")
_PLAIN_INT = re.compile(r"0|[1-9][0-9]*")
_BOOLS = {"true": True, "false": False}

# Process-wide instance; never mutated once built
_config: RootConfig | None = None


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that fails on repeated mapping keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            if isinstance(key, Hashable) and key in seen:
                raise DuplicateKeyError(str(key), where=f"{self.name} line {key_node.start_mark.line + 1}")
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings; recurse into dict/list.

    A string that is exactly one reference to a plain decimal or to true/false
    takes that type, so ``port: ${RPC_PORT}`` yields an int. Anything else,
    including leading zeros, stays the string as written.
    """
    if isinstance(value, str):
        def repl(m: re.Match[str]) -> str:
            name = m.group(1) or m.group(2) or ""
            return os.environ.get(name, m.group(0))
        whole = _ENV_PATTERN.fullmatch(value)
        if whole:
            name = whole.group(1) or whole.group(2)
            if name in os.environ:
                raw = os.environ[name]
                if _PLAIN_INT.fullmatch(raw):
                    return int(raw)
                if raw in _BOOLS:
                    return _BOOLS[raw]
        return _ENV_PATTERN.sub(repl, value)
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return dict with env substitution."""
    if not path.is_file():
        raise ConfigFileError(f"Config file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise ConfigFileError(f"Malformed YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Cannot read {path}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFileError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return _substitute_env(data)


def _to_validation_error(exc: PydanticValidationError, source: str) -> ValidationError:
    """Flatten pydantic errors into (dotted field, constraint) pairs."""
    errors = [
        (".".join(str(part) for part in err["loc"]) or "<root>", err["msg"])
        for err in exc.errors()
    ]
    return ValidationError(errors, source=source)


class ConfigProvider:
    """Produces a validated, immutable RootConfig from a literal mapping."""

    def __init__(self, literal: Mapping[str, Any] | None = None, source: str = "<default>"):
        self._literal = DEFAULT_CONFIG if literal is None else literal
        self.source = source

    @classmethod
    def from_file(cls, path: str | Path) -> ConfigProvider:
        """Provider over a YAML file; the file is read now, validated on load()."""
        path = Path(path)
        return cls(_load_yaml(path), source=str(path))

    def load(self) -> RootConfig:
        """
        Validate the literal and return a RootConfig.

        Raises:
            ValidationError: A field violates its type or range constraint.
            DuplicateKeyError: Two network entries share a name.
        """
        try:
            config = RootConfig.model_validate(self._literal)
        except PydanticValidationError as e:
            err = _to_validation_error(e, self.source)
            logger.error("config_invalid", source=self.source, errors=err.errors)
            raise err from e
        except DuplicateKeyError as e:
            logger.error("config_duplicate_key", source=self.source, key=e.key)
            raise
        logger.info("config_loaded", source=self.source, networks=sorted(config.networks))
        return config


def provider_for(path: str | Path | None = None) -> ConfigProvider:
    """Provider for an explicit file, else the CHAINCFG_CONFIG file, else the default literal."""
    path = path or os.environ.get(CONFIG_ENV)
    if path:
        return ConfigProvider.from_file(path)
    return ConfigProvider()


def load() -> RootConfig:
    """Validate and return the built-in default configuration."""
    return ConfigProvider().load()


def load_config_file(path: str | Path) -> RootConfig:
    """Read, validate and return the configuration in a YAML file."""
    return ConfigProvider.from_file(path).load()


def get_config() -> RootConfig:
    """Return the process-wide config (built on first call, then shared)."""
    global _config
    if _config is None:
        _config = provider_for().load()
    return _config


def reset_config_cache() -> None:
    """Drop the cached config (for tests). Next get_config() rebuilds it from source."""
    global _config
    _config = None
