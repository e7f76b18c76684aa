"""Pydantic schemas for contract-toolchain config validation."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_serializer, field_validator

from chaincfg.errors import DuplicateKeyError, UnknownNetworkError, UnknownPathError

# network_id value that matches whatever id the node reports
WILDCARD_NETWORK_ID = "*"

_DIGITS = re.compile(r"[0-9]+")


class NetworkProfile(BaseModel):
    """Named connection parameters for one blockchain node (e.g. a local dev chain)."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    name: str = Field(..., min_length=1, description="Network name; same as its key in networks")
    host: str = Field(..., min_length=1, description="Node hostname")
    port: int = Field(..., ge=1, le=65535, strict=True, description="Node RPC port")
    network_id: str = Field(WILDCARD_NETWORK_ID, description="Chain id as decimal string, or '*' for any")
    gas_limit: int = Field(..., gt=0, strict=True, alias="gas", description="Per-transaction gas upper bound")

    @field_validator("network_id", mode="before")
    @classmethod
    def _network_id_as_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("network_id")
    @classmethod
    def _check_network_id(cls, value: str) -> str:
        if value == WILDCARD_NETWORK_ID:
            return value
        if not _DIGITS.fullmatch(value) or int(value) <= 0:
            raise ValueError(f"must be a positive integer or {WILDCARD_NETWORK_ID!r}")
        return value

    @property
    def matches_any(self) -> bool:
        return self.network_id == WILDCARD_NETWORK_ID

    def accepts(self, network_id: int | str) -> bool:
        """True if a node reporting ``network_id`` may be used with this profile."""
        return self.matches_any or str(network_id) == self.network_id


class TestRunnerOptions(BaseModel):
    """Test runner (mocha) options."""

    __test__ = False

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    use_colored_output: bool = Field(True, strict=True, alias="useColors")


class OptimizerSettings(BaseModel):
    """Compiler optimizer; runs trades deployment size for per-call cost."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    enabled: bool = Field(False, strict=True)
    runs: int = Field(200, ge=0, strict=True)


class CompilerOptions(BaseModel):
    """Compiler (solc) options."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    optimizer: OptimizerSettings = Field(default_factory=OptimizerSettings)

    @property
    def optimizer_enabled(self) -> bool:
        return self.optimizer.enabled

    @property
    def optimizer_runs(self) -> int:
        return self.optimizer.runs


def _with_name(key: Any, entry: Any) -> Any:
    if isinstance(entry, Mapping) and "name" not in entry:
        return {**entry, "name": key}
    return entry


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _step(node: Any, segment: str, path: str) -> Any:
    """Resolve one dotted-path segment by field name, wire alias, or camelCase spelling."""
    if isinstance(node, Mapping):
        if segment in node:
            return node[segment]
        raise UnknownPathError(path, segment)
    if isinstance(node, BaseModel):
        fields = type(node).model_fields
        for field_name, info in fields.items():
            if segment in (field_name, info.alias):
                return getattr(node, field_name)
        snake = _snake(segment)
        if snake in fields:
            return getattr(node, snake)
        # only properties this config class defines, never pydantic internals
        if not snake.startswith("model_") and isinstance(vars(type(node)).get(snake), property):
            return getattr(node, snake)
    raise UnknownPathError(path, segment)


class RootConfig(BaseModel):
    """Root config: networks, test runner (mocha) and compiler (solc) sections.

    Wire keys match the framework's config file; attribute names are snake_case.
    Instances are frozen and ``networks`` is a read-only mapping.
    """

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    networks: Mapping[str, NetworkProfile] = Field(default_factory=dict, validate_default=True)
    test_runner: TestRunnerOptions = Field(default_factory=TestRunnerOptions, alias="mocha")
    compiler: CompilerOptions = Field(default_factory=CompilerOptions, alias="solc")

    @field_validator("networks", mode="before")
    @classmethod
    def _key_networks_by_name(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            keyed: dict[str, Any] = {}
            for entry in value:
                name = entry.get("name") if isinstance(entry, Mapping) else getattr(entry, "name", None)
                if not isinstance(name, str):
                    raise ValueError("list entries must carry a string 'name'")
                if name in keyed:
                    raise DuplicateKeyError(name)
                keyed[name] = entry
            return keyed
        if isinstance(value, Mapping):
            return {key: _with_name(key, entry) for key, entry in value.items()}
        return value

    @field_validator("networks")
    @classmethod
    def _freeze_networks(cls, value: Mapping[str, NetworkProfile]) -> Mapping[str, NetworkProfile]:
        for key, profile in value.items():
            if profile.name != key:
                raise ValueError(f"entry {key!r} is named {profile.name!r}")
        return MappingProxyType(dict(value))

    @field_serializer("networks")
    def _dump_networks(self, networks: Mapping[str, NetworkProfile], info) -> dict[str, Any]:
        # name is implied by the key
        return {
            name: profile.model_dump(mode=info.mode, by_alias=bool(info.by_alias), exclude={"name"})
            for name, profile in networks.items()
        }

    def network(self, name: str) -> NetworkProfile:
        try:
            return self.networks[name]
        except KeyError:
            raise UnknownNetworkError(name, sorted(self.networks)) from None

    def get_path(self, path: str) -> Any:
        """Look up a value by dotted path, e.g. ``networks.dev.host`` or ``compiler.optimizer.runs``."""
        node: Any = self
        for segment in path.split("."):
            node = _step(node, segment, path)
        return node

    def to_wire(self) -> dict[str, Any]:
        """Plain dict with the framework's own keys (mocha, solc, gas, useColors)."""
        return self.model_dump(mode="json", by_alias=True)
