"""Errors raised while loading or querying contract-toolchain configuration."""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for all chaincfg errors."""


class ValidationError(ConfigError):
    """One or more fields violate their type or range constraint.

    ``errors`` holds ``(field, constraint)`` pairs; ``field`` is a dotted path
    such as ``networks.dev.port``.
    """

    def __init__(self, errors: list[tuple[str, str]], source: str = "<literal>"):
        self.errors = errors
        self.source = source
        lines = [f"{field}: {constraint}" for field, constraint in errors]
        super().__init__(f"Invalid configuration in {source}: " + "; ".join(lines))


class DuplicateKeyError(ConfigError):
    """Two entries collide on the same key (e.g. two networks named ``dev``)."""

    def __init__(self, key: str, where: str = "networks"):
        self.key = key
        self.where = where
        super().__init__(f"Duplicate key {key!r} in {where}")


class ConfigFileError(ConfigError):
    """Config file is missing, unreadable, or not a YAML mapping."""


class UnknownNetworkError(ConfigError):
    """Requested network name is not configured."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        super().__init__(f"Unknown network {name!r}; configured: {', '.join(known) or '(none)'}")


class UnknownPathError(ConfigError):
    """Dotted path does not resolve to a config value."""

    def __init__(self, path: str, segment: str):
        self.path = path
        self.segment = segment
        super().__init__(f"Unknown config path {path!r} (no {segment!r})")
