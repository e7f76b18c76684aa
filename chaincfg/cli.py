"""
Single entry point for chaincfg: validate, show, get, networks, configure, version.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping

import structlog
import yaml
from pydantic import BaseModel

from chaincfg import __version__
from chaincfg.config.defaults import DEFAULT_CONFIG
from chaincfg.config.loader import CONFIG_ENV, provider_for
from chaincfg.config.schemas import RootConfig
from chaincfg.errors import ConfigError

DEFAULT_OUTPUT = Path("config") / "chaincfg.yaml"


def _configure_logging(verbose: bool) -> None:
    """Structured log lines to stderr; debug with --verbose, warnings and up otherwise."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
    )


def _load(args: argparse.Namespace) -> RootConfig:
    return provider_for(args.config).load()


def _render_value(value: Any) -> str:
    """Scalars print bare; sections print as YAML with wire keys."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True)
    elif isinstance(value, Mapping):
        value = {
            k: v.model_dump(mode="json", by_alias=True, exclude={"name"}) if isinstance(v, BaseModel) else v
            for k, v in value.items()
        }
    if isinstance(value, dict):
        return yaml.safe_dump(value, sort_keys=False, default_flow_style=False).rstrip("\n")
    if isinstance(value, str):
        return value
    return json.dumps(value)


def cmd_validate(args: argparse.Namespace) -> int:
    """Load and validate config; exit non-zero on the first error."""
    config = _load(args)
    source = args.config or "default"
    print(f"OK: {source} ({len(config.networks)} network(s))")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the validated config in wire form."""
    data = _load(args).to_wire()
    if args.format == "json":
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), end="")
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Print one value by dotted path (e.g. networks.dev.port)."""
    print(_render_value(_load(args).get_path(args.path)))
    return 0


def cmd_networks(args: argparse.Namespace) -> int:
    """List configured networks."""
    config = _load(args)
    for name, profile in config.networks.items():
        print(f"{name}\t{profile.host}:{profile.port}\tnetwork_id={profile.network_id}\tgas={profile.gas_limit}")
    return 0


def cmd_configure(args: argparse.Namespace) -> int:
    """Write the built-in default config as YAML if the target is missing."""
    out = Path(args.output)
    if out.exists() and not args.force:
        print(f"{out} already exists.")
        return 0
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False, default_flow_style=False), encoding="utf-8")
    print(f"Created: {out}. Edit it and point {CONFIG_ENV} or --config at it.")
    return 0


def cmd_version(_: argparse.Namespace) -> int:
    """Print version."""
    print(__version__)
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="chaincfg",
        description="Contract toolchain config: validate, show, get, networks, configure, version.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug-level structured logs on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    # shared --config option
    source = argparse.ArgumentParser(add_help=False)
    source.add_argument("--config", "-c", default=None, help="YAML config file (default: $CHAINCFG_CONFIG or built-in)")

    p_validate = sub.add_parser("validate", parents=[source], help="Load and validate config")
    p_validate.set_defaults(func=cmd_validate)

    p_show = sub.add_parser("show", parents=[source], help="Print validated config")
    p_show.add_argument("--format", choices=["yaml", "json"], default="yaml", help="Output format (default: yaml)")
    p_show.set_defaults(func=cmd_show)

    p_get = sub.add_parser("get", parents=[source], help="Print one value by dotted path")
    p_get.add_argument("path", help="Dotted path, e.g. networks.dev.host or solc.optimizer.runs")
    p_get.set_defaults(func=cmd_get)

    p_networks = sub.add_parser("networks", parents=[source], help="List configured networks")
    p_networks.set_defaults(func=cmd_networks)

    p_configure = sub.add_parser("configure", help="Write the default config as YAML")
    p_configure.add_argument("--output", "-o", default=str(DEFAULT_OUTPUT), help=f"Target file (default: {DEFAULT_OUTPUT})")
    p_configure.add_argument("--force", action="store_true", help="Overwrite an existing file")
    p_configure.set_defaults(func=cmd_configure)

    p_version = sub.add_parser("version", help="Print version")
    p_version.set_defaults(func=cmd_version)

    args = parser.parse_args()
    _configure_logging(args.verbose)
    try:
        return args.func(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
