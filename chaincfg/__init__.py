"""Typed, validated configuration for a smart-contract build/test/deploy toolchain."""

__version__ = "0.1.0"
