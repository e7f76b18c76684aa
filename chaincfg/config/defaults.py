"""Built-in configuration literal: one local dev chain, colored test output, optimizer on."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "networks": {
        "dev": {
            "host": "localhost",
            "port": 8545,
            "network_id": "*",  # match any network id
            "gas": 7000000,
        },
    },
    "mocha": {
        "useColors": True,
    },
    "solc": {
        "optimizer": {
            "enabled": True,
            "runs": 200,
        },
    },
}
