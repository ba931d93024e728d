"""
CLI helper functions for i2psam.

These functions cover configuration lookup and key files so the command
handlers stay short.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

from i2psam.sam.connection import DEFAULT_ADDRESS
from i2psam.sam.keys import Keys

# Default timeout for bridge operations (can be overridden with I2PSAM_TIMEOUT env var)
DEFAULT_TIMEOUT = 30.0


def get_timeout() -> float:
    """Get timeout from I2PSAM_TIMEOUT env var or use default."""
    env_timeout = os.environ.get("I2PSAM_TIMEOUT")
    if env_timeout:
        try:
            return float(env_timeout)
        except ValueError:
            print(f"Warning: Invalid I2PSAM_TIMEOUT value: {env_timeout}", file=sys.stderr)
    return DEFAULT_TIMEOUT


def get_sam_address() -> str:
    """Get the bridge address from I2PSAM_ADDRESS env var or use default."""
    return os.environ.get("I2PSAM_ADDRESS") or DEFAULT_ADDRESS


def save_keys(keys: Keys, path: Path) -> None:
    """
    Write keys to a JSON file readable only by the owner.

    Args:
        keys: Keys to save
        path: Destination file
    """
    path.write_text(json.dumps(keys.to_dict(), indent=2))
    path.chmod(0o600)


def load_keys(path: Path) -> Keys:
    """
    Read keys written by save_keys().

    Args:
        path: Key file

    Returns:
        Loaded Keys

    Raises:
        ValueError: If the file is not a valid key file
    """
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid key file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid key file {path}: expected a JSON object")
    return Keys.from_dict(data)


def parse_option(option: str) -> str:
    """
    Validate a KEY=VALUE session option.

    Examples:
        inbound.length=2 -> "inbound.length=2"

    Raises:
        ValueError: If the option has no key or contains whitespace
    """
    key, sep, _ = option.partition("=")
    if not sep or not key:
        raise ValueError(f"Option must be KEY=VALUE: {option}")
    if any(c.isspace() for c in option):
        raise ValueError(f"Option must not contain whitespace: {option}")
    return option
