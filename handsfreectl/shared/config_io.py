"""Configuration I/O utilities for reading and writing TOML config files.

This module handles path resolution for the config file and the daemon
socket, and serialization of HandsfreeConfig to/from TOML format.
"""

import os
import tempfile
import tomllib  # Built-in Python 3.11+
from pathlib import Path
from typing import Any

import tomli_w

from handsfreectl.domain.config import HandsfreeConfig

SOCKET_ENV_VAR = "HANDSFREE_SOCKET"
SOCKET_NAME = "handsfree.sock"


def get_global_config_path() -> Path:
    """Get the path to the config file.

    Respects XDG_CONFIG_HOME, falling back to ~/.config.

    Returns:
        Path to the config file (may not exist)
    """
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "handsfree" / "handsfreectl.toml"
    return Path.home() / ".config" / "handsfree" / "handsfreectl.toml"


def get_default_socket_path() -> Path:
    """Get the daemon's well-known socket path.

    Uses $XDG_RUNTIME_DIR/handsfree.sock. When XDG_RUNTIME_DIR is unset,
    falls back to a per-user socket in the temporary directory so that
    users sharing /tmp do not collide.

    Returns:
        Path to the daemon socket (may not exist)
    """
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR", "")
    if runtime_dir:
        return Path(runtime_dir) / SOCKET_NAME
    return Path(tempfile.gettempdir()) / f"handsfree-{os.getuid()}.sock"


def resolve_socket_path(
    cli_value: str | Path | None, config: HandsfreeConfig
) -> Path:
    """Resolve the socket path from all sources.

    Priority (highest to lowest):
    1. Explicit CLI value
    2. HANDSFREE_SOCKET environment variable
    3. [daemon] socket_path from the config file
    4. Runtime-dir default (see get_default_socket_path)

    Args:
        cli_value: Value of --socket, or None
        config: Loaded configuration

    Returns:
        Socket path to connect to
    """
    if cli_value:
        return Path(cli_value).expanduser()
    env_value = os.environ.get(SOCKET_ENV_VAR, "")
    if env_value:
        return Path(env_value).expanduser()
    if config.daemon.socket_path:
        return Path(config.daemon.socket_path).expanduser()
    return get_default_socket_path()


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to the config file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_to_data(config: HandsfreeConfig) -> dict[str, Any]:
    """Convert a HandsfreeConfig to a TOML-ready dictionary."""
    return {
        "daemon": {
            "socket_path": config.daemon.socket_path,
            "connect_timeout": config.daemon.connect_timeout,
            "read_timeout": config.daemon.read_timeout,
        },
        "output": {
            "default": config.output.default,
        },
        "status": {
            "inactive_if_down": config.status.inactive_if_down,
        },
    }


def save_config(config: HandsfreeConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: HandsfreeConfig to save
        path: Destination path
    """
    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(config_to_data(config), f)
