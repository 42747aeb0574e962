"""Factory classes for use case and adapter instantiation.

This module centralizes the creation of daemon clients and use cases,
keeping the CLI layer free from direct adapter imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from handsfreectl.adapters.config.toml_config_provider import TomlConfigProvider
    from handsfreectl.adapters.daemon.client import DaemonSessionClient
    from handsfreectl.adapters.daemon.watch import DaemonWatchClient
    from handsfreectl.core.control.toggle_usecase import ToggleUseCase
    from handsfreectl.domain.config import HandsfreeConfig


class DaemonClientFactory:
    """Factory for creating daemon clients bound to one socket.

    Args:
        socket_path: Resolved daemon socket path.
        config: HandsfreeConfig with timeout settings.
    """

    def __init__(self, socket_path: Path, config: HandsfreeConfig) -> None:
        """Initialize factory with socket path and configuration.

        Args:
            socket_path: Resolved daemon socket path.
            config: Configuration containing timeout settings.
        """
        self._socket_path = socket_path
        self._config = config

    @property
    def socket_path(self) -> Path:
        """Socket path the created clients connect to."""
        return self._socket_path

    def create_session_client(self) -> DaemonSessionClient:
        """Create a one-shot command client."""
        from handsfreectl.adapters.daemon.client import DaemonSessionClient

        return DaemonSessionClient(
            self._socket_path,
            connect_timeout=self._config.daemon.connect_timeout,
            read_timeout=self._config.daemon.read_timeout,
        )

    def create_watch_client(self) -> DaemonWatchClient:
        """Create a state-change streaming client."""
        from handsfreectl.adapters.daemon.watch import DaemonWatchClient

        return DaemonWatchClient(
            self._socket_path,
            connect_timeout=self._config.daemon.connect_timeout,
        )

    def create_toggle_usecase(self) -> ToggleUseCase:
        """Create a toggle use case driven by a fresh session client."""
        from handsfreectl.core.control.toggle_usecase import ToggleUseCase

        return ToggleUseCase(self.create_session_client())

    def probe(self) -> None:
        """Open and immediately release one connection.

        Raises:
            ConnectError: If the daemon cannot be reached.
        """
        from handsfreectl.adapters.daemon.transport import connect

        connect(self._socket_path, timeout=self._config.daemon.connect_timeout).close()


class ConfigFactory:
    """Factory for creating configuration-related instances."""

    def create_config_provider(self) -> TomlConfigProvider:
        """Create a TomlConfigProvider instance.

        Returns:
            TomlConfigProvider instance.
        """
        from handsfreectl.adapters.config.toml_config_provider import TomlConfigProvider

        return TomlConfigProvider()
