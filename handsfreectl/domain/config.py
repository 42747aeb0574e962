"""Config domain models for handsfreectl.

Configuration is stored in ~/.config/handsfree/handsfreectl.toml and
represents user preferences for reaching the daemon and for command
defaults. This module defines the domain models that represent validated
configuration state.
"""

from dataclasses import dataclass, field
from typing import Any

from handsfreectl.domain.entities import OutputMode


@dataclass(frozen=True)
class DaemonConfig:
    """Configuration for reaching the daemon.

    Attributes:
        socket_path: Explicit socket path, or "" for the runtime-dir default
        connect_timeout: Seconds to wait for the socket to accept a connection
        read_timeout: Seconds to wait for a one-shot response

    Raises:
        ValueError: If connect_timeout or read_timeout is not positive.
    """

    socket_path: str = ""
    connect_timeout: float = 2.0
    read_timeout: float = 5.0

    def __post_init__(self) -> None:
        """Validate daemon config after initialization."""
        if self.connect_timeout <= 0:
            raise ValueError(
                f"connect_timeout must be positive, got {self.connect_timeout}"
            )
        if self.read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {self.read_timeout}")


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for start/toggle output.

    Attributes:
        default: "keyboard", "clipboard", or "" to leave it to the daemon

    Raises:
        ValueError: If default is not a known output mode.
    """

    default: str = ""

    def __post_init__(self) -> None:
        """Validate output config after initialization."""
        if self.default and self.default not in {m.value for m in OutputMode}:
            raise ValueError(
                f"output default must be 'keyboard' or 'clipboard', got {self.default!r}"
            )

    @property
    def mode(self) -> OutputMode | None:
        """Default output mode, or None for the daemon's own default."""
        return OutputMode(self.default) if self.default else None


@dataclass(frozen=True)
class StatusConfig:
    """Configuration for the status command.

    Attributes:
        inactive_if_down: Report "inactive" instead of failing when the
                          daemon socket is missing or refuses connections
    """

    inactive_if_down: bool = False


@dataclass(frozen=True)
class HandsfreeConfig:
    """Complete handsfreectl configuration.

    Attributes:
        daemon: Socket and timeout configuration
        output: Output defaults
        status: Status command behavior
    """

    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    status: StatusConfig = field(default_factory=StatusConfig)

    @staticmethod
    def default() -> "HandsfreeConfig":
        """Create a config with all default values."""
        return HandsfreeConfig(
            daemon=DaemonConfig(),
            output=OutputConfig(),
            status=StatusConfig(),
        )

    @staticmethod
    def from_partial(base: "HandsfreeConfig", data: dict[str, Any]) -> "HandsfreeConfig":
        """Overlay raw TOML data on an existing config.

        Each section present in data replaces only the keys it names; other
        keys keep the values from base. Unknown sections are ignored.

        Args:
            base: Config providing values for anything data leaves out
            data: Parsed TOML data

        Returns:
            New validated HandsfreeConfig

        Raises:
            ValueError: If a value fails validation or a key is unknown.
        """

        def merge(section: str, current: Any) -> Any:
            overrides = data.get(section, {})
            if not isinstance(overrides, dict):
                raise ValueError(f"[{section}] must be a table")
            try:
                return type(current)(**{**current.__dict__, **overrides})
            except TypeError as e:
                raise ValueError(f"Invalid key in [{section}]: {e}") from e

        return HandsfreeConfig(
            daemon=merge("daemon", base.daemon),
            output=merge("output", base.output),
            status=merge("status", base.status),
        )
