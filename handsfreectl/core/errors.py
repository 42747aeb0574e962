"""CLI error handling with actionable hints.

Provides consistent error formatting and the mapping from domain errors to
CLI errors for all handsfreectl commands.
"""

from pathlib import Path
from typing import NoReturn

import click

from handsfreectl.domain.exceptions import (
    ConnectError,
    ConnectErrorKind,
    DaemonError,
    DecodeError,
    HandsfreeError,
)


class HandsfreeCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise HandsfreeCliError(
            "Daemon unreachable: No daemon socket at /run/user/1000/handsfree.sock",
            hint="Is the handsfree daemon running?",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
        """
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


_CONNECT_HINTS = {
    ConnectErrorKind.NOT_FOUND: (
        "Is the handsfree daemon running? Pass --socket or set HANDSFREE_SOCKET "
        "if it listens elsewhere"
    ),
    ConnectErrorKind.PERMISSION_DENIED: "The socket belongs to another user or has restrictive permissions",
    ConnectErrorKind.REFUSED: "The socket exists but nothing is listening; restart the daemon",
    ConnectErrorKind.TIMEOUT: "The daemon is not responding; check its logs",
}


def to_cli_error(error: HandsfreeError) -> HandsfreeCliError:
    """Convert a domain error into a CLI error with its category.

    Args:
        error: ConnectError, DecodeError, DaemonError, or other domain error.

    Returns:
        HandsfreeCliError carrying the category, message and a hint.
    """
    if isinstance(error, ConnectError):
        return HandsfreeCliError(
            f"Daemon unreachable: {error.message}",
            hint=error.hint or _CONNECT_HINTS[error.kind],
        )
    if isinstance(error, DecodeError):
        return HandsfreeCliError(
            f"Daemon returned malformed response: {error.message}",
            hint="The daemon and handsfreectl versions may not match",
        )
    if isinstance(error, DaemonError):
        return HandsfreeCliError(f"Daemon error: {error.message}", hint=error.hint)
    return HandsfreeCliError(error.message, hint=error.hint)


def config_exists_error(path: Path) -> NoReturn:
    """Raise error when config init would overwrite a file.

    Args:
        path: Existing config file.

    Raises:
        HandsfreeCliError: Always raises with --force hint.
    """
    raise HandsfreeCliError(
        f"Config file already exists: {path}",
        hint="Use 'handsfreectl config init --force' to overwrite it",
    )
