"""Domain exceptions for daemon communication.

These exceptions separate the three ways a control request can fail:
the daemon could not be reached, the daemon answered outside the wire
schema, or the daemon understood the request and declined it. They should
be caught at the application boundary (CLI) and converted to user-facing
error messages.
"""

from enum import Enum


class HandsfreeError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConnectErrorKind(str, Enum):
    """Why the daemon socket could not be used."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    REFUSED = "refused"
    TIMEOUT = "timeout"


class DecodeErrorKind(str, Enum):
    """How a daemon message violated the wire schema."""

    MALFORMED = "malformed"
    UNKNOWN_STATE = "unknown_state"


class ConnectError(HandsfreeError):
    """Raised when the daemon is absent or unreachable."""

    def __init__(
        self, kind: ConnectErrorKind, message: str, hint: str | None = None
    ) -> None:
        super().__init__(message, hint=hint)
        self.kind = kind


class DecodeError(HandsfreeError):
    """Raised when the daemon sent something outside the wire schema."""

    def __init__(self, kind: DecodeErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class DaemonError(HandsfreeError):
    """Raised when the daemon reports that it declined a request."""

    pass


class ReadCancelled(Exception):
    """Raised by the transport when a blocked read is cancelled."""

    pass
