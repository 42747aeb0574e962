"""Domain entities and value objects.

Core domain models representing the commands a client can issue and the
states the dictation daemon can report. These are pure Python dataclasses
with no dependencies on infrastructure.

Both Command and DaemonState are closed sets of variants. Code that needs to
tell variants apart should use isinstance checks against the classes below
rather than comparing wire names.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class OutputMode(str, Enum):
    """Where the daemon should deliver transcribed text.

    - KEYBOARD: Simulate key presses into the focused window
    - CLIPBOARD: Copy the text to the clipboard
    """

    KEYBOARD = "keyboard"
    CLIPBOARD = "clipboard"


# ============================================================================
# Commands
# ============================================================================


@dataclass(frozen=True)
class Start:
    """Start transcription.

    Attributes:
        output: Output mode for the session, or None for the daemon default.
    """

    name: ClassVar[str] = "start"

    output: OutputMode | None = None


@dataclass(frozen=True)
class Stop:
    """Stop transcription."""

    name: ClassVar[str] = "stop"


@dataclass(frozen=True)
class Toggle:
    """Start if idle, stop if running.

    Resolved on the client by the toggle use case; the daemon never
    receives it.

    Attributes:
        output: Output mode used if toggling ends in a start.
    """

    name: ClassVar[str] = "toggle"

    output: OutputMode | None = None


@dataclass(frozen=True)
class Status:
    """Query the current daemon state."""

    name: ClassVar[str] = "status"


@dataclass(frozen=True)
class Watch:
    """Subscribe to state changes."""

    name: ClassVar[str] = "watch"


@dataclass(frozen=True)
class Shutdown:
    """Ask the daemon to exit gracefully."""

    name: ClassVar[str] = "shutdown"


Command = Start | Stop | Toggle | Status | Watch | Shutdown

COMMAND_TYPES: dict[str, type[Command]] = {
    cls.name: cls for cls in (Start, Stop, Toggle, Status, Watch, Shutdown)
}

# Commands that take an optional output mode
OUTPUT_COMMANDS: tuple[type[Command], ...] = (Start, Toggle)


# ============================================================================
# Daemon states
# ============================================================================


@dataclass(frozen=True)
class Idle:
    """Daemon is running and waiting for a start command."""

    name: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Listening:
    """Daemon is capturing audio."""

    name: ClassVar[str] = "listening"


@dataclass(frozen=True)
class Processing:
    """Daemon is transcribing captured audio."""

    name: ClassVar[str] = "processing"


@dataclass(frozen=True)
class Error:
    """Daemon hit an error.

    Attributes:
        message: Last error reported by the daemon (may be empty).
    """

    name: ClassVar[str] = "error"

    message: str = ""


@dataclass(frozen=True)
class Inactive:
    """Daemon reports itself inactive (not ready to transcribe)."""

    name: ClassVar[str] = "inactive"


DaemonState = Idle | Listening | Processing | Error | Inactive

STATE_TYPES: dict[str, type[DaemonState]] = {
    cls.name: cls for cls in (Idle, Listening, Processing, Error, Inactive)
}


# ============================================================================
# Responses
# ============================================================================


@dataclass(frozen=True)
class Ok:
    """Successful response, optionally carrying the daemon state.

    Attributes:
        state: Reported state, or None for a bare acknowledgement.
    """

    state: DaemonState | None = None


@dataclass(frozen=True)
class Err:
    """Daemon declined the request.

    Attributes:
        message: Reason given by the daemon, kept verbatim.
    """

    message: str


Response = Ok | Err

# What a one-shot command yields: a state for status, an acknowledgement otherwise
Outcome = DaemonState | Ok
