"""Toggle use case: read the daemon state, then start or stop.

Toggle is two independent one-shot commands. The daemon state can change
between the status query and the follow-up command (another client may
toggle at the same moment). No lock or compare-and-swap is attempted; the
daemon is the only party that can serialize clients, and the outcome of
the second command is returned as-is.
"""

import logging
from dataclasses import dataclass

from handsfreectl.domain.entities import (
    Command,
    DaemonState,
    Error,
    Idle,
    Inactive,
    Listening,
    Outcome,
    OutputMode,
    Processing,
    Start,
    Status,
    Stop,
)
from handsfreectl.ports.daemon import DaemonSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    """Result of a toggle.

    Attributes:
        previous_state: State observed by the status query.
        command: Command sent as a result (Start or Stop).
        outcome: Outcome of that command.
    """

    previous_state: DaemonState
    command: Command
    outcome: Outcome


def decide_next_command(state: DaemonState, output: OutputMode | None = None) -> Command:
    """Pick the command that toggles away from the given state.

    Idle, Inactive and Error start transcription; Listening and
    Processing stop it.

    Args:
        state: Freshly observed daemon state.
        output: Output mode to request if the result is a start.

    Returns:
        Start or Stop
    """
    if isinstance(state, (Listening, Processing)):
        return Stop()
    if isinstance(state, (Idle, Inactive, Error)):
        return Start(output=output)
    raise TypeError(f"Unknown daemon state: {state!r}")


class ToggleUseCase:
    """Resolves toggle into a status query followed by start or stop."""

    def __init__(self, session: DaemonSession) -> None:
        """Initialize toggle use case.

        Args:
            session: One-shot command session (one connection per call).
        """
        self.session = session

    def execute(self, output: OutputMode | None = None) -> ToggleResult:
        """Toggle transcription.

        Args:
            output: Output mode to use if this toggle starts transcription.

        Returns:
            ToggleResult describing what was observed and sent.

        Raises:
            ConnectError: If either step cannot reach the daemon
            DecodeError: If either response violates the wire schema
            DaemonError: If the daemon declines either step
        """
        state = self.session.execute(Status())
        command = decide_next_command(state, output)
        logger.debug("Daemon is %s, sending %s", state.name, command.name)
        outcome = self.session.execute(command)
        return ToggleResult(previous_state=state, command=command, outcome=outcome)
