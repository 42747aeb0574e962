"""Port interface for daemon control.

Defines the protocol the toggle use case depends on, so it can be driven
by the socket client or by a test double.
"""

from typing import Protocol

from handsfreectl.domain.entities import Command, Outcome


class DaemonSession(Protocol):
    """Protocol for issuing one-shot commands to the daemon.

    Each call uses its own connection: one request, one response.
    """

    def execute(self, command: Command) -> Outcome:
        """Send a one-shot command and return its outcome.

        Args:
            command: Start, Stop, Status, or Shutdown

        Returns:
            The daemon state for Status, the acknowledgement otherwise

        Raises:
            ConnectError: If the daemon cannot be reached
            DecodeError: If the daemon response violates the wire schema
            DaemonError: If the daemon declines the command
        """
        ...
