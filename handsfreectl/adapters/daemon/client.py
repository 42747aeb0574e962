"""Daemon client adapter for one-shot commands.

Implements the DaemonSession port by opening one connection per command,
sending one request and reading one response. Nothing is retried: if the
daemon is unreachable or misbehaves, the error reaches the caller.
"""

import logging
import time
from pathlib import Path

from handsfreectl.adapters.daemon.protocol import decode_response, encode_command
from handsfreectl.adapters.daemon.timeouts import DaemonTimeouts
from handsfreectl.adapters.daemon.transport import daemon_connection
from handsfreectl.domain.entities import (
    Command,
    Err,
    Outcome,
    Shutdown,
    Start,
    Status,
    Stop,
)
from handsfreectl.domain.exceptions import DaemonError, DecodeError, DecodeErrorKind

logger = logging.getLogger(__name__)

ONE_SHOT_COMMANDS = (Start, Stop, Status, Shutdown)


class DaemonSessionClient:
    """One-shot command client that talks to the daemon socket.

    Each execute() call owns exactly one connection, released before the
    call returns whether it succeeds or fails.
    """

    def __init__(
        self,
        socket_path: Path,
        connect_timeout: float = DaemonTimeouts.CONNECT,
        read_timeout: float = DaemonTimeouts.READ,
    ):
        """Initialize session client.

        Args:
            socket_path: Path to daemon socket
            connect_timeout: Seconds to wait for the connection
            read_timeout: Seconds to wait for the response
        """
        self.socket_path = socket_path
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

    def _exchange(self, command: Command) -> bytes:
        """Send one request and read one line back.

        read_timeout bounds the send and the whole response together, so a
        daemon that trickles bytes cannot hold the caller past it. The
        connection is closed before the line is decoded.
        """
        with daemon_connection(
            self.socket_path,
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
        ) as conn:
            request = encode_command(command)
            logger.debug("Sending: %s", request.decode("utf-8").rstrip())
            deadline = time.monotonic() + self.read_timeout
            conn.send(request)
            line = conn.recv_line(deadline=deadline)

        logger.debug("Received: %r", line)
        if not line:
            raise DecodeError(
                DecodeErrorKind.MALFORMED, "Daemon closed the connection without responding"
            )
        return line

    def execute(self, command: Command) -> Outcome:
        """Send a one-shot command and return its outcome.

        Args:
            command: Start, Stop, Status, or Shutdown

        Returns:
            The daemon state for Status, the Ok acknowledgement otherwise

        Raises:
            ValueError: If command is Toggle or Watch
            ConnectError: If the daemon cannot be reached
            DecodeError: If the response violates the wire schema
            DaemonError: If the daemon declines the command
        """
        if not isinstance(command, ONE_SHOT_COMMANDS):
            raise ValueError(f"'{command.name}' is not a one-shot daemon command")

        response = decode_response(self._exchange(command))

        if isinstance(response, Err):
            raise DaemonError(response.message)

        if isinstance(command, Status):
            if response.state is None:
                raise DecodeError(
                    DecodeErrorKind.MALFORMED, "Status response missing 'state' field"
                )
            return response.state

        return response
