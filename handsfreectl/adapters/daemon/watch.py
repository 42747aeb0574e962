"""Daemon client adapter for streaming state changes.

A watch opens one connection, sends the watch handshake, and then only
reads: the daemon pushes one line per state transition.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from handsfreectl.adapters.daemon.protocol import decode_response, encode_command
from handsfreectl.adapters.daemon.timeouts import DaemonTimeouts
from handsfreectl.adapters.daemon.transport import CancelToken, connect
from handsfreectl.domain.entities import DaemonState, Err, Watch
from handsfreectl.domain.exceptions import DaemonError, DecodeError, ReadCancelled

logger = logging.getLogger(__name__)

WatchEvent = DaemonState | DaemonError | DecodeError


class DaemonWatchClient:
    """Client that subscribes to daemon state changes."""

    def __init__(
        self,
        socket_path: Path,
        connect_timeout: float = DaemonTimeouts.CONNECT,
    ):
        """Initialize watch client.

        Args:
            socket_path: Path to daemon socket
            connect_timeout: Seconds to wait for the connection and the
                handshake send. Reads after that never time out.
        """
        self.socket_path = socket_path
        self.connect_timeout = connect_timeout

    def watch(self, cancel: CancelToken | None = None) -> Iterator[WatchEvent]:
        """Stream daemon events in the order they arrive.

        The returned generator is lazy and single-use: the connection is
        opened on the first next(). Each decoded state is yielded as soon as
        its line arrives. A daemon error message is yielded as a DaemonError
        and the stream continues. A line that fails to decode is yielded as
        a DecodeError and ends the stream. Acknowledgements without a state
        yield nothing.

        The stream also ends when the daemon closes the connection, when
        cancel fires, or when the generator is closed. There is no
        reconnect. The connection is released exactly once on every path.

        Args:
            cancel: Optional token that interrupts a blocked read.

        Yields:
            DaemonState, DaemonError, or a final DecodeError

        Raises:
            ConnectError: If the daemon cannot be reached (on first next())
                or the connection breaks mid-stream.
        """
        conn = connect(self.socket_path, timeout=self.connect_timeout)
        try:
            conn.send(encode_command(Watch()))
            conn.set_read_timeout(None)
            logger.debug("Watching daemon at %s", self.socket_path)

            while True:
                try:
                    line = conn.recv_line(cancel=cancel)
                except ReadCancelled:
                    logger.debug("Watch cancelled")
                    return

                if not line:
                    logger.debug("Daemon closed the watch stream")
                    return

                logger.debug("Received: %r", line)
                try:
                    response = decode_response(line)
                except DecodeError as e:
                    yield e
                    return

                if isinstance(response, Err):
                    yield DaemonError(response.message)
                elif response.state is not None:
                    yield response.state
        finally:
            conn.close()
