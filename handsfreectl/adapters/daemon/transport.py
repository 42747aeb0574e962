"""Unix socket transport for daemon communication.

Opens connections to the daemon socket and exposes line-oriented reads and
writes. Connection failures are classified into ConnectError kinds so
callers can tell "daemon not running" apart from "daemon sent garbage",
which is the codec's concern. Nothing here retries.
"""

import contextlib
import errno
import logging
import selectors
import socket
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from handsfreectl.adapters.daemon.timeouts import DaemonTimeouts
from handsfreectl.domain.exceptions import (
    ConnectError,
    ConnectErrorKind,
    DecodeError,
    DecodeErrorKind,
    ReadCancelled,
)

logger = logging.getLogger(__name__)

RECV_BUFFER_SIZE = 4096

# Longest line accepted from the daemon; real messages are well under 1 KiB
MAX_LINE_BYTES = 64 * 1024


class CancelToken:
    """Explicit cancellation signal for blocking reads.

    Backed by a socket pair so a cancelled token wakes up a read that is
    blocked in select(). cancel() is safe to call from a signal handler or
    another thread, and more than once.

    Example:
        token = CancelToken()
        signal.signal(signal.SIGTERM, lambda *_: token.cancel())
        for event in watch_client.watch(cancel=token):
            ...
    """

    def __init__(self) -> None:
        self._reader, self._writer = socket.socketpair()
        self._reader.setblocking(False)
        self._writer.setblocking(False)
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        """Whether cancel() has been called."""
        return self._cancelled

    def cancel(self) -> None:
        """Fire the token, waking any read waiting on it."""
        if self._cancelled:
            return
        self._cancelled = True
        with contextlib.suppress(OSError):
            self._writer.send(b"\0")

    def fileno(self) -> int:
        """File descriptor that becomes readable once cancelled."""
        return self._reader.fileno()

    def close(self) -> None:
        """Release the underlying socket pair."""
        with contextlib.suppress(OSError):
            self._reader.close()
        with contextlib.suppress(OSError):
            self._writer.close()

    def __enter__(self) -> "CancelToken":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class Connection:
    """A connected daemon socket with a line buffer.

    Owned by exactly one operation. close() is idempotent, so every exit
    path can call it and the socket is still released only once.
    """

    def __init__(self, sock: socket.socket, path: Path) -> None:
        self._sock = sock
        self.path = path
        self._buffer = b""
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether the connection has been released."""
        return self._closed

    def set_read_timeout(self, timeout: float | None) -> None:
        """Set the timeout for send and receive; None blocks indefinitely."""
        self._sock.settimeout(timeout)

    def send(self, data: bytes) -> None:
        """Send raw bytes to the daemon.

        Raises:
            ConnectError: TIMEOUT if the daemon stops reading, REFUSED if
                the connection is reset or closed.
        """
        try:
            self._sock.sendall(data)
        except TimeoutError as e:
            raise ConnectError(
                ConnectErrorKind.TIMEOUT, f"Timed out sending to daemon at {self.path}"
            ) from e
        except OSError as e:
            raise ConnectError(
                ConnectErrorKind.REFUSED, f"Failed to send to daemon at {self.path}: {e}"
            ) from e

    def recv_line(
        self, cancel: CancelToken | None = None, deadline: float | None = None
    ) -> bytes:
        """Read one newline-terminated line.

        Args:
            cancel: Optional token that interrupts the read when fired.
            deadline: Optional time.monotonic() value by which the whole
                line must have arrived. Without it, only the per-recv read
                timeout applies.

        Returns:
            The line including its newline, any unterminated bytes left when
            the daemon closed the connection, or b"" at end of stream.

        Raises:
            ConnectError: TIMEOUT if no data arrives within the read timeout
                or the line is not complete by the deadline, REFUSED if the
                connection is reset.
            DecodeError: MALFORMED if the line exceeds MAX_LINE_BYTES.
            ReadCancelled: If the token fires before a full line arrives.
        """
        while b"\n" not in self._buffer:
            if len(self._buffer) > MAX_LINE_BYTES:
                raise DecodeError(
                    DecodeErrorKind.MALFORMED,
                    f"Daemon line exceeds {MAX_LINE_BYTES} bytes",
                )
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ConnectError(
                        ConnectErrorKind.TIMEOUT,
                        f"Timed out waiting for daemon at {self.path}",
                    )
                self._sock.settimeout(remaining)
            if cancel is not None:
                self._wait_readable(cancel)
            try:
                chunk = self._sock.recv(RECV_BUFFER_SIZE)
            except TimeoutError as e:
                raise ConnectError(
                    ConnectErrorKind.TIMEOUT,
                    f"Timed out waiting for daemon at {self.path}",
                ) from e
            except OSError as e:
                raise ConnectError(
                    ConnectErrorKind.REFUSED,
                    f"Connection to daemon at {self.path} failed: {e}",
                ) from e
            if not chunk:
                line, self._buffer = self._buffer, b""
                return line
            self._buffer += chunk

        line, _, self._buffer = self._buffer.partition(b"\n")
        return line + b"\n"

    def _wait_readable(self, cancel: CancelToken) -> None:
        """Block until the socket is readable or the token fires."""
        with selectors.DefaultSelector() as selector:
            selector.register(self._sock, selectors.EVENT_READ)
            selector.register(cancel, selectors.EVENT_READ)
            if cancel.cancelled:
                raise ReadCancelled()
            events = selector.select(timeout=self._sock.gettimeout())
            if cancel.cancelled:
                raise ReadCancelled()
            if not events:
                raise ConnectError(
                    ConnectErrorKind.TIMEOUT,
                    f"Timed out waiting for daemon at {self.path}",
                )

    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        with contextlib.suppress(OSError):
            self._sock.close()
        logger.debug("Closed connection to %s", self.path)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _classify_connect_error(error: OSError, socket_path: Path) -> ConnectError:
    """Map an OS-level connect failure to a ConnectError kind."""
    if isinstance(error, TimeoutError) or error.errno in (errno.ETIMEDOUT, errno.EAGAIN):
        return ConnectError(
            ConnectErrorKind.TIMEOUT, f"Timed out connecting to daemon at {socket_path}"
        )
    if isinstance(error, FileNotFoundError) or error.errno == errno.ENOENT:
        return ConnectError(
            ConnectErrorKind.NOT_FOUND, f"No daemon socket at {socket_path}"
        )
    if isinstance(error, PermissionError) or error.errno in (errno.EACCES, errno.EPERM):
        return ConnectError(
            ConnectErrorKind.PERMISSION_DENIED,
            f"Permission denied for daemon socket at {socket_path}",
        )
    if isinstance(error, ConnectionRefusedError):
        return ConnectError(
            ConnectErrorKind.REFUSED, f"Daemon refused connection at {socket_path}"
        )
    return ConnectError(
        ConnectErrorKind.REFUSED, f"Cannot connect to daemon at {socket_path}: {error}"
    )


def connect(socket_path: Path, timeout: float = DaemonTimeouts.CONNECT) -> Connection:
    """Open a connection to the daemon socket.

    Args:
        socket_path: Path to the Unix domain socket.
        timeout: Connect timeout in seconds.

    Returns:
        Connected Connection. The caller owns it and must close it.

    Raises:
        ConnectError: If the socket is missing, forbidden, refusing
            connections, or does not accept in time. No socket is left
            open in that case.
    """
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.settimeout(timeout)
    try:
        sock.connect(str(socket_path))
    except OSError as e:
        with contextlib.suppress(OSError):
            sock.close()
        raise _classify_connect_error(e, socket_path) from e

    logger.debug("Connected to daemon at %s", socket_path)
    return Connection(sock, socket_path)


@contextmanager
def daemon_connection(
    socket_path: Path,
    connect_timeout: float = DaemonTimeouts.CONNECT,
    read_timeout: float | None = DaemonTimeouts.READ,
) -> Iterator[Connection]:
    """Context manager for daemon connections.

    Provides consistent timeout configuration and guarantees the connection
    is released on every exit path.

    Args:
        socket_path: Path to the Unix domain socket.
        connect_timeout: Connect timeout in seconds.
        read_timeout: Send/receive timeout in seconds, None to block.

    Yields:
        Connected Connection ready for communication.

    Raises:
        ConnectError: If the connection cannot be established.

    Example:
        with daemon_connection(socket_path) as conn:
            conn.send(encode_command(Status()))
            line = conn.recv_line()
    """
    conn = connect(socket_path, timeout=connect_timeout)
    try:
        conn.set_read_timeout(read_timeout)
        yield conn
    finally:
        conn.close()
