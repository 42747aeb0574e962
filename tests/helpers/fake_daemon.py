"""Scripted daemon for integration tests.

Listens on a real Unix socket in a background thread. Each connection that
sends a request line consumes the next queued script: the scripted lines
are sent back and the connection is closed (or held open until stop()).
Connections that close without sending anything, such as --wait probes,
consume no script.
"""

import contextlib
import queue
import socket
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class Script:
    """What the fake daemon does for one connection."""

    lines: list[bytes] = field(default_factory=list)
    hold_open: bool = False
    interval: float = 0.0


class FakeDaemon:
    """Thread-based stand-in for the handsfree daemon.

    Attributes:
        socket_path: Path the daemon listens on.
        requests: Request lines received, one per scripted connection.
        connection_count: Number of accepted connections, probes included.
    """

    def __init__(self, socket_path: Path) -> None:
        self.socket_path = socket_path
        self.requests: list[bytes] = []
        self.connection_count = 0
        self._scripts: queue.Queue[Script] = queue.Queue()
        self._stop = threading.Event()
        self._server: socket.socket | None = None
        self._thread: threading.Thread | None = None
        self._held: list[socket.socket] = []

    def respond(
        self, *lines: str | bytes, hold_open: bool = False, interval: float = 0.0
    ) -> None:
        """Queue the reply for the next connection.

        Args:
            *lines: Lines to send; str lines get a trailing newline added.
            hold_open: Keep the connection open after sending.
            interval: Seconds to pause before each line after the first.
        """
        encoded = [
            line.encode("utf-8") + b"\n" if isinstance(line, str) else line
            for line in lines
        ]
        self._scripts.put(Script(lines=encoded, hold_open=hold_open, interval=interval))

    def start(self) -> "FakeDaemon":
        """Bind the socket and start serving."""
        server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        server.bind(str(self.socket_path))
        server.listen(8)
        server.settimeout(0.05)
        self._server = server
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        """Stop serving and release every socket."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
        for conn in self._held:
            with contextlib.suppress(OSError):
                conn.close()
        if self._server is not None:
            self._server.close()
        self.socket_path.unlink(missing_ok=True)

    def _serve(self) -> None:
        assert self._server is not None
        while not self._stop.is_set():
            try:
                conn, _ = self._server.accept()
            except TimeoutError:
                continue
            except OSError:
                return
            self._handle(conn)

    def _handle(self, conn: socket.socket) -> None:
        self.connection_count += 1
        conn.settimeout(2.0)
        try:
            request = self._read_line(conn)
            if not request:
                conn.close()
                return
            self.requests.append(request)
            try:
                script = self._scripts.get_nowait()
            except queue.Empty:
                script = Script()
            for index, line in enumerate(script.lines):
                if index and script.interval:
                    time.sleep(script.interval)
                conn.sendall(line)
        except OSError:
            conn.close()
            return

        if script.hold_open:
            self._held.append(conn)
        else:
            conn.close()

    @staticmethod
    def _read_line(conn: socket.socket) -> bytes:
        buffer = b""
        while b"\n" not in buffer:
            chunk = conn.recv(1024)
            if not chunk:
                break
            buffer += chunk
        return buffer
