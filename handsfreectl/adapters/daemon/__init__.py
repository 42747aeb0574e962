"""Socket client for the handsfree dictation daemon.

This package implements the client side of the daemon control protocol.

Architecture:
- transport.py: Unix socket connections with line-oriented reads/writes
- protocol.py: Line-delimited JSON encoding and decoding (no I/O)
- client.py: One-shot commands (start, stop, status, shutdown)
- watch.py: Streaming state changes
- timeouts.py: Default timeout values
"""

from handsfreectl.adapters.daemon.client import DaemonSessionClient
from handsfreectl.adapters.daemon.transport import CancelToken
from handsfreectl.adapters.daemon.watch import DaemonWatchClient

__all__ = ["CancelToken", "DaemonSessionClient", "DaemonWatchClient"]
