"""Centralized timeout configuration for daemon operations.

All client-side timeout values are defined here so the defaults used by the
clients, the config defaults, and the wait policy stay in one place.
"""


class DaemonTimeouts:
    """Centralized timeout configuration for daemon operations.

    All values are in seconds.

    Groups:
        CONNECT: Establishing the socket connection
        READ: Waiting for a one-shot response
        WAIT_*: Opt-in polling for a daemon that is still starting
    """

    # =========================================================================
    # Socket Operation Timeouts
    # =========================================================================

    CONNECT: float = 2.0
    """Timeout for connecting to the daemon socket.

    A local socket either accepts immediately or not at all, so this only
    needs to cover a daemon whose accept backlog is momentarily full.
    """

    READ: float = 5.0
    """Overall deadline for a one-shot command's request and response.

    Covers the send and the whole response line, however the daemon splits
    it. Bounds how long an unresponsive daemon can hang a hotkey. Watch
    streams do not use a read timeout: long idle periods between events
    are normal.
    """

    # =========================================================================
    # Daemon Wait Policy
    # =========================================================================

    WAIT_POLL_INTERVAL: float = 0.2
    """Interval between connection attempts when --wait is given.

    Only used when the caller opts into waiting for the daemon to come up.
    By default no connection attempt is retried.
    """
