"""Opt-in wait for a daemon that is still starting.

Connections are never retried unless the caller asks for it with a wait
budget. This is useful for hotkeys bound at login, which can fire before
the daemon has created its socket.
"""

import logging
import time
from collections.abc import Callable

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from handsfreectl.domain.exceptions import ConnectError, ConnectErrorKind

logger = logging.getLogger(__name__)

# A daemon that is starting up has either no socket yet or is not listening yet
RETRYABLE_KINDS = (ConnectErrorKind.NOT_FOUND, ConnectErrorKind.REFUSED)


def _poll(probe: Callable[[], None], timeout: float, poll_interval: float) -> None:
    """Call probe until it succeeds or the deadline passes."""
    deadline = time.monotonic() + timeout
    attempts = 0
    while True:
        attempts += 1
        try:
            probe()
            logger.debug("Daemon reachable after %d attempt(s)", attempts)
            return
        except ConnectError as e:
            if e.kind not in RETRYABLE_KINDS or time.monotonic() >= deadline:
                raise
            logger.debug("Daemon not ready (%s), retrying", e.kind.value)
        time.sleep(min(poll_interval, max(deadline - time.monotonic(), 0)))


def wait_for_daemon(
    probe: Callable[[], None],
    timeout: float,
    poll_interval: float,
    quiet: bool = False,
) -> None:
    """Wait until the daemon accepts connections, showing a spinner.

    Args:
        probe: Opens and releases one connection, raising ConnectError
            on failure.
        timeout: Total seconds to keep trying; 0 means a single attempt.
        poll_interval: Seconds between attempts.
        quiet: Suppress the spinner.

    Raises:
        ConnectError: The last error, if the daemon is still unreachable at
            the deadline, or immediately for errors that waiting cannot fix
            (permission denied, timeout).
    """
    if timeout <= 0 or quiet:
        _poll(probe, timeout, poll_interval)
        return

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=Console(stderr=True),
        transient=True,
    ) as progress:
        progress.add_task("Waiting for handsfree daemon...", total=None)
        _poll(probe, timeout, poll_interval)
