"""handsfreectl CLI entrypoint.

Command-line interface for controlling the handsfree dictation daemon.
State goes to stdout, one line per result, so status bars and scripts can
read it; logs and errors go to stderr.
"""

from __future__ import annotations

import contextlib
import functools
import logging
import os
import signal
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from handsfreectl.adapters.factory import DaemonClientFactory
    from handsfreectl.adapters.daemon.transport import CancelToken
    from handsfreectl.domain.config import HandsfreeConfig

from handsfreectl.core.errors import HandsfreeCliError, config_exists_error, to_cli_error
from handsfreectl.domain.entities import (
    DaemonState,
    Error,
    OutputMode,
    Shutdown,
    Start,
    Status,
    Stop,
)
from handsfreectl.domain.exceptions import (
    ConnectError,
    ConnectErrorKind,
    DaemonError,
    DecodeError,
    HandsfreeError,
)
from handsfreectl.version import __version__

logger = logging.getLogger(__name__)

LOG_ENV_VAR = "HANDSFREECTL_LOG"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

OUTPUT_CHOICE = click.Choice([mode.value for mode in OutputMode])


def setup_logging(verbose: bool) -> None:
    """Configure logging for the CLI.

    WARNING by default, DEBUG with --verbose, or the level named by
    HANDSFREECTL_LOG. Everything goes to stderr.
    """
    level = logging.WARNING
    env_level = os.environ.get(LOG_ENV_VAR, "").upper()
    if verbose:
        level = logging.DEBUG
    elif env_level in logging.getLevelNamesMapping():
        level = logging.getLevelNamesMapping()[env_level]

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", stream=sys.stderr)
    logging.getLogger("handsfreectl").setLevel(level)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Converts domain errors to HandsfreeCliError, keeping the error
    category (unreachable, malformed response, daemon error) in the
    message. HandsfreeCliError exceptions are re-raised to use their
    built-in formatting.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except click.ClickException:
                raise
            except HandsfreeError as e:
                raise to_cli_error(e) from e
            except OSError as e:
                raise HandsfreeCliError(
                    f"{command_name} failed: {e}",
                    hint="Check file permissions and paths",
                ) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise HandsfreeCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _load_config(ctx: click.Context) -> HandsfreeConfig:
    """Load configuration once per invocation."""
    if "config" not in ctx.obj:
        from handsfreectl.adapters.factory import ConfigFactory

        provider = ConfigFactory().create_config_provider()
        ctx.obj["config"] = provider.load(ctx.obj.get("config_path"))
    return ctx.obj["config"]


def _socket_path(ctx: click.Context) -> Path:
    """Resolve the daemon socket path for this invocation."""
    from handsfreectl.shared.config_io import resolve_socket_path

    return resolve_socket_path(ctx.obj.get("socket_option"), _load_config(ctx))


def _client_factory(ctx: click.Context) -> DaemonClientFactory:
    """Create the client factory, waiting for the daemon if asked to.

    Args:
        ctx: Click context carrying global options.

    Returns:
        DaemonClientFactory bound to the resolved socket.

    Raises:
        ConnectError: If --wait was given and the daemon never came up.
    """
    from handsfreectl.adapters.daemon.timeouts import DaemonTimeouts
    from handsfreectl.adapters.factory import DaemonClientFactory
    from handsfreectl.core.control.wait import wait_for_daemon

    factory = DaemonClientFactory(_socket_path(ctx), _load_config(ctx))
    logger.debug("Using socket path: %s", factory.socket_path)

    wait = ctx.obj.get("wait", 0.0)
    if wait > 0:
        wait_for_daemon(
            factory.probe,
            timeout=wait,
            poll_interval=DaemonTimeouts.WAIT_POLL_INTERVAL,
            quiet=ctx.obj.get("quiet", False),
        )
    return factory


def _resolve_output(ctx: click.Context, output: str | None) -> OutputMode | None:
    """Use --output if given, else the configured default."""
    if output is not None:
        return OutputMode(output)
    return _load_config(ctx).output.mode


def format_state(state: DaemonState) -> str:
    """Format a daemon state as a single output line."""
    if isinstance(state, Error) and state.message:
        return f"{state.name}: {state.message}"
    return state.name


@contextlib.contextmanager
def cancel_on_signals(token: CancelToken) -> Iterator[None]:
    """Fire token on SIGINT/SIGTERM, restoring the previous handlers after."""

    def handler(signum: int, frame: object) -> None:
        logger.debug("Received signal %d, cancelling", signum)
        token.cancel()

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield
    finally:
        for sig, old_handler in previous.items():
            signal.signal(sig, old_handler)


@click.group()
@click.version_option(version=__version__, prog_name="handsfreectl")
@click.option(
    "--socket",
    "socket_option",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Daemon socket path (default: $XDG_RUNTIME_DIR/handsfree.sock).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/handsfree/handsfreectl.toml).",
)
@click.option(
    "--wait",
    type=click.FloatRange(min=0),
    default=0.0,
    help="Seconds to wait for the daemon socket to come up (default: no retry).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    socket_option: Path | None,
    config_path: Path | None,
    wait: float,
    verbose: bool,
    quiet: bool,
) -> None:
    """handsfreectl - Control the handsfree dictation daemon.

    Start, stop or toggle transcription, query or watch the daemon state,
    and request shutdown.
    """
    ctx.ensure_object(dict)
    ctx.obj["socket_option"] = socket_option
    ctx.obj["config_path"] = config_path
    ctx.obj["wait"] = wait
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    setup_logging(verbose)


@cli.command()
@click.option(
    "--output",
    type=OUTPUT_CHOICE,
    default=None,
    help="Where to send the text (default: config, then daemon default).",
)
@click.pass_context
@handle_cli_errors("start")
def start(ctx: click.Context, output: str | None) -> None:
    """Start transcription."""
    session = _client_factory(ctx).create_session_client()
    session.execute(Start(output=_resolve_output(ctx, output)))
    click.echo("OK")


@cli.command()
@click.pass_context
@handle_cli_errors("stop")
def stop(ctx: click.Context) -> None:
    """Stop transcription."""
    _client_factory(ctx).create_session_client().execute(Stop())
    click.echo("OK")


@cli.command()
@click.option(
    "--output",
    type=OUTPUT_CHOICE,
    default=None,
    help="Where to send the text if this toggle starts transcription.",
)
@click.pass_context
@handle_cli_errors("toggle")
def toggle(ctx: click.Context, output: str | None) -> None:
    """Start transcription if idle, stop it if running.

    Reads the current state and then sends start or stop. Another client
    acting at the same moment can change the state in between.
    """
    usecase = _client_factory(ctx).create_toggle_usecase()
    result = usecase.execute(output=_resolve_output(ctx, output))
    if ctx.obj.get("verbose", False):
        click.echo(f"Daemon was {format_state(result.previous_state)}", err=True)
    click.echo(result.command.name)


@cli.command()
@click.option(
    "--inactive-if-down/--fail-if-down",
    default=None,
    help="Print 'inactive' instead of failing when the daemon is not running.",
)
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context, inactive_if_down: bool | None) -> None:
    """Print the current daemon state."""
    if inactive_if_down is None:
        inactive_if_down = _load_config(ctx).status.inactive_if_down

    try:
        state = _client_factory(ctx).create_session_client().execute(Status())
    except ConnectError as e:
        if inactive_if_down and e.kind in (
            ConnectErrorKind.NOT_FOUND,
            ConnectErrorKind.REFUSED,
        ):
            logger.debug("Daemon not running: %s", e.message)
            click.echo("inactive")
            return
        raise

    click.echo(format_state(state))


@cli.command()
@click.pass_context
@handle_cli_errors("watch")
def watch(ctx: click.Context) -> None:
    """Print each daemon state change as it happens.

    Runs until the daemon closes the connection or the process receives
    SIGINT/SIGTERM.
    """
    from handsfreectl.adapters.daemon.transport import CancelToken

    client = _client_factory(ctx).create_watch_client()

    with CancelToken() as token, cancel_on_signals(token):
        with contextlib.closing(client.watch(cancel=token)) as events:
            for event in events:
                if isinstance(event, DecodeError):
                    raise event
                if isinstance(event, DaemonError):
                    logger.warning("Daemon error: %s", event.message)
                    continue
                click.echo(format_state(event))

    logger.debug("Watch stream closed")


@cli.command()
@click.pass_context
@handle_cli_errors("shutdown")
def shutdown(ctx: click.Context) -> None:
    """Ask the daemon to shut down gracefully."""
    _client_factory(ctx).create_session_client().execute(Shutdown())
    click.echo("OK")


@cli.group()
def config() -> None:
    """Inspect or create the handsfreectl config file."""
    pass


@config.command("show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show config location and effective settings."""
    from handsfreectl.shared.config_io import get_global_config_path

    path = ctx.obj.get("config_path") or get_global_config_path()
    cfg = _load_config(ctx)

    status_text = "exists" if path.exists() else "not created"
    click.echo(f"Config file: {path} ({status_text})")
    click.echo(f"Socket path: {_socket_path(ctx)}")
    click.echo("")
    click.echo("[daemon]")
    click.echo(f"    socket_path = {cfg.daemon.socket_path!r}")
    click.echo(f"    connect_timeout = {cfg.daemon.connect_timeout}")
    click.echo(f"    read_timeout = {cfg.daemon.read_timeout}")
    click.echo("[output]")
    click.echo(f"    default = {cfg.output.default!r}")
    click.echo("[status]")
    click.echo(f"    inactive_if_down = {str(cfg.status.inactive_if_down).lower()}")


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a config file with default settings."""
    from handsfreectl.domain.config import HandsfreeConfig
    from handsfreectl.shared.config_io import get_global_config_path, save_config

    path = ctx.obj.get("config_path") or get_global_config_path()
    if path.exists() and not force:
        config_exists_error(path)

    save_config(HandsfreeConfig.default(), path)
    click.echo(f"Created config at {path}")


def main() -> None:
    """Entry point for the handsfreectl console script."""
    cli(obj={})


if __name__ == "__main__":
    main()
