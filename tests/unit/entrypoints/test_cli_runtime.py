"""Tests for CLI process setup: logging level and signal-driven cancellation."""

import logging
import signal

import pytest

from handsfreectl.adapters.daemon.transport import CancelToken
from handsfreectl.entrypoints.cli import LOG_ENV_VAR, cancel_on_signals, setup_logging


@pytest.fixture
def package_logger():
    """The handsfreectl logger, with its level restored after the test."""
    logger = logging.getLogger("handsfreectl")
    original_level = logger.level
    yield logger
    logger.setLevel(original_level)


class TestSetupLogging:
    def test_warning_by_default(self, package_logger) -> None:
        setup_logging(verbose=False)
        assert package_logger.level == logging.WARNING

    def test_verbose_enables_debug(self, package_logger) -> None:
        setup_logging(verbose=True)
        assert package_logger.level == logging.DEBUG

    def test_level_from_environment(
        self, package_logger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(LOG_ENV_VAR, "info")
        setup_logging(verbose=False)
        assert package_logger.level == logging.INFO

    def test_verbose_beats_environment(
        self, package_logger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(LOG_ENV_VAR, "ERROR")
        setup_logging(verbose=True)
        assert package_logger.level == logging.DEBUG

    def test_unknown_level_ignored(
        self, package_logger, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv(LOG_ENV_VAR, "chatty")
        setup_logging(verbose=False)
        assert package_logger.level == logging.WARNING


class TestCancelOnSignals:
    """Signals fire the token while installed and are restored afterwards."""

    @pytest.mark.parametrize("signum", [signal.SIGTERM, signal.SIGINT])
    def test_signal_fires_token(self, signum: int) -> None:
        with CancelToken() as token:
            with cancel_on_signals(token):
                signal.raise_signal(signum)
                assert token.cancelled

    def test_previous_handlers_restored(self) -> None:
        previous_term = signal.getsignal(signal.SIGTERM)
        previous_int = signal.getsignal(signal.SIGINT)

        with CancelToken() as token:
            with cancel_on_signals(token):
                assert signal.getsignal(signal.SIGTERM) is not previous_term

        assert signal.getsignal(signal.SIGTERM) is previous_term
        assert signal.getsignal(signal.SIGINT) is previous_int

    def test_handlers_restored_after_error(self) -> None:
        previous_term = signal.getsignal(signal.SIGTERM)

        with CancelToken() as token:
            with pytest.raises(RuntimeError):
                with cancel_on_signals(token):
                    raise RuntimeError("watch failed")

        assert signal.getsignal(signal.SIGTERM) is previous_term
