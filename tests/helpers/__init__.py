"""Test helper utilities for the handsfreectl test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
    assert_output_lines,
)
from tests.helpers.fake_daemon import FakeDaemon

__all__ = [
    "FakeDaemon",
    "assert_command_success",
    "assert_command_failed",
    "assert_output_lines",
    "assert_output_contains",
    "assert_error_message",
]
