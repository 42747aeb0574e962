"""Assertions for handsfreectl CLI results.

State output is read by status bars and scripts, so stdout is checked line
by line. Errors are checked by category prefix and hint rather than by
their full text.
"""

from click.testing import Result


def _describe(result: Result, context: str) -> str:
    where = f" ({context})" if context else ""
    return f"{where}\n  Exit code: {result.exit_code}\n  Output: {result.output[:500]}"


def assert_command_success(result: Result, *, context: str = "") -> None:
    """Assert that the command exited with status 0.

    Example:
        result = runner.invoke(cli, ["--socket", path, "status"], obj={})
        assert_command_success(result, context="status")
    """
    assert result.exit_code == 0, f"Command failed{_describe(result, context)}"


def assert_command_failed(
    result: Result, *, expected_code: int = 1, context: str = ""
) -> None:
    """Assert that the command exited with the given non-zero status."""
    assert result.exit_code == expected_code, (
        f"Expected exit code {expected_code}{_describe(result, context)}"
    )


def assert_output_lines(result: Result, *expected: str) -> None:
    """Assert that each expected line appears as a whole line, in order.

    Other lines (stderr, log records) may appear in between.

    Example:
        assert_output_lines(result, "idle", "listening")
    """
    remaining = result.output.splitlines()
    for line in expected:
        assert line in remaining, f"Line {line!r} missing or out of order{_describe(result, '')}"
        remaining = remaining[remaining.index(line) + 1 :]


def assert_output_contains(result: Result, *substrings: str) -> None:
    """Assert that every substring appears somewhere in the output."""
    for substring in substrings:
        assert substring in result.output, f"{substring!r} not in output{_describe(result, '')}"


def assert_error_message(
    result: Result, category: str, *, hint: str | None = None
) -> None:
    """Assert that the output reports an error of the given category.

    Args:
        result: Result of a failed invocation.
        category: Start of the error message, e.g. "Daemon unreachable".
        hint: Text expected somewhere after "Hint:".

    Example:
        assert_command_failed(result)
        assert_error_message(result, "Daemon unreachable", hint="daemon running")
    """
    assert f"Error: {category}" in result.output, (
        f"No {category!r} error{_describe(result, '')}"
    )
    if hint is not None:
        _, marker, hint_text = result.output.partition("Hint:")
        assert marker and hint in hint_text, f"No hint {hint!r}{_describe(result, '')}"
