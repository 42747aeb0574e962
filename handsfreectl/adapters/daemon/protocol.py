"""Line-delimited JSON protocol for daemon communication.

One self-contained UTF-8 JSON object per line, newline-terminated.

Request format:
    {"command": "start" | "stop" | "status" | "shutdown" | "watch",
     "output": "keyboard" | "clipboard"}       # output: start/toggle only

Response and watch event format:
    {"ok": true, "state": "idle" | "listening" | "processing" | "error" | "inactive",
     "message": str}                            # state, message: optional
    {"ok": false, "message": str}

Decoding is strict about what it needs and lenient about the rest: unknown
fields are ignored, but a missing required field or an unknown state is a
DecodeError. Nothing is coerced to a default.

All functions here are pure; the transport owns the socket.
"""

import json
from typing import Any

from handsfreectl.domain.entities import (
    COMMAND_TYPES,
    OUTPUT_COMMANDS,
    STATE_TYPES,
    Command,
    DaemonState,
    Err,
    Error,
    Ok,
    OutputMode,
    Response,
)
from handsfreectl.domain.exceptions import DecodeError, DecodeErrorKind


def _dump_line(data: dict[str, Any]) -> bytes:
    """Serialize a message to one newline-terminated UTF-8 line."""
    # json.dumps escapes control characters, so the output has no raw newlines
    return (json.dumps(data, separators=(",", ":")) + "\n").encode("utf-8")


def _load_object(line: bytes) -> dict[str, Any]:
    """Parse one line into a JSON object.

    Raises:
        DecodeError: MALFORMED if the line is not a UTF-8 JSON object.
    """
    try:
        data = json.loads(line.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DecodeError(DecodeErrorKind.MALFORMED, f"Invalid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise DecodeError(DecodeErrorKind.MALFORMED, f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(DecodeErrorKind.MALFORMED, "Message must be a JSON object")
    return data


# ============================================================================
# Commands
# ============================================================================


def encode_command(command: Command) -> bytes:
    """Serialize a command to a request line.

    Args:
        command: Command to encode

    Returns:
        UTF-8 JSON line ending in a newline
    """
    data: dict[str, Any] = {"command": command.name}
    if isinstance(command, OUTPUT_COMMANDS) and command.output is not None:
        data["output"] = command.output.value
    return _dump_line(data)


def decode_command(line: bytes) -> Command:
    """Deserialize a request line.

    Args:
        line: UTF-8 JSON line (with or without newline)

    Returns:
        Decoded command

    Raises:
        DecodeError: If the line is malformed, names an unknown command,
            or carries an unknown output mode.
    """
    data = _load_object(line)

    name = data.get("command")
    if not isinstance(name, str):
        raise DecodeError(DecodeErrorKind.MALFORMED, "Request missing 'command' field")
    command_type = COMMAND_TYPES.get(name)
    if command_type is None:
        raise DecodeError(DecodeErrorKind.MALFORMED, f"Unknown command: {name!r}")

    if command_type not in OUTPUT_COMMANDS:
        return command_type()

    output = data.get("output")
    if output is None:
        return command_type(output=None)
    try:
        return command_type(output=OutputMode(output))
    except ValueError as e:
        raise DecodeError(
            DecodeErrorKind.MALFORMED, f"Unknown output mode: {output!r}"
        ) from e


# ============================================================================
# Responses
# ============================================================================


def encode_response(response: Response) -> bytes:
    """Serialize a response or watch event to a line.

    Args:
        response: Ok or Err to encode

    Returns:
        UTF-8 JSON line ending in a newline
    """
    if isinstance(response, Err):
        return _dump_line({"ok": False, "message": response.message})

    data: dict[str, Any] = {"ok": True}
    if response.state is not None:
        data["state"] = response.state.name
        if isinstance(response.state, Error) and response.state.message:
            data["message"] = response.state.message
    return _dump_line(data)


def decode_state(data: dict[str, Any]) -> DaemonState | None:
    """Extract the state from a decoded success payload.

    Args:
        data: Parsed JSON object with "ok": true

    Returns:
        The state, or None if the payload carries no state

    Raises:
        DecodeError: UNKNOWN_STATE if the state is not a known variant,
            MALFORMED if an error state carries a non-string message.
    """
    if "state" not in data:
        return None

    value = data["state"]
    state_type = STATE_TYPES.get(value) if isinstance(value, str) else None
    if state_type is None:
        raise DecodeError(DecodeErrorKind.UNKNOWN_STATE, f"Unknown daemon state: {value!r}")

    if state_type is Error:
        message = data.get("message", "")
        if not isinstance(message, str):
            raise DecodeError(
                DecodeErrorKind.MALFORMED, "Error state 'message' must be a string"
            )
        return Error(message=message)
    return state_type()


def decode_response(line: bytes) -> Response:
    """Deserialize a response or watch event line.

    Args:
        line: UTF-8 JSON line (with or without newline)

    Returns:
        Ok or Err

    Raises:
        DecodeError: MALFORMED for invalid JSON or missing fields,
            UNKNOWN_STATE for a state outside the fixed set.
    """
    data = _load_object(line)

    ok = data.get("ok")
    if not isinstance(ok, bool):
        raise DecodeError(DecodeErrorKind.MALFORMED, "Response missing boolean 'ok' field")

    if not ok:
        message = data.get("message")
        if not isinstance(message, str):
            raise DecodeError(
                DecodeErrorKind.MALFORMED, "Error response missing 'message' field"
            )
        return Err(message=message)

    return Ok(state=decode_state(data))
