"""JSON-lines framing for command requests and responses."""

from __future__ import annotations

import json
from typing import Any, BinaryIO

from contracts.rpc_protocol import KEY_ARGS, KEY_ERROR, KEY_OK, KEY_VERB, MAX_FRAME_BYTES
from runtime.messages import CommandRequest, CommandResponse, ProtocolError


def encode_request(request: CommandRequest) -> bytes:
    return _encode({KEY_VERB: request.verb, KEY_ARGS: dict(request.args)})


def encode_response(response: CommandResponse) -> bytes:
    if response.ok:
        return _encode({KEY_OK: True})
    return _encode({KEY_OK: False, KEY_ERROR: response.error})


def decode_request(line: bytes) -> CommandRequest:
    payload = _decode(line)
    verb = payload.get(KEY_VERB)
    if not isinstance(verb, str):
        raise ProtocolError("Request is missing a verb")
    args = payload.get(KEY_ARGS, {})
    if args is None:
        args = {}
    if not isinstance(args, dict):
        raise ProtocolError("Request args must be an object")
    return CommandRequest(verb, args)


def decode_response(line: bytes) -> CommandResponse:
    payload = _decode(line)
    ok = payload.get(KEY_OK)
    if ok is True:
        return CommandResponse()
    if ok is False:
        error = payload.get(KEY_ERROR)
        if not isinstance(error, str):
            raise ProtocolError("Failure response is missing an error kind")
        return CommandResponse(error=error)
    raise ProtocolError("Response is missing a boolean ok field")


def read_frame(stream: BinaryIO) -> bytes:
    """Read one newline-terminated frame; raises on EOF or oversize frames."""
    line = stream.readline(MAX_FRAME_BYTES + 1)
    if not line:
        raise ProtocolError("Connection closed before a frame was received")
    if len(line) > MAX_FRAME_BYTES:
        raise ProtocolError(f"Frame exceeds {MAX_FRAME_BYTES} bytes")
    return line


def _encode(payload: dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8") + b"\n"


def _decode(line: bytes) -> dict[str, Any]:
    try:
        payload = json.loads(line.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as error:
        raise ProtocolError(f"Invalid JSON frame: {error}") from error
    if not isinstance(payload, dict):
        raise ProtocolError("Frame must be a JSON object")
    return payload
