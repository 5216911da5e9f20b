"""
Datagram classification.

A datagram is either a structured command or a payload to forward to the
WebSocket session. The only signal is the first byte:

- starts with `{`, parses as a JSON object, and has a `cmd` key -> command
- starts with `{` otherwise -> text frame (lossy UTF-8)
- anything else, including the empty datagram -> binary frame

Binary payloads that happen to begin with 0x7B are sent as text. This is
the wire contract the IPC peer relies on, so it is kept as-is.
"""

import json
from typing import Any, Union

from pydantic import ValidationError

from net_bridge.errors import CommandDecodeError
from net_bridge.models.command import BridgeCommand, SendBinary, SendText

OPEN_BRACE = 0x7B

Classified = Union[BridgeCommand, SendText, SendBinary]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _parse_object(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError, RecursionError):
        return None


def classify(data: bytes) -> Classified:
    """Label a raw datagram.

    Raises CommandDecodeError when the datagram carries `cmd` but does not
    decode into a BridgeCommand; such datagrams must be dropped, not forwarded.
    """
    if not data or data[0] != OPEN_BRACE:
        return SendBinary(payload=bytes(data))

    value = _parse_object(data)
    if isinstance(value, dict) and "cmd" in value:
        try:
            return BridgeCommand.model_validate(value, strict=True)
        except ValidationError as e:
            raise CommandDecodeError(
                f"Malformed command: {e.error_count()} validation error(s)",
                details={"errors": e.errors(include_url=False, include_input=False)},
            )

    return SendText(payload=data.decode("utf-8", errors="replace"))
