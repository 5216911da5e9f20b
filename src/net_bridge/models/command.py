"""
Command and control-message models.

BridgeCommand is what the IPC peer sends as a JSON object carrying `cmd`.
Connect / SendText / SendBinary are the control messages consumed by the
WebSocket session manager.
"""

from typing import Optional, Union
from pydantic import BaseModel


class CommandName:
    HTTP_POST = "http_post"
    WS_CONNECT = "ws_connect"


class BridgeCommand(BaseModel):
    cmd: str
    url: Optional[str] = None
    headers: Optional[dict[str, str]] = None
    body: Optional[str] = None


class Connect(BaseModel):
    url: str
    headers: Optional[dict[str, str]] = None


class SendText(BaseModel):
    payload: str


class SendBinary(BaseModel):
    payload: bytes


ControlMessage = Union[Connect, SendText, SendBinary]
