"""
net-bridge: UDP IPC bridge to WebSocket and HTTP.

A co-located process talks to the bridge over one local UDP socket; the
bridge turns its datagrams into WebSocket frames on a single managed
connection or one-shot HTTP POSTs, and relays replies back over UDP.
"""

__version__ = "0.1.0"

from net_bridge.bridge import NetBridge, run_bridge
from net_bridge.classifier import classify
from net_bridge.dispatch import CommandDispatcher
from net_bridge.errors import BridgeError, TransportError, CommandDecodeError, HandshakeError
from net_bridge.models.command import BridgeCommand, CommandName, Connect, SendText, SendBinary
from net_bridge.transport.http import HttpExecutor
from net_bridge.transport.udp import IpcTransport
from net_bridge.transport.websocket import SessionManager

__all__ = [
    "NetBridge",
    "run_bridge",
    "classify",
    "CommandDispatcher",
    "SessionManager",
    "HttpExecutor",
    "IpcTransport",
    "BridgeError",
    "TransportError",
    "CommandDecodeError",
    "HandshakeError",
    "BridgeCommand",
    "CommandName",
    "Connect",
    "SendText",
    "SendBinary",
]
