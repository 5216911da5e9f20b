"""
Process-wide constants for the bridge.

Both addresses are fixed: the bridge always listens on BRIDGE_ADDR and
always addresses the IPC peer at PEER_ADDR, whatever the datagram source.
"""

BRIDGE_ADDR = ("127.0.0.1", 8001)
PEER_ADDR = ("127.0.0.1", 8000)

MAX_DATAGRAM_SIZE = 65536

WS_MAX_MESSAGE_SIZE = 64 * 1024 * 1024

HTTP_USER_AGENT = "net-bridge/0.1.0"
