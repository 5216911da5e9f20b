"""
net-bridge error types.
"""

from typing import Any, Optional


class BridgeError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class TransportError(BridgeError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)


class CommandDecodeError(BridgeError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("decode_error", message, details)


class HandshakeError(BridgeError):
    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__("handshake_error", message, {"url": url} if url else None)
