"""
UDP IPC transport: the bridge's only entry and exit point.

Datagrams are received from anyone on the bound local address, but every
outbound datagram goes to the one fixed peer address.
"""

import asyncio
import logging
from typing import Optional

from net_bridge.config import BRIDGE_ADDR, MAX_DATAGRAM_SIZE, PEER_ADDR
from net_bridge.errors import TransportError

logger = logging.getLogger(__name__)

Address = tuple[str, int]


class _IpcProtocol(asyncio.DatagramProtocol):
    def __init__(self, inbox: "asyncio.Queue[Optional[tuple[bytes, Address]]]"):
        self._inbox = inbox

    def datagram_received(self, data: bytes, addr: Address) -> None:
        self._inbox.put_nowait((data, addr))

    def error_received(self, exc: Exception) -> None:
        logger.error(f"UDP socket error: {exc}")

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if exc is not None:
            logger.error(f"UDP socket lost: {exc}")
        self._inbox.put_nowait(None)


class IpcTransport:
    def __init__(
        self,
        transport: asyncio.DatagramTransport,
        inbox: "asyncio.Queue[Optional[tuple[bytes, Address]]]",
        peer_addr: Address = PEER_ADDR,
    ):
        self._transport = transport
        self._inbox = inbox
        self._peer_addr = peer_addr
        self._closed = False

    @classmethod
    async def bind(cls, local_addr: Address = BRIDGE_ADDR, peer_addr: Address = PEER_ADDR) -> "IpcTransport":
        """Bind the IPC socket. Raises TransportError if the address is unusable."""
        loop = asyncio.get_running_loop()
        inbox: asyncio.Queue[Optional[tuple[bytes, Address]]] = asyncio.Queue()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _IpcProtocol(inbox), local_addr=local_addr,
            )
        except OSError as e:
            raise TransportError(f"Failed to bind UDP {local_addr[0]}:{local_addr[1]}: {e}")
        return cls(transport, inbox, peer_addr)

    @property
    def local_addr(self) -> Address:
        return self._transport.get_extra_info("sockname")[:2]

    @property
    def peer_addr(self) -> Address:
        return self._peer_addr

    async def receive(self) -> tuple[bytes, Address]:
        """Wait for the next datagram. Raises TransportError once the socket is closed."""
        if self._closed and self._inbox.empty():
            raise TransportError("UDP transport closed")
        item = await self._inbox.get()
        if item is None:
            self._closed = True
            raise TransportError("UDP transport closed")
        return item

    def send(self, data: bytes) -> None:
        """Best-effort send to the fixed peer. Failures are logged, never raised."""
        if self._transport.is_closing():
            logger.error(f"UDP send dropped ({len(data)} bytes): transport closed")
            return
        if len(data) > MAX_DATAGRAM_SIZE:
            logger.error(f"UDP send dropped ({len(data)} bytes): larger than {MAX_DATAGRAM_SIZE}")
            return
        try:
            self._transport.sendto(data, self._peer_addr)
        except (OSError, ValueError) as e:
            logger.error(f"UDP send error ({len(data)} bytes): {e}")

    def close(self) -> None:
        self._closed = True
        self._transport.close()
