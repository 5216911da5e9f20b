"""
NetBridge: wires the UDP transport, classifier, dispatcher, session
manager and HTTP executor together and runs the receive loop.
"""

import asyncio
import logging
from typing import Optional

import httpx

from net_bridge.classifier import classify
from net_bridge.config import BRIDGE_ADDR, PEER_ADDR
from net_bridge.dispatch import CommandDispatcher
from net_bridge.errors import CommandDecodeError, TransportError
from net_bridge.models.command import BridgeCommand
from net_bridge.transport.http import HttpExecutor
from net_bridge.transport.udp import Address, IpcTransport
from net_bridge.transport.websocket import SessionManager

logger = logging.getLogger(__name__)


class NetBridge:
    def __init__(self, ipc: IpcTransport, http_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.ipc = ipc
        self.sessions = SessionManager(ipc)
        self.http = HttpExecutor(ipc, transport=http_transport)
        self.dispatcher = CommandDispatcher(self.sessions, self.http)
        self._session_task: Optional[asyncio.Task[None]] = None

    def handle_datagram(self, data: bytes) -> None:
        """Classify one datagram and route it. Never awaits."""
        try:
            message = classify(data)
        except CommandDecodeError as e:
            logger.debug(f"Dropping datagram: {e}")
            return
        if isinstance(message, BridgeCommand):
            self.dispatcher.dispatch(message)
        else:
            self.sessions.submit(message)

    def start(self) -> None:
        """Start the session manager task (idempotent)."""
        if self._session_task is None:
            self._session_task = asyncio.get_running_loop().create_task(self.sessions.run())

    async def serve(self) -> None:
        """Receive and route datagrams in arrival order until the socket closes."""
        self.start()
        while True:
            try:
                data, _src = await self.ipc.receive()
            except TransportError as e:
                logger.info(f"IPC receive loop stopped: {e}")
                return
            try:
                self.handle_datagram(data)
            except Exception as e:
                logger.error(f"Dropping {len(data)}-byte datagram: {e!r}")

    async def aclose(self) -> None:
        if self._session_task is not None:
            self._session_task.cancel()
            try:
                await self._session_task
            except asyncio.CancelledError:
                pass
            self._session_task = None
        await self.http.aclose()
        self.ipc.close()


async def run_bridge(local_addr: Address = BRIDGE_ADDR, peer_addr: Address = PEER_ADDR) -> None:
    """Bind and serve until cancelled. Bind failure raises TransportError."""
    logger.info("Starting network bridge...")
    ipc = await IpcTransport.bind(local_addr, peer_addr)
    logger.info(f"IPC UDP listening on {local_addr[0]}:{local_addr[1]}, peer {peer_addr[0]}:{peer_addr[1]}")
    bridge = NetBridge(ipc)
    try:
        await bridge.serve()
    finally:
        await bridge.aclose()
