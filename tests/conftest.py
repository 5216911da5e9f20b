"""Shared fixtures: a fake IPC peer on loopback UDP and local WebSocket servers."""

import asyncio
from typing import Any, Awaitable, Callable, Optional

import pytest
import pytest_asyncio
from websockets.asyncio.server import ServerConnection, serve

from net_bridge.transport.udp import IpcTransport


class _PeerProtocol(asyncio.DatagramProtocol):
    def __init__(self) -> None:
        self.received: asyncio.Queue[bytes] = asyncio.Queue()

    def datagram_received(self, data: bytes, addr: Any) -> None:
        self.received.put_nowait(data)


class Peer:
    """Stands in for the native process on the other end of the IPC socket."""

    def __init__(self, transport: asyncio.DatagramTransport, protocol: _PeerProtocol):
        self.transport = transport
        self.protocol = protocol

    @property
    def addr(self) -> tuple[str, int]:
        return self.transport.get_extra_info("sockname")[:2]

    def send_to(self, addr: tuple[str, int], data: bytes) -> None:
        self.transport.sendto(data, addr)

    async def recv(self, timeout: float = 2.0) -> bytes:
        return await asyncio.wait_for(self.protocol.received.get(), timeout=timeout)

    async def assert_silent(self, wait: float = 0.2) -> None:
        with pytest.raises(asyncio.TimeoutError):
            data = await asyncio.wait_for(self.protocol.received.get(), timeout=wait)
            pytest.fail(f"unexpected datagram {data!r}")


@pytest_asyncio.fixture
async def peer():
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(_PeerProtocol, local_addr=("127.0.0.1", 0))
    yield Peer(transport, protocol)
    transport.close()


@pytest_asyncio.fixture
async def ipc(peer):
    transport = await IpcTransport.bind(("127.0.0.1", 0), peer.addr)
    yield transport
    transport.close()


class WsServer:
    def __init__(self, url: str):
        self.url = url
        self.connections: list[ServerConnection] = []
        self.messages: list[Any] = []


Handler = Callable[[WsServer, ServerConnection], Awaitable[None]]


async def _echo(server: WsServer, ws: ServerConnection) -> None:
    async for message in ws:
        server.messages.append(message)
        await ws.send(message)


@pytest_asyncio.fixture
async def ws_server_factory():
    """Start local WebSocket servers on ephemeral ports; echo by default."""
    stack = []

    async def start(handler: Optional[Handler] = None) -> WsServer:
        handler = handler or _echo
        state = WsServer("")

        async def on_connect(ws: ServerConnection) -> None:
            state.connections.append(ws)
            await handler(state, ws)

        server = await serve(on_connect, "127.0.0.1", 0)
        port = next(iter(server.sockets)).getsockname()[1]
        state.url = f"ws://127.0.0.1:{port}/"
        stack.append(server)
        return state

    yield start
    for server in stack:
        server.close()
        await server.wait_closed()


@pytest_asyncio.fixture
async def echo_server(ws_server_factory):
    return await ws_server_factory()
