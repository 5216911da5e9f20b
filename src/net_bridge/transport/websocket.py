"""
WebSocket session manager.

Holds at most one outbound connection. Every control message (connect,
send text, send binary) goes through a single FIFO queue drained by one
task, so writes to the connection are never concurrent and keep their
submission order.

Inbound frames are relayed to the IPC peer by a reader task bound to the
connection it was spawned for. When a new connect succeeds the old writer
is dropped and the old reader is left running; it ends by itself when its
connection closes.
"""

import asyncio
import logging
import re
from typing import Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from net_bridge.config import WS_MAX_MESSAGE_SIZE
from net_bridge.errors import HandshakeError
from net_bridge.models.command import Connect, ControlMessage, SendBinary, SendText
from net_bridge.transport.udp import IpcTransport

logger = logging.getLogger(__name__)

# RFC 7230 token
_HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
_HEADER_VALUE_RE = re.compile(r"[^\x00-\x08\x0a-\x1f\x7f]*")


def filter_headers(headers: Optional[dict[str, str]]) -> list[tuple[str, str]]:
    """Return the header pairs that are legal on a handshake request; skip the rest."""
    valid: list[tuple[str, str]] = []
    for name, value in (headers or {}).items():
        if not _HEADER_NAME_RE.fullmatch(name) or not _HEADER_VALUE_RE.fullmatch(value):
            logger.warning(f"Skipping invalid handshake header {name!r}")
            continue
        valid.append((name, value))
    return valid


class SessionManager:
    def __init__(self, ipc: IpcTransport, max_size: Optional[int] = WS_MAX_MESSAGE_SIZE):
        self._ipc = ipc
        self._max_size = max_size
        self._queue: asyncio.Queue[ControlMessage] = asyncio.Queue()
        self._writer: Optional[ClientConnection] = None
        self._readers: set[asyncio.Task[None]] = set()

    @property
    def connected(self) -> bool:
        return self._writer is not None

    @property
    def readers(self) -> int:
        """Number of reader tasks still running, including abandoned ones."""
        return len(self._readers)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def submit(self, message: ControlMessage) -> None:
        """Enqueue a control message. Never blocks."""
        self._queue.put_nowait(message)

    async def run(self) -> None:
        """Drain the control queue forever."""
        while True:
            message = await self._queue.get()
            try:
                await self.handle(message)
            finally:
                self._queue.task_done()

    async def join(self) -> None:
        """Wait until every submitted message has been handled."""
        await self._queue.join()

    async def handle(self, message: ControlMessage) -> None:
        if isinstance(message, Connect):
            try:
                ws = await self._open(message.url, message.headers)
            except HandshakeError as e:
                logger.error(f"WS connect error: {e}")
                return
            self._install(ws)
        elif isinstance(message, (SendText, SendBinary)):
            await self._write(message.payload)

    async def _open(self, url: str, headers: Optional[dict[str, str]]) -> ClientConnection:
        logger.info(f"Connecting to WS: {url}")
        try:
            return await connect(
                url,
                additional_headers=filter_headers(headers),
                max_size=self._max_size,
            )
        except Exception as e:
            raise HandshakeError(f"{url}: {e}", url=url) from e

    def _install(self, ws: ClientConnection) -> None:
        logger.info("WS connected")
        # The previous connection stays open until its peer closes it; its reader keeps relaying.
        self._writer = ws
        task = asyncio.get_running_loop().create_task(self._read(ws))
        self._readers.add(task)
        task.add_done_callback(self._readers.discard)

    async def _write(self, payload: "str | bytes") -> None:
        if self._writer is None:
            logger.debug(f"No WS session, dropping {len(payload)}-byte payload")
            return
        try:
            await self._writer.send(payload)
        except Exception as e:
            logger.error(f"WS send error: {e}")

    async def _read(self, ws: ClientConnection) -> None:
        try:
            async for frame in ws:
                if isinstance(frame, str):
                    self._ipc.send(frame.encode("utf-8"))
                else:
                    self._ipc.send(frame)
        except ConnectionClosedOK:
            pass
        except ConnectionClosed as e:
            logger.error(f"WS reader closed abnormally: {e}")
        except Exception as e:
            logger.error(f"WS reader error: {e}")
        logger.info("WS reader finished")
