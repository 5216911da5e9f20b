"""
HTTP executor for the `http_post` command.

One POST per command, each on its own task. The response body is relayed
to the IPC peer as an http_response envelope; failures are logged and
nothing is relayed, so the peer must time out on its own.
"""

import asyncio
import logging
from typing import Optional

import httpx

from net_bridge.config import HTTP_USER_AGENT
from net_bridge.transport.envelope import build_http_response
from net_bridge.transport.udp import IpcTransport

logger = logging.getLogger(__name__)


class HttpExecutor:
    def __init__(self, ipc: IpcTransport, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._ipc = ipc
        self._tasks: set[asyncio.Task[Optional[str]]] = set()
        # Certificate validation is off: the bridge trusts whatever the local peer points it at.
        self._client = httpx.AsyncClient(
            headers={"User-Agent": HTTP_USER_AGENT},
            verify=False,
            timeout=None,
            transport=transport,
        )

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def submit(self, url: str, body: str, headers: Optional[dict[str, str]] = None) -> asyncio.Task[Optional[str]]:
        """Start a POST in the background and return immediately."""
        task = asyncio.get_running_loop().create_task(self.post(url, body, headers))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def post(self, url: str, body: str, headers: Optional[dict[str, str]] = None) -> Optional[str]:
        """POST `body` to `url` and relay the response text. Returns the text, or None on failure."""
        try:
            resp = await self._client.post(url, content=body.encode("utf-8"), headers=headers)
            text = resp.text
        except Exception as e:
            logger.error(f"HTTP error for {url}: {e}")
            return None
        logger.debug(f"HTTP {resp.status_code} from {url} ({len(text)} chars)")
        self._ipc.send(build_http_response(text))
        return text

    async def aclose(self) -> None:
        await self._client.aclose()
