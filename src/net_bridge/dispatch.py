"""
Command dispatcher.

dispatch() is synchronous so it cannot stall the receive loop: it either
enqueues onto the session manager or hands off to a new HTTP task, and
never awaits.
"""

import logging

from net_bridge.models.command import BridgeCommand, CommandName, Connect
from net_bridge.transport.http import HttpExecutor
from net_bridge.transport.websocket import SessionManager

logger = logging.getLogger(__name__)


class CommandDispatcher:
    def __init__(self, sessions: SessionManager, http: HttpExecutor):
        self._sessions = sessions
        self._http = http

    def dispatch(self, command: BridgeCommand) -> None:
        if command.cmd == CommandName.HTTP_POST:
            self._http_post(command)
        elif command.cmd == CommandName.WS_CONNECT:
            self._ws_connect(command)
        else:
            logger.debug(f"Ignoring unknown command {command.cmd!r}")

    def _http_post(self, command: BridgeCommand) -> None:
        if command.url is None or command.body is None:
            logger.debug("Dropping http_post without url/body")
            return
        self._http.submit(command.url, command.body, command.headers)

    def _ws_connect(self, command: BridgeCommand) -> None:
        if command.url is None:
            logger.debug("Dropping ws_connect without url")
            return
        self._sessions.submit(Connect(url=command.url, headers=command.headers))
