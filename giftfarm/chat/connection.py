"""Twitch chat connection over WebSocket (IRC).

A background reader owns the socket: it answers keepalives, settles pending
joins and queues notices that name a recipient and the end of the stream for
:meth:`ChatConnection.next_event`. Other chat traffic is dropped on arrival.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass
from typing import Protocol

import aiohttp

from giftfarm.core.config import TWITCH_IRC_WS
from giftfarm.core.exceptions import (
    AuthenticationError,
    ChatConnectionError,
    JoinError,
    ProtocolError,
)
from giftfarm.core.store import Credentials

from .notices import NoticeEvent
from .protocol import IRCMessage, parse_irc_message, split_lines

LOGGER = logging.getLogger(__name__)

CAPABILITIES = ("twitch.tv/tags", "twitch.tv/commands")

# NOTICE msg-ids that answer a JOIN we cannot complete
JOIN_FAILURE_NOTICES = frozenset(
    {"msg_channel_suspended", "msg_banned", "tos_ban", "msg_channel_blocked"}
)


# ------------------------------------------------------------------
# Events
# ------------------------------------------------------------------


@dataclass(frozen=True)
class Disconnected:
    """The server closed the stream, or it broke; the connection is spent."""

    error: Exception | None = None


@dataclass(frozen=True)
class Quit:
    """The connection was closed locally."""


ChatEvent = NoticeEvent | Disconnected | Quit


class Connection(Protocol):
    identity: str

    async def join(self, channel: str) -> None: ...

    async def next_event(self) -> ChatEvent: ...

    async def close(self) -> None: ...


class ChatConnection:
    """One logged-in chat socket. Use :meth:`connect` to create it."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        ws: aiohttp.ClientWebSocketResponse,
        username: str,
    ) -> None:
        self.identity = username.lower()
        self._session = session
        self._ws = ws
        self._events: asyncio.Queue[ChatEvent] = asyncio.Queue()
        self._pending_joins: dict[str, asyncio.Future[None]] = {}
        self._welcome: asyncio.Future[str] = asyncio.get_running_loop().create_future()
        self._closed = False
        self._reader: asyncio.Task[None] = asyncio.create_task(self._read_loop())

    @classmethod
    async def connect(
        cls,
        credentials: Credentials,
        *,
        url: str = TWITCH_IRC_WS,
        timeout: float = 30.0,
        heartbeat: float = 60.0,
    ) -> ChatConnection:
        """Open a socket and log in.

        The socket is pinged every *heartbeat* seconds and closed when the
        pong is missing, so a half-open connection still ends the stream.

        Raises:
            AuthenticationError: The server refused the token.
            ChatConnectionError: The socket could not be opened, closed
                before the welcome, or the welcome did not arrive in time.
        """
        session = aiohttp.ClientSession()
        try:
            ws = await session.ws_connect(url, autoping=True, heartbeat=heartbeat)
        except (aiohttp.ClientError, OSError) as e:
            await session.close()
            raise ChatConnectionError(f"Could not connect to {url}: {e}") from e

        connection = cls(session, ws, credentials.username)
        try:
            await connection._login(credentials, timeout)
        except BaseException:
            await connection.close()
            raise
        return connection

    async def _login(self, credentials: Credentials, timeout: float) -> None:
        token = credentials.token.removeprefix("oauth:")
        await self._send(f"CAP REQ :{' '.join(CAPABILITIES)}")
        await self._send(f"PASS oauth:{token}")
        await self._send(f"NICK {credentials.username.lower()}")

        try:
            self.identity = await asyncio.wait_for(self._welcome, timeout)
        except asyncio.TimeoutError as e:
            raise ChatConnectionError("Timed out waiting for the chat server welcome") from e

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def join(self, channel: str) -> None:
        """Join *channel* and wait for the server to acknowledge it.

        When the caller abandons this wait (for example through a timeout),
        the pending entry is removed before the cancellation propagates, so
        an acknowledgement that arrives later is dropped and never settles
        this join.

        Raises:
            JoinError: The server refused the join or the connection closed.
        """
        if self._closed or self._reader.done():
            raise JoinError("connection is closed", channel)

        key = channel.lower()
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._pending_joins[key] = waiter
        try:
            await self._send(f"JOIN #{key}")
            await waiter
        finally:
            if self._pending_joins.get(key) is waiter:
                del self._pending_joins[key]

    async def next_event(self) -> ChatEvent:
        if self._closed and self._events.empty():
            return Quit()
        return await self._events.get()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        if not self._welcome.done():
            self._welcome.cancel()
        self._reader.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._reader
        await self._ws.close()
        await self._session.close()
        self._events.put_nowait(Quit())

    # ------------------------------------------------------------------
    # Reader
    # ------------------------------------------------------------------

    async def _send(self, line: str) -> None:
        try:
            await self._ws.send_str(line)
        except (aiohttp.ClientError, ConnectionError) as e:
            raise ChatConnectionError(f"Could not send to chat server: {e}") from e

    async def _read_loop(self) -> None:
        error: Exception | None = None
        try:
            async for frame in self._ws:
                if frame.type == aiohttp.WSMsgType.TEXT:
                    for line in split_lines(frame.data):
                        LOGGER.debug(f"< {line}")
                        await self._dispatch(parse_irc_message(line))
                elif frame.type == aiohttp.WSMsgType.ERROR:
                    error = ChatConnectionError(f"WebSocket error: {self._ws.exception()}")
                    break
        except ProtocolError as e:
            LOGGER.error(f"Dropping connection after unreadable line: {e}")
            error = e
        except ChatConnectionError as e:
            error = e
        finally:
            self._finish(error)

    def _finish(self, error: Exception | None) -> None:
        failure = error or ChatConnectionError("connection closed")
        if not self._welcome.done():
            self._welcome.set_exception(failure)

        for channel, waiter in self._pending_joins.items():
            if not waiter.done():
                waiter.set_exception(JoinError(f"connection closed: {failure}", channel))
        self._pending_joins.clear()

        if not self._closed:
            self._events.put_nowait(Disconnected(error))

    async def _dispatch(self, message: IRCMessage) -> None:
        command = message.command

        if command == "PING":
            await self._send(f"PONG :{message.trailing}")
        elif command == "001":
            if not self._welcome.done():
                self._welcome.set_result(message.params[0] if message.params else self.identity)
        elif command == "NOTICE":
            self._dispatch_notice(message)
        elif command == "JOIN" and message.nick == self.identity and message.channel:
            waiter = self._pending_joins.pop(message.channel.lower(), None)
            if waiter is not None and not waiter.done():
                waiter.set_result(None)
        elif command == "USERNOTICE":
            notice = NoticeEvent.from_message(message)
            # a notice without a recipient can never be a gift to us
            if notice.recipient is not None:
                self._events.put_nowait(notice)
        elif command == "RECONNECT":
            LOGGER.info("Chat server asked us to reconnect")
            await self._ws.close()
        # everything else (PRIVMSG, other users' JOIN/PART, ...) is not queued

    def _dispatch_notice(self, message: IRCMessage) -> None:
        # Login failures arrive as a NOTICE to "*" before the welcome
        if not self._welcome.done() and message.channel is None:
            self._welcome.set_exception(
                AuthenticationError(message.trailing or "Login authentication failed")
            )
            return

        channel = message.channel
        if channel and message.tag("msg-id") in JOIN_FAILURE_NOTICES:
            waiter = self._pending_joins.pop(channel.lower(), None)
            if waiter is not None and not waiter.done():
                waiter.set_exception(JoinError(message.trailing, channel))
                return

        LOGGER.debug(f"Notice: {message.trailing}")
