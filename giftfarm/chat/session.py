"""Chat session: connect, join, watch for gift notices, reconnect on EOF."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable, Iterable
from enum import Enum, auto

from giftfarm.core.config import AppConfig
from giftfarm.core.exceptions import ChatConnectionError, SessionError
from giftfarm.core.store import Credentials, FarmSettings

from .connection import ChatConnection, Connection, Disconnected, Quit
from .notices import NoticeEvent, describe, is_relevant

LOGGER: logging.Logger = logging.getLogger(__name__)

Connector = Callable[[Credentials], Awaitable[Connection]]


class SessionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    JOINING_CHANNELS = auto()
    RUNNING = auto()


class ChatSession:
    """Keeps one chat connection joined to a fixed list of channels.

    Every end-of-stream is followed immediately by a fresh connection and a
    full rejoin of the same channels, without limit or backoff. A failure to
    connect is not retried and propagates out of :meth:`run`.

    Joins happen one at a time, in list order. Each is bounded by
    ``join_timeout``; a channel that times out or is refused is logged and
    skipped.
    """

    def __init__(
        self,
        credentials: Credentials,
        channels: Iterable[str],
        *,
        connector: Connector = ChatConnection.connect,
        join_timeout: float = 30.0,
        join_interval: float = 0.0,
    ) -> None:
        self.credentials = credentials
        self.channels: tuple[str, ...] = tuple(channels)
        self.join_timeout = join_timeout
        self.join_interval = join_interval
        self.state = SessionState.DISCONNECTED
        self.reconnects = 0
        self._connector = connector
        self._connection: Connection | None = None

    @classmethod
    def from_settings(cls, settings: FarmSettings, config: AppConfig) -> ChatSession:
        connector = functools.partial(
            ChatConnection.connect,
            url=config.chat_url,
            timeout=config.connect_timeout,
            heartbeat=config.heartbeat,
        )
        return cls(
            settings.credentials,
            settings.channels,
            connector=connector,
            join_timeout=config.join_timeout,
            join_interval=config.join_interval,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> None:
        LOGGER.debug("Running bot")
        try:
            while True:
                connection = await self._connect()
                await self._join_channels(connection)

                LOGGER.debug("starting main loop")
                await self._receive(connection)

                LOGGER.info("Received an EOF, reconnecting")
                self.reconnects += 1
        finally:
            await self._disconnect()

    async def _connect(self) -> Connection:
        await self._disconnect()

        self.state = SessionState.CONNECTING
        connection = await self._connector(self.credentials)
        self._connection = connection

        LOGGER.info(f"Connected as {connection.identity}")
        return connection

    async def _disconnect(self) -> None:
        connection, self._connection = self._connection, None
        self.state = SessionState.DISCONNECTED
        if connection is not None:
            await connection.close()

    # ------------------------------------------------------------------
    # Joining
    # ------------------------------------------------------------------

    async def _join_channels(self, connection: Connection) -> None:
        self.state = SessionState.JOINING_CHANNELS
        LOGGER.info(f"Joining {len(self.channels)} channels")

        failed = 0
        for channel in self.channels:
            if not await self.join(connection, channel):
                failed += 1

            if self.join_interval:
                await asyncio.sleep(self.join_interval)

        if failed:
            LOGGER.info(f"Joined {len(self.channels) - failed} channels, {failed} failed")
        else:
            LOGGER.info("Joined all channels")

    async def join(self, connection: Connection, channel: str) -> bool:
        """Race the join acknowledgement against ``join_timeout``.

        Whichever finishes first decides the outcome. On timeout the join is
        cancelled, and the connection drops its pending entry, so a late
        acknowledgement is never counted as a success.
        """
        LOGGER.info(f"Joining: {channel}")
        try:
            await asyncio.wait_for(connection.join(channel), self.join_timeout)
        except asyncio.TimeoutError:
            LOGGER.error(f"Error while joining '{channel}': timed out")
            return False
        except ChatConnectionError as e:
            LOGGER.error(f"Error while joining '{channel}': {e}")
            return False
        return True

    # ------------------------------------------------------------------
    # Receiving
    # ------------------------------------------------------------------

    async def _receive(self, connection: Connection) -> None:
        """Handle events until the connection reports end-of-stream."""
        self.state = SessionState.RUNNING

        while True:
            try:
                event = await connection.next_event()
            except ChatConnectionError as e:
                LOGGER.warning(f"Chat connection failed: {e}")
                return

            if isinstance(event, NoticeEvent):
                self.handle_notice(event)
            elif isinstance(event, Disconnected):
                if event.error is not None:
                    LOGGER.warning(f"Chat connection lost: {event.error}")
                return
            elif isinstance(event, Quit):
                raise SessionError("chat connection quit, which never happens in normal runs")
            # ignore the rest

    def handle_notice(self, notice: NoticeEvent) -> bool:
        """Log *notice* if it is a gift for our user. Returns whether it was."""
        if not is_relevant(notice, self.credentials.username):
            return False

        LOGGER.info(describe(notice))
        return True
