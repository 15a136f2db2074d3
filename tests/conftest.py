"""Shared pytest fixtures and fakes for giftfarm tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from giftfarm.chat.connection import ChatEvent
from giftfarm.core.exceptions import JoinError
from giftfarm.core.store import Credentials


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="giftee", token="oauth:secret")


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"username": "giftee", "token": "oauth:secret", "channels": ["b", "a"]}),
        encoding="utf-8",
    )
    return path


class FakeWebSocket:
    """Stands in for ``aiohttp.ClientWebSocketResponse``.

    Frames are fed by the test; ``feed_close`` ends the stream like a server
    close would.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self._frames: asyncio.Queue[aiohttp.WSMessage | None] = asyncio.Queue()

    def feed(self, *lines: str) -> None:
        payload = "".join(f"{line}\r\n" for line in lines)
        self._frames.put_nowait(aiohttp.WSMessage(aiohttp.WSMsgType.TEXT, payload, None))

    def feed_close(self) -> None:
        self._frames.put_nowait(None)

    async def send_str(self, data: str) -> None:
        if self.closed:
            raise ConnectionResetError("socket is closed")
        self.sent.append(data)

    async def close(self) -> bool:
        if not self.closed:
            self.closed = True
            self._frames.put_nowait(None)
        return True

    def exception(self) -> BaseException | None:
        return None

    def __aiter__(self) -> FakeWebSocket:
        return self

    async def __anext__(self) -> aiohttp.WSMessage:
        frame = await self._frames.get()
        if frame is None:
            raise StopAsyncIteration
        return frame


@pytest.fixture
def fake_ws() -> FakeWebSocket:
    return FakeWebSocket()


@pytest.fixture
def http_session() -> MagicMock:
    session = MagicMock(spec=aiohttp.ClientSession)
    session.close = AsyncMock()
    return session


class FakeConnection:
    """A scripted chat connection for session tests.

    ``join_plan`` maps a channel to ``"hang"`` (never acknowledged),
    ``"error"`` (refused) or a float delay before the acknowledgement.
    Channels not listed are acknowledged immediately.
    """

    def __init__(
        self,
        identity: str = "giftee",
        join_plan: dict[str, str | float] | None = None,
        events: Iterable[ChatEvent] = (),
    ) -> None:
        self.identity = identity
        self.joins: list[str] = []
        self.acknowledged: list[str] = []
        self.closed = False
        self._join_plan = join_plan or {}
        self._events: asyncio.Queue[ChatEvent] = asyncio.Queue()
        for event in events:
            self.push(event)

    def push(self, event: ChatEvent) -> None:
        self._events.put_nowait(event)

    async def join(self, channel: str) -> None:
        self.joins.append(channel)
        plan = self._join_plan.get(channel)
        if plan == "hang":
            await asyncio.Event().wait()
        elif plan == "error":
            raise JoinError("You are permanently banned from talking in this channel.", channel)
        elif isinstance(plan, float):
            await asyncio.sleep(plan)
        self.acknowledged.append(channel)

    async def next_event(self) -> ChatEvent:
        return await self._events.get()

    async def close(self) -> None:
        self.closed = True


def make_connector(*outcomes: FakeConnection | Exception):
    """Connector that hands out *outcomes* in order, raising the exceptions."""
    remaining = list(outcomes)
    calls: list[Credentials] = []

    async def connect(credentials: Credentials) -> FakeConnection:
        calls.append(credentials)
        outcome = remaining.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    connect.calls = calls  # type: ignore[attr-defined]
    return connect
