"""Catalog API client.

Two paged endpoints are used, both taking ``offset`` and ``limit``:

- ``games/top``: top categories by current viewers.
- ``streams``: live streams, filtered by ``game``.

A 400 answer carries ``{error, status, message}`` and is reported with the
upstream message; any other non-success status is unexpected.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ValidationError

from giftfarm import __version__
from giftfarm.core.config import KRAKEN_BASE, KRAKEN_CLIENT_ID
from giftfarm.core.exceptions import HarvestError, UnexpectedStatusError, UpstreamRejectedError

logger = logging.getLogger(__name__)

APP_USER_AGENT = f"twitch-gift-farm/{__version__}"
PAGE_SIZE = 100


# ------------------------------------------------------------------
# Response payloads (only the fields we read)
# ------------------------------------------------------------------


class _Channel(BaseModel):
    name: str


class _Stream(BaseModel):
    channel: _Channel


class StreamsResponse(BaseModel):
    streams: list[_Stream]


class _GameData(BaseModel):
    name: str


class _Game(BaseModel):
    game: _GameData


class TopGamesResponse(BaseModel):
    top: list[_Game]


class ErrorResponse(BaseModel):
    error: str
    status: int
    message: str


class CatalogClient:
    """Client for the catalog endpoints.

    Owns one ``httpx.AsyncClient`` so that the many concurrent page requests
    share a connection pool. Use as an async context manager or call
    :meth:`close`.
    """

    def __init__(
        self,
        base_url: str = KRAKEN_BASE,
        client_id: str = KRAKEN_CLIENT_ID,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Accept": "application/vnd.twitchtv.v5+json",
                "Client-ID": client_id,
                "User-Agent": APP_USER_AGENT,
            },
            # Large fan-outs queue on the pool; only the request itself is bounded
            timeout=httpx.Timeout(timeout, pool=None),
            transport=transport,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _get(self, path: str, params: dict[str, str | int], what: str) -> httpx.Response:
        try:
            response = await self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise HarvestError(f"Could not get {what}: {type(e).__name__}: {e}") from e

        if response.status_code == httpx.codes.BAD_REQUEST:
            try:
                error = ErrorResponse.model_validate_json(response.content)
            except ValidationError as e:
                raise UnexpectedStatusError(
                    f"Could not get {what}: HTTP 400 with unreadable error body", 400
                ) from e
            raise UpstreamRejectedError(
                f"Could not get {what}: {error.message}", error.status, error.message
            )

        if not response.is_success:
            raise UnexpectedStatusError(
                f"Could not get {what}: HTTP {response.status_code}", response.status_code
            )

        return response

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_top_games(self, offset: int = 0, limit: int = PAGE_SIZE) -> list[str]:
        """Return category names of one page of the top-games ranking."""
        response = await self._get("games/top", {"offset": offset, "limit": limit}, "top games")
        try:
            payload = TopGamesResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise HarvestError(f"Could not parse top games: {e}") from e
        return [entry.game.name for entry in payload.top]

    async def get_streams_page(
        self, game: str, offset: int = 0, limit: int = PAGE_SIZE
    ) -> list[str]:
        """Return channel names of one page of live streams for *game*."""
        response = await self._get(
            "streams", {"offset": offset, "limit": limit, "game": game}, "streams"
        )
        try:
            payload = StreamsResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise HarvestError(f"Could not parse streams: {e}") from e
        return [stream.channel.name for stream in payload.streams]
