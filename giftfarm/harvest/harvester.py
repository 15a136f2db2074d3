"""Concurrent discovery of live channel names."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import Protocol, TypeVar

from .client import PAGE_SIZE

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PAGES_PER_CATEGORY = 10


class Catalog(Protocol):
    async def get_top_games(self, offset: int = 0, limit: int = PAGE_SIZE) -> list[str]: ...

    async def get_streams_page(
        self, game: str, offset: int = 0, limit: int = PAGE_SIZE
    ) -> list[str]: ...


async def gather_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run every awaitable concurrently and return results in input order.

    Every awaitable is driven to completion before returning. If any failed,
    the first failure (in input order) is raised and no results are returned.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results  # type: ignore[return-value]


class PaginationHarvester:
    """Collects channel names from the top categories of the catalog.

    One ranking request yields up to ``PAGE_SIZE`` categories. Each category
    is then read as ``pages_per_category`` stream pages, all requested at
    once, and every category runs in parallel with the others.

    The harvest is all-or-nothing: one failed page fails the whole call.
    Names are returned in category order, then page order, duplicates kept.
    """

    def __init__(
        self,
        catalog: Catalog,
        *,
        pages_per_category: int = PAGES_PER_CATEGORY,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.catalog = catalog
        self.pages_per_category = pages_per_category
        self.page_size = page_size

    async def harvest(self) -> list[str]:
        games = await self.catalog.get_top_games(0, self.page_size)

        LOGGER.info(f"Found {len(games)} games")
        LOGGER.info(
            f"Getting up to {self.pages_per_category * self.page_size * len(games)} streams"
        )

        per_game = await gather_all(self.harvest_game(game) for game in games)
        return [name for names in per_game for name in names]

    async def harvest_game(self, game: str) -> list[str]:
        """Fetch every stream page of one category as a single unit."""
        pages = await gather_all(
            self.catalog.get_streams_page(game, page * self.page_size, self.page_size)
            for page in range(self.pages_per_category)
        )
        streams = [name for page in pages for name in page]

        LOGGER.info(f"Found {len(streams)} channels streaming {game}")
        return streams
