"""Periodic OSINT feed poller.

OsintFeedPoller re-fetches the classified headline list on a fixed interval
and flags items that are new since the previous poll. Flags are cleared after
a short highlight window.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Set

from config.defaults import FEED_HIGHLIGHT_SECONDS, FEED_POLL_INTERVAL
from situationroom.models.events import FeedItem

logger = logging.getLogger(__name__)

FeedFetcher = Callable[[], Awaitable[List[FeedItem]]]


def new_item_indices(previous: List[FeedItem], current: List[FeedItem]) -> Set[int]:
    """Indices of ``current`` whose URL differs from the item at the same index in ``previous``.

    The first poll has nothing to compare against and flags nothing.
    """
    if not previous:
        return set()
    flagged: Set[int] = set()
    for i, item in enumerate(current):
        if i >= len(previous) or previous[i].url != item.url:
            flagged.add(i)
    return flagged


class OsintFeedPoller:
    """Polls a feed fetcher on an interval and tracks highlighted items.

    Args:
        fetch: Coroutine function returning the current feed items.
        interval: Seconds between polls.
        highlight_seconds: How long new items stay highlighted.
    """

    def __init__(
        self,
        fetch: FeedFetcher,
        interval: float = FEED_POLL_INTERVAL,
        highlight_seconds: float = FEED_HIGHLIGHT_SECONDS,
    ) -> None:
        self._fetch = fetch
        self.interval = interval
        self.highlight_seconds = highlight_seconds
        self.items: List[FeedItem] = []
        self.highlighted: Set[int] = set()
        self.polls = 0
        self._task: Optional[asyncio.Task] = None
        self._clear_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> List[FeedItem]:
        """Fetch once, update items and highlight flags. Fetch failures keep the last items."""
        try:
            current = await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("OSINT feed poll failed: %s", exc)
            return self.items
        self.polls += 1
        flagged = new_item_indices(self.items, current)
        self.items = list(current)
        if flagged:
            self.highlighted = flagged
            self._schedule_clear()
        return self.items

    def _schedule_clear(self) -> None:
        if self._clear_task is not None and not self._clear_task.done():
            self._clear_task.cancel()
        self._clear_task = asyncio.get_running_loop().create_task(self._clear_after())

    async def _clear_after(self) -> None:
        await asyncio.sleep(self.highlight_seconds)
        self.highlighted = set()

    async def _run(self) -> None:
        while True:
            await self.poll_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        for task in (self._task, self._clear_task):
            if task is not None and not task.done():
                task.cancel()
        self._task = None
        self._clear_task = None
